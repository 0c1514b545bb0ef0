from __future__ import annotations

from scrapechat.config import Settings


def test_defaults_start_without_credentials(monkeypatch):
    for name in ("OPENAI_API_KEY", "FIRECRAWL_API_KEY", "CHAT_MODEL", "ANALYSIS_MODEL"):
        monkeypatch.delenv(name, raising=False)

    config = Settings(_env_file=None)

    assert config.openai_api_key == ""
    assert config.firecrawl_api_key == ""
    assert config.chat_model == "gpt-3.5-turbo-16k"
    assert config.analysis_model == "gpt-3.5-turbo"
    assert config.completion_temperature == 0.7
    assert config.scraped_context_max_tokens == 12000
    assert config.context_injection_max_tokens == 4000
    assert config.history_window_messages == 5
    assert config.full_content_phrase == "whole content"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("HISTORY_WINDOW_MESSAGES", "9")
    monkeypatch.setenv("FIRECRAWL_BASE_URL", "http://localhost:3002")

    config = Settings(_env_file=None)

    assert config.history_window_messages == 9
    assert config.firecrawl_base_url == "http://localhost:3002"


def test_cors_origin_list_splits_and_strips():
    config = Settings(_env_file=None, cors_origins="http://a.test, http://b.test ,")
    assert config.cors_origin_list == ["http://a.test", "http://b.test"]
