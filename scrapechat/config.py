from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Completion collaborator (OpenAI-compatible)
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    chat_model: str = "gpt-3.5-turbo-16k"  # larger window for full-content replies
    analysis_model: str = "gpt-3.5-turbo"
    completion_temperature: float = 0.7

    # Scraping collaborator (Firecrawl)
    firecrawl_api_key: str = ""
    firecrawl_base_url: str = "https://api.firecrawl.dev"
    scrape_only_main_content: bool = True
    scrape_timeout_seconds: float = 60.0

    # Context window cost control
    scraped_context_max_tokens: int = 12000  # stored ScrapedContext
    context_injection_max_tokens: int = 4000  # per-call injected context
    history_window_messages: int = 5
    full_content_phrase: str = "whole content"

    # App
    cors_origins: str = "http://localhost:3000"
    app_log_level: str = "INFO"
    noisy_log_level: str = "WARNING"
    log_dir: str = "logs"  # empty disables file logging

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
