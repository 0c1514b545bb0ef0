"""ScrapeChat - chat-driven web scraping

Simple CLI for chatting about scraped pages from the terminal.
"""

import argparse
import asyncio
import json
import sys

from scrapechat.models.schemas import ChatMessage
from scrapechat.pipeline.orchestrator import ChatOrchestrator
from scrapechat.tools import firecrawl_scraper
from scrapechat.tools.firecrawl_scraper import ScrapeError


async def run_scrape(url: str) -> int:
    """Scrape one URL and print its text."""
    try:
        data = await firecrawl_scraper.scrape(url)
    except ScrapeError as exc:
        print(f"[!] Failed to scrape content: {exc}", file=sys.stderr)
        return 1

    text = firecrawl_scraper.extract_text(data, prefer=("markdown", "content"))
    print(text or json.dumps(data, indent=2, ensure_ascii=False))
    return 0


async def run_chat() -> int:
    """Interactive chat loop; history and scraped context live only in memory."""
    orchestrator = ChatOrchestrator()
    history: list[ChatMessage] = []
    scraped_context: str | None = None

    print("ScrapeChat - paste a URL or ask about the last scraped page.")
    print("Commands: /reset clears the conversation, /quit exits.")

    while True:
        try:
            line = input("\nyou> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return 0

        if not line:
            continue
        if line == "/quit":
            return 0
        if line == "/reset":
            history.clear()
            scraped_context = None
            print("[*] Conversation cleared")
            continue

        history.append(ChatMessage(role="user", content=line))
        try:
            result = await orchestrator.handle_turn(history, scraped_context=scraped_context)
        except Exception as exc:
            history.pop()
            print(f"[!] Failed to process chat: {exc}")
            continue

        history.append(result.reply)
        scraped_context = result.scraped_context
        if result.scrape_payload is not None:
            print(f"[+] Scraped {len(scraped_context or '')} characters of context")
        print(f"\nassistant> {result.reply.content}")


def main():
    parser = argparse.ArgumentParser(description="ScrapeChat web scraping assistant")
    parser.add_argument("--scrape", "-s", metavar="URL", help="Scrape a single URL and print its content")

    args = parser.parse_args()

    if args.scrape:
        sys.exit(asyncio.run(run_scrape(args.scrape)))
    sys.exit(asyncio.run(run_chat()))


if __name__ == "__main__":
    main()
