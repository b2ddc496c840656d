import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from datetime import datetime, timezone

import httpx

from journal_rag.config.settings import settings
from journal_rag.container import configure_container, container
from journal_rag.core.models.search import SearchType
from journal_rag.core.protocols.entry_store import EntryStoreError
from journal_rag.core.services.rag_service import RagService
from journal_rag.core.services.search_service import SearchService

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


def check_ollama() -> bool:
    """Check that Ollama is reachable and has the chat model.

    Returns:
        True if model ready, False otherwise.
    """
    model = settings.ollama_chat_model
    base_url = settings.ollama_base_url.replace("/v1", "")

    logger.info(f"Checking Ollama model: {model}")
    try:
        resp = httpx.get(f"{base_url}/api/tags", timeout=5)
    except httpx.HTTPError as e:
        logger.error(f"Ollama not available at {base_url}: {e}")
        return False

    if resp.status_code != 200:
        logger.error(f"Ollama returned status {resp.status_code}")
        return False

    models = [m["name"] for m in resp.json().get("models", [])]
    if any(model in m for m in models):
        logger.info(f"Model {model} is ready")
        return True

    logger.warning(f"Model {model} not pulled; answers will use the template fallback")
    return False


def _print_json(payload) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


def date_range_from_args(
    since: datetime | None, until: datetime | None
) -> tuple[datetime, datetime] | None:
    """Inclusive date bounds from optional --since/--until values."""
    if since is None and until is None:
        return None
    return (
        since or datetime.min.replace(tzinfo=timezone.utc),
        until or datetime.max.replace(tzinfo=timezone.utc),
    )


async def cmd_ask(args: argparse.Namespace) -> None:
    rag = container.resolve(RagService)
    response = await rag.answer_question(
        args.question,
        max_context_entries=args.max_context,
        date_range=date_range_from_args(args.since, args.until),
        tags=args.tag or None,
        provider=args.provider,
        model=args.model,
    )
    _print_json(asdict(response))


async def cmd_search(args: argparse.Namespace) -> None:
    search = container.resolve(SearchService)
    results = await search.search(
        args.query, limit=args.limit, search_type=SearchType(args.type)
    )
    _print_json([asdict(r) for r in results])


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="journal-rag")
    sub = parser.add_subparsers(dest="command", required=True)

    ask = sub.add_parser("ask", help="Answer a question from journal entries")
    ask.add_argument("question")
    ask.add_argument("--provider", default="ollama", choices=["ollama", "openai"])
    ask.add_argument("--model", default="default")
    ask.add_argument("--max-context", type=int, default=settings.rag_max_context_entries)
    ask.add_argument("--tag", action="append")
    ask.add_argument("--since", type=datetime.fromisoformat, help="Earliest entry date (ISO 8601)")
    ask.add_argument("--until", type=datetime.fromisoformat, help="Latest entry date (ISO 8601)")

    search = sub.add_parser("search", help="Search journal entries")
    search.add_argument("query")
    search.add_argument("--type", default="hybrid", choices=[t.value for t in SearchType])
    search.add_argument("--limit", type=int, default=10)

    sub.add_parser("check", help="Check the local model server")
    return parser


def main():
    """CLI entry point."""
    args = build_parser().parse_args()

    if args.command == "check":
        sys.exit(0 if check_ollama() else 1)

    configure_container(settings)
    handler = cmd_ask if args.command == "ask" else cmd_search
    try:
        asyncio.run(handler(args))
    except EntryStoreError as e:
        logger.error(f"Entry store error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
