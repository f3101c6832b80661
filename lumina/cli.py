"""
Command-line entry point for the query router.

Usage:
    lumina "5+5"                      # ranked results, best first
    lumina --ask "explain symlinks"   # stream an AI answer to stdout
"""
import argparse
import asyncio
import logging
import sys
from typing import List, Optional, Sequence, TextIO

from lumina.ai import QueueSink, SessionManager
from lumina.config import setup_logging
from lumina.exceptions import ConfigurationError
from lumina.models import AI_RESPONSE_CHUNK, AI_RESPONSE_ERROR, QueryResult
from lumina.search import QueryResolver
from lumina.utils import cleanup_executor

logger = logging.getLogger(__name__)


def format_result(result: QueryResult) -> str:
    icon = f"{result.icon} " if result.icon else ""
    line = f"{result.score:.2f}  {icon}{result.title}"
    if result.description:
        line += f"  ({result.description})"
    return line


async def run_search(query: str, out: TextIO = sys.stdout) -> List[QueryResult]:
    results = await QueryResolver().resolve(query)
    for result in results:
        print(format_result(result), file=out)
    return results


async def run_ask(query: str, out: TextIO = sys.stdout) -> int:
    """Stream one answer. Returns a process exit code."""
    sink = QueueSink()
    manager = SessionManager(sink)
    try:
        manager.start(query)
    except ConfigurationError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    status = 0
    async for event in sink.events():
        if event.event == AI_RESPONSE_CHUNK:
            print(event.payload, end="", file=out, flush=True)
        elif event.event == AI_RESPONSE_ERROR:
            print(f"\nerror: {event.payload}", file=sys.stderr)
            status = 1
    print(file=out)

    await manager.wait_idle()
    return status


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lumina",
        description="Resolve a launcher query into files, calculator and AI results.",
    )
    parser.add_argument("query", nargs="+", help="query text")
    parser.add_argument(
        "--ask",
        action="store_true",
        help="skip resolution and stream an AI answer",
    )
    parser.add_argument("--log-level", default=None, help="override LUMINA_LOG_LEVEL")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    query = " ".join(args.query)

    try:
        if args.ask:
            return asyncio.run(run_ask(query))
        asyncio.run(run_search(query))
        return 0
    except KeyboardInterrupt:
        logger.info("Stopped by user")
        return 130
    finally:
        cleanup_executor()
