from __future__ import annotations

import argparse
import asyncio
import os
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog
import uvicorn

from trendscope.application.pagination import PaginationController
from trendscope.application.use_cases import VideoSearchUseCase
from trendscope.domain.entities import TrendscopeError, VideoResult
from trendscope.infrastructure.cache import DiskcacheAdapter
from trendscope.infrastructure.config import AppConfig, load_config
from trendscope.infrastructure.logging.setup import configure_logging
from trendscope.interfaces.app import create_app
from trendscope.interfaces.client import TrendscopeApiClient
from trendscope.interfaces.composition import (
    build_aggregator,
    build_http_client,
    build_search_provider,
)

log = structlog.get_logger(__name__)

_COMMANDS = ("serve", "videos")


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    # Config wiring flags (no business logic)
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML config file.",
    )
    parser.add_argument(
        "--dotenv",
        default=None,
        help="Path to .env file.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override log level.",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Override log format.",
    )


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="trendscope")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API (default).")
    serve.add_argument(
        "--host",
        default=None,
        help="Bind host (overrides HOST env).",
    )
    serve.add_argument(
        "--port",
        default=None,
        type=int,
        help="Bind port (overrides PORT env).",
    )
    _add_config_arguments(serve)

    videos = sub.add_parser("videos", help="Print a ranked video list for TERM.")
    videos.add_argument("term", help="Search term.")
    videos.add_argument(
        "--pages",
        default=1,
        type=int,
        help="Number of pages to load (scroll triggers after the first).",
    )
    videos.add_argument(
        "--api-url",
        default=None,
        help="Query a running server instead of searching in-process.",
    )
    _add_config_arguments(videos)

    argv = list(argv or [])
    # Bare `trendscope [--flags]` keeps meaning "serve".
    if not argv or argv[0] not in (*_COMMANDS, "-h", "--help"):
        argv = ["serve", *argv]
    return parser.parse_args(argv)


def _load(args: argparse.Namespace, **defaults: Any) -> AppConfig:
    cli_overrides: dict[str, Any] = dict(defaults)
    if args.log_level:
        cli_overrides["log_level"] = args.log_level
    if args.log_format:
        cli_overrides["log_format"] = args.log_format

    return load_config(
        config_path=Path(args.config) if args.config else None,
        dotenv_path=Path(args.dotenv) if args.dotenv else None,
        cli_overrides=cli_overrides,
    )


def format_count(n: int) -> str:
    """Compact count display: ``>= 10000`` as ``"1.2w"``, else ``"9,999"``."""
    if n >= 10000:
        return f"{n / 10000:.1f}w"
    return f"{n:,}"


def render_table(results: list[VideoResult]) -> str:
    lines = [f"{'#':>3}  {'平台':<6}{'播放':>9}{'点赞':>9}{'热度':>10}  标题"]
    for rank, video in enumerate(results, start=1):
        lines.append(
            f"{rank:>3}  {video.platform.value:<6}"
            f"{format_count(video.views):>9}"
            f"{format_count(video.likes):>9}"
            f"{format_count(video.score):>10}  {video.title}"
        )
    return "\n".join(lines)


async def _collect_pages(controller: PaginationController, term: str, pages: int) -> None:
    await controller.search(term)
    for _ in range(max(pages, 1) - 1):
        if not await controller.load_more():
            break


async def _run_videos(
    config: AppConfig, term: str, pages: int, api_url: str | None
) -> list[VideoResult]:
    async with build_http_client(config) as http_client:
        if api_url:
            client = TrendscopeApiClient(base_url=api_url, http_client=http_client)
            controller = PaginationController(client.fetch_page)
            try:
                await _collect_pages(controller, term, pages)
            finally:
                controller.close()
            return controller.state.results

        cache = DiskcacheAdapter(
            directory=config.cache.directory,
            ttl_seconds=config.cache.ttl_seconds,
            max_concurrent=config.cache.max_concurrent,
        )
        async with cache:
            use_case = VideoSearchUseCase(
                provider=build_search_provider(config, http_client, cache),
                aggregator=build_aggregator(config),
            )
            controller = PaginationController(use_case.fetch_page)
            try:
                await _collect_pages(controller, term, pages)
            finally:
                controller.close()
            return controller.state.results


def _serve(args: argparse.Namespace) -> int:
    host = args.host or os.getenv("HOST", "0.0.0.0")
    port = int(args.port or os.getenv("PORT", "8000"))

    config = _load(args)
    log_config = configure_logging(config)

    uvicorn.run(
        create_app(config),
        host=host,
        port=port,
        log_config=log_config,
    )
    return 0


def _videos(args: argparse.Namespace) -> int:
    # Keep stdout for the table unless a level is requested explicitly.
    config = _load(args, log_level="WARNING")
    configure_logging(config)

    try:
        results = asyncio.run(_run_videos(config, args.term, args.pages, args.api_url))
    except TrendscopeError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(render_table(results))
    return 0


def start(argv: Iterable[str] | None = None) -> int:
    """
    Process entrypoint.

    Config is loaded exactly once per command, then handed to the app or
    the in-process search pipeline.
    """
    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)
    if args.command == "videos":
        return _videos(args)
    return _serve(args)


if __name__ == "__main__":
    raise SystemExit(start())
