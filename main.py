"""CLI entrypoint: run one article pipeline pass and exit."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from orchestrator import build_workflow
from utils import setup_logger


async def _run(args: argparse.Namespace) -> int:
    async with build_workflow(sources_file=args.sources, show_progress=not args.no_progress) as workflow:
        report = await workflow.process()
    # 没有抓取到任何内容: 退出码 2
    return 2 if report.halted else 0


def main() -> None:
    parser = argparse.ArgumentParser(description="AI digest publisher")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="scrape, rank, summarize and publish one issue")
    run.add_argument("--sources", default=None, help="sources JSON file (defaults to ARTICLE_SOURCES_FILE)")
    run.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    run.add_argument("--log-file", default=None, help="also write logs to logs/<name>")
    run.add_argument("--no-progress", action="store_true", help="disable progress bars")

    args = parser.parse_args()
    setup_logger(level=getattr(logging, args.log_level), log_file=args.log_file)

    if args.command == "run":
        sys.exit(asyncio.run(_run(args)))


if __name__ == "__main__":
    main()
