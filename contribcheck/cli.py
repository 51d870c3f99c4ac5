"""contribcheck: validate contributor records, once or in watch mode."""

from __future__ import annotations

import argparse
import asyncio
import signal
import sys
from typing import Sequence

from instrukt_ai_logging import get_logger

from contribcheck.config import Settings, load_settings
from contribcheck.logging_config import setup_logging
from contribcheck.runner import run_validation
from contribcheck.watch import WatchController

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contribcheck",
        description="Validate contributor record files against the project registry.",
    )
    parser.add_argument(
        "-w",
        "--watch",
        action="store_true",
        help="Rerun validation whenever records, the project registry or the schema change",
    )
    return parser


async def _run_once(settings: Settings) -> int:
    has_errors = await run_validation(settings)
    return 1 if has_errors else 0


async def _run_watch(settings: Settings) -> int:
    controller = WatchController(settings)
    loop = asyncio.get_running_loop()

    def signal_handler(signum: int, _frame: object) -> None:
        """Handle termination signals."""
        logger.info("Received %s signal...", signal.Signals(signum).name)
        loop.call_soon_threadsafe(controller.shutdown)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)
    return await controller.run()


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings()
    setup_logging(settings.log_level)

    if args.watch:
        return asyncio.run(_run_watch(settings))
    return asyncio.run(_run_once(settings))


def run() -> None:
    """Console script entry point."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    run()
