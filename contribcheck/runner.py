"""One validation pass over every record file."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import TextIO

from instrukt_ai_logging import get_logger

from contribcheck import schema
from contribcheck.cancellation import CancellationToken, PassCancelled
from contribcheck.config import Settings
from contribcheck.loader import list_record_files
from contribcheck.project_registry import RegistryError, load_project_registry
from contribcheck.report import clear_screen, print_results
from contribcheck.validation import validate_record_file

logger = get_logger(__name__)


def discover_record_files(directory: Path) -> list[Path]:
    """List record files, reporting a listing failure as an empty set."""
    try:
        return list_record_files(directory)
    except OSError as e:
        logger.error("Error reading team directory %s: %s", directory, e)
        print(f"Error reading team directory: {e.strerror or e}: {directory}", file=sys.stderr)
        return []


async def run_validation(
    settings: Settings,
    token: CancellationToken | None = None,
    *,
    watch_mode: bool = False,
    stream: TextIO | None = None,
) -> bool | None:
    """Run one pass and print its report.

    Returns:
        True when any file failed, False when all passed, None when the pass
        was cancelled before it could report.
    """
    token = token or CancellationToken()
    out = stream or sys.stdout
    try:
        if watch_mode:
            clear_screen(out)
        print("Running validation...", file=out)

        # Keep the banner on screen long enough to notice a rerun.
        await asyncio.sleep(settings.pacing_delay)
        token.raise_if_cancelled()

        try:
            registry = load_project_registry(settings.projects_file)
        except RegistryError as e:
            logger.error("Project registry unavailable: %s", e)
            print(f"Error loading project registry: {e}", file=out)
            if watch_mode:
                print("Waiting for more changes...", file=out)
            return True
        model = schema.build_contributor_model(registry)

        files = discover_record_files(settings.contributors_dir)
        logger.debug("Validating %d record file(s) in %s", len(files), settings.contributors_dir)
        results = await asyncio.gather(*(validate_record_file(path, model, token) for path in files))
        token.raise_if_cancelled()

        print_results(
            results,
            projects_file=settings.projects_file,
            required=schema.required_fields(model),
            watch_mode=watch_mode,
            stream=out,
        )
        if watch_mode:
            print("Waiting for more changes...", file=out)

        has_errors = any(not result.is_valid for result in results)
        logger.info(
            "Validation pass finished: %d/%d valid",
            sum(1 for result in results if result.is_valid),
            len(results),
        )
        return has_errors
    except PassCancelled:
        logger.debug("Validation pass cancelled")
        return None

