"""Console report for a validation pass."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Sequence, TextIO

from contribcheck.classifier import display_path
from contribcheck.constants import CLEAR_SCREEN, RULE
from contribcheck.validation import ValidationResult


def clear_screen(stream: TextIO) -> None:
    if stream.isatty():
        stream.write(CLEAR_SCREEN)
        stream.flush()


def print_results(
    results: Sequence[ValidationResult],
    *,
    projects_file: Path,
    required: Sequence[str],
    watch_mode: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Print the pass summary: errors per file, valid count, tips on failure."""
    out = stream or sys.stdout
    if watch_mode:
        clear_screen(out)
    has_errors = any(result.errors for result in results)

    if has_errors:
        print("❌ Found errors:\n", file=out)
        print(RULE, file=out)
        for result in results:
            if not result.errors:
                continue
            print(f"{display_path(result.file)}:", file=out)
            for error in result.errors:
                print(f"  - {error}", file=out)
        print(f"{RULE}\n", file=out)
    else:
        print("🎉 Great news:", file=out)

    valid = sum(1 for result in results if result.is_valid)
    print(f"{valid}/{len(results)} files valid", file=out)

    if has_errors:
        print("\n💡 Tips:", file=out)
        print(f"   • Project names and roles must match those in {display_path(projects_file)}", file=out)
        print(f"   • Ensure all required fields ({', '.join(required)}) are present", file=out)
        print("   • Verify contact URLs are valid", file=out)
