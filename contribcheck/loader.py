"""Record discovery and parsing."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from contribcheck.constants import RECORD_EXTENSIONS


def is_record_file(name: str) -> bool:
    return name.endswith(RECORD_EXTENSIONS)


def list_record_files(directory: Path) -> list[Path]:
    """List record files directly inside ``directory``, sorted by name.

    Raises:
        OSError: The directory cannot be listed.
    """
    return sorted(
        (entry for entry in directory.iterdir() if entry.is_file() and is_record_file(entry.name)),
        key=lambda entry: entry.name,
    )


def parse_record(content: str) -> Any:
    """Parse record text into a generic value (dict, list, scalar or None).

    Raises:
        yaml.YAMLError: The text is not valid YAML.
    """
    return yaml.safe_load(content)


def read_record(path: Path) -> Any:
    return parse_record(path.read_text(encoding="utf-8"))
