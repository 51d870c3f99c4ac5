"""Per-file validation: parse, shape-check, avatar existence."""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from instrukt_ai_logging import get_logger
from pydantic import BaseModel, ValidationError

from contribcheck.cancellation import CancellationToken, PassCancelled
from contribcheck.classifier import display_path, format_issues
from contribcheck.loader import read_record

logger = get_logger(__name__)


@dataclass
class ValidationResult:
    file: Path
    is_valid: bool = False
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def resolve_avatar(record_path: Path, avatar: str) -> Path:
    """Resolve an avatar path against the directory of the record that names it."""
    return Path(os.path.abspath(record_path.parent / avatar))


async def check_avatar(record_path: Path, avatar: str, token: CancellationToken) -> dict[str, Any] | None:
    """Return an ``avatar`` issue when the referenced file does not exist."""
    avatar_path = resolve_avatar(record_path, avatar)
    token.raise_if_cancelled()
    exists = await asyncio.to_thread(avatar_path.exists)
    # A superseded pass drops the answer even though the check completed.
    token.raise_if_cancelled()
    if exists:
        return None
    return {
        "type": "custom",
        "loc": ("avatar",),
        "msg": f"No avatar file found at {display_path(avatar_path)}",
        "input": avatar,
    }


async def validate_record(
    data: Any, model: type[BaseModel], record_path: Path, token: CancellationToken
) -> list[dict[str, Any]]:
    """Validate a parsed record, returning raw issues (empty when valid)."""
    issues: list[dict[str, Any]] = []
    try:
        model.model_validate(data)
    except ValidationError as e:
        issues.extend(e.errors(include_url=False))

    avatar = data.get("avatar") if isinstance(data, dict) else None
    if isinstance(avatar, str):
        missing = await check_avatar(record_path, avatar, token)
        if missing is not None:
            issues.append(missing)
    return issues


async def validate_record_file(path: Path, model: type[BaseModel], token: CancellationToken) -> ValidationResult:
    """Validate one record file.

    Every failure except cancellation is converted into an error on the
    returned result.
    """
    result = ValidationResult(file=path)
    try:
        token.raise_if_cancelled()
        data = await asyncio.to_thread(read_record, path)
        token.raise_if_cancelled()

        issues = await validate_record(data, model, path, token)
        if issues:
            result.errors = format_issues(issues, path)
        else:
            result.is_valid = True
    except PassCancelled:
        raise
    except Exception as e:
        logger.debug("Record %s failed before validation: %s", path, e)
        result.errors.append(f"Failed to parse file: {e}")

    return result
