"""Turn raw validation issues into operator-facing messages.

Two issue shapes get a dedicated message because the generic wording hides
the real mistake: an unknown project key under ``roles``, and a role name
that is not in a restricted project's role list.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping, Union

_ENUM_MISMATCH_TYPES = {"literal_error", "enum"}


def display_path(path: Path | str) -> str:
    """Render a path as ``./relative/to/cwd``."""
    return f"./{os.path.relpath(path, Path.cwd())}"


@dataclass(frozen=True)
class GenericMessage:
    text: str

    def message(self) -> str:
        return self.text


@dataclass(frozen=True)
class UnknownProject:
    project: str
    file: Path

    def message(self) -> str:
        return f'Invalid project "{self.project}" for file {display_path(self.file)}.'


@dataclass(frozen=True)
class UnknownRole:
    role: str
    project: str
    file: Path

    def message(self) -> str:
        return f'Invalid role {self.role} in project "{self.project}" for file {display_path(self.file)}.'


Classification = Union[GenericMessage, UnknownProject, UnknownRole]


def _enum_mismatch(sub_issues: Iterable[Mapping[str, Any]]) -> str | None:
    for sub in sub_issues:
        if sub.get("type") in _ENUM_MISMATCH_TYPES and isinstance(sub.get("input"), str):
            return sub["input"]
    return None


def classify_issue(issue: Mapping[str, Any], file_path: Path) -> Classification:
    """Classify one pydantic error dict (``type``, ``loc``, ``msg``, ``ctx``)."""
    loc = tuple(issue.get("loc") or ())
    issue_type = issue.get("type")

    if issue_type == "extra_forbidden" and len(loc) == 2 and loc[0] == "roles":
        return UnknownProject(project=str(loc[1]), file=file_path)

    if issue_type == "invalid_union" and len(loc) >= 2 and loc[0] == "roles":
        ctx = issue.get("ctx") or {}
        role = _enum_mismatch(ctx.get("issues") or ())
        if role is not None:
            return UnknownRole(role=role, project=str(loc[1]), file=file_path)

    message = issue.get("msg", "")
    if loc:
        return GenericMessage(f"{'.'.join(str(part) for part in loc)}: {message}")
    return GenericMessage(message)


def format_issues(issues: Iterable[Mapping[str, Any]], file_path: Path) -> list[str]:
    """Format a file's issues in order.

    The first unknown-project or unknown-role issue replaces the whole list
    with its single message.
    """
    messages: list[str] = []
    for issue in issues:
        result = classify_issue(issue, file_path)
        if not isinstance(result, GenericMessage):
            return [result.message()]
        messages.append(result.message())
    return messages
