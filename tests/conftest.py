"""Pytest configuration for contribcheck tests."""

import logging
from pathlib import Path

import pytest

try:
    import instrukt_ai_logging

    def _noop_configure_logging(*_args, **_kwargs):  # type: ignore[no-untyped-def]
        return None

    instrukt_ai_logging.configure_logging = _noop_configure_logging  # type: ignore[assignment]
    logging.getLogger("contribcheck").handlers.clear()
    logging.getLogger().handlers.clear()
except Exception:
    pass

from contribcheck.config import Settings

PROJECTS_YAML = """\
projects:
  - "Volume 0"
  - "Website"
  - "Volume 0 Issue 1"
project_roles:
  "Volume 0 Issue 1":
    - "Technical Writer"
    - "Artist"
"""

VALID_RECORD = """\
name: Alice
avatar: ./avatars/alice.png
roles:
  Volume 0 Issue 1:
    - Technical Writer
    - role: Artist
      details: Cover art
  Website:
    - Anything Goes
contacts:
  - https://github.com/alice
"""


def pytest_collection_modifyitems(config, items):
    """Set per-marker timeouts: unit=1s, integration=5s."""
    for item in items:
        if "unit" in item.keywords:
            item.add_marker(pytest.mark.timeout(1))
        elif "integration" in item.keywords:
            item.add_marker(pytest.mark.timeout(5))


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A contributors/ tree with a registry and one avatar, used as the cwd."""
    contributors = tmp_path / "contributors"
    (contributors / "_schema").mkdir(parents=True)
    (contributors / "avatars").mkdir()
    (contributors / "_schema" / "projects.yaml").write_text(PROJECTS_YAML, encoding="utf-8")
    (contributors / "avatars" / "alice.png").write_bytes(b"\x89PNG")
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def settings(workspace: Path) -> Settings:
    contributors = workspace / "contributors"
    return Settings(
        contributors_dir=contributors.resolve(),
        projects_file=(contributors / "_schema" / "projects.yaml").resolve(),
        pacing_delay=0,
    )


@pytest.fixture
def write_record(settings: Settings):
    """Write a record file into the contributors dir and return its path."""

    def _write(name: str, content: str) -> Path:
        path = settings.contributors_dir / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def valid_record() -> str:
    return VALID_RECORD
