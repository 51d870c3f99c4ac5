"""Runtime settings for contribcheck.

Settings come from the environment, optionally seeded from a `.env` file:
    from contribcheck.config import load_settings
    settings = load_settings()
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from contribcheck.constants import DEFAULT_CONTRIBUTORS_DIR, DEFAULT_PACING_DELAY, DEFAULT_PROJECTS_FILE


@dataclass(frozen=True)
class Settings:
    """Resolved settings for one contribcheck process.

    Attributes:
        contributors_dir: Directory holding the contributor record files
        projects_file: Project registry definition (YAML)
        pacing_delay: Seconds to wait after the "running" banner before a pass
        log_level: Optional log level override
    """

    contributors_dir: Path
    projects_file: Path
    pacing_delay: float = DEFAULT_PACING_DELAY
    log_level: str | None = None


def _resolve(raw: str, base: Path) -> Path:
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = base / path
    return path.resolve()


def _parse_delay(raw: str | None) -> float:
    if raw is None or not raw.strip():
        return DEFAULT_PACING_DELAY
    try:
        value = float(raw)
    except ValueError as e:
        raise ValueError(f"CONTRIBCHECK_PACING_DELAY must be a number, got: {raw!r}") from e
    if value < 0:
        raise ValueError(f"CONTRIBCHECK_PACING_DELAY must not be negative, got: {raw!r}")
    return value


def load_settings(cwd: Path | None = None) -> Settings:
    """Build settings from the environment.

    Args:
        cwd: Base directory for relative paths (default: current working directory)

    Returns:
        Settings with absolute paths
    """
    base = (cwd or Path.cwd()).resolve()

    # Load .env (allow override for tests)
    env_path = os.getenv("CONTRIBCHECK_ENV_PATH")
    dotenv_path = _resolve(env_path, base) if env_path else base / ".env"
    load_dotenv(dotenv_path)

    contributors_dir = _resolve(os.getenv("CONTRIBCHECK_CONTRIBUTORS_DIR") or DEFAULT_CONTRIBUTORS_DIR, base)
    projects_raw = os.getenv("CONTRIBCHECK_PROJECTS_FILE")
    projects_file = _resolve(projects_raw, base) if projects_raw else contributors_dir / DEFAULT_PROJECTS_FILE

    return Settings(
        contributors_dir=contributors_dir,
        projects_file=projects_file,
        pacing_delay=_parse_delay(os.getenv("CONTRIBCHECK_PACING_DELAY")),
        log_level=os.getenv("CONTRIBCHECK_LOG_LEVEL") or None,
    )
