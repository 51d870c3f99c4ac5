"""Constants used across contribcheck.

This module defines shared constants to ensure consistency.
"""

# Record files
RECORD_EXTENSIONS = (".yaml", ".yml")
DEFAULT_CONTRIBUTORS_DIR = "contributors"
DEFAULT_PROJECTS_FILE = "_schema/projects.yaml"  # Relative to the contributors dir

# Pass pacing (seconds); short delay so the "running" banner is visible
DEFAULT_PACING_DELAY = 0.2

# Console output
RULE = "--------------------------------"
CLEAR_SCREEN = "\x1b[2J\x1b[3J\x1b[H"

# Watchdog event types that can change a record's contents
WATCHED_EVENT_TYPES = {"created", "modified", "moved", "deleted"}

# Editor/temp files never trigger a pass
IGNORED_SUFFIXES = {".swp", ".tmp", ".bak", "~"}
