"""contribcheck logging configuration.

contribcheck uses the shared InstruktAI logging standard (`instrukt_ai_logging`).
Operator-facing results are printed to the console; the log carries the
diagnostic trail (registry loads, pass lifecycle, watch events).
"""

from __future__ import annotations

import os
from typing import Optional

from instrukt_ai_logging import configure_logging


def setup_logging(level: Optional[str] = None) -> None:
    """Configure contribcheck logging.

    Args:
        level: Optional override for `CONTRIBCHECK_LOG_LEVEL`.
    """
    if level:
        os.environ["CONTRIBCHECK_LOG_LEVEL"] = level

    configure_logging("contribcheck")
