"""Environment-variable-based configuration for the command line."""

from __future__ import annotations

import os
from pathlib import Path

MONGODB_URI: str = os.environ.get("MONGODB_URI", "")
MONGODB_DB: str = os.environ.get("MONGODB_DB", "workout")
LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()
TEMPLATES_PATH: Path | None = (
    Path(os.environ["WORKOUT_TEMPLATES_PATH"]).expanduser()
    if os.environ.get("WORKOUT_TEMPLATES_PATH")
    else None
)
