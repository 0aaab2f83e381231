from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_data_dir

APP_NAME = "Lazy Calendar"
APP_AUTHOR = "LazyCalendar"
DATA_DIR = Path(os.getenv("LAZY_CALENDAR_DATA_DIR") or user_data_dir(APP_NAME, APP_AUTHOR))
STATE_FILE = DATA_DIR / "calendar_state.json"


def ensure_data_dir(path: Path = DATA_DIR) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path
