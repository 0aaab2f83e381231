"""Filesystem locations shared by the store and the log setup."""

from .config import APP_AUTHOR, APP_NAME, DATA_DIR, STATE_FILE, ensure_data_dir

__all__ = ["APP_AUTHOR", "APP_NAME", "DATA_DIR", "STATE_FILE", "ensure_data_dir"]
