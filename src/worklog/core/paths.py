"""Resolve where the worklog file lives."""

import os
import platform
from pathlib import Path
from typing import Optional

from worklog.core.exceptions import StorageError

APP_DIRNAME = "worklog"
LOG_FILENAME = "log.json"


def default_data_dir() -> Path:
    """Return the OS-appropriate local data directory for worklog.

    - ``$WORKLOG_HOME`` when set
    - Windows: %LOCALAPPDATA%\\worklog
    - macOS:   ~/Library/Application Support/worklog
    - Linux:   ~/.local/share/worklog (or $XDG_DATA_HOME/worklog)
    """
    override = os.environ.get("WORKLOG_HOME")
    if override:
        return Path(override).expanduser()

    if os.name == "nt":
        local_appdata = os.environ.get("LOCALAPPDATA")
        if local_appdata:
            return Path(local_appdata) / APP_DIRNAME
        return Path.home() / "AppData" / "Local" / APP_DIRNAME

    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg) / APP_DIRNAME

    if platform.system().lower() == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_DIRNAME

    return Path.home() / ".local" / "share" / APP_DIRNAME


def resolve_log_file(explicit_path: Optional[str] = None) -> Path:
    """Return the log file path, creating its directory if needed."""
    if explicit_path:
        log_file = Path(explicit_path).expanduser().resolve()
    else:
        log_file = default_data_dir() / LOG_FILENAME
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageError(log_file, e.strerror or str(e)) from e
    return log_file
