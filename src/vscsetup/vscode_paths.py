from __future__ import annotations

import datetime
import os
import platform
from pathlib import Path

from vscsetup import internal_config


def resolve_user_dir() -> Path:
    """Resolve the VS Code user settings directory for the current platform."""
    explicit_dir = os.environ.get("VSCSETUP_USER_DIR", "").strip()
    if explicit_dir:
        return Path(explicit_dir).expanduser().resolve()

    home = Path.home()
    system = platform.system().lower()
    if system == "windows":
        app_data = os.environ.get("APPDATA", "").strip()
        if app_data:
            return Path(app_data).joinpath("Code", "User")
        return home.joinpath("AppData", "Roaming", "Code", "User")
    if system == "darwin":
        return home.joinpath("Library", "Application Support", "Code", "User")
    return home.joinpath(".config", "Code", "User")


def backup_dir_for(user_dir: Path, now: datetime.datetime | None = None) -> Path:
    """Return the timestamped backup directory below *user_dir*."""
    timestamp = (now or datetime.datetime.now()).strftime("%Y-%m-%d_%H-%M-%S")
    return user_dir.joinpath(f"{internal_config.BACKUP_PREFIX}{timestamp}")


def default_log_path() -> Path:
    return Path.home().joinpath(internal_config.LOG_FILE_NAME)
