from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version


def _get_package_version(name: str) -> str:
    """Return the installed version of *name*, or ``"0"`` if not found."""
    try:
        return _pkg_version(name)
    except PackageNotFoundError:
        return "0"


VSCSETUP_VERSION = _get_package_version("vscsetup")

# attempt to install an extension a maximum of three times
MAX_INSTALL_ATTEMPTS = 3
INSTALL_TIMEOUT_SECONDS = 40
LIST_TIMEOUT_SECONDS = 10

# random pause after a failed attempt
BACKOFF_MIN_SECONDS = 1.2
BACKOFF_MAX_SECONDS = 2.2

# random pause after every extension, keeps the Marketplace from being hammered
INTER_ITEM_DELAY_MIN_SECONDS = 0.8
INTER_ITEM_DELAY_MAX_SECONDS = 2.5

SETTINGS_FILE = "settings.json"
KEYBINDINGS_FILE = "keybindings.json"
EXTENSIONS_FILE = "extensions.txt"
BACKUP_PREFIX = "backup_"
LOG_FILE_NAME = "vscode-custom-install.log"

CODE_CLI_CANDIDATES = (
    "code",
    "code-insiders",
    "code.cmd",
    "code.exe",
    "codium",
    "codium.exe",
)

# the code CLI sometimes exits with 0 but still reports a failure
CODE_CLI_ERROR_MARKER = "Error: "

CONSOLE_LOG_FORMAT = "%(relativeCreated)d [%(levelname)s] %(message)s"
FILE_LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"
FILE_LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
