"""Configuration payloads: settings, keybindings and the extension list.

Payloads come either from a user supplied directory or from the ``data``
directory shipped inside the package.
"""

from __future__ import annotations

import logging
from pathlib import Path

# for parsing settings.json (it may include comments and trailing commas)
import json5

from vscsetup import internal_config
from vscsetup.exceptions import PayloadError
from vscsetup.models import Payloads

BUNDLED_PAYLOAD_DIR: Path = Path(__file__).parent.joinpath("data")

logger: logging.Logger = logging.getLogger(__name__)


def parse_extension_list(text: str) -> list[str]:
    """Return extension ids from *text*, one per line, without comments."""
    extensions: list[str] = []
    seen: set[str] = set()
    for line in text.splitlines():
        extension_id = line.strip()
        if not extension_id or extension_id.startswith("#"):
            continue
        if extension_id.lower() in seen:
            logger.debug(f"Ignoring duplicate extension entry {extension_id}")
            continue
        seen.add(extension_id.lower())
        extensions.append(extension_id)
    return extensions


def validate_json_payload(name: str, data: bytes) -> None:
    """Raise PayloadError unless *data* is valid VS Code flavoured JSON."""
    try:
        json5.loads(data.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise PayloadError(f"{name} is not valid UTF-8: {exc}") from exc
    except ValueError as exc:
        raise PayloadError(f"{name} is not valid JSON: {exc}") from exc


def _read_optional(path: Path) -> bytes:
    if not path.is_file():
        logger.debug(f"No payload file {path}")
        return b""
    try:
        return path.read_bytes()
    except OSError as exc:
        raise PayloadError(f"Cannot read {path}: {exc}") from exc


def load_payloads(src: str = "") -> Payloads:
    """Load all payloads from *src*, or from the bundled payload directory."""
    if src:
        base_dir = Path(src).expanduser().absolute()
        if not base_dir.is_dir():
            raise PayloadError(f"Payload directory not found: {base_dir}")
    else:
        base_dir = BUNDLED_PAYLOAD_DIR

    extensions_text = _read_optional(
        base_dir.joinpath(internal_config.EXTENSIONS_FILE)
    ).decode("utf-8", errors="replace")

    payloads = Payloads(
        settings=_read_optional(base_dir.joinpath(internal_config.SETTINGS_FILE)),
        keybindings=_read_optional(
            base_dir.joinpath(internal_config.KEYBINDINGS_FILE)
        ),
        extensions=parse_extension_list(extensions_text),
        source=str(base_dir),
    )
    logger.debug(
        f"Loaded payloads from {base_dir}: {len(payloads.settings)} bytes settings,"
        f" {len(payloads.keybindings)} bytes keybindings,"
        f" {len(payloads.extensions)} extensions"
    )
    return payloads
