from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path

from vscsetup import internal_config
from vscsetup.payloads import validate_json_payload

logger: logging.Logger = logging.getLogger(__name__)

BACKED_UP_FILES = (internal_config.SETTINGS_FILE, internal_config.KEYBINDINGS_FILE)


def _write_bytes_atomic(target_path: Path, data: bytes) -> None:
    target_path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{target_path.name}.", suffix=".tmp", dir=target_path.parent
    )
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as output:
            output.write(data)
            output.flush()
            os.fsync(output.fileno())
        os.replace(tmp_path, target_path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def make_backup(user_dir: Path, backup_dir: Path, dry_run: bool = False) -> list[Path]:
    """Copy the existing settings and keybindings into *backup_dir*."""
    if dry_run:
        logger.info(
            f"DRY-RUN: would create backup dir {backup_dir} and copy existing files"
        )
        return []

    try:
        backup_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.error(f"Cannot create backup dir {backup_dir}: {exc}")
        return []
    copied: list[Path] = []
    for name in BACKED_UP_FILES:
        source = user_dir.joinpath(name)
        if not source.is_file():
            logger.info(f"No existing {name} to backup")
            continue
        destination = backup_dir.joinpath(name)
        try:
            shutil.copy2(source, destination)
        except OSError as exc:
            logger.warning(f"Cannot backup {name}: {exc}")
            continue
        logger.info(f"Backup: {source} -> {destination}")
        copied.append(destination)
    return copied


def apply_payload(
    user_dir: Path, name: str, data: bytes, dry_run: bool = False
) -> Path | None:
    """Write one JSON payload into the user directory.

    Returns the written path, or None when the payload is empty or this is a
    dry run. Raises PayloadError for invalid JSON and OSError if writing fails.
    """
    if not data:
        logger.warning(f"{name} payload is empty - skipping")
        return None

    validate_json_payload(name, data)
    target_path = user_dir.joinpath(name)
    if dry_run:
        logger.info(f"DRY-RUN: would write {target_path} ({len(data)} bytes)")
        return None

    _write_bytes_atomic(target_path, data)
    logger.info(f"Applied {name} -> {target_path}")
    return target_path
