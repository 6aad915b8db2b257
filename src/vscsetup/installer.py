#! /bin/env python3
from __future__ import annotations

import functools
import logging
from pathlib import Path
from typing import Optional

import typer

from vscsetup import internal_config
from vscsetup.code_manager import CodeCLI
from vscsetup.exceptions import PayloadError, SetupFailure
from vscsetup.install_engine import install_extensions
from vscsetup.models import InstallationReport, Payloads, RetryPolicy
from vscsetup.payloads import load_payloads
from vscsetup.selection import parse_selection
from vscsetup.user_config import apply_payload, make_backup
from vscsetup.vscode_paths import backup_dir_for, default_log_path, resolve_user_dir

app: typer.Typer = typer.Typer(add_completion=False)
logger: logging.Logger = logging.getLogger(__name__)


def configure_logging(log_level: str, log_file: Path | None) -> None:
    _log_level = getattr(logging, log_level.upper(), None)
    if not isinstance(_log_level, int):
        raise typer.BadParameter(f"Invalid log level: {log_level!r}")

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter(
                internal_config.FILE_LOG_FORMAT,
                datefmt=internal_config.FILE_LOG_DATE_FORMAT,
            )
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=_log_level,
        format=internal_config.CONSOLE_LOG_FORMAT,
        handlers=handlers,
    )


def choose_extensions_interactive(candidates: list[str]) -> list[str]:
    """Show the numbered extension list and parse the user's selection."""
    typer.echo("Extensions:")
    for index, extension_id in enumerate(candidates, start=1):
        typer.echo(f"  {index:3d}) {extension_id}")
    typer.echo("")
    typer.echo("Input options:")
    typer.echo("  all             - install everything")
    typer.echo("  none / empty    - skip installation")
    typer.echo("  1,3,5-7         - install the listed numbers")
    expression: str = typer.prompt(
        "Choose (all/none/numbers)", default="", show_default=False
    )
    return parse_selection(expression, candidates)


def select_extensions(
    candidates: list[str], select: str = "", assume_yes: bool = False
) -> list[str]:
    """Decide which extensions to install."""
    if select:
        return parse_selection(select, candidates)
    if assume_yes:
        logger.info("Assume-yes mode: installing all extensions")
        return list(candidates)
    if not typer.confirm(f"Install {len(candidates)} extensions?", default=True):
        logger.info("User declined to install extensions")
        return []
    if typer.confirm(
        "Install all extensions (yes) or choose a subset (no)?", default=True
    ):
        return list(candidates)
    return choose_extensions_interactive(candidates)


def log_report(report: InstallationReport) -> None:
    for entry in report.failed:
        logger.error(
            f"Failed: {entry.extension_id} after {entry.attempts} attempts."
            f" Last output:\n{entry.output}"
        )
    logger.info(f"Extensions: {report.summary()}")


def _ask(question: str, assume_yes: bool) -> bool:
    return assume_yes or typer.confirm(question, default=True)


def run_installer(
    payloads: Payloads,
    user_dir: Path,
    assume_yes: bool = False,
    dry_run: bool = False,
    skip_backup: bool = False,
    select: str = "",
    code_path: str = "",
    policy: RetryPolicy | None = None,
    backup_dir: Path | None = None,
) -> bool:
    """Apply all payloads; returns False if any step failed."""
    policy = policy or RetryPolicy()
    backup_dir = backup_dir or backup_dir_for(user_dir)
    success = True

    if skip_backup:
        logger.info("Backup skipped by user (--no-backup).")
    elif _ask("Create a backup of the current settings first?", assume_yes):
        make_backup(user_dir, backup_dir, dry_run=dry_run)
    else:
        logger.info("User chose to skip backup.")

    for name, data in (
        (internal_config.SETTINGS_FILE, payloads.settings),
        (internal_config.KEYBINDINGS_FILE, payloads.keybindings),
    ):
        if not _ask(f"Apply {name}?", assume_yes):
            logger.info(f"Skipped applying {name}")
            continue
        try:
            apply_payload(user_dir, name, data, dry_run=dry_run)
        except (PayloadError, OSError) as exc:
            logger.error(f"Failed to apply {name}: {exc}")
            success = False

    if not select and not _ask("Install extensions from the list?", assume_yes):
        logger.info("Skipped installing extensions")
        return success
    if not payloads.extensions:
        logger.warning("No extensions found in payload. Nothing to install.")
        return success

    targets = select_extensions(payloads.extensions, select, assume_yes)
    if not targets:
        logger.info("No extensions selected to install.")
        return success

    try:
        report = install_extensions(
            targets,
            policy,
            functools.partial(CodeCLI.discover, code_path=code_path, dry_run=dry_run),
        )
    except SetupFailure as exc:
        logger.error(f"Extensions installation failed: {exc}")
        return False

    log_report(report)
    return success and report.succeeded


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"vscsetup {internal_config.VSCSETUP_VERSION}")
        raise typer.Exit()


@app.command()
def install(
    yes: bool = typer.Option(
        False, "--yes", "-y", help="Assume 'yes' for all questions (non-interactive)."
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Show actions but don't write files or install extensions.",
    ),
    src: str = typer.Option(
        "",
        "--src",
        help="Folder with settings.json/keybindings.json/extensions.txt to use"
        " instead of the bundled payloads.",
    ),
    no_backup: bool = typer.Option(
        False, "--no-backup", help="Don't back up the existing user settings."
    ),
    select: str = typer.Option(
        "",
        "--select",
        help="Extensions to install without asking: 'all', 'none' or e.g. '1,3,5-7'.",
    ),
    code_path: str = typer.Option(
        "", "--code-path", help="Path of the VS Code CLI (default: search PATH)."
    ),
    retries: int = typer.Option(
        internal_config.MAX_INSTALL_ATTEMPTS,
        "--retries",
        min=1,
        help="Attempts per extension.",
    ),
    install_timeout: float = typer.Option(
        internal_config.INSTALL_TIMEOUT_SECONDS,
        "--install-timeout",
        min=1,
        help="Timeout in seconds for a single installation attempt.",
    ),
    log_level: str = typer.Option("info", "--log-level"),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file", help="Log file (default: ~/vscode-custom-install.log)."
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Apply VS Code settings and keybindings and install extensions."""
    log_path = log_file or default_log_path()
    configure_logging(log_level, log_path)

    try:
        payloads = load_payloads(src)
    except PayloadError as exc:
        # continue, the user may only want part of the payloads
        logger.error(f"Failed to prepare payloads: {exc}")
        payloads = Payloads()

    user_dir = resolve_user_dir()
    backup_dir = backup_dir_for(user_dir)
    logger.info(f"Target VS Code user config: {user_dir}")
    logger.info(f"Backup dir will be: {backup_dir}")
    logger.info(f"Log file: {log_path}")

    success = run_installer(
        payloads,
        user_dir,
        assume_yes=yes,
        dry_run=dry_run,
        skip_backup=no_backup,
        select=select,
        code_path=code_path,
        policy=RetryPolicy(max_attempts=retries, attempt_timeout=install_timeout),
        backup_dir=backup_dir,
    )
    logger.info("Installer finished.")
    if not success:
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
