#! /bin/env python3
from __future__ import annotations

import logging
import os
import shutil
import signal
import subprocess
from pathlib import Path
from typing import Any, Callable

from vscsetup import internal_config
from vscsetup.exceptions import (
    AttemptFailure,
    AttemptTimeout,
    CodeCLINotFoundError,
    QueryError,
)

RunCommand = Callable[..., subprocess.CompletedProcess[Any]]

logger: logging.Logger = logging.getLogger(__name__)


def find_code_cli(explicit: str = "") -> str:
    """Return the path of the VSCode command line executable."""
    if explicit:
        if Path(explicit).is_file():
            return str(Path(explicit).absolute())
        resolved = shutil.which(explicit)
        if resolved:
            return resolved
        raise CodeCLINotFoundError(f"Code CLI not found: {explicit}")

    for candidate in internal_config.CODE_CLI_CANDIDATES:
        resolved = shutil.which(candidate)
        if resolved:
            logger.debug(f"Found code CLI candidate {candidate}: {resolved}")
            return resolved
    raise CodeCLINotFoundError("code CLI not found in PATH")


def run_process(
    cmd: list[str],
    *,
    timeout: float | None = None,
    capture_output: bool = False,
    check: bool = False,
    **popen_kwargs: Any,
) -> subprocess.CompletedProcess[Any]:
    """Like subprocess.run, but a timeout kills the whole process group.

    The code launcher is a shell script that starts Electron as a child, so
    killing only the direct child would leave the installer running.
    """
    if capture_output:
        popen_kwargs["stdout"] = subprocess.PIPE
        popen_kwargs["stderr"] = subprocess.PIPE
    if os.name != "posix":
        return subprocess.run(cmd, timeout=timeout, check=check, **popen_kwargs)

    with subprocess.Popen(cmd, start_new_session=True, **popen_kwargs) as process:
        try:
            stdout, stderr = process.communicate(timeout=timeout)
        except subprocess.TimeoutExpired:
            try:
                os.killpg(process.pid, signal.SIGKILL)
            except ProcessLookupError:
                pass
            stdout, stderr = process.communicate()
            raise subprocess.TimeoutExpired(
                cmd, timeout or 0, output=stdout, stderr=stderr
            ) from None

    completed = subprocess.CompletedProcess(cmd, process.returncode, stdout, stderr)
    if check:
        completed.check_returncode()
    return completed


def _as_text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


class CodeCLI(object):
    """Run extension commands through the VSCode 'code' executable."""

    code_binary: str
    list_timeout: float

    def __init__(
        self,
        code_binary: str,
        list_timeout: float = internal_config.LIST_TIMEOUT_SECONDS,
        run_command: RunCommand = run_process,
    ) -> None:
        self.code_binary = code_binary
        self.list_timeout = list_timeout
        self._run_command = run_command

    @classmethod
    def discover(
        cls, code_path: str = "", dry_run: bool = False
    ) -> CodeCLI | DryRunCodeCLI:
        """Locate the code CLI; raises CodeCLINotFoundError if there is none."""
        explicit = code_path or os.environ.get("VSCSETUP_CODE_PATH", "")
        runner = cls(find_code_cli(explicit))
        logger.info(f"Using code CLI: {runner.code_binary}")
        if dry_run:
            return DryRunCodeCLI(runner)
        return runner

    def list_installed(self) -> set[str]:
        """Return the lower-cased ids of all installed extensions."""
        cmd = [self.code_binary, "--list-extensions"]
        try:
            process = self._run_command(
                cmd,
                capture_output=True,
                check=False,
                timeout=self.list_timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise QueryError(
                f"Listing extensions timed out after {self.list_timeout}s"
            ) from exc
        except OSError as exc:
            raise QueryError(f"Listing extensions failed: {exc}") from exc

        if process.returncode != 0:
            raise QueryError(
                f"Listing extensions failed with exit code {process.returncode}:"
                f" {_as_text(process.stderr).strip()}"
            )
        return {
            line.strip().lower()
            for line in _as_text(process.stdout).splitlines()
            if line.strip()
        }

    def install_extension(self, extension_id: str, timeout: float) -> None:
        """Install one extension, raising AttemptTimeout or AttemptFailure."""
        cmd = [
            self.code_binary,
            "--install-extension",
            extension_id,
            "--force",
        ]
        logger.debug(f"Running {' '.join(cmd)}")
        try:
            process = self._run_command(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                check=False,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise AttemptTimeout(
                f"Installing {extension_id} timed out after {timeout}s",
                output=_as_text(exc.output),
            ) from exc
        except OSError as exc:
            raise AttemptFailure(
                f"Running {self.code_binary} failed: {exc}", output=str(exc)
            ) from exc

        output = _as_text(process.stdout)
        if process.returncode != 0:
            raise AttemptFailure(
                f"{self.code_binary} exited with code {process.returncode}",
                output=output,
            )
        # catch some weird code errors
        if internal_config.CODE_CLI_ERROR_MARKER in output:
            raise AttemptFailure(
                f"{self.code_binary} reported an error for {extension_id}",
                output=output,
            )


class DryRunCodeCLI(object):
    """Query through a real code CLI but only log the install commands."""

    def __init__(self, runner: CodeCLI) -> None:
        self.runner = runner
        self.code_binary = runner.code_binary

    def list_installed(self) -> set[str]:
        return self.runner.list_installed()

    def install_extension(self, extension_id: str, timeout: float) -> None:
        logger.info(
            f"DRY-RUN: would run: {self.code_binary} --install-extension"
            f" {extension_id} --force"
        )
