from __future__ import annotations


class VscsetupError(Exception):
    """Base class for all vscsetup domain errors."""


class SetupFailure(RuntimeError, VscsetupError):
    """Raised when the installation capability cannot be obtained at all."""


class CodeCLINotFoundError(SetupFailure):
    """Raised when no VS Code command line executable can be located."""


class QueryError(RuntimeError, VscsetupError):
    """Raised when listing the installed extensions fails."""


class InstallError(RuntimeError, VscsetupError):
    """Raised when a single installation attempt fails."""

    def __init__(self, message: str, output: str = "") -> None:
        super().__init__(message)
        self.output = output


class AttemptTimeout(InstallError):
    """Raised when an installation attempt exceeds its timeout."""


class AttemptFailure(InstallError):
    """Raised when an installation attempt exits with an error."""


class PayloadError(ValueError, VscsetupError):
    """Raised when a configuration payload cannot be read or is invalid."""
