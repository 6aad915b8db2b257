from __future__ import annotations

import enum
from dataclasses import dataclass, field

from vscsetup import internal_config


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = internal_config.MAX_INSTALL_ATTEMPTS
    attempt_timeout: float = internal_config.INSTALL_TIMEOUT_SECONDS
    backoff_min: float = internal_config.BACKOFF_MIN_SECONDS
    backoff_max: float = internal_config.BACKOFF_MAX_SECONDS
    inter_item_delay_min: float = internal_config.INTER_ITEM_DELAY_MIN_SECONDS
    inter_item_delay_max: float = internal_config.INTER_ITEM_DELAY_MAX_SECONDS

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(
                f"max_attempts must be at least 1, got {self.max_attempts}"
            )
        if self.attempt_timeout <= 0:
            raise ValueError(
                f"attempt_timeout must be positive, got {self.attempt_timeout}"
            )
        for name in (
            "backoff_min",
            "backoff_max",
            "inter_item_delay_min",
            "inter_item_delay_max",
        ):
            if getattr(self, name) < 0:
                raise ValueError(
                    f"{name} must not be negative, got {getattr(self, name)}"
                )


class InstallStatus(str, enum.Enum):
    SKIPPED = "skipped"
    INSTALLED = "installed"
    FAILED = "failed"


@dataclass(frozen=True)
class InstallOutcome:
    """Result of processing one requested extension."""

    extension_id: str
    status: InstallStatus
    attempts: int = 0
    output: str = ""

    @classmethod
    def skipped(cls, extension_id: str) -> InstallOutcome:
        return cls(extension_id=extension_id, status=InstallStatus.SKIPPED)

    @classmethod
    def installed(cls, extension_id: str, attempts: int) -> InstallOutcome:
        return cls(
            extension_id=extension_id,
            status=InstallStatus.INSTALLED,
            attempts=attempts,
        )

    @classmethod
    def failed(cls, extension_id: str, attempts: int, output: str) -> InstallOutcome:
        return cls(
            extension_id=extension_id,
            status=InstallStatus.FAILED,
            attempts=attempts,
            output=output,
        )


@dataclass(frozen=True)
class InstallationReport:
    """Ordered outcomes of one orchestration run, one entry per requested id."""

    entries: tuple[InstallOutcome, ...] = ()

    def _with_status(self, status: InstallStatus) -> list[InstallOutcome]:
        return [entry for entry in self.entries if entry.status is status]

    @property
    def installed(self) -> list[InstallOutcome]:
        return self._with_status(InstallStatus.INSTALLED)

    @property
    def skipped(self) -> list[InstallOutcome]:
        return self._with_status(InstallStatus.SKIPPED)

    @property
    def failed(self) -> list[InstallOutcome]:
        return self._with_status(InstallStatus.FAILED)

    @property
    def succeeded(self) -> bool:
        return not self.failed

    def summary(self) -> str:
        return (
            f"{len(self.installed)} of {len(self.entries)} installed,"
            f" {len(self.skipped)} skipped, {len(self.failed)} failed"
        )


@dataclass
class Payloads:
    settings: bytes = b""
    keybindings: bytes = b""
    extensions: list[str] = field(default_factory=list)
    source: str = ""
