from __future__ import annotations

import logging
import random
import time
from typing import Callable, Protocol, Sequence

from vscsetup.exceptions import AttemptTimeout, InstallError, QueryError
from vscsetup.models import InstallationReport, InstallOutcome, RetryPolicy

logger: logging.Logger = logging.getLogger(__name__)


class ExtensionRunner(Protocol):
    def list_installed(self) -> set[str]: ...

    def install_extension(self, extension_id: str, timeout: float) -> None: ...


RunnerFactory = Callable[[], ExtensionRunner]


def random_delay(minimum: float, maximum: float) -> float:
    """Draw a delay from [minimum, maximum]; a degenerate range yields minimum."""
    if maximum <= minimum:
        return minimum
    return random.uniform(minimum, maximum)


def query_installed(runner: ExtensionRunner) -> set[str]:
    """Return the lower-cased installed ids, or nothing if the query fails."""
    try:
        return {extension_id.lower() for extension_id in runner.list_installed()}
    except QueryError as exc:
        logger.warning(
            f"Cannot list installed extensions: {exc} - continuing without dedupe"
        )
        return set()


def install_one(
    runner: ExtensionRunner,
    extension_id: str,
    policy: RetryPolicy,
    installed: set[str],
) -> InstallOutcome:
    """Process a single extension: skip it, or install it with retries.

    *installed* belongs to the current run and is only extended when an
    installation succeeds.
    """
    if extension_id.lower() in installed:
        logger.info(f"Already installed, skipping: {extension_id}")
        return InstallOutcome.skipped(extension_id)

    last_output = ""
    for attempt in range(1, policy.max_attempts + 1):
        logger.info(
            f"Installing {extension_id} (attempt {attempt}/{policy.max_attempts})"
        )
        try:
            runner.install_extension(extension_id, timeout=policy.attempt_timeout)
        except AttemptTimeout as exc:
            last_output = exc.output
            logger.warning(f"Timeout installing {extension_id} (attempt {attempt})")
        except InstallError as exc:
            last_output = exc.output
            logger.warning(f"Error installing {extension_id}: {exc}")
        else:
            logger.info(f"Installed: {extension_id}")
            installed.add(extension_id.lower())
            return InstallOutcome.installed(extension_id, attempts=attempt)

        if attempt < policy.max_attempts:
            time.sleep(random_delay(policy.backoff_min, policy.backoff_max))

    logger.error(
        f"Failed to install {extension_id} after {policy.max_attempts} attempts."
        f" Last output:\n{last_output}"
    )
    return InstallOutcome.failed(
        extension_id, attempts=policy.max_attempts, output=last_output
    )


def install_extensions(
    targets: Sequence[str],
    policy: RetryPolicy,
    runner_factory: RunnerFactory,
) -> InstallationReport:
    """Install every extension in *targets*, strictly one after another.

    The runner is obtained first; a SetupFailure raised by *runner_factory*
    propagates before anything is queried or installed. All per-item failures
    end up in the returned report instead of being raised.
    """
    runner = runner_factory()
    installed = query_installed(runner)

    entries: list[InstallOutcome] = []
    total = len(targets)
    for index, extension_id in enumerate(targets, start=1):
        logger.info(f"[{index}/{total}] {extension_id}")
        entries.append(install_one(runner, extension_id, policy, installed))
        # random pause to avoid hammering the Marketplace
        time.sleep(
            random_delay(policy.inter_item_delay_min, policy.inter_item_delay_max)
        )

    return InstallationReport(entries=tuple(entries))
