from __future__ import annotations

import stat
from pathlib import Path
from typing import Callable

import pytest


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--slow",
        action="store_true",
        default=False,
        help="run slow tests that spawn a fake code CLI",
    )
    parser.addoption(
        "--only-slow",
        action="store_true",
        default=False,
        help="run only tests marked as slow",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "slow: marks tests as slow")


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    only_slow = bool(config.getoption("--only-slow"))
    run_slow = bool(config.getoption("--slow")) or only_slow

    if only_slow:
        selected = [item for item in items if "slow" in item.keywords]
        deselected = [item for item in items if "slow" not in item.keywords]
        if deselected:
            config.hook.pytest_deselected(items=deselected)
        items[:] = selected

    if run_slow:
        return

    skip_slow = pytest.mark.skip(reason="need --slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def write_fake_code(tmp_path: Path) -> Callable[[str], Path]:
    """Return a helper that writes an executable shell script standing in for code."""

    def _write(body: str) -> Path:
        script = tmp_path / "bin" / "code"
        script.parent.mkdir(parents=True, exist_ok=True)
        script.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP)
        return script

    return _write
