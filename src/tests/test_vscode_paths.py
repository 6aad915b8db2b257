from __future__ import annotations

import datetime
from pathlib import Path

import pytest

from vscsetup import vscode_paths


@pytest.fixture
def _home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    monkeypatch.delenv("VSCSETUP_USER_DIR", raising=False)
    return tmp_path


def test_resolve_user_dir_uses_explicit_override(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("VSCSETUP_USER_DIR", str(tmp_path / "custom"))

    assert vscode_paths.resolve_user_dir() == (tmp_path / "custom").resolve()


def test_resolve_user_dir_linux(_home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(vscode_paths.platform, "system", lambda: "Linux")

    assert vscode_paths.resolve_user_dir() == _home / ".config" / "Code" / "User"


def test_resolve_user_dir_macos(_home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(vscode_paths.platform, "system", lambda: "Darwin")

    assert vscode_paths.resolve_user_dir() == (
        _home / "Library" / "Application Support" / "Code" / "User"
    )


def test_resolve_user_dir_windows_uses_appdata(
    _home: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(vscode_paths.platform, "system", lambda: "Windows")
    monkeypatch.setenv("APPDATA", str(_home / "Roaming"))

    assert vscode_paths.resolve_user_dir() == _home / "Roaming" / "Code" / "User"


def test_resolve_user_dir_windows_without_appdata(
    _home: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(vscode_paths.platform, "system", lambda: "Windows")
    monkeypatch.delenv("APPDATA", raising=False)

    assert vscode_paths.resolve_user_dir() == (
        _home / "AppData" / "Roaming" / "Code" / "User"
    )


def test_backup_dir_for_uses_timestamp(tmp_path: Path) -> None:
    now = datetime.datetime(2026, 3, 4, 5, 6, 7)

    assert vscode_paths.backup_dir_for(tmp_path, now) == (
        tmp_path / "backup_2026-03-04_05-06-07"
    )


def test_default_log_path_is_in_home(_home: Path) -> None:
    assert vscode_paths.default_log_path() == _home / "vscode-custom-install.log"
