# tests/test_config.py

from __future__ import annotations

import os
from pathlib import Path

import pytest

from taskbot.config import Settings


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in list(os.environ):
        if name.startswith("TASKBOT_"):
            monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("USER", "tester")

    s = Settings.from_env()

    assert s.app_name == "taskbot"
    assert s.console_enabled is True
    assert s.matrix_enabled is False
    assert s.console_user_id == 1
    assert s.console_username == "tester"
    assert s.data_dir == Path(".local/taskbot")
    assert s.matrix_store_path == Path(".local/taskbot/matrix_store")
    assert s.matrix_rooms == []
    assert s.matrix_workers == 8


def test_env_overrides(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    clean_env.setenv("TASKBOT_DATA_DIR", str(tmp_path))
    clean_env.setenv("TASKBOT_MATRIX_ENABLED", "yes")
    clean_env.setenv("TASKBOT_CONSOLE_ENABLED", "off")
    clean_env.setenv("TASKBOT_MATRIX_ROOMS", "!a:srv, !b:srv")
    clean_env.setenv("TASKBOT_CONSOLE_USER_ID", "42")
    clean_env.setenv("TASKBOT_CONSOLE_USERNAME", "boss")

    s = Settings.from_env()

    assert s.matrix_enabled is True
    assert s.console_enabled is False
    assert s.matrix_rooms == ["!a:srv", "!b:srv"]
    assert s.matrix_store_path == tmp_path / "matrix_store"
    assert (s.console_user_id, s.console_username) == (42, "boss")


@pytest.mark.parametrize("raw", ["0", "-5", "abc"])
def test_console_user_id_must_be_real(clean_env: pytest.MonkeyPatch, raw: str) -> None:
    clean_env.setenv("TASKBOT_CONSOLE_USER_ID", raw)
    assert Settings.from_env().console_user_id == 1


def test_workers_at_least_one(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("TASKBOT_MATRIX_WORKERS", "0")
    assert Settings.from_env().matrix_workers == 1
