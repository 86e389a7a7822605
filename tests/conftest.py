# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskbot.bot.router import CommandRouter
from taskbot.core.state import AppState
from taskbot.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and connectors.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="taskbot-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        console_enabled=True,
        matrix_enabled=False,
        console_user_id=1,
        console_username="alice",
        matrix_homeserver="",
        matrix_user_id="",
        matrix_password="",
        matrix_rooms=[],
        matrix_store_path=tmp_path / "data" / "matrix_store",
        matrix_workers=4,
    )


@pytest.fixture()
def store() -> TaskStore:
    return TaskStore()


@pytest.fixture()
def router(store: TaskStore) -> CommandRouter:
    return CommandRouter(store)


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore, router: CommandRouter) -> AppState:
    return AppState(settings=settings, task_store=store, router=router)
