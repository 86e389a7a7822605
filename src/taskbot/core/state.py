# src/taskbot/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..bot.router import CommandRouter
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    """
    Everything a connector needs, built once in cli.bootstrap.

    settings is typed loosely so tests can pass a SimpleNamespace.
    """

    settings: Any
    task_store: TaskStore
    router: CommandRouter
