# tests/test_bootstrap.py

from __future__ import annotations

import logging
from types import SimpleNamespace

from taskbot.cli.bootstrap import create_initial_state
from taskbot.logging_setup import setup_logging

from .fakes import ALICE, incoming


def test_state_wires_one_store_into_router(settings: SimpleNamespace) -> None:
    state = create_initial_state(settings=settings)

    assert settings.data_dir.is_dir()
    state.router.handle(incoming(ALICE, "/new Fix bug"))
    assert state.task_store.count_tasks() == 1


def test_states_are_isolated(settings: SimpleNamespace) -> None:
    a = create_initial_state(settings=settings)
    b = create_initial_state(settings=settings)

    a.router.handle(incoming(ALICE, "/new only in a"))

    assert b.task_store.count_tasks() == 0


def test_setup_logging_writes_file(settings: SimpleNamespace) -> None:
    root = logging.getLogger()
    saved = list(root.handlers), root.level
    try:
        log_file = setup_logging(log_dir=settings.data_dir)
        logging.getLogger("taskbot.test").debug("hello file")
        for h in root.handlers:
            h.flush()
        assert "hello file" in log_file.read_text("utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        handlers, level = saved
        for h in handlers:
            root.addHandler(h)
        root.setLevel(level)
        logging.captureWarnings(False)
