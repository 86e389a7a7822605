# src/taskbot/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import threading
from collections.abc import Iterator

from .task_models import NO_IDENTITY, Identity, Task, TaskError, TaskResult, TaskSnapshot

logger = logging.getLogger(__name__)


class _ReadWriteLock:
    """
    Writer-preferring readers-writer lock.

    Any number of readers may hold the lock together; a writer holds it alone.
    Waiting writers block new readers so list queries cannot starve mutations.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextlib.contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextlib.contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class TaskStore:
    """
    In-memory task store.

    Thread-safety:
    - the id counter has its own lock, so ids are unique even though
      allocating an id and inserting the task are two separate steps
    - mutations take the write side of a readers-writer lock, queries the read side
    - ownership checks and the mutation they guard run under one write acquisition

    List queries return snapshots in no particular order; callers sort.
    """

    def __init__(self) -> None:
        self._tasks: dict[int, Task] = {}
        self._lock = _ReadWriteLock()
        self._last_id = 0
        self._id_lock = threading.Lock()
        logger.info("TaskStore ready (in-memory)")

    def close(self) -> None:
        """Compatibility hook for shutdown (nothing to release)."""
        return

    def _next_id(self) -> int:
        with self._id_lock:
            self._last_id += 1
            return self._last_id

    # ---- queries ----

    def count_tasks(self) -> int:
        with self._lock.read():
            return len(self._tasks)

    def get_task(self, task_id: int) -> TaskSnapshot | None:
        with self._lock.read():
            task = self._tasks.get(task_id)
            return task.snapshot() if task else None

    def get_all_tasks(self) -> list[TaskSnapshot]:
        with self._lock.read():
            return [t.snapshot() for t in self._tasks.values()]

    def get_owned_tasks(self, owner_id: int) -> list[TaskSnapshot]:
        with self._lock.read():
            return [t.snapshot() for t in self._tasks.values() if t.owner.user_id == owner_id]

    def get_assigned_tasks(self, assignee_id: int) -> list[TaskSnapshot]:
        with self._lock.read():
            return [
                t.snapshot()
                for t in self._tasks.values()
                if t.assigned and t.assignee.user_id == assignee_id
            ]

    # ---- mutations ----

    def create_task(self, name: str, owner_id: int, owner_username: str) -> int:
        task_id = self._next_id()
        task = Task(id=task_id, name=name, owner=Identity(owner_id, owner_username))

        with self._lock.write():
            self._tasks[task_id] = task

        logger.debug("Task created id=%s owner=%s", task_id, owner_id)
        return task_id

    def assign_task(self, task_id: int, assignee_id: int, assignee_username: str) -> TaskResult:
        """
        Give the task to assignee, taking it from whoever held it.

        Reassigning an already assigned task is allowed; the previous holder is
        reported so the caller can notify them.
        """
        with self._lock.write():
            task = self._tasks.get(task_id)
            if task is None:
                return TaskResult.failed(TaskError.NOT_FOUND)

            previous = task.assignee if task.assigned else NO_IDENTITY
            task.assignee = Identity(assignee_id, assignee_username)
            task.assigned = True
            result = TaskResult(name=task.name, owner=task.owner, previous_assignee=previous)

        logger.debug("Task %s assigned to %s (was %s)", task_id, assignee_id, previous.user_id)
        return result

    def unassign_task(self, task_id: int, requester_id: int) -> TaskResult:
        with self._lock.write():
            task = self._tasks.get(task_id)
            if task is None:
                return TaskResult.failed(TaskError.NOT_FOUND)
            # Checked against the flag, not the id: an unassigned task matches nobody.
            if not task.assigned or task.assignee.user_id != requester_id:
                return TaskResult.failed(TaskError.NOT_YOURS)

            task.assignee = NO_IDENTITY
            task.assigned = False
            result = TaskResult(name=task.name, owner=task.owner)

        logger.debug("Task %s unassigned by %s", task_id, requester_id)
        return result

    def resolve_task(self, task_id: int, requester_id: int) -> TaskResult:
        with self._lock.write():
            task = self._tasks.get(task_id)
            if task is None:
                return TaskResult.failed(TaskError.NOT_FOUND)
            if not task.assigned or task.assignee.user_id != requester_id:
                return TaskResult.failed(TaskError.NOT_YOURS)

            del self._tasks[task_id]
            result = TaskResult(name=task.name, owner=task.owner)

        logger.debug("Task %s resolved by %s", task_id, requester_id)
        return result
