# src/taskbot/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class TaskError(StrEnum):
    """
    Error kinds returned by the store and the router.

    NO_TASKS is not a failure: it is the display state of an empty list query.
    """

    NOT_FOUND = "not_found"
    NOT_YOURS = "not_yours"
    WRONG_FORMAT = "wrong_format"
    NO_TASKS = "no_tasks"


@dataclass(frozen=True, slots=True)
class Identity:
    user_id: int
    username: str

    @property
    def is_set(self) -> bool:
        return self.user_id != 0


# "Nobody": the assignee of an unassigned task and the previous assignee
# reported by assign_task when the task was free.
NO_IDENTITY = Identity(user_id=0, username="")


@dataclass(slots=True)
class Task:
    """Mutable record owned by TaskStore. Never handed out to callers."""

    id: int
    name: str
    owner: Identity
    assignee: Identity = NO_IDENTITY
    # Set by assign, cleared by unassign; the assignee is NO_IDENTITY whenever this is False.
    assigned: bool = False

    def snapshot(self) -> TaskSnapshot:
        return TaskSnapshot(
            id=self.id,
            name=self.name,
            owner_id=self.owner.user_id,
            owner_username=self.owner.username,
            assignee_id=self.assignee.user_id,
            assignee_username=self.assignee.username,
            assigned=self.assigned,
        )


@dataclass(frozen=True, slots=True)
class TaskSnapshot:
    id: int
    name: str
    owner_id: int
    owner_username: str
    assignee_id: int
    assignee_username: str
    assigned: bool


@dataclass(frozen=True, slots=True)
class TaskResult:
    """
    Outcome of a mutating store call.

    On failure only `error` is meaningful. On success `name` and `owner` are set,
    and assign_task also fills `previous_assignee` (NO_IDENTITY when the task was free).
    """

    error: TaskError | None = None
    name: str = ""
    owner: Identity = NO_IDENTITY
    previous_assignee: Identity = NO_IDENTITY

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, error: TaskError) -> TaskResult:
        return cls(error=error)
