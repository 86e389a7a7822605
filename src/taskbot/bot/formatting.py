# src/taskbot/bot/formatting.py

"""
User-facing texts.

Everything the bot says lives here so connectors and the router never
build strings on their own. List renderers sort by id: the store returns
tasks in no particular order.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from ..tasks.task_models import TaskError, TaskSnapshot

ERROR_TEXTS: dict[TaskError, str] = {
    TaskError.NOT_FOUND: "Task not found",
    TaskError.NOT_YOURS: "Task is not assigned to you",
    TaskError.WRONG_FORMAT: "Wrong command format.",
    TaskError.NO_TASKS: "No tasks",
}

INTERNAL_ERROR_TEXT = "Internal error while handling a command."

ENTRY_SEPARATOR = "\n\n"


def error_text(error: TaskError) -> str:
    return ERROR_TEXTS[error]


def task_created(name: str, task_id: int) -> str:
    return f'Task "{name}" created, id={task_id}'


def task_assigned_to_you(name: str) -> str:
    return f'Task "{name}" assigned to you'


def task_assigned_to(name: str, username: str) -> str:
    return f'Task "{name}" assigned to @{username}'


def unassign_accepted() -> str:
    return "Accepted"


def task_left_without_assignee(name: str) -> str:
    return f'Task "{name}" has no assignee now'


def task_resolved(name: str) -> str:
    return f'Task "{name}" resolved'


def task_resolved_by(name: str, username: str) -> str:
    return f'Task "{name}" resolved by @{username}'


def _header(task: TaskSnapshot) -> str:
    return f"{task.id}. {task.name} by @{task.owner_username}"


def _render(tasks: Iterable[TaskSnapshot], actions: Callable[[TaskSnapshot], str]) -> str:
    ordered = sorted(tasks, key=lambda t: t.id)
    if not ordered:
        return error_text(TaskError.NO_TASKS)
    return ENTRY_SEPARATOR.join(f"{_header(t)}\n{actions(t)}" for t in ordered)


def render_all_tasks(tasks: Iterable[TaskSnapshot], viewer_id: int) -> str:
    """
    /tasks view. The action line depends on who is looking:
    free tasks offer /assign, the viewer's own tasks offer unassign/resolve,
    anyone else's show the assignee.
    """

    def actions(t: TaskSnapshot) -> str:
        if not t.assigned:
            return f"/assign_{t.id}"
        if t.assignee_id == viewer_id:
            return f"assignee: me\n/unassign_{t.id} /resolve_{t.id}"
        return f"assignee: @{t.assignee_username}"

    return _render(tasks, actions)


def render_my_tasks(tasks: Iterable[TaskSnapshot]) -> str:
    return _render(tasks, lambda t: f"/unassign_{t.id} /resolve_{t.id}")


def render_owned_tasks(tasks: Iterable[TaskSnapshot]) -> str:
    return _render(tasks, lambda t: f"/assign_{t.id}")
