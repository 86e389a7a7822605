# src/taskbot/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The router depends on Protocols instead of concrete implementations.
This keeps connectors/storage swappable and makes testing easier.
"""

from dataclasses import dataclass
from typing import Awaitable, Protocol

from ..tasks.task_models import TaskResult, TaskSnapshot


@dataclass(frozen=True, slots=True)
class IncomingMessage:
    """One user message as handed over by a connector."""

    chat_id: str
    sender_id: int
    sender_username: str
    text: str


@dataclass(frozen=True, slots=True)
class OutboundMessage:
    """
    Something the router wants delivered.

    A reply carries chat_id (the sender's chat); a notification carries
    to_user_id and the connector decides where that user is reachable.
    """

    text: str
    chat_id: str | None = None
    to_user_id: int | None = None


class OutboundMessenger(Protocol):
    """
    Connector-side port: how outbound messages leave the process.

    Implementations may raise; callers go through deliver_all(), which logs
    and drops failures.
    """

    def send_text(
            self,
            *,
            text: str,
            chat_id: str | None = None,
            to_user_id: int | None = None,
    ) -> Awaitable[None]: ...


class TaskRepo(Protocol):
    # Queries (unordered snapshots)
    def get_all_tasks(self) -> list[TaskSnapshot]: ...
    def get_owned_tasks(self, owner_id: int) -> list[TaskSnapshot]: ...
    def get_assigned_tasks(self, assignee_id: int) -> list[TaskSnapshot]: ...
    def count_tasks(self) -> int: ...
    def get_task(self, task_id: int) -> TaskSnapshot | None: ...

    # Mutations
    def create_task(self, name: str, owner_id: int, owner_username: str) -> int: ...
    def assign_task(self, task_id: int, assignee_id: int, assignee_username: str) -> TaskResult: ...
    def unassign_task(self, task_id: int, requester_id: int) -> TaskResult: ...
    def resolve_task(self, task_id: int, requester_id: int) -> TaskResult: ...
