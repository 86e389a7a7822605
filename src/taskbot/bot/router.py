# src/taskbot/bot/router.py

"""
Command router.

Transport-agnostic: connectors hand in IncomingMessage, the router runs
exactly one store call and returns the messages to send (reply first,
then notifications). It holds no locks of its own; every store call is
one atomic step and notifications are built from the returned result.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from ..core.ports import IncomingMessage, OutboundMessage, TaskRepo
from ..tasks.task_models import TaskError
from . import formatting

logger = logging.getLogger(__name__)

CommandHandler = Callable[[IncomingMessage, str], list[OutboundMessage]]
IdCommandHandler = Callable[[IncomingMessage, int], list[OutboundMessage]]

_TASK_ID_RE = re.compile(r"[0-9]+")

# Task ids are 64-bit signed integers, like the identities.
MAX_TASK_ID = 2**63 - 1


def parse_command(line: str) -> tuple[str, str]:
    """Split "/cmd rest of line" on the first whitespace run -> ("/cmd", "rest of line")."""
    parts = line.strip().split(maxsplit=1)
    if not parts:
        return "", ""
    cmd = parts[0].lower()
    arg = parts[1].strip() if len(parts) > 1 else ""
    return cmd, arg


def parse_task_id(cmd: str, prefix: str) -> int | None:
    suffix = cmd[len(prefix):]
    if not _TASK_ID_RE.fullmatch(suffix):
        return None
    task_id = int(suffix)
    if task_id > MAX_TASK_ID:
        return None
    return task_id


class CommandRouter:
    """Maps slash-commands to TaskRepo calls and builds replies/notifications."""

    def __init__(self, store: TaskRepo) -> None:
        self._store = store
        self._handlers: dict[str, CommandHandler] = {}
        self._id_handlers: dict[str, IdCommandHandler] = {}
        self._help: dict[str, str] = {}

        self.register("/new", self._cmd_new, "Create a task: /new <text>.")
        self.register("/tasks", self._cmd_tasks, "List all tasks.")
        self.register("/my", self._cmd_my, "List tasks assigned to you.")
        self.register("/owner", self._cmd_owner, "List tasks you created.")
        self.register_id_command("/assign_", self._cmd_assign, "Take task <id>.")
        self.register_id_command("/unassign_", self._cmd_unassign, "Give task <id> back.")
        self.register_id_command("/resolve_", self._cmd_resolve, "Mark task <id> as done.")
        self.register("/help", self._cmd_help, "Show available commands.")

    # ---- registry ----

    def register(self, name: str, handler: CommandHandler, help_text: str) -> None:
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text

    def register_id_command(self, prefix: str, handler: IdCommandHandler, help_text: str) -> None:
        key = prefix.lower()
        self._id_handlers[key] = handler
        self._help[f"{key}<id>"] = help_text

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  {name} - {help_text}")
        return "\n".join(lines)

    # ---- dispatch ----

    def handle(self, msg: IncomingMessage) -> list[OutboundMessage]:
        cmd, arg = parse_command(msg.text)

        handler = self._handlers.get(cmd)
        if handler is not None:
            return handler(msg, arg)

        for prefix, id_handler in self._id_handlers.items():
            if cmd.startswith(prefix):
                task_id = parse_task_id(cmd, prefix)
                if task_id is None:
                    return self._reply_error(msg, TaskError.WRONG_FORMAT)
                return id_handler(msg, task_id)

        logger.debug("Unrecognized input from user=%s: %r", msg.sender_id, cmd)
        return self._reply_error(msg, TaskError.WRONG_FORMAT)

    @staticmethod
    def _reply(msg: IncomingMessage, text: str) -> OutboundMessage:
        return OutboundMessage(text=text, chat_id=msg.chat_id)

    def _reply_error(self, msg: IncomingMessage, error: TaskError) -> list[OutboundMessage]:
        return [self._reply(msg, formatting.error_text(error))]

    # ---- commands ----

    def _cmd_help(self, msg: IncomingMessage, arg: str) -> list[OutboundMessage]:
        return [self._reply(msg, self.build_help())]

    def _cmd_new(self, msg: IncomingMessage, arg: str) -> list[OutboundMessage]:
        if not arg:
            return self._reply_error(msg, TaskError.WRONG_FORMAT)
        task_id = self._store.create_task(arg, msg.sender_id, msg.sender_username)
        logger.info("Task %s created by user=%s", task_id, msg.sender_id)
        return [self._reply(msg, formatting.task_created(arg, task_id))]

    def _cmd_tasks(self, msg: IncomingMessage, arg: str) -> list[OutboundMessage]:
        tasks = self._store.get_all_tasks()
        return [self._reply(msg, formatting.render_all_tasks(tasks, msg.sender_id))]

    def _cmd_my(self, msg: IncomingMessage, arg: str) -> list[OutboundMessage]:
        tasks = self._store.get_assigned_tasks(msg.sender_id)
        return [self._reply(msg, formatting.render_my_tasks(tasks))]

    def _cmd_owner(self, msg: IncomingMessage, arg: str) -> list[OutboundMessage]:
        tasks = self._store.get_owned_tasks(msg.sender_id)
        return [self._reply(msg, formatting.render_owned_tasks(tasks))]

    def _cmd_assign(self, msg: IncomingMessage, task_id: int) -> list[OutboundMessage]:
        res = self._store.assign_task(task_id, msg.sender_id, msg.sender_username)
        if res.error is not None:
            return self._reply_error(msg, res.error)

        out = [self._reply(msg, formatting.task_assigned_to_you(res.name))]
        note = formatting.task_assigned_to(res.name, msg.sender_username)

        # The previous holder hears about it instead of the owner.
        prev = res.previous_assignee
        if prev.is_set and prev.user_id != msg.sender_id:
            out.append(OutboundMessage(text=note, to_user_id=prev.user_id))
        elif res.owner.user_id != msg.sender_id:
            out.append(OutboundMessage(text=note, to_user_id=res.owner.user_id))
        return out

    def _cmd_unassign(self, msg: IncomingMessage, task_id: int) -> list[OutboundMessage]:
        res = self._store.unassign_task(task_id, msg.sender_id)
        if res.error is not None:
            return self._reply_error(msg, res.error)

        return [
            self._reply(msg, formatting.unassign_accepted()),
            OutboundMessage(
                text=formatting.task_left_without_assignee(res.name),
                to_user_id=res.owner.user_id,
            ),
        ]

    def _cmd_resolve(self, msg: IncomingMessage, task_id: int) -> list[OutboundMessage]:
        res = self._store.resolve_task(task_id, msg.sender_id)
        if res.error is not None:
            return self._reply_error(msg, res.error)

        out = [self._reply(msg, formatting.task_resolved(res.name))]
        if res.owner.user_id != msg.sender_id:
            out.append(
                OutboundMessage(
                    text=formatting.task_resolved_by(res.name, msg.sender_username),
                    to_user_id=res.owner.user_id,
                )
            )
        return out
