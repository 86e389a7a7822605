# src/taskbot/connectors/console_connector.py

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Iterable
from datetime import datetime

from ..bot.formatting import INTERNAL_ERROR_TEXT
from ..core.ports import IncomingMessage, OutboundMessage
from ..core.state import AppState
from ..tasks.task_models import Identity

logger = logging.getLogger(__name__)

CONSOLE_CHAT_ID = "console"

AS_USAGE = "Usage: /as <user_id> <username>"


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _rewrite_prev_line(line: str) -> None:
    """
    Replace the last terminal line with `line`.
    Best-effort: if not a TTY, just print a new line.
    """
    try:
        if sys.stdout.isatty():
            sys.stdout.write("\033[1A\033[2K\r")
            sys.stdout.write(line + "\n")
            sys.stdout.flush()
        else:
            print(line)
    except Exception:
        print(line)


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def parse_identity_switch(arg_line: str) -> Identity | None:
    """Parse the arguments of "/as <user_id> <username>"."""
    parts = arg_line.split()
    if len(parts) != 2:
        return None
    raw_id, username = parts
    try:
        user_id = int(raw_id)
    except ValueError:
        return None
    if user_id <= 0:
        return None
    return Identity(user_id=user_id, username=username.lstrip("@"))


def render_outbound(messages: Iterable[OutboundMessage], me: Identity) -> list[str]:
    """
    Console view of router output.

    Replies and notifications for the local identity are shown as-is; notifications
    for anyone else are prefixed with their target so a single terminal can play
    several users.
    """
    lines: list[str] = []
    for msg in messages:
        if msg.to_user_id is None:
            lines.append(msg.text)
        elif msg.to_user_id == me.user_id:
            lines.append(f"[notification] {msg.text}")
        else:
            lines.append(f"[-> user {msg.to_user_id}] {msg.text}")
    return lines


def run_console_loop(state: AppState, *, read_line: Callable[[str], str] = input) -> None:
    settings = state.settings
    me = Identity(
        user_id=int(getattr(settings, "console_user_id", 1)),
        username=str(getattr(settings, "console_username", "console")),
    )

    logger.info("Console connector started as user=%s (@%s).", me.user_id, me.username)
    _print_ts("[CONSOLE] Type commands. Use /help for commands, /as to switch user, /exit to quit.\n")

    while True:
        try:
            user_input = read_line(f"@{me.username}> ").strip()
            _rewrite_prev_line(f"[{_ts_local()}] @{me.username}> {user_input}")
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        lowered = user_input.lower()
        if lowered in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if lowered == "/as" or lowered.startswith("/as "):
            switched = parse_identity_switch(user_input[3:])
            if switched is None:
                _print_ts(AS_USAGE)
                continue
            me = switched
            logger.info("Console identity switched to user=%s (@%s).", me.user_id, me.username)
            _print_ts(f"Now acting as @{me.username} (id={me.user_id}).")
            continue

        msg = IncomingMessage(
            chat_id=CONSOLE_CHAT_ID,
            sender_id=me.user_id,
            sender_username=me.username,
            text=user_input,
        )
        try:
            out = state.router.handle(msg)
        except Exception:
            logger.exception("Command handler crashed.")
            _print_ts(INTERNAL_ERROR_TEXT)
            continue

        for line in render_outbound(out, me):
            _print_ts(line)

    logger.info("Console connector finished.")
