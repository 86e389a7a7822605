# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field

from taskbot.core.ports import IncomingMessage, OutboundMessenger

ALICE = (1, "alice")
BOB = (2, "bob")
CAROL = (3, "carol")


def incoming(user: tuple[int, str], text: str, chat_id: str | None = None) -> IncomingMessage:
    user_id, username = user
    return IncomingMessage(
        chat_id=chat_id or f"chat-{user_id}",
        sender_id=user_id,
        sender_username=username,
        text=text,
    )


@dataclass(slots=True)
class SentMessage:
    text: str
    chat_id: str | None
    to_user_id: int | None


@dataclass(slots=True)
class FakeMessenger(OutboundMessenger):
    """
    Fake OutboundMessenger used by delivery/connector tests.

    Sends addressed to a user in `unreachable` raise, like a transport that
    cannot find the user.
    """

    sent: list[SentMessage] = field(default_factory=list)
    unreachable: set[int] = field(default_factory=set)

    async def send_text(
        self,
        *,
        text: str,
        chat_id: str | None = None,
        to_user_id: int | None = None,
    ) -> None:
        if to_user_id is not None and to_user_id in self.unreachable:
            raise ConnectionError(f"user {to_user_id} unreachable")
        self.sent.append(SentMessage(text=text, chat_id=chat_id, to_user_id=to_user_id))
