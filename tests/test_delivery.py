# tests/test_delivery.py

from __future__ import annotations

import logging

import pytest

from taskbot.core.delivery import deliver_all
from taskbot.core.ports import OutboundMessage

from .fakes import FakeMessenger


@pytest.mark.asyncio
async def test_deliver_all_sends_in_order() -> None:
    messenger = FakeMessenger()
    msgs = [
        OutboundMessage(text="reply", chat_id="room-1"),
        OutboundMessage(text="note", to_user_id=7),
    ]

    sent = await deliver_all(messenger, msgs)

    assert sent == 2
    assert [(m.text, m.chat_id, m.to_user_id) for m in messenger.sent] == [
        ("reply", "room-1", None),
        ("note", None, 7),
    ]


@pytest.mark.asyncio
async def test_deliver_all_logs_and_skips_failures(caplog: pytest.LogCaptureFixture) -> None:
    messenger = FakeMessenger(unreachable={7})
    msgs = [
        OutboundMessage(text="to 7", to_user_id=7),
        OutboundMessage(text="to 8", to_user_id=8),
    ]

    with caplog.at_level(logging.WARNING, logger="taskbot.core.delivery"):
        sent = await deliver_all(messenger, msgs)

    assert sent == 1
    assert [m.text for m in messenger.sent] == ["to 8"]
    assert "Delivery failed" in caplog.text
