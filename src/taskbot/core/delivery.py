# src/taskbot/core/delivery.py

from __future__ import annotations

import logging
from collections.abc import Iterable

from .ports import OutboundMessage, OutboundMessenger

logger = logging.getLogger(__name__)


async def deliver_all(messenger: OutboundMessenger, messages: Iterable[OutboundMessage]) -> int:
    """
    Send messages in order, fire-and-forget.

    A failed send is logged and skipped; the rest are still attempted.
    Returns the number of messages that went out.
    """
    sent = 0
    for msg in messages:
        try:
            await messenger.send_text(text=msg.text, chat_id=msg.chat_id, to_user_id=msg.to_user_id)
            sent += 1
        except Exception:
            logger.warning(
                "Delivery failed chat_id=%s to_user_id=%s",
                msg.chat_id,
                msg.to_user_id,
                exc_info=True,
            )
    return sent
