# src/taskbot/connectors/identities.py

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from ..tasks.task_models import Identity

logger = logging.getLogger(__name__)


def username_from_mxid(mxid: str) -> str:
    """"@alice:example.org" -> "alice". Falls back to the raw id."""
    raw = (mxid or "").strip()
    local = raw[1:] if raw.startswith("@") else raw
    local = local.split(":", 1)[0]
    return local or raw


@dataclass(slots=True)
class _Entry:
    identity: Identity
    mxid: str
    last_room_id: str | None = None


class IdentityDirectory:
    """
    Maps transport user ids (Matrix "@user:server") to the integer identities
    the task store works with, and remembers where each user can be reached.

    Ids are handed out from 1 upward in order of first appearance and are
    stable for the process lifetime. 0 is never used: it means "nobody".
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_mxid: dict[str, _Entry] = {}
        self._by_id: dict[int, _Entry] = {}
        self._last_id = 0

    def identify(self, mxid: str, *, room_id: str | None = None) -> Identity:
        """Return the identity for mxid, registering it on first sight, and record room_id."""
        with self._lock:
            entry = self._by_mxid.get(mxid)
            if entry is None:
                self._last_id += 1
                entry = _Entry(
                    identity=Identity(user_id=self._last_id, username=username_from_mxid(mxid)),
                    mxid=mxid,
                )
                self._by_mxid[mxid] = entry
                self._by_id[entry.identity.user_id] = entry
                logger.debug("Registered %s as user_id=%s", mxid, entry.identity.user_id)
            if room_id:
                entry.last_room_id = room_id
            return entry.identity

    def mxid_for(self, user_id: int) -> str | None:
        with self._lock:
            entry = self._by_id.get(user_id)
            return entry.mxid if entry else None

    def room_for(self, user_id: int) -> str | None:
        """Room where user_id last wrote to the bot, if any."""
        with self._lock:
            entry = self._by_id.get(user_id)
            return entry.last_room_id if entry else None
