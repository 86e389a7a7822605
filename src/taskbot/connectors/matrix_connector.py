# src/taskbot/connectors/matrix_connector.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
import time
from dataclasses import dataclass

from nio import AsyncClient, MatrixRoom, RoomMessageText, exceptions

from ..bot.formatting import INTERNAL_ERROR_TEXT
from ..bot.router import CommandRouter
from ..core.delivery import deliver_all
from ..core.ports import IncomingMessage, OutboundMessage, OutboundMessenger
from ..core.state import AppState
from .identities import IdentityDirectory
from .matrix_client import create_matrix_client

logger = logging.getLogger(__name__)


def _ms_now() -> int:
    return int(time.time() * 1000)


def _room_allowlist(settings_rooms: list[str]) -> set[str] | None:
    rooms = [r.strip() for r in (settings_rooms or []) if str(r).strip()]
    return set(rooms) if rooms else None


async def _send_text(client: AsyncClient, *, room_id: str, text: str) -> None:
    await client.room_send(
        room_id=room_id,
        message_type="m.room.message",
        content={"msgtype": "m.text", "body": text},
        ignore_unverified_devices=True,
    )


class MatrixMessenger:
    """
    OutboundMessenger over a nio client.

    Replies go to their chat (room). Notifications go to the room where the
    target user last talked to the bot; a user the bot has never seen is
    unreachable and the send fails.
    """

    def __init__(self, client: AsyncClient, directory: IdentityDirectory) -> None:
        self._client = client
        self._directory = directory

    async def send_text(
        self,
        *,
        text: str,
        chat_id: str | None = None,
        to_user_id: int | None = None,
    ) -> None:
        room_id = chat_id
        if room_id is None and to_user_id is not None:
            room_id = self._directory.room_for(to_user_id)
        if not room_id:
            raise LookupError(f"No room known for user_id={to_user_id}")
        await _send_text(self._client, room_id=room_id, text=text)


class MatrixCommandBridge:
    """
    Turns one Matrix text event into router output and delivers it.

    The router runs in a worker thread so slow handling never stalls the sync
    loop; at most `workers` messages are handled at the same time.
    """

    def __init__(
        self,
        router: CommandRouter,
        directory: IdentityDirectory,
        messenger: OutboundMessenger,
        *,
        workers: int = 8,
    ) -> None:
        self._router = router
        self._directory = directory
        self._messenger = messenger
        self._limiter = asyncio.Semaphore(max(1, int(workers)))

    async def handle(self, *, room_id: str, sender: str, body: str) -> list[OutboundMessage]:
        me = self._directory.identify(sender, room_id=room_id)
        msg = IncomingMessage(
            chat_id=room_id,
            sender_id=me.user_id,
            sender_username=me.username,
            text=body,
        )

        async with self._limiter:
            try:
                out = await asyncio.to_thread(self._router.handle, msg)
            except Exception:
                logger.exception("Command handler crashed.")
                out = [OutboundMessage(text=INTERNAL_ERROR_TEXT, chat_id=room_id)]

        await deliver_all(self._messenger, out)
        return out


async def _run_matrix_bot(state: AppState, stop_event: asyncio.Event) -> None:
    """
    Matrix connector (async):

    init -> callbacks -> sync loop

    Shutdown model:
    - main thread sets stop_event via loop.call_soon_threadsafe(stop_event.set)
    - we run a manual sync loop so we can exit promptly.
    """
    settings = state.settings
    if not getattr(settings, "matrix_enabled", False):
        logger.info("Matrix connector disabled via settings.")
        return

    startup_ts = _ms_now()
    allowed_rooms = _room_allowlist(getattr(settings, "matrix_rooms", []) or [])
    logger.info("Matrix allowed_rooms=%s", allowed_rooms if allowed_rooms is not None else "ALL")

    client = await create_matrix_client(settings)
    if client is None:
        logger.error("Matrix client creation failed; connector will stop.")
        return

    directory = IdentityDirectory()
    bridge = MatrixCommandBridge(
        state.router,
        directory,
        MatrixMessenger(client, directory),
        workers=int(getattr(settings, "matrix_workers", 8)),
    )
    in_flight: set[asyncio.Task] = set()

    async def message_callback(room: MatrixRoom, event: RoomMessageText) -> None:
        # Ignore backlog from before startup.
        ts = getattr(event, "server_timestamp", None)
        if ts is not None and ts <= startup_ts:
            return

        if event.sender == client.user_id:
            return

        if allowed_rooms is not None and room.room_id not in allowed_rooms:
            return

        body = (event.body or "").strip()
        if not body.startswith("/"):
            return

        logger.info("Matrix <%s> %s: %r", room.display_name, event.sender, body)

        # Handle concurrently; the sync loop keeps going.
        task = asyncio.create_task(bridge.handle(room_id=room.room_id, sender=event.sender, body=body))
        in_flight.add(task)
        task.add_done_callback(in_flight.discard)

    client.add_event_callback(message_callback, RoomMessageText)

    try:
        logger.info("Matrix initial sync...")
        await client.sync(timeout=30000, full_state=True)
        logger.info("Matrix initial sync done. Joined rooms: %d", len(client.rooms))

        while not stop_event.is_set():
            await client.sync(timeout=30000, full_state=False)

    except asyncio.CancelledError:
        logger.info("Matrix connector cancelled.")
    except exceptions.OlmUnverifiedDeviceError:
        logger.exception("Matrix connector stopped: unverified device.")
    except Exception:
        logger.exception("Matrix connector crashed.")
    finally:
        if in_flight:
            await asyncio.gather(*in_flight, return_exceptions=True)
        with contextlib.suppress(Exception):
            await client.close()
        logger.info("Matrix connector stopped.")


@dataclass
class MatrixBackgroundRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except Exception:
            logger.debug("Failed to signal Matrix stop.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_matrix_in_background(state: AppState) -> MatrixBackgroundRunner | None:
    """
    Start Matrix connector in a background thread (so console REPL can run in parallel).

    The console REPL blocks on input(); the Matrix connector needs its own event loop.
    """
    if not getattr(state.settings, "matrix_enabled", False):
        logger.info("Matrix connector disabled, not starting.")
        return None

    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        ready.set()

        try:
            loop.run_until_complete(_run_matrix_bot(state, stop_event))
        finally:
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name="matrix", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        logger.error("Matrix thread did not initialize properly.")
        return None

    logger.info("Matrix background thread started.")
    return MatrixBackgroundRunner(thread=t, loop=loop, stop_event=stop_event)
