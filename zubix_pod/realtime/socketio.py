"""Socket.IO gateway for the frontend.

Current frontend convention:
- URL base: ws://<host>:8000
- Socket.IO path: settings.SOCKETIO_PATH (default /ws/socket.io/)
- Auth: `auth.token` (JWT access token); `query.token` is accepted too

``build_gateway()`` is called once at process start (see ``config.asgi``) and
the resulting ``Gateway`` is handed to whoever needs to publish, e.g. the
notification publisher. There is no module-level server instance.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from dataclasses import field
from typing import TYPE_CHECKING
from typing import Any

import socketio
from asgiref.sync import async_to_sync
from django.conf import settings

from .auth import authenticate_handshake
from .dispatch import EVENT_ROUTES
from .dispatch import dispatch
from .handlers.rooms import disconnect_effects
from .naming import room_for_user
from .state import Broadcast
from .state import ConnectionState
from .state import Enter
from .state import Leave
from .state import Reply

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Iterable

    from .state import Effect
    from .state import Identity

logger = logging.getLogger(__name__)


@dataclass
class Connection:
    identity: Identity
    state: ConnectionState
    # Serializes this connection's events; other connections never wait on it.
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)


class Gateway:
    """Owns the Socket.IO server and the per-connection session state."""

    def __init__(self, server: socketio.AsyncServer):
        self.sio = server
        self.connections: dict[str, Connection] = {}
        self._register()

    def _register(self) -> None:
        self.sio.on("connect", self.on_connect)
        self.sio.on("disconnect", self.on_disconnect)
        for event in EVENT_ROUTES:
            self.sio.on(event, self._event_handler(event))

    def _event_handler(self, event: str):
        async def handler(sid: str, data: Any = None):
            await self.handle_event(sid, event, data)

        handler.__name__ = f"on_{event.replace('-', '_')}"
        return handler

    async def on_connect(self, sid: str, environ: dict[str, Any], auth: Any = None):
        identity = await authenticate_handshake(environ, auth)

        channel = room_for_user(identity.id)
        self.connections[sid] = Connection(
            identity=identity,
            state=ConnectionState(channels=frozenset({channel})),
        )
        await self.sio.save_session(
            sid, {"user_id": identity.id, "username": identity.username}
        )
        # Always join the per-user notification channel.
        await self.sio.enter_room(sid, channel)
        logger.info("User connected: %s (%s)", identity.username, identity.id)

    async def on_disconnect(self, sid: str, reason: Any = None):
        connection = self.connections.pop(sid, None)
        if connection is None:
            return
        async with connection.lock:
            logger.info(
                "User disconnected: %s (%s)",
                connection.identity.username,
                connection.identity.id,
            )
            await self.apply(sid, disconnect_effects(connection.state, connection.identity))

    async def handle_event(self, sid: str, event: str, data: Any) -> None:
        connection = self.connections.get(sid)
        if connection is None:
            logger.warning("Dropping %s from unknown session %s", event, sid)
            return
        async with connection.lock:
            result = await dispatch(event, connection.state, connection.identity, data)
            connection.state = result.state
            await self.apply(sid, result.effects)

    async def apply(self, sid: str, effects: Iterable[Effect]) -> None:
        for effect in effects:
            if isinstance(effect, Enter):
                await self.sio.enter_room(sid, effect.channel)
            elif isinstance(effect, Leave):
                await self.sio.leave_room(sid, effect.channel)
            elif isinstance(effect, Reply):
                await self.sio.emit(effect.event, effect.data, to=sid)
            elif isinstance(effect, Broadcast):
                await self.sio.emit(
                    effect.event,
                    effect.data,
                    room=effect.channel,
                    skip_sid=None if effect.include_self else sid,
                )

    # Publishing API for collaborators -------------------------------------

    async def emit_to_room(self, room: str, event: str, payload: dict[str, Any]) -> None:
        await self.sio.emit(event, payload, room=room)

    async def emit_to_user(self, user_id: int, event: str, payload: dict[str, Any]) -> None:
        await self.emit_to_room(room_for_user(user_id), event, payload)

    def publish_to_room(self, room: str, event: str, payload: dict[str, Any]) -> None:
        """Emit an event to a room from sync Django code."""

        async_to_sync(self.emit_to_room)(room, event, payload)

    def publish_to_user(self, user_id: int, event: str, payload: dict[str, Any]) -> None:
        """Emit to a user's live connections; a no-op when nobody is connected."""

        self.publish_to_room(room_for_user(user_id), event, payload)


def build_gateway(**overrides: Any) -> Gateway:
    options: dict[str, Any] = {
        "async_mode": "asgi",
        "cors_allowed_origins": settings.SOCKETIO_CORS_ALLOWED_ORIGINS,
        "ping_interval": settings.SOCKETIO_PING_INTERVAL,
        "ping_timeout": settings.SOCKETIO_PING_TIMEOUT,
        "logger": False,
        "engineio_logger": False,
    }
    options.update(overrides)
    return Gateway(socketio.AsyncServer(**options))
