"""Room session manager and room typing signals.

A connection may sit in many room channels at the transport level but only
the most recently joined room is *active*. Leave and typing events for any
other room are dropped silently.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

from django.utils import timezone

from zubix_pod.realtime.access import can_access_room_async
from zubix_pod.realtime.errors import UnauthorizedError
from zubix_pod.realtime.errors import ValidationError
from zubix_pod.realtime.naming import room_for_pod_room
from zubix_pod.realtime.payloads import RoomPayloadSerializer
from zubix_pod.realtime.payloads import parse_payload
from zubix_pod.realtime.state import Broadcast
from zubix_pod.realtime.state import Enter
from zubix_pod.realtime.state import HandlerResult
from zubix_pod.realtime.state import Leave
from zubix_pod.realtime.state import Reply

if TYPE_CHECKING:  # import for type checking only
    from zubix_pod.realtime.state import ConnectionState
    from zubix_pod.realtime.state import Effect
    from zubix_pod.realtime.state import Identity

logger = logging.getLogger(__name__)


def _user_left(identity: Identity, room_id: int) -> Broadcast:
    return Broadcast(
        room_for_pod_room(room_id),
        "user-left",
        {
            "user": identity.brief(),
            "roomId": room_id,
            "timestamp": timezone.now().isoformat(),
        },
    )


async def join_room(
    state: ConnectionState, identity: Identity, payload: Any
) -> HandlerResult:
    room_id = parse_payload(RoomPayloadSerializer, payload)["roomId"]

    if not await can_access_room_async(identity.id, room_id):
        msg = "You must be a member of this pod to join this room"
        raise UnauthorizedError(msg)

    channel = room_for_pod_room(room_id)
    effects: list[Effect] = []
    if channel not in state.channels:
        effects.append(Enter(channel))
        effects.append(
            Broadcast(
                channel,
                "user-joined",
                {
                    "user": identity.profile(),
                    "roomId": room_id,
                    "timestamp": timezone.now().isoformat(),
                },
            )
        )
    effects.append(
        Reply("room-joined", {"roomId": room_id, "message": "Successfully joined room"})
    )

    logger.info("%s joined room: %s", identity.username, room_id)
    return HandlerResult(
        state.entering(channel).with_active_room(room_id), tuple(effects)
    )


async def leave_room(
    state: ConnectionState, identity: Identity, payload: Any
) -> HandlerResult:
    room_id = parse_payload(RoomPayloadSerializer, payload)["roomId"]
    if state.active_room != room_id:
        return HandlerResult(state)

    channel = room_for_pod_room(room_id)
    logger.info("%s left room: %s", identity.username, room_id)
    return HandlerResult(
        state.leaving(channel).with_active_room(None),
        (
            Leave(channel),
            _user_left(identity, room_id),
            Reply("room-left", {"roomId": room_id, "message": "Successfully left room"}),
        ),
    )


def _typing(event: str):
    async def handler(
        state: ConnectionState, identity: Identity, payload: Any
    ) -> HandlerResult:
        try:
            room_id = parse_payload(RoomPayloadSerializer, payload)["roomId"]
        except ValidationError:
            return HandlerResult(state)
        if state.active_room != room_id:
            return HandlerResult(state)
        return HandlerResult(
            state,
            (
                Broadcast(
                    room_for_pod_room(room_id),
                    event,
                    {"user": identity.brief(), "roomId": room_id},
                ),
            ),
        )

    handler.__name__ = event.replace("-", "_")
    return handler


typing_start = _typing("user-typing")
typing_stop = _typing("user-stopped-typing")


def disconnect_effects(state: ConnectionState, identity: Identity) -> tuple[Effect, ...]:
    """Announce the departure to the active room only."""

    if state.active_room is None:
        return ()
    return (_user_left(identity, state.active_room),)
