"""Message pipeline: validate, authorize, persist, then fan out.

This is the only path by which the realtime surface writes durable state.

The authorization check and the insert are separate awaits with no
transaction around them. A membership revoked in between is not enforced for
that message; it is persisted and broadcast.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

from channels.db import database_sync_to_async
from django.db import DatabaseError

from zubix_pod.messaging.api.serializers import MessageSerializer
from zubix_pod.messaging.services import create_chat_message
from zubix_pod.messaging.services import create_room_message

from .access import can_access_chat_async
from .access import can_access_room_async
from .errors import InternalError
from .errors import UnauthorizedError
from .naming import room_for_chat
from .naming import room_for_pod_room
from .payloads import ChatMessagePayloadSerializer
from .payloads import RoomMessagePayloadSerializer
from .payloads import clean_content
from .payloads import parse_payload
from .state import Broadcast
from .state import HandlerResult

if TYPE_CHECKING:  # import for type checking only
    from .state import ConnectionState
    from .state import Identity

logger = logging.getLogger(__name__)

SEND_FAILED = "Failed to send message"


def _persist_room_message(room_id: int, sender_id: int, content: str) -> dict[str, Any]:
    message = create_room_message(room_id=room_id, sender_id=sender_id, content=content)
    return dict(MessageSerializer(message).data)


def _persist_chat_message(chat_id: int, sender_id: int, content: str) -> dict[str, Any]:
    message = create_chat_message(chat_id=chat_id, sender_id=sender_id, content=content)
    return dict(MessageSerializer(message).data)


async def send_room_message(
    state: ConnectionState, identity: Identity, payload: Any
) -> HandlerResult:
    data = parse_payload(RoomMessagePayloadSerializer, payload)
    content = clean_content(data["content"])
    room_id = data["roomId"]

    if not await can_access_room_async(identity.id, room_id):
        msg = "You must be a member of this pod to send messages"
        raise UnauthorizedError(msg)

    try:
        message = await database_sync_to_async(_persist_room_message)(
            room_id, identity.id, content
        )
    except DatabaseError as exc:
        logger.exception("Persisting room message failed (room=%s)", room_id)
        raise InternalError(SEND_FAILED) from exc

    logger.info("Message from %s in room %s", identity.username, room_id)
    return HandlerResult(
        state,
        (
            Broadcast(
                room_for_pod_room(room_id), "new-message", message, include_self=True
            ),
        ),
    )


async def send_direct_message(
    state: ConnectionState, identity: Identity, payload: Any
) -> HandlerResult:
    data = parse_payload(ChatMessagePayloadSerializer, payload)
    content = clean_content(data["content"])
    chat_id = data["chatId"]

    if not await can_access_chat_async(identity.id, chat_id):
        msg = "You are not a participant of this chat"
        raise UnauthorizedError(msg)

    try:
        message = await database_sync_to_async(_persist_chat_message)(
            chat_id, identity.id, content
        )
    except DatabaseError as exc:
        logger.exception("Persisting direct message failed (chat=%s)", chat_id)
        raise InternalError(SEND_FAILED) from exc

    logger.info("DM from %s in chat %s", identity.username, chat_id)
    return HandlerResult(
        state,
        (Broadcast(room_for_chat(chat_id), "new-dm", message, include_self=True),),
    )
