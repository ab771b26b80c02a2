"""Direct-chat session manager and chat typing signals.

Unlike rooms there is no active chat: a connection may be in any number of
chat channels and leaving is unconditional.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

from zubix_pod.realtime.access import can_access_chat_async
from zubix_pod.realtime.errors import UnauthorizedError
from zubix_pod.realtime.errors import ValidationError
from zubix_pod.realtime.naming import room_for_chat
from zubix_pod.realtime.payloads import ChatPayloadSerializer
from zubix_pod.realtime.payloads import parse_payload
from zubix_pod.realtime.state import Broadcast
from zubix_pod.realtime.state import Enter
from zubix_pod.realtime.state import HandlerResult
from zubix_pod.realtime.state import Leave
from zubix_pod.realtime.state import Reply

if TYPE_CHECKING:  # import for type checking only
    from zubix_pod.realtime.state import ConnectionState
    from zubix_pod.realtime.state import Identity

logger = logging.getLogger(__name__)


async def join_chat(
    state: ConnectionState, identity: Identity, payload: Any
) -> HandlerResult:
    chat_id = parse_payload(ChatPayloadSerializer, payload)["chatId"]

    if not await can_access_chat_async(identity.id, chat_id):
        msg = "You are not a participant of this chat"
        raise UnauthorizedError(msg)

    channel = room_for_chat(chat_id)
    logger.info("%s joined chat: %s", identity.username, chat_id)
    return HandlerResult(
        state.entering(channel),
        (
            Enter(channel),
            Reply("chat-joined", {"chatId": chat_id, "message": "Successfully joined chat"}),
        ),
    )


async def leave_chat(
    state: ConnectionState, identity: Identity, payload: Any
) -> HandlerResult:
    chat_id = parse_payload(ChatPayloadSerializer, payload)["chatId"]
    channel = room_for_chat(chat_id)
    logger.info("%s left chat: %s", identity.username, chat_id)
    return HandlerResult(state.leaving(channel), (Leave(channel),))


def _typing(event: str):
    async def handler(
        state: ConnectionState, identity: Identity, payload: Any
    ) -> HandlerResult:
        try:
            chat_id = parse_payload(ChatPayloadSerializer, payload)["chatId"]
        except ValidationError:
            return HandlerResult(state)
        return HandlerResult(
            state,
            (
                Broadcast(
                    room_for_chat(chat_id),
                    event,
                    {"user": identity.brief(), "chatId": chat_id},
                ),
            ),
        )

    handler.__name__ = event.replace("-", "_")
    return handler


dm_typing_start = _typing("dm-user-typing")
dm_typing_stop = _typing("dm-user-stopped-typing")
