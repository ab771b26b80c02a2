"""Authorization checks run on every room- or chat-scoped event.

Each call performs fresh lookups; membership may change between two events
of the same connection and the answer always reflects the current rows.
"""

from __future__ import annotations

from channels.db import database_sync_to_async

from zubix_pod.messaging.models import Chat
from zubix_pod.messaging.services import is_chat_participant
from zubix_pod.pods.models import Room
from zubix_pod.pods.services import can_access_room

from .errors import NotFoundError

ROOM_NOT_FOUND = "Room not found"
CHAT_NOT_FOUND = "Chat not found"


def room_access(user_id: int, room_id: int) -> bool:
    """Return whether the user may participate in the room.

    Raises ``NotFoundError`` when the room does not exist.
    """

    room = Room.objects.select_related("pod").filter(pk=room_id).first()
    if room is None:
        raise NotFoundError(ROOM_NOT_FOUND)
    return can_access_room(room, user_id)


def chat_access(user_id: int, chat_id: int) -> bool:
    """Return whether the user is a participant of the chat.

    Raises ``NotFoundError`` when the chat does not exist.
    """

    if not Chat.objects.filter(pk=chat_id).exists():
        raise NotFoundError(CHAT_NOT_FOUND)
    return is_chat_participant(chat_id, user_id)


can_access_room_async = database_sync_to_async(room_access)
can_access_chat_async = database_sync_to_async(chat_access)
