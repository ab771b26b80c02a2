from __future__ import annotations

from django.db import transaction
from django.utils import timezone

from zubix_pod.messaging.models import Chat
from zubix_pod.messaging.models import ChatParticipant
from zubix_pod.messaging.models import Message


class ChatParticipantsError(ValueError):
    """Raised when a direct chat would not have exactly two distinct users."""


def is_chat_participant(chat_id: int, user_id: int) -> bool:
    return ChatParticipant.objects.filter(chat_id=chat_id, user_id=user_id).exists()


def open_direct_chat(first_user_id: int, second_user_id: int) -> Chat:
    """Create a private chat between two distinct users.

    This is what an accepted message request produces; the realtime gateway
    only ever operates on chats created here.
    """

    if first_user_id == second_user_id:
        msg = "A direct chat needs two distinct participants."
        raise ChatParticipantsError(msg)

    with transaction.atomic():
        chat = Chat.objects.create()
        ChatParticipant.objects.bulk_create(
            [
                ChatParticipant(chat=chat, user_id=first_user_id),
                ChatParticipant(chat=chat, user_id=second_user_id),
            ]
        )
    return chat


def create_room_message(*, room_id: int, sender_id: int, content: str) -> Message:
    message = Message.objects.create(room_id=room_id, sender_id=sender_id, content=content)
    return Message.objects.select_related("sender").get(pk=message.pk)


def create_chat_message(*, chat_id: int, sender_id: int, content: str) -> Message:
    """Persist a direct message and advance the chat's last-activity stamp.

    Two single-row writes, not wrapped in a transaction.
    """

    message = Message.objects.create(chat_id=chat_id, sender_id=sender_id, content=content)
    Chat.objects.filter(pk=chat_id).update(updated_at=timezone.now())
    return Message.objects.select_related("sender").get(pk=message.pk)
