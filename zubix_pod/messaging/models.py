from django.conf import settings
from django.db import models
from django.db.models import Q


class Chat(models.Model):
    """Private two-party conversation.

    ``updated_at`` doubles as the last-activity stamp used to order a user's
    conversation list; sending a direct message bumps it.
    """

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-updated_at"]

    def __str__(self):
        return f"Chat({self.pk})"


class ChatParticipant(models.Model):
    chat = models.ForeignKey(Chat, on_delete=models.CASCADE, related_name="participants")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="chat_participations"
    )
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["chat", "user"], name="uniq_chat_participant_chat_user"
            ),
        ]

    def __str__(self):
        return f"{self.user_id}@chat:{self.chat_id}"


class Message(models.Model):
    """Immutable chat message addressed to exactly one room or one chat."""

    content = models.TextField()
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="messages"
    )
    room = models.ForeignKey(
        "pods.Room",
        on_delete=models.CASCADE,
        related_name="messages",
        null=True,
        blank=True,
    )
    chat = models.ForeignKey(
        Chat,
        on_delete=models.CASCADE,
        related_name="messages",
        null=True,
        blank=True,
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["created_at", "id"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(room__isnull=False, chat__isnull=True)
                    | Q(room__isnull=True, chat__isnull=False)
                ),
                name="message_room_xor_chat",
            ),
        ]
        indexes = [
            models.Index(fields=["room", "created_at"], name="message_room_created_idx"),
            models.Index(fields=["chat", "created_at"], name="message_chat_created_idx"),
        ]

    def __str__(self):
        target = f"room:{self.room_id}" if self.room_id else f"chat:{self.chat_id}"
        return f"Message({self.pk}) {target}"
