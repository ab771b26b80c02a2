from __future__ import annotations

from django.conf import settings
from rest_framework import serializers

from zubix_pod.messaging.models import Message
from zubix_pod.users.api.serializers import UserSummarySerializer


class MessageSerializer(serializers.ModelSerializer):
    """Hydrated message as broadcast over the socket and served by history."""

    roomId = serializers.IntegerField(source="room_id", read_only=True)  # noqa: N815
    chatId = serializers.IntegerField(source="chat_id", read_only=True)  # noqa: N815
    senderId = serializers.IntegerField(source="sender_id", read_only=True)  # noqa: N815
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)  # noqa: N815
    sender = UserSummarySerializer(read_only=True)

    class Meta:
        model = Message
        fields = (
            "id",
            "content",
            "roomId",
            "chatId",
            "senderId",
            "createdAt",
            "sender",
        )
        read_only_fields = fields


class MessageHistoryQuerySerializer(serializers.Serializer):
    """Query parameters of the room history endpoint."""

    before = serializers.IntegerField(required=False, min_value=1)
    limit = serializers.IntegerField(required=False, min_value=1)

    def validate_limit(self, value: int) -> int:
        return min(value, settings.MESSAGE_HISTORY_MAX_LIMIT)

    def validate(self, attrs):
        attrs.setdefault("limit", settings.MESSAGE_HISTORY_DEFAULT_LIMIT)
        return attrs
