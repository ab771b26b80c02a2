"""Client payload validation for socket events.

Payloads are validated with DRF serializers the same way HTTP request bodies
are; failures become a ``ValidationError`` naming the offending field.
"""

from __future__ import annotations

from typing import Any

from rest_framework import serializers

from .errors import ValidationError

CONTENT_REQUIRED = "Message content is required"


class RoomPayloadSerializer(serializers.Serializer):
    roomId = serializers.IntegerField(min_value=1)  # noqa: N815


class ChatPayloadSerializer(serializers.Serializer):
    chatId = serializers.IntegerField(min_value=1)  # noqa: N815


class RoomMessagePayloadSerializer(RoomPayloadSerializer):
    content = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        trim_whitespace=False,
        default="",
    )


class ChatMessagePayloadSerializer(ChatPayloadSerializer):
    content = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        trim_whitespace=False,
        default="",
    )


def parse_payload(
    serializer_class: type[serializers.Serializer], payload: Any
) -> dict[str, Any]:
    if not isinstance(payload, dict):
        msg = "Invalid payload"
        raise ValidationError(msg)
    serializer = serializer_class(data=payload)
    if not serializer.is_valid():
        field_name = next(iter(serializer.errors), None)
        msg = f"Invalid {field_name}" if field_name else "Invalid payload"
        raise ValidationError(msg)
    return dict(serializer.validated_data)


def clean_content(content: str | None) -> str:
    """Return trimmed message content; reject empty or whitespace-only text."""

    if content is None or not content.strip():
        raise ValidationError(CONTENT_REQUIRED)
    return content.strip()
