from __future__ import annotations

from typing import TYPE_CHECKING

from zubix_pod.messaging.models import Message

if TYPE_CHECKING:  # import for type checking only
    from zubix_pod.pods.models import Room


def get_room_history(
    room: Room, *, before: int | None = None, limit: int = 50
) -> list[Message]:
    """Return up to ``limit`` messages of ``room``, oldest first.

    With ``before`` set to an existing message id, only messages created
    strictly earlier than that message are returned. An unknown cursor is
    ignored and the newest page is returned instead.
    """

    queryset = Message.objects.filter(room=room).select_related("sender")

    if before is not None:
        cursor = Message.objects.filter(pk=before).values("created_at").first()
        if cursor is not None:
            queryset = queryset.filter(created_at__lt=cursor["created_at"])

    newest_first = list(queryset.order_by("-created_at", "-id")[:limit])
    newest_first.reverse()
    return newest_first
