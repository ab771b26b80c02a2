from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import extend_schema
from rest_framework.exceptions import NotFound
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from zubix_pod.messaging.api.serializers import MessageHistoryQuerySerializer
from zubix_pod.messaging.api.serializers import MessageSerializer
from zubix_pod.messaging.history import get_room_history
from zubix_pod.pods.models import Room
from zubix_pod.pods.services import can_access_room


class RoomMessagesView(APIView):
    """Cursor-paginated message history of a room (oldest first)."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["Rooms"],
        parameters=[
            OpenApiParameter(
                "before",
                int,
                description="Only return messages older than this message id.",
            ),
            OpenApiParameter("limit", int, description="Page size (default 50)."),
        ],
        responses=MessageSerializer(many=True),
    )
    def get(self, request, room_id: int):
        room = Room.objects.select_related("pod").filter(pk=room_id).first()
        if room is None:
            msg = "Room not found"
            raise NotFound(msg)
        if not can_access_room(room, request.user.pk):
            msg = "You must be a member of this pod to view messages"
            raise PermissionDenied(msg)

        query = MessageHistoryQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        messages = get_room_history(
            room,
            before=query.validated_data.get("before"),
            limit=query.validated_data["limit"],
        )
        return Response(
            {"messages": MessageSerializer(messages, many=True).data},
        )
