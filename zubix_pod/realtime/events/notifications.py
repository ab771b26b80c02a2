from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

if TYPE_CHECKING:  # import for type checking only
    from zubix_pod.notifications.models import Notification
    from zubix_pod.realtime.socketio import Gateway

logger = logging.getLogger(__name__)


def build_notification_payload(notification: Notification) -> dict[str, Any]:
    return {
        "id": notification.id,
        "title": notification.title,
        "message": notification.message,
        "type": notification.notification_type,
        "link": notification.related_link,
        "isRead": notification.is_read,
        "createdAt": notification.created_at.isoformat(),
    }


class NotificationPublisher:
    """Pushes notifications to the recipient's user channel."""

    def __init__(self, gateway: Gateway):
        self.gateway = gateway

    def publish_created(self, notification: Notification) -> None:
        """Publish a newly created Notification to the recipient in realtime."""

        payload = build_notification_payload(notification)
        logger.debug(
            "Publishing notification %s to user %s",
            notification.id,
            notification.recipient_id,
        )
        self.gateway.publish_to_user(notification.recipient_id, "notification", payload)
