from __future__ import annotations

from typing import TYPE_CHECKING

from django.db.models.signals import post_save
from django.db.transaction import on_commit

from zubix_pod.realtime.events.notifications import NotificationPublisher

from .models import Notification

if TYPE_CHECKING:  # import for type checking only
    from zubix_pod.realtime.socketio import Gateway

DISPATCH_UID = "zubix_pod.notifications.publish_created"


def connect_realtime_publisher(gateway: Gateway) -> NotificationPublisher:
    """Push every newly created Notification to its recipient through ``gateway``.

    Called once at process start with the gateway handle built in
    ``config.asgi``. Reconnecting replaces the previous receiver.
    """

    publisher = NotificationPublisher(gateway)

    def send_notification_ws(sender, instance, created, **kwargs):
        if created:
            on_commit(lambda: publisher.publish_created(instance))

    post_save.connect(
        send_notification_ws,
        sender=Notification,
        weak=False,
        dispatch_uid=DISPATCH_UID,
    )
    return publisher


def disconnect_realtime_publisher() -> None:
    post_save.disconnect(sender=Notification, dispatch_uid=DISPATCH_UID)
