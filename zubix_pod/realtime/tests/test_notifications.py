import pytest

from tests.factories import access_token_for
from tests.factories import create_user
from tests.fakes import RecordingServer
from zubix_pod.notifications.models import Notification
from zubix_pod.notifications.signals import connect_realtime_publisher
from zubix_pod.notifications.signals import disconnect_realtime_publisher
from zubix_pod.realtime.events.notifications import NotificationPublisher
from zubix_pod.realtime.socketio import Gateway

pytestmark = pytest.mark.django_db(transaction=True)


@pytest.fixture
def server():
    return RecordingServer()


@pytest.fixture
def gateway(server):
    return Gateway(server)


@pytest.fixture
def user():
    return create_user("alice")


def test_join_notifications_confirms_channel(server, gateway, user):
    server.connect("sid-1", auth={"token": access_token_for(user)})
    server.send("sid-1", "join-notifications")

    assert server.received("sid-1", "notifications-joined") == [
        {"message": "Successfully joined notifications"}
    ]
    assert server.members(f"user_{user.pk}") == {"sid-1"}


def test_publisher_pushes_to_every_connection_of_recipient(server, gateway, user):
    other = create_user("bob")
    server.connect("sid-1", auth={"token": access_token_for(user)})
    server.connect("sid-2", auth={"token": access_token_for(user)})
    server.connect("sid-3", auth={"token": access_token_for(other)})
    notification = Notification.objects.create(
        recipient=user, title="New member", message="bob joined", notification_type="pod_join"
    )

    NotificationPublisher(gateway).publish_created(notification)

    for sid in ("sid-1", "sid-2"):
        delivered = server.received(sid, "notification")
        assert len(delivered) == 1
        assert delivered[0]["id"] == notification.pk
        assert delivered[0]["type"] == "pod_join"
        assert delivered[0]["isRead"] is False
    assert server.received("sid-3", "notification") == []


def test_created_notifications_are_published_after_commit(server, gateway, user):
    server.connect("sid-1", auth={"token": access_token_for(user)})
    connect_realtime_publisher(gateway)
    try:
        Notification.objects.create(recipient=user, title="Hi", message="there")
        created = Notification.objects.get()
        created.is_read = True
        created.save()
    finally:
        disconnect_realtime_publisher()

    delivered = server.received("sid-1", "notification")
    assert [n["title"] for n in delivered] == ["Hi"]


def test_publishing_to_offline_user_is_a_no_op(server, gateway, user):
    notification = Notification.objects.create(recipient=user, title="Hi", message="x")
    NotificationPublisher(gateway).publish_created(notification)
    assert server.inbox == {}
