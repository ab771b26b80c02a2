import pytest

from tests.factories import access_token_for
from tests.factories import add_member
from tests.factories import add_room_member
from tests.factories import create_pod
from tests.factories import create_room
from tests.factories import create_user
from tests.fakes import RecordingServer
from zubix_pod.messaging.models import Message
from zubix_pod.pods.models import PodMember
from zubix_pod.realtime.socketio import Gateway

pytestmark = pytest.mark.django_db(transaction=True)


class TestRoomSessions:
    def setup_method(self):
        self.server = RecordingServer()
        self.gateway = Gateway(self.server)
        self.owner = create_user("owner")
        self.member = create_user("member")
        self.outsider = create_user("outsider")
        self.pod = create_pod(self.owner)
        add_member(self.pod, self.member)
        self.room = create_room(self.pod)
        self.channel = f"room_{self.room.pk}"

        self.connect("owner-sid", self.owner)
        self.connect("member-sid", self.member)
        self.connect("outsider-sid", self.outsider)

    def connect(self, sid, user):
        self.server.connect(sid, auth={"token": access_token_for(user)})

    def join(self, sid, room=None):
        self.server.send(sid, "join-room", {"roomId": (room or self.room).pk})

    def errors(self, sid):
        return [data["message"] for data in self.server.received(sid, "error")]

    def active_room(self, sid):
        return self.gateway.connections[sid].state.active_room

    # join-room ----------------------------------------------------------

    def test_member_joins_room(self):
        self.join("member-sid")

        assert "member-sid" in self.server.members(self.channel)
        assert self.server.received("member-sid", "room-joined") == [
            {"roomId": self.room.pk, "message": "Successfully joined room"}
        ]
        assert self.active_room("member-sid") == self.room.pk

    def test_pod_owner_without_membership_row_joins(self):
        self.join("owner-sid")
        assert "owner-sid" in self.server.members(self.channel)

    def test_existing_occupants_are_told_who_joined(self):
        self.join("owner-sid")
        self.server.clear()

        self.join("member-sid")

        joined = self.server.received("owner-sid", "user-joined")
        assert len(joined) == 1
        assert joined[0]["roomId"] == self.room.pk
        assert joined[0]["user"] == {
            "id": self.member.pk,
            "username": "member",
            "fullName": "Member",
            "avatar": None,
        }
        assert "timestamp" in joined[0]
        assert self.server.received("member-sid", "user-joined") == []

    def test_non_member_is_refused(self):
        self.join("outsider-sid")

        assert self.errors("outsider-sid") == [
            "You must be a member of this pod to join this room"
        ]
        assert "outsider-sid" not in self.server.members(self.channel)
        assert self.active_room("outsider-sid") is None

    def test_unknown_room_is_reported(self):
        self.server.send("member-sid", "join-room", {"roomId": 999_999})
        assert self.errors("member-sid") == ["Room not found"]

    def test_malformed_payloads_are_rejected(self):
        self.server.send("member-sid", "join-room", {"roomId": "abc"})
        self.server.send("member-sid", "join-room", "not-an-object")
        self.server.send("member-sid", "join-room")

        assert self.errors("member-sid") == [
            "Invalid roomId",
            "Invalid payload",
            "Invalid payload",
        ]

    def test_private_room_requires_room_membership(self):
        private = create_room(self.pod, "core", is_private=True)

        self.join("member-sid", private)
        assert self.errors("member-sid") == [
            "You must be a member of this pod to join this room"
        ]

        add_room_member(private, self.member)
        self.join("member-sid", private)
        assert "member-sid" in self.server.members(f"room_{private.pk}")

        self.join("owner-sid", private)
        assert "owner-sid" in self.server.members(f"room_{private.pk}")

    def test_joining_twice_announces_once(self):
        self.join("owner-sid")
        self.join("member-sid")
        self.join("member-sid")

        assert len(self.server.received("owner-sid", "user-joined")) == 1
        assert len(self.server.received("member-sid", "room-joined")) == 2
        assert self.server.members(self.channel) == {"owner-sid", "member-sid"}

    # leave-room ---------------------------------------------------------

    def test_leaving_active_room(self):
        self.join("owner-sid")
        self.join("member-sid")
        self.server.clear()

        self.server.send("member-sid", "leave-room", {"roomId": self.room.pk})

        assert "member-sid" not in self.server.members(self.channel)
        assert self.server.received("member-sid", "room-left") == [
            {"roomId": self.room.pk, "message": "Successfully left room"}
        ]
        left = self.server.received("owner-sid", "user-left")
        assert len(left) == 1
        assert left[0]["user"] == {"id": self.member.pk, "username": "member"}
        assert self.active_room("member-sid") is None

    def test_leaving_a_room_that_is_not_active_is_ignored(self):
        other = create_room(self.pod, "random")
        self.join("owner-sid")
        self.join("member-sid")
        self.join("member-sid", other)
        self.server.clear()

        self.server.send("member-sid", "leave-room", {"roomId": self.room.pk})

        assert self.server.events("member-sid") == []
        assert self.server.received("owner-sid", "user-left") == []
        assert "member-sid" in self.server.members(self.channel)
        assert self.active_room("member-sid") == other.pk

    # send-message -------------------------------------------------------

    def test_message_is_persisted_and_echoed_to_everyone(self):
        self.join("owner-sid")
        self.join("member-sid")
        self.server.clear()

        self.server.send(
            "member-sid", "send-message", {"roomId": self.room.pk, "content": "  hello "}
        )

        message = Message.objects.get()
        assert message.content == "hello"
        assert message.room_id == self.room.pk
        assert message.chat_id is None
        for sid in ("owner-sid", "member-sid"):
            delivered = self.server.received(sid, "new-message")
            assert len(delivered) == 1
            assert delivered[0]["id"] == message.pk
            assert delivered[0]["content"] == "hello"
            assert delivered[0]["roomId"] == self.room.pk
            assert delivered[0]["senderId"] == self.member.pk
            assert delivered[0]["sender"]["username"] == "member"

    def test_blank_message_is_rejected(self):
        self.join("member-sid")
        self.server.send(
            "member-sid", "send-message", {"roomId": self.room.pk, "content": " \n\t "}
        )
        self.server.send("member-sid", "send-message", {"roomId": self.room.pk})

        assert self.errors("member-sid") == [
            "Message content is required",
            "Message content is required",
        ]
        assert not Message.objects.exists()

    def test_non_member_cannot_post(self):
        self.join("member-sid")
        self.server.clear()

        self.server.send(
            "outsider-sid", "send-message", {"roomId": self.room.pk, "content": "hi"}
        )

        assert self.errors("outsider-sid") == [
            "You must be a member of this pod to send messages"
        ]
        assert not Message.objects.exists()
        assert self.server.events("member-sid") == []

    def test_membership_is_checked_on_every_send(self):
        self.join("member-sid")
        PodMember.objects.filter(pod=self.pod, user=self.member).delete()

        self.server.send(
            "member-sid", "send-message", {"roomId": self.room.pk, "content": "hi"}
        )

        assert self.errors("member-sid") == [
            "You must be a member of this pod to send messages"
        ]
        assert not Message.objects.exists()

    # typing -------------------------------------------------------------

    def test_typing_in_active_room_reaches_others(self):
        self.join("owner-sid")
        self.join("member-sid")
        self.server.clear()

        self.server.send("member-sid", "typing-start", {"roomId": self.room.pk})
        self.server.send("member-sid", "typing-stop", {"roomId": self.room.pk})

        assert self.server.events("owner-sid") == ["user-typing", "user-stopped-typing"]
        assert self.server.received("owner-sid", "user-typing") == [
            {"user": {"id": self.member.pk, "username": "member"}, "roomId": self.room.pk}
        ]
        assert self.server.events("member-sid") == []

    def test_typing_outside_active_room_is_dropped(self):
        self.join("owner-sid")
        self.server.clear()

        self.server.send("member-sid", "typing-start", {"roomId": self.room.pk})
        self.server.send("member-sid", "typing-start", {"roomId": "oops"})

        assert self.server.events("owner-sid") == []
        assert self.server.events("member-sid") == []

    # disconnect ---------------------------------------------------------

    def test_disconnect_announces_departure_once(self):
        self.join("owner-sid")
        self.join("member-sid")
        self.server.clear()

        self.server.disconnect("member-sid")

        left = self.server.received("owner-sid", "user-left")
        assert len(left) == 1
        assert left[0]["roomId"] == self.room.pk
        assert "member-sid" not in self.server.members(self.channel)
        assert "member-sid" not in self.gateway.connections

    def test_disconnect_without_active_room_is_silent(self):
        self.join("owner-sid")
        self.server.clear()

        self.server.disconnect("member-sid")

        assert self.server.events("owner-sid") == []

    def test_disconnect_only_announces_to_active_room(self):
        other = create_room(self.pod, "random")
        self.join("owner-sid")
        self.join("owner-sid", other)
        self.join("member-sid")
        self.join("member-sid", other)
        self.server.clear()

        self.server.disconnect("member-sid")

        left = self.server.received("owner-sid", "user-left")
        assert len(left) == 1
        assert left[0]["roomId"] == other.pk
        assert left[0]["user"] == {"id": self.member.pk, "username": "member"}

    def test_sender_shape_matches_presence_shape(self):
        self.join("owner-sid")
        self.join("member-sid")

        self.server.send(
            "member-sid", "send-message", {"roomId": self.room.pk, "content": "hi"}
        )

        joined = self.server.received("owner-sid", "user-joined")[0]["user"]
        sender = self.server.received("owner-sid", "new-message")[0]["sender"]
        assert sender == {
            "id": self.member.pk,
            "username": "member",
            "fullName": "Member",
            "avatar": None,
        }
        assert joined == sender
