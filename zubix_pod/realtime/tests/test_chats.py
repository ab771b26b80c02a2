import pytest

from tests.factories import access_token_for
from tests.factories import create_chat
from tests.factories import create_user
from tests.fakes import RecordingServer
from zubix_pod.messaging.models import Chat
from zubix_pod.messaging.models import Message
from zubix_pod.realtime.socketio import Gateway

pytestmark = pytest.mark.django_db(transaction=True)


class TestDirectChats:
    def setup_method(self):
        self.server = RecordingServer()
        Gateway(self.server)
        self.alice = create_user("alice")
        self.bob = create_user("bob")
        self.eve = create_user("eve")
        self.chat = create_chat(self.alice, self.bob)
        self.channel = f"chat_{self.chat.pk}"
        for sid, user in (("a", self.alice), ("b", self.bob), ("e", self.eve)):
            self.server.connect(sid, auth={"token": access_token_for(user)})

    def errors(self, sid):
        return [data["message"] for data in self.server.received(sid, "error")]

    def test_participant_joins_chat(self):
        self.server.send("a", "join-chat", {"chatId": self.chat.pk})

        assert "a" in self.server.members(self.channel)
        assert self.server.received("a", "chat-joined") == [
            {"chatId": self.chat.pk, "message": "Successfully joined chat"}
        ]

    def test_outsider_cannot_join_chat(self):
        self.server.send("e", "join-chat", {"chatId": self.chat.pk})

        assert self.errors("e") == ["You are not a participant of this chat"]
        assert "e" not in self.server.members(self.channel)

    def test_unknown_chat_is_reported(self):
        self.server.send("a", "join-chat", {"chatId": 999_999})
        assert self.errors("a") == ["Chat not found"]

    def test_direct_message_reaches_both_participants(self):
        before = Chat.objects.get(pk=self.chat.pk).updated_at
        self.server.send("a", "join-chat", {"chatId": self.chat.pk})
        self.server.send("b", "join-chat", {"chatId": self.chat.pk})

        self.server.send("a", "send-dm", {"chatId": self.chat.pk, "content": "hey bob"})

        message = Message.objects.get()
        assert message.chat_id == self.chat.pk
        assert message.room_id is None
        for sid in ("a", "b"):
            delivered = self.server.received(sid, "new-dm")
            assert len(delivered) == 1
            assert delivered[0]["content"] == "hey bob"
            assert delivered[0]["chatId"] == self.chat.pk
            assert delivered[0]["roomId"] is None
        assert Chat.objects.get(pk=self.chat.pk).updated_at >= before
        assert self.server.events("e") == []

    def test_outsider_cannot_send_direct_message(self):
        self.server.send("b", "join-chat", {"chatId": self.chat.pk})
        self.server.send("e", "send-dm", {"chatId": self.chat.pk, "content": "psst"})

        assert self.errors("e") == ["You are not a participant of this chat"]
        assert not Message.objects.exists()
        assert self.server.received("b", "new-dm") == []

    def test_blank_direct_message_is_rejected(self):
        self.server.send("a", "send-dm", {"chatId": self.chat.pk, "content": "   "})

        assert self.errors("a") == ["Message content is required"]
        assert not Message.objects.exists()

    def test_leave_chat_is_silent(self):
        self.server.send("a", "join-chat", {"chatId": self.chat.pk})
        self.server.clear()

        self.server.send("a", "leave-chat", {"chatId": self.chat.pk})

        assert "a" not in self.server.members(self.channel)
        assert self.server.events("a") == []

    def test_dm_typing_is_forwarded_to_the_other_side(self):
        self.server.send("b", "join-chat", {"chatId": self.chat.pk})
        self.server.clear()

        self.server.send("a", "dm-typing-start", {"chatId": self.chat.pk})
        self.server.send("a", "dm-typing-stop", {"chatId": self.chat.pk})

        assert self.server.events("b") == ["dm-user-typing", "dm-user-stopped-typing"]
        assert self.server.received("b", "dm-user-typing") == [
            {"user": {"id": self.alice.pk, "username": "alice"}, "chatId": self.chat.pk}
        ]
        assert self.server.events("a") == []
