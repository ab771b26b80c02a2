from datetime import timedelta

import pytest
from socketio.exceptions import ConnectionRefusedError as SocketRefused

from tests.factories import access_token_for
from tests.factories import create_user
from tests.fakes import RecordingServer
from zubix_pod.realtime.auth import extract_token
from zubix_pod.realtime.socketio import Gateway

pytestmark = pytest.mark.django_db(transaction=True)


@pytest.fixture
def server():
    fake = RecordingServer()
    Gateway(fake)
    return fake


def refusal_reason(server, **kwargs) -> str:
    with pytest.raises(SocketRefused) as exc:
        server.connect("sid-1", **kwargs)
    return exc.value.error_args["message"]


def test_connect_without_token_is_refused(server):
    assert refusal_reason(server) == "unauthorized"
    assert server.members("sid-1") == set()


def test_connect_with_garbage_token_is_refused(server):
    assert refusal_reason(server, auth={"token": "not-a-jwt"}) == "unauthorized"


def test_connect_with_expired_token_reports_expiry(server):
    user = create_user("alice")
    token = access_token_for(user, lifetime=-timedelta(minutes=5))
    assert refusal_reason(server, auth={"token": token}) == "jwt_expired"


def test_connect_for_inactive_user_is_refused(server):
    user = create_user("alice", is_active=False)
    token = access_token_for(user)
    assert refusal_reason(server, auth={"token": token}) == "user_not_found"


def test_connect_for_deleted_user_is_refused(server):
    user = create_user("alice")
    token = access_token_for(user)
    user.delete()
    assert refusal_reason(server, auth={"token": token}) == "user_not_found"


def test_unexpected_failure_is_reported_as_server_error(server, monkeypatch):
    user = create_user("alice")

    def boom(token):
        msg = "database is gone"
        raise RuntimeError(msg)

    monkeypatch.setattr("zubix_pod.realtime.auth.resolve_identity", boom)
    assert refusal_reason(server, auth={"token": access_token_for(user)}) == "server_error"


def test_connect_joins_personal_channel(server):
    user = create_user("alice")
    server.connect("sid-1", auth={"token": access_token_for(user)})

    assert "sid-1" in server.members(f"user_{user.pk}")
    assert server.sessions["sid-1"]["user_id"] == user.pk


def test_connect_accepts_query_token(server):
    user = create_user("alice")
    token = access_token_for(user)
    server.connect("sid-1", environ={"query_string": f"token={token}".encode()})

    assert "sid-1" in server.members(f"user_{user.pk}")


def test_extract_token_prefers_auth_payload():
    environ = {"query_string": b"token=from-query"}
    assert extract_token(environ, {"token": "from-auth"}) == "from-auth"
    assert extract_token(environ, None) == "from-query"


def test_extract_token_reads_bearer_header():
    environ = {"headers": [(b"authorization", b"Bearer abc.def.ghi")]}
    assert extract_token(environ, None) == "abc.def.ghi"
    assert extract_token({"HTTP_AUTHORIZATION": "Bearer xyz"}, {}) == "xyz"
    assert extract_token({"headers": [(b"authorization", b"Basic abc")]}, None) is None
