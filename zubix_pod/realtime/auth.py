"""Handshake authentication for the Socket.IO gateway.

The bearer credential is a simplejwt access token. Clients may pass it as
``auth: {token}`` (socket.io-client default), as ``?token=`` in the
connection query, or as an ``Authorization: Bearer`` header.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken
from socketio import exceptions as sio_exceptions

from .state import Identity

logger = logging.getLogger(__name__)

REASON_UNAUTHORIZED = "unauthorized"
REASON_EXPIRED = "jwt_expired"
REASON_USER_NOT_FOUND = "user_not_found"
REASON_SERVER_ERROR = "server_error"


class HandshakeRefused(Exception):  # noqa: N818
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


def _scope_of(environ: dict[str, Any]) -> Any:
    # python-socketio passes different shapes depending on async mode:
    # - ASGI: `environ` is the ASGI scope with `query_string: bytes`
    # - WSGI: `environ` is a WSGI environ with `QUERY_STRING: str`
    # - Some servers include `asgi.scope` inside `environ`
    if isinstance(environ, dict) and "asgi.scope" in environ:
        inner = environ.get("asgi.scope")
        if isinstance(inner, dict):
            return inner
    return environ


def _header_token(scope: Any) -> str | None:
    if not isinstance(scope, dict):
        return None
    header: str | bytes | None = scope.get("HTTP_AUTHORIZATION")
    if header is None:
        for name, value in scope.get("headers") or ():
            if name.lower() == b"authorization":
                header = value
                break
    if isinstance(header, (bytes, bytearray)):
        header = header.decode(errors="ignore")
    if isinstance(header, str) and header.startswith("Bearer "):
        return header[len("Bearer ") :].strip() or None
    return None


def extract_token(environ: dict[str, Any], auth: Any | None) -> str | None:
    """Extract the JWT from the Socket.IO auth payload, query or headers."""

    if isinstance(auth, dict):
        auth_token = auth.get("token")
        if isinstance(auth_token, str) and auth_token:
            return auth_token

    scope = _scope_of(environ)

    query_string: str | bytes = ""
    if isinstance(scope, dict) and "query_string" in scope:
        query_string = scope.get("query_string", b"")
    elif isinstance(scope, dict) and "QUERY_STRING" in scope:
        query_string = scope.get("QUERY_STRING", "")

    if isinstance(query_string, (bytes, bytearray)):
        query_string = query_string.decode(errors="ignore")

    token = parse_qs(str(query_string)).get("token", [None])[0]
    if isinstance(token, str) and token:
        return token

    return _header_token(scope)


def _is_expired(token: str) -> bool:
    try:
        unverified = AccessToken(token, verify=False)
    except TokenError:
        return False
    exp = unverified.get("exp")
    return isinstance(exp, (int, float)) and exp <= timezone.now().timestamp()


def resolve_identity(token: str) -> Identity:
    """Validate ``token`` and load the user it names (one query, no cache)."""

    try:
        access = AccessToken(token)
    except TokenError as exc:
        if _is_expired(token):
            raise HandshakeRefused(REASON_EXPIRED) from exc
        raise HandshakeRefused(REASON_UNAUTHORIZED) from exc

    user_id = access.get(api_settings.USER_ID_CLAIM)
    if user_id is None:
        raise HandshakeRefused(REASON_UNAUTHORIZED)

    user = (
        get_user_model()
        .objects.filter(**{api_settings.USER_ID_FIELD: user_id})
        .only("id", "username", "role", "full_name", "avatar", "is_active")
        .first()
    )
    if user is None or not user.is_active:
        raise HandshakeRefused(REASON_USER_NOT_FOUND)
    return Identity.from_user(user)


async def authenticate_handshake(environ: dict[str, Any], auth: Any | None) -> Identity:
    """Resolve the connecting user or refuse the Socket.IO handshake."""

    token = extract_token(environ, auth)
    if not token:
        logger.warning("Socket.IO handshake refused: no token provided")
        raise sio_exceptions.ConnectionRefusedError(REASON_UNAUTHORIZED)

    try:
        return await database_sync_to_async(resolve_identity)(token)
    except HandshakeRefused as exc:
        logger.warning("Socket.IO handshake refused: %s", exc.reason)
        raise sio_exceptions.ConnectionRefusedError(exc.reason) from exc
    except Exception as exc:
        logger.exception("Socket.IO connect error")
        raise sio_exceptions.ConnectionRefusedError(REASON_SERVER_ERROR) from exc
