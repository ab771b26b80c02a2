"""Per-connection state and the effects handlers ask the transport to perform."""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from dataclasses import replace
from typing import TYPE_CHECKING
from typing import Any

if TYPE_CHECKING:  # import for type checking only
    from zubix_pod.users.models import User


@dataclass(frozen=True)
class Identity:
    """User snapshot taken at handshake; immutable for the connection's life."""

    id: int
    username: str
    role: str
    full_name: str = ""
    avatar: str = ""

    @classmethod
    def from_user(cls, user: User) -> Identity:
        return cls(
            id=int(user.pk),
            username=user.username,
            role=user.role,
            full_name=user.full_name or "",
            avatar=user.avatar or "",
        )

    def profile(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "fullName": self.full_name or None,
            "avatar": self.avatar or None,
        }

    def brief(self) -> dict[str, Any]:
        return {"id": self.id, "username": self.username}


@dataclass(frozen=True)
class ConnectionState:
    """What the session manager knows about one connection.

    ``channels`` are the transport channels entered by this connection.
    ``active_room`` is the single room used for leave/typing gating and is
    always one of the entered room channels.
    """

    active_room: int | None = None
    channels: frozenset[str] = field(default_factory=frozenset)

    def entering(self, channel: str) -> ConnectionState:
        return replace(self, channels=self.channels | {channel})

    def leaving(self, channel: str) -> ConnectionState:
        return replace(self, channels=self.channels - {channel})

    def with_active_room(self, room_id: int | None) -> ConnectionState:
        return replace(self, active_room=room_id)


@dataclass(frozen=True)
class Enter:
    channel: str


@dataclass(frozen=True)
class Leave:
    channel: str


@dataclass(frozen=True)
class Reply:
    """Emit to the originating connection only."""

    event: str
    data: dict[str, Any]


@dataclass(frozen=True)
class Broadcast:
    """Emit to a channel, optionally skipping the originating connection."""

    channel: str
    event: str
    data: dict[str, Any]
    include_self: bool = False


Effect = Enter | Leave | Reply | Broadcast


@dataclass(frozen=True)
class HandlerResult:
    state: ConnectionState
    effects: tuple[Effect, ...] = ()


def error_reply(message: str) -> Reply:
    return Reply("error", {"message": message})
