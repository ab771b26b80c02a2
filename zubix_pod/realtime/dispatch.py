"""Event name -> handler table and the error policy around it."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING
from typing import Any

from .errors import GatewayError
from .errors import InternalError
from .handlers import chats
from .handlers import notifications
from .handlers import rooms
from .pipeline import send_direct_message
from .pipeline import send_room_message
from .state import HandlerResult
from .state import error_reply

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Awaitable
    from collections.abc import Callable

    from .state import ConnectionState
    from .state import Identity

    Handler = Callable[[ConnectionState, Identity, Any], Awaitable[HandlerResult]]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Route:
    handler: Handler
    # Generic message for unexpected failures; None keeps them server side.
    failure_message: str | None


EVENT_ROUTES: dict[str, Route] = {
    "join-room": Route(rooms.join_room, "Failed to join room"),
    "leave-room": Route(rooms.leave_room, "Failed to leave room"),
    "send-message": Route(send_room_message, "Failed to send message"),
    "typing-start": Route(rooms.typing_start, None),
    "typing-stop": Route(rooms.typing_stop, None),
    "join-chat": Route(chats.join_chat, "Failed to join chat"),
    "leave-chat": Route(chats.leave_chat, None),
    "send-dm": Route(send_direct_message, "Failed to send message"),
    "dm-typing-start": Route(chats.dm_typing_start, None),
    "dm-typing-stop": Route(chats.dm_typing_stop, None),
    "join-notifications": Route(notifications.join_notifications, None),
}


async def dispatch(
    event: str, state: ConnectionState, identity: Identity, payload: Any
) -> HandlerResult:
    """Run the handler for ``event``.

    NotFound, Unauthorized and Validation errors turn into one ``error``
    reply for the originating connection. Anything else is logged and
    reported with the route's generic message, never with internal detail.
    The connection state is left unchanged on failure.
    """

    route = EVENT_ROUTES[event]
    try:
        return await route.handler(state, identity, payload)
    except InternalError as exc:
        return HandlerResult(state, (error_reply(exc.message),))
    except GatewayError as exc:
        logger.warning(
            "Rejected %s from %s: %s", event, identity.username, exc.message
        )
        return HandlerResult(state, (error_reply(exc.message),))
    except Exception:
        logger.exception("%s handler failed for %s", event, identity.username)
        if route.failure_message is None:
            return HandlerResult(state)
        return HandlerResult(state, (error_reply(route.failure_message),))
