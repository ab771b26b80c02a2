from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

from zubix_pod.realtime.naming import room_for_user
from zubix_pod.realtime.state import Enter
from zubix_pod.realtime.state import HandlerResult
from zubix_pod.realtime.state import Reply

if TYPE_CHECKING:  # import for type checking only
    from zubix_pod.realtime.state import ConnectionState
    from zubix_pod.realtime.state import Identity

logger = logging.getLogger(__name__)


async def join_notifications(
    state: ConnectionState, identity: Identity, payload: Any = None
) -> HandlerResult:
    """Re-confirm membership of the personal channel entered at handshake."""

    channel = room_for_user(identity.id)
    logger.info("%s joined notifications channel", identity.username)
    return HandlerResult(
        state.entering(channel),
        (
            Enter(channel),
            Reply("notifications-joined", {"message": "Successfully joined notifications"}),
        ),
    )
