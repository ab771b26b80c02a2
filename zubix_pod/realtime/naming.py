"""Transport channel names.

Rooms, chats and users live in disjoint namespaces so that a pod room and a
chat with the same numeric id never share an audience.
"""

from __future__ import annotations


def room_for_user(user_id: int) -> str:
    return f"user_{int(user_id)}"


def room_for_pod_room(room_id: int) -> str:
    return f"room_{int(room_id)}"


def room_for_chat(chat_id: int) -> str:
    return f"chat_{int(chat_id)}"
