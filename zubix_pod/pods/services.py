from __future__ import annotations

from typing import TYPE_CHECKING

from zubix_pod.pods.models import PodMember
from zubix_pod.pods.models import RoomMember

if TYPE_CHECKING:  # import for type checking only
    from zubix_pod.pods.models import Room


def is_pod_owner(room: Room, user_id: int) -> bool:
    return room.pod.owner_id == user_id


def is_pod_member(room: Room, user_id: int) -> bool:
    return PodMember.objects.filter(pod_id=room.pod_id, user_id=user_id).exists()


def can_access_room(room: Room, user_id: int) -> bool:
    """Return whether ``user_id`` may read or post in ``room`` right now.

    - the pod owner is always admitted
    - otherwise the user must be a pod member
    - private rooms additionally require an explicit room membership

    Nothing is cached: every call reflects the current membership rows.
    """

    if is_pod_owner(room, user_id):
        return True
    if not is_pod_member(room, user_id):
        return False
    if room.is_private:
        return RoomMember.objects.filter(room_id=room.pk, user_id=user_id).exists()
    return True
