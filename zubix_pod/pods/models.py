from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class Pod(models.Model):
    """A community with exactly one owner and any number of members."""

    name = models.CharField(max_length=150)
    description = models.TextField(blank=True, default="")
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="owned_pods"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.name


class PodMember(models.Model):
    pod = models.ForeignKey(Pod, on_delete=models.CASCADE, related_name="members")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="pod_memberships"
    )
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["pod", "user"], name="uniq_pod_member_pod_user"
            ),
        ]

    def __str__(self):
        return f"{self.user_id}@pod:{self.pod_id}"


class Room(models.Model):
    """Pod-scoped chat room.

    The audience is the pod owner plus the pod members. A private room narrows
    that audience to the members listed in ``RoomMember``; it never widens it.
    """

    class Type(models.TextChoices):
        GENERAL = "GENERAL", _("General")
        QA = "QA", _("Q&A")

    pod = models.ForeignKey(Pod, on_delete=models.CASCADE, related_name="rooms")
    name = models.CharField(max_length=150)
    description = models.TextField(blank=True, default="")
    type = models.CharField(max_length=20, choices=Type.choices, default=Type.GENERAL)
    is_private = models.BooleanField(
        default=False, help_text=_("Restrict the room to listed room members")
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.name} ({self.pod_id})"


class RoomMember(models.Model):
    room = models.ForeignKey(Room, on_delete=models.CASCADE, related_name="members")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="room_memberships"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["room", "user"], name="uniq_room_member_room_user"
            ),
        ]

    def __str__(self):
        return f"{self.user_id}@room:{self.room_id}"
