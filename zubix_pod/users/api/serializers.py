from rest_framework import serializers

from zubix_pod.users.models import User


class UserSummarySerializer(serializers.ModelSerializer[User]):
    """Minimal sender projection embedded in chat messages.

    Same shape as the ``user`` of ``user-joined``: blank name and avatar are
    sent as ``None``.
    """

    fullName = serializers.SerializerMethodField()  # noqa: N815
    avatar = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "username", "fullName", "avatar"]
        read_only_fields = fields

    def get_fullName(self, obj: User) -> str | None:  # noqa: N802
        return obj.full_name or None

    def get_avatar(self, obj: User) -> str | None:
        return obj.avatar or None
