from django.contrib.auth.models import AbstractUser
from django.db import models
from django.db.models import CharField
from django.db.models import EmailField
from django.utils.translation import gettext_lazy as _


class User(AbstractUser):
    """
    Default custom user model for zubix_pod.

    The realtime gateway snapshots ``id``, ``username``, ``role``,
    ``full_name`` and ``avatar`` once per connection.
    """

    class Role(models.TextChoices):
        USER = "USER", _("User")
        POD_OWNER = "POD_OWNER", _("Pod Owner")

    # First and last name do not cover name patterns around the globe
    full_name = CharField(_("Full Name"), blank=True, max_length=255)
    email = EmailField(_("email address"), unique=True)
    avatar = CharField(_("Avatar"), blank=True, default="", max_length=500)
    role = CharField(
        _("Role"), max_length=20, choices=Role.choices, default=Role.USER
    )
    # Audit timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def save(self, *args, **kwargs):
        # Fall back to first/last name when no explicit full name is given
        if not self.full_name:
            self.full_name = f"{self.first_name} {self.last_name}".strip()
        super().save(*args, **kwargs)
