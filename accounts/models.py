"""
Custom User model with role-based access control.

Roles are stored as a CharField with choices so they are easy to check
without extra DB queries. A user has one primary role: planners move
cards across the production board, merchandisers also own the costing
sheets, viewers can only look.
"""

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils.translation import gettext_lazy as _


class Role(models.TextChoices):
    OWNER = "owner", _("Owner")
    MERCHANDISER = "merchandiser", _("Merchandiser")
    PLANNER = "planner", _("Production planner")
    VIEWER = "viewer", _("Viewer")


class User(AbstractUser):
    """Extended user with a single primary role for RBAC."""

    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.VIEWER,
        verbose_name=_("role"),
    )

    class Meta:
        verbose_name = _("user")
        verbose_name_plural = _("users")

    def __str__(self):
        return f"{self.get_full_name() or self.username} ({self.get_role_display()})"

    # Convenience properties for templates and views
    @property
    def is_owner(self):
        return self.role == Role.OWNER

    @property
    def is_merchandiser(self):
        return self.role == Role.MERCHANDISER

    @property
    def is_planner(self):
        return self.role == Role.PLANNER

    @property
    def can_edit_costing(self):
        return self.is_superuser or self.has_any_role(Role.OWNER, Role.MERCHANDISER)

    @property
    def can_move_cards(self):
        return self.is_superuser or self.has_any_role(Role.OWNER, Role.MERCHANDISER, Role.PLANNER)

    def has_any_role(self, *roles):
        """Check if user has one of the given roles."""
        return self.role in roles
