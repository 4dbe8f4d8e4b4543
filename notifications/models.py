"""
Notifications app: daily production alert digest.

NotificationLog records every alert that went out in a digest email. It
is also the debounce store: an item/alert pair is not repeated within
24 hours of a successful send.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class AlertCode(models.TextChoices):
    DEADLINE_OVERDUE = "deadline_overdue", _("Loading date overdue")
    DEADLINE_WARNING = "deadline_warning", _("Loading date due soon")
    FABRIC_NOT_ORDERED = "fabric_not_ordered", _("Fabric not ordered")
    FABRIC_NOT_ARRIVED = "fabric_not_arrived", _("Fabric not arrived")


class NotificationLog(models.Model):
    """One alert line of one digest email."""

    item = models.ForeignKey(
        "production.ProductionItem",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="notification_logs",
        verbose_name=_("production item"),
    )
    alert_code = models.CharField(max_length=25, choices=AlertCode.choices, verbose_name=_("alert"))
    recipient = models.CharField(max_length=500, verbose_name=_("recipients"))
    sent_at = models.DateTimeField(auto_now_add=True, db_index=True)
    success = models.BooleanField(default=True)
    error_message = models.TextField(blank=True)

    class Meta:
        verbose_name = _("notification log")
        verbose_name_plural = _("notification logs")
        ordering = ["-sent_at"]

    def __str__(self):
        status = "✓" if self.success else "✗"
        return f"{status} {self.get_alert_code_display()} → {self.recipient}"
