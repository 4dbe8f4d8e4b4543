"""
Celery scheduled task for the production alert digest.

Registered in CELERY_BEAT_SCHEDULE (settings.py) and run via celery-beat.

Schedule:
  08:00  send_production_alerts
"""

import logging
from smtplib import SMTPException

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail
from django.urls import reverse
from django.utils import timezone, translation

from production.metrics import Severity, deadline_status, material_alert

from .models import AlertCode

logger = logging.getLogger(__name__)

_MATERIAL_CODES = {
    "not_ordered": AlertCode.FABRIC_NOT_ORDERED,
    "not_arrived": AlertCode.FABRIC_NOT_ARRIVED,
}


def collect_alerts(items, today=None):
    """
    Alerts worth an email: overdue or due-soon loading dates and urgent
    fabric problems. Returns (item, AlertCode, text) tuples.
    """
    today = today or timezone.localdate()
    alerts = []
    for item in items:
        badge = deadline_status(item.target_loading_date, item.status, today=today)
        if badge is not None and badge.severity == Severity.OVERDUE:
            alerts.append((item, AlertCode.DEADLINE_OVERDUE, f"loading date overdue by {badge.days_value} day(s)"))
        elif badge is not None and badge.severity == Severity.WARNING:
            alerts.append((item, AlertCode.DEADLINE_WARNING, f"loading in {badge.days_value} day(s)"))

        alert = material_alert(item.fabric_order_status, item.cutting_date, today=today)
        if alert is not None and alert.severity == Severity.URGENT:
            alerts.append((item, _MATERIAL_CODES[alert.code], f"{alert.message} (cutting {item.cutting_date})"))
    return alerts


def _already_sent(item, code, since):
    from .models import NotificationLog

    return NotificationLog.objects.filter(
        item_id=item.id,
        alert_code=code,
        success=True,
        sent_at__gte=since,
    ).exists()


def _costing_url(item):
    with translation.override(settings.LANGUAGE_CODE):
        path = reverse("production:costing", kwargs={"pk": item.id})
    return f"{settings.BASE_URL}{path}"


@shared_task(name="notifications.tasks.send_production_alerts")
def send_production_alerts():
    """Email a digest of deadline and fabric alerts (debounced 24h per item/alert)."""
    recipients = list(settings.PRODUCTION_ALERT_RECIPIENTS)
    if not recipients:
        return "disabled"

    from production.services import fetch_items, get_repository

    from .models import NotificationLog

    today = timezone.localdate()
    cutoff_24h = timezone.now() - timezone.timedelta(hours=24)
    alerts = [
        (item, code, text)
        for item, code, text in collect_alerts(fetch_items(get_repository()), today)
        if not _already_sent(item, code, cutoff_24h)
    ]
    if not alerts:
        return "no alerts"

    lines = [f"Production alerts {today:%d/%m/%Y}", ""]
    for item, _code, text in alerts:
        lines.append(f"- {item.season} {item.model_code} {item.model_name} [{item.status}]: {text}")
        lines.append(f"  {_costing_url(item)}")
    body = "\n".join(lines)

    success = True
    error_message = ""
    try:
        send_mail(
            subject=f"[Production] {len(alerts)} alert(s) {today:%d/%m/%Y}",
            message=body,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=recipients,
        )
    except (SMTPException, OSError) as exc:
        success = False
        error_message = str(exc)
        logger.warning("Production alert digest failed: %s", exc)

    NotificationLog.objects.bulk_create([
        NotificationLog(
            item_id=item.id,
            alert_code=code,
            recipient=", ".join(recipients),
            success=success,
            error_message=error_message,
        )
        for item, code, _text in alerts
    ])

    if not success:
        return f"production_alerts failed: {len(alerts)}"
    return f"production_alerts sent: {len(alerts)}"
