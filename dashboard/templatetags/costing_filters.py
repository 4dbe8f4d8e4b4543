"""
Template filters for the board and the costing page.

Usage in templates:
    {% load costing_filters %}
    {{ 1234.5|money }}              → "$1,234.50"
    {{ 2850|money:"₺" }}            → "₺2,850.00"
    {{ 37.456|percent }}            → "37.5%"
    {{ item.deadline|days_label }}  → "3 days left" / "2 days overdue"
    {{ item.status|status_key }}    → "iron-pack"
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django import template
from django.utils.text import slugify
from django.utils.translation import gettext as _
from django.utils.translation import ngettext

from production.metrics import Severity

register = template.Library()


def _decimal(value):
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return None


@register.filter
def money(value, symbol="$"):
    """Two decimals with thousands separators; negatives keep the sign in front."""
    amount = _decimal(value)
    if amount is None:
        return value
    amount = amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


@register.filter
def percent(value, digits=1):
    amount = _decimal(value)
    if amount is None:
        return value
    try:
        digits = int(digits)
    except (TypeError, ValueError):
        digits = 1
    return f"{amount:.{digits}f}%"


@register.filter
def days_label(badge):
    """Human text for a DeadlineBadge; empty when there is no badge."""
    if badge is None:
        return ""
    days = badge.days_value
    if badge.severity == Severity.OVERDUE:
        return ngettext("%(days)d day overdue", "%(days)d days overdue", days) % {"days": days}
    if days == 0:
        return _("Due today")
    return ngettext("%(days)d day left", "%(days)d days left", days) % {"days": days}


@register.filter
def status_key(value):
    """CSS-safe key for a workflow status: "IRON/PACK" → "iron-pack"."""
    return slugify(str(value).replace("/", " "))
