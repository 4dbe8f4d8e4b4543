"""
Derived costing and scheduling metrics.

Pure functions: nothing here touches the database. They accept model
instances, costing-form draft rows or plain mappings so the board, the
costing page, the analytics page and the alert digest all share one
set of rules.
"""

import datetime
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.db import models
from django.utils import timezone
from django.utils.dateparse import parse_date
from django.utils.translation import gettext_lazy as _

from .models import FabricOrderStatus, ProductionStatus

CENT = Decimal("0.01")

# Days before the target loading date at which a card turns yellow
DEADLINE_WARNING_DAYS = 7
# Days before cutting at which an unarrived fabric becomes urgent
CUTTING_URGENT_DAYS = 3


class Severity(models.TextChoices):
    OK = "ok", _("On track")
    WARNING = "warning", _("Due soon")
    OVERDUE = "overdue", _("Overdue")
    INFO = "info", _("Info")
    URGENT = "urgent", _("Urgent")
    DEFAULT = "default", _("Pending")


@dataclass(frozen=True)
class CostSummary:
    material_total: Decimal
    labor_total: Decimal
    unit_cost: Decimal


@dataclass(frozen=True)
class DeadlineBadge:
    severity: str
    days_value: int


@dataclass(frozen=True)
class MaterialAlert:
    severity: str
    code: str
    message: str


def to_decimal(value):
    """Coerce form input, floats and None into a Decimal (0 on garbage)."""
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("0")


def _to_date(value):
    if value is None or value == "":
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    return parse_date(str(value))


def _field(row, name):
    if isinstance(row, dict):
        return row.get(name)
    return getattr(row, name, None)


def line_total(consumption, unit_price, waste_rate):
    """Material line amount: consumption × price, plus waste, in cents."""
    amount = to_decimal(consumption) * to_decimal(unit_price) * (1 + to_decimal(waste_rate))
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def aggregate_cost(materials, labor_costs):
    material_total = sum((to_decimal(_field(m, "total_amount")) for m in materials), Decimal("0"))
    labor_total = sum((to_decimal(_field(row, "cost_amount")) for row in labor_costs), Decimal("0"))
    return CostSummary(
        material_total=material_total,
        labor_total=labor_total,
        unit_cost=material_total + labor_total,
    )


def profit_margin(target_price, unit_cost):
    """Margin in percent of the target price; 0 when there is no price."""
    price = to_decimal(target_price)
    if price <= 0:
        return Decimal("0")
    return (price - to_decimal(unit_cost)) / price * 100


def deadline_status(target_date, status, today=None):
    """
    Badge for the target loading date of an item.

    Returns None for shipped items and items without a date. Days are
    calendar days; ``days_value`` is always the absolute distance.
    """
    target = _to_date(target_date)
    if status == ProductionStatus.SHIPPED or target is None:
        return None

    today = today or timezone.localdate()
    remaining = (target - today).days

    if remaining < 0:
        return DeadlineBadge(Severity.OVERDUE, abs(remaining))
    if remaining <= DEADLINE_WARNING_DAYS:
        return DeadlineBadge(Severity.WARNING, remaining)
    return DeadlineBadge(Severity.OK, remaining)


def material_alert(fabric_order_status, cutting_date, today=None):
    """
    Fabric procurement alert for a card. First matching rule wins:

    delivered → nothing; at the manufacturer's warehouse → info;
    cutting within CUTTING_URGENT_DAYS (or past) → urgent; ordered → info;
    anything else → pending.
    """
    if fabric_order_status == FabricOrderStatus.DELIVERED:
        return None

    if fabric_order_status == FabricOrderStatus.MANUFACTURER_WAREHOUSE:
        return MaterialAlert(Severity.INFO, "in_warehouse", _("In warehouse"))

    cutting = _to_date(cutting_date)
    if cutting is not None:
        today = today or timezone.localdate()
        if (cutting - today).days <= CUTTING_URGENT_DAYS:
            if fabric_order_status == FabricOrderStatus.PENDING:
                return MaterialAlert(Severity.URGENT, "not_ordered", _("Fabric not ordered!"))
            return MaterialAlert(Severity.URGENT, "not_arrived", _("Fabric not arrived!"))

    if fabric_order_status == FabricOrderStatus.ORDERED:
        return MaterialAlert(Severity.INFO, "ordered", _("Fabric ordered"))

    return MaterialAlert(Severity.DEFAULT, "pending", _("Fabric pending"))
