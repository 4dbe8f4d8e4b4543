"""Tests for the pure costing and scheduling rules."""

import datetime
from decimal import Decimal

import pytest

from production.metrics import (
    Severity,
    aggregate_cost,
    deadline_status,
    line_total,
    material_alert,
    profit_margin,
    to_decimal,
)

TODAY = datetime.date(2025, 3, 10)


def days(n):
    return TODAY + datetime.timedelta(days=n)


class TestLineTotal:
    def test_consumption_times_price_plus_waste(self):
        # 1.5 × 4.50 × 1.03 = 6.9525 → 6.95
        assert line_total("1.5", "4.50", "0.03") == Decimal("6.95")

    def test_rounds_half_up_to_cents(self):
        # 1 × 0.15 × 1.01 = 0.1515 → 0.15; 0.125 → 0.13
        assert line_total(1, "0.15", "0.01") == Decimal("0.15")
        assert line_total(1, "0.125", 0) == Decimal("0.13")

    def test_blank_inputs_count_as_zero(self):
        assert line_total("", None, "") == Decimal("0.00")

    def test_to_decimal_ignores_garbage(self):
        assert to_decimal("abc") == Decimal("0")
        assert to_decimal(2.5) == Decimal("2.5")


class TestAggregateCost:
    def test_sums_materials_and_labor(self):
        summary = aggregate_cost(
            [{"total_amount": Decimal("6.95")}, {"total_amount": Decimal("0.48")}],
            [{"cost_amount": Decimal("1.20")}, {"cost_amount": "4.50"}],
        )
        assert summary.material_total == Decimal("7.43")
        assert summary.labor_total == Decimal("5.70")
        assert summary.unit_cost == Decimal("13.13")

    def test_empty_rows(self):
        summary = aggregate_cost([], [])
        assert summary.unit_cost == Decimal("0")


class TestProfitMargin:
    def test_zero_price_returns_zero(self):
        assert profit_margin(0, 123) == Decimal("0")

    def test_negative_price_returns_zero(self):
        assert profit_margin(-5, 1) == Decimal("0")

    def test_hundred_minus_sixty_is_forty(self):
        assert profit_margin(100, 60) == Decimal("40")

    def test_loss_is_negative(self):
        assert profit_margin(50, 75) == Decimal("-50")


class TestDeadlineStatus:
    def test_three_days_ahead_is_warning(self):
        badge = deadline_status(days(3), "IN SEWING", today=TODAY)
        assert badge.severity == Severity.WARNING
        assert badge.days_value == 3

    def test_yesterday_is_overdue_by_one(self):
        badge = deadline_status(days(-1), "IN SEWING", today=TODAY)
        assert badge.severity == Severity.OVERDUE
        assert badge.days_value == 1

    def test_far_ahead_is_ok(self):
        badge = deadline_status(days(30), "IN CUTTING", today=TODAY)
        assert badge.severity == Severity.OK
        assert badge.days_value == 30

    def test_seven_days_is_still_warning(self):
        assert deadline_status(days(7), "IN CUTTING", today=TODAY).severity == Severity.WARNING
        assert deadline_status(days(8), "IN CUTTING", today=TODAY).severity == Severity.OK

    def test_today_is_warning_with_zero_days(self):
        badge = deadline_status(TODAY, "IN CUTTING", today=TODAY)
        assert badge.severity == Severity.WARNING
        assert badge.days_value == 0

    @pytest.mark.parametrize("offset", [-100, -1, 0, 3, 100])
    def test_shipped_has_no_badge(self, offset):
        assert deadline_status(days(offset), "SHIPPED", today=TODAY) is None

    def test_missing_date_has_no_badge(self):
        assert deadline_status(None, "IN CUTTING", today=TODAY) is None

    def test_accepts_iso_string(self):
        assert deadline_status("2025-03-09", "IN CUTTING", today=TODAY).severity == Severity.OVERDUE


class TestMaterialAlert:
    @pytest.mark.parametrize("cutting", [None, days(-5), days(1), days(30)])
    def test_delivered_never_alerts(self, cutting):
        assert material_alert("DELIVERED", cutting, today=TODAY) is None

    def test_pending_close_to_cutting_is_not_ordered(self):
        alert = material_alert("PENDING", days(1), today=TODAY)
        assert alert.severity == Severity.URGENT
        assert alert.code == "not_ordered"

    def test_ordered_close_to_cutting_is_not_arrived(self):
        alert = material_alert("ORDERED", days(3), today=TODAY)
        assert alert.severity == Severity.URGENT
        assert alert.code == "not_arrived"

    def test_past_cutting_date_is_urgent(self):
        assert material_alert("PENDING", days(-2), today=TODAY).severity == Severity.URGENT

    def test_manufacturer_warehouse_wins_over_cutting_date(self):
        alert = material_alert("MANUFACTURER WAREHOUSE", days(1), today=TODAY)
        assert alert.severity == Severity.INFO
        assert alert.code == "in_warehouse"

    def test_ordered_with_distant_cutting_is_info(self):
        alert = material_alert("ORDERED", days(10), today=TODAY)
        assert alert.severity == Severity.INFO
        assert alert.code == "ordered"

    def test_pending_without_cutting_date_is_default(self):
        alert = material_alert("PENDING", None, today=TODAY)
        assert alert.severity == Severity.DEFAULT
        assert alert.code == "pending"
