"""
Season analytics: totals and distributions over all production items.

Costs come from each item's stored material and labor rows, so an item
without costing rows contributes its quantity and revenue but no cost.
"""

from collections import Counter
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from .metrics import aggregate_cost, profit_margin, to_decimal
from .models import WORKFLOW, MaterialCategory
from .services import fetch_items, fetch_labor_costs, fetch_materials

_PERCENT = Decimal("0.1")


@dataclass(frozen=True)
class ItemCosting:
    item: object
    material_total: Decimal
    trims_total: Decimal
    labor_total: Decimal
    unit_cost: Decimal
    margin: Decimal

    @property
    def fabric_total(self):
        return self.material_total - self.trims_total


@dataclass(frozen=True)
class SeasonReport:
    total_planned_qty: int
    season_cost: Decimal
    expected_revenue: Decimal
    avg_margin: Decimal
    status_counts: list = field(default_factory=list)
    cost_breakdown: dict = field(default_factory=dict)
    items: list = field(default_factory=list)


def item_costing(repository, item):
    materials = fetch_materials(repository, item.id)
    labor_costs = fetch_labor_costs(repository, item.id)
    summary = aggregate_cost(materials, labor_costs)
    trims_total = aggregate_cost(
        [m for m in materials if m.material_type == MaterialCategory.ACCESSORY], []
    ).material_total
    return ItemCosting(
        item=item,
        material_total=summary.material_total,
        trims_total=trims_total,
        labor_total=summary.labor_total,
        unit_cost=summary.unit_cost,
        margin=profit_margin(item.target_sales_price, summary.unit_cost),
    )


def _share(part, whole):
    if whole <= 0:
        return Decimal("0.0")
    return (part / whole * 100).quantize(_PERCENT, rounding=ROUND_HALF_UP)


def build_season_report(repository, season=None, items=None):
    """
    Aggregate a season (or every season when ``season`` is None).

    Season cost and revenue are weighted by planned quantity; the average
    margin is the margin of those two totals, not a mean of item margins.
    """
    if items is None:
        items = fetch_items(repository)
    if season:
        items = [item for item in items if item.season == season]
    costings = [item_costing(repository, item) for item in items]

    total_qty = sum(item.planned_qty or 0 for item in items)
    fabric = trims = labor = Decimal("0")
    season_cost = revenue = Decimal("0")
    for costing in costings:
        qty = costing.item.planned_qty or 0
        fabric += costing.fabric_total * qty
        trims += costing.trims_total * qty
        labor += costing.labor_total * qty
        season_cost += costing.unit_cost * qty
        revenue += to_decimal(costing.item.target_sales_price) * qty

    counts = Counter(item.status for item in items)
    return SeasonReport(
        total_planned_qty=total_qty,
        season_cost=season_cost,
        expected_revenue=revenue,
        avg_margin=profit_margin(revenue, season_cost),
        status_counts=[(status, counts.get(status, 0)) for status in WORKFLOW],
        cost_breakdown={
            "fabric": _share(fabric, season_cost),
            "trims": _share(trims, season_cost),
            "labor": _share(labor, season_cost),
        },
        items=costings,
    )
