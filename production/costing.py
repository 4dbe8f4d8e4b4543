"""
Costing form controller.

Holds an editable draft of one production item plus its material and
labor rows. Nothing is persisted until save(), which runs three steps in
order: update the item, replace its materials, replace its labor costs.
The steps are not one transaction; a failure stops the sequence and
raises CostingSaveError, leaving earlier steps applied.
"""

import datetime
import logging
import secrets
from dataclasses import asdict, dataclass, field
from decimal import Decimal

from .metrics import aggregate_cost, deadline_status, line_total, material_alert, profit_margin, to_decimal
from .models import FabricOrderStatus, MaterialCategory, MaterialOrderStatus, ProductionStatus
from .repository import ITEM_FIELDS, LABOR_FIELDS, MATERIAL_FIELDS, RepositoryError
from .services import fetch_item, fetch_labor_costs, fetch_materials

logger = logging.getLogger(__name__)

_DECIMAL_MATERIAL_FIELDS = {"unit_consumption", "unit_price", "waste_rate"}


class CostingSaveError(Exception):
    """One of the three save steps failed."""

    def __init__(self, step):
        self.step = step
        super().__init__(f"Saving {step} failed")


def placeholder_id(prefix):
    """Temporary id for a row the store has not seen yet (never a UUID)."""
    return f"{prefix}-{secrets.token_hex(4)}"


@dataclass
class ItemDraft:
    """Every editable field of a production item, always present."""

    id: object = None
    season: str = ""
    model_code: str = ""
    model_name: str = ""
    category: str = ""
    manufacturer: str = ""
    status: str = ProductionStatus.SAMPLE_SEWN
    sizes_breakdown: dict = field(default_factory=dict)
    planned_qty: int = 0
    received_qty: int = 0
    target_sales_price: Decimal = Decimal("0")
    final_sales_price_local: Decimal = Decimal("0")
    target_loading_date: datetime.date = None
    po_date: datetime.date = None
    fabric_arrival_date: datetime.date = None
    cutting_date: datetime.date = None
    actual_mfg_deadline: datetime.date = None
    fabric_supplier: str = ""
    fabric_quality: str = ""
    fabric_composition: str = ""
    lining_detail: str = ""
    color_name: str = ""
    color_code: str = ""
    fabric_order_status: str = FabricOrderStatus.PENDING
    image_url: str = ""

    @classmethod
    def from_item(cls, item):
        draft = cls(id=item.id)
        for name in ITEM_FIELDS:
            value = getattr(item, name, None)
            if value is None:
                # keep the typed default ("" / {} / 0) rather than None
                continue
            setattr(draft, name, value)
        return draft

    def to_fields(self):
        return {name: getattr(self, name) for name in ITEM_FIELDS}


@dataclass
class MaterialDraft:
    id: str = ""
    material_type: str = MaterialCategory.MAIN_FABRIC
    supplier: str = ""
    quality: str = ""
    unit_consumption: Decimal = Decimal("0")
    unit_price: Decimal = Decimal("0")
    waste_rate: Decimal = Decimal("0")
    total_amount: Decimal = Decimal("0")
    order_status: str = MaterialOrderStatus.PENDING
    notes: str = ""

    @classmethod
    def from_row(cls, row):
        draft = cls(id=str(row.id))
        for name in MATERIAL_FIELDS:
            value = getattr(row, name, None)
            if value is not None:
                setattr(draft, name, value)
        draft.recalculate()
        return draft

    @property
    def is_accessory(self):
        return self.material_type == MaterialCategory.ACCESSORY

    def recalculate(self):
        self.total_amount = line_total(self.unit_consumption, self.unit_price, self.waste_rate)
        return self.total_amount


@dataclass
class LaborDraft:
    id: str = ""
    operation_name: str = ""
    cost_amount: Decimal = Decimal("0")

    @classmethod
    def from_row(cls, row):
        return cls(id=str(row.id), operation_name=row.operation_name or "", cost_amount=row.cost_amount)


def _find(rows, row_id):
    row_id = str(row_id)
    for row in rows:
        if row.id == row_id:
            return row
    raise KeyError(row_id)


class CostingForm:
    def __init__(self, repository, item, materials=(), labor_costs=()):
        self.repository = repository
        self.item = item if isinstance(item, ItemDraft) else ItemDraft.from_item(item)
        self.materials = [m if isinstance(m, MaterialDraft) else MaterialDraft.from_row(m) for m in materials]
        self.labor_costs = [
            row if isinstance(row, LaborDraft) else LaborDraft.from_row(row) for row in labor_costs
        ]

    @classmethod
    def load(cls, repository, item_id):
        """Seed a draft from the store; None when the item does not exist."""
        item = fetch_item(repository, item_id)
        if item is None:
            return None
        return cls(
            repository,
            item,
            fetch_materials(repository, item.id),
            fetch_labor_costs(repository, item.id),
        )

    # -- item fields ----------------------------------------------------

    def set_field(self, name, value):
        if name not in ITEM_FIELDS:
            raise AttributeError(f"ProductionItem has no editable field {name!r}")
        setattr(self.item, name, value)

    # -- material rows --------------------------------------------------

    def add_material(self, material_type=MaterialCategory.MAIN_FABRIC):
        prefix = "acc" if material_type == MaterialCategory.ACCESSORY else "mat"
        row = MaterialDraft(id=placeholder_id(prefix), material_type=material_type)
        self.materials.append(row)
        return row

    def add_accessory(self):
        return self.add_material(MaterialCategory.ACCESSORY)

    def update_material(self, row_id, **changes):
        row = _find(self.materials, row_id)
        for name, value in changes.items():
            if name not in MATERIAL_FIELDS:
                raise AttributeError(f"ProductMaterial has no editable field {name!r}")
            if name in _DECIMAL_MATERIAL_FIELDS:
                value = to_decimal(value)
            setattr(row, name, value)
        row.recalculate()
        return row

    def remove_material(self, row_id):
        before = len(self.materials)
        self.materials = [row for row in self.materials if row.id != str(row_id)]
        return len(self.materials) != before

    @property
    def fabric_materials(self):
        return [row for row in self.materials if not row.is_accessory]

    @property
    def accessories(self):
        return [row for row in self.materials if row.is_accessory]

    # -- labor rows -----------------------------------------------------

    def add_labor(self):
        row = LaborDraft(id=placeholder_id("labor"))
        self.labor_costs.append(row)
        return row

    def update_labor(self, row_id, **changes):
        row = _find(self.labor_costs, row_id)
        for name, value in changes.items():
            if name not in LABOR_FIELDS:
                raise AttributeError(f"ProductLaborCost has no editable field {name!r}")
            if name == "cost_amount":
                value = to_decimal(value)
            setattr(row, name, value)
        return row

    def remove_labor(self, row_id):
        before = len(self.labor_costs)
        self.labor_costs = [row for row in self.labor_costs if row.id != str(row_id)]
        return len(self.labor_costs) != before

    # -- derived values -------------------------------------------------

    @property
    def summary(self):
        return aggregate_cost(self.materials, self.labor_costs)

    @property
    def margin(self):
        return profit_margin(self.item.target_sales_price, self.summary.unit_cost)

    @property
    def deadline_badge(self):
        return deadline_status(self.item.target_loading_date, self.item.status)

    @property
    def material_badge(self):
        return material_alert(self.item.fabric_order_status, self.item.cutting_date)

    def initial_data(self):
        """Plain dicts for seeding Django forms and formsets."""
        return {
            "item": asdict(self.item),
            "materials": [asdict(row) for row in self.materials],
            "labor_costs": [asdict(row) for row in self.labor_costs],
        }

    # -- persistence ----------------------------------------------------

    def save(self):
        item_id = self.item.id
        step = "item"
        try:
            self.repository.update_item(item_id, self.item.to_fields())
            step = "materials"
            saved_materials = self.repository.replace_materials(item_id, self.materials)
            self.materials = [MaterialDraft.from_row(row) for row in saved_materials]
            step = "labor costs"
            saved_labor = self.repository.replace_labor_costs(item_id, self.labor_costs)
            self.labor_costs = [LaborDraft.from_row(row) for row in saved_labor]
        except RepositoryError as exc:
            logger.warning("Saving costing of item %s stopped at %s: %s", item_id, step, exc)
            raise CostingSaveError(step) from exc
        logger.info(
            "Saved costing of item %s (%d materials, %d labor rows)",
            item_id, len(self.materials), len(self.labor_costs),
        )
        return self

