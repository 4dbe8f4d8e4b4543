"""
Data access for production items and their material / labor rows.

Views, the kanban engine and the costing controller receive a
ProductionRepository instead of reaching for the ORM directly, so the
tests can swap in InMemoryProductionRepository.

Child rows are replaced wholesale: delete by parent id, then insert.
Row ids that are valid UUIDs survive a replace; anything else (the
placeholders the costing form hands out for new rows) is dropped and
a fresh UUID is assigned.
"""

import copy
import logging
import uuid
from contextlib import contextmanager

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.utils import timezone

from .models import ProductionItem, ProductionStatus, ProductLaborCost, ProductMaterial

logger = logging.getLogger(__name__)

# Fields the application may write on an item (id and timestamps are managed)
ITEM_FIELDS = (
    "season",
    "model_code",
    "model_name",
    "category",
    "manufacturer",
    "status",
    "sizes_breakdown",
    "planned_qty",
    "received_qty",
    "target_sales_price",
    "final_sales_price_local",
    "target_loading_date",
    "po_date",
    "fabric_arrival_date",
    "cutting_date",
    "actual_mfg_deadline",
    "fabric_supplier",
    "fabric_quality",
    "fabric_composition",
    "lining_detail",
    "color_name",
    "color_code",
    "fabric_order_status",
    "image_url",
)

MATERIAL_FIELDS = (
    "material_type",
    "supplier",
    "quality",
    "unit_consumption",
    "unit_price",
    "waste_rate",
    "order_status",
    "notes",
)

LABOR_FIELDS = ("operation_name", "cost_amount")


class RepositoryError(Exception):
    """The backing store could not complete an operation."""


class ItemNotFound(RepositoryError):
    pass


def persistent_id(value):
    """Return value as a UUID if it is one, else None (store assigns a new id)."""
    if value is None or value == "":
        return None
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (ValueError, AttributeError, TypeError):
        return None


def _get(row, name, default=None):
    if isinstance(row, dict):
        return row.get(name, default)
    return getattr(row, name, default)


def _pick(row, names):
    """Collect the named fields present on a row (mapping or object)."""
    missing = object()
    picked = {}
    for name in names:
        value = _get(row, name, missing)
        if value is not missing:
            picked[name] = value
    return picked


def _item_fields(fields):
    unknown = set(fields) - set(ITEM_FIELDS)
    if unknown:
        raise ValueError(f"Unknown production item fields: {', '.join(sorted(unknown))}")
    return dict(fields)


class ProductionRepository:
    """
    Interface of the production data store.

    Items come back newest first; materials and labor costs in saved order.
    Implementations raise RepositoryError (or ItemNotFound) on failure.
    """

    def list_items(self):
        raise NotImplementedError

    def get_item(self, item_id):
        raise NotImplementedError

    def create_item(self, fields):
        raise NotImplementedError

    def update_item(self, item_id, fields):
        raise NotImplementedError

    def list_materials(self, item_id):
        raise NotImplementedError

    def list_labor_costs(self, item_id):
        raise NotImplementedError

    def replace_materials(self, item_id, rows):
        raise NotImplementedError

    def replace_labor_costs(self, item_id, rows):
        raise NotImplementedError


@contextmanager
def _database_errors(action):
    try:
        yield
    except DatabaseError as exc:
        logger.warning("%s failed: %s", action, exc)
        raise RepositoryError(f"{action} failed") from exc


class DjangoProductionRepository(ProductionRepository):
    """ORM-backed repository used by the web views."""

    def list_items(self):
        with _database_errors("list items"):
            return list(ProductionItem.objects.order_by("-created_at"))

    def get_item(self, item_id):
        with _database_errors("get item"):
            try:
                return ProductionItem.objects.get(pk=item_id)
            except (ProductionItem.DoesNotExist, ValidationError, ValueError):
                return None

    def _require_item(self, item_id):
        item = self.get_item(item_id)
        if item is None:
            raise ItemNotFound(f"Production item {item_id} does not exist")
        return item

    def create_item(self, fields):
        fields = _item_fields(fields)
        fields.setdefault("status", ProductionStatus.SAMPLE_SEWN)
        with _database_errors("create item"):
            return ProductionItem.objects.create(**fields)

    def update_item(self, item_id, fields):
        fields = _item_fields(fields)
        item = self._require_item(item_id)
        for name, value in fields.items():
            setattr(item, name, value)
        with _database_errors("update item"):
            item.save(update_fields=[*fields, "updated_at"])
        return item

    def list_materials(self, item_id):
        with _database_errors("list materials"):
            return list(ProductMaterial.objects.filter(item_id=item_id))

    def list_labor_costs(self, item_id):
        with _database_errors("list labor costs"):
            return list(ProductLaborCost.objects.filter(item_id=item_id))

    def replace_materials(self, item_id, rows):
        item = self._require_item(item_id)
        materials = []
        for position, row in enumerate(rows):
            material = ProductMaterial(
                id=persistent_id(_get(row, "id")) or uuid.uuid4(),
                item=item,
                position=position,
                **_pick(row, MATERIAL_FIELDS),
            )
            # bulk_create skips save(); keep the stored total in sync here
            material.recalculate_total()
            materials.append(material)

        with _database_errors("replace materials"), transaction.atomic():
            ProductMaterial.objects.filter(item_id=item.pk).delete()
            ProductMaterial.objects.bulk_create(materials)
        return self.list_materials(item.pk)

    def replace_labor_costs(self, item_id, rows):
        item = self._require_item(item_id)
        labor_costs = [
            ProductLaborCost(
                id=persistent_id(_get(row, "id")) or uuid.uuid4(),
                item=item,
                position=position,
                **_pick(row, LABOR_FIELDS),
            )
            for position, row in enumerate(rows)
        ]
        with _database_errors("replace labor costs"), transaction.atomic():
            ProductLaborCost.objects.filter(item_id=item.pk).delete()
            ProductLaborCost.objects.bulk_create(labor_costs)
        return self.list_labor_costs(item.pk)


def _clone(instance):
    """Detached copy of a model instance, like a fresh fetch from the store."""
    values = {
        field.attname: copy.deepcopy(getattr(instance, field.attname))
        for field in instance._meta.concrete_fields
    }
    return type(instance)(**values)


class InMemoryProductionRepository(ProductionRepository):
    """
    Dictionary-backed repository for tests and demos.

    Operation names listed in ``fail_on`` raise RepositoryError, and every
    write is recorded in ``calls`` as (operation, item_id).
    """

    def __init__(self, items=()):
        self._items = {}
        self._materials = {}
        self._labor_costs = {}
        self.fail_on = set()
        self.calls = []
        for item in items:
            self.add(item)

    def add(self, item, materials=(), labor_costs=()):
        """Seed an item (model instance) and its child rows directly."""
        if item.id is None:
            item.id = uuid.uuid4()
        if item.created_at is None:
            item.created_at = timezone.now()
        self._items[item.id] = _clone(item)
        self._store_children(self._materials, ProductMaterial, item.id, materials, MATERIAL_FIELDS)
        self._store_children(self._labor_costs, ProductLaborCost, item.id, labor_costs, LABOR_FIELDS)
        return item

    def _check(self, operation, item_id=None):
        if operation in self.fail_on:
            raise RepositoryError(f"{operation} failed")
        if item_id is not None:
            self.calls.append((operation, item_id))

    def _key(self, item_id):
        key = persistent_id(item_id)
        if key not in self._items:
            raise ItemNotFound(f"Production item {item_id} does not exist")
        return key

    def _store_children(self, store, model, item_id, rows, names):
        stored = []
        for position, row in enumerate(rows):
            child = model(
                id=persistent_id(_get(row, "id")) or uuid.uuid4(),
                item_id=item_id,
                position=position,
                created_at=timezone.now(),
                **_pick(row, names),
            )
            if isinstance(child, ProductMaterial):
                child.recalculate_total()
            stored.append(child)
        store[item_id] = stored
        return [_clone(child) for child in stored]

    def list_items(self):
        self._check("list_items")
        # Dicts keep insertion order: newest is last
        return [_clone(item) for item in reversed(list(self._items.values()))]

    def get_item(self, item_id):
        self._check("get_item")
        item = self._items.get(persistent_id(item_id))
        return _clone(item) if item is not None else None

    def create_item(self, fields):
        self._check("create_item")
        fields = _item_fields(fields)
        fields.setdefault("status", ProductionStatus.SAMPLE_SEWN)
        item = ProductionItem(**fields)
        item.created_at = item.updated_at = timezone.now()
        self._items[item.id] = item
        self.calls.append(("create_item", item.id))
        return _clone(item)

    def update_item(self, item_id, fields):
        fields = _item_fields(fields)
        key = self._key(item_id)
        self._check("update_item", key)
        item = self._items[key]
        for name, value in fields.items():
            setattr(item, name, copy.deepcopy(value))
        item.updated_at = timezone.now()
        return _clone(item)

    def list_materials(self, item_id):
        self._check("list_materials")
        return [_clone(m) for m in self._materials.get(persistent_id(item_id), [])]

    def list_labor_costs(self, item_id):
        self._check("list_labor_costs")
        return [_clone(row) for row in self._labor_costs.get(persistent_id(item_id), [])]

    def replace_materials(self, item_id, rows):
        key = self._key(item_id)
        self._check("replace_materials", key)
        return self._store_children(self._materials, ProductMaterial, key, rows, MATERIAL_FIELDS)

    def replace_labor_costs(self, item_id, rows):
        key = self._key(item_id)
        self._check("replace_labor_costs", key)
        return self._store_children(self._labor_costs, ProductLaborCost, key, rows, LABOR_FIELDS)
