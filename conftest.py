"""
Pytest configuration and shared fixtures.
"""

import datetime
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model

User = get_user_model()

TODAY = datetime.date(2025, 3, 10)


@pytest.fixture
def owner_user(db):
    from accounts.models import Role

    return User.objects.create_user(
        username="owner",
        password="testpass123",
        role=Role.OWNER,
        first_name="Ayse",
        last_name="Owner",
    )


@pytest.fixture
def merchandiser_user(db):
    from accounts.models import Role

    return User.objects.create_user(
        username="merch",
        password="testpass123",
        role=Role.MERCHANDISER,
    )


@pytest.fixture
def planner_user(db):
    from accounts.models import Role

    return User.objects.create_user(
        username="planner",
        password="testpass123",
        role=Role.PLANNER,
    )


@pytest.fixture
def viewer_user(db):
    from accounts.models import Role

    return User.objects.create_user(
        username="viewer",
        password="testpass123",
        role=Role.VIEWER,
    )


@pytest.fixture
def make_item():
    """Unsaved ProductionItem with sensible defaults; pass fields to override."""
    from production.models import ProductionItem

    def _make(**fields):
        values = {
            "season": "SS25",
            "model_code": "MDL-001",
            "model_name": "Summer Breeze Dress",
            "category": "Dresses",
            "manufacturer": "MACHINIST",
            "status": "IN CUTTING",
            "sizes_breakdown": {"S": 50, "M": 100, "L": 50},
            "planned_qty": 200,
            "target_sales_price": Decimal("89.99"),
            "target_loading_date": TODAY + datetime.timedelta(days=30),
            "po_date": TODAY - datetime.timedelta(days=30),
            "fabric_order_status": "PENDING",
        }
        values.update(fields)
        return ProductionItem(**values)

    return _make


@pytest.fixture
def production_item(db, make_item):
    item = make_item()
    item.save()
    return item


@pytest.fixture
def materials(production_item):
    from production.models import ProductMaterial

    return [
        ProductMaterial.objects.create(
            item=production_item,
            material_type="Main Fabric",
            supplier="Fabric Co. Ltd",
            quality="100% Cotton Poplin",
            unit_consumption=Decimal("1.5"),
            unit_price=Decimal("4.50"),
            waste_rate=Decimal("0.03"),
            order_status="OK",
            position=0,
        ),
        ProductMaterial.objects.create(
            item=production_item,
            material_type="Accessory",
            supplier="Trims World",
            quality="Metal button",
            unit_consumption=Decimal("6"),
            unit_price=Decimal("0.08"),
            waste_rate=Decimal("0"),
            position=1,
        ),
    ]


@pytest.fixture
def labor_costs(production_item):
    from production.models import ProductLaborCost

    return [
        ProductLaborCost.objects.create(item=production_item, operation_name="PATTERN", cost_amount=Decimal("1.20"), position=0),
        ProductLaborCost.objects.create(item=production_item, operation_name="CM", cost_amount=Decimal("4.50"), position=1),
    ]


@pytest.fixture
def memory_repo():
    from production.repository import InMemoryProductionRepository

    return InMemoryProductionRepository()
