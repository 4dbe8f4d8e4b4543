"""Tests for the production views: create, board move, costing page."""

import datetime
import json
from decimal import Decimal
from unittest import mock

import pytest
from django.urls import reverse
from django.utils import timezone

from production.models import ProductionItem, ProductMaterial
from production.repository import ITEM_FIELDS, InMemoryProductionRepository


def item_data(item, **changes):
    data = {}
    for name in ITEM_FIELDS:
        value = changes.get(name, getattr(item, name))
        if value is None:
            value = ""
        elif name == "sizes_breakdown":
            value = json.dumps(value)
        elif isinstance(value, datetime.date):
            value = value.isoformat()
        data[f"item-{name}"] = value
    return data


def rows_data(prefix, rows):
    data = {f"{prefix}-TOTAL_FORMS": len(rows), f"{prefix}-INITIAL_FORMS": len(rows)}
    for index, row in enumerate(rows):
        for name, value in row.items():
            data[f"{prefix}-{index}-{name}"] = value
    return data


def material_row(material=None, **values):
    row = {
        "id": str(material.id) if material else "",
        "material_type": material.material_type if material else "Main Fabric",
        "supplier": material.supplier if material else "",
        "quality": material.quality if material else "",
        "unit_consumption": material.unit_consumption if material else "0",
        "unit_price": material.unit_price if material else "0",
        "waste_percent": (material.waste_rate * 100).quantize(Decimal("0.01")) if material else "0",
        "order_status": material.order_status if material else "PENDING",
        "notes": "",
    }
    row.update(values)
    return row


def labor_row(labor=None, **values):
    row = {
        "id": str(labor.id) if labor else "",
        "operation_name": labor.operation_name if labor else "",
        "cost_amount": labor.cost_amount if labor else "0",
    }
    row.update(values)
    return row


def costing_data(item, materials=(), labor_costs=(), action="save", row="", **changes):
    data = item_data(item, **changes)
    data.update(rows_data("materials", [m if isinstance(m, dict) else material_row(m) for m in materials]))
    data.update(rows_data("labor", [r if isinstance(r, dict) else labor_row(r) for r in labor_costs]))
    data["action"] = action
    data["row"] = row
    return data


def template_names(response):
    return [template.name for template in response.templates]


@pytest.mark.django_db
class TestItemCreate:
    def url(self):
        return reverse("production:create")

    def payload(self, **overrides):
        data = {
            "season": "AW25",
            "model_code": "CT-900",
            "model_name": "Wool Coat",
            "manufacturer": "GLOBAL ART",
            "target_loading_date": "2025-10-01",
            "planned_qty": "120",
        }
        data.update(overrides)
        return data

    def test_creates_item_in_first_stage(self, client, merchandiser_user):
        client.force_login(merchandiser_user)
        response = client.post(self.url(), self.payload())

        assert response.status_code == 302
        assert response.url == reverse("dashboard:home")
        item = ProductionItem.objects.get(model_code="CT-900")
        assert item.status == "SAMPLE SEWN"
        assert item.po_date == timezone.localdate()
        assert item.planned_qty == 120

    def test_missing_required_fields_rerender_form(self, client, merchandiser_user):
        client.force_login(merchandiser_user)
        response = client.post(self.url(), self.payload(model_code="", target_loading_date=""))

        assert response.status_code == 200
        assert "production/create.html" in template_names(response)
        assert response.context["form"].errors.keys() >= {"model_code", "target_loading_date"}
        assert not ProductionItem.objects.exists()

    def test_planner_cannot_create(self, client, planner_user):
        client.force_login(planner_user)
        assert client.post(self.url(), self.payload()).status_code == 403

    def test_store_failure_shows_message(self, client, merchandiser_user):
        repo = InMemoryProductionRepository()
        repo.fail_on.add("create_item")
        client.force_login(merchandiser_user)
        with mock.patch("production.services.get_repository", return_value=repo):
            response = client.post(self.url(), self.payload())
        assert response.status_code == 200
        assert b"Error saving data" in response.content


@pytest.mark.django_db
class TestBoardMove:
    def post(self, client, payload):
        return client.post(
            reverse("production:move"),
            data=json.dumps(payload) if not isinstance(payload, str) else payload,
            content_type="application/json",
        )

    def test_drop_on_column_persists_status(self, client, planner_user, production_item):
        client.force_login(planner_user)
        response = self.post(client, {"active_id": str(production_item.id), "over_id": "IN SEWING"})

        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is True
        assert body["changed"] is True
        assert body["status"] == "IN SEWING"
        columns = {column["status"]: column["items"] for column in body["board"]}
        assert columns["IN SEWING"] == [str(production_item.id)]
        production_item.refresh_from_db()
        assert production_item.status == "IN SEWING"

    def test_order_is_kept_in_session(self, client, planner_user, make_item):
        first = make_item(model_code="A")
        first.save()
        ProductionItem.objects.filter(pk=first.pk).update(created_at=timezone.now() - datetime.timedelta(hours=1))
        second = make_item(model_code="B")
        second.save()
        client.force_login(planner_user)

        self.post(client, {"active_id": str(first.id), "over_id": str(second.id)})

        order = client.session["kanban_order"]
        assert order.index(str(first.id)) < order.index(str(second.id))

    def test_drop_on_itself_changes_nothing(self, client, planner_user, production_item):
        client.force_login(planner_user)
        body = self.post(client, {"active_id": str(production_item.id), "over_id": str(production_item.id)}).json()
        assert body["changed"] is False
        assert body["status"] is None

    def test_failed_persist_returns_reverted_board(self, client, planner_user, make_item):
        item = make_item(status="IN CUTTING")
        repo = InMemoryProductionRepository([item])
        repo.fail_on.add("update_item")
        client.force_login(planner_user)

        with mock.patch("production.services.get_repository", return_value=repo):
            response = self.post(client, {"active_id": str(item.id), "over_id": "SHIPPED"})

        assert response.status_code == 502
        columns = {column["status"]: column["items"] for column in response.json()["board"]}
        assert columns["IN CUTTING"] == [str(item.id)]
        assert columns["SHIPPED"] == []

    def test_invalid_json(self, client, planner_user):
        client.force_login(planner_user)
        assert self.post(client, "{not json").status_code == 400

    def test_viewer_is_forbidden(self, client, viewer_user, production_item):
        client.force_login(viewer_user)
        response = self.post(client, {"active_id": str(production_item.id), "over_id": "SHIPPED"})
        assert response.status_code == 403

    def test_anonymous_gets_401(self, client):
        assert self.post(client, {}).status_code == 401

    def test_get_not_allowed(self, client, planner_user):
        client.force_login(planner_user)
        assert client.get(reverse("production:move")).status_code == 405


@pytest.mark.django_db
class TestCostingPage:
    def url(self, item):
        return reverse("production:costing", kwargs={"pk": item.id})

    def test_get_renders_draft(self, client, viewer_user, production_item, materials, labor_costs):
        client.force_login(viewer_user)
        response = client.get(self.url(production_item))

        assert response.status_code == 200
        assert "production/costing.html" in template_names(response)
        costing = response.context["costing"]
        assert len(costing.materials) == 2
        assert costing.summary.unit_cost == Decimal("6.95") + Decimal("0.48") + Decimal("5.70")
        assert response.context["can_edit"] is False

    def test_unknown_item_is_404(self, client, viewer_user):
        client.force_login(viewer_user)
        response = client.get(reverse("production:costing", kwargs={"pk": "00000000-0000-0000-0000-000000000000"}))
        assert response.status_code == 404

    def test_requires_login(self, client, production_item):
        response = client.get(self.url(production_item))
        assert response.status_code == 302
        assert "/accounts/login/" in response.url

    def test_viewer_cannot_post(self, client, viewer_user, production_item, materials, labor_costs):
        client.force_login(viewer_user)
        response = client.post(self.url(production_item), costing_data(production_item, materials, labor_costs))
        assert response.status_code == 403

    def test_save_persists_item_and_rows(self, client, merchandiser_user, production_item, materials, labor_costs):
        client.force_login(merchandiser_user)
        data = costing_data(
            production_item,
            materials=[
                material_row(materials[0], unit_consumption="2"),
                material_row(material_type="Lining", unit_consumption="1", unit_price="2.00", waste_percent="5"),
            ],
            labor_costs=[labor_row(labor_costs[0])],
            received_qty=42,
        )
        response = client.post(self.url(production_item), data)

        assert response.status_code == 302
        assert response.url == self.url(production_item)
        production_item.refresh_from_db()
        assert production_item.received_qty == 42
        stored = list(production_item.materials.all())
        assert [m.material_type for m in stored] == ["Main Fabric", "Lining"]
        assert stored[0].id == materials[0].id
        # 2 × 4.50 × 1.03 and 1 × 2.00 × 1.05
        assert stored[0].total_amount == Decimal("9.27")
        assert stored[1].total_amount == Decimal("2.10")
        assert not ProductMaterial.objects.filter(pk=materials[1].pk).exists()
        assert production_item.labor_costs.count() == 1

    def test_add_row_rerenders_without_saving(self, client, merchandiser_user, production_item, materials, labor_costs):
        client.force_login(merchandiser_user)
        data = costing_data(production_item, materials, labor_costs, action="add_accessory")
        response = client.post(self.url(production_item), data, HTTP_HX_REQUEST="true")

        assert response.status_code == 200
        names = template_names(response)
        assert "production/partials/costing_form.html" in names
        assert "production/costing.html" not in names
        costing = response.context["costing"]
        assert len(costing.accessories) == 2
        assert costing.accessories[-1].id.startswith("acc-")
        assert production_item.materials.count() == 2

    def test_remove_row(self, client, merchandiser_user, production_item, materials, labor_costs):
        client.force_login(merchandiser_user)
        data = costing_data(
            production_item, materials, labor_costs, action="remove_labor", row=str(labor_costs[1].id)
        )
        response = client.post(self.url(production_item), data)

        assert response.status_code == 200
        assert [row.operation_name for row in response.context["costing"].labor_costs] == ["PATTERN"]
        assert production_item.labor_costs.count() == 2

    def test_unknown_action(self, client, merchandiser_user, production_item):
        client.force_login(merchandiser_user)
        response = client.post(self.url(production_item), costing_data(production_item, action="explode"))
        assert response.status_code == 400

    def test_invalid_input_keeps_errors(self, client, merchandiser_user, production_item):
        client.force_login(merchandiser_user)
        data = costing_data(production_item, [material_row(unit_price="abc")])
        response = client.post(self.url(production_item), data)

        assert response.status_code == 200
        assert response.context["forms"].material_formset.errors[0]["unit_price"]
        assert production_item.materials.count() == 0

    def test_save_failure_shows_one_message(self, client, merchandiser_user, make_item):
        item = make_item()
        repo = InMemoryProductionRepository([item])
        repo.fail_on.add("replace_materials")
        client.force_login(merchandiser_user)

        with mock.patch("production.services.get_repository", return_value=repo):
            response = client.post(self.url(item), costing_data(item, [material_row()], received_qty=5))

        assert response.status_code == 200
        messages = [str(message) for message in response.context["messages"]]
        assert messages == ["Error saving data"]
        # the item step ran before the failure
        assert repo.get_item(item.id).received_qty == 5

    def test_oversized_row_is_rejected_before_any_write(self, client, merchandiser_user, production_item):
        client.force_login(merchandiser_user)
        data = costing_data(
            production_item,
            [material_row(unit_consumption="9999999.999", unit_price="99999999.99", waste_percent="10000")],
            received_qty=42,
        )
        response = client.post(self.url(production_item), data)

        assert response.status_code == 200
        errors = response.context["forms"].material_formset.errors[0]
        assert "waste_percent" in errors
        production_item.refresh_from_db()
        assert production_item.received_qty == 0
        assert production_item.materials.count() == 0
