from django.contrib import admin
from django.utils.translation import gettext_lazy as _
from unfold.admin import ModelAdmin, TabularInline

from .metrics import aggregate_cost, profit_margin
from .models import ProductionItem, ProductLaborCost, ProductMaterial


class ProductMaterialInline(TabularInline):
    model = ProductMaterial
    extra = 0
    fields = (
        "material_type", "supplier", "quality", "unit_consumption", "unit_price",
        "waste_rate", "total_amount", "order_status", "notes",
    )
    readonly_fields = ("total_amount",)


class ProductLaborCostInline(TabularInline):
    model = ProductLaborCost
    extra = 0
    fields = ("operation_name", "cost_amount")


@admin.register(ProductionItem)
class ProductionItemAdmin(ModelAdmin):
    list_display = (
        "model_code", "model_name", "season", "manufacturer", "status",
        "fabric_order_status", "planned_qty", "target_loading_date", "unit_cost", "margin",
    )
    list_filter = ("status", "season", "fabric_order_status", "manufacturer")
    search_fields = ("model_code", "model_name", "manufacturer", "fabric_supplier")
    date_hierarchy = "target_loading_date"
    readonly_fields = ("created_at", "updated_at")
    inlines = [ProductMaterialInline, ProductLaborCostInline]

    @admin.display(description=_("unit cost"))
    def unit_cost(self, obj):
        return aggregate_cost(obj.materials.all(), obj.labor_costs.all()).unit_cost

    @admin.display(description=_("margin %"))
    def margin(self, obj):
        summary = aggregate_cost(obj.materials.all(), obj.labor_costs.all())
        return f"{profit_margin(obj.target_sales_price, summary.unit_cost):.1f}"

    def get_queryset(self, request):
        return super().get_queryset(request).prefetch_related("materials", "labor_costs")


@admin.register(ProductMaterial)
class ProductMaterialAdmin(ModelAdmin):
    list_display = ("item", "material_type", "supplier", "quality", "total_amount", "order_status")
    list_filter = ("material_type", "order_status")
    search_fields = ("item__model_code", "supplier", "quality")
    readonly_fields = ("total_amount", "created_at")


@admin.register(ProductLaborCost)
class ProductLaborCostAdmin(ModelAdmin):
    list_display = ("item", "operation_name", "cost_amount")
    search_fields = ("item__model_code", "operation_name")
    readonly_fields = ("created_at",)
