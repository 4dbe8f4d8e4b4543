"""
Production models: garment items, their material lines and labor costs.

A ProductionItem moves through a fixed status workflow (the kanban
columns). Material and labor rows belong to exactly one item and are
saved as whole sets: the costing page deletes an item's rows and inserts
the submitted ones instead of diffing.
"""

import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


class ProductionStatus(models.TextChoices):
    # Declaration order is the manufacturing progression (kanban column order)
    SAMPLE_SEWN = "SAMPLE SEWN", _("Sample sewn")
    WAITING_FABRIC = "WAITING FABRIC", _("Waiting fabric")
    IN_CUTTING = "IN CUTTING", _("In cutting")
    IN_SEWING = "IN SEWING", _("In sewing")
    IRON_PACK = "IRON/PACK", _("Iron / pack")
    IN_WAREHOUSE = "IN WAREHOUSE", _("In warehouse")
    SHIPPED = "SHIPPED", _("Shipped")


# Fixed column order of the production board
WORKFLOW = list(ProductionStatus)


class FabricOrderStatus(models.TextChoices):
    PENDING = "PENDING", _("Pending")
    ORDERED = "ORDERED", _("Ordered")
    MANUFACTURER_WAREHOUSE = "MANUFACTURER WAREHOUSE", _("At manufacturer warehouse")
    DELIVERED = "DELIVERED", _("Delivered")


class MaterialCategory(models.TextChoices):
    MAIN_FABRIC = "Main Fabric", _("Main fabric")
    LINING = "Lining", _("Lining")
    GARNI = "Garni", _("Garni")
    BUTTON = "Button", _("Button")
    ZIPPER = "Zipper", _("Zipper")
    LABEL = "Label", _("Label")
    PACKAGING = "Packaging", _("Packaging")
    # Accessories & trims are listed in their own table on the costing page
    ACCESSORY = "Accessory", _("Accessory")


class MaterialOrderStatus(models.TextChoices):
    OK = "OK", _("OK")
    PENDING = "PENDING", _("Pending")
    ORDERED = "ORDERED", _("Ordered")
    DELIVERED = "DELIVERED", _("Delivered")


class ProductionItem(models.Model):
    """A garment model in production, one card on the board."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Identity
    season = models.CharField(max_length=20, verbose_name=_("season"))
    model_code = models.CharField(max_length=50, verbose_name=_("model code"))
    model_name = models.CharField(max_length=200, verbose_name=_("model name"))
    category = models.CharField(max_length=100, blank=True, verbose_name=_("category"))
    manufacturer = models.CharField(max_length=150, verbose_name=_("manufacturer"))

    status = models.CharField(
        max_length=20,
        choices=ProductionStatus.choices,
        default=ProductionStatus.SAMPLE_SEWN,
        verbose_name=_("status"),
        db_index=True,
    )

    # Quantities: sizes_breakdown maps size label → planned pieces
    sizes_breakdown = models.JSONField(default=dict, blank=True, verbose_name=_("size breakdown"))
    planned_qty = models.PositiveIntegerField(default=0, verbose_name=_("planned quantity"))
    received_qty = models.PositiveIntegerField(default=0, verbose_name=_("received quantity"))

    # Pricing
    target_sales_price = models.DecimalField(
        max_digits=10, decimal_places=2, default=0, verbose_name=_("target sales price")
    )
    final_sales_price_local = models.DecimalField(
        max_digits=12, decimal_places=2, default=0, verbose_name=_("final sales price (local)")
    )

    # Date milestones
    target_loading_date = models.DateField(verbose_name=_("target loading date"))
    po_date = models.DateField(verbose_name=_("PO date"))
    fabric_arrival_date = models.DateField(null=True, blank=True, verbose_name=_("fabric arrival date"))
    cutting_date = models.DateField(null=True, blank=True, verbose_name=_("cutting date"))
    actual_mfg_deadline = models.DateField(null=True, blank=True, verbose_name=_("manufacturing deadline"))

    # Fabric specification
    fabric_supplier = models.CharField(max_length=150, blank=True, default="", verbose_name=_("fabric supplier"))
    fabric_quality = models.CharField(max_length=150, blank=True, default="", verbose_name=_("fabric quality"))
    fabric_composition = models.CharField(max_length=200, blank=True, default="", verbose_name=_("composition"))
    lining_detail = models.CharField(max_length=150, blank=True, default="", verbose_name=_("lining"))
    color_name = models.CharField(max_length=100, blank=True, default="", verbose_name=_("color"))
    color_code = models.CharField(max_length=30, blank=True, default="", verbose_name=_("color code"))
    fabric_order_status = models.CharField(
        max_length=25,
        choices=FabricOrderStatus.choices,
        default=FabricOrderStatus.PENDING,
        verbose_name=_("fabric order status"),
    )

    # Image storage is external; only the reference is kept
    image_url = models.CharField(max_length=500, blank=True, default="", verbose_name=_("image"))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("production item")
        verbose_name_plural = _("production items")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="production_status_idx"),
            models.Index(fields=["season", "status"], name="production_season_status_idx"),
        ]

    def __str__(self):
        return f"{self.model_code} {self.model_name} ({self.season})"

    @property
    def sizes_total(self):
        return sum(int(count or 0) for count in (self.sizes_breakdown or {}).values())


class ProductMaterial(models.Model):
    """One material cost line of a production item."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    item = models.ForeignKey(
        ProductionItem,
        on_delete=models.CASCADE,
        related_name="materials",
        verbose_name=_("production item"),
    )
    material_type = models.CharField(
        max_length=20,
        choices=MaterialCategory.choices,
        default=MaterialCategory.MAIN_FABRIC,
        verbose_name=_("material type"),
    )
    supplier = models.CharField(max_length=150, blank=True, default="", verbose_name=_("supplier"))
    quality = models.CharField(max_length=150, blank=True, default="", verbose_name=_("quality"))
    unit_consumption = models.DecimalField(
        max_digits=10, decimal_places=3, default=0, verbose_name=_("unit consumption")
    )
    unit_price = models.DecimalField(max_digits=10, decimal_places=2, default=0, verbose_name=_("unit price"))
    waste_rate = models.DecimalField(
        max_digits=6,
        decimal_places=4,
        default=0,
        verbose_name=_("waste rate"),
        help_text=_("Fraction, e.g. 0.03 for 3%"),
    )
    # Derived from the three fields above; stored for reporting
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0, verbose_name=_("total"))
    order_status = models.CharField(
        max_length=10,
        choices=MaterialOrderStatus.choices,
        default=MaterialOrderStatus.PENDING,
        verbose_name=_("order status"),
    )
    notes = models.TextField(blank=True, default="", verbose_name=_("notes"))
    position = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("material")
        verbose_name_plural = _("materials")
        ordering = ["position", "created_at"]

    def __str__(self):
        return f"{self.get_material_type_display()} - {self.quality or self.supplier}"

    @property
    def is_accessory(self):
        return self.material_type == MaterialCategory.ACCESSORY

    def recalculate_total(self):
        from .metrics import line_total

        self.total_amount = line_total(self.unit_consumption, self.unit_price, self.waste_rate)
        return self.total_amount

    def save(self, *args, **kwargs):
        self.recalculate_total()
        super().save(*args, **kwargs)


class ProductLaborCost(models.Model):
    """A labor operation (pattern, CM, logistics…) with a flat cost."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    item = models.ForeignKey(
        ProductionItem,
        on_delete=models.CASCADE,
        related_name="labor_costs",
        verbose_name=_("production item"),
    )
    operation_name = models.CharField(max_length=150, blank=True, default="", verbose_name=_("operation"))
    cost_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0, verbose_name=_("cost"))
    position = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("labor cost")
        verbose_name_plural = _("labor costs")
        ordering = ["position", "created_at"]

    def __str__(self):
        return f"{self.operation_name}: {self.cost_amount}"
