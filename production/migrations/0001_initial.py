import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ProductionItem",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("season", models.CharField(max_length=20, verbose_name="season")),
                ("model_code", models.CharField(max_length=50, verbose_name="model code")),
                ("model_name", models.CharField(max_length=200, verbose_name="model name")),
                ("category", models.CharField(blank=True, max_length=100, verbose_name="category")),
                ("manufacturer", models.CharField(max_length=150, verbose_name="manufacturer")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("SAMPLE SEWN", "Sample sewn"),
                            ("WAITING FABRIC", "Waiting fabric"),
                            ("IN CUTTING", "In cutting"),
                            ("IN SEWING", "In sewing"),
                            ("IRON/PACK", "Iron / pack"),
                            ("IN WAREHOUSE", "In warehouse"),
                            ("SHIPPED", "Shipped"),
                        ],
                        db_index=True,
                        default="SAMPLE SEWN",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                ("sizes_breakdown", models.JSONField(blank=True, default=dict, verbose_name="size breakdown")),
                ("planned_qty", models.PositiveIntegerField(default=0, verbose_name="planned quantity")),
                ("received_qty", models.PositiveIntegerField(default=0, verbose_name="received quantity")),
                (
                    "target_sales_price",
                    models.DecimalField(decimal_places=2, default=0, max_digits=10, verbose_name="target sales price"),
                ),
                (
                    "final_sales_price_local",
                    models.DecimalField(
                        decimal_places=2, default=0, max_digits=12, verbose_name="final sales price (local)"
                    ),
                ),
                ("target_loading_date", models.DateField(verbose_name="target loading date")),
                ("po_date", models.DateField(verbose_name="PO date")),
                ("fabric_arrival_date", models.DateField(blank=True, null=True, verbose_name="fabric arrival date")),
                ("cutting_date", models.DateField(blank=True, null=True, verbose_name="cutting date")),
                (
                    "actual_mfg_deadline",
                    models.DateField(blank=True, null=True, verbose_name="manufacturing deadline"),
                ),
                (
                    "fabric_supplier",
                    models.CharField(blank=True, default="", max_length=150, verbose_name="fabric supplier"),
                ),
                (
                    "fabric_quality",
                    models.CharField(blank=True, default="", max_length=150, verbose_name="fabric quality"),
                ),
                (
                    "fabric_composition",
                    models.CharField(blank=True, default="", max_length=200, verbose_name="composition"),
                ),
                ("lining_detail", models.CharField(blank=True, default="", max_length=150, verbose_name="lining")),
                ("color_name", models.CharField(blank=True, default="", max_length=100, verbose_name="color")),
                ("color_code", models.CharField(blank=True, default="", max_length=30, verbose_name="color code")),
                (
                    "fabric_order_status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("ORDERED", "Ordered"),
                            ("MANUFACTURER WAREHOUSE", "At manufacturer warehouse"),
                            ("DELIVERED", "Delivered"),
                        ],
                        default="PENDING",
                        max_length=25,
                        verbose_name="fabric order status",
                    ),
                ),
                ("image_url", models.CharField(blank=True, default="", max_length=500, verbose_name="image")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "production item",
                "verbose_name_plural": "production items",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status"], name="production_status_idx"),
                    models.Index(fields=["season", "status"], name="production_season_status_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ProductMaterial",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "material_type",
                    models.CharField(
                        choices=[
                            ("Main Fabric", "Main fabric"),
                            ("Lining", "Lining"),
                            ("Garni", "Garni"),
                            ("Button", "Button"),
                            ("Zipper", "Zipper"),
                            ("Label", "Label"),
                            ("Packaging", "Packaging"),
                            ("Accessory", "Accessory"),
                        ],
                        default="Main Fabric",
                        max_length=20,
                        verbose_name="material type",
                    ),
                ),
                ("supplier", models.CharField(blank=True, default="", max_length=150, verbose_name="supplier")),
                ("quality", models.CharField(blank=True, default="", max_length=150, verbose_name="quality")),
                (
                    "unit_consumption",
                    models.DecimalField(decimal_places=3, default=0, max_digits=10, verbose_name="unit consumption"),
                ),
                ("unit_price", models.DecimalField(decimal_places=2, default=0, max_digits=10, verbose_name="unit price")),
                (
                    "waste_rate",
                    models.DecimalField(
                        decimal_places=4,
                        default=0,
                        help_text="Fraction, e.g. 0.03 for 3%",
                        max_digits=6,
                        verbose_name="waste rate",
                    ),
                ),
                ("total_amount", models.DecimalField(decimal_places=2, default=0, max_digits=12, verbose_name="total")),
                (
                    "order_status",
                    models.CharField(
                        choices=[
                            ("OK", "OK"),
                            ("PENDING", "Pending"),
                            ("ORDERED", "Ordered"),
                            ("DELIVERED", "Delivered"),
                        ],
                        default="PENDING",
                        max_length=10,
                        verbose_name="order status",
                    ),
                ),
                ("notes", models.TextField(blank=True, default="", verbose_name="notes")),
                ("position", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "item",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="materials",
                        to="production.productionitem",
                        verbose_name="production item",
                    ),
                ),
            ],
            options={
                "verbose_name": "material",
                "verbose_name_plural": "materials",
                "ordering": ["position", "created_at"],
            },
        ),
        migrations.CreateModel(
            name="ProductLaborCost",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("operation_name", models.CharField(blank=True, default="", max_length=150, verbose_name="operation")),
                ("cost_amount", models.DecimalField(decimal_places=2, default=0, max_digits=10, verbose_name="cost")),
                ("position", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "item",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="labor_costs",
                        to="production.productionitem",
                        verbose_name="production item",
                    ),
                ),
            ],
            options={
                "verbose_name": "labor cost",
                "verbose_name_plural": "labor costs",
                "ordering": ["position", "created_at"],
            },
        ),
    ]
