"""
Management command: create_demo_data

Seeds the database with a few garment models, their costing rows and one
user per role so the board, costing pages and analytics have content.
Dates are placed relative to today so deadline and fabric badges show up.

Usage:
    python manage.py create_demo_data          # add demo data
    python manage.py create_demo_data --reset  # wipe production items first, then add
"""

from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.utils import timezone

User = get_user_model()

# (season, code, name, category, manufacturer, status, sizes, target offset, po offset,
#  fabric arrival offset, cutting offset, mfg deadline offset, fabric spec, fabric status,
#  target price, local price)
ITEM_SPECS = [
    (
        "SS25", "MDL-001", "Summer Breeze Dress", "Dresses", "MACHINIST", "IN CUTTING",
        {"S": 50, "M": 100, "L": 50}, 5, -60, -30, 2, -2,
        ("GAYRET TEKSTIL", "SAN FRANCISCO", "%45 Wool, %55 Polyester", "TWILL", "NAVY BLUE", "450"),
        "PENDING", "89.99", "2850.00",
    ),
    (
        "AW24", "JCK-102", "Winter Puffer Jacket", "Outerwear", "GLOBAL ART", "WAITING FABRIC",
        {"M": 150, "L": 150, "XL": 50}, 45, -40, None, None, 30,
        ("SOKTAS", "MALDIVE", "100% ORG COTTON", "40/1 POPLIN", "BLACK", "800"),
        "ORDERED", "149.99", "4500.00",
    ),
    (
        "SS25", "TSH-505", "Basic Cotton Tee", "T-Shirts", "MACHINIST", "SAMPLE SEWN",
        {"XS": 100, "S": 200, "M": 300, "L": 200, "XL": 100}, -3, -90, -45, None, -10,
        ("GAYRET TEKSTIL", "SINGLE JERSEY", "100% Cotton", "N/A", "WHITE", "01"),
        "DELIVERED", "24.99", "750.00",
    ),
]

# model code → [(type, supplier, quality, consumption, price, waste, order status)]
MATERIAL_SPECS = {
    "MDL-001": [
        ("Main Fabric", "Fabric Co. Ltd", "100% Cotton Poplin", "1.5", "4.50", "0.03", "OK"),
        ("Label", "Labels Inc", "Woven", "1", "0.15", "0.01", "PENDING"),
        ("Accessory", "Trims World", "Metal button 15mm", "6", "0.08", "0.02", "ORDERED"),
    ],
    "JCK-102": [
        ("Main Fabric", "SOKTAS", "Nylon ripstop", "2.2", "5.10", "0.04", "ORDERED"),
        ("Lining", "SOKTAS", "40/1 Poplin", "1.8", "1.90", "0.03", "PENDING"),
        ("Zipper", "YKK", "No.5 two-way", "1", "1.35", "0", "PENDING"),
    ],
    "TSH-505": [
        ("Main Fabric", "GAYRET TEKSTIL", "Single jersey 160gsm", "0.6", "3.20", "0.05", "DELIVERED"),
        ("Packaging", "PackPro", "Polybag", "1", "0.04", "0", "OK"),
    ],
}

LABOR_SPECS = {
    "MDL-001": [("PATTERN", "1.20"), ("CM (CUT+MAKE+FINISH)", "4.50"), ("LOGISTICS", "0.80")],
    "JCK-102": [("PATTERN", "2.00"), ("CM (CUT+MAKE+FINISH)", "11.00"), ("LOGISTICS", "1.50")],
    "TSH-505": [("CM (CUT+MAKE+FINISH)", "1.60"), ("LOGISTICS", "0.30")],
}


def _offset(today, days):
    return today + timedelta(days=days) if days is not None else None


class Command(BaseCommand):
    help = "Seed database with demo users, production items and costing rows"

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Delete existing production items (and their rows) before seeding",
        )

    def handle(self, *args, **options):
        from production.services import get_repository

        if options["reset"]:
            self._reset()

        self._get_or_create_staff()
        created = self._create_items(get_repository())
        self.stdout.write(self.style.SUCCESS(f"Demo data created successfully ({created} items)."))

    # -------------------------------------------------------------------------

    def _reset(self):
        from production.models import ProductionItem

        ProductionItem.objects.all().delete()
        self.stdout.write("  Reset: cleared production items, materials, labor costs.")

    def _get_or_create_staff(self):
        """Return (or create) one user for each role."""
        from accounts.models import Role

        users = {}
        specs = [
            ("owner", "Ayse", "Owner", Role.OWNER),
            ("merch1", "Mert", "Merchandiser", Role.MERCHANDISER),
            ("planner1", "Selin", "Planner", Role.PLANNER),
            ("viewer1", "Can", "Viewer", Role.VIEWER),
        ]
        for username, first, last, role in specs:
            user, created = User.objects.get_or_create(
                username=username,
                defaults=dict(first_name=first, last_name=last, role=role),
            )
            if created:
                user.set_password("demo1234")
                user.save()
                self.stdout.write(f"  Created user: {username}")
            users[username] = user
        return users

    def _create_items(self, repository):
        from production.models import ProductionItem

        today = timezone.localdate()
        created = 0
        for spec in ITEM_SPECS:
            (season, code, name, category, manufacturer, status, sizes,
             target, po, arrival, cutting, deadline, fabric, fabric_status,
             price, local_price) = spec

            if ProductionItem.objects.filter(season=season, model_code=code).exists():
                self.stdout.write(f"  Skipped existing item: {season} {code}")
                continue

            supplier, quality, composition, lining, color, color_code = fabric
            item = repository.create_item({
                "season": season,
                "model_code": code,
                "model_name": name,
                "category": category,
                "manufacturer": manufacturer,
                "status": status,
                "sizes_breakdown": sizes,
                "planned_qty": sum(sizes.values()),
                "target_sales_price": Decimal(price),
                "final_sales_price_local": Decimal(local_price),
                "target_loading_date": _offset(today, target),
                "po_date": _offset(today, po),
                "fabric_arrival_date": _offset(today, arrival),
                "cutting_date": _offset(today, cutting),
                "actual_mfg_deadline": _offset(today, deadline),
                "fabric_supplier": supplier,
                "fabric_quality": quality,
                "fabric_composition": composition,
                "lining_detail": lining,
                "color_name": color,
                "color_code": color_code,
                "fabric_order_status": fabric_status,
            })
            repository.replace_materials(item.id, [
                {
                    "material_type": kind,
                    "supplier": mat_supplier,
                    "quality": mat_quality,
                    "unit_consumption": Decimal(consumption),
                    "unit_price": Decimal(unit_price),
                    "waste_rate": Decimal(waste),
                    "order_status": order_status,
                }
                for kind, mat_supplier, mat_quality, consumption, unit_price, waste, order_status
                in MATERIAL_SPECS.get(code, [])
            ])
            repository.replace_labor_costs(item.id, [
                {"operation_name": operation, "cost_amount": Decimal(cost)}
                for operation, cost in LABOR_SPECS.get(code, [])
            ])
            created += 1

        self.stdout.write(f"  Production items: {created} created")
        return created
