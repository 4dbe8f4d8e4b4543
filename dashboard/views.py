"""Dashboard: production board with KPI header, and season analytics."""

from django.contrib.auth.decorators import login_required
from django.shortcuts import render
from django.utils import timezone

from production import services
from production.analytics import build_season_report
from production.forms import ProductionItemCreateForm
from production.metrics import Severity, deadline_status, material_alert


def _card(item, today):
    return {
        "item": item,
        "deadline": deadline_status(item.target_loading_date, item.status, today=today),
        "material": material_alert(item.fabric_order_status, item.cutting_date, today=today),
    }


@login_required
def home(request):
    today = timezone.localdate()
    repository = services.get_repository()
    board = services.load_board(request, repository)

    columns = [
        {"status": status, "cards": [_card(item, today) for item in items]}
        for status, items in board.columns()
    ]
    cards = [card for column in columns for card in column["cards"]]
    report = build_season_report(repository, items=board.items)

    return render(
        request,
        "dashboard/home.html",
        {
            "columns": columns,
            "total_planned_qty": report.total_planned_qty,
            "avg_margin": report.avg_margin,
            "item_count": len(board.items),
            "overdue_count": sum(
                1 for card in cards if card["deadline"] and card["deadline"].severity == Severity.OVERDUE
            ),
            "urgent_count": sum(
                1 for card in cards if card["material"] and card["material"].severity == Severity.URGENT
            ),
            "create_form": ProductionItemCreateForm(),
            "can_create": request.user.can_edit_costing,
            "can_move": request.user.can_move_cards,
            "today": today,
        },
    )


@login_required
def analytics(request):
    repository = services.get_repository()
    items = services.fetch_items(repository)
    season = request.GET.get("season", "")
    report = build_season_report(repository, season=season or None, items=items)

    max_count = max((count for _status, count in report.status_counts), default=0)
    status_rows = [
        {
            "status": status,
            "count": count,
            "width": round(count / max_count * 100) if max_count else 0,
        }
        for status, count in report.status_counts
    ]
    return render(
        request,
        "dashboard/analytics.html",
        {
            "report": report,
            "status_rows": status_rows,
            "seasons": sorted({item.season for item in items}),
            "season": season,
        },
    )
