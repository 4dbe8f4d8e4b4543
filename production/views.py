"""Production views: create card, kanban drop endpoint, costing page."""

import json
import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import PermissionDenied
from django.http import Http404, HttpResponseBadRequest, JsonResponse
from django.shortcuts import redirect, render
from django.utils.translation import gettext as _
from django.views.decorators.http import require_POST

from accounts.mixins import role_required
from accounts.models import Role

from . import services
from .costing import CostingForm, CostingSaveError
from .forms import CostingForms, ProductionItemCreateForm
from .repository import RepositoryError

logger = logging.getLogger(__name__)


@role_required(Role.MERCHANDISER)
def item_create(request):
    """New production card. Lands in the first workflow column."""
    if request.method == "POST":
        form = ProductionItemCreateForm(request.POST)
        if form.is_valid():
            try:
                item = services.get_repository().create_item(form.cleaned_data)
            except RepositoryError:
                logger.exception("Failed to create production item %s", form.cleaned_data["model_code"])
                messages.error(request, _("Error saving data"))
            else:
                messages.success(request, _("%(code)s added to the board.") % {"code": item.model_code})
                return redirect("dashboard:home")
    else:
        form = ProductionItemCreateForm()
    return render(request, "production/create.html", {"form": form})


@role_required(Role.PLANNER, Role.MERCHANDISER)
@require_POST
def board_move(request):
    """
    JSON endpoint for one drag-and-drop: {"active_id": ..., "over_id": ...}.

    Responds with the board layout after the drop. When the new status
    cannot be stored the board is reverted and returned with a 502.
    """
    try:
        payload = json.loads(request.body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError):
        return JsonResponse({"ok": False, "error": "invalid JSON"}, status=400)
    if not isinstance(payload, dict):
        return JsonResponse({"ok": False, "error": "expected an object"}, status=400)

    repository = services.get_repository()
    board = services.load_board(request, repository)
    try:
        result = board.move(payload.get("active_id"), payload.get("over_id"))
    except RepositoryError:
        return JsonResponse(
            {"ok": False, "error": _("Status could not be saved"), "board": board.snapshot()},
            status=502,
        )

    services.remember_board(request, board)
    return JsonResponse({
        "ok": True,
        "changed": result is not None,
        "status": result.status if result else None,
        "board": board.snapshot(),
    })


def _apply_row_action(costing, action, row_id):
    if action == "add_material":
        costing.add_material()
    elif action == "add_accessory":
        costing.add_accessory()
    elif action == "add_labor":
        costing.add_labor()
    elif action == "remove_material":
        costing.remove_material(row_id)
    elif action == "remove_labor":
        costing.remove_labor(row_id)
    else:
        return False
    return True


@login_required
def item_costing(request, pk):
    """
    Costing page of one item.

    Row actions (add / remove) rebuild the draft from the posted forms and
    re-render it without touching the database; HTMX requests get only the
    form partial back. Only "save" persists.
    """
    repository = services.get_repository()
    costing = CostingForm.load(repository, pk)
    if costing is None:
        raise Http404(_("Production item not found"))

    if request.method == "POST":
        if not request.user.can_edit_costing:
            raise PermissionDenied
        action = request.POST.get("action", "save")
        forms = CostingForms(request.POST)
        if forms.is_valid():
            costing = forms.to_costing(repository, costing.item.id)
            if action == "save":
                try:
                    costing.save()
                except CostingSaveError:
                    messages.error(request, _("Error saving data"))
                else:
                    messages.success(request, _("Saved successfully"))
                    return redirect("production:costing", pk=costing.item.id)
            elif not _apply_row_action(costing, action, request.POST.get("row", "")):
                return HttpResponseBadRequest(f"Unknown action {action!r}")
            forms = CostingForms(costing=costing)
    else:
        forms = CostingForms(costing=costing)

    context = {
        "costing": costing,
        "item": costing.item,
        "forms": forms,
        "can_edit": request.user.can_edit_costing,
    }
    if request.headers.get("HX-Request"):
        return render(request, "production/partials/costing_form.html", context)
    return render(request, "production/costing.html", context)
