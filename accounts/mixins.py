"""
RBAC decorator for view-level access control.

Usage:
    @role_required(Role.MERCHANDISER)
    def my_view(request):
        ...

Owners and superusers always pass.
"""

from functools import wraps

from django.conf import settings
from django.core.exceptions import PermissionDenied
from django.http import JsonResponse
from django.shortcuts import redirect

from .models import Role


def _wants_json(request):
    return request.content_type == "application/json" or "application/json" in request.headers.get("Accept", "")


def role_required(*roles):
    """
    Decorator for function-based views.

    JSON callers (the kanban board) get a JSON 401/403 instead of a
    login redirect or the HTML error page.
    """

    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            if not request.user.is_authenticated:
                if _wants_json(request):
                    return JsonResponse({"error": "authentication required"}, status=401)
                return redirect(f"{settings.LOGIN_URL}?next={request.path}")
            if request.user.is_superuser or request.user.role == Role.OWNER:
                return view_func(request, *args, **kwargs)
            if roles and request.user.role not in roles:
                if _wants_json(request):
                    return JsonResponse({"error": "permission denied"}, status=403)
                raise PermissionDenied
            return view_func(request, *args, **kwargs)

        return wrapper

    return decorator
