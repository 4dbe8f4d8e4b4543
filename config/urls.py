"""URL configuration for the production tracker."""

from django.conf import settings
from django.conf.urls.i18n import i18n_patterns
from django.contrib import admin
from django.shortcuts import redirect
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("accounts/", include("accounts.urls")),
    path("i18n/", include("django.conf.urls.i18n")),  # language switcher
]

# Locale is part of every user-facing path: /en/…, /tr/…
urlpatterns += i18n_patterns(
    path("", lambda request: redirect("dashboard:home")),  # root → dashboard
    path("dashboard/", include("dashboard.urls")),
    path("product/", include("production.urls")),
)

if settings.DEBUG:
    urlpatterns += [path("__debug__/", include("debug_toolbar.urls"))]
