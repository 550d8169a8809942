# file: league_manager/urls.py
"""Project URL configuration for ``league_manager``.

Routes:
* Django admin (score events are edited through ledger-aware admin hooks).

Public pages and the JSON API live outside this project.
"""

from __future__ import annotations

from django.contrib import admin
from django.urls import URLPattern, URLResolver, path

# --- URL patterns ----------------------------------------------------------

urlpatterns: list[URLPattern | URLResolver] = [
    path("admin/", admin.site.urls),
]
