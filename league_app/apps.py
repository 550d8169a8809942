# file: league_app/apps.py
"""App configuration for the league application.

This module defines :class:`LeagueAppConfig`, the Django ``AppConfig`` that
registers the app and configures default model primary keys.

Key points:
    * ``name`` is fixed to ``"league_app"`` to keep the app label and import
      paths stable.
    * ``default_auto_field`` is set to ``BigAutoField`` for models without an
      explicit primary key field.

No side effects are executed on import (no signal registration); ledger
consistency is maintained explicitly by :mod:`league_app.services.scoring`.
"""

from __future__ import annotations

from django.apps import AppConfig


# --- AppConfig -------------------------------------------------------------

class LeagueAppConfig(AppConfig):
    """App registration and defaults for ``league_app``."""

    default_auto_field: str = "django.db.models.BigAutoField"
    name: str = "league_app"
    verbose_name: str = "Liga"
