# file: league_app/admin.py
"""Django admin configuration for countries, competitions, teams, matches and goals.

Internal documentation (docstrings, comments) is in **English**. All
user-facing labels/descriptions remain **Czech**.

Score events are never saved or deleted by the admin directly: the hooks on
:class:`ScoreEventAdmin` route every change through
:mod:`league_app.services.scoring` so the match's unidentified counters stay
consistent with the detailed goal rows.
"""

from __future__ import annotations

import io
from typing import Any

from django.contrib import admin, messages
from django.core.management import CommandError, call_command
from django.db.models import Count, F, Q

from .models import (
    Country,
    Event,
    Match,
    Player,
    PlayerEventStats,
    ScoreEvent,
    Season,
    Team,
)
from .services.scoring import (
    GoalDetails,
    create_score_event,
    delete_score_event,
    get_match_score,
    update_score_event,
)
from .services.stats import (
    create_or_update_player_event_stats,
    identified_count_annotations,
    update_player_event_stats,
)


def _details_from(obj: ScoreEvent) -> GoalDetails:
    """Collect the descriptive fields of an admin-edited event."""
    return GoalDetails(
        scorer_id=obj.scorer_id,
        assist1_id=obj.assist1_id,
        assist2_id=obj.assist2_id,
        period=obj.period,
        time_minutes=obj.time_minutes,
        time_seconds=obj.time_seconds,
        goal_type=obj.goal_type or None,
    )


# ------------------------------------------------------------
# Simple registries
# ------------------------------------------------------------
@admin.register(Country)
class CountryAdmin(admin.ModelAdmin):
    """Admin for countries."""

    list_display = ("name", "iso2_code")
    search_fields = ("name", "iso2_code")


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    """Admin for competitions."""

    list_display = ("name", "country")
    search_fields = ("name",)


@admin.register(Season)
class SeasonAdmin(admin.ModelAdmin):
    """Admin for seasons of a competition."""

    list_display = ("__str__", "year", "event")
    list_filter = ("event",)


@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    """Admin for teams."""

    list_display = ("__str__", "country")
    search_fields = ("name", "country__name")


@admin.register(Player)
class PlayerAdmin(admin.ModelAdmin):
    """Admin for players."""

    list_display = ("name", "country")
    search_fields = ("name",)


# ------------------------------------------------------------
# Match
# ------------------------------------------------------------
@admin.register(Match)
class MatchAdmin(admin.ModelAdmin):
    """Admin for matches showing the score as identified + unidentified goals."""

    list_display = (
        "__str__",
        "season",
        "status",
        "home_total",
        "away_total",
        "home_score_unidentified",
        "away_score_unidentified",
    )
    list_filter = ("status", "season__event")
    readonly_fields = ("score_breakdown",)
    actions = ["audit_ledger"]

    def get_queryset(self, request: Any):  # type: ignore[override]
        """Annotate identified goal counts for the changelist columns."""
        return (
            super()
            .get_queryset(request)
            .select_related("season", "home_team", "away_team")
            .annotate(
                home_identified=Count("score_events", filter=Q(score_events__team_id=F("home_team_id"))),
                away_identified=Count("score_events", filter=Q(score_events__team_id=F("away_team_id"))),
            )
        )

    @admin.display(description="Skóre domácí")
    def home_total(self, obj: Any) -> int:
        """Return identified plus unidentified home goals."""
        return int(getattr(obj, "home_identified", 0) or 0) + obj.home_score_unidentified

    @admin.display(description="Skóre hosté")
    def away_total(self, obj: Any) -> int:
        """Return identified plus unidentified away goals."""
        return int(getattr(obj, "away_identified", 0) or 0) + obj.away_score_unidentified

    @admin.display(description="Rozpis skóre")
    def score_breakdown(self, obj: Match | None) -> str:
        """Render ``total (identified + unidentified)`` for both sides."""
        if obj is None or obj.pk is None:
            return "—"
        s = get_match_score(obj.pk)
        return (
            f"{s.home_total} ({s.home_identified} + {s.home_unidentified}) : "
            f"{s.away_total} ({s.away_identified} + {s.away_unidentified})"
        )

    @admin.action(description="Zkontrolovat skóre vybraných zápasů")
    def audit_ledger(self, request: Any, queryset: Any) -> None:
        """Run ``audit_score_ledger --strict`` for each selected match."""
        problems = 0
        for match_id in queryset.values_list("pk", flat=True):
            try:
                call_command("audit_score_ledger", match_id=match_id, strict=True, stdout=io.StringIO())
            except CommandError:
                problems += 1
        if problems:
            self.message_user(
                request, f"Nalezeny nesrovnalosti v {problems} zápasech.", level=messages.WARNING
            )
        else:
            self.message_user(request, "Skóre všech vybraných zápasů je v pořádku.")


# ------------------------------------------------------------
# ScoreEvent (ledger-aware)
# ------------------------------------------------------------
@admin.register(ScoreEvent)
class ScoreEventAdmin(admin.ModelAdmin):
    """Admin for goals; persistence goes through the scoring service.

    New goals use :func:`create_score_event` (consume an unidentified slot if
    any, otherwise add a goal). The team is read-only after creation because a
    goal cannot change sides without rebalancing both counters.
    """

    list_display = ("match", "team", "scorer", "assist1", "assist2", "period", "clock", "goal_type")
    list_filter = ("period", "goal_type")
    list_select_related = ("match", "team", "scorer", "assist1", "assist2")
    raw_id_fields = ("match", "scorer", "assist1", "assist2")

    def get_readonly_fields(self, request: Any, obj: ScoreEvent | None = None):  # type: ignore[override]
        """Lock match and team once the goal exists."""
        if obj is not None and obj.pk:
            return ("match", "team")
        return ()

    def save_model(self, request: Any, obj: ScoreEvent, form: Any, change: bool) -> None:
        """Persist via the scoring service instead of ``obj.save()``."""
        if change:
            update_score_event(obj.pk, _details_from(obj), team_id=obj.team_id)
        else:
            obj.pk = create_score_event(obj.match_id, obj.team_id, _details_from(obj))

    def delete_model(self, request: Any, obj: ScoreEvent) -> None:
        """Delete one goal and return its slot to the unidentified pool."""
        delete_score_event(obj.pk)

    def delete_queryset(self, request: Any, queryset: Any) -> None:
        """Bulk delete goal by goal so each returns its slot."""
        for event_id in list(queryset.values_list("pk", flat=True)):
            delete_score_event(event_id)


# ------------------------------------------------------------
# PlayerEventStats
# ------------------------------------------------------------
@admin.register(PlayerEventStats)
class PlayerEventStatsAdmin(admin.ModelAdmin):
    """Admin for manual per-competition totals with identified totals alongside."""

    list_display = ("player", "event", "goals_total", "assists_total", "goals_combined", "assists_combined")
    list_filter = ("event",)
    search_fields = ("player__name",)
    list_select_related = ("player", "event")

    def get_queryset(self, request: Any):  # type: ignore[override]
        """Annotate identified goals/assists of each row's own player."""
        return super().get_queryset(request).annotate(**identified_count_annotations(F("player_id")))

    def get_readonly_fields(self, request: Any, obj: PlayerEventStats | None = None):  # type: ignore[override]
        """Lock the ``(player, event)`` pair once the row exists."""
        if obj is not None and obj.pk:
            return ("player", "event")
        return ()

    @admin.display(description="Góly celkem")
    def goals_combined(self, obj: PlayerEventStats) -> int:
        """Return manual plus identified goals."""
        return obj.goals_total + int(getattr(obj, "goals_identified", 0) or 0)

    @admin.display(description="Asistence celkem")
    def assists_combined(self, obj: PlayerEventStats) -> int:
        """Return manual plus identified assists."""
        return obj.assists_total + int(getattr(obj, "assists_identified", 0) or 0)

    def save_model(self, request: Any, obj: PlayerEventStats, form: Any, change: bool) -> None:
        """Write the totals with one upsert on add, a plain update on change."""
        if change:
            update_player_event_stats(obj.pk, obj.goals_total, obj.assists_total)
        else:
            obj.pk = create_or_update_player_event_stats(
                obj.player_id, obj.event_id, obj.goals_total, obj.assists_total
            )
