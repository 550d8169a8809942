# file: league_app/tests/admin/test_league_admin.py
"""Admin test suite for the league application.

Coverage in this module:
* Registry presence of all models in the Django admin site.
* ``ScoreEventAdmin`` persisting through the scoring service (add, change,
  single and bulk delete) and locking match/team after creation.
* ``MatchAdmin`` annotated totals, score breakdown and the audit action.
* ``PlayerEventStatsAdmin`` single-statement upsert, annotated combined
  totals (one query for the changelist) and the locked pair.
"""

from __future__ import annotations

import types
from typing import Any

import pytest
from django.contrib import admin, messages
from django.http import HttpRequest
from django.test import RequestFactory

from league_app.admin import MatchAdmin, PlayerEventStatsAdmin, ScoreEventAdmin
from league_app.models import (
    Country,
    Event,
    Match,
    Player,
    PlayerEventStats,
    ScoreEvent,
    Season,
    Team,
)
from league_app.services.scoring import GoalDetails, identify_goal

pytestmark = pytest.mark.django_db


# --- Helpers ---------------------------------------------------------------


def make_request(path: str = "/admin/") -> HttpRequest:
    """Create a GET request carrying a permissive dummy superuser."""
    req = RequestFactory().get(path)
    req.user = types.SimpleNamespace(
        has_perm=lambda perm: True,
        is_authenticated=True,
        is_active=True,
        is_staff=True,
        is_superuser=True,
    )
    return req


def capture_messages(model_admin: admin.ModelAdmin) -> list[tuple[str, Any]]:
    """Replace ``message_user`` with a recorder and return the record list."""
    msgs: list[tuple[str, Any]] = []
    model_admin.message_user = lambda request, msg, level=messages.INFO, **k: msgs.append((msg, level))
    return msgs


# --- Registry --------------------------------------------------------------


def test_admin_registry_contains_expected_models() -> None:
    """Every league model has an admin; ledger-aware ones use custom classes."""
    for model in (Country, Event, Season, Team, Player, Match, ScoreEvent, PlayerEventStats):
        assert model in admin.site._registry
    assert isinstance(admin.site._registry[Match], MatchAdmin)
    assert isinstance(admin.site._registry[ScoreEvent], ScoreEventAdmin)
    assert isinstance(admin.site._registry[PlayerEventStats], PlayerEventStatsAdmin)


# --- ScoreEventAdmin -------------------------------------------------------


def test_score_event_admin_add_consumes_unidentified_slot(match_min: Any, home_team: Any, make_player: Any) -> None:
    """Saving a new goal goes through ``create_score_event``."""
    m = match_min(home_unidentified=1)
    sa = ScoreEventAdmin(ScoreEvent, admin.site)
    obj = ScoreEvent(match=m, team=home_team, scorer=make_player("Střelec"), period=1)

    sa.save_model(make_request(), obj, form=None, change=False)

    assert obj.pk is not None
    assert ScoreEvent.objects.get(pk=obj.pk).period == 1
    m.refresh_from_db()
    assert m.home_score_unidentified == 0


def test_score_event_admin_change_updates_without_counters(match_min: Any, away_team: Any) -> None:
    """Editing an existing goal replaces its fields only."""
    m = match_min(away_unidentified=2)
    event_id = identify_goal(m.pk, away_team.pk)
    sa = ScoreEventAdmin(ScoreEvent, admin.site)

    obj = ScoreEvent.objects.get(pk=event_id)
    obj.period = 3
    obj.time_minutes = 14
    sa.save_model(make_request(), obj, form=None, change=True)

    ev = ScoreEvent.objects.get(pk=event_id)
    assert (ev.period, ev.time_minutes) == (3, 14)
    m.refresh_from_db()
    assert m.away_score_unidentified == 1


def test_score_event_admin_delete_returns_slots(match_min: Any, home_team: Any, away_team: Any) -> None:
    """Single and bulk deletes give each goal back to its side's pool."""
    m = match_min(home_unidentified=2, away_unidentified=1)
    h1 = identify_goal(m.pk, home_team.pk)
    h2 = identify_goal(m.pk, home_team.pk)
    a1 = identify_goal(m.pk, away_team.pk)
    sa = ScoreEventAdmin(ScoreEvent, admin.site)

    sa.delete_model(make_request(), ScoreEvent.objects.get(pk=h1))
    m.refresh_from_db()
    assert m.home_score_unidentified == 1

    sa.delete_queryset(make_request(), ScoreEvent.objects.filter(pk__in=[h2, a1]))
    m.refresh_from_db()
    assert (m.home_score_unidentified, m.away_score_unidentified) == (2, 1)
    assert not ScoreEvent.objects.filter(match=m).exists()


def test_score_event_admin_bulk_delete_after_team_replaced(
    match_min: Any, home_team: Any, away_team: Any, Team: Any, country_min: Any
) -> None:
    """Bulk delete completes even when a goal's team left the match."""
    m = match_min(home_unidentified=1, away_unidentified=1)
    h1 = identify_goal(m.pk, home_team.pk)
    a1 = identify_goal(m.pk, away_team.pk)
    replacement = Team.objects.create(name="HC Plzeň", country=country_min)
    Match.objects.filter(pk=m.pk).update(away_team=replacement)

    sa = ScoreEventAdmin(ScoreEvent, admin.site)
    sa.delete_queryset(make_request(), ScoreEvent.objects.filter(pk__in=[h1, a1]))

    m.refresh_from_db()
    assert (m.home_score_unidentified, m.away_score_unidentified) == (1, 1)
    assert not ScoreEvent.objects.filter(match=m).exists()


def test_score_event_admin_locks_match_and_team(match_min: Any, home_team: Any) -> None:
    """Match and team are editable on add and read-only afterwards."""
    m = match_min(home_unidentified=1)
    sa = ScoreEventAdmin(ScoreEvent, admin.site)
    assert tuple(sa.get_readonly_fields(make_request())) == ()

    obj = ScoreEvent.objects.get(pk=identify_goal(m.pk, home_team.pk))
    assert tuple(sa.get_readonly_fields(make_request(), obj)) == ("match", "team")


# --- MatchAdmin ------------------------------------------------------------


def test_match_admin_totals_and_breakdown(match_min: Any, home_team: Any) -> None:
    """Changelist totals come from annotations; breakdown from the service."""
    m = match_min(home_unidentified=2, away_unidentified=3)
    identify_goal(m.pk, home_team.pk)
    ma = MatchAdmin(Match, admin.site)

    row = ma.get_queryset(make_request()).get(pk=m.pk)
    assert (ma.home_total(row), ma.away_total(row)) == (2, 3)
    assert ma.score_breakdown(m) == "2 (1 + 1) : 3 (0 + 3)"
    assert ma.score_breakdown(None) == "—"


def test_match_admin_audit_action_reports_clean_state(match_min: Any) -> None:
    """A consistent ledger produces an informational message."""
    m = match_min(home_unidentified=1)
    ma = MatchAdmin(Match, admin.site)
    msgs = capture_messages(ma)

    ma.audit_ledger(make_request(), Match.objects.filter(pk=m.pk))

    assert msgs == [("Skóre všech vybraných zápasů je v pořádku.", messages.INFO)]


def test_match_admin_audit_action_warns_on_orphans(
    match_min: Any, home_team: Any, Team: Any, country_min: Any
) -> None:
    """Goals of a team no longer playing the match are counted as problems."""
    m = match_min(home_unidentified=1)
    identify_goal(m.pk, home_team.pk)
    third = Team.objects.create(name="HC Oceláři Třinec", country=country_min)
    Match.objects.filter(pk=m.pk).update(home_team=third)

    ma = MatchAdmin(Match, admin.site)
    msgs = capture_messages(ma)
    ma.audit_ledger(make_request(), Match.objects.filter(pk=m.pk))

    assert len(msgs) == 1
    text, level = msgs[0]
    assert "1 zápasech" in text
    assert level == messages.WARNING


# --- PlayerEventStatsAdmin -------------------------------------------------


def test_player_event_stats_admin_save_and_combined(
    match_min: Any, home_team: Any, make_player: Any, season_min: Any
) -> None:
    """Add upserts the totals; changelist columns add identified values."""
    m = match_min(home_unidentified=1)
    p = make_player("Tomáš Plekanec")
    identify_goal(m.pk, home_team.pk, GoalDetails(scorer_id=p.pk))
    pa = PlayerEventStatsAdmin(PlayerEventStats, admin.site)

    obj = PlayerEventStats(player=p, event=season_min.event, goals_total=20, assists_total=11)
    pa.save_model(make_request(), obj, form=None, change=False)
    row = PlayerEventStats.objects.get(player=p, event=season_min.event)
    assert obj.pk == row.pk
    assert (row.goals_total, row.assists_total) == (20, 11)

    obj.assists_total = 12
    pa.save_model(make_request(), obj, form=None, change=True)
    annotated = pa.get_queryset(make_request()).get(pk=obj.pk)
    assert pa.goals_combined(annotated) == 21
    assert pa.assists_combined(annotated) == 12
    assert PlayerEventStats.objects.filter(player=p).count() == 1


def test_player_event_stats_admin_add_leaves_no_zeroed_row_on_failure(
    make_player: Any, season_min: Any
) -> None:
    """Adding writes row and totals in one statement; a rejected add stores nothing."""
    p = make_player("Nulový Řádek")
    pa = PlayerEventStatsAdmin(PlayerEventStats, admin.site)

    obj = PlayerEventStats(player=p, event=season_min.event, goals_total=-1, assists_total=0)
    with pytest.raises(ValueError):
        pa.save_model(make_request(), obj, form=None, change=False)
    assert not PlayerEventStats.objects.filter(player=p).exists()


def test_player_event_stats_admin_changelist_query_count(
    match_min: Any, home_team: Any, make_player: Any, season_min: Any, django_assert_num_queries: Any
) -> None:
    """Combined columns read annotations; rendering rows issues no extra queries."""
    m = match_min(home_unidentified=3)
    players = [make_player(f"Hráč {i}") for i in range(3)]
    for p in players:
        identify_goal(m.pk, home_team.pk, GoalDetails(scorer_id=p.pk))
        PlayerEventStats.objects.create(player=p, event=season_min.event, goals_total=1)
    pa = PlayerEventStatsAdmin(PlayerEventStats, admin.site)

    with django_assert_num_queries(1):
        rows = list(pa.get_queryset(make_request()).select_related("player", "event"))
        combined = [(pa.goals_combined(r), pa.assists_combined(r)) for r in rows]

    assert combined == [(2, 0)] * 3


def test_player_event_stats_admin_locks_pair_after_creation(make_player: Any, season_min: Any) -> None:
    """Player and competition are read-only on an existing row."""
    pa = PlayerEventStatsAdmin(PlayerEventStats, admin.site)
    assert tuple(pa.get_readonly_fields(make_request())) == ()
    row = PlayerEventStats.objects.create(player=make_player("Zámek"), event=season_min.event)
    assert tuple(pa.get_readonly_fields(make_request(), row)) == ("player", "event")
