# file: league_app/services/stats.py
"""Player statistics per competition: idempotent upsert and totals.

Provided utilities:
    - :func:`get_or_create_player_event_stats` – make sure the
      ``(player, event)`` row exists and return its id, safe under concurrent
      first access.
    - :func:`create_or_update_player_event_stats` – write the manual totals of
      a ``(player, event)`` pair in one ``INSERT ... ON CONFLICT DO UPDATE``.
    - :func:`update_player_event_stats` / :func:`delete_player_event_stats` –
      single conditional statements reporting whether a row was affected.
    - :func:`player_event_totals` – manual totals combined with goals/assists
      computed on the fly from score events.
    - :func:`get_player_event_stats` – all competitions of one player with
      manual and identified counts, in one aggregate query.
    - :func:`identified_count_annotations` – the ``Count`` expressions shared
      by the aggregate query and the admin changelist.

The get-or-create relies on the ``uniq_stats_player_event`` constraint and an
``INSERT ... ON CONFLICT DO NOTHING`` (``INSERT OR IGNORE`` on SQLite); there
is no check-then-insert, no lock and no transaction spanning the two steps.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from django.db.models import Count, F, Q
from django.db.models.expressions import Combinable

from league_app.models import PlayerEventStats, ScoreEvent

logger = logging.getLogger(__name__)


__all__ = [
    "PlayerEventTotals",
    "PlayerEventStatsRow",
    "get_or_create_player_event_stats",
    "create_or_update_player_event_stats",
    "update_player_event_stats",
    "delete_player_event_stats",
    "player_event_totals",
    "get_player_event_stats",
    "identified_count_annotations",
]

# Path from a PlayerEventStats row to the score events of its competition.
_EVENT_GOALS = "event__seasons__matches__score_events"


@dataclass(frozen=True)
class PlayerEventTotals:
    """Manual and computed goal/assist totals of a player in a competition."""

    player_id: int
    event_id: int
    manual_goals: int
    manual_assists: int
    computed_goals: int
    computed_assists: int

    @property
    def goals(self) -> int:
        """Return manual plus computed goals."""
        return self.manual_goals + self.computed_goals

    @property
    def assists(self) -> int:
        """Return manual plus computed assists."""
        return self.manual_assists + self.computed_assists

    @property
    def points(self) -> int:
        """Return goals plus assists."""
        return self.goals + self.assists


@dataclass(frozen=True)
class PlayerEventStatsRow:
    """One competition of a player as listed by :func:`get_player_event_stats`."""

    stats_id: int
    event_id: int
    event_name: str
    goals_total: int
    assists_total: int
    goals_identified: int
    assists_identified: int

    @property
    def points_total(self) -> int:
        """Return manual goals plus manual assists."""
        return self.goals_total + self.assists_total

    @property
    def points_identified(self) -> int:
        """Return identified goals plus identified assists."""
        return self.goals_identified + self.assists_identified


def _check_totals(goals_total: int, assists_total: int) -> None:
    if goals_total < 0 or assists_total < 0:
        raise ValueError("Totals cannot be negative.")


def identified_count_annotations(player: int | Combinable) -> dict[str, Count]:
    """Return ``goals_identified`` / ``assists_identified`` annotations.

    Meant for querysets of :class:`PlayerEventStats`. Both counts walk the
    same join to the competition's score events, so they are evaluated in
    one ``GROUP BY`` without multiplying each other.

    Args:
        player: A player id, or an expression such as ``F("player_id")``
            when each row counts its own player.
    """
    return {
        "goals_identified": Count(_EVENT_GOALS, filter=Q(**{f"{_EVENT_GOALS}__scorer_id": player})),
        "assists_identified": Count(
            _EVENT_GOALS,
            filter=Q(**{f"{_EVENT_GOALS}__assist1_id": player}) | Q(**{f"{_EVENT_GOALS}__assist2_id": player}),
        ),
    }


def get_or_create_player_event_stats(player_id: int, event_id: int) -> int:
    """Return the id of the ``(player, event)`` stats row, creating it if needed.

    Step 1 inserts a zeroed row and silently does nothing when the pair already
    exists; step 2 selects the row. Any number of concurrent callers end up
    with exactly one row and the same id.

    Args:
        player_id: Player the statistics belong to.
        event_id: Competition the statistics belong to.

    Returns:
        Primary key of the (existing or new) row.

    Raises:
        IntegrityError: If ``player_id`` or ``event_id`` does not exist
            (foreign key violation reported by the database).
    """
    PlayerEventStats.objects.bulk_create(
        [PlayerEventStats(player_id=player_id, event_id=event_id, goals_total=0, assists_total=0)],
        ignore_conflicts=True,
    )
    stats_id = (
        PlayerEventStats.objects.filter(player_id=player_id, event_id=event_id)
        .values_list("pk", flat=True)
        .get()
    )
    logger.debug("Player %s stats row for event %s is %s", player_id, event_id, stats_id)
    return stats_id


def create_or_update_player_event_stats(
    player_id: int, event_id: int, goals_total: int, assists_total: int
) -> int:
    """Store manual totals for ``(player, event)``, inserting or overwriting.

    The row and its values are written by one ``INSERT ... ON CONFLICT DO
    UPDATE`` statement, so a failure never leaves a zeroed row behind.

    Returns:
        Primary key of the stored row.

    Raises:
        ValueError: If a total is negative.
        IntegrityError: If ``player_id`` or ``event_id`` does not exist.
    """
    _check_totals(goals_total, assists_total)
    PlayerEventStats.objects.bulk_create(
        [
            PlayerEventStats(
                player_id=player_id, event_id=event_id, goals_total=goals_total, assists_total=assists_total
            )
        ],
        update_conflicts=True,
        unique_fields=["player", "event"],
        update_fields=["goals_total", "assists_total"],
    )
    stats_id = (
        PlayerEventStats.objects.filter(player_id=player_id, event_id=event_id)
        .values_list("pk", flat=True)
        .get()
    )
    logger.info(
        "Player %s stats for event %s stored as row %s (%s goals / %s assists)",
        player_id, event_id, stats_id, goals_total, assists_total,
    )
    return stats_id


def update_player_event_stats(stats_id: int, goals_total: int, assists_total: int) -> bool:
    """Overwrite the manual totals of one stats row.

    Returns:
        ``True`` if the row exists and was updated, ``False`` otherwise.

    Raises:
        ValueError: If a total is negative.
    """
    _check_totals(goals_total, assists_total)
    updated = PlayerEventStats.objects.filter(pk=stats_id).update(
        goals_total=goals_total, assists_total=assists_total
    )
    if updated:
        logger.info("Player event stats %s set to %s goals / %s assists", stats_id, goals_total, assists_total)
    return bool(updated)


def delete_player_event_stats(stats_id: int) -> bool:
    """Delete one stats row; return whether it existed."""
    deleted, _ = PlayerEventStats.objects.filter(pk=stats_id).delete()
    if deleted:
        logger.info("Player event stats %s deleted", stats_id)
    return bool(deleted)


def player_event_totals(player_id: int, event_id: int) -> PlayerEventTotals:
    """Combine manual totals with totals computed from score events.

    Computed values count score events in matches of any season of the
    competition: a goal when the player is the scorer, an assist when the
    player is ``assist1`` or ``assist2``. A missing stats row counts as zero
    manual totals and is not created here.
    """
    manual = (
        PlayerEventStats.objects.filter(player_id=player_id, event_id=event_id)
        .values("goals_total", "assists_total")
        .first()
    ) or {"goals_total": 0, "assists_total": 0}

    events = ScoreEvent.objects.filter(match__season__event_id=event_id)
    computed_goals = events.filter(scorer_id=player_id).count()
    computed_assists = events.filter(Q(assist1_id=player_id) | Q(assist2_id=player_id)).count()

    return PlayerEventTotals(
        player_id=player_id,
        event_id=event_id,
        manual_goals=manual["goals_total"],
        manual_assists=manual["assists_total"],
        computed_goals=computed_goals,
        computed_assists=computed_assists,
    )


def get_player_event_stats(player_id: int) -> list[PlayerEventStatsRow]:
    """List every competition the player has a stats row for, by event name.

    Competitions without a stats row are not listed, even when the player
    has identified goals there.
    """
    rows = (
        PlayerEventStats.objects.filter(player_id=player_id)
        .annotate(event_name=F("event__name"), **identified_count_annotations(player_id))
        .order_by("event__name", "pk")
        .values(
            "pk",
            "event_id",
            "event_name",
            "goals_total",
            "assists_total",
            "goals_identified",
            "assists_identified",
        )
    )
    return [
        PlayerEventStatsRow(
            stats_id=r["pk"],
            event_id=r["event_id"],
            event_name=r["event_name"],
            goals_total=r["goals_total"],
            assists_total=r["assists_total"],
            goals_identified=r["goals_identified"],
            assists_identified=r["assists_identified"],
        )
        for r in rows
    ]
