# file: league_app/services/ledger.py
"""Score ledger store: atomic primitives over match counters and score events.

Every function here is a single round-trip (or a select plus a delete for
:func:`delete_score_event`) and must run inside a caller-opened
``transaction.atomic()`` block; the orchestration lives in
:mod:`league_app.services.scoring`.

Provided primitives:
    - :func:`get_match_counters` – teams and unidentified counters of a match.
    - :func:`adjust_unidentified` – conditional decrement / plain increment of
      one side's counter, evaluated by the database in one ``UPDATE``.
    - :func:`insert_score_event` – forced insert of a validated event.
    - :func:`delete_score_event` – delete an event and report its match/team.

The counters are never read, modified in Python and written back: two
concurrent identifications would both read ``1`` and both write ``0``.
"""

from __future__ import annotations

from dataclasses import dataclass

from django.db import DEFAULT_DB_ALIAS, models, transaction
from django.db.transaction import TransactionManagementError
from django.db.models import F

from league_app.exceptions import MatchNotFound, TeamNotInMatch
from league_app.models import Match, ScoreEvent


__all__ = [
    "Side",
    "MatchCounters",
    "DeletedScoreEvent",
    "get_match_counters",
    "adjust_unidentified",
    "insert_score_event",
    "delete_score_event",
]


class Side(models.TextChoices):
    """Side of a match a team plays on (labels in Czech)."""

    HOME = "home", "Domácí"
    AWAY = "away", "Hosté"

    @property
    def counter_field(self) -> str:
        """Return the ``Match`` column holding this side's unidentified goals."""
        return f"{self.value}_score_unidentified"


@dataclass(frozen=True)
class MatchCounters:
    """Snapshot of the ledger-relevant columns of one match."""

    match_id: int
    home_team_id: int
    away_team_id: int
    home_unidentified: int
    away_unidentified: int

    def side_for(self, team_id: int) -> Side:
        """Return the side ``team_id`` plays on.

        Raises:
            TeamNotInMatch: If the team plays neither side.
        """
        if team_id == self.home_team_id:
            return Side.HOME
        if team_id == self.away_team_id:
            return Side.AWAY
        raise TeamNotInMatch(self.match_id, team_id)


@dataclass(frozen=True)
class DeletedScoreEvent:
    """Identity of a removed score event, enough to give its slot back."""

    match_id: int
    team_id: int


def _require_atomic(using: str = DEFAULT_DB_ALIAS) -> None:
    if not transaction.get_connection(using).in_atomic_block:
        raise TransactionManagementError(
            "Ledger primitives must run inside transaction.atomic()."
        )


def get_match_counters(match_id: int) -> MatchCounters:
    """Read the teams and unidentified counters of a match.

    Raises:
        MatchNotFound: If no such match exists.
    """
    _require_atomic()
    row = (
        Match.objects.filter(pk=match_id)
        .values("home_team_id", "away_team_id", "home_score_unidentified", "away_score_unidentified")
        .first()
    )
    if row is None:
        raise MatchNotFound(match_id)
    return MatchCounters(
        match_id=match_id,
        home_team_id=row["home_team_id"],
        away_team_id=row["away_team_id"],
        home_unidentified=row["home_score_unidentified"],
        away_unidentified=row["away_score_unidentified"],
    )


def adjust_unidentified(match_id: int, side: Side, delta: int) -> bool:
    """Apply ``delta`` (``+1`` or ``-1``) to one side's unidentified counter.

    The decrement is ``UPDATE ... SET c = c - 1 WHERE id = %s AND c > 0``, so
    the counter never goes negative and concurrent callers cannot both consume
    the last slot. The increment is unconditional.

    Args:
        match_id: Target match.
        side: Which counter to change.
        delta: ``-1`` to consume a slot, ``+1`` to return one.

    Returns:
        ``True`` when the row was updated, ``False`` when the decrement found
        the counter at zero (or the match is gone).

    Raises:
        ValueError: For any ``delta`` other than ``+1``/``-1``.
    """
    _require_atomic()
    field = Side(side).counter_field
    if delta == -1:
        updated = Match.objects.filter(pk=match_id, **{f"{field}__gt": 0}).update(**{field: F(field) - 1})
    elif delta == 1:
        updated = Match.objects.filter(pk=match_id).update(**{field: F(field) + 1})
    else:
        raise ValueError(f"delta must be +1 or -1, got {delta!r}")
    return updated == 1


def insert_score_event(event: ScoreEvent) -> int:
    """Insert an already validated, unsaved score event and return its id."""
    _require_atomic()
    event.save(force_insert=True)
    return event.pk


def delete_score_event(event_id: int) -> DeletedScoreEvent | None:
    """Delete a score event.

    Returns:
        The event's ``(match_id, team_id)`` when this call removed the row, or
        ``None`` when there was nothing to delete (unknown id, or a concurrent
        delete got there first).
    """
    _require_atomic()
    row = ScoreEvent.objects.filter(pk=event_id).values("match_id", "team_id").first()
    if row is None:
        return None
    deleted, _ = ScoreEvent.objects.filter(pk=event_id).delete()
    if not deleted:
        return None
    return DeletedScoreEvent(match_id=row["match_id"], team_id=row["team_id"])
