# file: league_app/services/scoring.py
"""Score event service: ledger-preserving create / identify / delete / update.

For each side of a match the total score is
``count(ScoreEvent of the side) + <side>_score_unidentified``. The operations
below change that equation only in the documented ways:

    - :func:`create_score_event` – record a goal; consumes an unidentified slot
      when one is left, otherwise adds a new goal (total +1). Never fails on an
      exhausted pool.
    - :func:`identify_goal` – attach details to an existing unidentified goal;
      fails with :class:`~league_app.exceptions.NoUnidentifiedGoalsAvailable`
      when the pool is empty. Total is unchanged.
    - :func:`delete_score_event` – remove an event and return its slot to the
      unidentified pool (+1, unconditionally).
    - :func:`update_score_event` – replace descriptive fields; counters are not
      touched and moving a goal to the other team is rejected.

Read helpers:
    - :func:`get_match_score` – identified / unidentified / total per side.
    - :func:`score_events_for_match` – events of a match in game order.

Each mutation is one ``transaction.atomic()`` block; nothing is retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields

from django.db import transaction
from django.db.models import Count, F, Q
from django.db.models.query import QuerySet

from league_app.exceptions import (
    MatchNotFound,
    NoUnidentifiedGoalsAvailable,
    ScoreEventTeamChangeForbidden,
)
from league_app.models import Match, ScoreEvent
from league_app.services import ledger

logger = logging.getLogger(__name__)


__all__ = [
    "GoalDetails",
    "MatchScore",
    "create_score_event",
    "identify_goal",
    "delete_score_event",
    "update_score_event",
    "get_match_score",
    "score_events_for_match",
]


@dataclass(frozen=True)
class GoalDetails:
    """Optional descriptive fields of an identified goal."""

    scorer_id: int | None = None
    assist1_id: int | None = None
    assist2_id: int | None = None
    period: int | None = None
    time_minutes: int | None = None
    time_seconds: int | None = None
    goal_type: str | None = None

    def as_model_kwargs(self) -> dict[str, object]:
        """Return the fields as ``ScoreEvent`` constructor keyword arguments."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class MatchScore:
    """Score breakdown of a match as derived from the ledger."""

    match_id: int
    home_team_id: int
    away_team_id: int
    home_identified: int
    away_identified: int
    home_unidentified: int
    away_unidentified: int

    @property
    def home_total(self) -> int:
        """Return identified plus unidentified home goals."""
        return self.home_identified + self.home_unidentified

    @property
    def away_total(self) -> int:
        """Return identified plus unidentified away goals."""
        return self.away_identified + self.away_unidentified


def _validated_event(match_id: int, team_id: int, details: GoalDetails | None) -> ScoreEvent:
    """Build an unsaved :class:`ScoreEvent` and run model validation on it.

    Raises:
        ValidationError: When a business rule (team, assists, ranges) fails.
    """
    event = ScoreEvent(match_id=match_id, team_id=team_id, **(details or GoalDetails()).as_model_kwargs())
    event.full_clean()
    return event


# --- Mutations -------------------------------------------------------------


def create_score_event(match_id: int, team_id: int, details: GoalDetails | None = None) -> int:
    """Record a goal, converting an unidentified one when available.

    Args:
        match_id: Match the goal belongs to.
        team_id: Scoring team (home or away team of the match).
        details: Optional scorer/assists/period/time/goal type.

    Returns:
        The id of the new score event.

    Raises:
        MatchNotFound: If the match does not exist.
        TeamNotInMatch: If the team does not play the match.
        ValidationError: If the details break a business rule.
    """
    with transaction.atomic():
        counters = ledger.get_match_counters(match_id)
        side = counters.side_for(team_id)
        event_id = ledger.insert_score_event(_validated_event(match_id, team_id, details))
        # 0 rows is fine: the goal was never counted as unidentified.
        consumed = ledger.adjust_unidentified(match_id, side, -1)

    logger.info(
        "Score event %s created for match %s (%s side, unidentified slot consumed: %s)",
        event_id, match_id, side.value, consumed,
    )
    return event_id


def identify_goal(match_id: int, team_id: int, details: GoalDetails | None = None) -> int:
    """Turn one unidentified goal of ``team_id`` into a detailed score event.

    Returns:
        The id of the new score event.

    Raises:
        NoUnidentifiedGoalsAvailable: If the side's unidentified counter is
            zero; nothing is written.
        MatchNotFound: If the match does not exist.
        TeamNotInMatch: If the team does not play the match.
        ValidationError: If the details break a business rule.
    """
    with transaction.atomic():
        counters = ledger.get_match_counters(match_id)
        side = counters.side_for(team_id)
        event = _validated_event(match_id, team_id, details)
        if not ledger.adjust_unidentified(match_id, side, -1):
            logger.warning(
                "Identify rejected for match %s team %s: no unidentified goals left", match_id, team_id
            )
            raise NoUnidentifiedGoalsAvailable(match_id, team_id)
        event_id = ledger.insert_score_event(event)

    logger.info("Goal identified as score event %s in match %s (%s side)", event_id, match_id, side.value)
    return event_id


def delete_score_event(event_id: int) -> bool:
    """Delete a score event and give its slot back to the unidentified pool.

    The slot goes to the home side when the event's team is the match's home
    team and to the away side otherwise, so a delete never fails on a goal
    whose team was replaced in the match afterwards.

    Returns:
        ``True`` if a row was deleted, ``False`` if no such event exists.
    """
    with transaction.atomic():
        deleted = ledger.delete_score_event(event_id)
        if deleted is None:
            transaction.set_rollback(True)
            return False
        counters = ledger.get_match_counters(deleted.match_id)
        side = ledger.Side.HOME if deleted.team_id == counters.home_team_id else ledger.Side.AWAY
        if deleted.team_id not in (counters.home_team_id, counters.away_team_id):
            logger.warning(
                "Score event %s belonged to team %s which no longer plays match %s; slot returned to away side",
                event_id, deleted.team_id, deleted.match_id,
            )
        ledger.adjust_unidentified(deleted.match_id, side, +1)

    logger.info(
        "Score event %s deleted from match %s; %s unidentified goals +1",
        event_id, deleted.match_id, side.value,
    )
    return True


def update_score_event(event_id: int, details: GoalDetails | None = None, *, team_id: int | None = None) -> bool:
    """Replace the descriptive fields of a score event.

    Counters are left alone because identification status does not change.
    ``team_id`` is accepted only to detect reassignment: a goal cannot move to
    the other side without rebalancing both counters, so that is refused.

    Returns:
        ``True`` if the event was updated, ``False`` if it does not exist.

    Raises:
        ScoreEventTeamChangeForbidden: If ``team_id`` differs from the stored team.
        ValidationError: If the new details break a business rule.
    """
    with transaction.atomic():
        current = ScoreEvent.objects.filter(pk=event_id).values("match_id", "team_id").first()
        if current is None:
            return False
        if team_id is not None and team_id != current["team_id"]:
            logger.warning(
                "Refused to move score event %s from team %s to team %s", event_id, current["team_id"], team_id
            )
            raise ScoreEventTeamChangeForbidden(event_id)

        event = _validated_event(current["match_id"], current["team_id"], details)
        replacement = (details or GoalDetails()).as_model_kwargs()
        updated = ScoreEvent.objects.filter(pk=event_id, team_id=event.team_id).update(**replacement)

    if updated:
        logger.info("Score event %s updated", event_id)
    return bool(updated)


# --- Reads -----------------------------------------------------------------


def get_match_score(match_id: int) -> MatchScore:
    """Return identified, unidentified and total goals for both sides.

    Raises:
        MatchNotFound: If the match does not exist.
    """
    row = (
        Match.objects.filter(pk=match_id)
        .annotate(
            home_identified=Count("score_events", filter=Q(score_events__team_id=F("home_team_id"))),
            away_identified=Count("score_events", filter=Q(score_events__team_id=F("away_team_id"))),
        )
        .values(
            "home_team_id",
            "away_team_id",
            "home_identified",
            "away_identified",
            "home_score_unidentified",
            "away_score_unidentified",
        )
        .first()
    )
    if row is None:
        raise MatchNotFound(match_id)
    return MatchScore(
        match_id=match_id,
        home_team_id=row["home_team_id"],
        away_team_id=row["away_team_id"],
        home_identified=row["home_identified"],
        away_identified=row["away_identified"],
        home_unidentified=row["home_score_unidentified"],
        away_unidentified=row["away_score_unidentified"],
    )


def score_events_for_match(match_id: int) -> QuerySet[ScoreEvent]:
    """Return events of a match ordered by period and clock (unknown times last)."""
    return (
        ScoreEvent.objects.filter(match_id=match_id)
        .select_related("team", "scorer", "assist1", "assist2")
        .order_by(
            F("period").asc(nulls_last=True),
            F("time_minutes").asc(nulls_last=True),
            F("time_seconds").asc(nulls_last=True),
            "id",
        )
    )
