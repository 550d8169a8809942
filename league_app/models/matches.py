# file: league_app/models/matches.py
"""Match model: the aggregate root of one game and its ledger counters.

Contains:
* :class:`MatchStatus` – lifecycle label of a match (informational).
* :class:`Match` – a game between two teams within a season, holding the
  per-side *unidentified* goal counters.

A side's total score is never stored. It is always
``count(ScoreEvent of that side) + <side>_score_unidentified``; see
:mod:`league_app.services.scoring` for the operations that keep it consistent.
"""

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models


# --- Status enum -----------------------------------------------------------


class MatchStatus(models.TextChoices):
    """Lifecycle of a match (labels in Czech)."""

    SCHEDULED = "scheduled", "Naplánováno"
    IN_PROGRESS = "in_progress", "Probíhá"
    FINISHED = "finished", "Odehráno"
    CANCELLED = "cancelled", "Zrušeno"
    POSTPONED = "postponed", "Odloženo"


# --- Match -----------------------------------------------------------------


class Match(models.Model):
    """A game between two distinct teams in a season.

    Notes:
        * ``home_score_unidentified`` / ``away_score_unidentified`` count goals
          known to have happened but not yet attributed to a scorer or time.
          They are mutated only through single conditional ``UPDATE``
          statements in :mod:`league_app.services.ledger`.
        * ``status`` has no effect on scoring.
    """

    season = models.ForeignKey(
        "league_app.Season", on_delete=models.CASCADE, related_name="matches", verbose_name="Sezóna"
    )
    home_team = models.ForeignKey(
        "league_app.Team",
        on_delete=models.CASCADE,
        related_name="matches_home",
        verbose_name="Domácí tým",
    )
    away_team = models.ForeignKey(
        "league_app.Team",
        on_delete=models.CASCADE,
        related_name="matches_away",
        verbose_name="Hostující tým",
    )

    home_score_unidentified = models.PositiveIntegerField("Neurčené góly domácích", default=0)
    away_score_unidentified = models.PositiveIntegerField("Neurčené góly hostů", default=0)

    match_date = models.DateTimeField("Datum a čas zápasu", blank=True, null=True)
    status = models.CharField(
        "Stav", max_length=20, choices=MatchStatus.choices, default=MatchStatus.SCHEDULED
    )
    venue = models.CharField("Místo konání", max_length=200, blank=True, null=True)

    class Meta:
        verbose_name = "Zápas"
        verbose_name_plural = "Zápasy"
        ordering = ["-match_date", "-id"]

    def clean(self) -> None:
        """Validate team distinctness.

        Raises:
            ValidationError: If home and away team are the same.
        """
        if self.home_team_id and self.home_team_id == self.away_team_id:
            raise ValidationError("Domácí a hostující tým nesmí být stejný.")

    def __str__(self) -> str:  # pragma: no cover - trivial
        """Readable label: ``Home vs Away (YYYY-MM-DD)``."""
        when = f" ({self.match_date:%Y-%m-%d})" if self.match_date else ""
        return f"{self.home_team} vs {self.away_team}{when}"
