# file: league_app/models/scoring.py
"""Score event model attached to a :class:`~league_app.models.Match`.

This module defines the detailed (identified) goal record:

- **Enumerations**
  - :class:`Period` – periods 1–3, overtime, shootout.
  - :class:`GoalType` – game situation of a goal (EV/PP/SH/PS/EN).

- **Model**
  - :class:`ScoreEvent` – one identified goal with an optional scorer, up to
    two assists, period and clock time.

Rows are created and deleted only through :mod:`league_app.services.scoring`
so that the match's unidentified counters stay in step with them.
"""

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator
from django.db import models


# --- Enums -----------------------------------------------------------------


class Period(models.IntegerChoices):
    """Enumeration of game periods (labels in Czech)."""

    FIRST = 1, "1. třetina"
    SECOND = 2, "2. třetina"
    THIRD = 3, "3. třetina"
    OT = 4, "Prodloužení"
    SO = 5, "Nájezdy"


class GoalType(models.TextChoices):
    """Game situation at the moment of a goal (labels in Czech)."""

    EVEN_STRENGTH = "even_strength", "Plný počet"
    POWER_PLAY = "power_play", "Přesilovka"
    SHORT_HANDED = "short_handed", "Oslabení"
    PENALTY_SHOT = "penalty_shot", "Trestné střílení"
    EMPTY_NET = "empty_net", "Do prázdné"


# --- ScoreEvent ------------------------------------------------------------


class ScoreEvent(models.Model):
    """An identified goal of one team in one match.

    Every descriptive field is optional: a goal may be identified with a
    scorer only, or only with its period. ``team`` is mandatory and must be
    one of the two teams playing the match.
    """

    match = models.ForeignKey(
        "league_app.Match", on_delete=models.CASCADE, related_name="score_events", verbose_name="Zápas"
    )
    team = models.ForeignKey(
        "league_app.Team", on_delete=models.CASCADE, related_name="score_events", verbose_name="Tým"
    )
    scorer = models.ForeignKey(
        "league_app.Player",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="goals_scored",
        verbose_name="Střelec",
    )
    assist1 = models.ForeignKey(
        "league_app.Player",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assists_primary",
        verbose_name="Asistence 1",
    )
    assist2 = models.ForeignKey(
        "league_app.Player",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assists_secondary",
        verbose_name="Asistence 2",
    )
    period = models.PositiveSmallIntegerField("Třetina", choices=Period.choices, blank=True, null=True)
    time_minutes = models.PositiveSmallIntegerField(
        "Minuta", blank=True, null=True, validators=[MaxValueValidator(60)]
    )
    time_seconds = models.PositiveSmallIntegerField(
        "Sekunda", blank=True, null=True, validators=[MaxValueValidator(59)]
    )
    goal_type = models.CharField("Typ gólu", max_length=20, choices=GoalType.choices, blank=True, null=True)

    class Meta:
        verbose_name = "Gól"
        verbose_name_plural = "Góly"
        indexes = [
            models.Index(fields=["match", "team"], name="idx_score_event_match_team"),
        ]

    @property
    def clock(self) -> str:
        """Return ``mm:ss`` when the minute is known, otherwise an empty string."""
        if self.time_minutes is None:
            return ""
        return f"{self.time_minutes}:{(self.time_seconds or 0):02d}"

    def clean(self) -> None:
        """Domain validation for score events.

        Raises:
            ValidationError: If the team does not play the match or the
            scorer/assist players are not pairwise distinct.
        """
        super().clean()

        if self.match_id and self.team_id:
            from .matches import Match

            sides = (
                Match.objects.filter(pk=self.match_id)
                .values_list("home_team_id", "away_team_id")
                .first()
            )
            if sides is not None and self.team_id not in sides:
                raise ValidationError({"team": "Tým gólu musí být domácím nebo hostujícím týmem zápasu."})

        if self.scorer_id and self.assist1_id == self.scorer_id:
            raise ValidationError("Asistent 1 nesmí být zároveň střelcem.")

        if self.assist2_id and (self.assist2_id == self.scorer_id or self.assist2_id == self.assist1_id):
            raise ValidationError("Asistent 2 nesmí být střelcem ani shodný s Asistentem 1.")

    def __str__(self) -> str:  # pragma: no cover - trivial
        """Readable label with scorer (or placeholder) and clock."""
        who = str(self.scorer) if self.scorer_id else "—"
        return f"{who} {self.clock}".strip()
