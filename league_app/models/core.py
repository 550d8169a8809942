# file: league_app/models/core.py
"""Core reference models for the league application.

Contains foundational entities referenced by matches and statistics:
- :class:`Country` with a unique ISO 3166-1 alpha-2 code.
- :class:`Event` as a competition (league, cup) optionally bound to a country.
- :class:`Season` of an event with a unique year per event.
- :class:`Team` belonging to a country (name optional, falls back to country).
- :class:`Player` with a nationality.

These are plain persistence entities; their CRUD lives outside this app.
Internal documentation is English; user-facing labels stay Czech.
"""

from __future__ import annotations

from django.db import models


# --- Country ---------------------------------------------------------------


class Country(models.Model):
    """Country with a unique ISO code."""

    name = models.CharField("Stát", max_length=100)
    iso2_code = models.CharField("ISO kód", max_length=2, unique=True)

    class Meta:
        verbose_name = "Stát"
        verbose_name_plural = "Státy"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.name} ({self.iso2_code})"


# --- Event -----------------------------------------------------------------


class Event(models.Model):
    """A competition (league, cup, championship) spanning multiple seasons."""

    name = models.CharField("Název soutěže", max_length=255)
    country = models.ForeignKey(
        Country, on_delete=models.SET_NULL, null=True, blank=True, related_name="events", verbose_name="Stát"
    )

    class Meta:
        verbose_name = "Soutěž"
        verbose_name_plural = "Soutěže"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.name


# --- Season ----------------------------------------------------------------


class Season(models.Model):
    """One season (year) of an :class:`Event`.

    ``display_name`` is optional; when empty the year is used as the label.
    """

    year = models.PositiveIntegerField("Rok")
    display_name = models.CharField("Zobrazovaný název", max_length=255, blank=True, null=True)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="seasons", verbose_name="Soutěž")

    class Meta:
        verbose_name = "Sezóna"
        verbose_name_plural = "Sezóny"
        constraints = [
            models.UniqueConstraint(fields=["event", "year"], name="uniq_season_event_year"),
        ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.display_name or str(self.year)


# --- Team ------------------------------------------------------------------


class Team(models.Model):
    """A team; national teams may omit ``name`` and are labelled by country."""

    name = models.CharField("Název týmu", max_length=255, blank=True, null=True)
    country = models.ForeignKey(Country, on_delete=models.PROTECT, related_name="teams", verbose_name="Stát")

    class Meta:
        verbose_name = "Tým"
        verbose_name_plural = "Týmy"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.name or self.country.name


# --- Player ----------------------------------------------------------------


class Player(models.Model):
    """Player entity with a nationality."""

    name = models.CharField("Jméno", max_length=255)
    country = models.ForeignKey(Country, on_delete=models.PROTECT, related_name="players", verbose_name="Stát")

    class Meta:
        verbose_name = "Hráč"
        verbose_name_plural = "Hráči"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.name
