# file: league_app/tests/conftest.py
"""Common pytest fixtures for league_app tests.

Provides convenient accessors for core models (resolved dynamically via
``apps.get_model``) and minimal data builders used across test modules.

Fixtures:
    - ``Country``, ``Event``, ``Season``, ``Team``, ``Player``, ``Match``:
      Model classes.
    - ``country_min``, ``season_min``: Minimal reference data.
    - ``home_team`` / ``away_team``: Two teams for ``match_min``.
    - ``match_min``: Match factory with chosen unidentified counters.
"""

from __future__ import annotations

from typing import Any, Callable

import pytest
from django.apps import apps

APP: str = "league_app"


@pytest.fixture
def Country() -> Any:
    """Return the Country model class."""
    return apps.get_model(APP, "Country")


@pytest.fixture
def Event() -> Any:
    """Return the Event model class."""
    return apps.get_model(APP, "Event")


@pytest.fixture
def Season() -> Any:
    """Return the Season model class."""
    return apps.get_model(APP, "Season")


@pytest.fixture
def Team() -> Any:
    """Return the Team model class."""
    return apps.get_model(APP, "Team")


@pytest.fixture
def Player() -> Any:
    """Return the Player model class."""
    return apps.get_model(APP, "Player")


@pytest.fixture
def Match() -> Any:
    """Return the Match model class."""
    return apps.get_model(APP, "Match")


@pytest.fixture
def country_min(Country: Any) -> Any:
    """Create a single country used by teams and players."""
    return Country.objects.create(name="Česko", iso2_code="CZ")


@pytest.fixture
def season_min(Event: Any, Season: Any, country_min: Any) -> Any:
    """Create a competition with one 2024 season."""
    event = Event.objects.create(name="Czech Hockey League", country=country_min)
    return Season.objects.create(year=2024, display_name="2024 Czech Season", event=event)


@pytest.fixture
def home_team(Team: Any, country_min: Any) -> Any:
    """Create the home team."""
    return Team.objects.create(name="HC Sparta Praha", country=country_min)


@pytest.fixture
def away_team(Team: Any, country_min: Any) -> Any:
    """Create the away team."""
    return Team.objects.create(name="HC Kometa Brno", country=country_min)


@pytest.fixture
def match_min(Match: Any, season_min: Any, home_team: Any, away_team: Any) -> Callable[..., Any]:
    """Return a factory creating a match between ``home_team`` and ``away_team``."""

    def _make(home_unidentified: int = 0, away_unidentified: int = 0) -> Any:
        return Match.objects.create(
            season=season_min,
            home_team=home_team,
            away_team=away_team,
            home_score_unidentified=home_unidentified,
            away_score_unidentified=away_unidentified,
        )

    return _make


@pytest.fixture
def make_player(Player: Any, country_min: Any) -> Callable[[str], Any]:
    """Return a factory creating players of ``country_min``."""

    def _make(name: str) -> Any:
        return Player.objects.create(name=name, country=country_min)

    return _make
