# file: league_app/management/commands/audit_score_ledger.py
"""Audit the score ledger of matches.

For every selected match the command prints identified, unidentified and
total goals per side (as computed by
:func:`league_app.services.scoring.get_match_score`) and lists *orphaned*
score events: events whose team is no longer the home or away team of their
match. Such events are outside both sides' counts, so the match's totals are
silently wrong until an admin fixes them. They can only appear when a match's
teams are edited after goals were recorded.

CLI options (Czech UX):
    ``--match-id`` • ``--strict`` (non-zero exit when anything is found).

The command is read-only.
"""

from __future__ import annotations

import argparse
from typing import Any

from django.core.management.base import BaseCommand, CommandError
from django.db.models import F

from league_app.exceptions import MatchNotFound
from league_app.models import Match, ScoreEvent
from league_app.services.scoring import get_match_score


class Command(BaseCommand):
    """Management command printing a per-match ledger report."""

    help = "Zkontroluje konzistenci skóre zápasů (určené + neurčené góly)."

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:  # type: ignore[override]
        """Declare command-line arguments."""
        parser.add_argument("--match-id", type=int, help="Kontrolovat jen zápas s tímto ID.")
        parser.add_argument(
            "--strict",
            action="store_true",
            help="Skončit chybou, pokud se najde gól týmu, který zápas nehraje.",
        )

    def handle(self, *args: Any, **options: Any) -> None:  # type: ignore[override]
        """Entrypoint; prints the report and optionally fails on findings."""
        match_id: int | None = options.get("match_id")
        strict: bool = bool(options.get("strict"))

        matches = Match.objects.order_by("id")
        if match_id is not None:
            matches = matches.filter(pk=match_id)
            if not matches.exists():
                raise CommandError(str(MatchNotFound(match_id)))

        orphans = (
            ScoreEvent.objects.filter(match__in=matches)
            .exclude(team_id=F("match__home_team_id"))
            .exclude(team_id=F("match__away_team_id"))
            .order_by("match_id", "id")
        )

        checked = 0
        for match_pk in matches.values_list("pk", flat=True):
            score = get_match_score(match_pk)
            self.stdout.write(
                f"Zápas {match_pk}: domácí {score.home_total} "
                f"({score.home_identified} určených + {score.home_unidentified} neurčených), "
                f"hosté {score.away_total} "
                f"({score.away_identified} určených + {score.away_unidentified} neurčených)"
            )
            checked += 1

        found = 0
        for ev in orphans.values("pk", "match_id", "team_id"):
            found += 1
            self.stdout.write(
                f"⚠️  Gól {ev['pk']} v zápase {ev['match_id']} patří týmu {ev['team_id']}, "
                "který tento zápas nehraje."
            )

        self.stdout.write(f"Zkontrolováno zápasů: {checked} | problémových gólů: {found}")
        if strict and found:
            raise CommandError(f"Nalezeno {found} gólů mimo týmy zápasu.")
