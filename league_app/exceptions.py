# file: league_app/exceptions.py
"""Domain errors raised by the scoring ledger services.

The classes extend Django's own exception types so that callers already
handling ``ObjectDoesNotExist`` (404 paths) or ``ValidationError`` (form and
admin paths) need no special casing. Messages are user-facing and stay Czech.
"""

from __future__ import annotations

from django.core.exceptions import ObjectDoesNotExist, ValidationError


class LedgerError(Exception):
    """Base class of all scoring ledger domain errors."""


class MatchNotFound(LedgerError, ObjectDoesNotExist):
    """The referenced match does not exist."""

    def __init__(self, match_id: int) -> None:
        self.match_id = match_id
        super().__init__(f"Zápas id={match_id} neexistuje.")


class TeamNotInMatch(LedgerError, ValidationError):
    """The team is neither the home nor the away team of the match."""

    def __init__(self, match_id: int, team_id: int) -> None:
        self.match_id = match_id
        self.team_id = team_id
        ValidationError.__init__(
            self, f"Tým id={team_id} nehraje zápas id={match_id}.", code="team_not_in_match"
        )


class NoUnidentifiedGoalsAvailable(LedgerError, ValidationError):
    """``identify_goal`` found no unidentified goal left for the team's side."""

    def __init__(self, match_id: int, team_id: int) -> None:
        self.match_id = match_id
        self.team_id = team_id
        ValidationError.__init__(
            self,
            "Tým nemá v tomto zápase žádný neurčený gól, který by šlo určit.",
            code="no_unidentified_goals",
        )


class ScoreEventTeamChangeForbidden(LedgerError, ValidationError):
    """An update tried to move a score event to another team."""

    def __init__(self, event_id: int) -> None:
        self.event_id = event_id
        ValidationError.__init__(
            self,
            "Tým u existujícího gólu nelze změnit. Gól smažte a zadejte znovu.",
            code="team_change_forbidden",
        )
