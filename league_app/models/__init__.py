from .core import Country, Event, Season, Team, Player
from .matches import Match, MatchStatus
from .scoring import Period, GoalType, ScoreEvent
from .stats import PlayerEventStats

__all__ = [
    "Country", "Event", "Season", "Team", "Player",
    "Match", "MatchStatus",
    "Period", "GoalType", "ScoreEvent",
    "PlayerEventStats",
]
