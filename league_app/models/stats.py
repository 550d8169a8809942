# file: league_app/models/stats.py
"""Per-competition statistics model for players.

Defines :class:`PlayerEventStats`, a single row of manually entered career
totals of a player within one :class:`~league_app.models.Event`. Uniqueness is
enforced per ``(player, event)``; rows are created lazily via
:func:`league_app.services.stats.get_or_create_player_event_stats`.
"""

from __future__ import annotations

from django.db import models


# --- Model -----------------------------------------------------------------


class PlayerEventStats(models.Model):
    """Manually entered totals for a single player in a single competition.

    Notes:
        - The ``(player, event)`` unique constraint is what makes the lazy
          get-or-create safe under concurrent first access.
        - These totals complement the goals/assists computed on the fly from
          :class:`~league_app.models.ScoreEvent` rows (e.g. seasons played
          before detailed records were kept).
    """

    player = models.ForeignKey(
        "league_app.Player",
        on_delete=models.CASCADE,
        related_name="event_stats",
        verbose_name="Hráč",
    )
    event = models.ForeignKey(
        "league_app.Event",
        on_delete=models.CASCADE,
        related_name="player_stats",
        verbose_name="Soutěž",
    )

    goals_total = models.PositiveIntegerField("Góly (ručně)", default=0)
    assists_total = models.PositiveIntegerField("Asistence (ručně)", default=0)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["player", "event"], name="uniq_stats_player_event")
        ]
        verbose_name = "Statistika hráče v soutěži"
        verbose_name_plural = "Statistiky hráčů v soutěžích"

    def __str__(self) -> str:  # pragma: no cover - trivial
        """Readable label combining player and competition."""
        return f"{self.player} - {self.event}"
