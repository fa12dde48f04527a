"""
Player data models for the batch workflows.

Provides immutable player snapshots read from the store and the field-level
update descriptions the store applies in one batch.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class PlayerRecord:
    """Read-only view of one player row with numeric fields defaulted to 0."""
    id: str
    name: str
    is_guest: bool = False
    wins: int = 0
    losses: int = 0
    win_streak_count: int = 0
    attendance_count: int = 0
    today_wins: int = 0
    today_losses: int = 0
    today_win_streak: int = 0
    today_win_streak_count: int = 0
    today_recent_games: List[Dict[str, Any]] = field(default_factory=list)
    rp: int = 0

    @property
    def today_games(self) -> int:
        return self.today_wins + self.today_losses

    @property
    def has_activity_today(self) -> bool:
        return self.today_wins > 0 or self.today_losses > 0


@dataclass(frozen=True)
class Increment:
    """Numeric field update evaluated by the store as column + delta."""
    delta: int


@dataclass(frozen=True)
class PlayerUpdate:
    """
    Field-level update for one player.

    Values wrapped in Increment are added to the stored value; any other
    value replaces it.
    """
    player_id: str
    fields: Dict[str, Any]
