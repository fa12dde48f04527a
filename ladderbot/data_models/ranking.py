"""
Ranking data models for monthly snapshots and batch run results.

Provides immutable data transfer objects passed between the services, the
store and the invocation shell.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ladderbot.database.models import NotificationStatus


@dataclass(frozen=True)
class SnapshotEntry:
    """Single row of a monthly ranking snapshot."""
    id: str
    name: str
    rank: int
    rp: int
    wins: int
    losses: int
    win_streak_count: int
    attendance_count: int


@dataclass(frozen=True)
class NotificationRecord:
    """Current content of an administrator's mailbox."""
    admin_id: str
    message: str
    status: NotificationStatus
    created_at: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.status in (NotificationStatus.PENDING, NotificationStatus.ERROR)


@dataclass(frozen=True)
class SettlementResult:
    """Outcome of one settlement cycle."""
    message: str
    players_settled: int
    players_scored: int


@dataclass(frozen=True)
class ArchiveResult:
    """Outcome of one monthly archive run."""
    message: str
    archive_key: str
    players_ranked: int


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of resolving an administrator notification."""
    admin_id: str
    previous_status: NotificationStatus
    reset_performed: bool
    players_reset: int
