"""
Monthly Archive Service - immutable monthly leaderboard snapshots

Ranks all non-guest players by rp, stores the ranking under the previous
month's key and asks the ranking administrator, through their notification
mailbox, whether to reset ranking data for the new season. Test runs write
under a "-TEST" key so they never replace a production snapshot.
"""

import logging
from dataclasses import asdict
from typing import Callable, List, Optional, Sequence
from datetime import datetime

from ladderbot.config import Config
from ladderbot.constants import ArchiveConstants, CollectionNames
from ladderbot.data_models.player import PlayerRecord
from ladderbot.data_models.ranking import ArchiveResult, SnapshotEntry
from ladderbot.database.models import NotificationStatus
from ladderbot.services.base import BaseService
from ladderbot.utils.time_utils import previous_month_key

logger = logging.getLogger(__name__)

ARCHIVE_FAILURE_MESSAGE = (
    "An error occurred while saving the monthly ranking. "
    "Ranking data was NOT reset to protect existing records. Please contact a developer."
)


def rank_players(players: Sequence[PlayerRecord]) -> List[SnapshotEntry]:
    """Rank players by rp descending; ties keep their input order."""
    ordered = sorted(players, key=lambda player: player.rp, reverse=True)
    return [
        SnapshotEntry(
            id=player.id,
            name=player.name,
            rank=position,
            rp=player.rp or 0,
            wins=player.wins or 0,
            losses=player.losses or 0,
            win_streak_count=player.win_streak_count or 0,
            attendance_count=player.attendance_count or 0,
        )
        for position, player in enumerate(ordered, start=1)
    ]


def archive_notification_message(archive_key: str) -> str:
    """Mailbox text asking the administrator to confirm the ranking reset."""
    year, month = archive_key.split('-')[:2]
    return (
        f"The {year}-{month} ranking has been saved successfully. "
        f"Reset all ranking data for the new season?"
    )


class ArchiveService(BaseService):
    """Service for the monthly ranking archive."""

    def __init__(self, store, admin_id: Optional[str] = None,
                 utc_offset_hours: Optional[int] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        super().__init__(store, clock)
        self.admin_id = admin_id or Config.RANKING_ADMIN_ID
        self.utc_offset_hours = Config.ARCHIVE_UTC_OFFSET_HOURS if utc_offset_hours is None else utc_offset_hours

    async def archive_monthly_ranking(self, is_test: bool = False) -> ArchiveResult:
        """
        Snapshot the current ranking under the previous month's key.

        Args:
            is_test: Write under the "-TEST" variant of the key

        Returns:
            ArchiveResult with the key used and number of ranked players

        Raises:
            StoreError: If a fetch or write fails
        """
        archive_key = previous_month_key(self.now(), self.utc_offset_hours, is_test)
        logger.info(f"Starting monthly ranking archive for {archive_key}")

        players = await self.store.fetch_players(is_guest=False)
        if not players:
            logger.info("No ranked players found, monthly ranking was not saved")
            return ArchiveResult(
                message="No players to rank. Monthly ranking was not saved.",
                archive_key=archive_key,
                players_ranked=0
            )

        ranking = rank_players(players)
        await self.store.write_document(
            CollectionNames.MONTHLY_RANKINGS,
            archive_key,
            {'ranking': [asdict(entry) for entry in ranking]}
        )
        logger.info(f"Saved {archive_key} ranking with {len(ranking)} players")

        await self.store.write_document(
            CollectionNames.NOTIFICATIONS,
            self.admin_id,
            {
                'message': archive_notification_message(archive_key),
                'status': NotificationStatus.PENDING,
            }
        )
        logger.info(f"Sent ranking reset notification to admin {self.admin_id}")

        return ArchiveResult(
            message=f"Saved the {archive_key} ranking for {len(ranking)} players.",
            archive_key=archive_key,
            players_ranked=len(ranking)
        )

    async def notify_archive_failure(self) -> None:
        """Tell the administrator the archive failed and no reset was performed."""
        await self.store.write_document(
            CollectionNames.NOTIFICATIONS,
            self.admin_id,
            {
                'message': ARCHIVE_FAILURE_MESSAGE,
                'status': NotificationStatus.ERROR,
            }
        )
        logger.warning(f"Sent archive failure notification to admin {self.admin_id}")

    async def get_snapshot(self, archive_key: str) -> Optional[List[SnapshotEntry]]:
        """Load an archived ranking, or None when the key was never written."""
        document = await self.store.get_document(CollectionNames.MONTHLY_RANKINGS, archive_key)
        if document is None:
            return None
        return [SnapshotEntry(**entry) for entry in document['ranking'] or []]

    async def list_snapshot_keys(self, include_test: bool = False) -> List[str]:
        """List archived month keys, newest first."""
        keys = await self.store.list_document_keys(CollectionNames.MONTHLY_RANKINGS)
        if include_test:
            return keys
        return [key for key in keys if not key.endswith(ArchiveConstants.TEST_SUFFIX)]
