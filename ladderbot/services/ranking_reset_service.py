"""
Ranking Reset Service - season reset confirmed from the admin mailbox

After a monthly archive the ranking administrator receives a pending
notification. Confirming it zeroes every competitor's lifetime counters and
rp so the next season starts fresh; cancelling only acknowledges it. An error
notification (archive failed) is acknowledged but never triggers a reset.
"""

import logging
from typing import Optional

from ladderbot.constants import CollectionNames
from ladderbot.data_models.player import PlayerUpdate
from ladderbot.data_models.ranking import NotificationRecord, ResolutionResult
from ladderbot.database.models import NotificationStatus
from ladderbot.services.base import BaseService
from ladderbot.utils.batch_exceptions import NotificationNotFoundError

logger = logging.getLogger(__name__)

SEASON_RESET_FIELDS = ('wins', 'losses', 'rp', 'attendance_count', 'win_streak_count')


class RankingResetService(BaseService):
    """Service for acknowledging ranking notifications and resetting seasons."""

    async def get_notification(self, admin_id: str) -> Optional[NotificationRecord]:
        """Return the administrator's mailbox content, if any."""
        document = await self.store.get_document(CollectionNames.NOTIFICATIONS, admin_id)
        if document is None:
            return None
        return NotificationRecord(
            admin_id=document['admin_id'],
            message=document['message'],
            status=document['status'],
            created_at=document.get('created_at')
        )

    async def reset_all_rankings(self) -> int:
        """
        Zero the lifetime counters and rp of every non-guest player.

        Today-scoped counters are left to the next settlement.

        Returns:
            Number of players reset
        """
        competitors = await self.store.fetch_players(is_guest=False)
        updates = [
            PlayerUpdate(player_id=player.id, fields={name: 0 for name in SEASON_RESET_FIELDS})
            for player in competitors
        ]
        reset = await self.store.batch_update(updates)
        logger.info(f"Reset ranking data for {reset} players")
        return reset

    async def resolve_notification(self, admin_id: str, confirm: bool) -> ResolutionResult:
        """
        Resolve an open notification and acknowledge it.

        Args:
            admin_id: Mailbox owner
            confirm: Run the season reset when the notification is pending

        Raises:
            NotificationNotFoundError: If the mailbox is empty or already acknowledged
        """
        notification = await self.get_notification(admin_id)
        if notification is None or not notification.is_open:
            raise NotificationNotFoundError(admin_id)

        players_reset = 0
        reset_performed = False
        if confirm and notification.status == NotificationStatus.PENDING:
            players_reset = await self.reset_all_rankings()
            reset_performed = True

        await self.store.update_document(
            CollectionNames.NOTIFICATIONS,
            admin_id,
            {'status': NotificationStatus.ACKNOWLEDGED}
        )
        logger.info(
            f"Admin {admin_id} resolved {notification.status.value} notification "
            f"(confirm={confirm}, reset={reset_performed})"
        )

        return ResolutionResult(
            admin_id=admin_id,
            previous_status=notification.status,
            reset_performed=reset_performed,
            players_reset=players_reset
        )
