import pytest

from ladderbot.constants import CollectionNames
from ladderbot.database.models import NotificationStatus
from ladderbot.services.ranking_reset_service import RankingResetService
from ladderbot.utils.batch_exceptions import NotificationNotFoundError


async def leave_notification(store, status, message="The 2025-02 ranking has been saved successfully."):
    await store.write_document(
        CollectionNames.NOTIFICATIONS, "admin", {"message": message, "status": status}
    )


class TestGetNotification:
    @pytest.mark.asyncio
    async def test_empty_mailbox(self, store):
        assert await RankingResetService(store).get_notification("admin") is None

    @pytest.mark.asyncio
    async def test_pending_is_open(self, store):
        await leave_notification(store, NotificationStatus.PENDING)
        notification = await RankingResetService(store).get_notification("admin")
        assert notification.status == NotificationStatus.PENDING
        assert notification.is_open
        assert notification.created_at is not None


class TestResetAllRankings:
    @pytest.mark.asyncio
    async def test_zeroes_competitors_only(self, store, add_players, get_player):
        await add_players(
            {"id": "a", "name": "Ahn", "wins": 7, "losses": 3, "attendance_count": 5,
             "win_streak_count": 4, "rp": 420, "today_wins": 2},
            {"id": "g", "name": "Guest", "is_guest": True, "wins": 2, "rp": 0},
        )

        reset = await RankingResetService(store).reset_all_rankings()

        assert reset == 1
        row = await get_player("a")
        assert (row.wins, row.losses, row.attendance_count, row.win_streak_count, row.rp) == (0, 0, 0, 0, 0)
        assert row.today_wins == 2
        assert (await get_player("g")).wins == 2


class TestResolveNotification:
    @pytest.mark.asyncio
    async def test_confirm_pending_resets_and_acknowledges(self, store, add_players, get_player):
        await add_players({"id": "a", "name": "Ahn", "wins": 5, "rp": 150})
        await leave_notification(store, NotificationStatus.PENDING)
        service = RankingResetService(store)

        result = await service.resolve_notification("admin", confirm=True)

        assert result.reset_performed is True
        assert result.players_reset == 1
        assert result.previous_status == NotificationStatus.PENDING
        assert (await get_player("a")).rp == 0
        assert (await service.get_notification("admin")).status == NotificationStatus.ACKNOWLEDGED

    @pytest.mark.asyncio
    async def test_cancel_keeps_rankings(self, store, add_players, get_player):
        await add_players({"id": "a", "name": "Ahn", "wins": 5, "rp": 150})
        await leave_notification(store, NotificationStatus.PENDING)
        service = RankingResetService(store)

        result = await service.resolve_notification("admin", confirm=False)

        assert result.reset_performed is False
        assert (await get_player("a")).rp == 150
        assert (await service.get_notification("admin")).status == NotificationStatus.ACKNOWLEDGED

    @pytest.mark.asyncio
    async def test_error_notification_never_resets(self, store, add_players, get_player):
        await add_players({"id": "a", "name": "Ahn", "wins": 5, "rp": 150})
        await leave_notification(store, NotificationStatus.ERROR, "archive failed")

        result = await RankingResetService(store).resolve_notification("admin", confirm=True)

        assert result.reset_performed is False
        assert result.previous_status == NotificationStatus.ERROR
        assert (await get_player("a")).rp == 150

    @pytest.mark.asyncio
    async def test_acknowledged_cannot_be_resolved_twice(self, store):
        await leave_notification(store, NotificationStatus.PENDING)
        service = RankingResetService(store)
        await service.resolve_notification("admin", confirm=False)

        with pytest.raises(NotificationNotFoundError):
            await service.resolve_notification("admin", confirm=True)

    @pytest.mark.asyncio
    async def test_empty_mailbox(self, store):
        with pytest.raises(NotificationNotFoundError):
            await RankingResetService(store).resolve_notification("admin", confirm=True)
