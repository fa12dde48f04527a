from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from ladderbot.cogs.batch_jobs import MAX_CHOICES, BatchJobsCog, NotificationResolutionView, month_choices
from ladderbot.data_models.ranking import SnapshotEntry
from ladderbot.utils.batch_exceptions import StoreError

ENTRY = SnapshotEntry(id="p1", name="Ann", rank=1, rp=40, wins=4, losses=1,
                      win_streak_count=2, attendance_count=3)


def make_interaction():
    interaction = MagicMock()
    interaction.response.defer = AsyncMock()
    interaction.followup.send = AsyncMock()
    interaction.edit_original_response = AsyncMock()
    return interaction


@pytest.fixture
def archive_service():
    service = AsyncMock()
    service.list_snapshot_keys.return_value = ["2025-02", "2025-01"]
    service.get_snapshot.return_value = [ENTRY]
    return service


@pytest.fixture
def cog(archive_service):
    bot = SimpleNamespace(batch_runner=SimpleNamespace(archive_service=archive_service),
                          reset_service=AsyncMock())
    return BatchJobsCog(bot)


def sent_embed(interaction):
    return interaction.followup.send.await_args.kwargs["embed"]


class TestMonthChoices:
    def test_filters_by_typed_text(self):
        choices = month_choices(["2025-02", "2025-01", "2024-12"], "2025")
        assert [choice.value for choice in choices] == ["2025-02", "2025-01"]

    def test_capped_at_discord_limit(self):
        keys = [f"20{year:02d}-01" for year in range(30)]
        assert len(month_choices(keys, "")) == MAX_CHOICES


class TestMonthlyRankingCommand:
    @pytest.mark.asyncio
    async def test_defaults_to_latest_month(self, cog, archive_service):
        interaction = make_interaction()

        await cog.monthly_ranking.callback(cog, interaction)

        archive_service.get_snapshot.assert_awaited_once_with("2025-02")
        assert "2025-02" in sent_embed(interaction).title

    @pytest.mark.asyncio
    async def test_requested_month(self, cog, archive_service):
        interaction = make_interaction()

        await cog.monthly_ranking.callback(cog, interaction, "2025-01")

        archive_service.get_snapshot.assert_awaited_once_with("2025-01")
        assert "**1.** Ann" in sent_embed(interaction).description

    @pytest.mark.asyncio
    async def test_unknown_month(self, cog, archive_service):
        archive_service.get_snapshot.return_value = None
        interaction = make_interaction()

        await cog.monthly_ranking.callback(cog, interaction, "1999-01")

        assert "1999-01" in sent_embed(interaction).description

    @pytest.mark.asyncio
    async def test_nothing_archived(self, cog, archive_service):
        archive_service.list_snapshot_keys.return_value = []
        interaction = make_interaction()

        await cog.monthly_ranking.callback(cog, interaction)

        archive_service.get_snapshot.assert_not_awaited()
        assert sent_embed(interaction).title.endswith("No Rankings Yet")

    @pytest.mark.asyncio
    async def test_store_failure_shows_user_message(self, cog, archive_service):
        archive_service.get_snapshot.side_effect = StoreError("get_document", "db path leaked")
        interaction = make_interaction()

        await cog.monthly_ranking.callback(cog, interaction, "2025-01")

        assert "db path leaked" not in sent_embed(interaction).description

    @pytest.mark.asyncio
    async def test_autocomplete_lists_archived_months(self, cog):
        choices = await cog.month_autocomplete(make_interaction(), "01")
        assert [choice.value for choice in choices] == ["2025-01"]

    @pytest.mark.asyncio
    async def test_autocomplete_store_failure(self, cog, archive_service):
        archive_service.list_snapshot_keys.side_effect = StoreError("list_document_keys", "boom")
        assert await cog.month_autocomplete(make_interaction(), "") == []


class TestNotificationViewTimeout:
    @pytest.mark.asyncio
    async def test_timeout_disables_buttons_on_the_message(self):
        view = NotificationResolutionView(AsyncMock(), owner_discord_id=1, admin_id="admin")
        view.interaction = make_interaction()

        await view.on_timeout()

        assert all(child.disabled for child in view.children)
        view.interaction.edit_original_response.assert_awaited_once_with(view=view)

    @pytest.mark.asyncio
    async def test_timeout_survives_deleted_message(self):
        view = NotificationResolutionView(AsyncMock(), owner_discord_id=1, admin_id="admin")
        view.interaction = make_interaction()
        view.interaction.edit_original_response.side_effect = discord.NotFound(
            MagicMock(status=404, reason="Not Found"), "Unknown Message"
        )

        await view.on_timeout()

        assert all(child.disabled for child in view.children)

    @pytest.mark.asyncio
    async def test_timeout_before_message_sent(self):
        view = NotificationResolutionView(AsyncMock(), owner_discord_id=1, admin_id="admin")

        await view.on_timeout()

        assert all(child.disabled for child in view.children)
