"""
Batch Jobs Cog - Scheduled Settlement & Archive, Admin Commands

Runs the daily settlement and the monthly ranking archive on their schedule
and provides owner-only commands to run either workflow on demand and to
resolve the ranking notification.
"""

from typing import List, Optional

import discord
from discord import app_commands
from discord.ext import commands, tasks

from ladderbot.config import Config
from ladderbot.services.archive_service import ArchiveService
from ladderbot.services.batch_jobs import BatchJobRunner
from ladderbot.services.ranking_reset_service import RankingResetService
from ladderbot.utils.batch_exceptions import BatchException, NotificationNotFoundError
from ladderbot.utils.embeds import BatchEmbeds
from ladderbot.utils.logger import setup_logger
from ladderbot.utils.time_utils import is_archive_day, scheduled_time

logger = setup_logger(__name__)

DAILY_SETTLEMENT_AT = scheduled_time(Config.DAILY_SETTLEMENT_TIME, Config.SCHEDULE_TIMEZONE)
MONTHLY_ARCHIVE_AT = scheduled_time(Config.MONTHLY_ARCHIVE_TIME, Config.SCHEDULE_TIMEZONE)

# Discord caps autocomplete results
MAX_CHOICES = 25


def month_choices(keys: List[str], current: str) -> List[app_commands.Choice[str]]:
    """Build autocomplete choices for archived month keys matching current."""
    return [
        app_commands.Choice(name=key, value=key)
        for key in keys
        if current in key
    ][:MAX_CHOICES]


class BatchJobsCog(commands.Cog):
    """Scheduled batch workflows and their manual triggers"""

    def __init__(self, bot):
        self.bot = bot
        self.runner: BatchJobRunner = bot.batch_runner
        self.reset_service: RankingResetService = bot.reset_service
        self.archive_service: ArchiveService = bot.batch_runner.archive_service
        self.logger = logger

    @commands.Cog.listener()
    async def on_ready(self):
        """Start the schedules once the bot is ready"""
        if not self.daily_settlement.is_running():
            self.daily_settlement.start()
        if not self.monthly_archive.is_running():
            self.monthly_archive.start()
        self.logger.info(
            f"BatchJobsCog: settlement scheduled at {Config.DAILY_SETTLEMENT_TIME}, "
            f"archive on day {Config.MONTHLY_ARCHIVE_DAY} at {Config.MONTHLY_ARCHIVE_TIME} "
            f"({Config.SCHEDULE_TIMEZONE})"
        )

    def cog_unload(self):
        """Stop the schedules when the cog is unloaded"""
        self.daily_settlement.cancel()
        self.monthly_archive.cancel()
        self.logger.info("BatchJobsCog: schedules stopped")

    @tasks.loop(time=DAILY_SETTLEMENT_AT)
    async def daily_settlement(self):
        """Fold today's records into lifetime records and recalculate RP"""
        await self.runner.run_scheduled_settlement()

    @tasks.loop(time=MONTHLY_ARCHIVE_AT)
    async def monthly_archive(self):
        """Archive last month's ranking on the configured day of the month"""
        if not is_archive_day(Config.SCHEDULE_TIMEZONE, Config.MONTHLY_ARCHIVE_DAY):
            return
        await self.runner.run_scheduled_archive()

    @daily_settlement.before_loop
    @monthly_archive.before_loop
    async def before_schedules(self):
        """Wait for bot to be ready before starting the schedules"""
        await self.bot.wait_until_ready()

    # ============================================================================
    # Manual triggers
    # ============================================================================

    @app_commands.command(
        name="admin-test-settlement",
        description="Run the daily settlement now (Owner only)"
    )
    @app_commands.check(lambda interaction: interaction.user.id == Config.OWNER_DISCORD_ID)
    async def admin_test_settlement(self, interaction: discord.Interaction):
        """Slash command to run the daily settlement on demand"""
        await interaction.response.defer(ephemeral=True)
        try:
            response = await self.runner.run_test_settlement()
            await interaction.followup.send(
                embed=BatchEmbeds.run_succeeded("Settlement Complete", response["message"]),
                ephemeral=True
            )
        except BatchException as e:
            await interaction.followup.send(
                embed=BatchEmbeds.run_failed("Settlement Failed", e.user_message),
                ephemeral=True
            )

        self.logger.info(f"Manual settlement triggered by {interaction.user.id} ({interaction.user.name})")

    @app_commands.command(
        name="admin-test-archive",
        description="Archive last month's ranking under a TEST key now (Owner only)"
    )
    @app_commands.check(lambda interaction: interaction.user.id == Config.OWNER_DISCORD_ID)
    async def admin_test_archive(self, interaction: discord.Interaction):
        """Slash command to run the monthly archive on demand"""
        await interaction.response.defer(ephemeral=True)
        try:
            response = await self.runner.run_test_archive()
            await interaction.followup.send(
                embed=BatchEmbeds.run_succeeded("Archive Complete", response["message"]),
                ephemeral=True
            )
        except BatchException as e:
            await interaction.followup.send(
                embed=BatchEmbeds.run_failed("Archive Failed", e.user_message),
                ephemeral=True
            )

        self.logger.info(f"Manual archive triggered by {interaction.user.id} ({interaction.user.name})")

    @app_commands.command(
        name="admin-ranking-notification",
        description="Show the ranking notification and confirm or dismiss the season reset (Owner only)"
    )
    @app_commands.check(lambda interaction: interaction.user.id == Config.OWNER_DISCORD_ID)
    async def admin_ranking_notification(self, interaction: discord.Interaction):
        """Slash command to review the admin mailbox"""
        record = await self.reset_service.get_notification(Config.RANKING_ADMIN_ID)
        if record is None or not record.is_open:
            await interaction.response.send_message(embed=BatchEmbeds.no_notification(), ephemeral=True)
            return

        view = NotificationResolutionView(self.reset_service, interaction.user.id, Config.RANKING_ADMIN_ID)
        await interaction.response.send_message(
            embed=BatchEmbeds.notification(record),
            view=view,
            ephemeral=True
        )

        view.interaction = interaction

    # ============================================================================
    # Monthly ranking viewer
    # ============================================================================

    @app_commands.command(
        name="monthly-ranking",
        description="Show an archived monthly ranking"
    )
    @app_commands.describe(month="Archived month (YYYY-MM); defaults to the latest")
    async def monthly_ranking(self, interaction: discord.Interaction, month: Optional[str] = None):
        """Slash command to view a saved monthly ranking"""
        await interaction.response.defer()

        try:
            if month is None:
                keys = await self.archive_service.list_snapshot_keys()
                if not keys:
                    await interaction.followup.send(
                        embed=BatchEmbeds.run_failed("No Rankings Yet", "No monthly ranking has been archived yet.")
                    )
                    return
                month = keys[0]

            entries = await self.archive_service.get_snapshot(month)
        except BatchException as e:
            self.logger.error(f"Loading monthly ranking {month} failed: {e}", exc_info=True)
            await interaction.followup.send(embed=BatchEmbeds.run_failed("Ranking Unavailable", e.user_message))
            return

        if entries is None:
            await interaction.followup.send(
                embed=BatchEmbeds.run_failed("Ranking Not Found", f"There is no archived ranking for {month}.")
            )
            return

        await interaction.followup.send(embed=BatchEmbeds.monthly_ranking(month, entries))

    @monthly_ranking.autocomplete('month')
    async def month_autocomplete(
        self,
        interaction: discord.Interaction,
        current: str,
    ) -> List[app_commands.Choice[str]]:
        """Suggest archived months, newest first."""
        try:
            keys = await self.archive_service.list_snapshot_keys()
        except BatchException as e:
            self.logger.error(f"Error in month autocomplete: {e}")
            return []
        return month_choices(keys, current)


class NotificationResolutionView(discord.ui.View):
    """Confirm / dismiss buttons for the ranking notification"""

    def __init__(self, reset_service: RankingResetService, owner_discord_id: int, admin_id: str):
        super().__init__(timeout=120.0)
        self.reset_service = reset_service
        self.owner_discord_id = owner_discord_id
        self.admin_id = admin_id
        self.interaction: Optional[discord.Interaction] = None

    @discord.ui.button(label="Confirm", style=discord.ButtonStyle.danger, emoji="⚠️")
    async def confirm(self, interaction: discord.Interaction, button: discord.ui.Button):
        await self._resolve(interaction, confirm=True)

    @discord.ui.button(label="Dismiss", style=discord.ButtonStyle.secondary)
    async def dismiss(self, interaction: discord.Interaction, button: discord.ui.Button):
        await self._resolve(interaction, confirm=False)

    async def _resolve(self, interaction: discord.Interaction, confirm: bool):
        if interaction.user.id != self.owner_discord_id:
            await interaction.response.send_message("❌ Only the command author can resolve this notification.", ephemeral=True)
            return

        self.stop()
        try:
            result = await self.reset_service.resolve_notification(self.admin_id, confirm)
        except NotificationNotFoundError as e:
            await interaction.response.edit_message(embed=BatchEmbeds.run_failed("Nothing To Resolve", e.user_message), view=None)
            return
        except BatchException as e:
            logger.error(f"Resolving ranking notification failed: {e}", exc_info=True)
            await interaction.response.edit_message(embed=BatchEmbeds.run_failed("Reset Failed", e.user_message), view=None)
            return

        if result.reset_performed:
            message = f"Ranking data was reset for {result.players_reset} players."
        else:
            message = "Notification acknowledged. Ranking data was not changed."
        await interaction.response.edit_message(embed=BatchEmbeds.run_succeeded("Notification Resolved", message), view=None)

    async def on_timeout(self):
        """Handle timeout - disable buttons"""
        for child in self.children:
            child.disabled = True

        if self.interaction is None:
            return
        try:
            await self.interaction.edit_original_response(view=self)
        except discord.HTTPException as e:
            logger.warning(f"Could not disable ranking notification buttons: {e}")


async def setup(bot):
    await bot.add_cog(BatchJobsCog(bot))
