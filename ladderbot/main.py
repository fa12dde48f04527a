import asyncio
from typing import Optional

import discord
from discord.ext import commands
from discord import app_commands

from ladderbot.config import Config
from ladderbot.database.database import Database
from ladderbot.database.player_store import PlayerStore
from ladderbot.services import (
    ArchiveService, BatchJobRunner, RankingResetService, RunGuard, SettlementService
)
from ladderbot.utils.batch_exceptions import INTERNAL_ERROR_MESSAGE, BatchException
from ladderbot.utils.embeds import BatchEmbeds
from ladderbot.utils.logger import setup_logger

BATCH_JOBS_COG = 'ladderbot.cogs.batch_jobs'

class LadderBot(commands.Bot):
    def __init__(self):
        intents = discord.Intents.default()
        intents.guilds = True

        super().__init__(
            command_prefix=Config.COMMAND_PREFIX,
            intents=intents,
            help_command=None
        )

        # Attach app command error handler
        self.tree.on_error = self.on_app_command_error

        self.db: Optional[Database] = None
        self.store: Optional[PlayerStore] = None
        self.run_guard: Optional[RunGuard] = None
        self.batch_runner: Optional[BatchJobRunner] = None
        self.reset_service: Optional[RankingResetService] = None
        self.logger = setup_logger(__name__)

    async def setup_hook(self):
        """Called when the bot is starting up"""
        self.logger.info("Setting up Ladder Bot...")

        # One store handle shared by every workflow
        self.db = Database()
        await self.db.initialize()
        self.store = PlayerStore(self.db)

        self.run_guard = await RunGuard.create()
        self.batch_runner = BatchJobRunner(
            SettlementService(self.store),
            ArchiveService(self.store),
            self.run_guard
        )
        self.reset_service = RankingResetService(self.store)

        await self.load_cogs()
        await self._sync_commands()

        self.logger.info("Ladder Bot setup complete!")

    async def load_cogs(self):
        """Load the batch jobs cog; the bot is useless without it"""
        await self.load_extension(BATCH_JOBS_COG)
        self.logger.info(f"Loaded cog: {BATCH_JOBS_COG}")

    async def _sync_commands(self):
        """Sync the owner commands to the configured guilds, or globally"""
        guild_ids = Config.get_guild_ids()
        targets = [discord.Object(id=guild_id) for guild_id in guild_ids] or [None]

        for guild in targets:
            scope = f"guild {guild.id}" if guild else "global scope"
            try:
                if guild:
                    self.tree.copy_global_to(guild=guild)
                synced = await self.tree.sync(guild=guild)
                self.logger.info(f"Synced {len(synced)} command(s) to {scope}")
            except discord.errors.Forbidden:
                self.logger.error(f"Missing 'applications.commands' scope for {scope}", exc_info=True)
            except discord.errors.HTTPException as e:
                # Schedules keep running without slash commands
                self.logger.error(f"HTTP {e.status} syncing commands to {scope}: {e.text}", exc_info=True)

    async def on_ready(self):
        self.logger.info(f'{self.user} connected; batch schedules are armed')

    async def on_app_command_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError):
        """Reply to a failed slash command without leaking internals"""
        command_name = interaction.command.name if interaction.command else 'Unknown'
        cause = getattr(error, 'original', error)

        if isinstance(error, app_commands.CheckFailure):
            self.logger.info(f"Denied '{command_name}' for user {interaction.user}")
            embed = BatchEmbeds.run_failed("Owner Only", "This command is restricted to the bot owner.")
        elif isinstance(cause, BatchException):
            self.logger.error(f"'{command_name}' failed: {cause}", exc_info=cause)
            embed = BatchEmbeds.run_failed("Command Failed", cause.user_message)
        else:
            self.logger.error(f"Unexpected error in '{command_name}': {error}", exc_info=error)
            embed = BatchEmbeds.run_failed("Command Failed", INTERNAL_ERROR_MESSAGE)

        try:
            if interaction.response.is_done():
                await interaction.followup.send(embed=embed, ephemeral=True)
            else:
                await interaction.response.send_message(embed=embed, ephemeral=True)
        except discord.HTTPException as e:
            self.logger.error(f"Could not deliver error reply for '{command_name}': {e}")

    async def close(self):
        """Release the run lock client and the store before disconnecting"""
        self.logger.info("Shutting down Ladder Bot...")

        if self.run_guard:
            await self.run_guard.close()
        if self.db:
            await self.db.close()

        await super().close()

async def main():
    """Main entry point"""
    Config.validate()
    logger = setup_logger('ladderbot')

    bot = LadderBot()
    try:
        await bot.start(Config.DISCORD_TOKEN)
    except discord.LoginFailure:
        logger.error("Discord rejected DISCORD_TOKEN")
    finally:
        await bot.close()

if __name__ == "__main__":
    asyncio.run(main())
