"""
Embeds for batch job commands.

Keeps the replies of the batch commands and the ranking viewer consistent.
"""

import discord
from datetime import datetime, timezone
from typing import Sequence

from ladderbot.constants import UIConstants
from ladderbot.data_models.ranking import NotificationRecord, SnapshotEntry
from ladderbot.database.models import NotificationStatus


class BatchEmbeds:
    """Embed factory for batch job results."""

    @staticmethod
    def run_succeeded(title: str, message: str) -> discord.Embed:
        """Create embed for a successful manual run."""
        return discord.Embed(
            title=f"✅ {title}",
            description=message,
            color=UIConstants.SUCCESS_COLOR,
            timestamp=datetime.now(timezone.utc)
        )

    @staticmethod
    def run_failed(title: str, user_message: str) -> discord.Embed:
        """Create embed for a failed manual run. Never includes the underlying error."""
        return discord.Embed(
            title=f"❌ {title}",
            description=user_message,
            color=UIConstants.ERROR_COLOR
        )

    @staticmethod
    def notification(record: NotificationRecord) -> discord.Embed:
        """Create embed showing the administrator's mailbox."""
        if record.status == NotificationStatus.ERROR:
            title = "⚠️ Ranking Save Error"
            color = UIConstants.ERROR_COLOR
        else:
            title = f"{UIConstants.TROPHY_EMOJI} Season Closed"
            color = UIConstants.WARNING_COLOR

        embed = discord.Embed(title=title, description=record.message, color=color)
        if record.created_at:
            embed.set_footer(text=f"Sent {record.created_at.strftime('%Y-%m-%d %H:%M')} UTC")
        return embed

    @staticmethod
    def no_notification() -> discord.Embed:
        """Create embed for an empty mailbox."""
        return discord.Embed(
            title="ℹ️ No Open Notification",
            description="There is no ranking notification waiting for you.",
            color=UIConstants.DEFAULT_EMBED_COLOR
        )

    @staticmethod
    def monthly_ranking(archive_key: str, entries: Sequence[SnapshotEntry], limit: int = 20) -> discord.Embed:
        """Create embed for an archived monthly ranking, top entries first."""
        embed = discord.Embed(
            title=f"{UIConstants.TROPHY_EMOJI} Monthly Ranking {archive_key}",
            color=UIConstants.DEFAULT_EMBED_COLOR
        )
        if not entries:
            embed.description = "No players were ranked this month."
            return embed

        lines = [
            f"**{entry.rank}.** {entry.name} - {entry.rp} RP "
            f"({entry.wins}W {entry.losses}L, {entry.attendance_count} days)"
            for entry in entries[:limit]
        ]
        embed.description = "\n".join(lines)
        if len(entries) > limit:
            embed.set_footer(text=f"Showing top {limit} of {len(entries)} players")
        return embed
