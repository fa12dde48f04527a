import os
from dotenv import load_dotenv

from ladderbot.utils.time_utils import has_fixed_offset

load_dotenv()

class Config:
    """Ladder batch engine configuration settings"""

    # Discord settings
    DISCORD_TOKEN = os.getenv('DISCORD_TOKEN')
    DISCORD_GUILD_ID = int(os.getenv('DISCORD_GUILD_ID', 0))
    DISCORD_GUILD_IDS = os.getenv('DISCORD_GUILD_IDS', '')  # Comma-separated for multi-guild support
    OWNER_DISCORD_ID = int(os.getenv('OWNER_DISCORD_ID', 0))

    # Database settings
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///ladder.db')

    # Bot settings
    COMMAND_PREFIX = os.getenv('COMMAND_PREFIX', '!')
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'

    # Notification mailbox owner (key of the notifications row)
    RANKING_ADMIN_ID = os.getenv('RANKING_ADMIN_ID', 'admin')

    # Schedule settings
    SCHEDULE_TIMEZONE = os.getenv('SCHEDULE_TIMEZONE', 'Asia/Seoul')
    DAILY_SETTLEMENT_TIME = os.getenv('DAILY_SETTLEMENT_TIME', '22:10')
    MONTHLY_ARCHIVE_DAY = int(os.getenv('MONTHLY_ARCHIVE_DAY', 1))
    MONTHLY_ARCHIVE_TIME = os.getenv('MONTHLY_ARCHIVE_TIME', '00:05')

    # Archive keys are computed against a fixed civil offset, not the host zone
    ARCHIVE_UTC_OFFSET_HOURS = int(os.getenv('ARCHIVE_UTC_OFFSET_HOURS', 9))

    # Daily audit log directory; empty disables file logging
    LOG_DIR = os.getenv('LOG_DIR', 'logs')

    # Optional run lock
    REDIS_URL = os.getenv('REDIS_URL')
    RUN_LOCK_TTL_SECONDS = int(os.getenv('RUN_LOCK_TTL_SECONDS', 900))

    @classmethod
    def get_guild_ids(cls):
        """Get list of guild IDs for command syncing"""
        if cls.DISCORD_GUILD_IDS:
            try:
                return [int(guild_id.strip()) for guild_id in cls.DISCORD_GUILD_IDS.split(',') if guild_id.strip()]
            except ValueError:
                raise ValueError("DISCORD_GUILD_IDS must be comma-separated integers")
        elif cls.DISCORD_GUILD_ID:
            return [cls.DISCORD_GUILD_ID]
        else:
            # Global sync
            return []

    @classmethod
    def validate(cls):
        """Validate that the configuration required to run the bot is present"""
        if not cls.DISCORD_TOKEN:
            raise ValueError("DISCORD_TOKEN is required")
        if not cls.OWNER_DISCORD_ID:
            raise ValueError("OWNER_DISCORD_ID is required")
        if not 1 <= cls.MONTHLY_ARCHIVE_DAY <= 28:
            raise ValueError("MONTHLY_ARCHIVE_DAY must be between 1 and 28")
        if not -12 <= cls.ARCHIVE_UTC_OFFSET_HOURS <= 14:
            raise ValueError("ARCHIVE_UTC_OFFSET_HOURS must be a valid UTC offset")
        if not has_fixed_offset(cls.SCHEDULE_TIMEZONE):
            raise ValueError("SCHEDULE_TIMEZONE must not observe daylight saving time")
