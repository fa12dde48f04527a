"""
Engine-wide constants for the ladder batch engine.

This module contains the scoring weights, thresholds and collection names used
by the settlement and archive workflows.
"""

class RankingPointConstants:
    """Weights of the ranking point (RP) formula."""

    WIN = 30
    LOSS = 10
    ATTENDANCE = 20
    # Applied per unit of the cumulative win_streak_count, every cycle
    WIN_STREAK_BONUS = 20

class SettlementConstants:
    """Constants for the daily roll-up."""

    # Games played today needed to earn one attendance point
    ATTENDANCE_MIN_GAMES = 3

    # Today-scoped fields zeroed by every settlement
    TODAY_COUNTER_FIELDS = (
        'today_wins',
        'today_losses',
        'today_win_streak',
        'today_win_streak_count',
    )
    TODAY_GAMES_FIELD = 'today_recent_games'

class CollectionNames:
    """Document collections written by the batch workflows."""

    MONTHLY_RANKINGS = 'monthlyRankings'
    NOTIFICATIONS = 'notifications'

class ArchiveConstants:
    """Constants for monthly archive keys."""

    KEY_FORMAT = '{year:04d}-{month:02d}'
    TEST_SUFFIX = '-TEST'

class UIConstants:
    """Constants for Discord UI elements."""

    DEFAULT_EMBED_COLOR = 0x3498db  # Blue
    ERROR_COLOR = 0xe74c3c          # Red
    SUCCESS_COLOR = 0x2ecc71        # Green
    WARNING_COLOR = 0xf39c12        # Orange

    TROPHY_EMOJI = "🏆"
