from ladderbot.constants import RankingPointConstants, SettlementConstants

class RankingPointCalculator:
    """Handles ranking point (RP) calculations for the ladder"""

    @staticmethod
    def calculate_ranking_points(wins: int, losses: int, attendance_count: int,
                                 win_streak_count: int) -> int:
        """
        Calculate RP from lifetime counters

        Args:
            wins: Lifetime wins
            losses: Lifetime losses
            attendance_count: Days with enough games to count as attended
            win_streak_count: Cumulative number of win streaks

        Returns:
            Ranking points
        """
        return (
            (wins or 0) * RankingPointConstants.WIN +
            (losses or 0) * RankingPointConstants.LOSS +
            (attendance_count or 0) * RankingPointConstants.ATTENDANCE +
            (win_streak_count or 0) * RankingPointConstants.WIN_STREAK_BONUS
        )

    @staticmethod
    def calculate_for_player(player) -> int:
        """Calculate RP for a PlayerRecord from its lifetime counters"""
        return RankingPointCalculator.calculate_ranking_points(
            player.wins,
            player.losses,
            player.attendance_count,
            player.win_streak_count
        )

    @staticmethod
    def earns_attendance(games_played: int) -> bool:
        """Check whether today's games are enough for one attendance point"""
        return (games_played or 0) >= SettlementConstants.ATTENDANCE_MIN_GAMES
