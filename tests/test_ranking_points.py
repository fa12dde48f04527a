from ladderbot.constants import RankingPointConstants
from ladderbot.data_models.player import PlayerRecord
from ladderbot.utils.ranking_points import RankingPointCalculator


class TestRankingPointWeights:
    def test_default_weights(self):
        assert RankingPointConstants.WIN == 30
        assert RankingPointConstants.LOSS == 10
        assert RankingPointConstants.ATTENDANCE == 20
        assert RankingPointConstants.WIN_STREAK_BONUS == 20


class TestCalculateRankingPoints:
    def test_settled_scenario(self):
        assert RankingPointCalculator.calculate_ranking_points(7, 3, 5, 4) == 420

    def test_zero_record(self):
        assert RankingPointCalculator.calculate_ranking_points(0, 0, 0, 0) == 0

    def test_missing_counters_count_as_zero(self):
        assert RankingPointCalculator.calculate_ranking_points(None, 2, None, None) == 20

    def test_streak_bonus_applies_per_cumulative_streak(self):
        one = RankingPointCalculator.calculate_ranking_points(0, 0, 0, 1)
        five = RankingPointCalculator.calculate_ranking_points(0, 0, 0, 5)
        assert five == 5 * one == 100

    def test_calculate_for_player_uses_lifetime_counters_only(self):
        player = PlayerRecord(
            id="p1", name="Kim",
            wins=2, losses=1, attendance_count=1, win_streak_count=0,
            today_wins=9, today_losses=9, today_win_streak_count=9, rp=9999,
        )
        assert RankingPointCalculator.calculate_for_player(player) == 60 + 10 + 20


class TestEarnsAttendance:
    def test_three_games_earn_attendance(self):
        assert RankingPointCalculator.earns_attendance(3) is True

    def test_more_games_still_earn_attendance(self):
        assert RankingPointCalculator.earns_attendance(9) is True

    def test_two_games_do_not(self):
        assert RankingPointCalculator.earns_attendance(2) is False

    def test_missing_counters(self):
        assert RankingPointCalculator.earns_attendance(None) is False

    def test_today_games_counts_wins_and_losses(self):
        player = PlayerRecord(id="p1", name="Kim", today_wins=2, today_losses=1)
        assert player.today_games == 3
        assert RankingPointCalculator.earns_attendance(player.today_games) is True
