"""
Daily Settlement Service - rolls today's stats into lifetime stats

This service folds the today-scoped counters written during play into the
lifetime counters and recomputes every competitor's ranking points. It runs
as two sequential batches:

1. Roll-up: for each player with activity today, add today's counters to the
   lifetime counters (non-guests only), grant attendance for 3+ games, and
   zero every today-scoped field (guests included)
2. Scoring: re-read all non-guest players and overwrite rp from the
   post-roll-up lifetime counters

The second read depends on the first commit, so the phases never merge.
Re-running after a successful cycle is a no-op because today's counters are
already zero.
"""

import logging
from typing import List

from ladderbot.constants import SettlementConstants
from ladderbot.data_models.player import Increment, PlayerRecord, PlayerUpdate
from ladderbot.data_models.ranking import SettlementResult
from ladderbot.services.base import BaseService
from ladderbot.utils.ranking_points import RankingPointCalculator

logger = logging.getLogger(__name__)


def build_settlement_update(player: PlayerRecord) -> PlayerUpdate:
    """Build the roll-up and reset update for one player with activity today."""
    fields = {name: 0 for name in SettlementConstants.TODAY_COUNTER_FIELDS}
    fields[SettlementConstants.TODAY_GAMES_FIELD] = []

    if not player.is_guest and player.has_activity_today:
        fields['wins'] = Increment(player.today_wins)
        fields['losses'] = Increment(player.today_losses)
        fields['win_streak_count'] = Increment(player.today_win_streak_count)
        if RankingPointCalculator.earns_attendance(player.today_games):
            fields['attendance_count'] = Increment(1)

    return PlayerUpdate(player_id=player.id, fields=fields)


def build_score_update(player: PlayerRecord) -> PlayerUpdate:
    """Build the rp overwrite for one non-guest player."""
    return PlayerUpdate(
        player_id=player.id,
        fields={'rp': RankingPointCalculator.calculate_for_player(player)}
    )


class SettlementService(BaseService):
    """Service for the daily settlement cycle."""

    async def run_daily_settlement(self) -> SettlementResult:
        """
        Run one settlement cycle.

        Returns:
            SettlementResult with counts of settled and re-scored players

        Raises:
            StoreError: If a fetch or commit fails; the cycle is abandoned
        """
        logger.info("Starting daily settlement")

        players = await self.store.fetch_all_players()
        active_players = [player for player in players if player.has_activity_today]

        if not active_players:
            logger.info(f"No activity today among {len(players)} players, nothing to settle")
            return SettlementResult(
                message="No players with games today. Nothing to settle.",
                players_settled=0,
                players_scored=0
            )

        settled = await self._roll_up(active_players)
        scored = await self._recalculate_scores()

        logger.info(f"Daily settlement completed: {settled} players settled, {scored} players re-scored")
        return SettlementResult(
            message=f"Settled today's records for {settled} players and recalculated RP for {scored} players.",
            players_settled=settled,
            players_scored=scored
        )

    async def _roll_up(self, active_players: List[PlayerRecord]) -> int:
        updates = [build_settlement_update(player) for player in active_players]
        for player in active_players:
            logger.debug(
                f"Settling {player.id}: +{player.today_wins}W +{player.today_losses}L "
                f"+{player.today_win_streak_count} streaks (guest={player.is_guest})"
            )

        settled = await self.store.batch_update(updates)
        logger.info(f"Phase 1: rolled up and reset today's records for {settled} players")
        return settled

    async def _recalculate_scores(self) -> int:
        competitors = await self.store.fetch_players(is_guest=False)
        updates = [build_score_update(player) for player in competitors]

        scored = await self.store.batch_update(updates)
        logger.info(f"Phase 2: recalculated RP for {scored} players")
        return scored
