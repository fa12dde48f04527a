"""
Services package for the ladder batch engine.

Settlement, archive and season reset workflows plus the invocation shell
that runs them on schedule or on demand.
"""

from .base import BaseService
from .settlement_service import SettlementService
from .archive_service import ArchiveService
from .ranking_reset_service import RankingResetService
from .run_guard import RunGuard
from .batch_jobs import BatchJobRunner

__all__ = [
    'BaseService',
    'SettlementService',
    'ArchiveService',
    'RankingResetService',
    'RunGuard',
    'BatchJobRunner',
]
