"""
Batch Job Runner - scheduled and manual entry points for the batch workflows

Scheduled runs never raise: failures are logged, and a failed monthly
archive also leaves an error notification for the ranking administrator.
Manual (test) runs return {"success": True, "message": ...} and convert any
failure into a BatchInvocationError carrying a fixed message; the original
error is only logged. Both paths call the same service methods.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from ladderbot.services.run_guard import RunGuard
from ladderbot.utils.batch_exceptions import BatchInvocationError, WorkflowBusyError

logger = logging.getLogger(__name__)

SETTLEMENT_WORKFLOW = "daily_settlement"
ARCHIVE_WORKFLOW = "monthly_archive"


class BatchJobRunner:
    """Invocation shell shared by the Discord cog and the command line."""

    def __init__(self, settlement_service, archive_service, run_guard: Optional[RunGuard] = None):
        self.settlement_service = settlement_service
        self.archive_service = archive_service
        self.run_guard = run_guard or RunGuard()

    async def run_scheduled_settlement(self) -> None:
        """Scheduled trigger A: run settlement, log any failure."""
        try:
            async with self.run_guard.hold(SETTLEMENT_WORKFLOW) as acquired:
                if not acquired:
                    logger.warning("Skipping scheduled settlement: another run is in progress")
                    return None
                result = await self.settlement_service.run_daily_settlement()
            logger.info(f"Scheduled settlement finished: {result.message}")
        except Exception as e:
            logger.error(f"Error during scheduled daily settlement: {e}", exc_info=True)
        return None

    async def run_scheduled_archive(self) -> None:
        """Scheduled trigger B: run the archive, notify the admin on failure."""
        try:
            async with self.run_guard.hold(ARCHIVE_WORKFLOW) as acquired:
                if not acquired:
                    logger.warning("Skipping scheduled monthly archive: another run is in progress")
                    return None
                result = await self.archive_service.archive_monthly_ranking(is_test=False)
            logger.info(f"Scheduled monthly archive finished: {result.message}")
        except Exception as e:
            logger.error(f"Error during scheduled monthly archive: {e}", exc_info=True)
            await self._notify_archive_failure()
        return None

    async def _notify_archive_failure(self) -> None:
        try:
            await self.archive_service.notify_archive_failure()
        except Exception as e:
            logger.error(f"Failed to send archive failure notification: {e}", exc_info=True)

    async def run_test_settlement(self) -> Dict[str, Any]:
        """On-demand settlement run."""
        async with self._manual_run(SETTLEMENT_WORKFLOW):
            result = await self.settlement_service.run_daily_settlement()
        logger.info(f"Manual settlement finished: {result.message}")
        return {"success": True, "message": result.message}

    async def run_test_archive(self) -> Dict[str, Any]:
        """On-demand archive run; writes under the -TEST key."""
        async with self._manual_run(ARCHIVE_WORKFLOW):
            result = await self.archive_service.archive_monthly_ranking(is_test=True)
        logger.info(f"Manual archive finished: {result.message}")
        return {"success": True, "message": result.message}

    @asynccontextmanager
    async def _manual_run(self, workflow: str):
        """
        Hold the run lock around a manual run.

        Raises:
            WorkflowBusyError: If another run holds the lock
            BatchInvocationError: For any other failure, lock handling included
        """
        try:
            async with self.run_guard.hold(workflow) as acquired:
                if not acquired:
                    raise WorkflowBusyError(workflow)
                yield
        except WorkflowBusyError:
            raise
        except Exception as e:
            logger.error(f"Manual run of {workflow} failed: {e}", exc_info=True)
            raise BatchInvocationError(workflow) from e
