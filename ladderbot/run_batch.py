#!/usr/bin/env python3
"""
Standalone runner for the batch workflows.

Runs the daily settlement or the monthly archive once, without Discord,
through the same runner the bot schedules. Useful for cron and for re-running
a failed cycle by hand.

Usage:
    python -m ladderbot.run_batch settlement
    python -m ladderbot.run_batch archive --test
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from ladderbot.database.database import Database
from ladderbot.database.player_store import PlayerStore
from ladderbot.services import ArchiveService, BatchJobRunner, RunGuard, SettlementService
from ladderbot.utils.batch_exceptions import BatchException
from ladderbot.utils.logger import setup_logger

logger = setup_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a ladder batch workflow once")
    parser.add_argument('workflow', choices=['settlement', 'archive'])
    parser.add_argument(
        '--test',
        action='store_true',
        help="Manual run: report the result and exit non-zero on failure (archive writes a -TEST key)"
    )
    return parser.parse_args(argv)


async def run(workflow: str, test: bool) -> int:
    """Run one workflow and return the process exit code"""
    db = Database()
    await db.initialize()
    run_guard = await RunGuard.create()
    store = PlayerStore(db)
    runner = BatchJobRunner(SettlementService(store), ArchiveService(store), run_guard)

    try:
        if not test:
            if workflow == 'settlement':
                await runner.run_scheduled_settlement()
            else:
                await runner.run_scheduled_archive()
            return 0

        try:
            if workflow == 'settlement':
                response = await runner.run_test_settlement()
            else:
                response = await runner.run_test_archive()
        except BatchException as e:
            print(f"❌ {e.user_message}")
            return 1

        print(f"✅ {response['message']}")
        return 0
    finally:
        await run_guard.close()
        await db.close()


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logger('ladderbot')
    logger.info(f"Running {args.workflow} (test={args.test})")
    return asyncio.run(run(args.workflow, args.test))


if __name__ == "__main__":
    sys.exit(main())
