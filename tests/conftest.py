"""Shared fixtures: a real SQLite store per test and player seeding helpers."""

import pytest
import pytest_asyncio

from ladderbot.database.database import Database
from ladderbot.database.models import Player
from ladderbot.database.player_store import PlayerStore


@pytest_asyncio.fixture
async def db(tmp_path):
    database = Database(f"sqlite:///{tmp_path / 'ladder_test.db'}")
    await database.initialize()
    yield database
    await database.close()


@pytest.fixture
def store(db):
    return PlayerStore(db)


@pytest.fixture
def add_players(db):
    """Insert player rows; keyword dicts map straight onto Player columns."""

    async def _add(*players):
        async with db.transaction() as session:
            for data in players:
                session.add(Player(**data))

    return _add


@pytest.fixture
def get_player(db):
    """Load a raw Player row, bypassing the store's defaulting."""

    async def _get(player_id):
        async with db.get_session() as session:
            return await session.get(Player, player_id)

    return _get
