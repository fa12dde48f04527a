from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from contextlib import asynccontextmanager

from ladderbot.config import Config
from ladderbot.database.models import Base
from ladderbot.utils.logger import setup_logger

class Database:
    """Long-lived store handle: one engine and session factory per process."""

    def __init__(self, database_url: Optional[str] = None):
        self.logger = setup_logger(__name__)
        self.database_url = database_url
        self.engine = None
        self.async_session = None

    @staticmethod
    def async_url(database_url: str) -> str:
        """Point plain sqlite URLs at the aiosqlite driver."""
        if database_url.startswith('sqlite:///'):
            return database_url.replace('sqlite:///', 'sqlite+aiosqlite:///', 1)
        return database_url

    async def initialize(self):
        """Create the engine and session factory, then make sure the tables exist"""
        database_url = self.async_url(self.database_url or Config.DATABASE_URL)
        self.logger.info(f"Opening ladder store at {database_url.split('://', 1)[0]}://...")

        self.engine = create_async_engine(database_url, echo=Config.DEBUG)
        self.async_session = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        self.logger.info("Ladder store ready")

    @property
    def session_factory(self):
        return self.async_session

    @asynccontextmanager
    async def get_session(self):
        """Read-only session; nothing is committed"""
        async with self.async_session() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    @asynccontextmanager
    async def transaction(self):
        """
        Session whose statements commit together when the block exits.

        Any exception escaping the block rolls every statement back and is
        re-raised, so a batch is either fully written or not at all.

        Usage:
            async with db.transaction() as session:
                await session.execute(update(Player)...)
        """
        async with self.async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def close(self):
        """Dispose of the engine and its pooled connections"""
        if self.engine:
            await self.engine.dispose()
            self.logger.info("Ladder store closed")
