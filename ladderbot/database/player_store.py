"""
Player Store - read/query/batch-write access for the batch workflows

This module is the only place the settlement and archive workflows touch the
database. It exposes:
- fetch_all_players() / fetch_players(): full and guest-filtered scans
- batch_update(): field-level player updates committed as one transaction,
  with Increment fields evaluated by the database
- write_document() / get_document() / update_document(): keyed upserts and
  reads for the monthlyRankings and notifications collections

All SQLAlchemy failures surface as StoreError.
"""

from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import select, update, func
from sqlalchemy.exc import SQLAlchemyError

from ladderbot.constants import CollectionNames
from ladderbot.data_models.player import Increment, PlayerRecord, PlayerUpdate
from ladderbot.database.models import MonthlyRanking, Notification, Player
from ladderbot.utils.batch_exceptions import StoreError
from ladderbot.utils.logger import setup_logger

logger = setup_logger(__name__)

DOCUMENT_COLLECTIONS = {
    CollectionNames.MONTHLY_RANKINGS: MonthlyRanking,
    CollectionNames.NOTIFICATIONS: Notification,
}

# Columns managed by the store itself
_READ_ONLY_PLAYER_FIELDS = {'id', 'created_at', 'updated_at'}


class PlayerStore:
    """Store accessor injected into every batch service."""

    def __init__(self, database):
        """Initialize with a Database instance that is already initialized"""
        self.db = database
        self.logger = logger

    # ------------------------------------------------------------------
    # Player reads
    # ------------------------------------------------------------------

    async def fetch_all_players(self) -> List[PlayerRecord]:
        """Return every player, guests included."""
        return await self._fetch(select(Player).order_by(Player.id), 'fetch_all_players')

    async def fetch_players(self, is_guest: bool = False) -> List[PlayerRecord]:
        """Return players whose guest flag equals is_guest."""
        stmt = select(Player).where(Player.is_guest == is_guest).order_by(Player.id)
        return await self._fetch(stmt, 'fetch_players')

    async def _fetch(self, stmt, operation: str) -> List[PlayerRecord]:
        try:
            async with self.db.get_session() as session:
                result = await session.execute(stmt)
                players = result.scalars().all()
        except SQLAlchemyError as e:
            raise StoreError(operation, str(e)) from e

        self.logger.debug(f"{operation}: loaded {len(players)} players")
        return [self._to_record(player) for player in players]

    @staticmethod
    def _to_record(player: Player) -> PlayerRecord:
        return PlayerRecord(
            id=player.id,
            name=player.name,
            is_guest=bool(player.is_guest),
            wins=player.wins or 0,
            losses=player.losses or 0,
            win_streak_count=player.win_streak_count or 0,
            attendance_count=player.attendance_count or 0,
            today_wins=player.today_wins or 0,
            today_losses=player.today_losses or 0,
            today_win_streak=player.today_win_streak or 0,
            today_win_streak_count=player.today_win_streak_count or 0,
            today_recent_games=list(player.today_recent_games or []),
            rp=player.rp or 0,
        )

    # ------------------------------------------------------------------
    # Player batch writes
    # ------------------------------------------------------------------

    async def batch_update(self, updates: Sequence[PlayerUpdate]) -> int:
        """
        Apply all player updates atomically.

        Args:
            updates: One PlayerUpdate per player

        Returns:
            Number of players updated

        Raises:
            StoreError: If a field is unknown, a player does not exist or the
                commit fails. Nothing is written in that case.
        """
        if not updates:
            return 0

        statements = [self._build_update_statement(player_update) for player_update in updates]

        try:
            async with self.db.transaction() as session:
                for player_update, stmt in zip(updates, statements):
                    result = await session.execute(stmt)
                    if result.rowcount == 0:
                        raise StoreError('batch_update', f"player '{player_update.player_id}' not found")
        except SQLAlchemyError as e:
            raise StoreError('batch_update', str(e)) from e

        self.logger.debug(f"batch_update: committed {len(updates)} player updates")
        return len(updates)

    def _build_update_statement(self, player_update: PlayerUpdate):
        if not player_update.fields:
            raise StoreError('batch_update', f"empty update for player '{player_update.player_id}'")

        values = {}
        for field_name, value in player_update.fields.items():
            column = self._player_column(field_name)
            if isinstance(value, Increment):
                values[field_name] = func.coalesce(column, 0) + value.delta
            else:
                values[field_name] = value

        return (
            update(Player)
            .where(Player.id == player_update.player_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )

    @staticmethod
    def _player_column(field_name: str):
        if field_name in _READ_ONLY_PLAYER_FIELDS or field_name not in Player.__table__.columns:
            raise StoreError('batch_update', f"unknown or read-only player field '{field_name}'")
        return getattr(Player, field_name)

    # ------------------------------------------------------------------
    # Keyed documents
    # ------------------------------------------------------------------

    async def write_document(self, collection: str, key: str, value: Dict[str, Any]) -> None:
        """
        Upsert one document, replacing the previous one with the same key.

        created_at is assigned by the database clock.
        """
        model = self._document_model(collection)
        self._check_document_fields(model, collection, value)

        try:
            async with self.db.transaction() as session:
                document = await session.get(model, key)
                if document is None:
                    document = model(**{self._document_key_name(model): key})
                    session.add(document)
                for field_name, field_value in value.items():
                    setattr(document, field_name, field_value)
                document.created_at = func.now()
        except SQLAlchemyError as e:
            raise StoreError('write_document', str(e)) from e

        self.logger.debug(f"write_document: {collection}/{key}")

    async def get_document(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        """Return a document as a plain dict, or None when it does not exist."""
        model = self._document_model(collection)
        try:
            async with self.db.get_session() as session:
                document = await session.get(model, key)
                if document is None:
                    return None
                return {column.key: getattr(document, column.key) for column in model.__table__.columns}
        except SQLAlchemyError as e:
            raise StoreError('get_document', str(e)) from e

    async def update_document(self, collection: str, key: str, fields: Dict[str, Any]) -> None:
        """
        Update fields of an existing document without touching created_at.

        Raises:
            StoreError: If the document does not exist
        """
        model = self._document_model(collection)
        self._check_document_fields(model, collection, fields)

        try:
            async with self.db.transaction() as session:
                document = await session.get(model, key)
                if document is None:
                    raise StoreError('update_document', f"{collection}/{key} not found")
                for field_name, field_value in fields.items():
                    setattr(document, field_name, field_value)
        except SQLAlchemyError as e:
            raise StoreError('update_document', str(e)) from e

    async def list_document_keys(self, collection: str) -> List[str]:
        """Return all document keys in a collection, sorted descending."""
        model = self._document_model(collection)
        key_column = getattr(model, self._document_key_name(model))
        try:
            async with self.db.get_session() as session:
                result = await session.execute(select(key_column).order_by(key_column.desc()))
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise StoreError('list_document_keys', str(e)) from e

    @staticmethod
    def _document_model(collection: str):
        model = DOCUMENT_COLLECTIONS.get(collection)
        if model is None:
            raise StoreError('document access', f"unknown collection '{collection}'")
        return model

    @staticmethod
    def _document_key_name(model) -> str:
        return model.__table__.primary_key.columns.values()[0].key

    def _check_document_fields(self, model, collection: str, fields: Dict[str, Any]) -> None:
        key_name = self._document_key_name(model)
        for field_name in fields:
            if field_name in (key_name, 'created_at') or field_name not in model.__table__.columns:
                raise StoreError('document write', f"unknown or read-only field '{field_name}' in {collection}")
