from sqlalchemy import (
    Column, Integer, String, DateTime, Boolean, Text, JSON, Enum as SQLEnum
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func
from enum import Enum

Base = declarative_base()

class NotificationStatus(Enum):
    PENDING = "pending"
    ERROR = "error"
    ACKNOWLEDGED = "acknowledged"

class Player(Base):
    __tablename__ = 'players'

    id = Column(String(100), primary_key=True)
    name = Column(String(100), nullable=False)
    is_guest = Column(Boolean, default=False, nullable=False)

    # Lifetime counters (NULL reads as 0)
    wins = Column(Integer, default=0)
    losses = Column(Integer, default=0)
    win_streak_count = Column(Integer, default=0)
    attendance_count = Column(Integer, default=0)

    # Today-scoped counters, written by the game recorder and zeroed by settlement
    today_wins = Column(Integer, default=0)
    today_losses = Column(Integer, default=0)
    today_win_streak = Column(Integer, default=0)
    today_win_streak_count = Column(Integer, default=0)
    today_recent_games = Column(JSON, default=list)

    # Ranking points, overwritten every settlement cycle
    rp = Column(Integer, default=0)

    # Metadata
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Player(id='{self.id}', name='{self.name}', rp={self.rp}, guest={self.is_guest})>"

class MonthlyRanking(Base):
    __tablename__ = 'monthly_rankings'

    # "YYYY-MM" or "YYYY-MM-TEST"
    key = Column(String(20), primary_key=True)
    ranking = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=func.now())

    def __repr__(self):
        return f"<MonthlyRanking(key='{self.key}', entries={len(self.ranking or [])})>"

class Notification(Base):
    __tablename__ = 'notifications'

    # One row per administrator: a single-slot mailbox
    admin_id = Column(String(100), primary_key=True)
    message = Column(Text, nullable=False)
    status = Column(SQLEnum(NotificationStatus), nullable=False, default=NotificationStatus.PENDING)
    created_at = Column(DateTime, default=func.now())

    def __repr__(self):
        return f"<Notification(admin_id='{self.admin_id}', status={self.status.value if self.status else None})>"
