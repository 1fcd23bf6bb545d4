"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import ForeignKey, Index
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

DEFAULT_RATING = 1200


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBUser(Base):
    __tablename__ = "users"
    user_id: Mapped[str] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(unique=True)
    email: Mapped[Optional[str]]
    country: Mapped[Optional[str]]
    bio: Mapped[Optional[str]]
    rating_bullet: Mapped[int] = mapped_column(default=DEFAULT_RATING)
    rating_blitz: Mapped[int] = mapped_column(default=DEFAULT_RATING)
    rating_rapid: Mapped[int] = mapped_column(default=DEFAULT_RATING)
    rating_puzzles: Mapped[int] = mapped_column(default=DEFAULT_RATING)
    games_played: Mapped[int] = mapped_column(default=0)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)


class DBGameHistory(Base):
    __tablename__ = "game_history"
    __table_args__ = (Index("ix_game_history_user_played", "user_id", "played_at"),)
    game_id: Mapped[str] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.user_id"))
    opponent: Mapped[Optional[str]]
    result: Mapped[str]
    time_control: Mapped[str]
    rating_change: Mapped[int] = mapped_column(default=0)
    played_at: Mapped[datetime] = mapped_column(default=utc_now)


users_table = DBUser.__table__
game_history_table = DBGameHistory.__table__
