"""
Boundary layer data model(s).

These objects are passed between the repositories, the Service and the API routers.
Hence the SQL rows (lower) and the JSON bodies (higher) never need to know about each other.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from src.core.shared_types import GameResult

# Type aliases to make the models easier to read
UserId = str
Rating = int


@dataclass
class GameHistoryEntry:
    """One finished game, seen from the point of view of `user_id`."""

    game_id: str
    user_id: UserId
    opponent: Optional[str]
    result: GameResult
    time_control: str
    rating_change: int
    played_at: datetime


@dataclass
class UserModel:
    """Transport-safe representation of a player profile."""

    user_id: UserId
    username: str
    email: Optional[str] = None
    country: Optional[str] = None
    bio: Optional[str] = None
    ratings: dict[str, Rating] = field(default_factory=dict)
    games_played: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    game_history: Optional[list[GameHistoryEntry]] = None


@dataclass
class LeaderboardEntry:
    rank: int
    user_id: UserId
    username: str
    rating: Rating
    games_played: int
