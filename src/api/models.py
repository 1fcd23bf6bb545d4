"""Requests and Response models"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import GameResult

MAX_USERNAME_LENGTH = 32
MAX_BIO_LENGTH = 500


class CamelModel(BaseModel):
    """JSON bodies use camelCase keys (userId, gameHistory...), Python code uses snake_case."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


# --- REQUEST MODELS ---
class UserUpdateRequest(CamelModel):
    """Partial profile update. Only the fields sent by the client are written."""

    username: Optional[str] = None
    email: Optional[str] = None
    country: Optional[str] = None
    bio: Optional[str] = None

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: Optional[str]) -> str:
        # Only runs for a username that was actually sent; the column is NOT NULL
        if value is None:
            raise InvalidRequestError("Username cannot be null.")

        value = value.strip()
        if not value or len(value) > MAX_USERNAME_LENGTH:
            raise InvalidRequestError(
                f"Username must be between 1 and {MAX_USERNAME_LENGTH} characters."
            )
        return value

    @field_validator("bio")
    @classmethod
    def validate_bio(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and len(value) > MAX_BIO_LENGTH:
            raise InvalidRequestError(f"Bio cannot exceed {MAX_BIO_LENGTH} characters.")
        return value


# --- RESPONSE MODELS ---
class LeaderboardEntryResponse(CamelModel):
    rank: int
    user_id: str
    username: str
    rating: int
    games_played: int


class GameHistoryResponse(CamelModel):
    game_id: str
    opponent: Optional[str]
    result: GameResult
    time_control: str
    rating_change: int
    played_at: datetime


class UserResponse(CamelModel):
    user_id: str
    username: str
    email: Optional[str] = None
    country: Optional[str] = None
    bio: Optional[str] = None
    ratings: dict[str, int]
    games_played: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserProfileResponse(UserResponse):
    game_history: list[GameHistoryResponse]


class ErrorResponse(BaseModel):
    error: str
