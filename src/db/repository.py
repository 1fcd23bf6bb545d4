"""Protocol repositories consumed by the PlayerService (implemented in sql_repository.py, faked in tests)."""

from typing import Any, Protocol

from src.core.models import GameHistoryEntry, LeaderboardEntry, UserModel
from src.core.shared_types import TimeControl


class UserRepository(Protocol):
    """Player profiles and rankings."""

    async def get_leaderboard(
        self, time_control: TimeControl, limit: int
    ) -> list[LeaderboardEntry]:
        """Top `limit` players for one time control, best rating first."""
        ...

    async def find_by_user_id(
        self, user_id: str, include_extras: bool = False
    ) -> UserModel | None:
        """Get user by ID, if record exists. `include_extras` adds the profile-only columns (email, bio...)."""
        ...

    async def update(self, user_id: str, patch: dict[str, Any]) -> UserModel | None:
        """Apply a partial update. None if the user does not exist."""
        ...


class GameHistoryRepository(Protocol):
    async def get_game_history(self, user_id: str, limit: int) -> list[GameHistoryEntry]:
        """Most recent games first, at most `limit` of them."""
        ...
