"""Orchestration of communication from API routers to the user / game-history repositories (and the reverse direction)."""

from typing import Any

from pydantic import ValidationError

from src.api.errors import validation_message
from src.api.models import (
    GameHistoryResponse,
    LeaderboardEntryResponse,
    UserProfileResponse,
    UserResponse,
    UserUpdateRequest,
)
from src.core.exceptions import (
    ForbiddenError,
    InvalidRequestError,
    InvalidTimeControlError,
    UserNotFoundError,
)
from src.core.shared_types import TimeControl
from src.db.repository import GameHistoryRepository, UserRepository

PROFILE_HISTORY_LIMIT = 50
GAMES_LIST_LIMIT = 100


class PlayerService:
    """Leaderboards and player profiles."""

    def __init__(
        self, users: UserRepository, game_history: GameHistoryRepository
    ) -> None:
        self.users = users
        self.game_history = game_history

    # -- API routes logic ---
    async def leaderboard(
        self, time_control: str, limit: int
    ) -> list[LeaderboardEntryResponse]:
        """Ranked standings for one time control. The category is checked before any database work."""
        category = self._parse_time_control(time_control)
        entries = await self.users.get_leaderboard(category, limit)
        return [LeaderboardEntryResponse.model_validate(entry) for entry in entries]

    async def get_profile(self, user_id: str) -> UserProfileResponse:
        """Profile plus the most recent games."""
        user = await self.users.find_by_user_id(user_id, include_extras=True)
        if user is None:
            raise UserNotFoundError(f"User with {user_id=} not found.")

        history = await self.game_history.get_game_history(
            user_id, PROFILE_HISTORY_LIMIT
        )
        user.game_history = history[:PROFILE_HISTORY_LIMIT]
        return UserProfileResponse.model_validate(user)

    async def update_profile(
        self, caller_id: str, user_id: str, changes: Any
    ) -> UserResponse:
        """
        Players can only edit their own profile.
        `changes` is the raw request body: it is only validated once the caller is known to own the profile.
        """
        self._check_same_player(caller_id, user_id)

        request = self._parse_update(changes)
        patch: dict[str, Any] = request.model_dump(exclude_unset=True)
        user = await self.users.update(user_id, patch)
        if user is None:
            raise UserNotFoundError(f"User with {user_id=} not found.")
        return UserResponse.model_validate(user)

    async def list_games(self, caller_id: str, user_id: str) -> list[GameHistoryResponse]:
        self._check_same_player(caller_id, user_id)
        entries = await self.game_history.get_game_history(user_id, GAMES_LIST_LIMIT)
        return [
            GameHistoryResponse.model_validate(entry)
            for entry in entries[:GAMES_LIST_LIMIT]
        ]

    # -- Internal helpers --
    def _parse_update(self, changes: Any) -> UserUpdateRequest:
        try:
            return UserUpdateRequest.model_validate(changes if changes is not None else {})
        except ValidationError as exc:
            raise InvalidRequestError(validation_message(exc.errors())) from None

    def _parse_time_control(self, value: str) -> TimeControl:
        try:
            return TimeControl(value)
        except ValueError:
            raise InvalidTimeControlError("Invalid timeControl") from None

    def _check_same_player(self, caller_id: str, user_id: str) -> None:
        if caller_id != user_id:
            raise ForbiddenError("Forbidden")

