"""Implementation of the User / GameHistory repositories, running SQLAlchemy Core statements through the Database pool."""

from typing import Any

from sqlalchemy import select, update

from src.core.models import GameHistoryEntry, LeaderboardEntry, UserModel
from src.core.shared_types import EDITABLE_PROFILE_FIELDS, GameResult, TimeControl
from src.db.database import Database
from src.db.schema import game_history_table, users_table


def rating_column(time_control: TimeControl):
    return users_table.c[f"rating_{TimeControl(time_control).value}"]


class SQLUserRepository:
    """Player profiles stored in the `users` table."""

    def __init__(self, database: Database) -> None:
        self.db = database

    async def get_leaderboard(
        self, time_control: TimeControl, limit: int
    ) -> list[LeaderboardEntry]:
        rating = rating_column(time_control)
        query = (
            select(
                users_table.c.user_id,
                users_table.c.username,
                rating.label("rating"),
                users_table.c.games_played,
            )
            .order_by(rating.desc(), users_table.c.username)
            .limit(limit)
        )
        result = await self.db.query(query)
        return [
            LeaderboardEntry(rank=rank, **row)
            for rank, row in enumerate(result.rows, start=1)
        ]

    async def find_by_user_id(
        self, user_id: str, include_extras: bool = False
    ) -> UserModel | None:
        """Get user by ID, if record exists."""
        query = select(users_table).where(users_table.c.user_id == user_id)
        result = await self.db.query(query)
        if not result.rows:
            return None
        return self._to_model(result.rows[0], include_extras)

    async def update(self, user_id: str, patch: dict[str, Any]) -> UserModel | None:
        """Write the editable columns present in `patch`; anything else in it is ignored."""
        values = {key: patch[key] for key in EDITABLE_PROFILE_FIELDS if key in patch}
        if not values:
            return await self.find_by_user_id(user_id, include_extras=True)

        statement = (
            update(users_table)
            .where(users_table.c.user_id == user_id)
            .values(**values)
            .returning(*users_table.c)
        )
        result = await self.db.query(statement)
        if not result.rows:
            return None
        return self._to_model(result.rows[0], include_extras=True)

    def _to_model(self, row: dict[str, Any], include_extras: bool) -> UserModel:
        """Convert a `users` row to the data transfer model."""
        model = UserModel(
            user_id=row["user_id"],
            username=row["username"],
            ratings={tc.value: row[f"rating_{tc.value}"] for tc in TimeControl},
            games_played=row["games_played"],
        )
        if include_extras:
            model.email = row["email"]
            model.country = row["country"]
            model.bio = row["bio"]
            model.created_at = row["created_at"]
            model.updated_at = row["updated_at"]
        return model


class SQLGameHistoryRepository:
    def __init__(self, database: Database) -> None:
        self.db = database

    async def get_game_history(self, user_id: str, limit: int) -> list[GameHistoryEntry]:
        query = (
            select(game_history_table)
            .where(game_history_table.c.user_id == user_id)
            .order_by(game_history_table.c.played_at.desc())
            .limit(limit)
        )
        result = await self.db.query(query)
        return [
            GameHistoryEntry(**{**row, "result": GameResult(row["result"])})
            for row in result.rows
        ]
