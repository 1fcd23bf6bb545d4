"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, AsyncIterator

import pytest

from src.core.models import GameHistoryEntry, LeaderboardEntry, UserModel
from src.core.shared_types import EDITABLE_PROFILE_FIELDS, GameResult, TimeControl
from src.db.database import Database, create_pool_engine
from src.db.schema import Base

POOL_MAX_SIZE = 2
POOL_CONNECT_TIMEOUT = 0.2


def sqlite_url(tmp_path: Path) -> str:
    """File based: an in-memory SQLite database cannot sit behind a queue pool."""
    return f"sqlite+aiosqlite:///{tmp_path / 'chess_platform.db'}"


@pytest.fixture
async def database(tmp_path: Path) -> AsyncIterator[Database]:
    """Small pool (2 connections, 0.2s wait) on a fresh SQLite database with all tables created."""
    engine = create_pool_engine(
        sqlite_url(tmp_path),
        max_size=POOL_MAX_SIZE,
        connect_timeout=POOL_CONNECT_TIMEOUT,
    )
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)

    db = Database(engine, checkout_timeout=30.0, connect_timeout=POOL_CONNECT_TIMEOUT)
    try:
        yield db
    finally:
        await db.dispose()


# --- MOCK REPOSITORIES ----
def make_history(user_id: str, count: int) -> list[GameHistoryEntry]:
    """`count` games, most recent first."""
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return [
        GameHistoryEntry(
            game_id=f"game-{i}",
            user_id=user_id,
            opponent=f"opponent-{i}",
            result=GameResult.WIN if i % 2 else GameResult.LOSS,
            time_control=TimeControl.BLITZ,
            rating_change=8 if i % 2 else -8,
            played_at=start + timedelta(minutes=count - i),
        )
        for i in range(count)
    ]


class MockUserRepository:
    """Mock the UserRepository using a dictionary of user models. Records every call."""

    def __init__(self) -> None:
        self._users: dict[str, UserModel] = {}
        self.calls: list[tuple[str, Any]] = []
        self.fail_with: Exception | None = None

    def add(self, user: UserModel) -> None:
        self._users[user.user_id] = user

    async def get_leaderboard(
        self, time_control: TimeControl, limit: int
    ) -> list[LeaderboardEntry]:
        self.calls.append(("get_leaderboard", (time_control, limit)))
        if self.fail_with:
            raise self.fail_with
        ranked = sorted(
            self._users.values(), key=lambda u: u.ratings.get(time_control, 0), reverse=True
        )
        return [
            LeaderboardEntry(
                rank=rank,
                user_id=user.user_id,
                username=user.username,
                rating=user.ratings.get(time_control, 0),
                games_played=user.games_played,
            )
            for rank, user in enumerate(ranked[:limit], start=1)
        ]

    async def find_by_user_id(
        self, user_id: str, include_extras: bool = False
    ) -> UserModel | None:
        self.calls.append(("find_by_user_id", (user_id, include_extras)))
        if self.fail_with:
            raise self.fail_with
        return self._users.get(user_id)

    async def update(self, user_id: str, patch: dict[str, Any]) -> UserModel | None:
        self.calls.append(("update", (user_id, patch)))
        if self.fail_with:
            raise self.fail_with
        user = self._users.get(user_id)
        if user is None:
            return None
        for key in EDITABLE_PROFILE_FIELDS:
            if key in patch:
                setattr(user, key, patch[key])
        return user

    def called(self, method: str) -> bool:
        return any(name == method for name, _ in self.calls)


class MockGameHistoryRepository:
    """Ignores `limit` on purpose, so callers have to enforce it themselves."""

    def __init__(self) -> None:
        self._history: dict[str, list[GameHistoryEntry]] = {}
        self.calls: list[tuple[str, int]] = []

    def add(self, user_id: str, entries: list[GameHistoryEntry]) -> None:
        self._history[user_id] = entries

    async def get_game_history(self, user_id: str, limit: int) -> list[GameHistoryEntry]:
        self.calls.append((user_id, limit))
        return list(self._history.get(user_id, []))


@pytest.fixture
def user_repository() -> MockUserRepository:
    repo = MockUserRepository()
    repo.add(
        UserModel(
            user_id="magnus",
            username="Magnus",
            email="magnus@example.com",
            country="NO",
            ratings={"bullet": 2900, "blitz": 2880, "rapid": 2850, "puzzles": 3000},
            games_played=1500,
        )
    )
    repo.add(
        UserModel(
            user_id="hikaru",
            username="Hikaru",
            ratings={"bullet": 2950, "blitz": 2860, "rapid": 2750, "puzzles": 3100},
            games_played=4000,
        )
    )
    return repo


@pytest.fixture
def history_repository() -> MockGameHistoryRepository:
    repo = MockGameHistoryRepository()
    repo.add("magnus", make_history("magnus", 120))
    repo.add("hikaru", make_history("hikaru", 3))
    return repo
