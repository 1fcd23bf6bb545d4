"""
Type definitions used across layers
"""

from enum import StrEnum


class TimeControl(StrEnum):
    """Game-pacing categories. Each one is a separate leaderboard."""

    BULLET = "bullet"
    BLITZ = "blitz"
    RAPID = "rapid"
    PUZZLES = "puzzles"


class GameResult(StrEnum):
    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"


# --- Columns of the users table a player is allowed to change through PUT /users/{id}
EDITABLE_PROFILE_FIELDS = ("username", "email", "country", "bio")
