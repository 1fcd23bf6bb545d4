"""FastAPI dependencies handing out the process-scoped handles built at startup (see src/main.py)."""

from typing import Annotated

from fastapi import Depends, Request

from src.db.database import Database
from src.services.player_service import PlayerService


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_player_service(request: Request) -> PlayerService:
    return request.app.state.player_service


PlayerServiceDep = Annotated[PlayerService, Depends(get_player_service)]
DatabaseDep = Annotated[Database, Depends(get_database)]
