"""GET /leaderboard"""

import logging
from typing import Annotated

from fastapi import APIRouter, Query

from src.api.dependencies import PlayerServiceDep
from src.api.errors import error_response
from src.api.models import ErrorResponse, LeaderboardEntryResponse
from src.core.exceptions import InvalidTimeControlError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@router.get(
    "",
    response_model=list[LeaderboardEntryResponse],
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_leaderboard(
    service: PlayerServiceDep,
    limit: Annotated[int, Query(ge=1)] = 10,
    time_control: Annotated[str, Query(alias="timeControl")] = "blitz",
):
    try:
        return await service.leaderboard(time_control, limit)
    except InvalidTimeControlError as exc:
        return error_response(400, str(exc))
    except Exception:
        logger.exception("Leaderboard error")
        return error_response(500, "Server error")
