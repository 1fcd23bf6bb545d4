"""/users/{user_id} profile and game history routes. All of them need an authenticated caller."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends

from src.api.auth import CurrentUser, require_auth
from src.api.dependencies import PlayerServiceDep
from src.api.errors import error_response
from src.api.models import (
    ErrorResponse,
    GameHistoryResponse,
    UserProfileResponse,
    UserResponse,
    UserUpdateRequest,
)
from src.core.exceptions import ForbiddenError, InvalidRequestError, UserNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

ERROR_RESPONSES = {
    code: {"model": ErrorResponse} for code in (400, 401, 403, 404, 500)
}


@router.get(
    "/{user_id}",
    response_model=UserProfileResponse,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(require_auth)],
)
async def get_user(user_id: str, service: PlayerServiceDep):
    """Profile with the 50 most recent games embedded."""
    try:
        return await service.get_profile(user_id)
    except UserNotFoundError:
        return error_response(404, "User not found")
    except Exception:
        logger.exception("User fetch error")
        return error_response(500, "Server error with user fetching")


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    responses=ERROR_RESPONSES,
    openapi_extra={
        "requestBody": {
            "content": {
                "application/json": {
                    "schema": UserUpdateRequest.model_json_schema()
                }
            }
        }
    },
)
async def update_user(
    user_id: str,
    caller: CurrentUser,
    service: PlayerServiceDep,
    body: Annotated[Any, Body()] = None,
):
    # Raw body: a caller editing someone else's profile gets 403 whatever they sent
    try:
        return await service.update_profile(caller.user_id, user_id, body)
    except ForbiddenError:
        return error_response(403, "Forbidden")
    except InvalidRequestError as exc:
        return error_response(400, str(exc))
    except UserNotFoundError:
        return error_response(404, "User not found")
    except Exception:
        logger.exception("User update error")
        return error_response(500, "Update failed")


@router.get(
    "/{user_id}/games",
    response_model=list[GameHistoryResponse],
    responses=ERROR_RESPONSES,
)
async def get_user_games(user_id: str, caller: CurrentUser, service: PlayerServiceDep):
    """The caller's own 100 most recent games."""
    try:
        return await service.list_games(caller.user_id, user_id)
    except ForbiddenError:
        return error_response(403, "Forbidden")
    except Exception:
        logger.exception("Game history error")
        return error_response(500, "Server error")
