"""Bearer-token authentication. Routes that need a verified identity depend on `require_auth`."""

from dataclasses import dataclass
from typing import Annotated, Any, Optional

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.core.config import Settings
from src.core.exceptions import AuthenticationError

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthenticatedUser:
    user_id: str


def create_access_token(user_id: str, settings: Settings, **claims: Any) -> str:
    """Issue a token for `user_id` (used by the login flow and by tests)."""
    payload = {"userId": user_id, **claims}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> AuthenticatedUser:
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
    except jwt.PyJWTError as exc:
        raise AuthenticationError("Invalid token") from exc

    user_id = payload.get("userId") or payload.get("sub")
    if not user_id:
        raise AuthenticationError("Token carries no user identity")
    return AuthenticatedUser(user_id=str(user_id))


async def require_auth(
    request: Request,
    credentials: Annotated[
        Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)
    ],
) -> AuthenticatedUser:
    if credentials is None:
        raise AuthenticationError("Missing bearer token")
    return decode_access_token(credentials.credentials, request.app.state.settings)


CurrentUser = Annotated[AuthenticatedUser, Depends(require_auth)]
