"""Error bodies and the app-wide handlers for exceptions raised outside the route functions (auth, body validation)."""

from typing import Any, Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.core.exceptions import AuthenticationError, InvalidRequestError


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def validation_message(errors: Sequence[Any]) -> str:
    """One line out of pydantic's error list, e.g. 'Invalid query.limit: Input should be ...'."""
    if not errors:
        return "Invalid request"
    error = errors[0]
    location = ".".join(str(part) for part in error.get("loc", ())) or "body"
    return f"Invalid {location}: {error.get('msg', 'invalid value')}"


async def _authentication_error(request: Request, exc: Exception) -> JSONResponse:
    return error_response(401, "Unauthorized")


async def _invalid_request(request: Request, exc: Exception) -> JSONResponse:
    return error_response(400, str(exc))


async def _request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return error_response(400, validation_message(exc.errors()))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AuthenticationError, _authentication_error)
    app.add_exception_handler(InvalidRequestError, _invalid_request)
    app.add_exception_handler(RequestValidationError, _request_validation_error)
