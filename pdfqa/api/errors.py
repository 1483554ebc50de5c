"""JSON error envelope shared by all endpoints: {"error": "..."}."""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

QUESTION_REQUIRED = "question is required"


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def exception_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def server_error(exc: BaseException) -> JSONResponse:
    return error_response(exception_message(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Replace FastAPI's 422 detail list with a 400 {"error"} body."""
    errors = exc.errors()
    if any("question" in map(str, err.get("loc", ())) for err in errors):
        message = QUESTION_REQUIRED
    elif errors:
        message = f"invalid request body: {errors[0].get('msg', 'validation error')}"
    else:
        message = "invalid request body"
    return error_response(message, status.HTTP_400_BAD_REQUEST)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(str(exc.detail), exc.status_code)
