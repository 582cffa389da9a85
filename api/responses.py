# api/responses.py
# CodeMentor — Shared response envelope: CORS headers, preflight, error bodies.
# Imports from: utils/constants.py, utils/errors.py

from typing import Any, Awaitable, Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from utils.constants import CORS_ALLOW_HEADERS, CORS_ALLOW_ORIGIN
from utils.errors import CodeMentorError

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin":  CORS_ALLOW_ORIGIN,
    "Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS),
}


def preflight_response() -> Response:
    """200, empty body, CORS headers. Nothing about the request is inspected."""
    return Response(status_code=200, headers=CORS_HEADERS)


async def cors_middleware(
    request:   Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """
    Every OPTIONS request, browser preflight or not, gets preflight_response()
    without reaching a route. Everything else gets the CORS headers added.
    """
    if request.method == "OPTIONS":
        return preflight_response()
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


def error_body(message: str, code: str) -> dict[str, Any]:
    return {"error": message, "code": code}


def error_response(exc: CodeMentorError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.code),
        headers=CORS_HEADERS,
    )
