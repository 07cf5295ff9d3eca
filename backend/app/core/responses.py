from collections.abc import Mapping
from typing import Any

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


def json_response(
    body: dict[str, Any],
    status_code: int,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    """JSON response carrying the reservation route's CORS headers."""
    return JSONResponse(content=body, status_code=status_code, headers={**CORS_HEADERS, **(headers or {})})


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Keep Starlette's headers, e.g. Allow on 405.
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return json_response({"error": "Method not allowed"}, exc.status_code, exc.headers)
    return json_response({"error": str(exc.detail)}, exc.status_code, exc.headers)
