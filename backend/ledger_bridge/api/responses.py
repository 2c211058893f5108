"""HTTP Rendering — Outcome -> FastAPI response with CORS headers.

Invariants:
    - Every response carries the CORS headers, whatever its status
    - JSON bodies are sent as application/json; charset=utf-8
    - 204 responses have an empty body
"""

from fastapi.responses import JSONResponse, Response

from ledger_bridge.core.envelope import Outcome

JSON_MEDIA_TYPE = "application/json; charset=utf-8"
ALLOWED_METHODS = "GET, POST, PATCH, DELETE, OPTIONS"
ALLOWED_HEADERS = "Content-Type"


def cors_headers(allow_origin: str = "*") -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Methods": ALLOWED_METHODS,
        "Access-Control-Allow-Headers": ALLOWED_HEADERS,
    }


def render(outcome: Outcome, allow_origin: str = "*") -> Response:
    headers = cors_headers(allow_origin)
    if outcome.body is None:
        return Response(status_code=outcome.status_code, headers=headers)
    return JSONResponse(
        content=outcome.body,
        status_code=outcome.status_code,
        headers=headers,
        media_type=JSON_MEDIA_TYPE,
    )
