"""HTTP rendering & error handlers — tests for Outcome rendering and the app-level backstop.

Tests cover:
    - JSON outcomes carry CORS headers and the utf-8 JSON content type
    - 204 outcomes render with an empty body
    - HTTP errors raised outside the dispatcher use the failure envelope
"""

import json

import pytest
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from ledger_bridge.api.responses import render
from ledger_bridge.core.envelope import no_content, ok
from ledger_bridge.main import app


def _request(path: str) -> Request:
    return Request({
        "type": "http", "method": "GET", "path": path,
        "headers": [], "query_string": b"",
    })


def test_json_outcome_carries_cors_headers():
    resp = render(ok({"code": "T1"}), "https://books.example")
    assert isinstance(resp, JSONResponse)
    assert resp.headers["access-control-allow-origin"] == "https://books.example"
    assert resp.headers["content-type"] == "application/json; charset=utf-8"
    assert json.loads(resp.body) == {"success": True, "data": {"code": "T1"}}


def test_no_content_renders_empty_body():
    resp = render(no_content())
    assert resp.status_code == 204
    assert resp.body == b""
    assert resp.headers["access-control-allow-methods"] == "GET, POST, PATCH, DELETE, OPTIONS"


@pytest.mark.asyncio
async def test_http_error_uses_failure_envelope():
    handler = app.exception_handlers[StarletteHTTPException]
    resp = await handler(
        _request("/api/company"), StarletteHTTPException(status_code=400, detail="Bad request"),
    )
    assert resp.status_code == 400
    assert json.loads(resp.body) == {"success": False, "error": "Bad request"}
    assert "access-control-allow-origin" in resp.headers
