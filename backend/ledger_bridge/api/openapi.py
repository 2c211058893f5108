"""OpenAPI Document — OpenAPI 3 description generated from the Route Table.

Invariants:
    - One path item per route pattern, one operation per (pattern, method)
    - Captured segments become required path parameters
    - Every operation documents the shared envelope response

Design Decisions:
    - Derived from the live table so the document never drifts from the routes
    - Request bodies are described generically; field-level schemas are out of scope
"""

from typing import Any

from ledger_bridge.config import API_VERSION
from ledger_bridge.core.routing import RouteTable

_BODY_METHODS = {"POST", "PATCH", "PUT"}


def _operation_id(summary: str, method: str, pattern: str) -> str:
    words = summary.split() if summary else [method.lower(), *pattern.strip("/").split("/")]
    words = ["".join(ch for ch in w if ch.isalnum()) for w in words]
    words = [w for w in words if w]
    return words[0].lower() + "".join(w.capitalize() for w in words[1:])


def _tag(pattern: str) -> str:
    parts = pattern.strip("/").split("/")
    return parts[1].capitalize() if len(parts) > 1 else "General"


def _envelope_schema() -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "success": {"type": "boolean"},
            "data": {},
            "error": {"type": "string"},
        },
        "required": ["success"],
    }


def build_openapi(routes: RouteTable, server_url: str) -> dict[str, Any]:
    """Build the OpenAPI 3.0 document for every route in the table."""
    paths: dict[str, dict[str, Any]] = {}
    for route in routes:
        operation: dict[str, Any] = {
            "tags": [_tag(route.pattern)],
            "summary": route.summary,
            "operationId": _operation_id(route.summary, route.method, route.pattern),
            "responses": {
                "200": {
                    "description": "Success",
                    "content": {"application/json": {
                        "schema": {"$ref": "#/components/schemas/ApiResponse"},
                    }},
                },
                "default": {
                    "description": "Error envelope",
                    "content": {"application/json": {
                        "schema": {"$ref": "#/components/schemas/ApiResponse"},
                    }},
                },
            },
        }
        if route.param_names:
            operation["parameters"] = [
                {"name": name, "in": "path", "required": True, "schema": {"type": "string"}}
                for name in route.param_names
            ]
        if route.method in _BODY_METHODS:
            operation["requestBody"] = {
                "required": True,
                "content": {"application/json": {"schema": {"type": "object"}}},
            }
        paths.setdefault(route.pattern, {})[route.method.lower()] = operation

    return {
        "openapi": "3.0.0",
        "info": {
            "title": "Ledger Bridge API",
            "description": "JSON/HTTP surface over the accounting engine",
            "version": API_VERSION,
        },
        "servers": [{"url": server_url}],
        "paths": paths,
        "components": {"schemas": {"ApiResponse": _envelope_schema()}},
    }
