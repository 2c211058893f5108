"""Error Hierarchy — typed, categorized exceptions for every handled failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400/404) are raised before any engine call is made
    - to_response() produces the failure envelope: {"success": false, "error": message}
    - The failure envelope never carries a "data" key

Design Decisions:
    - Single hierarchy with LedgerBridgeError base: the dispatcher boundary catches all
    - Messages are part of the public contract (clients match on them), so each
      subclass builds its message from structured arguments
"""

from enum import Enum


class ErrorSeverity(str, Enum):
    """Error severity for observability."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for logging and status mapping."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"
    TIMEOUT = "timeout"


class LedgerBridgeError(Exception):
    """Base exception for all handled ledger bridge failures."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to the failure envelope."""
        return {"success": False, "error": self.message}


# ─── Client Errors (400/404) ────────────────────────────────────

class InvalidRequestError(LedgerBridgeError):
    """Missing, malformed or oversized request input."""
    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, 400,
        )
        self.field = field


class ResourceNotFoundError(LedgerBridgeError):
    """Referenced entity does not exist in the accounting engine."""
    def __init__(
        self, resource_type: str, resource_id: str,
        hint: str | None = None, message: str | None = None,
    ):
        message = message or f"{resource_type} not found: {resource_id}"
        if hint:
            message = f"{message}. {hint}"
        super().__init__(
            message, "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class EndpointNotFoundError(LedgerBridgeError):
    """No route matches the request method and path."""
    def __init__(self, method: str, path: str):
        super().__init__(
            f"Endpoint not found: {method} {path}",
            "ENDPOINT_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.INFO, 404,
        )


class ProvisioningError(LedgerBridgeError):
    """Auto-create of a missing account was rejected by the engine."""
    def __init__(self, account_kind: str, account_ref: str, detail: str | None = None):
        super().__init__(
            f"Failed to auto-create {account_kind}: {account_ref}",
            "PROVISIONING_FAILED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, 400,
        )
        self.account_ref = account_ref
        self.detail = detail


# ─── Engine Errors (5xx) ────────────────────────────────────────

class DownstreamError(LedgerBridgeError):
    """Accounting engine call reported failure."""
    def __init__(self, message: str, detail: str | None = None):
        super().__init__(
            message, "DOWNSTREAM_FAILURE", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, 500,
        )
        self.detail = detail


class EngineTimeoutError(LedgerBridgeError):
    """Accounting engine call exceeded the configured deadline."""
    def __init__(self, operation: str, timeout_seconds: float):
        super().__init__(
            f"Accounting engine call timed out: {operation}",
            "ENGINE_TIMEOUT", ErrorCategory.TIMEOUT,
            ErrorSeverity.CRITICAL, 504,
        )
        self.operation = operation
        self.timeout_seconds = timeout_seconds
