"""Company, System & Reference Data — read-only lookups plus the API document."""

from datetime import datetime, timezone
from pathlib import Path

from ledger_bridge.api.context import RequestContext, expect
from ledger_bridge.api.openapi import build_openapi
from ledger_bridge.config import API_VERSION
from ledger_bridge.core.defaults import CHART_OF_ACCOUNTS_LIMIT
from ledger_bridge.core.envelope import Outcome, ok
from ledger_bridge.core.errors import DownstreamError
from ledger_bridge.core.routing import Route

BUILD_DATE = datetime.fromtimestamp(Path(__file__).stat().st_mtime).strftime("%Y-%m-%d")


async def _required_lookup(ctx: RequestContext, operation: str, message: str) -> Outcome:
    value = expect(await ctx.engine.call(operation), message)
    if value is None:
        raise DownstreamError(message)
    return ok(value)


async def _listing(ctx: RequestContext, operation: str, message: str) -> Outcome:
    return ok(expect(await ctx.engine.call(operation), message))


# ─── Company & System ────────────────────────────────────────────

async def get_company(ctx: RequestContext) -> Outcome:
    return await _required_lookup(ctx, "get_company_info", "Failed to get company info")


async def get_status(ctx: RequestContext) -> Outcome:
    connected = await ctx.engine.call("is_connected")
    return ok({
        "status": "ok",
        "connected": bool(connected.ok and connected.value),
        "timestamp": datetime.now(timezone.utc),
        "version": API_VERSION,
    })


async def get_version(ctx: RequestContext) -> Outcome:
    engine_version = await ctx.engine.call("engine_version")
    return ok({
        "apiVersion": API_VERSION,
        "engineVersion": engine_version.value if engine_version.ok else "unknown",
        "buildDate": BUILD_DATE,
    })


async def get_setup(ctx: RequestContext) -> Outcome:
    return await _required_lookup(ctx, "get_setup", "Failed to get setup information")


async def get_financial_year(ctx: RequestContext) -> Outcome:
    return await _required_lookup(
        ctx, "get_financial_year", "Failed to get financial year information",
    )


# ─── Financial Setup ─────────────────────────────────────────────

async def get_tax_codes(ctx: RequestContext) -> Outcome:
    return await _listing(ctx, "get_tax_codes", "Failed to get tax codes")


async def get_currencies(ctx: RequestContext) -> Outcome:
    return await _listing(ctx, "get_currencies", "Failed to get currencies")


async def get_departments(ctx: RequestContext) -> Outcome:
    return await _listing(ctx, "get_departments", "Failed to get departments")


async def get_banks(ctx: RequestContext) -> Outcome:
    return await _listing(ctx, "get_banks", "Failed to get bank accounts")


async def get_payment_methods(ctx: RequestContext) -> Outcome:
    return await _listing(ctx, "get_payment_methods", "Failed to get payment methods")


async def get_chart_of_accounts(ctx: RequestContext) -> Outcome:
    result = await ctx.engine.call(
        "get_chart_of_accounts",
        ctx.query_text("type"),
        ctx.query_limit(CHART_OF_ACCOUNTS_LIMIT),
    )
    return ok(expect(result, "Failed to get chart of accounts"))


async def get_swagger(ctx: RequestContext) -> Outcome:
    return ok(build_openapi(ctx.routes, f"http://localhost:{ctx.settings.port}"))


ROUTES = [
    Route("GET", "/api/swagger.json", get_swagger, "OpenAPI document"),
    Route("GET", "/api/company", get_company, "Get company information"),
    Route("GET", "/api/status", get_status, "Service status"),
    Route("GET", "/api/version", get_version, "Version information"),
    Route("GET", "/api/setup", get_setup, "Company setup"),
    Route("GET", "/api/financialyear", get_financial_year, "Financial year"),
    Route("GET", "/api/taxcodes", get_tax_codes, "List tax codes"),
    Route("GET", "/api/currencies", get_currencies, "List currencies"),
    Route("GET", "/api/departments", get_departments, "List departments"),
    Route("GET", "/api/banks", get_banks, "List bank accounts"),
    Route("GET", "/api/paymentmethods", get_payment_methods, "List payment methods"),
    Route("GET", "/api/coa", get_chart_of_accounts, "Chart of accounts"),
]
