"""Ledger Queries — sales/purchase ledger search, aged balances, audit trail.

Unparsable "from"/"to" dates are ignored rather than rejected.
"""

from ledger_bridge.api.context import RequestContext, expect
from ledger_bridge.core.defaults import LEDGER_LIMIT
from ledger_bridge.core.envelope import Outcome, ok
from ledger_bridge.core.routing import Route


async def _search_ledger(ctx: RequestContext, operation: str, message: str) -> Outcome:
    result = await ctx.engine.call(
        operation,
        ctx.query_text("account"),
        ctx.query_date("from"),
        ctx.query_date("to"),
        ctx.query_limit(LEDGER_LIMIT),
    )
    return ok(expect(result, message))


async def search_sales_ledger(ctx: RequestContext) -> Outcome:
    return await _search_ledger(ctx, "search_sales_ledger", "Failed to search sales ledger")


async def search_purchase_ledger(ctx: RequestContext) -> Outcome:
    return await _search_ledger(
        ctx, "search_purchase_ledger", "Failed to search purchase ledger",
    )


async def aged_debtors(ctx: RequestContext) -> Outcome:
    result = await ctx.engine.call("get_aged_debtors", ctx.query_limit(LEDGER_LIMIT))
    return ok(expect(result, "Failed to get aged debtors"))


async def aged_creditors(ctx: RequestContext) -> Outcome:
    result = await ctx.engine.call("get_aged_creditors", ctx.query_limit(LEDGER_LIMIT))
    return ok(expect(result, "Failed to get aged creditors"))


async def list_transactions(ctx: RequestContext) -> Outcome:
    result = await ctx.engine.call(
        "get_transactions",
        ctx.query_text("type"),
        ctx.query_date("from"),
        ctx.query_date("to"),
        ctx.query_limit(LEDGER_LIMIT),
    )
    return ok(expect(result, "Failed to get transactions"))


ROUTES = [
    Route("GET", "/api/search/salesledger", search_sales_ledger, "Search sales ledger"),
    Route("GET", "/api/search/purchaseledger", search_purchase_ledger, "Search purchase ledger"),
    Route("GET", "/api/ageddebtors", aged_debtors, "Aged debtors"),
    Route("GET", "/api/agedcreditors", aged_creditors, "Aged creditors"),
    Route("GET", "/api/transactions", list_transactions, "List transactions"),
]
