"""Nominal Codes — list, existence, creation."""

from ledger_bridge.api.context import RequestContext, expect, expect_posted
from ledger_bridge.core.decoding import require_all, require_text
from ledger_bridge.core.defaults import LEDGER_LIMIT
from ledger_bridge.core.envelope import Outcome, created, ok, transaction_result
from ledger_bridge.core.routing import Route
from ledger_bridge.schemas.requests import CreateNominalRequest


async def list_nominals(ctx: RequestContext) -> Outcome:
    result = await ctx.engine.call("get_nominal_codes", ctx.query_limit(LEDGER_LIMIT))
    return ok(expect(result, "Failed to list nominal codes"))


async def nominal_exists(ctx: RequestContext) -> Outcome:
    code = require_text(ctx.params["code"], "code").strip()
    exists = expect(
        await ctx.engine.call("nominal_exists", code), "Failed to check nominal code",
    )
    return ok({"exists": bool(exists), "accountRef": code})


async def create_nominal(ctx: RequestContext) -> Outcome:
    body = ctx.require(CreateNominalRequest)
    require_all("code and name are required", body.code, body.name)
    expect_posted(
        await ctx.engine.call("create_nominal", body.code, body.name),
        "Failed to create nominal code",
    )
    return created(transaction_result(body.code, "Nominal code created"))


ROUTES = [
    Route("GET", "/api/nominals", list_nominals, "List nominal codes"),
    Route("POST", "/api/nominals", create_nominal, "Create nominal code"),
    Route("GET", "/api/nominals/{code}/exists", nominal_exists, "Check nominal code exists"),
]
