"""Products & Stock — catalogue lookup/creation, stock levels and adjustments."""

from ledger_bridge.api.context import RequestContext, expect, expect_posted
from ledger_bridge.core.decoding import require_text
from ledger_bridge.core.defaults import LIST_LIMIT, defaults_for
from ledger_bridge.core.domain_types import PostingKind
from ledger_bridge.core.envelope import Outcome, created, ok, transaction_result
from ledger_bridge.core.errors import DownstreamError, ResourceNotFoundError
from ledger_bridge.core.routing import Route
from ledger_bridge.schemas.requests import CreateProductRequest, StockAdjustmentRequest


async def list_products(ctx: RequestContext) -> Outcome:
    result = await ctx.engine.call(
        "get_products", ctx.query_text("search"), ctx.query_limit(LIST_LIMIT),
    )
    return ok(expect(result, "Failed to list products"))


async def get_product(ctx: RequestContext) -> Outcome:
    stock_code = ctx.params["stockCode"]
    product = expect(
        await ctx.engine.call("get_product", stock_code), "Failed to get product",
    )
    if product is None:
        raise ResourceNotFoundError("Product", stock_code)
    return ok(product)


async def create_product(ctx: RequestContext) -> Outcome:
    body = ctx.require(CreateProductRequest)
    require_text(body.stock_code, "stockCode")
    product = expect(
        await ctx.engine.call("create_product", body), "Failed to create product",
    )
    if product is None:
        raise DownstreamError("Failed to create product")
    return created(product)


async def get_stock_level(ctx: RequestContext) -> Outcome:
    stock_code = ctx.params["stockCode"]
    level = expect(
        await ctx.engine.call("get_stock_level", stock_code), "Failed to get stock level",
    )
    if level is None:
        raise ResourceNotFoundError("Stock", stock_code)
    return ok(level)


async def post_stock_adjustment(ctx: RequestContext) -> Outcome:
    body = ctx.require(StockAdjustmentRequest)
    stock_code = require_text(body.stock_code, "stockCode")
    defaults = defaults_for(PostingKind.STOCK_ADJUSTMENT)
    reference = ctx.references.resolve(body.reference, defaults.reference_prefix)
    expect_posted(
        await ctx.engine.call(
            "post_stock_adjustment",
            stock_code,
            body.quantity,
            body.adjustment_type,
            reference,
            body.details or defaults.details,
            body.cost_price,
        ),
        "Failed to post stock adjustment",
    )
    return ok(transaction_result(reference, "Stock adjustment posted"))


ROUTES = [
    Route("GET", "/api/products", list_products, "List products"),
    Route("POST", "/api/products", create_product, "Create product"),
    Route("GET", "/api/products/{stockCode}", get_product, "Get product"),
    Route("POST", "/api/stock", post_stock_adjustment, "Post stock adjustment"),
    Route("GET", "/api/stock/{stockCode}", get_stock_level, "Get stock level"),
]
