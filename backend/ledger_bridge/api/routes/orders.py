"""Sales & Purchase Orders — list, get, create, update, delete, complete.

Invariants:
    - Order creation runs the provisioning policy for the order's account
      (customer for sales orders, supplier for purchase orders)
    - The engine receives the request with the normalized account reference
    - Sales and purchase routes share one implementation parameterized by OrderBook
"""

import logging
from dataclasses import dataclass
from functools import partial

from ledger_bridge.api.context import RequestContext, expect, expect_posted
from ledger_bridge.core.defaults import LIST_LIMIT
from ledger_bridge.core.domain_types import AccountKind
from ledger_bridge.core.envelope import Outcome, created, ok, transaction_result
from ledger_bridge.core.errors import DownstreamError, ResourceNotFoundError
from ledger_bridge.core.routing import Route
from ledger_bridge.schemas.requests import (
    CreatePurchaseOrderRequest, CreateSalesOrderRequest, UpdateOrderRequest,
)
from ledger_bridge.services.provisioning import ensure_account

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderBook:
    """Per-book vocabulary: label, engine operation suffix, request shape."""
    label: str                  # "Sales order"
    operation: str              # "sales_order"
    account_kind: AccountKind
    account_field: str          # wire name of the account reference
    account_attr: str           # model attribute of the account reference
    auto_create_attr: str
    create_model: type


SALES = OrderBook(
    "Sales order", "sales_order", AccountKind.CUSTOMER,
    "customerAccountRef", "customer_account_ref", "auto_create_customer",
    CreateSalesOrderRequest,
)
PURCHASE = OrderBook(
    "Purchase order", "purchase_order", AccountKind.SUPPLIER,
    "supplierAccount", "supplier_account", "auto_create_supplier",
    CreatePurchaseOrderRequest,
)


async def list_orders(book: OrderBook, ctx: RequestContext) -> Outcome:
    result = await ctx.engine.call(
        f"get_{book.operation}s", ctx.query_text("search"), ctx.query_limit(LIST_LIMIT),
    )
    return ok(expect(result, f"Failed to list {book.label.lower()}s"))


async def get_order(book: OrderBook, ctx: RequestContext) -> Outcome:
    number = ctx.params["orderNumber"]
    order = expect(
        await ctx.engine.call(f"get_{book.operation}", number),
        f"Failed to get {book.label.lower()}",
    )
    if order is None:
        raise ResourceNotFoundError(book.label, number)
    return ok(order)


async def create_order(book: OrderBook, ctx: RequestContext) -> Outcome:
    body = ctx.require(book.create_model)
    ref, provisioning = await ensure_account(
        ctx.engine, book.account_kind, getattr(body, book.account_attr),
        getattr(body, book.auto_create_attr), field=book.account_field,
    )
    request = body.model_copy(update={book.account_attr: ref})
    order = expect(
        await ctx.engine.call(f"create_{book.operation}", request),
        f"Failed to create {book.label.lower()}",
    )
    if order is None:
        raise DownstreamError(f"Failed to create {book.label.lower()}")
    logger.info(
        f"{book.label} created",
        extra={"account_ref": ref, "provisioning": provisioning.value},
    )
    return created(order)


async def update_order(book: OrderBook, ctx: RequestContext) -> Outcome:
    number = ctx.params["orderNumber"]
    body = ctx.require(UpdateOrderRequest)
    expect_posted(
        await ctx.engine.call(f"update_{book.operation}", number, body),
        f"Failed to update {book.label.lower()}: {number}",
    )
    return ok(transaction_result(number, f"{book.label} updated"))


async def delete_order(book: OrderBook, ctx: RequestContext) -> Outcome:
    number = ctx.params["orderNumber"]
    expect_posted(
        await ctx.engine.call(f"delete_{book.operation}", number),
        f"Failed to delete {book.label.lower()}: {number}",
    )
    return ok(transaction_result(number, f"{book.label} deleted"))


async def complete_order(book: OrderBook, ctx: RequestContext) -> Outcome:
    number = ctx.params["orderNumber"]
    expect_posted(
        await ctx.engine.call(f"complete_{book.operation}", number),
        f"Failed to complete {book.label.lower()}: {number}",
    )
    return ok(transaction_result(number, f"{book.label} completed"))


def _order_routes(book: OrderBook, collection: str) -> list[Route]:
    base = f"/api/{collection}"
    item = f"{base}/{{orderNumber}}"
    name = book.label.lower()
    return [
        Route("GET", base, partial(list_orders, book), f"List {name}s"),
        Route("POST", base, partial(create_order, book), f"Create {name}"),
        Route("GET", item, partial(get_order, book), f"Get {name}"),
        Route("PATCH", item, partial(update_order, book), f"Update {name}"),
        Route("DELETE", item, partial(delete_order, book), f"Delete {name}"),
        Route("POST", f"{item}/complete", partial(complete_order, book), f"Complete {name}"),
    ]


ROUTES = [
    *_order_routes(SALES, "salesorders"),
    *_order_routes(PURCHASE, "purchaseorders"),
]
