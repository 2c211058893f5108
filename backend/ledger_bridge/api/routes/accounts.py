"""Customer & Supplier Accounts — list, lookup, existence, creation.

Invariants:
    - Account references are normalized (uppercase, <= 8 chars) before any engine call,
      so /api/customers/abc123 and /api/customers/ABC123 address the same record
    - Creation returns 201 with the stored record
    - Customer and supplier routes share one implementation parameterized by AccountKind
"""

from functools import partial

from ledger_bridge.api.context import RequestContext, expect
from ledger_bridge.core.decoding import normalize_account_ref
from ledger_bridge.core.defaults import LIST_LIMIT
from ledger_bridge.core.domain_types import AccountKind
from ledger_bridge.core.envelope import Outcome, created, ok, transaction_result
from ledger_bridge.core.errors import DownstreamError, ResourceNotFoundError
from ledger_bridge.core.routing import Route
from ledger_bridge.schemas.records import AccountRecord
from ledger_bridge.schemas.requests import CreateAccountRequest
from ledger_bridge.services.provisioning import account_exists

_FIND = {AccountKind.CUSTOMER: "find_customers", AccountKind.SUPPLIER: "find_suppliers"}
_GET = {AccountKind.CUSTOMER: "get_customer", AccountKind.SUPPLIER: "get_supplier"}
_CREATE = {AccountKind.CUSTOMER: "create_customer", AccountKind.SUPPLIER: "create_supplier"}


async def list_accounts(kind: AccountKind, ctx: RequestContext) -> Outcome:
    result = await ctx.engine.call(
        _FIND[kind], ctx.query_text("search"), ctx.query_limit(LIST_LIMIT),
    )
    return ok(expect(result, f"Failed to list {kind.value}s"))


async def get_account(kind: AccountKind, ctx: RequestContext) -> Outcome:
    ref = normalize_account_ref(ctx.params["accountRef"])
    record = expect(await ctx.engine.call(_GET[kind], ref), f"Failed to get {kind.value}")
    if record is None:
        raise ResourceNotFoundError(kind.label, ref)
    return ok(record)


async def check_account_exists(kind: AccountKind, ctx: RequestContext) -> Outcome:
    ref = normalize_account_ref(ctx.params["accountRef"])
    exists = await account_exists(ctx.engine, kind, ref)
    return ok({"exists": exists, "accountRef": ref})


async def create_account(kind: AccountKind, ctx: RequestContext) -> Outcome:
    body = ctx.require(CreateAccountRequest)
    ref = normalize_account_ref(body.account_ref)
    account = AccountRecord(
        account_ref=ref,
        name=body.name,
        address1=body.address1 or "",
        address2=body.address2 or "",
        address3=body.address3 or "",
        postcode=body.postcode or "",
        telephone=body.telephone or "",
        email=body.email or "",
        contact_name=body.contact_name or "",
        credit_limit=body.credit_limit or 0.0,
    )
    result = await ctx.engine.call(_CREATE[kind], account)
    if not result.posted:
        raise DownstreamError(f"Failed to create {kind.value}", result.error)

    stored = await ctx.engine.call(_GET[kind], ref)
    if not stored.ok or stored.value is None:
        # Created but not readable back yet
        return ok(transaction_result(ref, f"{kind.label} created"))
    return created(stored.value)


async def customer_addresses(ctx: RequestContext) -> Outcome:
    ref = normalize_account_ref(ctx.params["accountRef"])
    addresses = expect(
        await ctx.engine.call("get_customer_addresses", ref),
        "Failed to get customer addresses",
    )
    if not addresses:
        raise ResourceNotFoundError(
            "Customer addresses", ref,
            message=f"No addresses found for customer: {ref}",
        )
    return ok(addresses)


def _account_routes(kind: AccountKind, collection: str) -> list[Route]:
    base = f"/api/{collection}"
    return [
        Route("GET", base, partial(list_accounts, kind), f"List {collection}"),
        Route("POST", base, partial(create_account, kind), f"Create {kind.value}"),
        Route("GET", f"{base}/{{accountRef}}", partial(get_account, kind),
              f"Get {kind.value}"),
        Route("GET", f"{base}/{{accountRef}}/exists",
              partial(check_account_exists, kind), f"Check {kind.value} exists"),
    ]


ROUTES = [
    *_account_routes(AccountKind.CUSTOMER, "customers"),
    Route("GET", "/api/customers/{accountRef}/addresses", customer_addresses,
          "Get customer delivery addresses"),
    *_account_routes(AccountKind.SUPPLIER, "suppliers"),
]
