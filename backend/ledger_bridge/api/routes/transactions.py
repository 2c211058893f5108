"""Transactions — batch posting and payment allocation.

Invariants:
    - Empty or absent transaction list -> 400 before any item is processed
    - A batch always answers 200; per-item failures live in the results
"""

from ledger_bridge.api.context import RequestContext, expect_posted
from ledger_bridge.core.decoding import require_all
from ledger_bridge.core.envelope import Outcome, ok, transaction_result
from ledger_bridge.core.errors import InvalidRequestError
from ledger_bridge.core.routing import Route
from ledger_bridge.schemas.requests import AllocatePaymentRequest, PostTransactionBatchRequest
from ledger_bridge.services.batch_processor import BatchProcessor

EMPTY_BATCH_MESSAGE = "Invalid request body or empty transactions list"


async def post_transaction_batch(ctx: RequestContext) -> Outcome:
    try:
        body = ctx.decode(PostTransactionBatchRequest)
    except InvalidRequestError:
        raise InvalidRequestError(EMPTY_BATCH_MESSAGE, field="transactions") from None
    if body is None or not body.transactions:
        raise InvalidRequestError(EMPTY_BATCH_MESSAGE, field="transactions")

    processor = BatchProcessor(ctx.engine, ctx.references)
    batch = await processor.process(body.transactions)
    return ok(batch.to_payload())


async def allocate_payment(ctx: RequestContext) -> Outcome:
    body = ctx.require(AllocatePaymentRequest)
    require_all(
        "paymentReference and invoiceReference are required",
        body.payment_reference, body.invoice_reference,
    )
    expect_posted(
        await ctx.engine.call(
            "allocate_payment",
            body.account_ref or "",
            body.payment_reference,
            body.invoice_reference,
            body.amount,
        ),
        "Failed to allocate payment",
    )
    return ok(transaction_result(body.payment_reference, "Payment allocated"))


ROUTES = [
    Route("POST", "/api/transactions/batch", post_transaction_batch, "Post transaction batch"),
    Route("POST", "/api/payments/allocate", allocate_payment, "Allocate payment to invoice"),
]
