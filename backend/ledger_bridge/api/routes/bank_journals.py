"""Bank Entries & Journals — bank payments/receipts and nominal journals.

Invariants:
    - Multi-line journals need at least 2 lines
    - Simple journals need both nominals; the engine dates them today when no date is given
    - Bank entries default bank nominal 1200 and the per-type nominal/tax code
"""

from ledger_bridge.api.context import RequestContext, expect_posted
from ledger_bridge.core.decoding import require_all
from ledger_bridge.core.defaults import defaults_for, or_default
from ledger_bridge.core.domain_types import PostingKind
from ledger_bridge.core.envelope import Outcome, ok, transaction_result
from ledger_bridge.core.errors import InvalidRequestError
from ledger_bridge.core.routing import Route
from ledger_bridge.schemas.requests import (
    PostBankPaymentRequest, PostBankReceiptRequest, PostJournalRequest,
    PostSimpleJournalRequest,
)


async def post_bank_payment(ctx: RequestContext) -> Outcome:
    body = ctx.require(PostBankPaymentRequest)
    defaults = defaults_for(PostingKind.BANK_PAYMENT)
    reference = ctx.references.resolve(body.reference, defaults.reference_prefix)
    result = await ctx.engine.call(
        "post_bank_payment",
        or_default(body.bank_nominal, defaults.bank_nominal),
        or_default(body.expense_nominal, defaults.nominal_code),
        body.net_amount,
        reference,
        body.details or defaults.details,
        or_default(body.tax_code, defaults.tax_code),
    )
    expect_posted(result, "Failed to post bank payment")
    return ok(transaction_result(reference, "Bank payment posted"))


async def post_bank_receipt(ctx: RequestContext) -> Outcome:
    body = ctx.require(PostBankReceiptRequest)
    defaults = defaults_for(PostingKind.BANK_RECEIPT)
    reference = ctx.references.resolve(body.reference, defaults.reference_prefix)
    result = await ctx.engine.call(
        "post_bank_receipt",
        or_default(body.bank_nominal, defaults.bank_nominal),
        or_default(body.income_nominal, defaults.nominal_code),
        body.net_amount,
        reference,
        body.details or defaults.details,
        or_default(body.tax_code, defaults.tax_code),
    )
    expect_posted(result, "Failed to post bank receipt")
    return ok(transaction_result(reference, "Bank receipt posted"))


async def post_journal(ctx: RequestContext) -> Outcome:
    body = ctx.require(PostJournalRequest)
    if not body.lines or len(body.lines) < 2:
        raise InvalidRequestError("Journal must have at least 2 lines", field="lines")

    defaults = defaults_for(PostingKind.JOURNAL)
    reference = ctx.references.resolve(body.reference, defaults.reference_prefix)
    lines = [line.model_copy(update={"details": line.details or ""}) for line in body.lines]
    expect_posted(
        await ctx.engine.call("post_journal", lines, reference, body.date),
        "Failed to post journal",
    )
    return ok(transaction_result(reference, "Journal posted"))


async def post_simple_journal(ctx: RequestContext) -> Outcome:
    body = ctx.require(PostSimpleJournalRequest)
    require_all(
        "debitNominal and creditNominal are required",
        body.debit_nominal, body.credit_nominal,
    )
    defaults = defaults_for(PostingKind.JOURNAL)
    reference = ctx.references.resolve(body.reference, defaults.reference_prefix)
    expect_posted(
        await ctx.engine.call(
            "post_simple_journal",
            body.debit_nominal,
            body.credit_nominal,
            body.amount,
            reference,
            body.details or defaults.details,
            body.date,
        ),
        "Failed to post journal",
    )
    return ok(transaction_result(reference, "Journal posted"))


ROUTES = [
    Route("POST", "/api/bank/payment", post_bank_payment, "Post bank payment"),
    Route("POST", "/api/bank/receipt", post_bank_receipt, "Post bank receipt"),
    Route("POST", "/api/journals", post_journal, "Post multi-line journal"),
    Route("POST", "/api/journals/simple", post_simple_journal, "Post two-line journal"),
]
