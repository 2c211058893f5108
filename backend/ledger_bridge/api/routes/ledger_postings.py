"""Sales & Purchase Ledger Postings — invoices, credits, receipts, payments.

Invariants:
    - Invoices run the provisioning policy (autoCreateCustomer / autoCreateSupplier)
    - Credits, receipts and payments require an existing account (404 otherwise)
    - Missing reference -> generated {prefix}-{timestamp}; missing codes -> core/defaults.py
    - The posting call happens only after the account check succeeded
"""

import logging

from ledger_bridge.api.context import RequestContext, expect_posted
from ledger_bridge.core.defaults import defaults_for, or_default
from ledger_bridge.core.domain_types import AccountKind, PostingKind, ProvisioningOutcome
from ledger_bridge.core.envelope import Outcome, ok, transaction_result
from ledger_bridge.core.routing import Route
from ledger_bridge.schemas.requests import (
    PostPurchaseCreditRequest, PostPurchaseInvoiceRequest, PostPurchasePaymentRequest,
    PostSalesCreditRequest, PostSalesInvoiceRequest, PostSalesReceiptRequest,
)
from ledger_bridge.services.provisioning import ensure_account, require_account

logger = logging.getLogger(__name__)


async def _post_document(
    ctx: RequestContext,
    kind: PostingKind,
    operation: str,
    label: str,
    account_ref: str,
    reference: str | None,
    body,
    provisioning: ProvisioningOutcome | None = None,
) -> Outcome:
    """Shared tail of invoice/credit postings once the account is settled."""
    defaults = defaults_for(kind)
    reference = ctx.references.resolve(reference, defaults.reference_prefix)
    result = await ctx.engine.call(
        operation,
        account_ref,
        reference,
        body.net_amount,
        body.tax_amount,
        or_default(body.nominal_code, defaults.nominal_code),
        body.details or defaults.details,
        or_default(body.tax_code, defaults.tax_code),
    )
    expect_posted(result, f"Failed to post {label.lower()}")
    logger.info(
        f"{label} posted",
        extra={
            "reference": reference, "account_ref": account_ref,
            "provisioning": provisioning.value if provisioning else None,
        },
    )
    return ok(transaction_result(reference, f"{label} posted"))


async def _post_settlement(
    ctx: RequestContext,
    kind: PostingKind,
    operation: str,
    label: str,
    account_ref: str,
    reference: str | None,
    body,
) -> Outcome:
    """Shared tail of receipts/payments: money through a bank nominal."""
    defaults = defaults_for(kind)
    reference = ctx.references.resolve(reference, defaults.reference_prefix)
    result = await ctx.engine.call(
        operation,
        account_ref,
        reference,
        body.amount,
        or_default(body.bank_nominal, defaults.bank_nominal),
        body.details or defaults.details,
    )
    expect_posted(result, f"Failed to post {label.lower()}")
    return ok(transaction_result(reference, f"{label} posted"))


# ─── Sales ───────────────────────────────────────────────────────

async def post_sales_invoice(ctx: RequestContext) -> Outcome:
    body = ctx.require(PostSalesInvoiceRequest)
    ref, provisioning = await ensure_account(
        ctx.engine, AccountKind.CUSTOMER, body.customer_account,
        body.auto_create_customer, field="customerAccount",
    )
    return await _post_document(
        ctx, PostingKind.SALES_INVOICE, "post_sales_invoice", "Sales invoice",
        ref, body.invoice_ref, body, provisioning,
    )


async def post_sales_credit(ctx: RequestContext) -> Outcome:
    body = ctx.require(PostSalesCreditRequest)
    ref = await require_account(
        ctx.engine, AccountKind.CUSTOMER, body.customer_account, field="customerAccount",
    )
    return await _post_document(
        ctx, PostingKind.SALES_CREDIT, "post_sales_credit", "Sales credit",
        ref, body.credit_ref, body,
    )


async def post_sales_receipt(ctx: RequestContext) -> Outcome:
    body = ctx.require(PostSalesReceiptRequest)
    ref = await require_account(
        ctx.engine, AccountKind.CUSTOMER, body.customer_account, field="customerAccount",
    )
    return await _post_settlement(
        ctx, PostingKind.SALES_RECEIPT, "post_sales_receipt", "Sales receipt",
        ref, body.receipt_ref, body,
    )


# ─── Purchases ───────────────────────────────────────────────────

async def post_purchase_invoice(ctx: RequestContext) -> Outcome:
    body = ctx.require(PostPurchaseInvoiceRequest)
    ref, provisioning = await ensure_account(
        ctx.engine, AccountKind.SUPPLIER, body.supplier_account,
        body.auto_create_supplier, field="supplierAccount",
    )
    return await _post_document(
        ctx, PostingKind.PURCHASE_INVOICE, "post_purchase_invoice", "Purchase invoice",
        ref, body.invoice_ref, body, provisioning,
    )


async def post_purchase_credit(ctx: RequestContext) -> Outcome:
    body = ctx.require(PostPurchaseCreditRequest)
    ref = await require_account(
        ctx.engine, AccountKind.SUPPLIER, body.supplier_account, field="supplierAccount",
    )
    return await _post_document(
        ctx, PostingKind.PURCHASE_CREDIT, "post_purchase_credit", "Purchase credit",
        ref, body.credit_ref, body,
    )


async def post_purchase_payment(ctx: RequestContext) -> Outcome:
    body = ctx.require(PostPurchasePaymentRequest)
    ref = await require_account(
        ctx.engine, AccountKind.SUPPLIER, body.supplier_account, field="supplierAccount",
    )
    return await _post_settlement(
        ctx, PostingKind.PURCHASE_PAYMENT, "post_purchase_payment", "Purchase payment",
        ref, body.payment_ref, body,
    )


ROUTES = [
    Route("POST", "/api/sales/invoice", post_sales_invoice, "Post sales invoice"),
    Route("POST", "/api/sales/credit", post_sales_credit, "Post sales credit note"),
    Route("POST", "/api/sales/receipt", post_sales_receipt, "Post sales receipt"),
    Route("POST", "/api/purchases/invoice", post_purchase_invoice, "Post purchase invoice"),
    Route("POST", "/api/purchases/credit", post_purchase_credit, "Post purchase credit note"),
    Route("POST", "/api/purchases/payment", post_purchase_payment, "Post purchase payment"),
]
