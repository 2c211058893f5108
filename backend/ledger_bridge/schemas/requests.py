"""Request Schemas — Pydantic models for inbound JSON bodies.

Invariants:
    - Wire names are camelCase; unknown fields are ignored
    - Required strings default to None so that handlers can reject them with a
      field-named message instead of a generic shape error
    - Optional codes and references default to None; documented defaults are
      applied by the handlers from core/defaults.py
"""

from datetime import date, datetime

from pydantic import Field

from ledger_bridge.schemas.records import ApiModel


# ─── Accounts ────────────────────────────────────────────────────

class CreateAccountRequest(ApiModel):
    """Customer or supplier creation."""
    account_ref: str | None = None
    name: str = ""
    address1: str | None = None
    address2: str | None = None
    address3: str | None = None
    postcode: str | None = None
    telephone: str | None = None
    email: str | None = None
    contact_name: str | None = None
    credit_limit: float | None = None


class CreateNominalRequest(ApiModel):
    code: str | None = None
    name: str | None = None


# ─── Sales ───────────────────────────────────────────────────────

class PostSalesInvoiceRequest(ApiModel):
    customer_account: str | None = None
    invoice_ref: str | None = None
    net_amount: float = 0.0
    tax_amount: float = 0.0
    nominal_code: str | None = None
    details: str | None = None
    tax_code: str | None = None
    auto_create_customer: bool = False


class PostSalesCreditRequest(ApiModel):
    customer_account: str | None = None
    credit_ref: str | None = None
    net_amount: float = 0.0
    tax_amount: float = 0.0
    nominal_code: str | None = None
    details: str | None = None
    tax_code: str | None = None


class PostSalesReceiptRequest(ApiModel):
    customer_account: str | None = None
    receipt_ref: str | None = None
    amount: float = 0.0
    bank_nominal: str | None = None
    details: str | None = None


# ─── Purchases ───────────────────────────────────────────────────

class PostPurchaseInvoiceRequest(ApiModel):
    supplier_account: str | None = None
    invoice_ref: str | None = None
    net_amount: float = 0.0
    tax_amount: float = 0.0
    nominal_code: str | None = None
    details: str | None = None
    tax_code: str | None = None
    auto_create_supplier: bool = False


class PostPurchaseCreditRequest(ApiModel):
    supplier_account: str | None = None
    credit_ref: str | None = None
    net_amount: float = 0.0
    tax_amount: float = 0.0
    nominal_code: str | None = None
    details: str | None = None
    tax_code: str | None = None


class PostPurchasePaymentRequest(ApiModel):
    supplier_account: str | None = None
    payment_ref: str | None = None
    amount: float = 0.0
    bank_nominal: str | None = None
    details: str | None = None


# ─── Bank & Journals ─────────────────────────────────────────────

class PostBankPaymentRequest(ApiModel):
    bank_nominal: str | None = None
    expense_nominal: str | None = None
    net_amount: float = 0.0
    reference: str | None = None
    details: str | None = None
    tax_code: str | None = None


class PostBankReceiptRequest(ApiModel):
    bank_nominal: str | None = None
    income_nominal: str | None = None
    net_amount: float = 0.0
    reference: str | None = None
    details: str | None = None
    tax_code: str | None = None


class JournalLineRequest(ApiModel):
    nominal_code: str = ""
    debit: float = 0.0
    credit: float = 0.0
    details: str | None = None


class PostJournalRequest(ApiModel):
    lines: list[JournalLineRequest] | None = None
    reference: str | None = None
    date: datetime | None = None


class PostSimpleJournalRequest(ApiModel):
    debit_nominal: str | None = None
    credit_nominal: str | None = None
    amount: float = 0.0
    reference: str | None = None
    details: str | None = None
    date: datetime | None = None


# ─── Stock ───────────────────────────────────────────────────────

class CreateProductRequest(ApiModel):
    stock_code: str | None = None
    description: str = ""
    sale_price: float = 0.0
    cost_price: float = 0.0
    nominal_code: str | None = None
    tax_code: str | None = None
    unit_of_sale: str = ""


class StockAdjustmentRequest(ApiModel):
    stock_code: str | None = None
    quantity: float = 0.0
    adjustment_type: str = "in"
    reference: str | None = None
    details: str | None = None
    cost_price: float | None = None


# ─── Orders ──────────────────────────────────────────────────────

class OrderLineRequest(ApiModel):
    stock_code: str = ""
    description: str = ""
    quantity: float = 0.0
    unit_price: float = 0.0
    tax_code: str | None = None


class CreateSalesOrderRequest(ApiModel):
    customer_account_ref: str | None = None
    order_date: date | None = None
    reference: str | None = None
    notes: str | None = None
    lines: list[OrderLineRequest] = Field(default_factory=list)
    auto_create_customer: bool = False


class CreatePurchaseOrderRequest(ApiModel):
    supplier_account: str | None = None
    order_date: date | None = None
    reference: str | None = None
    notes: str | None = None
    lines: list[OrderLineRequest] = Field(default_factory=list)
    auto_create_supplier: bool = False


class UpdateOrderRequest(ApiModel):
    """Partial update: only supplied fields change."""
    reference: str | None = None
    notes: str | None = None
    order_date: date | None = None
    lines: list[OrderLineRequest] | None = None


# ─── Transactions ────────────────────────────────────────────────

class TransactionItem(ApiModel):
    """One batch item, dispatched on its type tag."""
    type: str | None = None
    account_ref: str | None = None
    net_amount: float = 0.0
    tax_amount: float = 0.0
    nominal_code: str | None = None
    tax_code: str | None = None
    bank_nominal: str | None = None
    details: str | None = None
    reference: str | None = None


class PostTransactionBatchRequest(ApiModel):
    transactions: list[TransactionItem] | None = None


class AllocatePaymentRequest(ApiModel):
    account_ref: str | None = None
    payment_reference: str | None = None
    invoice_reference: str | None = None
    amount: float = 0.0


# ─── Projects ────────────────────────────────────────────────────

class CreateProjectRequest(ApiModel):
    project_ref: str | None = None
    name: str = ""
    description: str = ""
    customer_account_ref: str | None = None
    status: str = "active"
    start_date: date | None = None
    end_date: date | None = None
