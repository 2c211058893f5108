"""Engine Records — shapes the accounting engine returns, serialized camelCase.

Invariants:
    - Every record serializes with camelCase keys (alias_generator=to_camel)
    - Records are plain data; no behaviour beyond validation
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for every wire model: camelCase aliases, snake_case attributes."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ─── Accounts ────────────────────────────────────────────────────

class AccountRecord(ApiModel):
    """Customer or supplier ledger account."""
    account_ref: str
    name: str = ""
    address1: str = ""
    address2: str = ""
    address3: str = ""
    postcode: str = ""
    telephone: str = ""
    email: str = ""
    contact_name: str = ""
    balance: float = 0.0
    credit_limit: float = 0.0


class DeliveryAddress(ApiModel):
    name: str = ""
    address1: str = ""
    address2: str = ""
    address3: str = ""
    postcode: str = ""
    contact_name: str = ""
    telephone: str = ""


class NominalRecord(ApiModel):
    code: str
    name: str
    balance: float = 0.0


class CompanyInfo(ApiModel):
    name: str
    address1: str = ""
    address2: str = ""
    address3: str = ""
    postcode: str = ""
    telephone: str = ""
    vat_number: str = ""


# ─── Stock ───────────────────────────────────────────────────────

class ProductRecord(ApiModel):
    stock_code: str
    description: str = ""
    sale_price: float = 0.0
    cost_price: float = 0.0
    quantity_in_stock: float = 0.0
    nominal_code: str = ""
    tax_code: str = ""
    unit_of_sale: str = ""


class StockLevel(ApiModel):
    stock_code: str
    quantity_in_stock: float = 0.0
    quantity_allocated: float = 0.0
    quantity_on_order: float = 0.0
    reorder_level: float = 0.0


# ─── Orders ──────────────────────────────────────────────────────

class OrderLine(ApiModel):
    stock_code: str = ""
    description: str = ""
    quantity: float = 0.0
    unit_price: float = 0.0
    net_amount: float = 0.0
    tax_code: str = ""


class OrderRecord(ApiModel):
    """Sales or purchase order."""
    order_number: str
    account_ref: str
    order_date: date
    status: str = "open"
    reference: str = ""
    notes: str = ""
    lines: list[OrderLine] = Field(default_factory=list)
    net_amount: float = 0.0
    tax_amount: float = 0.0


# ─── Ledgers ─────────────────────────────────────────────────────

class LedgerTransaction(ApiModel):
    """One audit-trail entry."""
    tran_number: int
    type: str
    account_ref: str = ""
    reference: str = ""
    date: datetime
    details: str = ""
    nominal_code: str = ""
    tax_code: str = ""
    net_amount: float = 0.0
    tax_amount: float = 0.0
    outstanding: float = 0.0


class AgedBalance(ApiModel):
    account_ref: str
    name: str = ""
    balance: float = 0.0
    current: float = 0.0
    period1: float = 0.0
    period2: float = 0.0
    period3: float = 0.0
    older: float = 0.0


# ─── Projects ────────────────────────────────────────────────────

class ProjectRecord(ApiModel):
    project_ref: str
    name: str = ""
    description: str = ""
    customer_account_ref: str = ""
    status: str = "active"
    start_date: date | None = None
    end_date: date | None = None


class ProjectCostCode(ApiModel):
    project_ref: str
    cost_code: str
    description: str = ""


# ─── Reference Data ──────────────────────────────────────────────

class TaxCode(ApiModel):
    code: str
    rate: float
    description: str = ""


class Currency(ApiModel):
    code: str
    name: str
    symbol: str = ""
    exchange_rate: float = 1.0


class Department(ApiModel):
    number: int
    name: str


class BankAccount(ApiModel):
    nominal_code: str
    name: str
    balance: float = 0.0


class PaymentMethod(ApiModel):
    id: int
    name: str


class ChartAccount(ApiModel):
    code: str
    name: str
    type: str = ""


class FinancialYear(ApiModel):
    start_date: date
    end_date: date
    current_period: int = 1


class SetupInfo(ApiModel):
    company_name: str
    base_currency: str = "GBP"
    vat_registered: bool = True
    default_tax_code: str = "T1"
    default_bank_nominal: str = "1200"
