"""Engine Boundary — contract of the external accounting engine and its call result.

Invariants:
    - The engine is consumed, never implemented, by the orchestration core
    - Engine methods are synchronous and NOT safe for concurrent calls; callers go
      through infrastructure.engine_session.EngineSession, never the raw engine
    - Engine failures surface as EngineResult(ok=False) values, not exceptions

Design Decisions:
    - Protocol over ABC: the real adapter (COM bridge) and the sandbox engine are
      unrelated classes that only need the same shape
    - Lookups return None for "absent"; writes return bool or the created record
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

from ledger_bridge.schemas.records import (
    AccountRecord, AgedBalance, BankAccount, ChartAccount, CompanyInfo,
    Currency, DeliveryAddress, Department, FinancialYear, LedgerTransaction,
    NominalRecord, OrderRecord, PaymentMethod, ProductRecord, ProjectCostCode,
    ProjectRecord, SetupInfo, StockLevel, TaxCode,
)
from ledger_bridge.schemas.requests import (
    CreateProductRequest, CreateProjectRequest, CreatePurchaseOrderRequest,
    CreateSalesOrderRequest, JournalLineRequest, UpdateOrderRequest,
)


@dataclass(frozen=True)
class EngineResult:
    """Outcome of one engine call: success flag, value, optional error detail."""
    ok: bool
    value: Any = None
    error: str | None = None

    @classmethod
    def success(cls, value: Any = None) -> "EngineResult":
        return cls(True, value)

    @property
    def posted(self) -> bool:
        """Writes report success as a bool: a failed call or a falsy value is not posted."""
        return self.ok and bool(self.value)

    @classmethod
    def failure(cls, error: str | None = None) -> "EngineResult":
        return cls(False, None, error)


class AccountingEngine(Protocol):
    """Structural contract for the accounting engine session."""

    # Connection
    def is_connected(self) -> bool: ...
    def engine_version(self) -> str: ...
    def close(self) -> None: ...

    # Company & reference data
    def get_company_info(self) -> CompanyInfo | None: ...
    def get_setup(self) -> SetupInfo | None: ...
    def get_financial_year(self) -> FinancialYear | None: ...
    def get_tax_codes(self) -> list[TaxCode]: ...
    def get_currencies(self) -> list[Currency]: ...
    def get_departments(self) -> list[Department]: ...
    def get_banks(self) -> list[BankAccount]: ...
    def get_payment_methods(self) -> list[PaymentMethod]: ...
    def get_chart_of_accounts(self, type_filter: str, limit: int) -> list[ChartAccount]: ...

    # Customers
    def customer_exists(self, account_ref: str) -> bool: ...
    def get_customer(self, account_ref: str) -> AccountRecord | None: ...
    def find_customers(self, search: str, limit: int) -> list[AccountRecord]: ...
    def create_customer(self, account: AccountRecord) -> bool: ...
    def get_customer_addresses(self, account_ref: str) -> list[DeliveryAddress]: ...

    # Suppliers
    def supplier_exists(self, account_ref: str) -> bool: ...
    def get_supplier(self, account_ref: str) -> AccountRecord | None: ...
    def find_suppliers(self, search: str, limit: int) -> list[AccountRecord]: ...
    def create_supplier(self, account: AccountRecord) -> bool: ...

    # Sales postings
    def post_sales_invoice(
        self, account_ref: str, reference: str, net_amount: float,
        tax_amount: float, nominal_code: str, details: str, tax_code: str,
    ) -> bool: ...
    def post_sales_credit(
        self, account_ref: str, reference: str, net_amount: float,
        tax_amount: float, nominal_code: str, details: str, tax_code: str,
    ) -> bool: ...
    def post_sales_receipt(
        self, account_ref: str, reference: str, amount: float,
        bank_nominal: str, details: str,
    ) -> bool: ...

    # Purchase postings
    def post_purchase_invoice(
        self, account_ref: str, reference: str, net_amount: float,
        tax_amount: float, nominal_code: str, details: str, tax_code: str,
    ) -> bool: ...
    def post_purchase_credit(
        self, account_ref: str, reference: str, net_amount: float,
        tax_amount: float, nominal_code: str, details: str, tax_code: str,
    ) -> bool: ...
    def post_purchase_payment(
        self, account_ref: str, reference: str, amount: float,
        bank_nominal: str, details: str,
    ) -> bool: ...

    # Nominal ledger
    def get_nominal_codes(self, limit: int) -> list[NominalRecord]: ...
    def nominal_exists(self, code: str) -> bool: ...
    def create_nominal(self, code: str, name: str) -> bool: ...

    # Bank & journals
    def post_bank_payment(
        self, bank_nominal: str, expense_nominal: str, net_amount: float,
        reference: str, details: str, tax_code: str,
    ) -> bool: ...
    def post_bank_receipt(
        self, bank_nominal: str, income_nominal: str, net_amount: float,
        reference: str, details: str, tax_code: str,
    ) -> bool: ...
    def post_journal(
        self, lines: list[JournalLineRequest], reference: str, date: datetime | None,
    ) -> bool: ...
    def post_simple_journal(
        self, debit_nominal: str, credit_nominal: str, amount: float,
        reference: str, details: str, date: datetime | None,
    ) -> bool: ...

    # Products & stock
    def get_products(self, search: str, limit: int) -> list[ProductRecord]: ...
    def get_product(self, stock_code: str) -> ProductRecord | None: ...
    def create_product(self, request: CreateProductRequest) -> ProductRecord | None: ...
    def get_stock_level(self, stock_code: str) -> StockLevel | None: ...
    def post_stock_adjustment(
        self, stock_code: str, quantity: float, adjustment_type: str,
        reference: str, details: str, cost_price: float | None,
    ) -> bool: ...

    # Sales orders
    def get_sales_orders(self, search: str, limit: int) -> list[OrderRecord]: ...
    def get_sales_order(self, order_number: str) -> OrderRecord | None: ...
    def create_sales_order(self, request: CreateSalesOrderRequest) -> OrderRecord | None: ...
    def update_sales_order(self, order_number: str, request: UpdateOrderRequest) -> bool: ...
    def delete_sales_order(self, order_number: str) -> bool: ...
    def complete_sales_order(self, order_number: str) -> bool: ...

    # Purchase orders
    def get_purchase_orders(self, search: str, limit: int) -> list[OrderRecord]: ...
    def get_purchase_order(self, order_number: str) -> OrderRecord | None: ...
    def create_purchase_order(self, request: CreatePurchaseOrderRequest) -> OrderRecord | None: ...
    def update_purchase_order(self, order_number: str, request: UpdateOrderRequest) -> bool: ...
    def delete_purchase_order(self, order_number: str) -> bool: ...
    def complete_purchase_order(self, order_number: str) -> bool: ...

    # Ledger queries
    def search_sales_ledger(
        self, account_ref: str, date_from: datetime | None,
        date_to: datetime | None, limit: int,
    ) -> list[LedgerTransaction]: ...
    def search_purchase_ledger(
        self, account_ref: str, date_from: datetime | None,
        date_to: datetime | None, limit: int,
    ) -> list[LedgerTransaction]: ...
    def get_aged_debtors(self, limit: int) -> list[AgedBalance]: ...
    def get_aged_creditors(self, limit: int) -> list[AgedBalance]: ...
    def get_transactions(
        self, type_filter: str, date_from: datetime | None,
        date_to: datetime | None, limit: int,
    ) -> list[LedgerTransaction]: ...
    def allocate_payment(
        self, account_ref: str, payment_reference: str,
        invoice_reference: str, amount: float,
    ) -> bool: ...

    # Projects
    def get_projects(self, search: str, limit: int) -> list[ProjectRecord]: ...
    def get_project(self, project_ref: str) -> ProjectRecord | None: ...
    def create_project(self, request: CreateProjectRequest) -> ProjectRecord | None: ...
    def get_project_cost_codes(self, project_ref: str, limit: int) -> list[ProjectCostCode]: ...
    def search_projects(self, search: str, status: str, limit: int) -> list[ProjectRecord]: ...
