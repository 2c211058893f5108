"""Memory Engine — in-process sandbox implementation of AccountingEngine.

Invariants:
    - Satisfies the AccountingEngine protocol; used when ENGINE_BACKEND=memory and in tests
    - Account, product, project and order keys are case-insensitive (stored uppercase)
    - Postings against a missing account return False; bad codes raise ValueError,
      mirroring how the real engine reports rejected input
    - Journals must balance (sum of debits == sum of credits)
    - Every posting lands in one audit trail with ascending transaction numbers

Design Decisions:
    - Plain dicts over a database: state lives as long as the process, which is
      all the sandbox needs
    - Not thread-safe on its own; EngineSession serializes every call
"""

import logging
from collections.abc import Callable
from datetime import date, datetime

from ledger_bridge.schemas.records import (
    AccountRecord, AgedBalance, BankAccount, ChartAccount, CompanyInfo,
    Currency, DeliveryAddress, Department, FinancialYear, LedgerTransaction,
    NominalRecord, OrderLine, OrderRecord, PaymentMethod, ProductRecord,
    ProjectCostCode, ProjectRecord, SetupInfo, StockLevel, TaxCode,
)
from ledger_bridge.schemas.requests import (
    CreateProductRequest, CreateProjectRequest, CreatePurchaseOrderRequest,
    CreateSalesOrderRequest, JournalLineRequest, OrderLineRequest, UpdateOrderRequest,
)

logger = logging.getLogger(__name__)

ENGINE_VERSION = "memory-1.0"

DEBTORS_CONTROL = "1100"
CREDITORS_CONTROL = "2100"
SALES_TAX_CONTROL = "2200"
PURCHASE_TAX_CONTROL = "2201"

SALES_LEDGER_TYPES = ("SI", "SC", "SR")
PURCHASE_LEDGER_TYPES = ("PI", "PC", "PP")

_SEED_NOMINALS = {
    "0030": "Office Equipment",
    "1001": "Stock",
    DEBTORS_CONTROL: "Debtors Control Account",
    "1200": "Bank Current Account",
    "1210": "Bank Deposit Account",
    "1230": "Petty Cash",
    CREDITORS_CONTROL: "Creditors Control Account",
    SALES_TAX_CONTROL: "Sales Tax Control Account",
    PURCHASE_TAX_CONTROL: "Purchase Tax Control Account",
    "3000": "Capital",
    "4000": "Sales Type A",
    "4900": "Miscellaneous Income",
    "5000": "Materials Purchased",
    "7500": "Office Stationery",
    "9999": "Suspense Account",
}
_BANK_NOMINALS = ("1200", "1210", "1230")

_SEED_TAX_CODES = [
    TaxCode(code="T0", rate=0.0, description="Zero rated"),
    TaxCode(code="T1", rate=20.0, description="Standard rate"),
    TaxCode(code="T2", rate=0.0, description="Exempt"),
    TaxCode(code="T5", rate=5.0, description="Reduced rate"),
    TaxCode(code="T9", rate=0.0, description="Outside the scope of VAT"),
]

# (upper bound of code range, chart category)
_CHART_RANGES = [
    (999, "Fixed Assets"),
    (1999, "Current Assets"),
    (2999, "Current Liabilities"),
    (3999, "Capital & Reserves"),
    (4999, "Sales"),
    (5999, "Purchases"),
    (6999, "Direct Expenses"),
    (9999, "Overheads"),
]

_AGE_BUCKETS = [(30, "current"), (60, "period1"), (90, "period2"), (120, "period3")]

_DEFAULT_COST_CODES = {"LAB": "Labour", "MAT": "Materials", "OVH": "Overheads"}


def _naive(value: datetime | None) -> datetime | None:
    return value.replace(tzinfo=None) if value is not None else None


def _chart_category(code: str) -> str:
    try:
        number = int(code)
    except ValueError:
        return "Other"
    for upper, category in _CHART_RANGES:
        if number <= upper:
            return category
    return "Other"


class MemoryEngine:
    """Dict-backed accounting engine for local runs and tests."""

    def __init__(
        self,
        company_name: str = "Sandbox Trading Ltd",
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._clock = clock
        self._connected = True
        self.company = CompanyInfo(name=company_name, vat_number="GB000000000")

        self.customers: dict[str, AccountRecord] = {}
        self.suppliers: dict[str, AccountRecord] = {}
        self.addresses: dict[str, list[DeliveryAddress]] = {}
        self.nominals: dict[str, NominalRecord] = {
            code: NominalRecord(code=code, name=name) for code, name in _SEED_NOMINALS.items()
        }
        self.tax_codes: dict[str, TaxCode] = {t.code: t for t in _SEED_TAX_CODES}
        self.products: dict[str, ProductRecord] = {}
        self.stock: dict[str, StockLevel] = {}
        self.sales_orders: dict[str, OrderRecord] = {}
        self.purchase_orders: dict[str, OrderRecord] = {}
        self.projects: dict[str, ProjectRecord] = {}
        self.cost_codes: dict[str, list[ProjectCostCode]] = {}
        self.transactions: list[LedgerTransaction] = []
        self._next_order_number = 1

    # ─── Connection ─────────────────────────────────────────────

    def is_connected(self) -> bool:
        return self._connected

    def engine_version(self) -> str:
        return ENGINE_VERSION

    def close(self) -> None:
        self._connected = False
        logger.info("Memory engine closed")

    # ─── Company & reference data ───────────────────────────────

    def get_company_info(self) -> CompanyInfo | None:
        return self.company

    def get_setup(self) -> SetupInfo | None:
        return SetupInfo(company_name=self.company.name)

    def get_financial_year(self) -> FinancialYear | None:
        today = self._clock().date()
        start_year = today.year if today.month >= 4 else today.year - 1
        start = date(start_year, 4, 1)
        months = (today.year - start.year) * 12 + today.month - start.month
        return FinancialYear(
            start_date=start,
            end_date=date(start_year + 1, 3, 31),
            current_period=months + 1,
        )

    def get_tax_codes(self) -> list[TaxCode]:
        return list(self.tax_codes.values())

    def get_currencies(self) -> list[Currency]:
        return [
            Currency(code="GBP", name="Pound Sterling", symbol="£"),
            Currency(code="EUR", name="Euro", symbol="€", exchange_rate=1.17),
            Currency(code="USD", name="US Dollar", symbol="$", exchange_rate=1.27),
        ]

    def get_departments(self) -> list[Department]:
        return [Department(number=0, name="Default"), Department(number=1, name="Sales")]

    def get_banks(self) -> list[BankAccount]:
        return [
            BankAccount(nominal_code=code, name=self.nominals[code].name,
                        balance=self.nominals[code].balance)
            for code in _BANK_NOMINALS if code in self.nominals
        ]

    def get_payment_methods(self) -> list[PaymentMethod]:
        return [
            PaymentMethod(id=1, name="Cash"),
            PaymentMethod(id=2, name="Cheque"),
            PaymentMethod(id=3, name="BACS"),
            PaymentMethod(id=4, name="Credit Card"),
        ]

    def get_chart_of_accounts(self, type_filter: str, limit: int) -> list[ChartAccount]:
        wanted = type_filter.strip().lower()
        accounts = [
            ChartAccount(code=n.code, name=n.name, type=_chart_category(n.code))
            for n in sorted(self.nominals.values(), key=lambda n: n.code)
        ]
        if wanted:
            accounts = [a for a in accounts if wanted in a.type.lower()]
        return accounts[:limit]

    # ─── Customers & suppliers ──────────────────────────────────

    def customer_exists(self, account_ref: str) -> bool:
        return account_ref.upper() in self.customers

    def get_customer(self, account_ref: str) -> AccountRecord | None:
        return self.customers.get(account_ref.upper())

    def find_customers(self, search: str, limit: int) -> list[AccountRecord]:
        return self._find_accounts(self.customers, search, limit)

    def create_customer(self, account: AccountRecord) -> bool:
        if not self._create_account(self.customers, account):
            return False
        ref = account.account_ref.upper()
        if account.address1:
            self.addresses[ref] = [DeliveryAddress(
                name=account.name,
                address1=account.address1,
                address2=account.address2,
                address3=account.address3,
                postcode=account.postcode,
                contact_name=account.contact_name,
                telephone=account.telephone,
            )]
        return True

    def get_customer_addresses(self, account_ref: str) -> list[DeliveryAddress]:
        return list(self.addresses.get(account_ref.upper(), []))

    def supplier_exists(self, account_ref: str) -> bool:
        return account_ref.upper() in self.suppliers

    def get_supplier(self, account_ref: str) -> AccountRecord | None:
        return self.suppliers.get(account_ref.upper())

    def find_suppliers(self, search: str, limit: int) -> list[AccountRecord]:
        return self._find_accounts(self.suppliers, search, limit)

    def create_supplier(self, account: AccountRecord) -> bool:
        return self._create_account(self.suppliers, account)

    @staticmethod
    def _find_accounts(
        ledger: dict[str, AccountRecord], search: str, limit: int,
    ) -> list[AccountRecord]:
        term = search.strip().lower()
        matches = [
            a for a in ledger.values()
            if not term or term in a.account_ref.lower() or term in a.name.lower()
        ]
        return matches[:limit]

    @staticmethod
    def _create_account(ledger: dict[str, AccountRecord], account: AccountRecord) -> bool:
        ref = account.account_ref.upper()
        if not ref or ref in ledger:
            return False
        ledger[ref] = account.model_copy(update={"account_ref": ref})
        return True

    # ─── Sales & purchase postings ──────────────────────────────

    def post_sales_invoice(
        self, account_ref, reference, net_amount, tax_amount, nominal_code, details, tax_code,
    ) -> bool:
        return self._post_account_document(
            self.customers, "SI", account_ref, reference, net_amount, tax_amount,
            nominal_code, details, tax_code, sign=1,
        )

    def post_sales_credit(
        self, account_ref, reference, net_amount, tax_amount, nominal_code, details, tax_code,
    ) -> bool:
        return self._post_account_document(
            self.customers, "SC", account_ref, reference, net_amount, tax_amount,
            nominal_code, details, tax_code, sign=-1,
        )

    def post_sales_receipt(self, account_ref, reference, amount, bank_nominal, details) -> bool:
        return self._post_account_settlement(
            self.customers, "SR", account_ref, reference, amount, bank_nominal, details,
        )

    def post_purchase_invoice(
        self, account_ref, reference, net_amount, tax_amount, nominal_code, details, tax_code,
    ) -> bool:
        return self._post_account_document(
            self.suppliers, "PI", account_ref, reference, net_amount, tax_amount,
            nominal_code, details, tax_code, sign=1,
        )

    def post_purchase_credit(
        self, account_ref, reference, net_amount, tax_amount, nominal_code, details, tax_code,
    ) -> bool:
        return self._post_account_document(
            self.suppliers, "PC", account_ref, reference, net_amount, tax_amount,
            nominal_code, details, tax_code, sign=-1,
        )

    def post_purchase_payment(self, account_ref, reference, amount, bank_nominal, details) -> bool:
        return self._post_account_settlement(
            self.suppliers, "PP", account_ref, reference, amount, bank_nominal, details,
        )

    def _post_account_document(
        self, ledger, tran_type, account_ref, reference, net_amount, tax_amount,
        nominal_code, details, tax_code, sign,
    ) -> bool:
        account = ledger.get(account_ref.upper())
        if account is None:
            return False
        self._require_nominal(nominal_code)
        self._require_tax_code(tax_code)

        gross = net_amount + tax_amount
        account.balance += sign * gross
        is_sales = tran_type.startswith("S")
        control = DEBTORS_CONTROL if is_sales else CREDITORS_CONTROL
        tax_control = SALES_TAX_CONTROL if is_sales else PURCHASE_TAX_CONTROL
        # Sales credit the income nominal, purchases debit the cost nominal
        direction = -sign if is_sales else sign
        self._adjust_nominal(nominal_code, direction * net_amount)
        self._adjust_nominal(tax_control, direction * tax_amount)
        self._adjust_nominal(control, -direction * gross)

        self._record(
            tran_type, account.account_ref, reference, details, nominal_code, tax_code,
            net_amount, tax_amount, outstanding=gross,
        )
        return True

    def _post_account_settlement(
        self, ledger, tran_type, account_ref, reference, amount, bank_nominal, details,
    ) -> bool:
        account = ledger.get(account_ref.upper())
        if account is None:
            return False
        self._require_nominal(bank_nominal)

        account.balance -= amount
        is_sales = tran_type == "SR"
        self._adjust_nominal(bank_nominal, amount if is_sales else -amount)
        self._adjust_nominal(
            DEBTORS_CONTROL if is_sales else CREDITORS_CONTROL,
            -amount if is_sales else amount,
        )
        self._record(
            tran_type, account.account_ref, reference, details, bank_nominal, "T9",
            amount, 0.0, outstanding=amount,
        )
        return True

    # ─── Nominal ledger ─────────────────────────────────────────

    def get_nominal_codes(self, limit: int) -> list[NominalRecord]:
        return sorted(self.nominals.values(), key=lambda n: n.code)[:limit]

    def nominal_exists(self, code: str) -> bool:
        return code in self.nominals

    def create_nominal(self, code: str, name: str) -> bool:
        if code in self.nominals:
            return False
        self.nominals[code] = NominalRecord(code=code, name=name)
        return True

    # ─── Bank & journals ────────────────────────────────────────

    def post_bank_payment(
        self, bank_nominal, expense_nominal, net_amount, reference, details, tax_code,
    ) -> bool:
        return self._post_bank_entry(
            "BP", bank_nominal, expense_nominal, net_amount, reference, details, tax_code,
        )

    def post_bank_receipt(
        self, bank_nominal, income_nominal, net_amount, reference, details, tax_code,
    ) -> bool:
        return self._post_bank_entry(
            "BR", bank_nominal, income_nominal, net_amount, reference, details, tax_code,
        )

    def _post_bank_entry(
        self, tran_type, bank_nominal, other_nominal, net_amount, reference, details, tax_code,
    ) -> bool:
        self._require_nominal(bank_nominal)
        self._require_nominal(other_nominal)
        rate = self._require_tax_code(tax_code).rate
        tax_amount = round(net_amount * rate / 100, 2)
        gross = net_amount + tax_amount

        if tran_type == "BP":
            self._adjust_nominal(bank_nominal, -gross)
            self._adjust_nominal(other_nominal, net_amount)
            self._adjust_nominal(PURCHASE_TAX_CONTROL, tax_amount)
        else:
            self._adjust_nominal(bank_nominal, gross)
            self._adjust_nominal(other_nominal, -net_amount)
            self._adjust_nominal(SALES_TAX_CONTROL, -tax_amount)

        self._record(
            tran_type, "", reference, details, other_nominal, tax_code,
            net_amount, tax_amount,
        )
        return True

    def post_journal(
        self, lines: list[JournalLineRequest], reference: str, date: datetime | None,
    ) -> bool:
        total_debit = round(sum(line.debit for line in lines), 2)
        total_credit = round(sum(line.credit for line in lines), 2)
        if total_debit != total_credit:
            raise ValueError(
                f"Journal does not balance: debits {total_debit} != credits {total_credit}",
            )
        for line in lines:
            self._require_nominal(line.nominal_code)

        for line in lines:
            self._adjust_nominal(line.nominal_code, line.debit - line.credit)
            tran_type = "JD" if line.debit else "JC"
            self._record(
                tran_type, "", reference, line.details or "", line.nominal_code, "T9",
                line.debit or line.credit, 0.0, when=date,
            )
        return True

    def post_simple_journal(
        self, debit_nominal, credit_nominal, amount, reference, details, date,
    ) -> bool:
        if date is None:
            date = datetime.combine(self._clock().date(), datetime.min.time())
        return self.post_journal(
            [
                JournalLineRequest(nominal_code=debit_nominal, debit=amount, details=details),
                JournalLineRequest(nominal_code=credit_nominal, credit=amount, details=details),
            ],
            reference,
            date,
        )

    # ─── Products & stock ───────────────────────────────────────

    def get_products(self, search: str, limit: int) -> list[ProductRecord]:
        term = search.strip().lower()
        matches = [
            p for p in self.products.values()
            if not term or term in p.stock_code.lower() or term in p.description.lower()
        ]
        return matches[:limit]

    def get_product(self, stock_code: str) -> ProductRecord | None:
        return self.products.get(stock_code.upper())

    def create_product(self, request: CreateProductRequest) -> ProductRecord | None:
        code = (request.stock_code or "").strip().upper()
        if code in self.products:
            raise ValueError(f"Product already exists: {code}")
        product = ProductRecord(
            stock_code=code,
            description=request.description,
            sale_price=request.sale_price,
            cost_price=request.cost_price,
            nominal_code=request.nominal_code or "4000",
            tax_code=request.tax_code or "T1",
            unit_of_sale=request.unit_of_sale,
        )
        self.products[code] = product
        self.stock[code] = StockLevel(stock_code=code)
        return product

    def get_stock_level(self, stock_code: str) -> StockLevel | None:
        return self.stock.get(stock_code.upper())

    def post_stock_adjustment(
        self, stock_code, quantity, adjustment_type, reference, details, cost_price,
    ) -> bool:
        code = stock_code.upper()
        product = self.products.get(code)
        if product is None:
            return False
        kind = adjustment_type.strip().lower()
        if kind not in ("in", "out"):
            raise ValueError(f"Unknown adjustment type: {adjustment_type}")
        delta = quantity if kind == "in" else -quantity

        level = self.stock[code]
        level.quantity_in_stock += delta
        product.quantity_in_stock = level.quantity_in_stock
        if cost_price is not None and kind == "in":
            product.cost_price = cost_price

        self._record(
            "AI" if kind == "in" else "AO", "", reference, details, "1001", "T9",
            abs(quantity) * (cost_price if cost_price is not None else product.cost_price),
            0.0,
        )
        return True

    # ─── Orders ─────────────────────────────────────────────────

    def get_sales_orders(self, search: str, limit: int) -> list[OrderRecord]:
        return self._find_orders(self.sales_orders, search, limit)

    def get_sales_order(self, order_number: str) -> OrderRecord | None:
        return self.sales_orders.get(order_number.upper())

    def create_sales_order(self, request: CreateSalesOrderRequest) -> OrderRecord | None:
        if not self.customer_exists(request.customer_account_ref or ""):
            return None
        return self._create_order(self.sales_orders, request.customer_account_ref, request)

    def update_sales_order(self, order_number: str, request: UpdateOrderRequest) -> bool:
        return self._update_order(self.sales_orders, order_number, request)

    def delete_sales_order(self, order_number: str) -> bool:
        return self.sales_orders.pop(order_number.upper(), None) is not None

    def complete_sales_order(self, order_number: str) -> bool:
        return self._complete_order(self.sales_orders, order_number)

    def get_purchase_orders(self, search: str, limit: int) -> list[OrderRecord]:
        return self._find_orders(self.purchase_orders, search, limit)

    def get_purchase_order(self, order_number: str) -> OrderRecord | None:
        return self.purchase_orders.get(order_number.upper())

    def create_purchase_order(self, request: CreatePurchaseOrderRequest) -> OrderRecord | None:
        if not self.supplier_exists(request.supplier_account or ""):
            return None
        return self._create_order(self.purchase_orders, request.supplier_account, request)

    def update_purchase_order(self, order_number: str, request: UpdateOrderRequest) -> bool:
        return self._update_order(self.purchase_orders, order_number, request)

    def delete_purchase_order(self, order_number: str) -> bool:
        return self.purchase_orders.pop(order_number.upper(), None) is not None

    def complete_purchase_order(self, order_number: str) -> bool:
        return self._complete_order(self.purchase_orders, order_number)

    @staticmethod
    def _find_orders(book: dict[str, OrderRecord], search: str, limit: int) -> list[OrderRecord]:
        term = search.strip().lower()
        matches = [
            o for o in book.values()
            if not term
            or term in o.order_number.lower()
            or term in o.account_ref.lower()
            or term in o.reference.lower()
        ]
        return matches[:limit]

    def _order_lines(self, lines: list[OrderLineRequest]) -> tuple[list[OrderLine], float, float]:
        built, net_total, tax_total = [], 0.0, 0.0
        for line in lines:
            tax_code = line.tax_code or "T1"
            rate = self._require_tax_code(tax_code).rate
            net = round(line.quantity * line.unit_price, 2)
            built.append(OrderLine(
                stock_code=line.stock_code,
                description=line.description,
                quantity=line.quantity,
                unit_price=line.unit_price,
                net_amount=net,
                tax_code=tax_code,
            ))
            net_total += net
            tax_total += round(net * rate / 100, 2)
        return built, round(net_total, 2), round(tax_total, 2)

    def _create_order(self, book, account_ref, request) -> OrderRecord:
        lines, net, tax = self._order_lines(request.lines)
        number = str(self._next_order_number)
        self._next_order_number += 1
        order = OrderRecord(
            order_number=number,
            account_ref=account_ref.upper(),
            order_date=request.order_date or self._clock().date(),
            reference=request.reference or "",
            notes=request.notes or "",
            lines=lines,
            net_amount=net,
            tax_amount=tax,
        )
        book[number] = order
        return order

    def _update_order(self, book, order_number: str, request: UpdateOrderRequest) -> bool:
        order = book.get(order_number.upper())
        if order is None or order.status == "completed":
            return False
        if request.reference is not None:
            order.reference = request.reference
        if request.notes is not None:
            order.notes = request.notes
        if request.order_date is not None:
            order.order_date = request.order_date
        if request.lines is not None:
            order.lines, order.net_amount, order.tax_amount = self._order_lines(request.lines)
        return True

    @staticmethod
    def _complete_order(book, order_number: str) -> bool:
        order = book.get(order_number.upper())
        if order is None or order.status == "completed":
            return False
        order.status = "completed"
        return True

    # ─── Ledger queries ─────────────────────────────────────────

    def search_sales_ledger(self, account_ref, date_from, date_to, limit) -> list[LedgerTransaction]:
        return self._search(SALES_LEDGER_TYPES, account_ref, date_from, date_to, limit)

    def search_purchase_ledger(self, account_ref, date_from, date_to, limit) -> list[LedgerTransaction]:
        return self._search(PURCHASE_LEDGER_TYPES, account_ref, date_from, date_to, limit)

    def get_transactions(self, type_filter, date_from, date_to, limit) -> list[LedgerTransaction]:
        types = (type_filter.strip().upper(),) if type_filter.strip() else None
        return self._search(types, "", date_from, date_to, limit)

    def _search(self, types, account_ref, date_from, date_to, limit) -> list[LedgerTransaction]:
        account = account_ref.strip().upper()
        date_from, date_to = _naive(date_from), _naive(date_to)
        results = []
        for tran in self.transactions:
            if types is not None and tran.type not in types:
                continue
            if account and tran.account_ref != account:
                continue
            if date_from is not None and tran.date < date_from:
                continue
            if date_to is not None and tran.date > date_to:
                continue
            results.append(tran)
        return results[:limit]

    def get_aged_debtors(self, limit: int) -> list[AgedBalance]:
        return self._aged(self.customers, ("SI",), limit)

    def get_aged_creditors(self, limit: int) -> list[AgedBalance]:
        return self._aged(self.suppliers, ("PI",), limit)

    def _aged(self, ledger, invoice_types, limit) -> list[AgedBalance]:
        today = self._clock()
        aged = []
        for account in ledger.values():
            if not account.balance:
                continue
            row = AgedBalance(
                account_ref=account.account_ref, name=account.name, balance=account.balance,
            )
            for tran in self.transactions:
                if tran.account_ref != account.account_ref or tran.type not in invoice_types:
                    continue
                age = (today - tran.date).days
                bucket = next((name for days, name in _AGE_BUCKETS if age < days), "older")
                setattr(row, bucket, getattr(row, bucket) + tran.outstanding)
            aged.append(row)
        return aged[:limit]

    def allocate_payment(
        self, account_ref, payment_reference, invoice_reference, amount,
    ) -> bool:
        account = account_ref.strip().upper()
        payment = self._find_open(("SR", "PP"), account, payment_reference)
        invoice = self._find_open(("SI", "PI"), account, invoice_reference)
        if payment is None or invoice is None:
            return False
        if payment.type[0] != invoice.type[0]:
            return False
        allocated = min(amount if amount > 0 else payment.outstanding,
                        payment.outstanding, invoice.outstanding)
        payment.outstanding = round(payment.outstanding - allocated, 2)
        invoice.outstanding = round(invoice.outstanding - allocated, 2)
        return True

    def _find_open(self, types, account_ref, reference) -> LedgerTransaction | None:
        for tran in self.transactions:
            if tran.type in types and tran.reference == reference and tran.outstanding > 0:
                if not account_ref or tran.account_ref == account_ref:
                    return tran
        return None

    # ─── Projects ───────────────────────────────────────────────

    def get_projects(self, search: str, limit: int) -> list[ProjectRecord]:
        return self.search_projects(search, "", limit)

    def get_project(self, project_ref: str) -> ProjectRecord | None:
        return self.projects.get(project_ref.upper())

    def create_project(self, request: CreateProjectRequest) -> ProjectRecord | None:
        ref = (request.project_ref or "").strip().upper()
        if ref in self.projects:
            raise ValueError(f"Project already exists: {ref}")
        project = ProjectRecord(
            project_ref=ref,
            name=request.name,
            description=request.description,
            customer_account_ref=(request.customer_account_ref or "").upper(),
            status=request.status,
            start_date=request.start_date,
            end_date=request.end_date,
        )
        self.projects[ref] = project
        self.cost_codes[ref] = [
            ProjectCostCode(project_ref=ref, cost_code=code, description=description)
            for code, description in _DEFAULT_COST_CODES.items()
        ]
        return project

    def get_project_cost_codes(self, project_ref: str, limit: int) -> list[ProjectCostCode]:
        ref = project_ref.strip().upper()
        if ref:
            codes = self.cost_codes.get(ref, [])
        else:
            codes = [c for codes in self.cost_codes.values() for c in codes]
        return codes[:limit]

    def search_projects(self, search: str, status: str, limit: int) -> list[ProjectRecord]:
        term = search.strip().lower()
        wanted_status = status.strip().lower()
        matches = [
            p for p in self.projects.values()
            if (not term or term in p.project_ref.lower() or term in p.name.lower())
            and (not wanted_status or p.status.lower() == wanted_status)
        ]
        return matches[:limit]

    # ─── Internals ──────────────────────────────────────────────

    def _require_nominal(self, code: str) -> NominalRecord:
        nominal = self.nominals.get(code)
        if nominal is None:
            raise ValueError(f"Nominal code not found: {code}")
        return nominal

    def _require_tax_code(self, code: str) -> TaxCode:
        tax = self.tax_codes.get(code)
        if tax is None:
            raise ValueError(f"Tax code not found: {code}")
        return tax

    def _adjust_nominal(self, code: str, amount: float) -> None:
        nominal = self._require_nominal(code)
        nominal.balance = round(nominal.balance + amount, 2)

    def _record(
        self, tran_type, account_ref, reference, details, nominal_code, tax_code,
        net_amount, tax_amount, outstanding=0.0, when=None,
    ) -> LedgerTransaction:
        tran = LedgerTransaction(
            tran_number=len(self.transactions) + 1,
            type=tran_type,
            account_ref=account_ref,
            reference=reference,
            date=_naive(when) or self._clock(),
            details=details,
            nominal_code=nominal_code,
            tax_code=tax_code,
            net_amount=net_amount,
            tax_amount=tax_amount,
            outstanding=outstanding,
        )
        self.transactions.append(tran)
        return tran
