"""Posting Defaults — documented fallback values for optional request fields.

Invariants:
    - One PostingDefaults entry per PostingKind; single endpoints and batch items
      read the same table
    - Fields that do not apply to an operation are None
"""

from dataclasses import dataclass

from ledger_bridge.core.domain_types import PostingKind


@dataclass(frozen=True)
class PostingDefaults:
    reference_prefix: str
    details: str
    nominal_code: str | None = None
    tax_code: str | None = None
    bank_nominal: str | None = None


DEFAULT_BANK_NOMINAL = "1200"
SALES_NOMINAL = "4000"
PURCHASE_NOMINAL = "5000"
EXPENSE_NOMINAL = "7500"
STANDARD_TAX_CODE = "T1"
ZERO_TAX_CODE = "T0"

POSTING_DEFAULTS: dict[PostingKind, PostingDefaults] = {
    PostingKind.SALES_INVOICE: PostingDefaults(
        "SI", "Posted via API", SALES_NOMINAL, STANDARD_TAX_CODE,
    ),
    PostingKind.SALES_CREDIT: PostingDefaults(
        "SC", "Credit note via API", SALES_NOMINAL, STANDARD_TAX_CODE,
    ),
    PostingKind.SALES_RECEIPT: PostingDefaults(
        "SR", "Receipt via API", bank_nominal=DEFAULT_BANK_NOMINAL,
    ),
    PostingKind.PURCHASE_INVOICE: PostingDefaults(
        "PI", "Posted via API", PURCHASE_NOMINAL, STANDARD_TAX_CODE,
    ),
    PostingKind.PURCHASE_CREDIT: PostingDefaults(
        "PC", "Credit note via API", PURCHASE_NOMINAL, STANDARD_TAX_CODE,
    ),
    PostingKind.PURCHASE_PAYMENT: PostingDefaults(
        "PP", "Payment via API", bank_nominal=DEFAULT_BANK_NOMINAL,
    ),
    PostingKind.BANK_PAYMENT: PostingDefaults(
        "BP", "Bank payment via API", EXPENSE_NOMINAL, ZERO_TAX_CODE,
        DEFAULT_BANK_NOMINAL,
    ),
    PostingKind.BANK_RECEIPT: PostingDefaults(
        "BR", "Bank receipt via API", SALES_NOMINAL, STANDARD_TAX_CODE,
        DEFAULT_BANK_NOMINAL,
    ),
    PostingKind.JOURNAL: PostingDefaults("JNL", "Journal via API"),
    PostingKind.STOCK_ADJUSTMENT: PostingDefaults("ADJ", "Stock adjustment via API"),
}


def defaults_for(kind: PostingKind) -> PostingDefaults:
    return POSTING_DEFAULTS[kind]


def or_default(value: str | None, default: str | None) -> str | None:
    """Absent or blank optional code falls back to the default."""
    if value is None or not value.strip():
        return default
    return value


# ─── Query Limits ───────────────────────────────────────────────

LIST_LIMIT = 50            # customers, suppliers, products, orders, projects
LEDGER_LIMIT = 100         # nominals, ledgers, aged lists, transactions, cost codes
CHART_OF_ACCOUNTS_LIMIT = 500
