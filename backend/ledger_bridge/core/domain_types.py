"""Domain Types — enums and value types shared across core and services.

Invariants:
    - AccountKind is the only way code distinguishes customer from supplier flows
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
    - AccountKind carries its own wire vocabulary (labels, flag name) so that
      messages are produced in one place
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

AccountRef = NewType("AccountRef", str)   # uppercase, 1–8 chars

MAX_ACCOUNT_REF_LENGTH = 8


# ─── Enums ───────────────────────────────────────────────────────

class AccountKind(str, Enum):
    """Ledger account families that support auto-provisioning."""
    CUSTOMER = "customer"
    SUPPLIER = "supplier"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def auto_create_flag(self) -> str:
        return f"autoCreate{self.label}"


class ProvisioningOutcome(str, Enum):
    """Terminal success states of the provisioning policy."""
    EXISTING = "existing"
    CREATED = "created"


class PostingKind(str, Enum):
    """Posting operations that share defaulting rules."""
    SALES_INVOICE = "sales_invoice"
    SALES_CREDIT = "sales_credit"
    SALES_RECEIPT = "sales_receipt"
    PURCHASE_INVOICE = "purchase_invoice"
    PURCHASE_CREDIT = "purchase_credit"
    PURCHASE_PAYMENT = "purchase_payment"
    BANK_PAYMENT = "bank_payment"
    BANK_RECEIPT = "bank_receipt"
    JOURNAL = "journal"
    STOCK_ADJUSTMENT = "stock_adjustment"
