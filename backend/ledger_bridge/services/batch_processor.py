"""Batch Processor — posts a heterogeneous transaction list with per-item isolation.

Invariants:
    - Items are processed sequentially in input order; no fan-out
    - Every item yields exactly one result, in input order:
      success_count + fail_count == len(items)
    - Type tags resolve case-insensitively through an explicit table
    - Unknown tag -> failed result "Unknown transaction type: {tag}", no engine call
    - Any exception inside one item becomes that item's failure message; the
      batch always completes

Design Decisions:
    - Explicit dict over getattr: every type -> handler mapping visible in one place
    - Two handler shapes (account ledger entry, bank entry) parameterized by a
      PostingRule instead of one method per tag
"""

import logging
from dataclasses import dataclass, field

from ledger_bridge.core.decoding import normalize_account_ref
from ledger_bridge.core.defaults import defaults_for, or_default
from ledger_bridge.core.domain_types import PostingKind
from ledger_bridge.core.references import ReferenceGenerator
from ledger_bridge.infrastructure.engine_session import EngineSession
from ledger_bridge.schemas.requests import TransactionItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PostingRule:
    kind: PostingKind
    operation: str
    label: str


@dataclass(frozen=True)
class BatchItemResult:
    success: bool
    reference: str | None
    message: str

    def to_payload(self) -> dict:
        return {
            "success": self.success,
            "reference": self.reference,
            "message": self.message,
        }


@dataclass
class BatchResult:
    success_count: int = 0
    fail_count: int = 0
    results: list[BatchItemResult] = field(default_factory=list)

    def record(self, item_result: BatchItemResult) -> None:
        if item_result.success:
            self.success_count += 1
        else:
            self.fail_count += 1
        self.results.append(item_result)

    def to_payload(self) -> dict:
        return {
            "successCount": self.success_count,
            "failCount": self.fail_count,
            "results": [r.to_payload() for r in self.results],
        }


class BatchProcessor:
    """Routes each batch item's type tag to a posting handler."""

    def __init__(self, engine: EngineSession, references: ReferenceGenerator):
        self._engine = engine
        self._references = references

        # Supporting a new tag means adding an entry here
        self._handlers = {
            "SI": (self._post_ledger_entry, PostingRule(
                PostingKind.SALES_INVOICE, "post_sales_invoice", "Sales invoice")),
            "SC": (self._post_ledger_entry, PostingRule(
                PostingKind.SALES_CREDIT, "post_sales_credit", "Sales credit")),
            "PI": (self._post_ledger_entry, PostingRule(
                PostingKind.PURCHASE_INVOICE, "post_purchase_invoice", "Purchase invoice")),
            "PC": (self._post_ledger_entry, PostingRule(
                PostingKind.PURCHASE_CREDIT, "post_purchase_credit", "Purchase credit")),
            "BP": (self._post_bank_entry, PostingRule(
                PostingKind.BANK_PAYMENT, "post_bank_payment", "Bank payment")),
            "BR": (self._post_bank_entry, PostingRule(
                PostingKind.BANK_RECEIPT, "post_bank_receipt", "Bank receipt")),
        }

    @property
    def supported_types(self) -> list[str]:
        return list(self._handlers)

    async def process(self, items: list[TransactionItem]) -> BatchResult:
        batch = BatchResult()
        for item in items:
            batch.record(await self._process_item(item))
        logger.info(
            f"Batch processed: {batch.success_count} ok, {batch.fail_count} failed",
            extra={"item_count": len(items)},
        )
        return batch

    async def _process_item(self, item: TransactionItem) -> BatchItemResult:
        entry = self._handlers.get((item.type or "").upper())
        if entry is None:
            return BatchItemResult(
                False, item.reference, f"Unknown transaction type: {item.type or ''}",
            )
        handler, rule = entry
        try:
            return await handler(rule, item)
        except Exception as e:
            logger.warning(
                f"Batch item {rule.label.lower()} failed: {e}",
                extra={"reference": item.reference},
            )
            return BatchItemResult(
                False, item.reference, str(e) or e.__class__.__name__,
            )

    async def _post_ledger_entry(
        self, rule: PostingRule, item: TransactionItem,
    ) -> BatchItemResult:
        """SI/SC/PI/PC: customer or supplier ledger posting."""
        defaults = defaults_for(rule.kind)
        account_ref = normalize_account_ref(item.account_ref)
        reference = self._references.resolve(item.reference, defaults.reference_prefix)
        result = await self._engine.call(
            rule.operation,
            account_ref,
            reference,
            item.net_amount,
            item.tax_amount,
            or_default(item.nominal_code, defaults.nominal_code),
            item.details or "",
            or_default(item.tax_code, defaults.tax_code),
        )
        return self._to_item_result(rule, reference, result.posted, result.error)

    async def _post_bank_entry(
        self, rule: PostingRule, item: TransactionItem,
    ) -> BatchItemResult:
        """BP/BR: bank nominal against an expense or income nominal."""
        defaults = defaults_for(rule.kind)
        reference = self._references.resolve(item.reference, defaults.reference_prefix)
        result = await self._engine.call(
            rule.operation,
            or_default(item.bank_nominal, defaults.bank_nominal),
            or_default(item.nominal_code, defaults.nominal_code),
            item.net_amount,
            reference,
            item.details or "",
            or_default(item.tax_code, defaults.tax_code),
        )
        return self._to_item_result(rule, reference, result.posted, result.error)

    @staticmethod
    def _to_item_result(
        rule: PostingRule, reference: str, ok: bool, error: str | None,
    ) -> BatchItemResult:
        if ok:
            return BatchItemResult(True, reference, f"{rule.label} posted")
        return BatchItemResult(
            False, reference, error or f"Failed to post {rule.label.lower()}",
        )
