"""Provisioning Policy — make sure a customer/supplier account exists before posting.

Invariants:
    - One state machine for both account kinds:
      CheckExists -> Proceed | Fail-NotFound | AutoCreate -> Proceed | Fail-Provisioning
    - auto_create=False on a missing account never calls create (404)
    - A rejected auto-create raises ProvisioningError (400); the caller's dependent
      operation never runs
    - The reference is normalized (uppercase, <= 8 chars) before the existence check

Design Decisions:
    - Engine operation names looked up from an explicit per-kind table, so customer
      and supplier call sites share every line of the policy
    - An existence check that itself fails is a DownstreamError, not "not found"
"""

import logging
from dataclasses import dataclass

from ledger_bridge.core.decoding import normalize_account_ref
from ledger_bridge.core.domain_types import AccountKind, AccountRef, ProvisioningOutcome
from ledger_bridge.core.errors import DownstreamError, ProvisioningError, ResourceNotFoundError
from ledger_bridge.infrastructure.engine_session import EngineSession
from ledger_bridge.schemas.records import AccountRecord

logger = logging.getLogger(__name__)

PLACEHOLDER_ADDRESS = "Auto-created via API"


@dataclass(frozen=True)
class _KindOperations:
    exists: str
    create: str


_OPERATIONS = {
    AccountKind.CUSTOMER: _KindOperations("customer_exists", "create_customer"),
    AccountKind.SUPPLIER: _KindOperations("supplier_exists", "create_supplier"),
}


def placeholder_account(account_ref: AccountRef) -> AccountRecord:
    return AccountRecord(
        account_ref=account_ref,
        name=f"Auto-created {account_ref}",
        address1=PLACEHOLDER_ADDRESS,
    )


async def account_exists(
    engine: EngineSession, kind: AccountKind, account_ref: AccountRef,
) -> bool:
    result = await engine.call(_OPERATIONS[kind].exists, account_ref)
    if not result.ok:
        raise DownstreamError(
            f"Failed to check {kind.value} exists: {account_ref}", result.error,
        )
    return bool(result.value)


async def ensure_account(
    engine: EngineSession,
    kind: AccountKind,
    account_ref: str | None,
    auto_create: bool,
    field: str = "accountRef",
) -> tuple[AccountRef, ProvisioningOutcome]:
    """Run the provisioning policy. Returns the normalized ref and how it was satisfied.

    Raises InvalidRequestError for a bad reference, ResourceNotFoundError when the
    account is missing and auto_create is off, ProvisioningError when creation fails.
    """
    ref = normalize_account_ref(account_ref, field)

    if await account_exists(engine, kind, ref):
        return ref, ProvisioningOutcome.EXISTING

    if not auto_create:
        raise ResourceNotFoundError(
            kind.label, ref, hint=f"Set {kind.auto_create_flag}=true to create.",
        )

    result = await engine.call(_OPERATIONS[kind].create, placeholder_account(ref))
    if not result.posted:
        logger.warning(
            f"Auto-create of {kind.value} rejected by engine: {result.error}",
            extra={"account_ref": ref},
        )
        raise ProvisioningError(kind.value, ref, result.error)

    logger.info(f"Auto-created {kind.value}", extra={"account_ref": ref})
    return ref, ProvisioningOutcome.CREATED


async def require_account(
    engine: EngineSession, kind: AccountKind, account_ref: str | None,
    field: str = "accountRef",
) -> AccountRef:
    """Existence check without auto-create and without the flag hint."""
    ref = normalize_account_ref(account_ref, field)
    if not await account_exists(engine, kind, ref):
        raise ResourceNotFoundError(kind.label, ref)
    return ref
