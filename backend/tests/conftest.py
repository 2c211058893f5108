"""Root conftest — shared engine, dispatcher and HTTP client fixtures.

Invariants:
    - Every test gets a fresh MemoryEngine; no state leaks between tests
    - Generated references use a fixed clock (2026-10-18 09:30:00)
    - The HTTP client talks to the real FastAPI app through ASGITransport with
      the test Dispatcher installed on app.state (lifespan is not run)
"""

import os
from datetime import datetime

import pytest
from httpx import ASGITransport, AsyncClient

# Ensure tests never reach for a real engine
os.environ.setdefault("ENGINE_BACKEND", "memory")
os.environ.setdefault("LOG_FORMAT", "text")

from ledger_bridge.api.dispatcher import Dispatcher  # noqa: E402
from ledger_bridge.api.route_table import ROUTE_TABLE  # noqa: E402
from ledger_bridge.config import get_settings  # noqa: E402
from ledger_bridge.core.references import ReferenceGenerator  # noqa: E402
from ledger_bridge.infrastructure.engine_session import EngineSession  # noqa: E402
from ledger_bridge.infrastructure.memory_engine import MemoryEngine  # noqa: E402
from ledger_bridge.main import app  # noqa: E402
from ledger_bridge.schemas.records import AccountRecord  # noqa: E402

FIXED_NOW = datetime(2026, 10, 18, 9, 30, 0)


@pytest.fixture
def memory_engine():
    return MemoryEngine(clock=lambda: FIXED_NOW)


@pytest.fixture
def engine_session(memory_engine):
    return EngineSession(memory_engine, call_timeout_seconds=5)


@pytest.fixture
def references():
    return ReferenceGenerator(clock=lambda: FIXED_NOW)


@pytest.fixture
def dispatcher(engine_session, references):
    return Dispatcher(ROUTE_TABLE, engine_session, references, get_settings())


@pytest.fixture
async def client(dispatcher):
    """FastAPI test client wired to the per-test dispatcher."""
    app.state.dispatcher = dispatcher
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
def customer(memory_engine):
    """Seed customer ACME01 with a delivery address."""
    memory_engine.create_customer(AccountRecord(
        account_ref="ACME01", name="Acme Widgets", address1="1 High Street",
    ))
    return memory_engine.get_customer("ACME01")


@pytest.fixture
def supplier(memory_engine):
    """Seed supplier PAPER01."""
    memory_engine.create_supplier(AccountRecord(account_ref="PAPER01", name="Paper Co"))
    return memory_engine.get_supplier("PAPER01")
