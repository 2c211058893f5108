"""Engine Session — tests for serialization, result mapping and the call deadline.

Tests cover:
    - At most one engine call in flight under concurrent callers
    - Exceptions -> EngineResult(ok=False) with the message
    - False and None pass through as successful values
    - Deadline overrun -> EngineTimeoutError; lock held until the thread returns
"""

import asyncio
import threading
import time

import pytest

from ledger_bridge.config import Settings
from ledger_bridge.core.errors import EngineTimeoutError
from ledger_bridge.infrastructure.engine_session import EngineSession


class _ProbeEngine:
    """Records how many calls overlap."""

    def __init__(self):
        self.active = 0
        self.max_active = 0
        self.release = threading.Event()
        self._guard = threading.Lock()

    def slow(self, value):
        with self._guard:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        time.sleep(0.02)
        with self._guard:
            self.active -= 1
        return value

    def blocked(self):
        self.release.wait(2.0)
        return "finished"

    def boom(self):
        raise RuntimeError("engine said no")

    def refuse(self):
        return False

    def absent(self):
        return None


@pytest.mark.asyncio
async def test_calls_are_serialized():
    engine = _ProbeEngine()
    session = EngineSession(engine)
    results = await asyncio.gather(*(session.call("slow", i) for i in range(6)))
    assert [r.value for r in results] == list(range(6))
    assert engine.max_active == 1


@pytest.mark.asyncio
async def test_exception_becomes_failure_result():
    session = EngineSession(_ProbeEngine())
    result = await session.call("boom")
    assert result.ok is False
    assert result.error == "engine said no"
    assert not session.busy


@pytest.mark.asyncio
async def test_false_is_a_successful_value_but_not_posted():
    session = EngineSession(_ProbeEngine())
    result = await session.call("refuse")
    assert result.ok is True
    assert result.value is False
    assert result.posted is False


@pytest.mark.asyncio
async def test_none_means_absent():
    session = EngineSession(_ProbeEngine())
    result = await session.call("absent")
    assert result.ok and result.value is None


@pytest.mark.asyncio
async def test_timeout_raises_and_keeps_lock_until_call_returns():
    engine = _ProbeEngine()
    session = EngineSession(engine, call_timeout_seconds=0.05)

    with pytest.raises(EngineTimeoutError) as exc_info:
        await session.call("blocked")
    assert exc_info.value.http_status == 504
    assert exc_info.value.operation == "blocked"
    assert session.busy

    engine.release.set()
    result = await session.call("slow", "next")
    assert result.value == "next"


@pytest.mark.asyncio
async def test_close_delegates_to_engine(memory_engine, engine_session):
    await engine_session.close()
    assert memory_engine.is_connected() is False


def test_non_positive_timeout_disables_deadline():
    assert Settings(engine_call_timeout_seconds=0).engine_call_timeout_seconds is None
    assert Settings(engine_call_timeout_seconds=2.5).engine_call_timeout_seconds == 2.5
