"""Engine Session — the single process-wide handle to the accounting engine.

Invariants:
    - At most one engine call is in flight at any time (one asyncio.Lock for all callers)
    - Engine calls run in a worker thread; the event loop keeps accepting requests
    - The lock is released only when the engine call actually returns, even when the
      awaiting request gave up on it (timeout or client disconnect)
    - Engine exceptions become EngineResult(ok=False); only a deadline overrun
      raises (EngineTimeoutError). Return values pass through untouched, so a
      False from an existence check stays a successful "no"

Design Decisions:
    - Owned by the FastAPI lifespan and passed to handlers through RequestContext;
      lifetime = process lifetime
    - Timeout via wait_for(shield(task)): the abandoned thread cannot be killed, so
      the request fails fast while the engine stays serialized
"""

import asyncio
import importlib
import logging
from typing import Any

from ledger_bridge.config import Settings
from ledger_bridge.core.engine_protocol import AccountingEngine, EngineResult
from ledger_bridge.core.errors import EngineTimeoutError

logger = logging.getLogger(__name__)


class EngineSession:
    """Serializes every call into a shared AccountingEngine."""

    def __init__(
        self, engine: AccountingEngine, call_timeout_seconds: float | None = None,
    ):
        self._engine = engine
        self._lock = asyncio.Lock()
        self.call_timeout_seconds = call_timeout_seconds or None

    @property
    def engine(self) -> AccountingEngine:
        return self._engine

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def call(self, operation: str, *args: Any, **kwargs: Any) -> EngineResult:
        """Invoke engine.<operation>(*args, **kwargs) under the engine lock."""
        method = getattr(self._engine, operation)
        await self._lock.acquire()
        try:
            task = asyncio.ensure_future(asyncio.to_thread(method, *args, **kwargs))
        except BaseException:
            self._lock.release()
            raise
        task.add_done_callback(self._on_call_done)

        try:
            value = await asyncio.wait_for(
                asyncio.shield(task), self.call_timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            if not task.done():
                logger.error(
                    f"Engine call exceeded {self.call_timeout_seconds}s",
                    extra={"operation": operation},
                )
                raise EngineTimeoutError(
                    operation, self.call_timeout_seconds or 0,
                ) from e
            return self._engine_failure(operation, e)
        except Exception as e:
            return self._engine_failure(operation, e)

        return EngineResult.success(value)

    async def close(self) -> None:
        result = await self.call("close")
        if not result.ok:
            logger.warning(f"Engine close failed: {result.error}")

    def _on_call_done(self, task: asyncio.Future) -> None:
        self._lock.release()
        # Mark the exception as retrieved for calls nobody awaits any more
        if not task.cancelled():
            task.exception()

    @staticmethod
    def _engine_failure(operation: str, exc: Exception) -> EngineResult:
        logger.warning(
            f"Engine call failed: {exc}", extra={"operation": operation},
        )
        return EngineResult.failure(str(exc) or exc.__class__.__name__)


def build_engine(settings: Settings) -> AccountingEngine:
    """Create the engine named by settings.engine_backend.

    "memory" selects the in-process sandbox; anything else is a
    "package.module:factory" path called as factory(data_path, username, password).
    """
    if settings.engine_backend == "memory":
        from ledger_bridge.infrastructure.memory_engine import MemoryEngine
        return MemoryEngine()

    module_name, _, factory_name = settings.engine_backend.partition(":")
    if not factory_name:
        raise ValueError(
            f"engine_backend must be 'memory' or 'module:factory', "
            f"got {settings.engine_backend!r}",
        )
    factory = getattr(importlib.import_module(module_name), factory_name)
    logger.info(f"Connecting accounting engine via {settings.engine_backend}")
    return factory(
        settings.engine_data_path, settings.engine_username,
        settings.engine_password,
    )
