"""Reference Generator — timestamp-based references for postings without one.

Invariants:
    - Format is {prefix}-{yyyyMMddHHmmss} in local time
    - A reference is never issued twice by the same process: a repeat within the
      same second gets a -{n} suffix, n starting at 2
    - Thread-safe; the clock is injectable for tests
"""

import threading
from collections.abc import Callable
from datetime import datetime

TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


class ReferenceGenerator:
    """Issues {prefix}-{timestamp} references with a per-second collision guard."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self._clock = clock
        self._lock = threading.Lock()
        # prefix -> (timestamp, issued count in that second)
        self._last: dict[str, tuple[str, int]] = {}

    def next(self, prefix: str) -> str:
        stamp = self._clock().strftime(TIMESTAMP_FORMAT)
        with self._lock:
            last_stamp, count = self._last.get(prefix, ("", 0))
            count = count + 1 if last_stamp == stamp else 1
            self._last[prefix] = (stamp, count)
        base = f"{prefix}-{stamp}"
        return base if count == 1 else f"{base}-{count}"

    def resolve(self, supplied: str | None, prefix: str) -> str:
        """Use the caller's reference when present, otherwise generate one."""
        if supplied is not None and supplied.strip():
            return supplied
        return self.next(prefix)
