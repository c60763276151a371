"""In-process cache metrics."""

import threading
from dataclasses import dataclass, field


@dataclass
class CacheMetrics:
    """Monotonic hit/miss/error counters, reset only on request."""

    hits: int = 0
    misses: int = 0
    errors: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record(self, counter: str, amount: int = 1) -> None:
        with self._lock:
            setattr(self, counter, getattr(self, counter) + amount)

    def snapshot(self) -> dict[str, int]:
        with self._lock:
            return {"hits": self.hits, "misses": self.misses, "errors": self.errors}

    def reset(self) -> None:
        with self._lock:
            self.hits = self.misses = self.errors = 0
