"""Thread-safe TTL cache for weather lookups."""
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

DEFAULT_TTL_SECONDS = 3 * 60 * 60
DEFAULT_SWEEP_INTERVAL_SECONDS = 10 * 60

CacheKey = Tuple[Hashable, ...]


def make_key(location: str, kind: str, *extra: Hashable) -> CacheKey:
    """Build a cache key from a location, a query kind ("current"/"forecast") and extra params."""
    return (location.strip().lower(), kind) + tuple(extra)


@dataclass(frozen=True)
class CacheEntry:
    key: CacheKey
    value: Any
    inserted_at: float


class WeatherCache:
    """
    In-memory cache with a fixed time-to-live per entry.

    Expiry is checked on every read, so an expired value is never returned.
    The optional background sweeper only bounds memory held by entries that
    are never read again.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        sweep_interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize the cache.

        Args:
            ttl_seconds: Lifetime of an entry measured from insertion
            sweep_interval_seconds: Period of the background sweep
            clock: Monotonic time source (injectable for tests)
        """
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self.sweep_interval_seconds = sweep_interval_seconds
        self._clock = clock
        self._entries: Dict[CacheKey, CacheEntry] = {}
        self._lock = threading.Lock()
        self._load_locks: Dict[CacheKey, threading.Lock] = {}
        self._hits = 0
        self._misses = 0
        self._stop_event = threading.Event()
        self._sweeper: Optional[threading.Thread] = None

    def _expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.inserted_at >= self.ttl_seconds

    def get(self, key: CacheKey) -> Optional[Any]:
        """Return the cached value, or None on a miss (absent or expired)."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and self._expired(entry, self._clock()):
                del self._entries[key]
                logging.debug(f"Cache entry expired: {key}")
                entry = None
            if entry is None:
                self._misses += 1
                return None
            self._hits += 1
            return entry.value

    def put(self, key: CacheKey, value: Any) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(key=key, value=value, inserted_at=self._clock())

    def get_or_load(self, key: CacheKey, loader: Callable[[], Any]) -> Any:
        """
        Return the cached value, calling loader() to fill a miss.

        Concurrent misses on the same key run the loader once; the other
        callers wait and are served the stored value. A loader exception
        propagates and nothing is stored, so the next caller loads again.
        """
        with self._lock:
            load_lock = self._load_locks.setdefault(key, threading.Lock())
        with load_lock:
            value = self.get(key)
            if value is not None:
                return value
            value = loader()
            self.put(key, value)
            return value

    def sweep(self) -> int:
        """Evict every expired entry. Returns the number removed."""
        with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._entries.items() if self._expired(entry, now)]
            for key in expired:
                del self._entries[key]
                load_lock = self._load_locks.get(key)
                if load_lock is not None and not load_lock.locked():
                    del self._load_locks[key]
        if expired:
            logging.debug(f"Cache sweep evicted {len(expired)} entries")
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._load_locks.clear()

    def stats(self) -> Dict[str, int]:
        """Active key count and hit/miss counters."""
        with self._lock:
            return {"keys": len(self._entries), "hits": self._hits, "misses": self._misses}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def start_sweeper(self) -> None:
        """Start the periodic sweep in a daemon thread (no-op if already running)."""
        if self._sweeper is not None and self._sweeper.is_alive():
            return
        self._stop_event.clear()
        self._sweeper = threading.Thread(target=self._sweep_loop, name="weather-cache-sweeper", daemon=True)
        self._sweeper.start()
        logging.info(f"Cache sweeper started (interval={self.sweep_interval_seconds}s, ttl={self.ttl_seconds}s)")

    def stop(self) -> None:
        self._stop_event.set()
        if self._sweeper is not None:
            self._sweeper.join(timeout=self.sweep_interval_seconds)
            self._sweeper = None

    def _sweep_loop(self) -> None:
        while not self._stop_event.wait(self.sweep_interval_seconds):
            self.sweep()
