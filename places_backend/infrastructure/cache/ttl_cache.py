"""Bounded in-process cache with per-entry expiry."""
import threading
from collections import OrderedDict
from datetime import datetime
from typing import Callable, Generic, Optional, Protocol, TypeVar

from places_backend.utils.time_utils import utc_now


class ExpiringEntry(Protocol):
    expires_at: datetime


E = TypeVar("E", bound=ExpiringEntry)


class BoundedTTLCache(Generic[E]):
    """LRU map of key -> entry where each entry carries its own `expires_at`.

    An entry is valid iff `now < expires_at`. Expired entries are dropped when
    read, never swept in the background. Inserting into a full cache evicts the
    least recently used key. All operations take a lock so worker threads can
    share one instance.
    """

    def __init__(self, max_size: int, clock: Callable[[], datetime] = utc_now):
        if max_size < 1:
            raise ValueError(f"max_size must be positive, got {max_size}")
        self.max_size = max_size
        self._clock = clock
        self._entries: "OrderedDict[str, E]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[E]:
        """Return the entry for key if present and unexpired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if not self._clock() < entry.expires_at:
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return entry

    def set(self, key: str, entry: E) -> None:
        """Insert or wholesale-replace the entry for key."""
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
            self._entries[key] = entry
            while len(self._entries) > self.max_size:
                self._entries.popitem(last=False)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
