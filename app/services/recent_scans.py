"""
Recent Scan Cache - Debounce for repeated register-number submissions

Maps (register_number, date) to the time it was last accepted. A second
submission inside the TTL window is treated as a duplicate.
"""
import threading
import time
from datetime import date
from typing import Callable, Dict, Tuple

ScanKey = Tuple[str, date]


class RecentScanCache:
    def __init__(self, ttl_seconds: float = 5, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._seen: Dict[ScanKey, float] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._seen)

    def check_and_mark(self, register_number: str, scan_date: date) -> bool:
        """
        Report whether the key was seen within the TTL, marking it if not

        Returns:
            bool: True for a duplicate (caller should reject), False otherwise
        """
        key = (register_number, scan_date)
        now = self._clock()

        with self._lock:
            last_seen = self._seen.get(key)
            if last_seen is not None and now - last_seen < self.ttl_seconds:
                return True
            self._seen[key] = now
            return False

    def forget(self, register_number: str, scan_date: date) -> None:
        """Drop a key so the next submission is processed normally"""
        with self._lock:
            self._seen.pop((register_number, scan_date), None)

    def clear(self) -> None:
        with self._lock:
            self._seen.clear()

    def purge(self) -> int:
        """Remove expired keys; returns how many were dropped"""
        now = self._clock()

        with self._lock:
            expired = [key for key, seen_at in self._seen.items() if now - seen_at >= self.ttl_seconds]
            for key in expired:
                del self._seen[key]

        return len(expired)
