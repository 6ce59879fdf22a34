"""
Event Bus - In-process publish/subscribe for attendance mutations

Views either subscribe directly or poll the bounded history by sequence
number and re-query their own data. Delivery is best effort and does not
survive a restart.
"""
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Deque, Dict, List, Optional

from atams.logging import get_logger

logger = get_logger(__name__)


class EventType(str, Enum):
    CHECKED_IN = "checked-in"
    CHECKED_OUT = "checked-out"
    CHECKED_OUT_ALL = "checked-out-all"
    DELETED = "deleted"


@dataclass
class Event:
    """A single published mutation"""
    seq: int
    type: EventType
    payload: Dict[str, Any]
    occurred_at: datetime = field(default_factory=datetime.now)


Handler = Callable[[Event], None]


class EventBus:
    def __init__(self, history_size: int = 500) -> None:
        self._handlers: List[Handler] = []
        self._history: Deque[Event] = deque(maxlen=history_size)
        self._seq = 0
        # Lock for thread safety; sync endpoints run in a worker pool
        self._lock = threading.Lock()

    @property
    def last_seq(self) -> int:
        return self._seq

    def subscribe(self, handler: Handler) -> Callable[[], None]:
        """
        Register a handler called synchronously on every publish

        Returns:
            Callable that removes the handler again
        """
        with self._lock:
            self._handlers.append(handler)

        def unsubscribe() -> None:
            with self._lock:
                if handler in self._handlers:
                    self._handlers.remove(handler)

        return unsubscribe

    def publish(self, event_type: EventType, payload: Dict[str, Any]) -> Event:
        """Record the event and hand it to every subscriber"""
        with self._lock:
            self._seq += 1
            event = Event(seq=self._seq, type=EventType(event_type), payload=dict(payload))
            self._history.append(event)
            handlers = list(self._handlers)

        logger.info(
            f"Event published: {event.type.value}",
            extra={'extra_data': {'seq': event.seq, 'event_type': event.type.value}}
        )

        for handler in handlers:
            try:
                handler(event)
            except Exception:
                # One broken view must not block the others
                logger.exception(f"Event handler failed for {event.type.value} (seq {event.seq})")

        return event

    def events_since(self, seq: int = 0) -> List[Event]:
        """Events with a sequence number greater than seq still held in history"""
        with self._lock:
            return [event for event in self._history if event.seq > seq]

    @property
    def oldest_seq(self) -> Optional[int]:
        """Sequence number of the oldest event still held, None while empty"""
        with self._lock:
            return self._history[0].seq if self._history else None

    def missed_since(self, seq: int) -> bool:
        """
        Whether some event after seq is no longer available

        True when history has already dropped it, or when seq is ahead of
        last_seq because the process restarted. Callers should reload
        everything instead of applying events_since.
        """
        with self._lock:
            if seq >= self._seq:
                return seq > self._seq
            oldest = self._history[0].seq if self._history else self._seq + 1
            return seq + 1 < oldest
