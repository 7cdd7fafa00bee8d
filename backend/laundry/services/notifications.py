from __future__ import annotations
"""In-process change feed fanning row mutations out to subscribed viewers.

Events carry only ``(kind, table, row_id)``. Consumers must treat every event as
"re-fetch what you show", never as a delta: delivery is at-least-once and there is
no ordering guarantee across different rows.

Usage:
    sub = feed.subscribe('orders', lambda ev: ev.row_id == order_id)
    event = sub.get(timeout=5)   # ChangeEvent or None on timeout
    sub.close()
"""
import logging
import queue
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

EVENT_INSERT = 'insert'
EVENT_UPDATE = 'update'
EVENT_DELETE = 'delete'
EVENT_KINDS = (EVENT_INSERT, EVENT_UPDATE, EVENT_DELETE)


@dataclass(frozen=True)
class ChangeEvent:
    kind: str
    table: str
    row_id: int


class Subscription:
    def __init__(self, feed: 'ChangeFeed', table: str, predicate: Optional[Callable[[ChangeEvent], bool]] = None):
        self._feed = feed
        self.table = table
        self.predicate = predicate
        self._queue: 'queue.Queue[ChangeEvent]' = queue.Queue()
        self.closed = False

    def matches(self, event: ChangeEvent) -> bool:
        if event.table != self.table:
            return False
        return self.predicate is None or bool(self.predicate(event))

    def _deliver(self, event: ChangeEvent):
        self._queue.put(event)

    def get(self, timeout: Optional[float] = None) -> Optional[ChangeEvent]:
        """Next event, or None if none arrives within timeout (0 = don't wait)."""
        try:
            if timeout == 0:
                return self._queue.get_nowait()
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self) -> List[ChangeEvent]:
        events = []
        while True:
            ev = self.get(timeout=0)
            if ev is None:
                return events
            events.append(ev)

    def close(self):
        if not self.closed:
            self._feed._remove(self)
            self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class ChangeFeed:
    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: List[Subscription] = []

    def subscribe(self, table: str, predicate: Optional[Callable[[ChangeEvent], bool]] = None) -> Subscription:
        sub = Subscription(self, table, predicate)
        with self._lock:
            self._subscribers.append(sub)
        return sub

    def _remove(self, sub: Subscription):
        with self._lock:
            if sub in self._subscribers:
                self._subscribers.remove(sub)

    def publish(self, kind: str, table: str, row_id: int) -> int:
        """Deliver an event to every matching subscriber; returns the number reached."""
        if kind not in EVENT_KINDS:
            raise ValueError(f'unknown change kind {kind!r}')
        event = ChangeEvent(kind, table, row_id)
        with self._lock:
            targets = list(self._subscribers)
        delivered = 0
        for sub in targets:
            try:
                if not sub.matches(event):
                    continue
            except Exception:
                # A broken subscriber filter must not block fan-out to the others
                logger.exception('change feed predicate failed for %s', table)
                continue
            sub._deliver(event)
            delivered += 1
        return delivered

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)


__all__ = ['ChangeFeed', 'ChangeEvent', 'Subscription', 'EVENT_INSERT', 'EVENT_UPDATE', 'EVENT_DELETE']
