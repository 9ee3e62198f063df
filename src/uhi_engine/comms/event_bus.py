"""EventBus: pub/sub for change notifications inside the explorer.

Two delivery styles share one publish call:

- queue subscribers receive a ``{"type": ..., "data": ...}`` dict and drain
  it at their own pace (the host shell uses this for toasts);
- listeners are invoked synchronously on the publishing thread, so state
  containers can drive recomposition within the same event-loop task.
"""

from __future__ import annotations

import queue
import threading
from typing import Any, Callable

Listener = Callable[[str, "dict | None"], Any]


class EventBus:
    """Simple thread-safe pub/sub for pushing events to subscribers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: list[tuple[queue.Queue, tuple[str, ...] | None]] = []
        self._listeners: list[Listener] = []

    def subscribe(self, _filter: str | tuple[str, ...] | None = None) -> queue.Queue:
        """Subscribe to events. Returns a Queue that receives matching events.

        ``_filter`` is an event type or a tuple of event types; only those
        are put on the queue. ``None`` delivers every event.
        """
        if isinstance(_filter, str):
            _filter = (_filter,)
        elif _filter is not None:
            _filter = tuple(_filter)
        q: queue.Queue = queue.Queue(maxsize=100)
        with self._lock:
            self._subscribers.append((q, _filter))
        return q

    def unsubscribe(self, q: queue.Queue) -> None:
        with self._lock:
            self._subscribers = [(sq, f) for sq, f in self._subscribers if sq is not q]

    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def add_listener(self, listener: Listener) -> None:
        """Register a callable invoked as ``listener(event_type, data)``."""
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        with self._lock:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

    def publish(self, event_type: str, data: dict | None = None) -> None:
        msg = {"type": event_type}
        if data is not None:
            msg["data"] = data
        with self._lock:
            for q, types in self._subscribers:
                if types is not None and event_type not in types:
                    continue
                try:
                    q.put_nowait(msg)
                except queue.Full:
                    # Drop oldest message to make room.
                    try:
                        q.get_nowait()
                    except queue.Empty:
                        pass
                    try:
                        q.put_nowait(msg)
                    except queue.Full:
                        pass
            listeners = list(self._listeners)
        # Listeners run outside the lock; they may publish again.
        for listener in listeners:
            listener(event_type, data)
