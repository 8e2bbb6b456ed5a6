"""Change notification delivery for record stores.

Subscribers are called on a single delivery thread. Events posted on that
thread are delivered immediately; events posted from any other thread are
queued until the delivery thread calls ``drain()``.
"""

import logging
import queue
import threading
from typing import Any, Callable, List, Optional, Tuple

from recordkit.config import DEFAULT_CHANNEL
from recordkit.models.event import ChangeAction, ChangeEvent

logger = logging.getLogger(__name__)

Subscriber = Callable[[ChangeEvent], None]


class ChangeNotifier:
    """Posts ``ChangeEvent``s to subscribers under one channel name."""

    def __init__(self, channel: str = DEFAULT_CHANNEL):
        self.channel = channel
        self._subscribers: List[Tuple[Subscriber, Optional[str]]] = []
        self._queue: "queue.Queue[ChangeEvent]" = queue.Queue()
        self._delivery_thread = threading.get_ident()

    def bind_to_current_thread(self) -> None:
        """Make the calling thread the delivery thread."""
        self._delivery_thread = threading.get_ident()

    @property
    def on_delivery_thread(self) -> bool:
        return threading.get_ident() == self._delivery_thread

    @property
    def pending(self) -> int:
        """Number of queued events waiting for ``drain()``."""
        return self._queue.qsize()

    def subscribe(self, callback: Subscriber, model_name: Optional[str] = None) -> Subscriber:
        """Register a subscriber, optionally only for one model type.

        Returns the callback so this can be used as a decorator.
        """
        if any(existing is callback for existing, _ in self._subscribers):
            logger.warning(f"Subscriber {callback!r} already registered, replacing")
            self.unsubscribe(callback)
        self._subscribers.append((callback, model_name))
        return callback

    def unsubscribe(self, callback: Subscriber) -> None:
        self._subscribers = [
            (existing, model_name)
            for existing, model_name in self._subscribers
            if existing is not callback
        ]

    def post(self, action: ChangeAction, record: Any) -> ChangeEvent:
        """Post a change event for ``record``.

        Delivered synchronously on the delivery thread, queued otherwise.
        """
        event = ChangeEvent(
            channel=self.channel,
            action=action,
            object=record,
            model_name=record.model_name,
        )
        if self.on_delivery_thread:
            self._deliver(event)
        else:
            logger.debug(
                f"Queued {event.action.value} event for {event.model_name} from thread "
                f"{threading.get_ident()}"
            )
            self._queue.put(event)
        return event

    def drain(self) -> int:
        """Deliver every queued event. Must be called on the delivery thread.

        Returns:
            Number of events delivered

        Raises:
            RuntimeError: If called from another thread
        """
        if not self.on_delivery_thread:
            raise RuntimeError("drain() must be called on the delivery thread")

        delivered = 0
        while True:
            try:
                event = self._queue.get_nowait()
            except queue.Empty:
                return delivered
            self._deliver(event)
            delivered += 1

    def _deliver(self, event: ChangeEvent) -> None:
        for callback, model_name in list(self._subscribers):
            if model_name is not None and model_name != event.model_name:
                continue
            try:
                callback(event)
            except Exception as e:
                logger.error(f"Subscriber {callback!r} failed on {event.action.value} event: {e}")
