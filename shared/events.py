"""
Live update channel: fan-out of "submissions changed" notifications to
every connected dashboard client.

Delivery is best effort. A client that connects after an event has missed it
and is expected to fetch the list on connect.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict

from shared.constants import SUBMISSIONS_UPDATED_EVENT

logger = logging.getLogger(__name__)

Deliver = Callable[[str], None]


@dataclass(frozen=True)
class Subscription:
    client_id: str


class Broadcaster:
    def __init__(self):
        self._subscribers: Dict[str, Deliver] = {}
        self._lock = threading.Lock()

    def subscribe(self, client_id: str, deliver: Deliver) -> Subscription:
        """Register a client; `deliver(event)` is called for each publish."""
        with self._lock:
            self._subscribers[client_id] = deliver
        return Subscription(client_id)

    def unsubscribe(self, handle: Subscription) -> None:
        with self._lock:
            self._subscribers.pop(handle.client_id, None)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def publish(self, event: str = SUBMISSIONS_UPDATED_EVENT) -> int:
        """Send `event` to every current subscriber. Returns how many were reached."""
        with self._lock:
            targets = list(self._subscribers.items())

        delivered = 0
        for client_id, deliver in targets:
            try:
                deliver(event)
                delivered += 1
            except Exception:
                logger.exception("Failed to deliver %s to client %s", event, client_id)
        logger.info("Broadcasted %s event to %d client(s).", event, delivered)
        return delivered
