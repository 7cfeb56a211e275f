"""
Named in-process event channel.

The copy backend emits progress on "copy-progress"; the copy orchestrator
listens only for the lifetime of one copy, through a Subscription that is
closed by a with block.
"""

import inspect
import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

COPY_PROGRESS_EVENT = "copy-progress"

Handler = Callable[[Any], Any]


class Subscription:
    """Registration of one handler on one channel name"""

    def __init__(self, channel: "EventChannel", name: str, handler: Handler):
        self.channel = channel
        self.name = name
        self.handler = handler
        self.closed = False

    def close(self):
        """Unsubscribe; later calls do nothing"""
        if self.closed:
            return
        self.closed = True
        self.channel._remove(self)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class EventChannel:
    """Dispatches payloads to the handlers registered for an event name"""

    def __init__(self):
        self._subscriptions: Dict[str, List[Subscription]] = defaultdict(list)

    def subscribe(self, name: str, handler: Handler) -> Subscription:
        subscription = Subscription(self, name, handler)
        self._subscriptions[name].append(subscription)
        logger.debug(f"Subscribed to {name} ({len(self._subscriptions[name])} active)")
        return subscription

    def _remove(self, subscription: Subscription):
        subscriptions = self._subscriptions.get(subscription.name, [])
        if subscription in subscriptions:
            subscriptions.remove(subscription)
        if not subscriptions:
            self._subscriptions.pop(subscription.name, None)
        logger.debug(f"Unsubscribed from {subscription.name}")

    def subscriber_count(self, name: str) -> int:
        return len(self._subscriptions.get(name, []))

    async def emit(self, name: str, payload: Any):
        """
        Deliver a payload to every current subscriber of name.

        Coroutine handlers are awaited. A failing handler is logged and the
        remaining handlers still run.
        """
        # Copy so handlers may unsubscribe while we iterate
        for subscription in list(self._subscriptions.get(name, [])):
            try:
                result = subscription.handler(payload)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"Handler for {name} failed: {e}")
