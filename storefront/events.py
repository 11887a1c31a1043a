"""
In-process event subscriptions.

Listeners register explicitly and get a Subscription handle back; calling
``unsubscribe()`` on it is the only way to stop receiving events. Used for
cart change notifications and auth state changes.

Usage:
    hub = EventHub()
    subscription = hub.subscribe(lambda event, payload: ...)
    await hub.publish("signed_in", user)
    subscription.unsubscribe()
"""

import inspect
from typing import Any, Awaitable, Callable, List, Optional, Union

from storefront.logging import get_logger

logger = get_logger(__name__)

Listener = Callable[[str, Any], Union[None, Awaitable[None]]]


class Subscription:
    """Cancellation handle returned by EventHub.subscribe()."""

    def __init__(self, hub: "EventHub", listener: Listener):
        self._hub = hub
        self._listener: Optional[Listener] = listener

    @property
    def active(self) -> bool:
        return self._listener is not None

    def unsubscribe(self) -> None:
        """Stop delivering events to the listener. Idempotent."""
        if self._listener is None:
            return
        self._hub._remove(self._listener)
        self._listener = None


class EventHub:
    """Fan-out of named events to subscribed listeners (sync or async)."""

    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Subscription:
        self._listeners.append(listener)
        return Subscription(self, listener)

    def _remove(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    async def publish(self, event: str, payload: Any = None) -> None:
        """
        Deliver an event to every current listener.

        A failing listener is logged and skipped; it never breaks the
        operation that published the event.
        """
        # Copy: listeners may unsubscribe while being notified
        for listener in list(self._listeners):
            try:
                result = listener(event, payload)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.warning(f"Event listener failed for {event}: {e}", exc_info=True)
