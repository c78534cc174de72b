"""Synchronous event emitter for agent progress."""

from collections import defaultdict
from typing import Any

from toolpilot.agent.models import EventListener, EventType



class EventEmitter:
    """Maps event kinds to listeners.

    Listeners run synchronously, in subscription order, as
    ``listener(kind, payload)``. A listener that raises aborts the emit and
    the exception reaches the caller.
    """

    def __init__(self) -> None:
        self._listeners: defaultdict[EventType, list[EventListener]] = defaultdict(list)

    def on(self, kind: EventType | str, listener: EventListener) -> None:
        """Subscribe a listener to an event kind."""
        self._listeners[EventType(kind)].append(listener)

    def off(self, kind: EventType | str, listener: EventListener) -> bool:
        """Unsubscribe a listener.

        Returns:
            True if the listener was subscribed
        """
        listeners = self._listeners.get(EventType(kind), [])
        if listener not in listeners:
            return False
        listeners.remove(listener)
        return True

    def emit(self, kind: EventType, payload: Any = None) -> None:
        """Deliver an event to every listener of its kind."""
        for listener in list(self._listeners.get(kind, ())):
            listener(kind, payload)
