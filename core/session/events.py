"""Session events for the event system."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable


class EventType(Enum):
    """Types of session events."""

    # Lifecycle events
    SESSION_STARTED = auto()
    SESSION_RESTORED = auto()
    SESSION_COMPLETED = auto()
    SESSION_RESET = auto()
    PAUSED = auto()
    RESUMED = auto()

    # Card events
    HAND_STARTED = auto()
    CARD_DEALT = auto()
    HOLE_CARD_REVEALED = auto()
    SHOE_SHUFFLED = auto()

    # Player events
    PLAYER_ACTION = auto()
    INSURANCE_OFFERED = auto()
    INSURANCE_DECIDED = auto()

    # Resolution events
    HAND_RESOLVED = auto()

    # Count check events
    COUNT_PROMPT_OPENED = auto()
    COUNT_SUBMITTED = auto()
    COUNT_PROMPT_DISMISSED = auto()

    # Error events
    INVALID_TRANSITION = auto()
    INVALID_ACTION = auto()


@dataclass(frozen=True)
class SessionEvent:
    """
    Immutable session event.

    Events are the primary communication mechanism between the engine
    and the presentation layer.
    """

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.event_type.name}: {self.data}"


# Type alias for event handlers
EventHandler = Callable[[SessionEvent], None]


class EventEmitter:
    """
    Simple event emitter for session events.

    Allows subscribing to specific event types or all events.
    """

    def __init__(self, max_history: int = 1000) -> None:
        """Initialize the event emitter."""
        self._handlers: dict[EventType | None, list[EventHandler]] = {}
        self._event_history: list[SessionEvent] = []
        self._max_history = max_history

    def subscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """
        Subscribe to events.

        Args:
            handler: Function to call when event occurs
            event_type: Specific event type to subscribe to, or None for all events
        """
        self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """Remove a handler; unknown handlers are ignored."""
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: SessionEvent) -> None:
        """Emit an event to all subscribers."""
        self._event_history.append(event)
        if len(self._event_history) > self._max_history:
            del self._event_history[: -self._max_history]

        # Call type-specific handlers
        for handler in self._handlers.get(event.event_type, []):
            handler(event)

        # Call catch-all handlers
        for handler in self._handlers.get(None, []):
            handler(event)

    def emit_new(
        self,
        event_type: EventType,
        **data: Any,
    ) -> SessionEvent:
        """
        Create and emit a new event.

        Args:
            event_type: Type of event
            **data: Event data

        Returns:
            The created event
        """
        event = SessionEvent(event_type=event_type, data=data)
        self.emit(event)
        return event

    @property
    def history(self) -> list[SessionEvent]:
        """Return the event history."""
        return self._event_history.copy()

    def clear_history(self) -> None:
        """Clear the event history."""
        self._event_history.clear()
