"""Session phase enumeration and transition table."""

from enum import Enum


class InvalidTransitionError(Exception):
    """An event was delivered in a phase that does not accept it."""

    def __init__(self, source: "SessionPhase", dest: "SessionPhase") -> None:
        super().__init__(f"Invalid session transition: {source.value} -> {dest.value}")
        self.source = source
        self.dest = dest


class SessionPhase(Enum):
    """
    Training session phases.

    Flow: IDLE → READY → DEALING → AWAITING_PLAYER_ACTION → DEALER_TURN
          → HAND_RESOLVED → COUNT_PROMPT_OPEN → ... → COMPLETED
    """

    # Initial state, no session
    IDLE = "idle"

    # Session started, nothing dealt yet
    READY = "ready"

    # Cards being dealt
    DEALING = "dealing"

    # Player decides (play-and-count mode)
    AWAITING_PLAYER_ACTION = "awaiting_player_action"

    # Dealer reveals and draws
    DEALER_TURN = "dealer_turn"

    # Hand finished, ready for the next
    HAND_RESOLVED = "hand_resolved"

    # Player asked for the running count
    COUNT_PROMPT_OPEN = "count_prompt_open"

    PAUSED = "paused"

    # Session over; summary is read-only
    COMPLETED = "completed"

    def __str__(self) -> str:
        return self.value.replace("_", " ").title()

    @property
    def is_active(self) -> bool:
        """Any phase between start and completion."""
        return self not in (SessionPhase.IDLE, SessionPhase.COMPLETED)


# Phases a session can be paused from
PAUSABLE_PHASES: tuple[SessionPhase, ...] = (
    SessionPhase.READY,
    SessionPhase.AWAITING_PLAYER_ACTION,
    SessionPhase.DEALER_TURN,
    SessionPhase.HAND_RESOLVED,
    SessionPhase.COUNT_PROMPT_OPEN,
)

# Valid state transitions
VALID_TRANSITIONS: dict[SessionPhase, tuple[SessionPhase, ...]] = {
    SessionPhase.IDLE: (SessionPhase.READY,),
    SessionPhase.READY: (
        SessionPhase.DEALING,
        SessionPhase.PAUSED,
        SessionPhase.COMPLETED,
    ),
    SessionPhase.DEALING: (
        SessionPhase.AWAITING_PLAYER_ACTION,
        SessionPhase.DEALER_TURN,
        SessionPhase.HAND_RESOLVED,
    ),
    SessionPhase.AWAITING_PLAYER_ACTION: (
        SessionPhase.AWAITING_PLAYER_ACTION,
        SessionPhase.DEALER_TURN,
        SessionPhase.PAUSED,
        SessionPhase.COMPLETED,
    ),
    SessionPhase.DEALER_TURN: (
        SessionPhase.DEALER_TURN,
        SessionPhase.HAND_RESOLVED,
        SessionPhase.PAUSED,
        SessionPhase.COMPLETED,
    ),
    SessionPhase.HAND_RESOLVED: (
        SessionPhase.DEALING,
        SessionPhase.COUNT_PROMPT_OPEN,
        SessionPhase.PAUSED,
        SessionPhase.COMPLETED,
    ),
    SessionPhase.COUNT_PROMPT_OPEN: (
        SessionPhase.HAND_RESOLVED,
        SessionPhase.PAUSED,
        SessionPhase.COMPLETED,
    ),
    SessionPhase.PAUSED: PAUSABLE_PHASES + (SessionPhase.COMPLETED,),
    SessionPhase.COMPLETED: (SessionPhase.IDLE,),
}


def can_transition(source: SessionPhase, dest: SessionPhase) -> bool:
    """
    Check if a phase transition is valid.

    Args:
        source: Current phase
        dest: Desired phase

    Returns:
        True if the transition is allowed
    """
    return dest in VALID_TRANSITIONS.get(source, ())


def assert_transition(source: SessionPhase, dest: SessionPhase) -> None:
    """Raise InvalidTransitionError unless source -> dest is allowed."""
    if not can_transition(source, dest):
        raise InvalidTransitionError(source, dest)
