"""Training session state machine, events and records."""

from core.session.engine import TrainingSession
from core.session.events import EventEmitter, EventType, SessionEvent
from core.session.models import (
    CountCheck,
    InsuranceOffer,
    SessionState,
    SessionSummary,
    TrainingMode,
    summarize,
)
from core.session.phase import (
    PAUSABLE_PHASES,
    VALID_TRANSITIONS,
    InvalidTransitionError,
    SessionPhase,
    assert_transition,
    can_transition,
)
from core.session.prompts import PromptPolicy, PromptScheduler
from core.session.snapshot import PersistedMilestones, PersistedSettings, SessionRecord, SessionSnapshot

__all__ = [
    "TrainingSession",
    "EventEmitter",
    "EventType",
    "SessionEvent",
    "CountCheck",
    "InsuranceOffer",
    "SessionState",
    "SessionSummary",
    "TrainingMode",
    "summarize",
    "PAUSABLE_PHASES",
    "VALID_TRANSITIONS",
    "InvalidTransitionError",
    "SessionPhase",
    "assert_transition",
    "can_transition",
    "PromptPolicy",
    "PromptScheduler",
    "PersistedMilestones",
    "PersistedSettings",
    "SessionRecord",
    "SessionSnapshot",
]
