"""Card counting trainer engine - 100% UI-agnostic."""

from core.cards import Card, Shoe, Rank, Suit
from core.hand import Hand, HandOutcome
from core.session import SessionPhase, TrainingMode, TrainingSession

__all__ = [
    "Card",
    "Shoe",
    "Rank",
    "Suit",
    "Hand",
    "HandOutcome",
    "SessionPhase",
    "TrainingMode",
    "TrainingSession",
]
