"""Session state and the records derived from it."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from core.counting import estimate_decks_remaining, true_count
from core.hand import Hand
from core.session.phase import SessionPhase
from core.strategy.rules import RuleConfig


class TrainingMode(Enum):
    """How hands are played during a session."""

    COUNTING_DRILL = "counting_drill"  # hands auto-resolve, player only counts
    PLAY_AND_COUNT = "play_and_count"  # player acts on every hand


@dataclass(frozen=True)
class CountCheck:
    """One prompted running-count verification."""

    session_id: str
    hand_number: int
    expected_count: int
    entered_count: int
    response_ms: int
    created_at: str

    @property
    def delta(self) -> int:
        return self.entered_count - self.expected_count

    @property
    def is_correct(self) -> bool:
        return self.delta == 0


@dataclass(frozen=True)
class InsuranceOffer:
    """Insurance offered against a dealer ace, graded by the chart."""

    true_count: int
    recommended: bool
    taken: bool | None = None

    @property
    def decided(self) -> bool:
        return self.taken is not None

    @property
    def correct(self) -> bool | None:
        if self.taken is None:
            return None
        return self.taken == self.recommended


@dataclass(frozen=True)
class SessionSummary:
    """Read-only report of a finished (or running) session."""

    hands_played: int
    total_prompts: int
    correct_prompts: int
    accuracy: float
    avg_response_ms: int
    longest_correct_streak: int


def summarize(hands_played: int, checks: Iterable[CountCheck]) -> SessionSummary:
    """
    Build a summary from the count-check log.

    Args:
        hands_played: Hands resolved in the session
        checks: Count checks in the order they were answered

    Returns:
        The summary; accuracy is a percentage rounded to 2 places
    """
    checks = list(checks)
    total = len(checks)
    correct = sum(1 for check in checks if check.is_correct)

    longest = streak = 0
    for check in checks:
        streak = streak + 1 if check.is_correct else 0
        longest = max(longest, streak)

    return SessionSummary(
        hands_played=hands_played,
        total_prompts=total,
        correct_prompts=correct,
        accuracy=round(correct / total * 100, 2) if total else 0.0,
        avg_response_ms=round(sum(c.response_ms for c in checks) / total) if total else 0,
        longest_correct_streak=longest,
    )


@dataclass
class SessionState:
    """
    Mutable aggregate of one training session.

    Owned by TrainingSession; nothing else writes to it.
    """

    session_id: str | None = None
    mode: TrainingMode = TrainingMode.COUNTING_DRILL
    rules: RuleConfig = field(default_factory=RuleConfig)

    # Count
    running_count: int = 0
    cards_remaining: int = 0

    # Progress
    hand_number: int = 0
    hands_played: int = 0
    count_check_log: list[CountCheck] = field(default_factory=list)

    # Table
    player_hands: list[Hand] = field(default_factory=list)
    dealer_hand: Hand | None = None
    hole_card_revealed: bool = False
    active_hand_index: int = 0
    insurance_offer: InsuranceOffer | None = None

    # Prompt and pause bookkeeping
    pending_prompt: bool = False
    prompt_started_at: float | None = None
    phase_before_pause: SessionPhase | None = None
    paused_at: float | None = None

    # Shoe ran dry mid-hand while completing at shoe end
    shoe_exhausted: bool = False

    started_at: str | None = None

    @property
    def count_checks(self) -> int:
        """Number of count checks answered this session."""
        return len(self.count_check_log)

    @property
    def decks_remaining(self) -> float:
        return estimate_decks_remaining(self.cards_remaining)

    @property
    def true_count(self) -> int:
        return true_count(self.running_count, self.decks_remaining)

    @property
    def active_hand(self) -> Hand | None:
        if 0 <= self.active_hand_index < len(self.player_hands):
            return self.player_hands[self.active_hand_index]
        return None

    @property
    def dealer_upcard(self):
        if self.dealer_hand is None or not self.dealer_hand.cards:
            return None
        return self.dealer_hand.cards[0]
