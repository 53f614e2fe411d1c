"""Pydantic models for persisted sessions, history records and settings."""

from pydantic import BaseModel, Field, field_validator, model_validator

from core.cards import Card
from core.hand import Hand, HandOutcome
from core.session.models import CountCheck, InsuranceOffer, SessionSummary, TrainingMode
from core.session.phase import SessionPhase
from core.session.prompts import PromptSchedulerState
from core.strategy.actions import Action
from core.strategy.rules import DealSpeed, RuleConfig

SNAPSHOT_VERSION = 1


def _check_card_codes(codes: list[str]) -> list[str]:
    for code in codes:
        Card.from_string(code)
    return codes


class HandData(BaseModel):
    """A hand as card codes plus its decision log."""

    cards: list[str] = Field(default_factory=list)
    actions: list[Action] = Field(default_factory=list)
    is_doubled: bool = False
    is_split_hand: bool = False
    outcome: HandOutcome | None = None

    @field_validator("cards")
    @classmethod
    def check_cards(cls, v: list[str]) -> list[str]:
        return _check_card_codes(v)

    @classmethod
    def from_hand(cls, hand: Hand) -> "HandData":
        return cls(
            cards=[card.code for card in hand.cards],
            actions=list(hand.actions),
            is_doubled=hand.is_doubled,
            is_split_hand=hand.is_split_hand,
            outcome=hand.outcome,
        )

    def to_hand(self) -> Hand:
        return Hand(
            cards=[Card.from_string(code) for code in self.cards],
            actions=list(self.actions),
            is_doubled=self.is_doubled,
            is_split_hand=self.is_split_hand,
            outcome=self.outcome,
        )


class RulesData(BaseModel):
    """Serializable RuleConfig."""

    decks: int = 6
    penetration: float = 0.75
    dealer_hits_soft_17: bool = True
    double_after_split: bool = True
    surrender_allowed: bool = False
    deal_speed: DealSpeed = DealSpeed.NORMAL

    @classmethod
    def from_rules(cls, rules: RuleConfig) -> "RulesData":
        return cls(
            decks=rules.decks,
            penetration=rules.penetration,
            dealer_hits_soft_17=rules.dealer_hits_soft_17,
            double_after_split=rules.double_after_split,
            surrender_allowed=rules.surrender_allowed,
            deal_speed=rules.deal_speed,
        )

    def to_rules(self) -> RuleConfig:
        """Build the RuleConfig; raises ValueError for invalid values."""
        return RuleConfig(**self.model_dump())


class SchedulerData(BaseModel):
    hands_since_prompt: int = Field(default=0, ge=0)
    next_threshold: int = Field(..., ge=1)
    thresholds: list[int] = Field(..., min_length=1)

    @classmethod
    def from_state(cls, state: PromptSchedulerState) -> "SchedulerData":
        return cls(
            hands_since_prompt=state.hands_since_prompt,
            next_threshold=state.next_threshold,
            thresholds=list(state.thresholds),
        )

    def to_state(self) -> PromptSchedulerState:
        return PromptSchedulerState(
            hands_since_prompt=self.hands_since_prompt,
            next_threshold=self.next_threshold,
            thresholds=tuple(self.thresholds),
        )


class CountCheckData(BaseModel):
    session_id: str
    hand_number: int
    expected_count: int
    entered_count: int
    response_ms: int = Field(..., ge=0)
    is_correct: bool
    delta: int
    created_at: str

    @classmethod
    def from_check(cls, check: CountCheck) -> "CountCheckData":
        return cls(
            session_id=check.session_id,
            hand_number=check.hand_number,
            expected_count=check.expected_count,
            entered_count=check.entered_count,
            response_ms=check.response_ms,
            is_correct=check.is_correct,
            delta=check.delta,
            created_at=check.created_at,
        )

    def to_check(self) -> CountCheck:
        return CountCheck(
            session_id=self.session_id,
            hand_number=self.hand_number,
            expected_count=self.expected_count,
            entered_count=self.entered_count,
            response_ms=self.response_ms,
            created_at=self.created_at,
        )


class InsuranceOfferData(BaseModel):
    true_count: int
    recommended: bool
    taken: bool | None = None

    @classmethod
    def from_offer(cls, offer: InsuranceOffer) -> "InsuranceOfferData":
        return cls(true_count=offer.true_count, recommended=offer.recommended, taken=offer.taken)

    def to_offer(self) -> InsuranceOffer:
        return InsuranceOffer(true_count=self.true_count, recommended=self.recommended, taken=self.taken)


class SessionSnapshot(BaseModel):
    """
    Serializable projection of an in-progress session.

    Only ``phase`` and ``hands_played`` are required; a snapshot without a
    shoe restores onto a freshly shuffled one.
    """

    version: int = SNAPSHOT_VERSION
    session_id: str | None = None
    phase: SessionPhase
    phase_before_pause: SessionPhase | None = None
    mode: TrainingMode = TrainingMode.COUNTING_DRILL
    rules: RulesData = Field(default_factory=RulesData)

    running_count: int = 0
    hand_number: int = Field(default=0, ge=0)
    hands_played: int = Field(..., ge=0)
    count_checks: list[CountCheckData] = Field(default_factory=list)

    player_hands: list[HandData] = Field(default_factory=list)
    dealer_hand: HandData | None = None
    hole_card_revealed: bool = False
    active_hand_index: int = Field(default=0, ge=0)
    insurance_offer: InsuranceOfferData | None = None

    pending_prompt: bool = False
    prompt_started_at: float | None = None
    paused_at: float | None = None

    shoe: list[str] | None = None
    shoe_exhausted: bool = False
    scheduler: SchedulerData | None = None

    started_at: str | None = None
    saved_at: str | None = None

    @field_validator("shoe")
    @classmethod
    def check_shoe(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return v
        return _check_card_codes(v)

    @model_validator(mode="after")
    def check_table(self) -> "SessionSnapshot":
        problem = table_problem(self)
        if problem is not None:
            raise ValueError(problem)
        return self


def table_problem(snapshot: SessionSnapshot) -> str | None:
    """
    Describe why a snapshot's table cannot be played on from its phase.

    Returns None for a consistent snapshot. A paused snapshot is checked
    against the phase it was paused from.
    """
    phase = snapshot.phase
    if phase is SessionPhase.PAUSED and snapshot.phase_before_pause is not None:
        phase = snapshot.phase_before_pause

    if phase in (SessionPhase.AWAITING_PLAYER_ACTION, SessionPhase.DEALER_TURN):
        if snapshot.dealer_hand is None or len(snapshot.dealer_hand.cards) < 2:
            return f"{phase.value} needs a dealt dealer hand"
        if not snapshot.player_hands or any(len(h.cards) < 2 for h in snapshot.player_hands):
            return f"{phase.value} needs dealt player hands"
    if phase is SessionPhase.AWAITING_PLAYER_ACTION:
        if snapshot.active_hand_index >= len(snapshot.player_hands):
            return "active hand index out of range"
    if phase is SessionPhase.COUNT_PROMPT_OPEN and not snapshot.pending_prompt:
        return "count prompt open without a pending prompt"
    return None


class SessionSummaryData(BaseModel):
    hands_played: int
    total_prompts: int
    correct_prompts: int
    accuracy: float
    avg_response_ms: int
    longest_correct_streak: int

    @classmethod
    def from_summary(cls, summary: SessionSummary) -> "SessionSummaryData":
        return cls(
            hands_played=summary.hands_played,
            total_prompts=summary.total_prompts,
            correct_prompts=summary.correct_prompts,
            accuracy=summary.accuracy,
            avg_response_ms=summary.avg_response_ms,
            longest_correct_streak=summary.longest_correct_streak,
        )


class SessionRecord(BaseModel):
    """History entry written when a session completes."""

    session_id: str
    mode: TrainingMode
    rules: RulesData
    started_at: str | None = None
    ended_at: str
    hands_played: int = Field(..., ge=0)
    count_checks: list[CountCheckData] = Field(default_factory=list)
    summary: SessionSummaryData


class PersistedSettings(BaseModel):
    """Last chosen mode and table rules."""

    mode: TrainingMode = TrainingMode.COUNTING_DRILL
    rules: RulesData = Field(default_factory=RulesData)


class UnlockedMilestone(BaseModel):
    id: str
    unlocked_at: str


class PersistedMilestones(BaseModel):
    """Milestones the player has unlocked so far."""

    unlocked: list[UnlockedMilestone] = Field(default_factory=list)

    @property
    def ids(self) -> list[str]:
        return [m.id for m in self.unlocked]
