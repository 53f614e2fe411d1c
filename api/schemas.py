"""Pydantic schemas for API requests and responses."""

from typing import Literal

from pydantic import BaseModel, Field

from config import config
from core.onboarding import OnboardingStep
from core.session import TrainingMode
from core.session.snapshot import RulesData, SessionRecord, SessionSnapshot
from core.strategy.rules import DECK_COUNTS, DealSpeed


# Session schemas
class NewSessionResponse(BaseModel):
    session_id: str


class RulesRequest(BaseModel):
    """Table rules chosen for a session."""

    decks: int = Field(
        default_factory=lambda: config.training.num_decks,
        description=f"One of {DECK_COUNTS}",
    )
    penetration: float = Field(
        default_factory=lambda: config.training.penetration, gt=0.0, le=1.0
    )
    dealer_hits_soft_17: bool = True
    double_after_split: bool = True
    surrender_allowed: bool = False
    deal_speed: DealSpeed = DealSpeed.NORMAL


class StartSessionRequest(BaseModel):
    """Request to start a training session."""

    mode: TrainingMode = TrainingMode.COUNTING_DRILL
    rules: RulesRequest = Field(default_factory=RulesRequest)


class ActionRequest(BaseModel):
    """Request for player action."""

    action: Literal["hit", "stand", "double", "split", "surrender"]


class InsuranceRequest(BaseModel):
    take: bool


class CountRequest(BaseModel):
    """Running count entered at a prompt."""

    entered_count: int = Field(..., ge=-1000, le=1000)


class CardResponse(BaseModel):
    """Card representation."""

    code: str
    rank: str
    suit: str
    value: int
    count_value: int


class HandResponse(BaseModel):
    """Hand representation."""

    cards: list[CardResponse]
    value: int
    is_soft: bool
    is_blackjack: bool
    is_busted: bool
    is_doubled: bool
    is_split_hand: bool
    outcome: str | None = None


class InsuranceOfferResponse(BaseModel):
    true_count: int
    recommended: bool
    taken: bool | None = None
    correct: bool | None = None


class SessionStateResponse(BaseModel):
    """Current session state."""

    phase: str
    session_id: str | None
    mode: TrainingMode
    rules: RulesData
    hand_number: int
    hands_played: int
    count_checks: int
    running_count: int
    true_count: int
    cards_remaining: int
    decks_remaining: float
    player_hands: list[HandResponse]
    active_hand_index: int
    dealer_hand: HandResponse | None
    dealer_showing: CardResponse | None
    insurance_offer: InsuranceOfferResponse | None
    pending_prompt: bool
    paused_from: str | None = None
    index_play: str | None = None


class SummaryResponse(BaseModel):
    hands_played: int
    total_prompts: int
    correct_prompts: int
    accuracy: float
    avg_response_ms: int
    longest_correct_streak: int


class RecoveryResponse(BaseModel):
    """A snapshot the client may restore, or null."""

    snapshot: SessionSnapshot | None


class HistoryResponse(BaseModel):
    sessions: list[SessionRecord]


# Onboarding schemas
class OnboardingStepRequest(BaseModel):
    step: OnboardingStep


class OnboardingResponse(BaseModel):
    completed_steps: list[OnboardingStep]
    current_step: OnboardingStep
    current_label: str
    is_complete: bool


class NewUserResponse(BaseModel):
    is_new_user: bool


# Strategy schemas
class InsuranceDecisionResponse(BaseModel):
    """Chart decision for an insurance offer."""

    true_count: int
    take_insurance: bool
    tc_threshold: int
    comparison: str
    chart_id: str
    chart_name: str
    source_url: str


# Progress schemas
class TrendPointResponse(BaseModel):
    date: str
    accuracy: float
    avg_response_ms: int
    hands: int
    total_prompts: int


class PersonalRecordResponse(BaseModel):
    value: float
    session_id: str
    date: str


class PersonalRecordsResponse(BaseModel):
    best_accuracy: PersonalRecordResponse
    fastest_speed: PersonalRecordResponse
    longest_correct_streak: PersonalRecordResponse
    most_hands: PersonalRecordResponse


class ProgressResponse(BaseModel):
    """Trends, streaks and records across completed sessions."""

    sessions: list[TrendPointResponse]
    recent_accuracy: float
    overall_accuracy: float
    recent_speed: float
    overall_speed: float
    accuracy_delta: float
    speed_delta: float
    current_streak: int
    longest_streak: int
    records: PersonalRecordsResponse
    total_sessions: int


class MilestoneResponse(BaseModel):
    id: str
    tier: str
    label: str
    description: str
    is_complete: bool
    current: float | None = Field(None, description="Null until there is something to measure")
    target: float
    unlocked_at: str | None = None


class MilestonesResponse(BaseModel):
    milestones: list[MilestoneResponse]
    newly_unlocked: list[str]


# Miss replay schemas
class MissedCheckResponse(BaseModel):
    hand_number: int
    expected_count: int
    previous_answer: int
    delta: int


class MissReplayResponse(BaseModel):
    """Missed count checks from one completed session."""

    session_id: str
    problems: list[MissedCheckResponse]


class ReplayAnswerRequest(BaseModel):
    answer: int = Field(..., ge=-1000, le=1000)
    response_ms: int = Field(0, ge=0)


class ReplayGradeRequest(BaseModel):
    """Answers to a replay, in problem order."""

    session_id: str | None = None
    answers: list[ReplayAnswerRequest] = Field(..., min_length=1)


class ReplayResultResponse(BaseModel):
    hand_number: int
    expected_count: int
    answer: int
    is_correct: bool


class ReplayGradeResponse(BaseModel):
    results: list[ReplayResultResponse]
    total: int
    correct: int
    accuracy: float
    avg_response_ms: float
