"""Training session API endpoints."""

from dataclasses import asdict
from typing import Annotated, Callable

from fastapi import APIRouter, Header, HTTPException

from api.schemas import (
    ActionRequest,
    CardResponse,
    CountRequest,
    HandResponse,
    InsuranceOfferResponse,
    InsuranceRequest,
    NewSessionResponse,
    RecoveryResponse,
    SessionStateResponse,
    StartSessionRequest,
    SummaryResponse,
)
from api.session import (
    create_session,
    get_repository,
    get_trainer,
    require_session_id,
)
from core.cards import Card
from core.hand import Hand
from core.session import SessionPhase, TrainingSession
from core.session.snapshot import RulesData
from core.strategy.rules import RuleConfig

router = APIRouter()

SessionToken = Annotated[str, Header(alias="X-Session-ID")]


def _card_to_response(card: Card) -> CardResponse:
    return CardResponse(
        code=card.code,
        rank=str(card.rank),
        suit=str(card.suit),
        value=card.value,
        count_value=card.count_value,
    )


def _hand_to_response(hand: Hand, hide_hole_card: bool = False) -> HandResponse:
    """Convert a Hand to HandResponse; a hidden hole card is left out."""
    cards = hand.cards[:1] if hide_hole_card else hand.cards
    shown = Hand(cards=list(cards))
    return HandResponse(
        cards=[_card_to_response(c) for c in cards],
        value=shown.value,
        is_soft=shown.is_soft,
        is_blackjack=hand.is_blackjack and not hide_hole_card,
        is_busted=shown.is_busted,
        is_doubled=hand.is_doubled,
        is_split_hand=hand.is_split_hand,
        outcome=hand.outcome.value if hand.outcome else None,
    )


def _state_response(trainer: TrainingSession) -> SessionStateResponse:
    """Convert session state to response."""
    state = trainer.state
    dealer = state.dealer_hand
    upcard = state.dealer_upcard
    offer = state.insurance_offer
    play = trainer.current_deviation()

    return SessionStateResponse(
        phase=trainer.phase.value,
        session_id=state.session_id,
        mode=state.mode,
        rules=RulesData.from_rules(state.rules),
        hand_number=state.hand_number,
        hands_played=state.hands_played,
        count_checks=state.count_checks,
        running_count=state.running_count,
        true_count=state.true_count,
        cards_remaining=state.cards_remaining,
        decks_remaining=round(state.decks_remaining, 2),
        player_hands=[_hand_to_response(h) for h in state.player_hands],
        active_hand_index=state.active_hand_index,
        dealer_hand=(
            _hand_to_response(dealer, hide_hole_card=not state.hole_card_revealed)
            if dealer
            else None
        ),
        dealer_showing=_card_to_response(upcard) if upcard else None,
        insurance_offer=(
            InsuranceOfferResponse(
                true_count=offer.true_count,
                recommended=offer.recommended,
                taken=offer.taken,
                correct=offer.correct,
            )
            if offer
            else None
        ),
        pending_prompt=state.pending_prompt,
        paused_from=state.phase_before_pause.value if state.phase_before_pause else None,
        index_play=play.name if play else None,
    )


def _apply(trainer: TrainingSession, operation: Callable[[], bool], name: str) -> SessionStateResponse:
    """Run an engine operation; a rejected one becomes 409."""
    if not operation():
        raise HTTPException(
            status_code=409,
            detail=f"Cannot {name} in phase {trainer.phase.value}",
        )
    return _state_response(trainer)


@router.post("/new")
async def new_session() -> NewSessionResponse:
    """Create a new client session."""
    return NewSessionResponse(session_id=create_session())


@router.get("/state")
async def get_state(token: SessionToken) -> SessionStateResponse:
    """Get current session state."""
    trainer = get_trainer(require_session_id(token))
    return _state_response(trainer)


@router.post("/start")
async def start_session(request: StartSessionRequest, token: SessionToken) -> SessionStateResponse:
    """Start a training session with the given mode and rules."""
    trainer = get_trainer(require_session_id(token))
    try:
        rules = RuleConfig(**request.rules.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _apply(trainer, lambda: trainer.start_session(request.mode, rules), "start session")


@router.post("/deal")
async def deal_hand(token: SessionToken) -> SessionStateResponse:
    trainer = get_trainer(require_session_id(token))
    return _apply(trainer, trainer.deal_hand, "deal")


@router.post("/action")
async def player_action(request: ActionRequest, token: SessionToken) -> SessionStateResponse:
    """Execute a player action."""
    trainer = get_trainer(require_session_id(token))
    actions = {
        "hit": trainer.hit,
        "stand": trainer.stand,
        "double": trainer.double,
        "split": trainer.split,
        "surrender": trainer.surrender,
    }
    return _apply(trainer, actions[request.action], request.action)


@router.post("/insurance")
async def insurance(request: InsuranceRequest, token: SessionToken) -> SessionStateResponse:
    trainer = get_trainer(require_session_id(token))
    operation = trainer.take_insurance if request.take else trainer.decline_insurance
    return _apply(trainer, operation, "decide insurance")


@router.post("/dealer")
async def dealer_step(token: SessionToken) -> SessionStateResponse:
    """Play one step of the dealer's turn."""
    trainer = get_trainer(require_session_id(token))
    return _apply(trainer, trainer.advance_dealer_turn, "advance dealer")


@router.post("/count")
async def submit_count(request: CountRequest, token: SessionToken) -> SessionStateResponse:
    """Answer the open count prompt."""
    trainer = get_trainer(require_session_id(token))
    return _apply(trainer, lambda: trainer.submit_count(request.entered_count), "submit count")


@router.post("/dismiss")
async def dismiss_prompt(token: SessionToken) -> SessionStateResponse:
    trainer = get_trainer(require_session_id(token))
    return _apply(trainer, trainer.dismiss_prompt, "dismiss prompt")


@router.post("/pause")
async def pause(token: SessionToken) -> SessionStateResponse:
    trainer = get_trainer(require_session_id(token))
    return _apply(trainer, trainer.pause, "pause")


@router.post("/resume")
async def resume(token: SessionToken) -> SessionStateResponse:
    trainer = get_trainer(require_session_id(token))
    return _apply(trainer, trainer.resume, "resume")


@router.post("/end")
async def end_session(token: SessionToken) -> SummaryResponse:
    """End the session and return its summary."""
    trainer = get_trainer(require_session_id(token))
    if not trainer.end_session():
        raise HTTPException(status_code=409, detail=f"Cannot end session in phase {trainer.phase.value}")
    return SummaryResponse(**asdict(trainer.summary()))


@router.post("/reset")
async def reset(token: SessionToken) -> SessionStateResponse:
    trainer = get_trainer(require_session_id(token))
    return _apply(trainer, trainer.reset_to_idle, "reset")


@router.get("/summary")
async def summary(token: SessionToken) -> SummaryResponse:
    trainer = get_trainer(require_session_id(token))
    if trainer.phase == SessionPhase.IDLE:
        raise HTTPException(status_code=404, detail="No session")
    return SummaryResponse(**asdict(trainer.summary()))


@router.get("/recovery")
async def recovery(token: SessionToken) -> RecoveryResponse:
    """Offer the last interrupted session, if it is worth restoring."""
    session_id = require_session_id(token)
    if get_trainer(session_id).phase != SessionPhase.IDLE:
        return RecoveryResponse(snapshot=None)
    return RecoveryResponse(snapshot=get_repository(session_id).recovery_candidate())


@router.post("/recover")
async def recover(token: SessionToken) -> SessionStateResponse:
    """Restore the interrupted session."""
    session_id = require_session_id(token)
    trainer = get_trainer(session_id)
    snapshot = get_repository(session_id).recovery_candidate()
    if snapshot is None:
        raise HTTPException(status_code=404, detail="No session to recover")
    return _apply(trainer, lambda: trainer.restore_session(snapshot), "recover")


@router.post("/discard")
async def discard(token: SessionToken) -> dict[str, bool]:
    """Drop the interrupted session."""
    trainer = get_trainer(require_session_id(token))
    if not trainer.discard_recovery():
        raise HTTPException(status_code=409, detail="A session is in progress")
    return {"discarded": True}
