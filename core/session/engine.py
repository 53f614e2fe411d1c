"""Training session engine with state machine."""

import logging
import time
from dataclasses import replace
from datetime import datetime, timezone
from random import Random
from typing import TYPE_CHECKING, Callable, Sequence
from uuid import uuid4

from transitions import Machine

from core.cards import Card, Shoe
from core.counting import apply_card
from core.hand import Hand, HandOutcome, dealer_should_hit, resolve_outcome
from core.session.events import EventEmitter, EventType, SessionEvent
from core.session.models import (
    CountCheck,
    InsuranceOffer,
    SessionState,
    SessionSummary,
    TrainingMode,
    summarize,
)
from core.session.phase import PAUSABLE_PHASES, VALID_TRANSITIONS, SessionPhase
from core.session.prompts import DEFAULT_THRESHOLDS, PromptPolicy, PromptScheduler
from core.session.snapshot import (
    CountCheckData,
    HandData,
    InsuranceOfferData,
    PersistedSettings,
    RulesData,
    SchedulerData,
    SessionRecord,
    SessionSnapshot,
    SessionSummaryData,
    table_problem,
)
from core.strategy.actions import Action
from core.strategy.chart import IndexPlay, StrategyChart
from core.strategy.deviations import find_deviation
from core.strategy.insurance import should_take_insurance
from core.strategy.rules import RuleConfig
from core.strategy.sources import BJA_H17_2019

if TYPE_CHECKING:
    from core.persistence.repository import SessionRepository

logger = logging.getLogger(__name__)

# Phases a saved snapshot may be restored into
RESTORABLE_PHASES: tuple[SessionPhase, ...] = PAUSABLE_PHASES + (SessionPhase.PAUSED,)


class TrainingSession:
    """
    Card-counting training session driven by a state machine.

    The engine is UI-agnostic: callers deliver events through the public
    methods, which return True when accepted. A method delivered in a phase
    that does not accept it returns False, emits INVALID_TRANSITION and leaves
    the session untouched.
    """

    # State machine states
    STATES = [p.value for p in SessionPhase]

    # One trigger per destination phase, reachable from every phase that may enter it
    TRANSITIONS = [
        {
            "trigger": f"_enter_{dest.value}",
            "source": [src.value for src, dests in VALID_TRANSITIONS.items() if dest in dests],
            "dest": dest.value,
        }
        for dest in SessionPhase
    ]

    def __init__(
        self,
        repository: "SessionRepository | None" = None,
        prompt_thresholds: Sequence[int] = DEFAULT_THRESHOLDS,
        policy_factory: Callable[[], PromptPolicy] | None = None,
        rng: Random | None = None,
        clock: Callable[[], float] = time.time,
        chart: StrategyChart = BJA_H17_2019,
        complete_on_shoe_end: bool = False,
    ) -> None:
        """
        Initialize an idle training session.

        Args:
            repository: Where snapshots, history and settings are written
            prompt_thresholds: Hand counts between count prompts, drawn at random
            policy_factory: Builds a custom prompt policy for each new session
            rng: Random number generator for reproducible shoes and prompts
            clock: Seconds since the epoch, used for timestamps and response times
            chart: Chart used for insurance and index-play decisions
            complete_on_shoe_end: End the session at the cut card instead of reshuffling
        """
        self._repository = repository
        self._prompt_thresholds = tuple(prompt_thresholds)
        self._policy_factory = policy_factory
        self._rng = rng or Random()
        self._clock = clock
        self.chart = chart
        self.complete_on_shoe_end = complete_on_shoe_end

        self._state = SessionState()
        self._shoe: Shoe | None = None
        self._scheduler: PromptPolicy | None = None
        self.events = EventEmitter()

        # Initialize state machine
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial=SessionPhase.IDLE.value,
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    # Observables

    @property
    def phase(self) -> SessionPhase:
        """Get current phase as enum."""
        return SessionPhase(self._machine_state)  # type: ignore

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session_id(self) -> str | None:
        return self._state.session_id

    @property
    def hands_played(self) -> int:
        return self._state.hands_played

    @property
    def count_checks(self) -> int:
        return self._state.count_checks

    @property
    def running_count(self) -> int:
        return self._state.running_count

    @property
    def cards_remaining(self) -> int:
        return self._state.cards_remaining

    @property
    def decks_remaining(self) -> float:
        return self._state.decks_remaining

    @property
    def true_count(self) -> int:
        return self._state.true_count

    @property
    def scheduler(self) -> PromptPolicy | None:
        return self._scheduler

    def summary(self) -> SessionSummary:
        """Summary of the session so far; fixed once the session completes."""
        return summarize(self._state.hands_played, self._state.count_check_log)

    def subscribe(
        self,
        handler: Callable[[SessionEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to session events."""
        self.events.subscribe(handler, event_type)

    # Internals

    def _now(self) -> str:
        return datetime.fromtimestamp(self._clock(), tz=timezone.utc).isoformat()

    def _go(self, dest: SessionPhase) -> None:
        getattr(self, f"_enter_{dest.value}")()

    def _reject(self, operation: str) -> bool:
        logger.warning(f"Rejected {operation} in phase {self.phase.value}")
        self.events.emit_new(
            EventType.INVALID_TRANSITION,
            operation=operation,
            phase=self.phase.value,
        )
        return False

    def _reject_action(self, operation: str, message: str) -> bool:
        logger.debug(f"Rejected {operation}: {message}")
        self.events.emit_new(
            EventType.INVALID_ACTION,
            operation=operation,
            phase=self.phase.value,
            message=message,
        )
        return False

    def _new_policy(self) -> PromptPolicy:
        if self._policy_factory is not None:
            return self._policy_factory()
        return PromptScheduler(self._prompt_thresholds, rng=self._rng)

    def _autosave(self) -> None:
        if self._repository is None or not self.phase.is_active:
            return
        snapshot = self.snapshot()
        if snapshot is not None:
            self._repository.save(snapshot)

    def _current_shoe(self) -> Shoe:
        if self._shoe is None:
            raise RuntimeError("No shoe: start or restore a session first")
        return self._shoe

    def _current_policy(self) -> PromptPolicy:
        if self._scheduler is None:
            raise RuntimeError("No prompt policy: start or restore a session first")
        return self._scheduler

    def _dealer(self) -> Hand:
        if self._state.dealer_hand is None:
            raise RuntimeError("No dealer hand on the table")
        return self._state.dealer_hand

    def _table_cards(self) -> list[Card]:
        state = self._state
        cards = [card for hand in state.player_hands for card in hand.cards]
        if state.dealer_hand is not None:
            cards.extend(state.dealer_hand.cards)
        return cards

    def _reshuffle(self, mid_hand: bool = False) -> None:
        """
        Shuffle a fresh shoe; the running count starts over.

        A shuffle in the middle of a hand leaves the cards on the table out
        of the new shoe.
        """
        shoe = self._current_shoe()
        shoe.shuffle(in_play=self._table_cards() if mid_hand else ())
        self._state.running_count = 0
        self._state.cards_remaining = shoe.cards_remaining
        logger.info(
            f"Session {self._state.session_id}: shoe reshuffled"
            f"{' mid-hand' if mid_hand else ''}"
        )
        self.events.emit_new(
            EventType.SHOE_SHUFFLED,
            cards_remaining=self._state.cards_remaining,
            mid_hand=mid_hand,
        )

    def _draw(self) -> Card:
        shoe = self._current_shoe()
        if not len(shoe):
            self._reshuffle(mid_hand=True)
            if self.complete_on_shoe_end:
                # The round in progress is finished; the next deal ends the session
                self._state.shoe_exhausted = True
        card = shoe.draw()
        self._state.cards_remaining = shoe.cards_remaining
        return card

    def _count(self, card: Card) -> None:
        self._state.running_count = apply_card(self._state.running_count, card)

    def _deal_to(self, hand: Hand, target: str, face_up: bool = True) -> Card:
        """Deal a card to a hand, counting it if it lands face up."""
        card = self._draw()
        hand.add_card(card)
        if face_up:
            self._count(card)
        logger.debug(f"Dealt {card.code if face_up else '??'} to {target}")
        self.events.emit_new(
            EventType.CARD_DEALT,
            card=card.code if face_up else None,
            target=target,
            face_up=face_up,
            count_value=card.count_value if face_up else 0,
            running_count=self._state.running_count,
            cards_remaining=self._state.cards_remaining,
        )
        return card

    def _reveal_hole_card(self) -> None:
        dealer = self._dealer()
        hole = dealer.cards[1]
        self._state.hole_card_revealed = True
        self._count(hole)
        self.events.emit_new(
            EventType.HOLE_CARD_REVEALED,
            card=hole.code,
            count_value=hole.count_value,
            running_count=self._state.running_count,
            dealer_value=dealer.value,
        )

    def _has_live_hand(self) -> bool:
        """Any player hand the dealer still has to beat."""
        return any(
            h.outcome is None and not h.is_blackjack for h in self._state.player_hands
        )

    def _dealer_must_draw(self) -> bool:
        return self._has_live_hand() and dealer_should_hit(self._dealer(), self._state.rules)

    def _play_out_dealer(self) -> None:
        if not self._state.hole_card_revealed:
            self._reveal_hole_card()
        while self._dealer_must_draw():
            self._deal_to(self._dealer(), "dealer")

    def _resolve_hand(self) -> None:
        """Settle every hand, then open a count prompt if one is due."""
        state = self._state
        dealer = self._dealer()
        policy = self._current_policy()

        for hand in state.player_hands:
            if hand.outcome is None:
                hand.outcome = resolve_outcome(hand, dealer)

        state.hands_played += 1
        self._go(SessionPhase.HAND_RESOLVED)
        self.events.emit_new(
            EventType.HAND_RESOLVED,
            hand_number=state.hand_number,
            outcomes=[h.outcome.value for h in state.player_hands if h.outcome],
            dealer_value=dealer.value,
            running_count=state.running_count,
            true_count=state.true_count,
        )

        if policy.on_hand_resolved():
            state.pending_prompt = True
            state.prompt_started_at = self._clock()
            self._go(SessionPhase.COUNT_PROMPT_OPEN)
            self.events.emit_new(EventType.COUNT_PROMPT_OPENED, hand_number=state.hand_number)

    def _complete(self, reason: str) -> None:
        state = self._state
        state.pending_prompt = False
        state.prompt_started_at = None
        self._go(SessionPhase.COMPLETED)

        summary = self.summary()
        logger.info(
            f"Session {state.session_id} completed ({reason}): "
            f"{summary.hands_played} hands, {summary.total_prompts} count checks"
        )
        self.events.emit_new(
            EventType.SESSION_COMPLETED,
            reason=reason,
            hands_played=summary.hands_played,
            count_checks=summary.total_prompts,
            accuracy=summary.accuracy,
        )

        if self._repository is not None:
            if state.hands_played > 0:
                self._repository.append_history(self._record(summary))
            self._repository.clear()

    def _record(self, summary: SessionSummary) -> SessionRecord:
        state = self._state
        return SessionRecord(
            session_id=state.session_id or "",
            mode=state.mode,
            rules=RulesData.from_rules(state.rules),
            started_at=state.started_at,
            ended_at=self._now(),
            hands_played=state.hands_played,
            count_checks=[CountCheckData.from_check(c) for c in state.count_check_log],
            summary=SessionSummaryData.from_summary(summary),
        )

    # Lifecycle

    def start_session(
        self,
        mode: TrainingMode = TrainingMode.COUNTING_DRILL,
        rules: RuleConfig | None = None,
    ) -> bool:
        """
        Start a new session with a fresh shoe.

        Args:
            mode: Counting drill or play-and-count
            rules: Table rules (uses defaults if not provided)

        Returns:
            True if the session started
        """
        if self.phase != SessionPhase.IDLE:
            return self._reject("start_session")

        rules = rules or RuleConfig()
        self._shoe = Shoe(num_decks=rules.decks, penetration=rules.penetration, rng=self._rng)
        self._scheduler = self._new_policy()
        self._state = SessionState(
            session_id=str(uuid4()),
            mode=mode,
            rules=rules,
            cards_remaining=self._shoe.cards_remaining,
            started_at=self._now(),
        )
        self._go(SessionPhase.READY)

        logger.info(f"Session {self._state.session_id} started: {mode.value}, {rules.decks} decks")
        self.events.emit_new(
            EventType.SESSION_STARTED,
            session_id=self._state.session_id,
            mode=mode.value,
            decks=rules.decks,
        )

        if self._repository is not None:
            self._repository.save_settings(
                PersistedSettings(mode=mode, rules=RulesData.from_rules(rules))
            )
        self._autosave()
        return True

    def deal_hand(self) -> bool:
        """
        Deal the next hand.

        In a counting drill, or when the player is dealt a blackjack, the hand
        plays itself out and resolves before this returns.
        """
        if self.phase not in (SessionPhase.READY, SessionPhase.HAND_RESOLVED):
            return self._reject("deal_hand")

        state = self._state
        if self._current_shoe().needs_shuffle or state.shoe_exhausted:
            if self.complete_on_shoe_end:
                self._complete("shoe_end")
                return True
            self._reshuffle()

        self._go(SessionPhase.DEALING)
        state.hand_number += 1
        state.player_hands = [Hand()]
        state.dealer_hand = Hand()
        state.hole_card_revealed = False
        state.active_hand_index = 0
        state.insurance_offer = None
        self.events.emit_new(EventType.HAND_STARTED, hand_number=state.hand_number)

        # Deal: player, dealer, player, dealer (face down)
        player = state.player_hands[0]
        self._deal_to(player, "player")
        self._deal_to(state.dealer_hand, "dealer")
        self._deal_to(player, "player")
        self._deal_to(state.dealer_hand, "dealer", face_up=False)

        if state.mode == TrainingMode.COUNTING_DRILL or player.is_blackjack:
            self._go(SessionPhase.DEALER_TURN)
            self._play_out_dealer()
            self._resolve_hand()
        else:
            upcard = state.dealer_upcard
            if upcard is not None and upcard.is_ace:
                tc = state.true_count
                state.insurance_offer = InsuranceOffer(
                    true_count=tc,
                    recommended=should_take_insurance(tc, self.chart),
                )
                self.events.emit_new(
                    EventType.INSURANCE_OFFERED,
                    true_count=tc,
                    recommended=state.insurance_offer.recommended,
                )
            self._go(SessionPhase.AWAITING_PLAYER_ACTION)

        self._autosave()
        return True

    # Player actions

    def _active_hand(self, operation: str) -> Hand | None:
        """The hand a player action applies to, or None after rejecting it."""
        if self.phase != SessionPhase.AWAITING_PLAYER_ACTION:
            self._reject(operation)
            return None
        offer = self._state.insurance_offer
        if offer is not None and not offer.decided:
            self._reject_action(operation, "Insurance decision pending")
            return None
        return self._state.active_hand

    def _record_action(self, hand: Hand, action: Action, play: IndexPlay | None) -> None:
        hand.actions.append(action)
        self.events.emit_new(
            EventType.PLAYER_ACTION,
            action=action.value,
            hand_index=self._state.active_hand_index,
            hand_value=hand.value,
            index_play=play.name if play else None,
            followed_index=(play.deviation_action is action) if play else None,
        )

    def _advance_to_next_hand(self) -> None:
        """Move to the next hand or dealer turn."""
        self._state.active_hand_index += 1
        if self._state.active_hand_index < len(self._state.player_hands):
            self._go(SessionPhase.AWAITING_PLAYER_ACTION)
        else:
            self._go(SessionPhase.DEALER_TURN)

    def current_deviation(self) -> IndexPlay | None:
        """Index play that applies to the active hand at the current true count."""
        if self.phase != SessionPhase.AWAITING_PLAYER_ACTION:
            return None
        hand = self._state.active_hand
        upcard = self._state.dealer_upcard
        if hand is None or upcard is None:
            return None
        return find_deviation(
            hand,
            upcard,
            self._state.true_count,
            self._state.rules,
            is_split_hand=hand.is_split_hand,
            chart=self.chart,
        )

    def hit(self) -> bool:
        """Player hits (takes another card)."""
        hand = self._active_hand("hit")
        if hand is None:
            return False

        play = self.current_deviation()
        self._deal_to(hand, "player")
        self._record_action(hand, Action.HIT, play)

        if hand.is_busted:
            hand.outcome = HandOutcome.LOSS
            self._advance_to_next_hand()
        else:
            self._go(SessionPhase.AWAITING_PLAYER_ACTION)

        self._autosave()
        return True

    def stand(self) -> bool:
        """Player stands (keeps current hand)."""
        hand = self._active_hand("stand")
        if hand is None:
            return False

        self._record_action(hand, Action.STAND, self.current_deviation())
        self._advance_to_next_hand()
        self._autosave()
        return True

    def double(self) -> bool:
        """Player doubles down: one more card, then the hand is finished."""
        hand = self._active_hand("double")
        if hand is None:
            return False
        if not hand.can_double:
            return self._reject_action("double", "Can only double on two cards")
        if hand.is_split_hand and not self._state.rules.double_after_split:
            return self._reject_action("double", "Double after split not allowed")

        play = self.current_deviation()
        hand.is_doubled = True
        self._deal_to(hand, "player")
        self._record_action(hand, Action.DOUBLE, play)

        if hand.is_busted:
            hand.outcome = HandOutcome.LOSS

        self._advance_to_next_hand()
        self._autosave()
        return True

    def split(self) -> bool:
        """Player splits a pair. One split per hand, no resplitting."""
        hand = self._active_hand("split")
        if hand is None:
            return False
        if not hand.can_split or len(self._state.player_hands) > 1:
            return self._reject_action("split", "Cannot split")

        play = self.current_deviation()
        self._record_action(hand, Action.SPLIT, play)

        # Create two hands, one card each
        first = Hand(cards=[hand.cards[0]], actions=list(hand.actions), is_split_hand=True)
        second = Hand(cards=[hand.cards[1]], is_split_hand=True)
        index = self._state.active_hand_index
        self._state.player_hands[index : index + 1] = [first, second]

        self._deal_to(first, "player")
        self._deal_to(second, "player")

        self._go(SessionPhase.AWAITING_PLAYER_ACTION)
        self._autosave()
        return True

    def surrender(self) -> bool:
        """Player surrenders the hand (late surrender, first decision only)."""
        hand = self._active_hand("surrender")
        if hand is None:
            return False
        if not self._state.rules.surrender_allowed:
            return self._reject_action("surrender", "Surrender not allowed")
        if len(hand.cards) != 2 or hand.is_split_hand:
            return self._reject_action("surrender", "Can only surrender on first action")

        self._record_action(hand, Action.SURRENDER, self.current_deviation())
        hand.outcome = HandOutcome.SURRENDER
        self._advance_to_next_hand()
        self._autosave()
        return True

    def _decide_insurance(self, taken: bool) -> bool:
        operation = "take_insurance" if taken else "decline_insurance"
        if self.phase != SessionPhase.AWAITING_PLAYER_ACTION:
            return self._reject(operation)
        offer = self._state.insurance_offer
        if offer is None or offer.decided:
            return self._reject_action(operation, "No insurance offer open")

        offer = replace(offer, taken=taken)
        self._state.insurance_offer = offer
        self.events.emit_new(
            EventType.INSURANCE_DECIDED,
            taken=taken,
            recommended=offer.recommended,
            correct=offer.correct,
            true_count=offer.true_count,
        )
        self._go(SessionPhase.AWAITING_PLAYER_ACTION)
        self._autosave()
        return True

    def take_insurance(self) -> bool:
        """Player takes insurance against the dealer's ace."""
        return self._decide_insurance(True)

    def decline_insurance(self) -> bool:
        """Player declines insurance."""
        return self._decide_insurance(False)

    # Dealer

    def advance_dealer_turn(self) -> bool:
        """
        Play one step of the dealer's turn.

        The first call reveals the hole card; each later call draws one card
        while the dealer must hit. The hand resolves on the call that leaves
        the dealer with nothing left to do.
        """
        if self.phase != SessionPhase.DEALER_TURN:
            return self._reject("advance_dealer_turn")

        if not self._state.hole_card_revealed:
            self._reveal_hole_card()
        elif self._dealer_must_draw():
            self._deal_to(self._dealer(), "dealer")

        if self._dealer_must_draw():
            self._go(SessionPhase.DEALER_TURN)
        else:
            self._resolve_hand()

        self._autosave()
        return True

    def finish_dealer_turn(self) -> bool:
        """Play the dealer's whole turn and resolve the hand."""
        if self.phase != SessionPhase.DEALER_TURN:
            return self._reject("finish_dealer_turn")
        while self.phase == SessionPhase.DEALER_TURN:
            self.advance_dealer_turn()
        return True

    # Count prompts

    def submit_count(self, entered_count: int) -> bool:
        """
        Answer an open count prompt.

        Args:
            entered_count: The running count the player believes is current

        Returns:
            True if the answer was recorded
        """
        if self.phase != SessionPhase.COUNT_PROMPT_OPEN:
            return self._reject("submit_count")

        state = self._state
        policy = self._current_policy()
        started = state.prompt_started_at
        response_ms = max(0, round((self._clock() - started) * 1000)) if started is not None else 0

        check = CountCheck(
            session_id=state.session_id or "",
            hand_number=state.hand_number,
            expected_count=state.running_count,
            entered_count=int(entered_count),
            response_ms=response_ms,
            created_at=self._now(),
        )
        state.count_check_log.append(check)
        state.pending_prompt = False
        state.prompt_started_at = None
        policy.on_prompt_submitted()
        self._go(SessionPhase.HAND_RESOLVED)

        self.events.emit_new(
            EventType.COUNT_SUBMITTED,
            hand_number=check.hand_number,
            expected_count=check.expected_count,
            entered_count=check.entered_count,
            is_correct=check.is_correct,
            delta=check.delta,
            response_ms=check.response_ms,
        )
        self._autosave()
        return True

    def dismiss_prompt(self) -> bool:
        """Close an open prompt without recording a count check."""
        if self.phase != SessionPhase.COUNT_PROMPT_OPEN:
            return self._reject("dismiss_prompt")

        self._state.pending_prompt = False
        self._state.prompt_started_at = None
        self._go(SessionPhase.HAND_RESOLVED)
        self.events.emit_new(EventType.COUNT_PROMPT_DISMISSED, hand_number=self._state.hand_number)
        self._autosave()
        return True

    # Pause and end

    def pause(self) -> bool:
        if self.phase not in PAUSABLE_PHASES:
            return self._reject("pause")

        self._state.phase_before_pause = self.phase
        self._state.paused_at = self._clock()
        self._go(SessionPhase.PAUSED)
        self.events.emit_new(EventType.PAUSED, paused_from=self._state.phase_before_pause.value)
        self._autosave()
        return True

    def resume(self) -> bool:
        """Return to the exact phase the session was paused from."""
        state = self._state
        if self.phase != SessionPhase.PAUSED or state.phase_before_pause is None:
            return self._reject("resume")

        # Time spent paused does not count toward a prompt's response time
        if state.prompt_started_at is not None and state.paused_at is not None:
            state.prompt_started_at += max(0.0, self._clock() - state.paused_at)

        target = state.phase_before_pause
        state.phase_before_pause = None
        state.paused_at = None
        self._go(target)
        self.events.emit_new(EventType.RESUMED, phase=target.value)
        self._autosave()
        return True

    def end_session(self) -> bool:
        """End the session; its summary becomes read-only."""
        if not self.phase.is_active or self.phase == SessionPhase.DEALING:
            return self._reject("end_session")
        self._complete("ended")
        return True

    def reset_to_idle(self) -> bool:
        """Clear a completed session and its persisted snapshot."""
        if self.phase != SessionPhase.COMPLETED:
            return self._reject("reset_to_idle")

        session_id = self._state.session_id
        self._state = SessionState()
        self._shoe = None
        self._scheduler = None
        self._go(SessionPhase.IDLE)

        if self._repository is not None:
            self._repository.clear()

        logger.info(f"Session {session_id} reset")
        self.events.emit_new(EventType.SESSION_RESET, session_id=session_id)
        return True

    # Recovery

    def snapshot(self) -> SessionSnapshot | None:
        """Serializable projection of the session, or None when idle."""
        if self.phase == SessionPhase.IDLE:
            return None

        state = self._state
        return SessionSnapshot(
            session_id=state.session_id,
            phase=self.phase,
            phase_before_pause=state.phase_before_pause,
            mode=state.mode,
            rules=RulesData.from_rules(state.rules),
            running_count=state.running_count,
            hand_number=state.hand_number,
            hands_played=state.hands_played,
            count_checks=[CountCheckData.from_check(c) for c in state.count_check_log],
            player_hands=[HandData.from_hand(h) for h in state.player_hands],
            dealer_hand=HandData.from_hand(state.dealer_hand) if state.dealer_hand else None,
            hole_card_revealed=state.hole_card_revealed,
            active_hand_index=state.active_hand_index,
            insurance_offer=(
                InsuranceOfferData.from_offer(state.insurance_offer)
                if state.insurance_offer
                else None
            ),
            pending_prompt=state.pending_prompt,
            prompt_started_at=state.prompt_started_at,
            paused_at=state.paused_at,
            shoe=[card.code for card in self._shoe.cards] if self._shoe else None,
            shoe_exhausted=state.shoe_exhausted,
            scheduler=(
                SchedulerData.from_state(self._scheduler.serialize())
                if self._scheduler
                else None
            ),
            started_at=state.started_at,
            saved_at=self._now(),
        )

    def restore_session(self, snapshot: SessionSnapshot) -> bool:
        """
        Rebuild an interrupted session from a snapshot.

        A snapshot saved while paused restores paused. A snapshot without a
        shoe restores onto a freshly shuffled shoe with the count reset.
        """
        if self.phase != SessionPhase.IDLE:
            return self._reject("restore_session")
        if snapshot.phase not in RESTORABLE_PHASES:
            return self._reject_action("restore_session", f"Cannot restore into {snapshot.phase.value}")
        if snapshot.phase == SessionPhase.PAUSED and snapshot.phase_before_pause not in PAUSABLE_PHASES:
            return self._reject_action("restore_session", "Paused snapshot has no resumable phase")
        problem = table_problem(snapshot)
        if problem is not None:
            return self._reject_action("restore_session", f"Inconsistent snapshot: {problem}")

        try:
            rules = snapshot.rules.to_rules()
            player_hands = [h.to_hand() for h in snapshot.player_hands]
            dealer_hand = snapshot.dealer_hand.to_hand() if snapshot.dealer_hand else None
            if snapshot.shoe is None:
                shoe = Shoe(num_decks=rules.decks, penetration=rules.penetration, rng=self._rng)
                table = [c for h in player_hands + ([dealer_hand] if dealer_hand else []) for c in h.cards]
                shoe.shuffle(in_play=table)
                running_count = 0
            else:
                shoe = Shoe(
                    num_decks=rules.decks,
                    penetration=rules.penetration,
                    rng=self._rng,
                    cards=[Card.from_string(code) for code in snapshot.shoe],
                )
                running_count = snapshot.running_count
            scheduler = self._new_policy()
            if snapshot.scheduler is not None:
                scheduler.restore(snapshot.scheduler.to_state())
        except ValueError as e:
            return self._reject_action("restore_session", f"Unusable snapshot: {e}")

        self._shoe = shoe
        self._scheduler = scheduler
        self._state = SessionState(
            session_id=snapshot.session_id or str(uuid4()),
            mode=snapshot.mode,
            rules=rules,
            running_count=running_count,
            cards_remaining=shoe.cards_remaining,
            hand_number=snapshot.hand_number,
            hands_played=snapshot.hands_played,
            count_check_log=[c.to_check() for c in snapshot.count_checks],
            player_hands=player_hands,
            dealer_hand=dealer_hand,
            hole_card_revealed=snapshot.hole_card_revealed,
            active_hand_index=snapshot.active_hand_index,
            insurance_offer=snapshot.insurance_offer.to_offer() if snapshot.insurance_offer else None,
            pending_prompt=snapshot.pending_prompt,
            prompt_started_at=snapshot.prompt_started_at,
            phase_before_pause=snapshot.phase_before_pause,
            paused_at=snapshot.paused_at,
            shoe_exhausted=snapshot.shoe_exhausted,
            started_at=snapshot.started_at,
        )
        self.machine.set_state(snapshot.phase.value)

        logger.info(
            f"Session {self._state.session_id} restored in {snapshot.phase.value} "
            f"after {snapshot.hands_played} hands"
        )
        self.events.emit_new(
            EventType.SESSION_RESTORED,
            session_id=self._state.session_id,
            phase=snapshot.phase.value,
            hands_played=snapshot.hands_played,
        )
        self._autosave()
        return True

    def discard_recovery(self) -> bool:
        """Drop the persisted snapshot instead of restoring it."""
        if self.phase != SessionPhase.IDLE:
            return self._reject("discard_recovery")
        if self._repository is not None:
            self._repository.clear()
        logger.info("Discarded recoverable session")
        return True
