"""Pytest fixtures for count trainer tests."""

import pytest
from random import Random

from core.cards import Card, Shoe, Rank, Suit
from core.hand import Hand
from core.counting import HiLoSystem
from core.persistence import InMemoryStore, KeyValueStore, SessionRepository, StorageError
from core.session import SessionRecord, TrainingMode, TrainingSession
from core.session.snapshot import RulesData, SessionSummaryData
from core.strategy import RuleConfig


class FakeClock:
    """Manually advanced clock, in seconds."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def shoe(rng):
    """A shuffled 6-deck shoe."""
    return Shoe(num_decks=6, penetration=0.75, rng=rng)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def repository(store):
    return SessionRepository(store)


@pytest.fixture
def trainer(repository, rng, clock):
    """An idle training session that autosaves to an in-memory store."""
    return TrainingSession(repository=repository, rng=rng, clock=clock)


@pytest.fixture
def empty_hand():
    """An empty player hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    hand = Hand()
    hand.add_card(Card(Rank.ACE, Suit.SPADES))
    hand.add_card(Card(Rank.KING, Suit.HEARTS))
    return hand


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    hand = Hand()
    hand.add_card(Card(Rank.ACE, Suit.SPADES))
    hand.add_card(Card(Rank.SIX, Suit.HEARTS))
    return hand


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    hand = Hand()
    hand.add_card(Card(Rank.TEN, Suit.SPADES))
    hand.add_card(Card(Rank.SIX, Suit.HEARTS))
    return hand


@pytest.fixture
def pair_8s_hand():
    """A pair of 8s hand."""
    hand = Hand()
    hand.add_card(Card(Rank.EIGHT, Suit.SPADES))
    hand.add_card(Card(Rank.EIGHT, Suit.HEARTS))
    return hand


@pytest.fixture
def bust_hand():
    """A busted hand."""
    hand = Hand()
    hand.add_card(Card(Rank.TEN, Suit.SPADES))
    hand.add_card(Card(Rank.SIX, Suit.HEARTS))
    hand.add_card(Card(Rank.KING, Suit.CLUBS))
    return hand


@pytest.fixture
def hilo():
    """Hi-Lo counting system."""
    return HiLoSystem()


@pytest.fixture
def rules():
    """Default rules: 6 decks, H17, DAS, no surrender."""
    return RuleConfig()


@pytest.fixture
def surrender_rules():
    """Vegas Strip rules (late surrender allowed)."""
    return RuleConfig.vegas_strip()


def make_hand(*codes: str, is_split_hand: bool = False) -> Hand:
    """Build a hand from short card codes like 'AS', '10H'."""
    return Hand(cards=[Card.from_string(c) for c in codes], is_split_hand=is_split_hand)


def stack_shoe(trainer: TrainingSession, *codes: str) -> None:
    """Replace the top of the trainer's shoe with the given cards, first code dealt first."""
    shoe = trainer._shoe
    assert shoe is not None
    del shoe._cards[len(shoe._cards) - len(codes):]
    shoe._cards.extend(Card.from_string(c) for c in reversed(codes))
    trainer.state.cards_remaining = shoe.cards_remaining


class BrokenStore(KeyValueStore):
    """A store whose backend is down."""

    def get(self, key):
        raise StorageError("down")

    def set(self, key, value):
        raise StorageError("down")

    def delete(self, key):
        raise StorageError("down")


def make_record(session_id: str, hands: int = 3) -> SessionRecord:
    """A finished-session history record."""
    return SessionRecord(
        session_id=session_id,
        mode=TrainingMode.COUNTING_DRILL,
        rules=RulesData(),
        ended_at="2026-01-01T00:00:00+00:00",
        hands_played=hands,
        summary=SessionSummaryData(
            hands_played=hands,
            total_prompts=0,
            correct_prompts=0,
            accuracy=0.0,
            avg_response_ms=0,
            longest_correct_streak=0,
        ),
    )


# Hypothesis strategies for property-based testing
from hypothesis import strategies as st


@st.composite
def card_strategy(draw):
    """Generate a random card."""
    rank = draw(st.sampled_from(list(Rank)))
    suit = draw(st.sampled_from(list(Suit)))
    return Card(rank, suit)


@st.composite
def hand_strategy(draw, min_cards=2, max_cards=5):
    """Generate a random hand."""
    cards = draw(st.lists(card_strategy(), min_size=min_cards, max_size=max_cards))
    hand = Hand()
    for card in cards:
        hand.add_card(card)
    return hand
