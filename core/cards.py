"""Cards and the dealing shoe."""

from dataclasses import dataclass
from enum import Enum
from random import Random
from typing import Iterable


class Suit(Enum):
    """Card suits, valued by their one-letter code."""

    CLUBS = "C"
    DIAMONDS = "D"
    HEARTS = "H"
    SPADES = "S"

    def __str__(self) -> str:
        return _SUIT_SYMBOLS[self]

    @property
    def code(self) -> str:
        return self.value


_SUIT_SYMBOLS = {
    Suit.CLUBS: "♣",
    Suit.DIAMONDS: "♦",
    Suit.HEARTS: "♥",
    Suit.SPADES: "♠",
}


class Rank(Enum):
    """Card ranks, ordered two through ace."""

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    def __str__(self) -> str:
        return _FACE_SYMBOLS.get(self, str(self.value))

    @property
    def blackjack_value(self) -> int:
        """Point value: pips at face value, faces 10, ace 11."""
        if self is Rank.ACE:
            return 11
        return min(self.value, 10)

    @property
    def is_ace(self) -> bool:
        return self is Rank.ACE


_FACE_SYMBOLS = {Rank.JACK: "J", Rank.QUEEN: "Q", Rank.KING: "K", Rank.ACE: "A"}

# Accepted spellings when parsing short codes
_RANK_CODES = {str(rank): rank for rank in Rank}
_RANK_CODES["T"] = Rank.TEN
_SUIT_CODES = {suit.code: suit for suit in Suit}
_SUIT_CODES.update({symbol: suit for suit, symbol in _SUIT_SYMBOLS.items()})


@dataclass(frozen=True, slots=True)
class Card:
    """
    Immutable playing card.

    The Hi-Lo tag is a property of the rank, so a card can never carry a
    count value that disagrees with its face.
    """

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    @property
    def value(self) -> int:
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        return self.rank.is_ace

    @property
    def count_value(self) -> int:
        from core.counting.hilo import count_value_of

        return count_value_of(self.rank)

    @property
    def code(self) -> str:
        """ASCII code used in snapshots, e.g. '10S' or 'AH'."""
        return f"{self.rank}{self.suit.code}"

    @classmethod
    def from_string(cls, text: str) -> "Card":
        """Parse '10S', 'TS', 'ah' or '2♣'."""
        text = text.strip().upper()
        rank = _RANK_CODES.get(text[:-1])
        suit = _SUIT_CODES.get(text[-1:])
        if rank is None or suit is None:
            raise ValueError(f"Invalid card code: {text!r}")
        return cls(rank, suit)


# Cards kept back below the cut so a round in progress can be finished
ROUND_RESERVE = 15


def build_deck() -> list[Card]:
    """Return one 52-card deck in suit-then-rank order."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


class Shoe:
    """A multi-deck shoe with a cut card."""

    def __init__(
        self,
        num_decks: int = 6,
        penetration: float = 0.75,
        rng: Random | None = None,
        cards: Iterable[Card] | None = None,
    ) -> None:
        """
        Build a shuffled shoe, or restore one mid-shoe.

        Args:
            num_decks: Number of decks in the shoe
            penetration: Fraction of the shoe dealt before the cut card comes out
            rng: Random number generator for shuffling
            cards: Undealt cards to restore, top of the shoe last
        """
        if num_decks < 1:
            raise ValueError("Shoe must have at least 1 deck")
        if not 0.0 < penetration <= 1.0:
            raise ValueError("Penetration must be between 0 and 1")

        self._num_decks = num_decks
        self._rng = rng or Random()
        self._cut_card_position = int(num_decks * 52 * penetration)

        if cards is None:
            self._cards: list[Card] = []
            self.shuffle()
        else:
            self._cards = list(cards)
            if len(self._cards) > self.total_cards:
                raise ValueError("Restored shoe holds more cards than it can")

    def shuffle(self, in_play: Iterable[Card] = ()) -> None:
        """
        Gather the cards back into the shoe and shuffle.

        Cards still on the table (``in_play``) stay out of the new shoe.
        """
        cards = [card for _ in range(self._num_decks) for card in build_deck()]
        for card in in_play:
            cards.remove(card)
        self._rng.shuffle(cards)
        self._cards = cards

    def draw(self) -> Card:
        if not self._cards:
            raise IndexError("Cannot draw from empty shoe")
        return self._cards.pop()

    @property
    def needs_shuffle(self) -> bool:
        """The cut card has come out, or too few cards are left for another round."""
        return (
            self.cards_dealt >= self._cut_card_position
            or len(self._cards) < ROUND_RESERVE
        )

    @property
    def num_decks(self) -> int:
        return self._num_decks

    @property
    def total_cards(self) -> int:
        return self._num_decks * 52

    @property
    def cards_remaining(self) -> int:
        return len(self._cards)

    @property
    def cards_dealt(self) -> int:
        return self.total_cards - len(self._cards)

    @property
    def cards(self) -> list[Card]:
        """Copy of the undealt cards, top of the shoe last."""
        return list(self._cards)

    def __len__(self) -> int:
        return len(self._cards)
