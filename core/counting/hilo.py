"""Hi-Lo card counting system."""

from typing import Iterable, Mapping

from core.cards import Card, Rank
from core.counting.base import CountingSystem


class HiLoSystem(CountingSystem):
    """
    Hi-Lo tags, the count every prompt in the trainer checks against.

    Tag values:
        2-6: +1 (low cards)
        7-9: 0  (neutral)
        10-A: -1 (high cards)

    Full deck sum: 0 (balanced)
    """

    _TAG_VALUES: Mapping[Rank, int] = {
        Rank.TWO: 1,
        Rank.THREE: 1,
        Rank.FOUR: 1,
        Rank.FIVE: 1,
        Rank.SIX: 1,
        Rank.SEVEN: 0,
        Rank.EIGHT: 0,
        Rank.NINE: 0,
        Rank.TEN: -1,
        Rank.JACK: -1,
        Rank.QUEEN: -1,
        Rank.KING: -1,
        Rank.ACE: -1,
    }

    @property
    def name(self) -> str:
        return "Hi-Lo"

    @property
    def tag_values(self) -> Mapping[Rank, int]:
        return self._TAG_VALUES


HI_LO = HiLoSystem()


def count_value_of(rank: Rank) -> int:
    """Return the Hi-Lo tag (-1, 0 or +1) for a rank."""
    return HI_LO.value_of(rank)


def apply_card(running_count: int, card: Card) -> int:
    """Add one card's Hi-Lo tag to the running count."""
    return HI_LO.apply_card(running_count, card)


def apply_cards(running_count: int, cards: Iterable[Card]) -> int:
    """Add every card's Hi-Lo tag to the running count, in dealt order."""
    return HI_LO.apply_cards(running_count, cards)
