"""Abstract base class for card counting systems."""

from abc import ABC, abstractmethod
from typing import Iterable, Mapping

from core.cards import Card, Rank


class CountingSystem(ABC):
    """
    Abstract base class for card counting systems.

    A system is a fixed tag table. Counting never mutates the system:
    every operation takes the current running count and returns the next one,
    so the caller owns the count.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of the counting system."""
        ...

    @property
    @abstractmethod
    def tag_values(self) -> Mapping[Rank, int]:
        """
        Return the tag value mapping for this system.

        Maps each Rank to its count value.
        """
        ...

    @property
    def is_balanced(self) -> bool:
        """A balanced system sums to 0 over a complete deck."""
        return self.full_deck_sum == 0

    @property
    def full_deck_sum(self) -> int:
        """
        Calculate the sum of tag values for a full 52-card deck.

        For balanced systems, this should be 0.
        """
        # Each rank appears 4 times in a deck (once per suit)
        return sum(self.tag_values[rank] * 4 for rank in Rank)

    def value_of(self, rank: Rank) -> int:
        """Return the tag for a rank."""
        return self.tag_values[rank]

    def apply_card(self, running_count: int, card: Card) -> int:
        """Return the running count after one more card is seen."""
        return running_count + self.tag_values[card.rank]

    def apply_cards(self, running_count: int, cards: Iterable[Card]) -> int:
        """
        Fold a sequence of cards onto the running count in dealt order.

        Args:
            running_count: Count before the first card
            cards: Cards in the order they were revealed

        Returns:
            The running count after the last card
        """
        for card in cards:
            running_count = self.apply_card(running_count, card)
        return running_count

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
