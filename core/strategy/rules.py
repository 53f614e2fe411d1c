"""Blackjack table rule variations."""

from dataclasses import dataclass
from enum import Enum

DECK_COUNTS = (1, 2, 6, 8)


class DealSpeed(Enum):
    """Deal pacing presets, in milliseconds between cards."""

    SLOW = "slow"
    NORMAL = "normal"
    FAST = "fast"
    VERY_FAST = "very_fast"

    @property
    def interval_ms(self) -> int:
        return {
            DealSpeed.SLOW: 2000,
            DealSpeed.NORMAL: 1200,
            DealSpeed.FAST: 600,
            DealSpeed.VERY_FAST: 300,
        }[self]


@dataclass(frozen=True)
class RuleConfig:
    """
    Table rules in effect for a training session.

    Immutable for the lifetime of a session.
    """

    # Deck configuration
    decks: int = 6
    penetration: float = 0.75

    # Dealer rules
    dealer_hits_soft_17: bool = True  # H17 vs S17

    # Player options
    double_after_split: bool = True  # DAS
    surrender_allowed: bool = False

    deal_speed: DealSpeed = DealSpeed.NORMAL

    def __post_init__(self) -> None:
        """Validate rule combinations."""
        if self.decks not in DECK_COUNTS:
            raise ValueError(f"decks must be one of {DECK_COUNTS}")
        if not 0.0 < self.penetration <= 1.0:
            raise ValueError("penetration must be between 0 and 1")
        if not isinstance(self.deal_speed, DealSpeed):
            raise ValueError(f"Unknown deal speed: {self.deal_speed!r}")

    @property
    def shoe_size(self) -> int:
        """Number of cards in a full shoe."""
        return self.decks * 52

    @classmethod
    def vegas_strip(cls) -> "RuleConfig":
        """Standard Vegas Strip rules."""
        return cls(
            decks=6,
            dealer_hits_soft_17=False,
            double_after_split=True,
            surrender_allowed=True,
        )

    @classmethod
    def single_deck(cls) -> "RuleConfig":
        """Single deck rules."""
        return cls(
            decks=1,
            penetration=0.65,
            dealer_hits_soft_17=True,
            double_after_split=False,
            surrender_allowed=False,
        )

    @classmethod
    def atlantic_city(cls) -> "RuleConfig":
        """Atlantic City rules."""
        return cls(
            decks=8,
            dealer_hits_soft_17=False,
            double_after_split=True,
            surrender_allowed=True,
        )
