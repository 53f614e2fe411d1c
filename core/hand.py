"""Hand totals and settlement."""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterator

from core.cards import Card
from core.strategy.actions import Action

if TYPE_CHECKING:
    from core.strategy.rules import RuleConfig


class HandOutcome(Enum):
    """Result of a resolved player hand."""

    WIN = "win"
    LOSS = "loss"
    PUSH = "push"
    BLACKJACK = "blackjack"
    SURRENDER = "surrender"


@dataclass
class Hand:
    """Cards held by the player or dealer, plus what was done with them."""

    cards: list[Card] = field(default_factory=list)
    actions: list[Action] = field(default_factory=list)
    is_doubled: bool = False
    is_split_hand: bool = False
    outcome: HandOutcome | None = None

    def add_card(self, card: Card) -> None:
        self.cards.append(card)

    def _hard_total(self) -> int:
        """Total with every ace counted as one."""
        return sum(1 if card.is_ace else card.value for card in self.cards)

    @property
    def is_soft(self) -> bool:
        """An ace is counting as 11."""
        return any(card.is_ace for card in self.cards) and self._hard_total() <= 11

    @property
    def value(self) -> int:
        """Best total: one ace is promoted to 11 when that does not bust."""
        total = self._hard_total()
        return total + 10 if self.is_soft else total

    @property
    def is_blackjack(self) -> bool:
        """Two-card 21 on an unsplit hand."""
        return len(self.cards) == 2 and self.value == 21 and not self.is_split_hand

    @property
    def is_busted(self) -> bool:
        return self.value > 21

    @property
    def is_pair(self) -> bool:
        """Two cards of equal point value, so K-Q counts."""
        return len(self.cards) == 2 and self.cards[0].value == self.cards[1].value

    @property
    def can_split(self) -> bool:
        """Pairs split once; split hands never resplit."""
        return self.is_pair and not self.is_split_hand

    @property
    def can_double(self) -> bool:
        return len(self.cards) == 2 and not self.is_doubled

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        if self.is_blackjack:
            label = "BLACKJACK"
        elif self.is_busted:
            label = "BUST"
        elif self.is_soft:
            label = f"soft {self.value}"
        else:
            label = str(self.value)
        return f"{' '.join(str(card) for card in self.cards)} ({label})"


def dealer_should_hit(dealer_hand: Hand, rules: "RuleConfig") -> bool:
    """Dealer hits below 17, and on soft 17 under H17 rules."""
    value = dealer_hand.value
    if value == 17 and dealer_hand.is_soft:
        return rules.dealer_hits_soft_17
    return value < 17


def resolve_outcome(player_hand: Hand, dealer_hand: Hand) -> HandOutcome:
    """Settle a finished player hand against the dealer's final hand."""
    if player_hand.is_blackjack:
        return HandOutcome.PUSH if dealer_hand.is_blackjack else HandOutcome.BLACKJACK
    if dealer_hand.is_blackjack or player_hand.is_busted:
        return HandOutcome.LOSS
    if dealer_hand.is_busted or player_hand.value > dealer_hand.value:
        return HandOutcome.WIN
    if player_hand.value < dealer_hand.value:
        return HandOutcome.LOSS
    return HandOutcome.PUSH
