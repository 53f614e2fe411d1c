"""Strategy deviations based on true count (Illustrious 18, Fab 4)."""

from typing import TYPE_CHECKING

from core.cards import Card
from core.strategy.actions import Action
from core.strategy.chart import IndexPlay, StrategyChart
from core.strategy.rules import RuleConfig
from core.strategy.sources import BJA_H17_2019

if TYPE_CHECKING:
    from core.hand import Hand

ILLUSTRIOUS_18: tuple[IndexPlay, ...] = BJA_H17_2019.deviations_in("I18")
FAB_4: tuple[IndexPlay, ...] = BJA_H17_2019.deviations_in("Fab4")


def _play_is_available(
    play: IndexPlay,
    hand: "Hand",
    rules: RuleConfig,
    is_split_hand: bool,
) -> bool:
    """Check the table rules allow the deviation action for this hand."""
    two_cards = len(hand.cards) == 2
    action = play.deviation_action

    if action is Action.SURRENDER:
        return rules.surrender_allowed and two_cards and not is_split_hand
    if action is Action.DOUBLE:
        if not two_cards:
            return False
        return not is_split_hand or rules.double_after_split
    if action is Action.SPLIT:
        return two_cards and not is_split_hand and hand.is_pair
    return True


def find_deviation(
    hand: "Hand",
    dealer_upcard: Card,
    true_count: int,
    rules: RuleConfig,
    is_split_hand: bool = False,
    chart: StrategyChart = BJA_H17_2019,
) -> IndexPlay | None:
    """
    Find the index play that applies to a hand at the given true count.

    Args:
        hand: The player's hand
        dealer_upcard: Dealer's face-up card
        true_count: Current true count
        rules: Table rules (surrender, DAS)
        is_split_hand: Whether the hand came from a split
        chart: Chart to consult

    Returns:
        The applicable IndexPlay, or None when basic strategy stands
    """
    total = hand.value
    soft = hand.is_soft
    is_pair = hand.is_pair and not is_split_hand
    dealer_up = dealer_upcard.value

    # Surrender plays win over the I18 row for the same hand when surrender is offered
    for play in chart.deviations_in("Fab4") + chart.deviations_in("I18"):
        if (
            play.player_total != total
            or play.is_soft != soft
            or play.dealer_upcard != dealer_up
        ):
            continue

        # Pair plays only apply to pairs; a 10-10 pair is covered by the pair rows
        if play.is_pair and not is_pair:
            continue
        if not play.is_pair and is_pair and play.player_total == 20:
            continue

        if not _play_is_available(play, hand, rules, is_split_hand):
            continue

        if play.should_deviate(true_count):
            return play

    return None


def recommended_action(
    hand: "Hand",
    dealer_upcard: Card,
    true_count: int,
    rules: RuleConfig,
    is_split_hand: bool = False,
    chart: StrategyChart = BJA_H17_2019,
) -> Action | None:
    """Return the deviation action for a hand, or None when no deviation applies."""
    play = find_deviation(hand, dealer_upcard, true_count, rules, is_split_hand, chart)
    if play is None:
        return None
    return play.deviation_action
