"""Card counting: tag tables, running count and true count."""

from core.counting.base import CountingSystem
from core.counting.hilo import HI_LO, HiLoSystem, apply_card, apply_cards, count_value_of
from core.counting.true_count import CARDS_PER_DECK, estimate_decks_remaining, true_count

__all__ = [
    "CountingSystem",
    "HiLoSystem",
    "HI_LO",
    "count_value_of",
    "apply_card",
    "apply_cards",
    "true_count",
    "estimate_decks_remaining",
    "CARDS_PER_DECK",
]
