"""True count conversion and deck estimation."""

import math

CARDS_PER_DECK = 52


def true_count(running_count: int, decks_remaining: float) -> int:
    """
    Convert a running count to a true count.

    The quotient is truncated toward zero, so -7 over 3 decks is -2.
    With no deck depth to divide by (zero or negative), the running count
    is returned unchanged.

    Args:
        running_count: Current running count
        decks_remaining: Estimated decks left in the shoe

    Returns:
        The true count as an integer
    """
    if decks_remaining <= 0:
        return running_count
    return math.trunc(running_count / decks_remaining)


def estimate_decks_remaining(cards_remaining: int) -> float:
    """Estimate undealt decks from cards left in the shoe (not rounded)."""
    return cards_remaining / CARDS_PER_DECK
