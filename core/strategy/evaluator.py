"""True-count threshold rules and their evaluation."""

from dataclasses import dataclass
from enum import Enum


class Comparison(Enum):
    """How a true count is compared against a rule threshold."""

    GTE = "gte"  # act at or above the threshold
    LTE = "lte"  # act at or below the threshold


@dataclass(frozen=True)
class StrategyRule:
    """A chart threshold: act when the true count compares true against it."""

    tc_threshold: int
    comparison: Comparison


def evaluate(rule: StrategyRule, true_count: int) -> bool:
    """
    Evaluate a chart rule at the given true count.

    Rules are validated when their chart is loaded, so every rule reaching
    this function carries a known comparison.
    """
    if rule.comparison is Comparison.GTE:
        return true_count >= rule.tc_threshold
    return true_count <= rule.tc_threshold
