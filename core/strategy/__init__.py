"""Table rules, strategy charts and chart-driven decisions."""

from core.strategy.actions import Action
from core.strategy.chart import (
    ChartConfigError,
    ChartMetadata,
    IndexPlay,
    StrategyChart,
    load_chart,
)
from core.strategy.deviations import FAB_4, ILLUSTRIOUS_18, find_deviation
from core.strategy.evaluator import Comparison, StrategyRule, evaluate
from core.strategy.insurance import should_take_insurance
from core.strategy.rules import DECK_COUNTS, DealSpeed, RuleConfig
from core.strategy.sources import BJA_H17_2019

__all__ = [
    "Action",
    "BJA_H17_2019",
    "ChartConfigError",
    "ChartMetadata",
    "Comparison",
    "DECK_COUNTS",
    "DealSpeed",
    "FAB_4",
    "ILLUSTRIOUS_18",
    "IndexPlay",
    "RuleConfig",
    "StrategyChart",
    "StrategyRule",
    "evaluate",
    "find_deviation",
    "load_chart",
    "should_take_insurance",
]
