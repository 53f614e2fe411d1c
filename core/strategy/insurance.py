"""Insurance decision driven by a chart's insurance rule."""

from core.strategy.chart import StrategyChart
from core.strategy.evaluator import evaluate
from core.strategy.sources import BJA_H17_2019


def should_take_insurance(true_count: int, chart: StrategyChart = BJA_H17_2019) -> bool:
    """
    Decide an insurance offer.

    Args:
        true_count: Current true count
        chart: Chart whose insurance rule applies

    Returns:
        True if insurance should be taken
    """
    return evaluate(chart.insurance, true_count)
