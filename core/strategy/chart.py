"""Strategy charts: immutable, sourced tables of true-count rules."""

from dataclasses import dataclass
from typing import Any, Literal, Mapping

from core.strategy.actions import Action
from core.strategy.evaluator import Comparison, StrategyRule, evaluate


class ChartConfigError(ValueError):
    """A chart definition is malformed; raised when the chart is loaded."""


@dataclass(frozen=True)
class ChartMetadata:
    """Where a chart's numbers come from, so decisions can be audited."""

    id: str
    source_url: str
    provider: str = ""
    chart_name: str = ""
    pdf_md5: str = ""
    retrieved_at: str = ""
    notes: tuple[str, ...] = ()


@dataclass(frozen=True)
class IndexPlay:
    """
    An index play (strategy deviation based on count).

    When the rule holds at the current true count, deviate from basic strategy.
    """

    name: str

    # Hand description
    player_total: int
    is_soft: bool
    is_pair: bool
    dealer_upcard: int  # 2-11 (11 = Ace)

    # Basic strategy action (what you'd normally do)
    basic_action: Action

    # Deviation action (what to do when the rule holds)
    deviation_action: Action

    rule: StrategyRule
    group: Literal["I18", "Fab4"] = "I18"

    @property
    def index(self) -> int:
        """The true count threshold."""
        return self.rule.tc_threshold

    def should_deviate(self, true_count: int) -> bool:
        """Check if the deviation should be taken at the given true count."""
        return evaluate(self.rule, true_count)

    def get_action(self, true_count: int) -> Action:
        """Get the correct action for the given true count."""
        if self.should_deviate(true_count):
            return self.deviation_action
        return self.basic_action


@dataclass(frozen=True)
class StrategyChart:
    """A loaded chart. Never mutated after loading."""

    metadata: ChartMetadata
    insurance: StrategyRule
    deviations: tuple[IndexPlay, ...] = ()

    def deviations_in(self, group: str) -> tuple[IndexPlay, ...]:
        """Return the index plays belonging to one group (I18 or Fab4)."""
        return tuple(play for play in self.deviations if play.group == group)


def _require(data: Mapping[str, Any], key: str, where: str) -> Any:
    if key not in data:
        raise ChartConfigError(f"{where}: missing '{key}'")
    return data[key]


def _parse_threshold(value: Any, where: str) -> int:
    # bool is an int subclass; a True threshold is a typo, not a count
    if isinstance(value, bool) or not isinstance(value, int):
        raise ChartConfigError(f"{where}: tc_threshold must be an integer, got {value!r}")
    return value


def _parse_comparison(value: Any, where: str) -> Comparison:
    try:
        return Comparison(value)
    except ValueError:
        raise ChartConfigError(f"{where}: unknown comparison {value!r}") from None


def _parse_action(value: Any, where: str) -> Action:
    try:
        return Action(value)
    except ValueError:
        raise ChartConfigError(f"{where}: unknown action {value!r}") from None


def parse_rule(data: Mapping[str, Any], where: str = "rule") -> StrategyRule:
    """Build a validated StrategyRule from plain data."""
    threshold = _parse_threshold(_require(data, "tc_threshold", where), where)
    comparison = _parse_comparison(_require(data, "comparison", where), where)
    return StrategyRule(tc_threshold=threshold, comparison=comparison)


def _parse_index_play(data: Mapping[str, Any]) -> IndexPlay:
    where = f"deviation {data.get('name', '?')!r}"
    threshold = _parse_threshold(_require(data, "tc_threshold", where), where)

    # Published charts mark negative indices as "at or below"
    if "comparison" in data:
        comparison = _parse_comparison(data["comparison"], where)
    else:
        comparison = Comparison.LTE if threshold < 0 else Comparison.GTE

    group = data.get("group", "I18")
    if group not in ("I18", "Fab4"):
        raise ChartConfigError(f"{where}: unknown group {group!r}")

    dealer_upcard = _require(data, "dealer_upcard", where)
    if not isinstance(dealer_upcard, int) or not 2 <= dealer_upcard <= 11:
        raise ChartConfigError(f"{where}: dealer_upcard must be 2-11")

    return IndexPlay(
        name=_require(data, "name", where),
        player_total=_require(data, "player_total", where),
        is_soft=bool(data.get("is_soft", False)),
        is_pair=bool(data.get("is_pair", False)),
        dealer_upcard=dealer_upcard,
        basic_action=_parse_action(_require(data, "basic_action", where), where),
        deviation_action=_parse_action(_require(data, "deviation_action", where), where),
        rule=StrategyRule(tc_threshold=threshold, comparison=comparison),
        group=group,
    )


def load_chart(data: Mapping[str, Any]) -> StrategyChart:
    """
    Build and validate a chart from plain data.

    Every rule is checked here, so a bad chart fails at load time and never
    in the middle of a session.

    Args:
        data: Mapping with 'metadata', 'insurance' and optional 'deviations'

    Returns:
        The immutable chart

    Raises:
        ChartConfigError: If any field is missing or malformed
    """
    meta = _require(data, "metadata", "chart")
    metadata = ChartMetadata(
        id=_require(meta, "id", "metadata"),
        source_url=_require(meta, "source_url", "metadata"),
        provider=meta.get("provider", ""),
        chart_name=meta.get("chart_name", ""),
        pdf_md5=meta.get("pdf_md5", ""),
        retrieved_at=meta.get("retrieved_at", ""),
        notes=tuple(meta.get("notes", ())),
    )
    insurance = parse_rule(_require(data, "insurance", "chart"), where="insurance")
    deviations = tuple(_parse_index_play(row) for row in data.get("deviations", ()))
    return StrategyChart(metadata=metadata, insurance=insurance, deviations=deviations)
