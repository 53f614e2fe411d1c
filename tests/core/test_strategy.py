"""Tests for strategy charts, insurance and index plays."""

import copy

import pytest
from hypothesis import given, strategies as st

from core.cards import Card
from core.strategy import (
    BJA_H17_2019,
    Action,
    ChartConfigError,
    Comparison,
    DealSpeed,
    RuleConfig,
    StrategyRule,
    evaluate,
    find_deviation,
    load_chart,
    should_take_insurance,
)
from core.strategy.deviations import FAB_4, ILLUSTRIOUS_18, recommended_action
from core.strategy.sources.bja_h17_2019 import BJA_H17_2019_DATA

from conftest import make_hand


def _deviation(hand, upcard, tc, rules, is_split_hand=False):
    return find_deviation(hand, Card.from_string(upcard), tc, rules, is_split_hand)


class TestEvaluate:
    def test_gte(self):
        rule = StrategyRule(tc_threshold=3, comparison=Comparison.GTE)
        assert evaluate(rule, 3)
        assert evaluate(rule, 7)
        assert not evaluate(rule, 2)

    def test_lte(self):
        rule = StrategyRule(tc_threshold=0, comparison=Comparison.LTE)
        assert evaluate(rule, 0)
        assert evaluate(rule, -4)
        assert not evaluate(rule, 1)

    @given(st.integers(min_value=-20, max_value=20), st.integers(min_value=-20, max_value=20))
    def test_gte_and_lte_cover_every_count(self, threshold, tc):
        gte = StrategyRule(threshold, Comparison.GTE)
        lte = StrategyRule(threshold, Comparison.LTE)
        assert evaluate(gte, tc) or evaluate(lte, tc)
        if tc == threshold:
            assert evaluate(gte, tc) and evaluate(lte, tc)


class TestLoadChart:
    @pytest.fixture
    def data(self):
        return copy.deepcopy(BJA_H17_2019_DATA)

    def test_loads_bundled_chart(self, data):
        chart = load_chart(data)
        assert chart == BJA_H17_2019

    def test_unknown_comparison(self, data):
        data["insurance"]["comparison"] = "gt"
        with pytest.raises(ChartConfigError, match="unknown comparison"):
            load_chart(data)

    def test_missing_threshold(self, data):
        del data["insurance"]["tc_threshold"]
        with pytest.raises(ChartConfigError, match="missing 'tc_threshold'"):
            load_chart(data)

    @pytest.mark.parametrize("threshold", ["3", 3.0, True, None])
    def test_threshold_must_be_int(self, data, threshold):
        data["insurance"]["tc_threshold"] = threshold
        with pytest.raises(ChartConfigError, match="must be an integer"):
            load_chart(data)

    def test_bad_deviation_action(self, data):
        data["deviations"][0]["deviation_action"] = "pray"
        with pytest.raises(ChartConfigError, match="unknown action"):
            load_chart(data)

    def test_bad_upcard(self, data):
        data["deviations"][0]["dealer_upcard"] = 1
        with pytest.raises(ChartConfigError):
            load_chart(data)

    def test_missing_metadata(self, data):
        del data["metadata"]
        with pytest.raises(ChartConfigError):
            load_chart(data)

    def test_negative_index_defaults_to_lte(self, data):
        chart = load_chart(data)
        play = next(p for p in chart.deviations if p.name == "13 vs 2: Hit")
        assert play.rule.comparison is Comparison.LTE

    def test_chart_error_is_value_error(self):
        assert issubclass(ChartConfigError, ValueError)


class TestInsurance:
    @pytest.mark.parametrize("tc,expected", [(-3, False), (2, False), (3, True), (6, True)])
    def test_decision(self, tc, expected):
        assert should_take_insurance(tc) is expected

    def test_metadata(self):
        meta = BJA_H17_2019.metadata
        assert meta.id == "bja-h17-2019"
        assert meta.source_url.startswith("https://")
        assert BJA_H17_2019.insurance.tc_threshold == 3
        assert BJA_H17_2019.insurance.comparison is Comparison.GTE


class TestIllustrious18:
    def test_rows_exist(self):
        """Insurance lives on the chart; the other 17 plays are rows."""
        assert len(ILLUSTRIOUS_18) == 17
        assert all(play.group == "I18" for play in ILLUSTRIOUS_18)

    def test_16_vs_10(self, rules):
        hand = make_hand("10S", "6H")
        play = _deviation(hand, "KD", 0, rules)
        assert play is not None
        assert play.deviation_action == Action.STAND
        assert _deviation(hand, "KD", -1, rules) is None

    def test_12_vs_2(self, rules):
        hand = make_hand("10S", "2H")
        assert _deviation(hand, "2D", 2, rules) is None
        assert _deviation(hand, "2D", 3, rules).deviation_action == Action.STAND

    def test_12_vs_4_at_or_below_zero(self, rules):
        hand = make_hand("10S", "2H")
        assert _deviation(hand, "4D", 0, rules).deviation_action == Action.HIT
        assert _deviation(hand, "4D", -3, rules).deviation_action == Action.HIT
        assert _deviation(hand, "4D", 1, rules) is None

    def test_13_vs_2_negative_index(self, rules):
        hand = make_hand("10S", "3H")
        assert _deviation(hand, "2D", -1, rules).deviation_action == Action.HIT
        assert _deviation(hand, "2D", 0, rules) is None

    def test_10_pair_split_vs_6(self, rules):
        hand = make_hand("KS", "QH")
        play = _deviation(hand, "6D", 4, rules)
        assert play.deviation_action == Action.SPLIT
        assert _deviation(hand, "6D", 3, rules) is None

    def test_split_tens_not_resplit(self, rules):
        hand = make_hand("KS", "QH", is_split_hand=True)
        assert _deviation(hand, "6D", 6, rules, is_split_hand=True) is None

    def test_double_needs_two_cards(self, rules):
        assert _deviation(make_hand("6S", "4H"), "KD", 4, rules).deviation_action == Action.DOUBLE
        assert _deviation(make_hand("2S", "4H", "4C"), "KD", 4, rules) is None

    def test_double_after_split_respects_das(self):
        hand = make_hand("6S", "4H", is_split_hand=True)
        das = RuleConfig(double_after_split=True)
        no_das = RuleConfig(double_after_split=False)
        assert _deviation(hand, "KD", 4, das, is_split_hand=True) is not None
        assert _deviation(hand, "KD", 4, no_das, is_split_hand=True) is None

    def test_soft_hand_does_not_match_hard_row(self, rules):
        assert _deviation(make_hand("AS", "5H"), "KD", 5, rules) is None

    def test_recommended_action(self, rules):
        hand = make_hand("10S", "6H")
        upcard = Card.from_string("10D")
        assert recommended_action(hand, upcard, 1, rules) == Action.STAND
        assert recommended_action(hand, upcard, -1, rules) is None


class TestFab4:
    def test_rows_exist(self):
        assert len(FAB_4) == 4
        assert all(play.deviation_action == Action.SURRENDER for play in FAB_4)

    def test_requires_surrender(self, rules, surrender_rules):
        hand = make_hand("10S", "4H")
        assert _deviation(hand, "KD", 3, rules) is None
        assert _deviation(hand, "KD", 3, surrender_rules).deviation_action == Action.SURRENDER

    def test_15_vs_10_prefers_surrender(self, rules, surrender_rules):
        hand = make_hand("10S", "5H")
        assert _deviation(hand, "KD", 4, surrender_rules).deviation_action == Action.SURRENDER
        assert _deviation(hand, "KD", 4, rules).deviation_action == Action.STAND

    def test_no_surrender_after_split(self, surrender_rules):
        hand = make_hand("10S", "4H", is_split_hand=True)
        assert _deviation(hand, "KD", 5, surrender_rules, is_split_hand=True) is None

    def test_no_surrender_on_three_cards(self, surrender_rules):
        hand = make_hand("10S", "2H", "2C")
        assert _deviation(hand, "KD", 5, surrender_rules) is None

    def test_15_vs_ace(self, surrender_rules):
        hand = make_hand("9S", "6H")
        assert _deviation(hand, "AD", 1, surrender_rules).name == "15 vs A: Surrender"
        assert _deviation(hand, "AD", 0, surrender_rules) is None


class TestRuleConfig:
    def test_defaults(self, rules):
        assert rules.decks == 6
        assert rules.dealer_hits_soft_17
        assert rules.double_after_split
        assert not rules.surrender_allowed
        assert rules.shoe_size == 312

    @pytest.mark.parametrize("decks", [0, 3, 4, 7])
    def test_rejects_unsupported_decks(self, decks):
        with pytest.raises(ValueError):
            RuleConfig(decks=decks)

    @pytest.mark.parametrize("penetration", [0, -0.5, 1.01])
    def test_rejects_bad_penetration(self, penetration):
        with pytest.raises(ValueError):
            RuleConfig(penetration=penetration)

    def test_rejects_unknown_speed(self):
        with pytest.raises(ValueError):
            RuleConfig(deal_speed="warp")

    def test_presets(self):
        assert RuleConfig.single_deck().decks == 1
        assert RuleConfig.atlantic_city().decks == 8
        assert RuleConfig.vegas_strip().surrender_allowed

    def test_frozen(self, rules):
        with pytest.raises(AttributeError):
            rules.decks = 8

    def test_deal_speed_intervals(self):
        assert [speed.interval_ms for speed in DealSpeed] == [2000, 1200, 600, 300]
