"""Tests for the static reference tables and lookups."""

import pytest

from engines.reference import (
    DEFAULT_INPUTS,
    INPUT_GROUPS,
    INTENSITY_PRESETS,
    SCENARIO_MULTIPLIERS,
    default_inputs,
    get_industry_budget_pct,
    get_intensity_preset,
    get_scenario_multiplier,
    get_source_attribution,
    lookup,
)


class TestLookups:
    def test_industry_ratio(self):
        assert get_industry_budget_pct('B2B Average') == 6.7
        assert get_industry_budget_pct('Technology') == 8.5

    def test_unknown_keys_return_none(self):
        assert get_industry_budget_pct('Underwater Basket Weaving') is None
        assert get_scenario_multiplier('optimistic') is None
        assert get_source_attribution('nope') is None
        assert lookup('industry', 'nope') is None
        assert lookup('no-such-table', 'B2B Average') is None

    def test_scenario_multipliers(self):
        assert SCENARIO_MULTIPLIERS == {'conservative': 0.6, 'expected': 1.0, 'aggressive': 1.4}

    def test_source_attribution_resolves_confidence(self):
        attr = get_source_attribution('adminTimePct')
        assert attr['confidence'] == 'high'
        assert attr['confidenceInfo']['label'] == 'High'

    @pytest.mark.parametrize('table,key', [
        ('industry', 'Retail'), ('scenario', 'aggressive'), ('confidence', 'emerging'),
        ('source', 'roasLift'), ('intensity', 'high'), ('channel', 'LinkedIn'),
    ])
    def test_generic_lookup(self, table, key):
        assert lookup(table, key) is not None


class TestDefaults:
    def test_default_inputs_are_independent_copies(self):
        a = default_inputs()
        a['org']['annualRevenue'] = 1
        a['assumptions']['roasLiftPct'] = 99
        assert DEFAULT_INPUTS['org']['annualRevenue'] == 2_000_000_000
        assert default_inputs()['assumptions']['roasLiftPct'] == 12

    def test_all_groups_present(self):
        assert set(default_inputs()) == set(INPUT_GROUPS)

    def test_cycle_buckets_partition(self):
        ops = default_inputs()['ops']
        assert ops['campaignCycleShortPct'] + ops['campaignCycleMediumPct'] + ops['campaignCycleLongPct'] == 100

    def test_intensity_preset_is_a_copy(self):
        preset = get_intensity_preset('low')
        preset['roasLiftPct'] = 0
        assert INTENSITY_PRESETS['low']['roasLiftPct'] == 6
        assert get_intensity_preset('extreme') is None

    def test_medium_preset_is_default_assumptions(self):
        assert default_inputs()['assumptions'] == INTENSITY_PRESETS['medium']
