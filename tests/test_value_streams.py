"""Tests for the seven annual value streams and stream exclusion."""

import pytest

from engines.baseline import compute_baseline
from engines.reference import INTENSITY_PRESETS, VALUE_STREAM_KEYS
from engines.value_streams import (
    LABOR_STREAMS,
    apply_stream_exclusions,
    compute_value_streams,
    total_annual_value,
)


def _streams(inputs, params=None):
    baseline = compute_baseline(inputs['org'], inputs['martech'], inputs['ops'], inputs['pain'])
    streams = compute_value_streams(baseline, inputs['martech'], inputs['ops'], inputs['pain'],
                                    inputs['assumptions'], params)
    return baseline, streams


GOVERNING = {
    'martechOptimization': ('martechUtilizationTargetPct', 'martechToolConsolidationPct'),
    'roasImprovement': ('roasLiftPct',),
    'contentVelocity': ('contentTimeSavingsPct',),
    'campaignSpeed': ('cycleTimeReductionPct',),
    'operationalEfficiency': ('reworkReductionPct', 'adminToStrategicShiftPct'),
    'attributionImprovement': ('attributionImprovementPct',),
    'personalizationLift': ('personalizationRevLiftPct',),
}


class TestStreamShape:
    def test_all_keys_present_and_non_negative(self, inputs):
        _, streams = _streams(inputs)
        assert set(streams) == set(VALUE_STREAM_KEYS)
        assert all(v >= 0 for v in streams.values())

    @pytest.mark.parametrize('stream', VALUE_STREAM_KEYS)
    def test_zero_assumption_gives_zero_stream(self, inputs, stream):
        for key in GOVERNING[stream]:
            inputs['assumptions'][key] = 0
        _, streams = _streams(inputs)
        assert streams[stream] == 0

    def test_negative_inputs_never_produce_negative_streams(self, inputs):
        inputs['assumptions'] = {k: -50 for k in inputs['assumptions']}
        inputs['pain']['manualAttributionPct'] = -10
        inputs['martech']['currentBlendedRoas'] = -1
        _, streams = _streams(inputs)
        assert all(v >= 0 for v in streams.values())


class TestRevenueStreams:
    def test_roas_lift_not_capped_at_100(self, inputs):
        inputs['assumptions']['roasLiftPct'] = 100
        _, at_100 = _streams(inputs)
        inputs['assumptions']['roasLiftPct'] = 150
        _, at_150 = _streams(inputs)
        assert at_150['roasImprovement'] == pytest.approx(1.5 * at_100['roasImprovement'])
        assert at_150['attributionImprovement'] == 0

    def test_personalization_lift_not_capped_at_100(self, inputs):
        inputs['assumptions']['personalizationRevLiftPct'] = 100
        _, at_100 = _streams(inputs)
        inputs['assumptions']['personalizationRevLiftPct'] = 200
        _, at_200 = _streams(inputs)
        assert at_200['personalizationLift'] == pytest.approx(2 * at_100['personalizationLift'])

    def test_roas_counts_margin_only(self, inputs):
        baseline, streams = _streams(inputs)
        media = baseline['derived']['annualPaidMediaSpend']
        assert streams['roasImprovement'] == pytest.approx(media * 2.5 * 0.12 * 0.20)

    def test_roas_linear_in_lift(self, inputs):
        _, base = _streams(inputs)
        inputs['assumptions']['roasLiftPct'] *= 2
        _, doubled = _streams(inputs)
        assert doubled['roasImprovement'] == pytest.approx(2 * base['roasImprovement'])

    def test_personalization_linear_in_lift(self, inputs):
        _, base = _streams(inputs)
        inputs['assumptions']['personalizationRevLiftPct'] *= 1.5
        _, raised = _streams(inputs)
        assert raised['personalizationLift'] == pytest.approx(1.5 * base['personalizationLift'])

    def test_contribution_margin_param(self, inputs):
        _, base = _streams(inputs)
        _, wider = _streams(inputs, {'contributionMarginPct': 40})
        assert wider['roasImprovement'] == pytest.approx(2 * base['roasImprovement'])

    def test_attribution_discounted_by_roas_lift(self, inputs):
        _, base = _streams(inputs)
        inputs['assumptions']['roasLiftPct'] = 0
        _, no_lift = _streams(inputs)
        assert no_lift['attributionImprovement'] > base['attributionImprovement']


class TestCaps:
    def test_martech_capped_at_waste(self, inputs):
        inputs['martech']['martechUtilizationPct'] = 90
        inputs['assumptions'].update(martechUtilizationTargetPct=100, martechToolConsolidationPct=100)
        baseline, streams = _streams(inputs)
        assert streams['martechOptimization'] == pytest.approx(baseline['annualMartechWaste'])

    @pytest.mark.parametrize('level', sorted(INTENSITY_PRESETS))
    def test_labor_streams_capped(self, inputs, level):
        inputs['assumptions'] = dict(INTENSITY_PRESETS[level])
        baseline, streams = _streams(inputs)
        labor = sum(streams[k] for k in LABOR_STREAMS)
        assert labor <= baseline['annualTeamCost'] * 0.40 * (1 + 1e-12)

    def test_campaign_speed_capped(self, inputs):
        inputs['assumptions']['cycleTimeReductionPct'] = 100
        inputs['ops']['monthlyCampaigns'] = 10_000
        baseline, streams = _streams(inputs)
        assert streams['campaignSpeed'] <= baseline['annualTeamCost'] * 0.10 * (1 + 1e-12)

    def test_content_velocity_bounded_by_content_team(self, inputs):
        inputs['ops']['monthlyContentAssets'] = 1_000_000
        inputs['assumptions'].update(contentTimeSavingsPct=100, cycleTimeReductionPct=0,
                                     reworkReductionPct=0, adminToStrategicShiftPct=0)
        baseline, streams = _streams(inputs)
        assert streams['contentVelocity'] == pytest.approx(baseline['derived']['contentTeamCost'])


class TestExclusions:
    @pytest.mark.parametrize('stream', VALUE_STREAM_KEYS)
    def test_disabling_lowers_total_by_stream(self, inputs, stream):
        _, streams = _streams(inputs)
        full = total_annual_value(streams)
        assert full - total_annual_value(streams, [stream]) == pytest.approx(streams[stream])

    @pytest.mark.parametrize('disabled', [
        ('roasImprovement', 'personalizationLift'),
        ('contentVelocity', 'campaignSpeed', 'operationalEfficiency'),
        ('martechOptimization', 'attributionImprovement', 'roasImprovement', 'contentVelocity'),
        VALUE_STREAM_KEYS[:6],
    ])
    def test_disabling_subset_lowers_total_by_sum(self, inputs, disabled):
        _, streams = _streams(inputs)
        full = total_annual_value(streams)
        removed = sum(streams[k] for k in disabled)
        assert full - total_annual_value(streams, disabled) == pytest.approx(removed)

    def test_all_disabled_is_zero(self, inputs):
        _, streams = _streams(inputs)
        assert total_annual_value(streams, VALUE_STREAM_KEYS) == 0

    def test_unknown_keys_ignored(self, inputs):
        _, streams = _streams(inputs)
        assert total_annual_value(streams, ['bogusStream']) == total_annual_value(streams)

    def test_exclusion_does_not_mutate(self, inputs):
        _, streams = _streams(inputs)
        before = dict(streams)
        zeroed = apply_stream_exclusions(streams, ['roasImprovement'])
        assert zeroed['roasImprovement'] == 0.0
        assert streams == before
