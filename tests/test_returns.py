"""Tests for the 36-month return metrics engine."""

import pytest

from engines.reference import VALUE_STREAM_KEYS
from engines.returns import (
    BUILD_PHASES,
    STREAM_ADOPTION_PARAMS,
    annualize_rate,
    build_months,
    compute_returns,
    estimate_irr,
    npv,
    phase_for_month,
    ramp_factor,
    stream_ramp_factor,
)


def _streams(annual=12_000_000, key='roasImprovement'):
    streams = {k: 0.0 for k in VALUE_STREAM_KEYS}
    streams[key] = annual
    return streams


def _investment(amount=3_000_000, weeks=0):
    return {'totalInvestmentAmount': amount, 'implementationWeeks': weeks}


class TestIrr:
    def test_single_period(self):
        assert estimate_irr([-100, 110]) == pytest.approx(0.10, abs=1e-6)

    @pytest.mark.parametrize('a,b,m', [(1000, 2000, 12), (3_000_000, 4_500_000, 36), (500, 510, 3)])
    def test_closed_form(self, a, b, m):
        cashflows = [-a] + [0] * (m - 1) + [b]
        expected = (b / a) ** (1 / m) - 1
        assert estimate_irr(cashflows) == pytest.approx(expected, abs=1e-4)

    @pytest.mark.parametrize('cashflows', [[], [0, 0, 0], [100, 200], [-1, -2, -3]])
    def test_no_sign_change_is_none(self, cashflows):
        assert estimate_irr(cashflows) is None

    def test_root_zeroes_npv(self):
        cashflows = [-3_000_000] + [400_000] * 36
        r = estimate_irr(cashflows)
        assert r is not None
        assert npv(cashflows, r) == pytest.approx(0, abs=1e-2)

    def test_negative_irr(self):
        r = estimate_irr([-1000, 300, 300, 300])
        assert r is not None and r < 0

    def test_annualize(self):
        assert annualize_rate(None) is None
        assert annualize_rate(0.01) == pytest.approx(1.01 ** 12 - 1)

    def test_npv_at_zero_rate_is_sum(self):
        assert npv([-10, 4, 4, 4], 0) == 2


class TestRamp:
    def test_linear_endpoints(self):
        window = build_months(28)
        assert ramp_factor(0, window) == 0
        assert ramp_factor(window, window) == 1
        assert ramp_factor(36, window) == 1

    def test_linear_monotone(self):
        window = build_months(28)
        values = [ramp_factor(m, window) for m in range(37)]
        assert values == sorted(values)
        assert all(0 <= v <= 1 for v in values)

    def test_zero_build_is_immediate(self):
        assert ramp_factor(1, 0) == 1

    @pytest.mark.parametrize('stream', sorted(STREAM_ADOPTION_PARAMS))
    def test_adoption_monotone_and_capped(self, stream):
        values = [stream_ramp_factor(m, stream, 28) for m in range(37)]
        assert values == sorted(values)
        assert values[0] == 0
        assert values[-1] <= STREAM_ADOPTION_PARAMS[stream]['cap36'] + 1e-12

    def test_phases(self):
        assert phase_for_month(1, 28) == BUILD_PHASES[0]
        assert phase_for_month(7, 28) == BUILD_PHASES[-1]
        assert phase_for_month(8, 28) == 'Supervised Launch'
        assert phase_for_month(36, 28) == 'Operational Maturity'


class TestComputeReturns:
    def test_payback_hand_computed(self):
        # 1M/month from month 1, 3M upfront, 50k/month opex from month 1
        r = compute_returns(_streams(), _investment())
        assert r['paybackMonths'] == 4
        assert r['breakEvenMonth'] == 4
        assert r['breakEvenBeyondHorizon'] is False

    def test_timeline_shape(self):
        r = compute_returns(_streams(), _investment(weeks=28))
        assert len(r['timeline']) == 37
        assert [t['month'] for t in r['timeline']] == list(range(37))
        assert r['timeline'][0]['valueExpected'] == 0

    def test_opex_starts_after_build(self):
        r = compute_returns(_streams(), _investment(weeks=28))
        inv = [t['investmentCumulative'] for t in r['timeline']]
        assert r['annualOpEx'] == pytest.approx(600_000)
        # 28 weeks rounds up to a 7-month build
        assert inv[:8] == [3_000_000] * 8
        assert inv[8] == pytest.approx(3_050_000)
        assert inv[36] == pytest.approx(3_000_000 + 29 * 50_000)

    def test_beyond_horizon(self):
        r = compute_returns(_streams(annual=1000), _investment(amount=1e12, weeks=28))
        assert r['paybackMonths'] is None
        assert r['breakEvenBeyondHorizon'] is True
        assert r['netPresentValue'] < 0

    def test_all_value_disabled(self):
        r = compute_returns(_streams(), _investment(weeks=28), disabled_streams=list(VALUE_STREAM_KEYS))
        assert r['totalAnnualValue'] == 0
        assert r['irr'] is None
        assert r['meetsHurdle'] is False
        assert r['paybackMonths'] is None

    def test_zero_investment(self):
        r = compute_returns(_streams(), _investment(amount=0, weeks=28))
        assert r['threeYearRoi'] == 0.0
        assert r['irr'] is None

    def test_irr_consistent_with_cash_flows(self):
        r = compute_returns(_streams(), _investment(weeks=28))
        flows = r['scenarios']['expected']['cashFlows']
        monthly = (1 + r['irr'] / 100) ** (1 / 12) - 1
        assert npv(flows, monthly) == pytest.approx(0, abs=1e-6 * sum(abs(f) for f in flows))
        assert r['meetsHurdle'] is True

    def test_npv_uses_monthly_equivalent_rate(self):
        r = compute_returns(_streams(), _investment(weeks=28), params={'discountRate': 0.10})
        flows = r['scenarios']['expected']['cashFlows']
        assert r['netPresentValue'] == pytest.approx(npv(flows, 1.1 ** (1 / 12) - 1))

    def test_scenarios_share_investment_schedule(self):
        r = compute_returns(_streams(), _investment(weeks=28))
        cons, exp, agg = (r['scenarios'][k] for k in ('conservative', 'expected', 'aggressive'))
        assert cons['annualValue'] == pytest.approx(0.6 * exp['annualValue'])
        assert agg['annualValue'] == pytest.approx(1.4 * exp['annualValue'])
        assert cons['cashFlows'][0] == exp['cashFlows'][0] == agg['cashFlows'][0]
        assert cons['netPresentValue'] <= exp['netPresentValue'] <= agg['netPresentValue']

    def test_adoption_ramp_is_slower(self):
        linear = compute_returns(_streams(), _investment(weeks=28))
        adoption = compute_returns(_streams(), _investment(weeks=28), params={'rampModel': 'adoption'})
        assert adoption['scenarios']['expected']['cumulativeValue'] < linear['scenarios']['expected']['cumulativeValue']
