"""
ROI Navigator - Return Metrics Engine
36-month cash-flow projection, NPV, IRR, payback and 3-year ROI, with
conservative / expected / aggressive variants.

Cash-flow model:
  - Capital is committed at month 0.
  - Value ramps from 0 at month 0 to full run-rate at the end of the build
    window (implementationWeeks / 4.33 months) and holds there.
  - Ongoing opex (a % of capital per year) accrues monthly once the build
    window, rounded up to whole months, has elapsed.
  - Scenarios share the identical investment schedule and differ only by the
    value multiplier.
"""
import math

from engines.reference import (
    DEFAULT_PARAMS, HURDLE_RATE_PCT, SCENARIO_MULTIPLIERS, SCENARIOS, VALUE_STREAM_KEYS,
)
from engines.value_streams import apply_stream_exclusions

IRR_MAX_ITER = 100
IRR_TOLERANCE = 1e-7
IRR_RATE_FLOOR = -0.99
IRR_RATE_CEILING = 10.0

# ── Per-stream adoption curves (rampModel = 'adoption') ──
# techReadyWeek is measured against a 28-week reference build and scales with
# the actual build; change management and contract lag are fixed people-time.
STREAM_ADOPTION_PARAMS = {
    'martechOptimization':    {'techReadyWeek': 12, 'changeMonths': 2, 'costLagMonths': 4, 'k': 0.6, 'midpoint': 5, 'cap18': 0.75, 'cap36': 1.0},
    'campaignSpeed':          {'techReadyWeek': 16, 'changeMonths': 4, 'costLagMonths': 0, 'k': 0.45, 'midpoint': 7, 'cap18': 0.65, 'cap36': 0.95},
    'contentVelocity':        {'techReadyWeek': 22, 'changeMonths': 3, 'costLagMonths': 2, 'k': 0.5, 'midpoint': 6, 'cap18': 0.70, 'cap36': 0.95},
    'operationalEfficiency':  {'techReadyWeek': 28, 'changeMonths': 6, 'costLagMonths': 0, 'k': 0.35, 'midpoint': 9, 'cap18': 0.50, 'cap36': 0.85},
    'roasImprovement':        {'techReadyWeek': 22, 'changeMonths': 4, 'costLagMonths': 0, 'k': 0.45, 'midpoint': 7, 'cap18': 0.70, 'cap36': 0.95},
    'attributionImprovement': {'techReadyWeek': 22, 'changeMonths': 5, 'costLagMonths': 0, 'k': 0.4, 'midpoint': 8, 'cap18': 0.55, 'cap36': 0.90},
    'personalizationLift':    {'techReadyWeek': 22, 'changeMonths': 5, 'costLagMonths': 0, 'k': 0.5, 'midpoint': 7, 'cap18': 0.60, 'cap36': 0.95},
}
REFERENCE_BUILD_WEEKS = 28

BUILD_PHASES = ('Discovery', 'Ontology', 'KG Population', 'Digital Twin', 'Validation')


def build_months(implementation_weeks, weeks_per_month=4.33):
    """Build window in (fractional) months. Never negative."""
    if not weeks_per_month or weeks_per_month <= 0:
        return 0.0
    return max(0.0, (implementation_weeks or 0) / weeks_per_month)


def ramp_factor(month, build_window):
    """Linear ramp: 0 at month 0, 1 at the end of the build window, 1 after."""
    if month <= 0:
        return 0.0
    if build_window <= 0 or month >= build_window:
        return 1.0
    return month / build_window


def stream_ramp_factor(month, stream_key, implementation_weeks, weeks_per_month=4.33):
    """
    Logistic adoption curve for one stream, normalized to 0 at adoption start
    and capped by an organizational-inertia ceiling that rises linearly from
    the month-18 cap to the month-36 cap. Monotone non-decreasing in month.
    """
    p = STREAM_ADOPTION_PARAMS[stream_key]
    scale = max(0, implementation_weeks or 0) / REFERENCE_BUILD_WEEKS
    tech_ready = p['techReadyWeek'] * scale / weeks_per_month
    t = month - (tech_ready + p['changeMonths'] + p['costLagMonths'])
    if t <= 0:
        return 0.0
    raw = 1 / (1 + math.exp(-p['k'] * (t - p['midpoint'])))
    at_zero = 1 / (1 + math.exp(p['k'] * p['midpoint']))
    normalized = (raw - at_zero) / (1 - at_zero)
    if month <= 18:
        ceiling = p['cap18']
    else:
        ceiling = p['cap18'] + (p['cap36'] - p['cap18']) * min(1, (month - 18) / 18)
    return min(max(0.0, normalized), ceiling)


def phase_for_month(month, implementation_weeks, weeks_per_month=4.33):
    build = math.ceil(build_months(implementation_weeks, weeks_per_month))
    phase_len = build / len(BUILD_PHASES)
    for i, name in enumerate(BUILD_PHASES[:-1]):
        if month <= phase_len * (i + 1):
            return name
    if month <= build:
        return BUILD_PHASES[-1]
    if month <= build + 5:
        return 'Supervised Launch'
    if month <= build + 10:
        return 'Graduated Autonomy'
    return 'Operational Maturity'


def npv(cashflows, rate):
    """Present value of a periodic series; cashflows[0] is undiscounted."""
    return sum(cf / (1 + rate) ** t for t, cf in enumerate(cashflows))


def _npv_slope(cashflows, rate):
    return sum(-t * cf / (1 + rate) ** (t + 1) for t, cf in enumerate(cashflows))


def _bisect_irr(cashflows, max_iter, tolerance):
    lo, hi = IRR_RATE_FLOOR, 1.0
    f_lo, f_hi = npv(cashflows, lo), npv(cashflows, hi)
    while f_lo * f_hi > 0 and hi < IRR_RATE_CEILING * 100:
        hi *= 2
        f_hi = npv(cashflows, hi)
    if f_lo * f_hi > 0:
        return None
    for _ in range(max_iter * 2):
        mid = (lo + hi) / 2
        f_mid = npv(cashflows, mid)
        if f_mid == 0 or hi - lo < tolerance:
            return mid
        if f_lo * f_mid < 0:
            hi = mid
        else:
            lo, f_lo = mid, f_mid
    return None


def estimate_irr(cashflows, guess=0.01, max_iter=IRR_MAX_ITER, tolerance=IRR_TOLERANCE):
    """
    Periodic IRR (fraction per period) of a cash-flow series, or None.

    None when the series has no sign change (all cost or all value) or when
    neither the bounded Newton-Raphson pass nor the bisection fallback
    converges within its iteration cap.
    """
    if not cashflows or not (any(cf > 0 for cf in cashflows) and any(cf < 0 for cf in cashflows)):
        return None
    scale = sum(abs(cf) for cf in cashflows)
    rate = guess
    for _ in range(max_iter):
        slope = _npv_slope(cashflows, rate)
        if abs(slope) < 1e-12:
            break
        new_rate = max(IRR_RATE_FLOOR, min(IRR_RATE_CEILING, rate - npv(cashflows, rate) / slope))
        if abs(new_rate - rate) < tolerance:
            # a step pinned against the clamp is not a root
            if abs(npv(cashflows, new_rate)) <= 1e-6 * scale:
                return new_rate
            break
        rate = new_rate
    return _bisect_irr(cashflows, max_iter, tolerance)


def annualize_rate(monthly_rate):
    return None if monthly_rate is None else (1 + monthly_rate) ** 12 - 1


def _monthly_base_values(streams, implementation_weeks, horizon, p):
    """Expected-scenario value earned in each month 0..horizon."""
    weeks_per_month = p.get('weeksPerMonth', 4.33)
    if p.get('rampModel') == 'adoption':
        return [sum(streams[k] / 12 * stream_ramp_factor(m, k, implementation_weeks, weeks_per_month)
                    for k in VALUE_STREAM_KEYS)
                for m in range(horizon + 1)]
    window = build_months(implementation_weeks, weeks_per_month)
    run_rate = sum(streams[k] for k in VALUE_STREAM_KEYS) / 12
    return [run_rate * ramp_factor(m, window) for m in range(horizon + 1)]


def _first_crossing(cum_value, cum_investment):
    for m in range(1, len(cum_value)):
        if cum_value[m] >= cum_investment[m]:
            return m
    return None


def compute_returns(value_streams, investment, disabled_streams=None, params=None):
    """
    Return metrics for the expected scenario plus all three scenario variants.

    paybackMonths / breakEvenMonth are None (and breakEvenBeyondHorizon True)
    when the expected cumulative value never reaches cumulative investment
    inside the horizon. irr is annualized, in percent, or None when not
    computable.
    """
    p = dict(DEFAULT_PARAMS, **(params or {}))
    horizon = int(p.get('projectionMonths', 36))
    streams = apply_stream_exclusions(value_streams, disabled_streams)
    total_value = sum(streams[k] for k in VALUE_STREAM_KEYS)

    total_inv = investment.get('totalInvestmentAmount', 0) or 0
    weeks = investment.get('implementationWeeks', 0) or 0
    annual_opex = total_inv * p.get('ongoingOpexPct', 0) / 100
    monthly_opex = annual_opex / 12
    opex_start = math.ceil(build_months(weeks, p.get('weeksPerMonth', 4.33)))

    discount = p.get('discountRate', 0)
    monthly_discount = (1 + discount) ** (1 / 12) - 1 if discount > -1 else 0.0

    base = _monthly_base_values(streams, weeks, horizon, p)
    opex = [monthly_opex if m > opex_start else 0.0 for m in range(horizon + 1)]

    cum_investment = []
    running = total_inv
    for m in range(horizon + 1):
        running += opex[m]
        cum_investment.append(running)
    total_cost = cum_investment[-1]

    scenarios = {}
    cum_by_scenario = {}
    for name in SCENARIOS:
        mult = SCENARIO_MULTIPLIERS[name]
        values = [v * mult for v in base]
        cum, acc = [], 0.0
        for v in values:
            acc += v
            cum.append(acc)
        cashflows = [values[m] - opex[m] for m in range(horizon + 1)]
        cashflows[0] -= total_inv
        monthly_irr = estimate_irr(cashflows)
        payback = _first_crossing(cum, cum_investment)
        scenarios[name] = {
            'label': name.capitalize(),
            'multiplier': mult,
            'annualValue': total_value * mult,
            'cumulativeValue': cum[-1],
            'netPresentValue': npv(cashflows, monthly_discount),
            'irr': None if monthly_irr is None else annualize_rate(monthly_irr) * 100,
            'paybackMonths': payback,
            'breakEvenBeyondHorizon': payback is None,
            'threeYearRoi': (cum[-1] - total_cost) / total_cost * 100 if total_cost > 0 else 0.0,
            'cashFlows': cashflows,
        }
        cum_by_scenario[name] = cum

    timeline = []
    for m in range(horizon + 1):
        timeline.append({
            'month': m,
            'investmentCumulative': cum_investment[m],
            'valueConservative': cum_by_scenario['conservative'][m],
            'valueExpected': cum_by_scenario['expected'][m],
            'valueAggressive': cum_by_scenario['aggressive'][m],
            'netExpected': cum_by_scenario['expected'][m] - cum_investment[m],
            'phase': phase_for_month(m, weeks, p.get('weeksPerMonth', 4.33)),
        })

    expected = scenarios['expected']
    irr = expected['irr']
    return {
        'totalInvestment': total_inv,
        'implementationWeeks': weeks,
        'annualOpEx': annual_opex,
        'totalAnnualValue': total_value,
        'threeYearRoi': expected['threeYearRoi'],
        'paybackMonths': expected['paybackMonths'],
        'breakEvenMonth': expected['paybackMonths'],
        'breakEvenBeyondHorizon': expected['breakEvenBeyondHorizon'],
        'netPresentValue': expected['netPresentValue'],
        'irr': irr,
        'meetsHurdle': irr is not None and irr >= p.get('hurdleRatePct', HURDLE_RATE_PCT),
        'timeline': timeline,
        'scenarios': scenarios,
    }
