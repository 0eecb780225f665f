"""
ROI Navigator - ROI Orchestrator
Single entry point that chains baseline -> value streams -> return metrics and
attaches the cost-of-inaction, channel ROAS and enterprise views.

Flow:
  1. Baseline cost structure (baseline.py)
  2. Seven annual value streams (value_streams.py)
  3. Exclusion of disabled streams, 36-month projection, NPV / IRR / payback,
     scenario variants (returns.py)
  4. Do-nothing erosion on the marketing budget (do_nothing.py)
  5. Per-channel ROAS comparison (channel_roas.py)
  6. Enterprise top-down model, workflows, allocation shift (enterprise.py)

Pure: the same inputs always produce the same outputs, and no input dict is
modified.
"""
from engines.baseline import compute_baseline
from engines.channel_roas import compute_channel_roas
from engines.do_nothing import compute_do_nothing
from engines.enterprise import (
    calculate_enterprise_roi, compute_allocation_shift, compute_roas_comparison, compute_workflows,
)
from engines.reference import DEFAULT_PARAMS, VALUE_STREAM_KEYS
from engines.returns import compute_returns
from engines.value_streams import compute_value_streams


def _params(params):
    return dict(DEFAULT_PARAMS, **(params or {}))


def run_return_metrics(org, martech, ops, pain, investment, assumptions, disabled_streams=None, params=None):
    """Baseline, raw value streams and return metrics. Shared by compute_roi and the sensitivity grid."""
    p = _params(params)
    baseline = compute_baseline(org, martech, ops, pain)
    streams = compute_value_streams(baseline, martech, ops, pain, assumptions, p)
    returns = compute_returns(streams, investment, disabled_streams, p)
    return baseline, streams, returns


def compute_roi(org, martech, ops, pain, investment, assumptions, disabled_streams=None, params=None):
    p = _params(params)
    baseline, streams, returns = run_return_metrics(
        org, martech, ops, pain, investment, assumptions, disabled_streams, p)
    disabled = sorted(k for k in set(disabled_streams or ()) if k in VALUE_STREAM_KEYS)

    out = dict(returns)
    out['valueStreams'] = streams
    out['disabledStreams'] = disabled
    out['roas'] = compute_roas_comparison(baseline, martech, assumptions, streams['roasImprovement'])
    out['channelRoas'] = compute_channel_roas(assumptions.get('roasLiftPct', 0), p.get('channelLiftPct'))
    out['workflows'] = compute_workflows(ops, pain, baseline['derived']['weightedCycleWeeks'])
    out.update(compute_allocation_shift(pain))
    out['enterpriseModel'] = calculate_enterprise_roi(baseline, org)
    out['doNothing'] = compute_do_nothing(baseline['totalMarketingBudget'], p.get('quarterlyErosionPct'))
    return out
