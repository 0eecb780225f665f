"""
ROI Navigator - Value Stream Engine
Seven independent annual value streams from the baseline and the improvement
assumptions. Revenue-type streams (ROAS, personalization) count only the
contribution margin on incremental revenue, never gross revenue.

Exclusion is a zero-out over the fixed stream key set, so disabling streams
lowers the total by exactly their values.
"""
from engines.baseline import clamp
from engines.reference import CONTRIBUTION_MARGIN_PCT, VALUE_STREAM_KEYS

UTILIZATION_RECOVERY_SHARE = 0.5   # licence minimums keep half the unused spend sunk
CONSOLIDATION_SAVINGS_SHARE = 0.3
HOURS_PER_CONTENT_ASSET = 8
CAMPAIGN_ACTIVE_FTE_SHARE = 0.30
CAMPAIGN_SPEED_CAP_SHARE = 0.10    # of team cost
LABOR_SAVINGS_CAP_SHARE = 0.40     # of team cost, across content/campaign/ops streams
LABOR_STREAMS = ('contentVelocity', 'campaignSpeed', 'operationalEfficiency')


def _pct(assumptions, key):
    return clamp(assumptions.get(key, 0) or 0, 0, 100) / 100


def _lift(assumptions, key):
    """Floored at 0, not capped."""
    return max(0, assumptions.get(key, 0) or 0) / 100


def compute_value_streams(baseline, martech, ops, pain, assumptions, params=None):
    """
    Annual value per stream, before any exclusion.

    Each stream is non-negative and zero when its governing assumption is zero.
    Content, campaign and operational streams all draw on the same team hours,
    so together they are scaled down to at most 40% of team cost.
    """
    d = baseline['derived']
    margin = clamp((params or {}).get('contributionMarginPct', CONTRIBUTION_MARGIN_PCT), 0, 100) / 100
    roas_lift = _lift(assumptions, 'roasLiftPct')
    team_cost = max(0.0, d['totalTeamCost'])
    hourly = max(0.0, d['hourlyRate'])
    media_spend = max(0.0, d['annualPaidMediaSpend'])

    # 1. Martech: close the utilization gap + consolidate overlapping tools,
    #    never recovering more than the waste bucket holds
    current_util = clamp(martech.get('martechUtilizationPct', 0), 0, 100) / 100
    util_gain = max(0.0, _pct(assumptions, 'martechUtilizationTargetPct') - current_util)
    martech_spend = max(0.0, d['annualMartechSpend'])
    recoverable = martech_spend * util_gain * UTILIZATION_RECOVERY_SHARE
    consolidation = martech_spend * _pct(assumptions, 'martechToolConsolidationPct') * CONSOLIDATION_SAVINGS_SHARE
    martech_opt = min(recoverable + consolidation, baseline['annualMartechWaste'])

    # 2. ROAS: incremental ad revenue at the lifted multiple, margin only
    current_roas = max(0.0, martech.get('currentBlendedRoas', 0))
    roas_improvement = media_spend * current_roas * roas_lift * margin

    # 3. Content velocity: labor implied by asset volume, capped at the content team
    asset_hours = max(0, ops.get('monthlyContentAssets', 0)) * 12 * HOURS_PER_CONTENT_ASSET
    content_labor = min(asset_hours * hourly, max(0.0, d['contentTeamCost']))
    content_velocity = content_labor * _pct(assumptions, 'contentTimeSavingsPct')

    # 4. Campaign throughput: days saved on the weighted cycle x active FTE hours
    days_saved = max(0.0, d['weightedCycleWeeks']) * 7 * _pct(assumptions, 'cycleTimeReductionPct')
    campaigns_per_year = max(0, ops.get('monthlyCampaigns', 0)) * 12
    raw_speed = campaigns_per_year * days_saved * CAMPAIGN_ACTIVE_FTE_SHARE * 8 * hourly
    campaign_speed = min(raw_speed, team_cost * CAMPAIGN_SPEED_CAP_SHARE)

    # 5. Operational efficiency: rework avoided + admin time shifted to strategy
    operational = (baseline['annualReworkCost'] * _pct(assumptions, 'reworkReductionPct')
                   + baseline['annualAdminOverheadCost'] * _pct(assumptions, 'adminToStrategicShiftPct'))

    # 6. Attribution: discounted by the ROAS lift to avoid double counting
    manual = clamp(pain.get('manualAttributionPct', 0), 0, 100) / 100
    attribution = max(0.0, media_spend * manual * _pct(assumptions, 'attributionImprovementPct') * max(0.0, 1 - roas_lift))

    # 7. Personalization: margin on lifted ad revenue
    ad_revenue = max(0.0, d['currentAdRevenue'])
    personalization = ad_revenue * _lift(assumptions, 'personalizationRevLiftPct') * margin

    streams = {
        'martechOptimization': martech_opt,
        'roasImprovement': roas_improvement,
        'contentVelocity': content_velocity,
        'campaignSpeed': campaign_speed,
        'operationalEfficiency': operational,
        'attributionImprovement': attribution,
        'personalizationLift': personalization,
    }

    labor_cap = team_cost * LABOR_SAVINGS_CAP_SHARE
    labor_total = sum(streams[k] for k in LABOR_STREAMS)
    if labor_total > labor_cap and labor_total > 0:
        scale = labor_cap / labor_total
        for k in LABOR_STREAMS:
            streams[k] *= scale
    return streams


def apply_stream_exclusions(streams, disabled_streams=None):
    """Copy of streams with every disabled key zeroed. Unknown keys are ignored."""
    disabled = set(disabled_streams or ())
    return {k: (0.0 if k in disabled else streams.get(k, 0.0)) for k in VALUE_STREAM_KEYS}


def total_annual_value(streams, disabled_streams=None):
    active = apply_stream_exclusions(streams, disabled_streams)
    return sum(active[k] for k in VALUE_STREAM_KEYS)
