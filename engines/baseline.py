"""
ROI Navigator - Baseline Cost Engine
Current-state annual cost structure from the organization, martech/media,
campaign ops and operational pain inputs.

totalAnnualCost is the sum of four buckets: team cost, martech waste, media
waste and attribution waste. Agency, rework, admin overhead and approval
bottleneck costs are reported alongside as operational drag; admin and rework
are subsets of team cost and feed the value streams, so they stay out of the
total.
"""
import math

from engines.reference import CAMPAIGN_CYCLE_MIDPOINTS, HOURS_PER_YEAR

ATTRIBUTION_WASTE_FACTOR = 0.15   # share of manually-attributed spend misallocated
CONTENT_TEAM_SHARE = 0.25         # content team ~25% of marketing headcount
APPROVAL_BLOCKED_SHARE = 0.30     # ~30% of the team waits on approvals

WATERFALL_COLORS = {
    'Team Salaries': '#5B9ECF', 'Martech Waste': '#E88D67',
    'Media Waste': '#D4856A', 'Attribution Waste': '#C9A04E',
}


def clamp(v, lo, hi):
    return max(lo, min(hi, v))


def safe_div(num, den):
    return num / den if den else 0.0


def weighted_cycle_weeks(short_pct, medium_pct, long_pct, fallback=6):
    """Bucket-midpoint weighted campaign cycle in weeks.

    Divides by the actual bucket sum so a mix that drifts off 100 still
    yields a valid average. Negative buckets count as zero; an empty mix
    returns the fallback.
    """
    short_pct, medium_pct, long_pct = (max(0, p or 0) for p in (short_pct, medium_pct, long_pct))
    total = short_pct + medium_pct + long_pct
    if total <= 0:
        return max(0, fallback or 0)
    return (short_pct * CAMPAIGN_CYCLE_MIDPOINTS['short']
            + medium_pct * CAMPAIGN_CYCLE_MIDPOINTS['medium']
            + long_pct * CAMPAIGN_CYCLE_MIDPOINTS['long']) / total


def compute_derived(org, martech, ops):
    """Budget slices and unit rates reused by the baseline and every value stream."""
    total_budget = org.get('annualRevenue', 0) * org.get('marketingBudgetPct', 0) / 100
    team_cost = org.get('marketingHeadcount', 0) * org.get('avgLoadedFteCost', 0)
    martech_spend = total_budget * martech.get('martechPctOfBudget', 0) / 100
    media_spend = total_budget * martech.get('paidMediaPctOfBudget', 0) / 100
    agency_spend = total_budget * ops.get('agencyPctOfBudget', 0) / 100
    cycle_weeks = weighted_cycle_weeks(
        ops.get('campaignCycleShortPct', 0), ops.get('campaignCycleMediumPct', 0),
        ops.get('campaignCycleLongPct', 0), fallback=ops.get('avgCampaignCycleWeeks', 0))
    return {
        'totalMarketingBudget': total_budget,
        'totalTeamCost': team_cost,
        'annualMartechSpend': martech_spend,
        'annualPaidMediaSpend': media_spend,
        'annualAgencySpend': agency_spend,
        'currentAdRevenue': media_spend * martech.get('currentBlendedRoas', 0),
        'contentTeamCost': team_cost * CONTENT_TEAM_SHARE,
        'hourlyRate': org.get('avgLoadedFteCost', 0) / HOURS_PER_YEAR,
        'dailyMarketingBudget': total_budget / 365,
        'weightedCycleWeeks': cycle_weeks,
    }


def compute_baseline(org, martech, ops, pain):
    d = compute_derived(org, martech, ops)
    team_cost = d['totalTeamCost']

    utilization = clamp(martech.get('martechUtilizationPct', 0), 0, 100)
    martech_waste = max(0.0, d['annualMartechSpend'] * (1 - utilization / 100))
    media_waste = max(0.0, d['annualPaidMediaSpend'] * pain.get('marketingWasteRatePct', 0) / 100)
    attribution_waste = max(0.0, d['annualPaidMediaSpend'] * pain.get('manualAttributionPct', 0) / 100
                            * ATTRIBUTION_WASTE_FACTOR)

    rework_cost = max(0.0, team_cost * pain.get('reworkRatePct', 0) / 100)
    admin_cost = max(0.0, team_cost * pain.get('adminTimePct', 0) / 100)

    # Approval waits, capped at the hours the blocked share of the team actually has
    headcount = max(0, org.get('marketingHeadcount', 0))
    blocked_hours = math.ceil(headcount * APPROVAL_BLOCKED_SHARE) * HOURS_PER_YEAR
    raw_wait_hours = max(0, ops.get('monthlyCampaigns', 0)) * 12 * max(0, pain.get('approvalCycleDays', 0)) * 8
    approval_cost = min(raw_wait_hours, blocked_hours) * max(0.0, d['hourlyRate'])

    total = team_cost + martech_waste + media_waste + attribution_waste

    buckets = [
        ('Team Salaries', team_cost), ('Martech Waste', martech_waste),
        ('Media Waste', media_waste), ('Attribution Waste', attribution_waste),
    ]
    return {
        'derived': d,
        'annualTeamCost': team_cost,
        'totalMarketingBudget': d['totalMarketingBudget'],
        'annualMartechWaste': martech_waste,
        'annualMediaWaste': media_waste,
        'annualAttributionWaste': attribution_waste,
        'totalAnnualCost': total,
        'annualAgencyCost': max(0.0, d['annualAgencySpend']),
        'annualReworkCost': rework_cost,
        'annualAdminOverheadCost': admin_cost,
        'annualApprovalBottleneckCost': approval_cost,
        'waterfall': [{'label': lbl, 'value': val, 'color': WATERFALL_COLORS[lbl]} for lbl, val in buckets],
    }
