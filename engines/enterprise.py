"""
ROI Navigator - Enterprise Views
Top-down enterprise value model, ROAS before/after, workflow timing
comparisons and the four-tier time allocation shift.
"""
from engines.baseline import clamp
from engines.reference import AI_IMPACT_BENCHMARKS

AGENCY_CONTENT_SHARE = 0.4   # ~40% of agency spend is content production


def calculate_enterprise_roi(baseline, org):
    d = baseline['derived']
    total_budget = d['totalMarketingBudget']

    waste = baseline['annualMartechWaste'] + baseline['annualMediaWaste'] + baseline['annualAttributionWaste']
    recovery = waste * AI_IMPACT_BENCHMARKS['wasteRecovery'] / 100
    content_savings = ((d['contentTeamCost'] + d['annualAgencySpend'] * AGENCY_CONTENT_SHARE)
                       * AI_IMPACT_BENCHMARKS['contentCostReduction'] / 100)
    headcount_savings = d['totalTeamCost'] * AI_IMPACT_BENCHMARKS['headcountSavings'] / 100

    # Marketing efficiency ratio: same revenue over the reduced spend
    revenue = org.get('annualRevenue', 0)
    current_mer = revenue / total_budget if total_budget > 0 else 0.0
    reduced_budget = total_budget - recovery - content_savings * 0.5
    mer = revenue / reduced_budget if reduced_budget > 0 else current_mer

    return {
        'budgetWasteTotal': waste,
        'aiRecoveryPotential': recovery,
        'contentSavings': content_savings,
        'headcountSavings': headcount_savings,
        'currentMer': current_mer,
        'merImprovement': mer,
        'totalEnterpriseValue': recovery + content_savings + headcount_savings,
    }


def compute_roas_comparison(baseline, martech, assumptions, roas_improvement):
    current = martech.get('currentBlendedRoas', 0)
    projected = current * (1 + max(0, assumptions.get('roasLiftPct', 0)) / 100)
    return {
        'currentRoas': current,
        'projectedRoas': projected,
        'currentAdRevenue': baseline['derived']['currentAdRevenue'],
        'projectedAdRevenue': baseline['derived']['annualPaidMediaSpend'] * projected,
        'incrementalRevenue': roas_improvement,
    }


def compute_workflows(ops, pain, cycle_weeks):
    cycle_days = cycle_weeks * 7
    approval = max(0, pain.get('approvalCycleDays', 0))
    return [
        {'name': 'Campaign Launch', 'beforeDays': cycle_days,
         'afterValue': max(3, round(cycle_days * 0.4)), 'afterUnit': 'days', 'savingsPct': 60},
        {'name': 'Content Production', 'beforeDays': 14,
         'afterValue': 5, 'afterUnit': 'days', 'savingsPct': 65},
        {'name': 'Budget Reallocation', 'beforeDays': approval + 3,
         'afterValue': 2, 'afterUnit': 'hours', 'savingsPct': 90},
        {'name': 'Compliance Review', 'beforeDays': approval,
         'afterValue': max(2, round(approval * 24 * 0.25)), 'afterUnit': 'hours', 'savingsPct': 75},
        {'name': 'Personalization Deploy', 'beforeDays': 21,
         'afterValue': 3, 'afterUnit': 'days', 'savingsPct': 86},
        {'name': 'Attribution Report', 'beforeDays': 5,
         'afterValue': 30, 'afterUnit': 'minutes', 'savingsPct': 96},
    ]


def _slices(admin, approval, strategic, innovation):
    return [
        {'label': 'Admin/Manual', 'pct': admin, 'color': '#ef4444'},
        {'label': 'Approval-Gated', 'pct': approval, 'color': '#f59e0b'},
        {'label': 'Strategic Work', 'pct': strategic, 'color': '#5B9ECF'},
        {'label': 'Innovation', 'pct': innovation, 'color': '#4CAF50'},
    ]


def compute_allocation_shift(pain):
    """Current and future four-tier time allocation (percent of team time).

    Tiers are expected to sum to 100 but each is floored at 0; rebalancing a
    drifting mix is left to the caller.
    """
    admin = clamp(pain.get('adminTimePct', 0), 0, 100)
    approval = round((100 - admin) * 0.5)
    strategic = round((100 - admin) * 0.3)
    innovation = max(0, 100 - admin - approval - strategic)

    future_admin = max(10, round(admin * 0.35))
    future_approval = round(approval * 0.5)
    future_strategic = 40
    future_innovation = max(0, 100 - future_admin - future_approval - future_strategic)

    return {
        'currentAllocation': _slices(admin, approval, strategic, innovation),
        'futureAllocation': _slices(future_admin, future_approval, future_strategic, future_innovation),
    }
