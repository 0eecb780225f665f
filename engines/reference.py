"""
ROI Navigator - Reference Tables
Static benchmark lookups, model constants and enterprise input defaults.
Benchmark sources: Gartner 2025 CMO Spend Survey, McKinsey Personalization
Analysis, Salesforce State of Marketing, Forrester, HubSpot State of Marketing 2025.

All lookups are read-only and keyed by string; unknown keys return None.
"""
import copy

# ── Model constants ──
DISCOUNT_RATE = 0.10          # annual, fraction
PROJECTION_MONTHS = 36
HOURS_PER_YEAR = 2080         # 40h x 52wk
WEEKS_PER_MONTH = 4.33
ONGOING_OPEX_PCT = 20         # % of capital per year (tokens, infra, maintenance)
QUARTERLY_EROSION_PCT = 2     # competitive erosion per quarter under do-nothing
HURDLE_RATE_PCT = 15          # minimum IRR for investment approval
CONTRIBUTION_MARGIN_PCT = 20  # only margin on incremental revenue counts as value

SCENARIO_MULTIPLIERS = {
    'conservative': 0.6,
    'expected': 1.0,
    'aggressive': 1.4,
}
SCENARIOS = ('conservative', 'expected', 'aggressive')

VALUE_STREAM_KEYS = (
    'martechOptimization', 'roasImprovement', 'contentVelocity', 'campaignSpeed',
    'operationalEfficiency', 'attributionImprovement', 'personalizationLift',
)

VALUE_STREAM_LABELS = {
    'martechOptimization': 'Martech Optimization',
    'roasImprovement': 'ROAS Improvement',
    'contentVelocity': 'Content Velocity',
    'campaignSpeed': 'Campaign Throughput',
    'operationalEfficiency': 'Operational Efficiency',
    'attributionImprovement': 'Attribution Improvement',
    'personalizationLift': 'Personalization Lift',
}

# Midpoints (weeks) of the campaign lifecycle buckets: 1-10, 11-25, 25-52
CAMPAIGN_CYCLE_MIDPOINTS = {'short': 5.5, 'medium': 18, 'long': 38.5}

# ── Industry marketing budget ratios (% of revenue) ──
INDUSTRY_BUDGET_RATIOS = {
    'B2B Average': 6.7,
    'B2C Average': 9.6,
    'Technology': 8.5,
    'Financial Services': 8.0,
    'Healthcare / Pharma': 7.2,
    'Consumer Packaged Goods': 10.9,
    'Retail': 8.3,
    'Media / Entertainment': 9.1,
    'Telecom': 5.3,
    'Energy / Industrial': 3.1,
    'Professional Services': 7.8,
}

CHANNEL_ROAS_BENCHMARKS = {
    'Google Search': 8.0,
    'Google Shopping': 5.5,
    'Meta (Facebook/Instagram)': 3.5,
    'LinkedIn': 2.1,
    'Programmatic Display': 1.8,
    'TikTok': 2.4,
    'YouTube': 2.0,
    'Connected TV': 1.5,
}

AI_IMPACT_BENCHMARKS = {
    'contentCostReduction': 65,   # % reduction in content production cost
    'headcountSavings': 20,       # % of team cost automatable
    'wasteRecovery': 50,          # % of identified waste recoverable
    'personalizationLift': 12,
    'roasImprovement': 20,
    'agenticSpeedMultiplier': 3,
    'agenticCostReduction': 40,
}

CONFIDENCE_LEVELS = {
    'high': {'label': 'High', 'color': '#4CAF50',
             'description': 'Multiple corroborating sources, large samples'},
    'medium': {'label': 'Medium', 'color': '#f59e0b',
               'description': 'Single authoritative source or moderate sample'},
    'emerging': {'label': 'Emerging', 'color': '#9B7ACC',
                 'description': 'Early data, directionally correct'},
}

SOURCE_ATTRIBUTION = {
    'marketingBudgetPct': {'source': 'Gartner 2025 CMO Spend Survey', 'confidence': 'high', 'sampleSize': '400+ CMOs'},
    'martechUtilization': {'source': 'Gartner 2024 Martech Survey', 'confidence': 'high', 'sampleSize': '400+ enterprises'},
    'toolCount': {'source': 'ChiefMartec / MartechMap 2024', 'confidence': 'medium'},
    'paidMediaPct': {'source': 'Gartner 2025 CMO Spend Survey', 'confidence': 'high', 'sampleSize': '400+ CMOs'},
    'blendedRoas': {'source': 'Google/Nielsen Cross-Channel Study (blended estimate)', 'confidence': 'emerging'},
    'adminTimePct': {'source': 'Salesforce State of Marketing 2025', 'confidence': 'high', 'sampleSize': '4,800+ marketers'},
    'contentTimeSavings': {'source': 'HubSpot State of Marketing 2025 (first-draft text only)', 'confidence': 'medium', 'sampleSize': '1,400+ marketers'},
    'personalizationLift': {'source': 'McKinsey Personalization Analysis 2023 (top quartile)', 'confidence': 'high'},
    'roasLift': {'source': 'Platform vendor case studies (Meta, Google), not independently verified', 'confidence': 'emerging'},
    'reworkRate': {'source': 'Lucidpress Brand Consistency Report', 'confidence': 'medium'},
    'marketingWaste': {'source': 'Rakuten/ANA Programmatic Study', 'confidence': 'medium', 'sampleSize': '1,000+ advertisers'},
    'doNothingErosion': {'source': 'PwC/ANA Digital Maturity Study (illustrative erosion model)', 'confidence': 'emerging'},
    'contributionMargin': {'source': 'Industry average marketing contribution margin (20% of incremental revenue)', 'confidence': 'medium'},
    'ongoingOpEx': {'source': 'Industry-standard software maintenance ratio (20% of capital cost per year)', 'confidence': 'high'},
}

# ── Agent intensity ──
# Orthogonal to the scenario multiplier. Medium = the default assumption set.
AGENT_INTENSITY_LEVELS = {
    'low': {
        'label': 'Co-Pilot',
        'shortDescription': 'Humans lead, AI assists',
        'description': 'AI augments existing workflows: content drafting, report generation, basic optimization. Humans remain primary decision-makers.',
        'benchmarkNote': 'About half of industry-median improvement assumptions.',
    },
    'medium': {
        'label': 'Agentic',
        'shortDescription': 'AI executes, humans supervise',
        'description': 'AI agents run end-to-end workflows such as campaign optimization, content production and attribution analysis, with human oversight at key decision points.',
        'benchmarkNote': 'Aligned with 2026 industry medians.',
    },
    'high': {
        'label': 'Autonomous',
        'shortDescription': 'AI drives, humans steer strategy',
        'description': 'Autonomous AI operations across the marketing function. Humans focus on strategy and creative direction.',
        'benchmarkNote': 'Aligned with top-quartile benchmarks.',
    },
}

INTENSITY_PRESETS = {
    'low': {
        'roasLiftPct': 6, 'contentTimeSavingsPct': 20, 'personalizationRevLiftPct': 4,
        'cycleTimeReductionPct': 10, 'reworkReductionPct': 20, 'adminToStrategicShiftPct': 15,
        'attributionImprovementPct': 5, 'martechUtilizationTargetPct': 40,
        'martechToolConsolidationPct': 10,
    },
    'medium': {
        'roasLiftPct': 12, 'contentTimeSavingsPct': 40, 'personalizationRevLiftPct': 8,
        'cycleTimeReductionPct': 25, 'reworkReductionPct': 40, 'adminToStrategicShiftPct': 30,
        'attributionImprovementPct': 10, 'martechUtilizationTargetPct': 50,
        'martechToolConsolidationPct': 20,
    },
    'high': {
        'roasLiftPct': 20, 'contentTimeSavingsPct': 65, 'personalizationRevLiftPct': 15,
        'cycleTimeReductionPct': 50, 'reworkReductionPct': 60, 'adminToStrategicShiftPct': 55,
        'attributionImprovementPct': 20, 'martechUtilizationTargetPct': 65,
        'martechToolConsolidationPct': 35,
    },
}

# Headline erosion figures quoted alongside the modelled projection
DO_NOTHING_BENCHMARKS = {'year1Pct': 16, 'year2Pct': 25, 'year3Pct': 34}

DEFAULT_PARAMS = {
    'discountRate': DISCOUNT_RATE,
    'projectionMonths': PROJECTION_MONTHS,
    'ongoingOpexPct': ONGOING_OPEX_PCT,
    'quarterlyErosionPct': QUARTERLY_EROSION_PCT,
    'hurdleRatePct': HURDLE_RATE_PCT,
    'contributionMarginPct': CONTRIBUTION_MARGIN_PCT,
    'weeksPerMonth': WEEKS_PER_MONTH,
    'rampModel': 'linear',    # 'linear' | 'adoption'
    'channelLiftPct': {},     # channel -> lift %, falls back to roasLiftPct
}

# ── Enterprise defaults (mid-range S&P 100 marketing org) ──
DEFAULT_INPUTS = {
    'org': {
        'annualRevenue': 2_000_000_000,
        'marketingBudgetPct': 7.7,
        'marketingHeadcount': 200,
        'avgLoadedFteCost': 180_000,
        'industry': 'B2B Average',
        'companyName': '',
    },
    'martech': {
        'martechPctOfBudget': 23.8,
        'martechToolCount': 120,
        'martechUtilizationPct': 33,
        'paidMediaPctOfBudget': 30.6,
        'currentBlendedRoas': 2.5,
    },
    'ops': {
        'monthlyCampaigns': 80,
        'monthlyContentAssets': 500,
        'avgCampaignCycleWeeks': 6,
        'channelCount': 10,
        'agencyPctOfBudget': 15,
        'campaignCycleShortPct': 55,
        'campaignCycleMediumPct': 30,
        'campaignCycleLongPct': 15,
    },
    'pain': {
        'reworkRatePct': 20,
        'approvalCycleDays': 7,
        'adminTimePct': 60,
        'marketingWasteRatePct': 30,
        'manualAttributionPct': 33,
    },
    'investment': {
        'totalInvestmentAmount': 3_000_000,
        'implementationWeeks': 28,
    },
    'assumptions': dict(INTENSITY_PRESETS['medium']),
}

INPUT_GROUPS = ('org', 'martech', 'ops', 'pain', 'investment', 'assumptions')


def default_inputs():
    """Fresh deep copy of the enterprise defaults, safe for callers to mutate."""
    return copy.deepcopy(DEFAULT_INPUTS)


def default_params():
    return copy.deepcopy(DEFAULT_PARAMS)


def get_industry_budget_pct(industry):
    return INDUSTRY_BUDGET_RATIOS.get(industry)


def get_scenario_multiplier(scenario):
    return SCENARIO_MULTIPLIERS.get(scenario)


def get_confidence_level(level):
    return CONFIDENCE_LEVELS.get(level)


def get_source_attribution(key):
    """Attribution record for an input key, with its confidence record resolved."""
    attr = SOURCE_ATTRIBUTION.get(key)
    if attr is None:
        return None
    return dict(attr, confidenceInfo=CONFIDENCE_LEVELS.get(attr['confidence']))


def get_intensity_level(level):
    return AGENT_INTENSITY_LEVELS.get(level)


def get_intensity_preset(level):
    preset = INTENSITY_PRESETS.get(level)
    return dict(preset) if preset is not None else None


REFERENCE_TABLES = {
    'industry': INDUSTRY_BUDGET_RATIOS,
    'scenario': SCENARIO_MULTIPLIERS,
    'confidence': CONFIDENCE_LEVELS,
    'source': SOURCE_ATTRIBUTION,
    'intensity': AGENT_INTENSITY_LEVELS,
    'channel': CHANNEL_ROAS_BENCHMARKS,
}

_LOOKUPS = {
    'industry': get_industry_budget_pct,
    'scenario': get_scenario_multiplier,
    'confidence': get_confidence_level,
    'source': get_source_attribution,
    'intensity': get_intensity_level,
    'channel': CHANNEL_ROAS_BENCHMARKS.get,
}


def lookup(table, key):
    """Generic string-keyed lookup used by the HTTP layer. None if either key is unknown."""
    fn = _LOOKUPS.get(table)
    return fn(key) if fn else None
