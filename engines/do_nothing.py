"""
ROI Navigator - Cost of Inaction Engine
Compounding quarterly erosion of the marketing budget's competitive value
over 12 quarters when nothing is invested.
"""
from engines.baseline import clamp
from engines.reference import QUARTERLY_EROSION_PCT

QUARTERS = 12


def compute_do_nothing(total_marketing_budget, quarterly_erosion_pct=QUARTERLY_EROSION_PCT):
    """
    Each quarter erodes the value left after the previous quarter, so the
    cumulative loss after q quarters is budget x (1 - (1 - rate)^q). The rate
    is clamped to [0, 100]%, which keeps the loss series non-decreasing and
    never above the budget.
    """
    budget = max(0.0, total_marketing_budget or 0)
    rate = clamp(quarterly_erosion_pct or 0, 0, 100) / 100

    quarterly_losses = []
    erosion_pcts = []
    remaining = 1.0
    for _ in range(QUARTERS):
        remaining *= (1 - rate)
        eroded = 1 - remaining
        quarterly_losses.append(budget * eroded)
        erosion_pcts.append(eroded * 100)

    return {
        'marketingBudget': budget,
        'quarterlyErosionPct': rate * 100,
        'quarterlyLosses': quarterly_losses,
        'quarterlyErosionPcts': erosion_pcts,
        'year1Loss': quarterly_losses[3],
        'year2Loss': quarterly_losses[7],
        'year3Loss': quarterly_losses[11],
        'year1ErosionPct': erosion_pcts[3],
        'year2ErosionPct': erosion_pcts[7],
        'year3ErosionPct': erosion_pcts[11],
    }
