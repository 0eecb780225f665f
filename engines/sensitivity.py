"""
ROI Navigator - Sensitivity Grid
Varies content-time-savings (rows) and ROAS lift (columns) by -25% / base /
+25% and reruns the return metrics for each of the nine combinations.
"""
from engines.roi import run_return_metrics

OFFSETS = (-0.25, 0.0, 0.25)
ROW_KEY, ROW_LABEL = 'contentTimeSavingsPct', 'Content Time Savings'
COL_KEY, COL_LABEL = 'roasLiftPct', 'ROAS Lift'


def _axis_labels(base):
    return [f"{round(base * (1 + o))}%" for o in OFFSETS]


def compute_sensitivity(org, martech, ops, pain, investment, assumptions, disabled_streams=None, params=None):
    """
    3x3 grid of payback months, paybacks[row][col]. A cell is None when that
    combination does not break even inside the horizon. The centre cell runs
    the unperturbed assumptions through the same path as compute_roi, so it
    equals its paybackMonths exactly.
    """
    base_row = assumptions.get(ROW_KEY, 0)
    base_col = assumptions.get(COL_KEY, 0)

    paybacks = []
    for row_off in OFFSETS:
        row = []
        for col_off in OFFSETS:
            modified = dict(assumptions)
            # offset 0 keeps the caller's value untouched
            if row_off:
                modified[ROW_KEY] = base_row * (1 + row_off)
            if col_off:
                modified[COL_KEY] = base_col * (1 + col_off)
            _, _, returns = run_return_metrics(org, martech, ops, pain, investment, modified,
                                               disabled_streams, params)
            row.append(returns['paybackMonths'])
        paybacks.append(row)

    return {
        'rowLabel': ROW_LABEL,
        'colLabel': COL_LABEL,
        'rowValues': _axis_labels(base_row),
        'colValues': _axis_labels(base_col),
        'offsets': list(OFFSETS),
        'paybacks': paybacks,
    }
