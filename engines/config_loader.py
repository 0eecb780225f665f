"""
ROI Navigator - Configuration Loader
Reads consultant config workbooks from data/config/ and overlays them on the
built-in defaults:
  - parameters.xlsx : Parameter | Value           -> model params
  - inputs.xlsx     : Group | Field | Value       -> default input groups
  - channels.xlsx   : Channel | Lift %            -> per-channel ROAS lift
Missing files fall back to defaults. Unknown rows are logged and skipped.
"""
import os, logging
import openpyxl

from engines.reference import INPUT_GROUPS, default_inputs, default_params

DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), 'data')

PARAM_MAP = {
    'Discount Rate': 'discountRate',
    'Projection Months': 'projectionMonths',
    'Ongoing OpEx %': 'ongoingOpexPct',
    'Quarterly Erosion %': 'quarterlyErosionPct',
    'Hurdle Rate %': 'hurdleRatePct',
    'Contribution Margin %': 'contributionMarginPct',
    'Weeks per Month': 'weeksPerMonth',
    'Ramp Model': 'rampModel',
}
TEXT_PARAMS = ('rampModel',)
TEXT_FIELDS = ('industry', 'companyName')
RAMP_MODELS = ('linear', 'adoption')


def read_xlsx_sheet(filepath, sheet_name=None):
    wb = openpyxl.load_workbook(filepath, read_only=True, data_only=True)
    ws = wb[sheet_name] if sheet_name else wb.active
    rows = list(ws.iter_rows(values_only=True))
    wb.close()
    if len(rows) < 2:
        return []
    headers = [str(h).strip() if h else f'col_{i}' for i, h in enumerate(rows[0])]
    return [dict(zip(headers, row)) for row in rows[1:]]


def _to_number(val):
    if isinstance(val, (int, float)) and not isinstance(val, bool):
        return val
    try:
        return float(str(val).replace(',', '').strip())
    except ValueError:
        return None


def load_parameters(path=None):
    """Model params: DEFAULT_PARAMS overlaid with parameters.xlsx and channels.xlsx."""
    path = path or os.path.join(DATA_DIR, 'config', 'parameters.xlsx')
    p = default_params()
    if os.path.exists(path):
        for row in read_xlsx_sheet(path):
            key = str(row.get('Parameter', '') or '').strip()
            val = row.get('Value')
            if key not in PARAM_MAP or val is None:
                if key:
                    logging.warning(f"parameters.xlsx: ignoring row '{key}'")
                continue
            mapped = PARAM_MAP[key]
            if mapped in TEXT_PARAMS:
                val = str(val).strip().lower()
                if val not in RAMP_MODELS:
                    logging.warning(f"parameters.xlsx: unknown ramp model '{val}', keeping {p[mapped]}")
                    continue
            else:
                val = _to_number(val)
                if val is None:
                    logging.warning(f"parameters.xlsx: non-numeric value for '{key}'")
                    continue
                if mapped == 'projectionMonths':
                    val = int(val)
            p[mapped] = val
        logging.info(f"Loaded parameters from {path}")
    p['channelLiftPct'] = load_channel_lifts(os.path.join(os.path.dirname(path), 'channels.xlsx'))
    return p


def load_channel_lifts(path=None):
    path = path or os.path.join(DATA_DIR, 'config', 'channels.xlsx')
    lifts = {}
    if not os.path.exists(path):
        return lifts
    for row in read_xlsx_sheet(path):
        channel = str(row.get('Channel', '') or '').strip()
        lift = _to_number(row.get('Lift %'))
        if channel and lift is not None:
            lifts[channel] = lift
    logging.info(f"Loaded {len(lifts)} channel lift overrides from {path}")
    return lifts


def load_inputs(path=None):
    """Default input groups overlaid with inputs.xlsx rows."""
    path = path or os.path.join(DATA_DIR, 'config', 'inputs.xlsx')
    inputs = default_inputs()
    if not os.path.exists(path):
        return inputs
    applied = 0
    for row in read_xlsx_sheet(path):
        group = str(row.get('Group', '') or '').strip()
        field = str(row.get('Field', '') or '').strip()
        val = row.get('Value')
        if group not in INPUT_GROUPS or field not in inputs[group] or val is None:
            logging.warning(f"inputs.xlsx: ignoring row {group}.{field}")
            continue
        if field not in TEXT_FIELDS:
            val = _to_number(val)
            if val is None:
                logging.warning(f"inputs.xlsx: non-numeric value for {group}.{field}")
                continue
        inputs[group][field] = val
        applied += 1
    logging.info(f"Applied {applied} input overrides from {path}")
    return inputs
