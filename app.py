"""
ROI Navigator - Flask API Server
Holds the session's input groups and toggles, and re-runs the pure ROI engine
on every mutation so each response carries fresh downstream outputs.
"""
import io
import logging
import os
import traceback
from flask import Flask, jsonify, request, send_file
from engines.baseline import compute_baseline, weighted_cycle_weeks
from engines.config_loader import load_inputs, load_parameters
from engines.export import build_workbook
from engines.reference import (
    INPUT_GROUPS, SCENARIOS, VALUE_STREAM_KEYS, INTENSITY_PRESETS, REFERENCE_TABLES, default_params, lookup,
)
from engines.roi import compute_roi
from engines.sensitivity import compute_sensitivity
from engines.share import encode_share_config, decode_share_config

logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(message)s')

app = Flask(__name__)

STATE = {
    'inputs': None, 'params': None, 'outputs': None, 'baseline': None,
    'disabledStreams': set(), 'scenario': 'expected', 'intensity': 'medium',
    'loaded': False,
}

CYCLE_BUCKETS = ('campaignCycleShortPct', 'campaignCycleMediumPct', 'campaignCycleLongPct')


def _sanitize_for_json(obj):
    """Convert sets and tuples to lists."""
    if isinstance(obj, set):
        return sorted(list(obj))
    elif isinstance(obj, dict):
        return {k: _sanitize_for_json(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [_sanitize_for_json(v) for v in obj]
    return obj


def _engine_args(inputs):
    return [inputs[g] for g in INPUT_GROUPS]


def _recompute():
    inputs = STATE['inputs']
    STATE['baseline'] = compute_baseline(inputs['org'], inputs['martech'], inputs['ops'], inputs['pain'])
    STATE['outputs'] = compute_roi(*_engine_args(inputs),
                                   disabled_streams=STATE['disabledStreams'], params=STATE['params'])


def _run_all():
    STATE['params'] = load_parameters()
    STATE['inputs'] = load_inputs()
    STATE['disabledStreams'] = set()
    STATE['scenario'] = 'expected'
    STATE['intensity'] = 'medium'
    _recompute()
    STATE['loaded'] = True
    return True


def _rebalance_cycle_buckets(ops, changed):
    """
    Keep the three campaign-duration buckets summing to 100 after one of them
    is edited: the other two absorb the difference in proportion to their
    current shares.
    """
    if len(changed) != 1:
        return
    key = changed[0]
    ops[key] = max(0, min(100, ops[key]))
    others = [k for k in CYCLE_BUCKETS if k != key]
    remaining = 100 - ops[key]
    current = sum(max(0, ops.get(k, 0)) for k in others)
    for k in others:
        share = max(0, ops.get(k, 0)) / current if current > 0 else 1 / len(others)
        ops[k] = remaining * share


def _check_values(group, values):
    """Reject unknown fields, and non-numeric values for numeric fields."""
    target = STATE['inputs'][group]
    if not isinstance(values, dict):
        raise TypeError(f'{group} must be an object')
    unknown = [k for k in values if k not in target]
    if unknown:
        raise KeyError(f"{group}: {', '.join(unknown)}")
    for k, v in values.items():
        numeric = isinstance(target[k], (int, float))
        if numeric and (isinstance(v, bool) or not isinstance(v, (int, float))):
            raise TypeError(f'{group}.{k} must be numeric')


def _apply_override(group, values):
    _check_values(group, values)
    target = STATE['inputs'][group]
    target.update(values)
    if group == 'ops':
        changed = [k for k in CYCLE_BUCKETS if k in values]
        if changed:
            _rebalance_cycle_buckets(target, changed)
            target['avgCampaignCycleWeeks'] = weighted_cycle_weeks(
                *(target[k] for k in CYCLE_BUCKETS), fallback=target['avgCampaignCycleWeeks'])


def _state_object():
    return {
        'inputs': STATE['inputs'],
        'params': STATE['params'],
        'baseline': STATE['baseline'],
        'outputs': STATE['outputs'],
        'disabledStreams': STATE['disabledStreams'],
        'scenario': STATE['scenario'],
        'intensity': STATE['intensity'],
        'selectedScenario': STATE['outputs']['scenarios'][STATE['scenario']],
    }


def _respond(message):
    return jsonify(_sanitize_for_json({'status': 'ok', 'message': message, 'data': _state_object()}))


@app.before_request
def _ensure_loaded():
    if not STATE['loaded'] and not STATE.get('_load_error'):
        try:
            _run_all()
            logging.info("ROI Navigator engines loaded successfully")
        except Exception as e:
            STATE['_load_error'] = f"{type(e).__name__}: {e}"
            logging.exception("Engine load failed")


def _not_loaded():
    return jsonify({
        'error': 'Data not loaded',
        'reason': STATE.get('_load_error', 'Unknown, check server log'),
        'hint': 'Check data/config/*.xlsx and that openpyxl is installed',
    }), 503


# ══════════════════════════════════════════════════════════════
#  ROUTES
# ══════════════════════════════════════════════════════════════

@app.route('/api/data')
def api_data():
    if not STATE['loaded']: return _not_loaded()
    return jsonify(_sanitize_for_json(_state_object()))


@app.route('/api/baseline')
def api_baseline():
    if not STATE['loaded']: return _not_loaded()
    return jsonify(STATE['baseline'])


@app.route('/api/roi')
def api_roi():
    if not STATE['loaded']: return _not_loaded()
    return jsonify(STATE['outputs'])


@app.route('/api/sensitivity')
def api_sensitivity():
    if not STATE['loaded']: return _not_loaded()
    return jsonify(compute_sensitivity(*_engine_args(STATE['inputs']),
                                       disabled_streams=STATE['disabledStreams'], params=STATE['params']))


@app.route('/api/reference/<table>')
def api_reference_table(table):
    if table not in REFERENCE_TABLES:
        return jsonify({'error': f'Unknown reference table: {table}'}), 404
    return jsonify(REFERENCE_TABLES[table])


@app.route('/api/reference/<table>/<key>')
def api_reference(table, key):
    value = lookup(table, key)
    if value is None:
        return jsonify({'error': f'Unknown reference key: {table}/{key}'}), 404
    return jsonify({'table': table, 'key': key, 'value': value})


@app.route('/api/refresh', methods=['POST'])
def api_refresh():
    """Full reload from the config workbooks, dropping every session edit."""
    try:
        STATE['loaded'] = False
        STATE['_load_error'] = None
        _run_all()
        return _respond('Inputs and parameters reloaded from config')
    except Exception as e:
        logging.exception("Refresh failed")
        return jsonify({'status': 'error', 'message': str(e)}), 500


@app.route('/api/override', methods=['POST'])
def api_override():
    """Merge field values into one input group and recompute."""
    if not STATE['loaded']: return _not_loaded()
    body = request.get_json(force=True, silent=True) or {}
    group = body.get('group'); values = body.get('values')
    if group not in INPUT_GROUPS or not isinstance(values, dict) or not values:
        return jsonify({'error': 'group and values required'}), 400
    try:
        _apply_override(group, values)
    except KeyError as e:
        return jsonify({'error': f'Unknown field(s): {e.args[0]}'}), 400
    except TypeError as e:
        return jsonify({'error': str(e)}), 400
    _recompute()
    logging.info(f"Override {group}: {sorted(values)}")
    return _respond(f'Override applied to {group}')


@app.route('/api/stream/toggle', methods=['POST'])
def api_toggle_stream():
    if not STATE['loaded']: return _not_loaded()
    body = request.get_json(force=True, silent=True) or {}
    key = body.get('stream'); enabled = body.get('enabled')
    if key not in VALUE_STREAM_KEYS or not isinstance(enabled, bool):
        return jsonify({'error': 'stream and enabled required'}), 400
    if enabled:
        STATE['disabledStreams'].discard(key)
    else:
        STATE['disabledStreams'].add(key)
    _recompute()
    return _respond(f"{key} {'enabled' if enabled else 'disabled'}")


@app.route('/api/intensity', methods=['POST'])
def api_intensity():
    """Replace the assumption group with an agent-intensity preset."""
    if not STATE['loaded']: return _not_loaded()
    body = request.get_json(force=True, silent=True) or {}
    level = body.get('level')
    if level not in INTENSITY_PRESETS:
        return jsonify({'error': f"level must be one of {sorted(INTENSITY_PRESETS)}"}), 400
    STATE['intensity'] = level
    STATE['inputs']['assumptions'] = dict(INTENSITY_PRESETS[level])
    _recompute()
    return _respond(f'Intensity set to {level}')


@app.route('/api/scenario', methods=['POST'])
def api_scenario():
    if not STATE['loaded']: return _not_loaded()
    body = request.get_json(force=True, silent=True) or {}
    scenario = body.get('scenario')
    if scenario not in SCENARIOS:
        return jsonify({'error': f'scenario must be one of {list(SCENARIOS)}'}), 400
    STATE['scenario'] = scenario
    return _respond(f'Scenario set to {scenario}')


@app.route('/api/calculate', methods=['POST'])
def api_calculate():
    """Stateless run: groups in the body overlay the session inputs, nothing is stored."""
    if not STATE['loaded']: return _not_loaded()
    body = request.get_json(force=True, silent=True)
    if not isinstance(body, dict):
        return jsonify({'error': 'JSON object required'}), 400
    disabled = body.get('disabledStreams', sorted(STATE['disabledStreams']))
    if not isinstance(disabled, list) or not all(isinstance(k, str) for k in disabled):
        return jsonify({'error': 'disabledStreams must be a list of stream keys'}), 400
    try:
        inputs = {g: dict(STATE['inputs'][g], **(body.get(g) or {})) for g in INPUT_GROUPS}
        outputs = compute_roi(*_engine_args(inputs), disabled_streams=disabled, params=STATE['params'])
        return jsonify(outputs)
    except (TypeError, ValueError) as e:
        return jsonify({'error': f'Invalid inputs: {e}'}), 400
    except Exception as e:
        logging.exception("Calculate failed")
        return jsonify({'status': 'error', 'message': str(e)}), 500


@app.route('/api/share')
def api_share():
    if not STATE['loaded']: return _not_loaded()
    return jsonify({'config': encode_share_config(STATE['inputs'], STATE['disabledStreams'],
                                                  STATE['scenario'], STATE['intensity'], STATE['params'])})


@app.route('/api/share/load', methods=['POST'])
def api_share_load():
    if not STATE['loaded']: return _not_loaded()
    body = request.get_json(force=True, silent=True) or {}
    config = decode_share_config(body.get('config'))
    if config is None:
        return jsonify({'error': 'Invalid share config'}), 400
    try:
        for g in INPUT_GROUPS:
            _check_values(g, config[g])
    except (KeyError, TypeError) as e:
        return jsonify({'error': f'Invalid share config: {e.args[0]}'}), 400

    # Session is only replaced once the shared state computes cleanly
    inputs = {g: dict(STATE['inputs'][g], **config[g]) for g in INPUT_GROUPS}
    params = dict(default_params(), **config['params'])
    disabled = {k for k in config['ds'] if k in VALUE_STREAM_KEYS}
    try:
        baseline = compute_baseline(inputs['org'], inputs['martech'], inputs['ops'], inputs['pain'])
        outputs = compute_roi(*_engine_args(inputs), disabled_streams=disabled, params=params)
    except (TypeError, ValueError, ArithmeticError) as e:
        return jsonify({'error': f'Invalid share config: {e}'}), 400

    STATE.update(inputs=inputs, params=params, disabledStreams=disabled,
                 baseline=baseline, outputs=outputs, scenario=config['scenario'])
    if config.get('intensity') in INTENSITY_PRESETS:
        STATE['intensity'] = config['intensity']
    return _respond('Shared configuration loaded')


@app.route('/api/export')
def api_export():
    """Export inputs and outputs to Excel."""
    if not STATE['loaded']: return _not_loaded()
    try:
        sensitivity = compute_sensitivity(*_engine_args(STATE['inputs']),
                                          disabled_streams=STATE['disabledStreams'], params=STATE['params'])
        wb = build_workbook(STATE['inputs'], STATE['baseline'], STATE['outputs'], sensitivity)
        buf = io.BytesIO()
        wb.save(buf)
        buf.seek(0)
        name = (STATE['inputs']['org'].get('companyName') or 'ROI_Navigator').replace(' ', '_')
        return send_file(buf, as_attachment=True, download_name=f'{name}_Export.xlsx',
                         mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet')
    except Exception as e:
        traceback.print_exc()
        return jsonify({'error': str(e)}), 500


if __name__ == '__main__':
    app.run(debug=False, host='0.0.0.0', port=int(os.environ.get('PORT', 5000)))
