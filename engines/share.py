"""
ROI Navigator - Shareable Configuration Codec
Encodes the six input groups (plus disabled streams, scenario, agent
intensity and any model params that differ from the defaults) as URL-safe
base64 JSON. Decoding on top of DEFAULT_PARAMS reproduces the outputs
exactly, whatever config the receiving server loaded; nothing derived is
serialized.
"""
import base64
import binascii
import json
import logging

from engines.reference import DEFAULT_PARAMS, INPUT_GROUPS, SCENARIOS

RAMP_MODELS = ('linear', 'adoption')


def _is_number(v):
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def _params_delta(params):
    return {k: v for k, v in (params or {}).items() if k in DEFAULT_PARAMS and v != DEFAULT_PARAMS[k]}


def _clean_params(raw):
    """Keep only known params whose value has the right shape."""
    if not isinstance(raw, dict):
        return {}
    clean = {}
    for k, v in raw.items():
        if k == 'rampModel':
            ok = v in RAMP_MODELS
        elif k == 'channelLiftPct':
            ok = isinstance(v, dict) and all(_is_number(x) for x in v.values())
        else:
            ok = k in DEFAULT_PARAMS and _is_number(v)
        if ok:
            clean[k] = v
        else:
            logging.warning(f"Share config: dropping param '{k}'")
    return clean


def encode_share_config(inputs, disabled_streams=None, scenario='expected', intensity=None, params=None):
    config = {g: inputs.get(g, {}) for g in INPUT_GROUPS}
    config['ds'] = sorted(disabled_streams or ())
    config['scenario'] = scenario
    if intensity:
        config['intensity'] = intensity
    delta = _params_delta(params)
    if delta:
        config['params'] = delta
    raw = json.dumps(config, sort_keys=True, separators=(',', ':')).encode('utf-8')
    return base64.urlsafe_b64encode(raw).decode('ascii').rstrip('=')


def decode_share_config(encoded):
    """Inverse of encode_share_config. Returns None for anything malformed.

    The decoded 'params' holds only the non-default values; apply it over
    DEFAULT_PARAMS.
    """
    if not encoded or not isinstance(encoded, str):
        return None
    padded = encoded + '=' * (-len(encoded) % 4)
    try:
        config = json.loads(base64.urlsafe_b64decode(padded.encode('ascii')).decode('utf-8'))
    except (binascii.Error, UnicodeError, ValueError) as e:
        logging.warning(f"Rejected share config: {e}")
        return None
    if not isinstance(config, dict) or not all(isinstance(config.get(g), dict) for g in INPUT_GROUPS):
        return None
    if config.get('scenario') not in SCENARIOS:
        config['scenario'] = 'expected'
    ds = config.get('ds')
    config['ds'] = [k for k in ds if isinstance(k, str)] if isinstance(ds, list) else []
    config['params'] = _clean_params(config.get('params'))
    return config
