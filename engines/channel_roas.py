"""
ROI Navigator - Channel ROAS Comparator
Current vs AI-optimized return multiple per paid channel.
"""
from engines.reference import CHANNEL_ROAS_BENCHMARKS


def compute_channel_roas(roas_lift_pct, channel_lifts=None, benchmarks=None):
    """
    One entry per channel. The lift for a channel comes from channel_lifts when
    it names that channel, otherwise the uniform ROAS lift. Lifts are floored
    at 0 so the optimized multiple never falls below the current one.
    """
    channel_lifts = channel_lifts or {}
    benchmarks = CHANNEL_ROAS_BENCHMARKS if benchmarks is None else benchmarks
    entries = []
    for channel, current in benchmarks.items():
        lift = max(0.0, channel_lifts.get(channel, roas_lift_pct) or 0)
        entries.append({
            'channel': channel,
            'currentRoas': current,
            'aiOptimizedRoas': current * (1 + lift / 100),
            'liftPct': lift,
        })
    return entries
