"""
Trajectory validator utilities.

The simulation loop does not detect numerical divergence; an unstable dt
simply fills the arrays with inf/nan. These helpers report it afterwards.

Functions:
- validate_trajectory(state) -> (ok: bool, reason: str|None)
    reason "non_finite: <signal>[<index>]" names the first offending signal
    (in TRAJECTORY_FIELDS order) and its first bad index;
    "length_mismatch" when series lengths disagree.

- trajectory_stats(state) -> dict
    {
      "total": int,            # samples per series
      "non_finite": int,       # non-finite samples over all series
      "by_signal": {name: int},
      "first_bad_index": int   # -1 when all finite
    }

- validate_metrics(metrics) -> (ok, reason)
    Maps non-finite metrics and out-of-range efficiency to canonical codes:
    "non_finite_metric:<name>", "efficiency_out_of_range".

Notes:
- This module does not mutate the state and has no side effects.
"""

from __future__ import annotations
from typing import Any, Dict, Optional, Tuple
import math

import numpy as np

from buck_plane.types import SimulationState, TRAJECTORY_FIELDS
from .aggregator import SteadyStateMetrics


def trajectory_stats(state: SimulationState) -> Dict[str, Any]:
    by_signal: Dict[str, int] = {}
    first_bad = -1
    for name in TRAJECTORY_FIELDS:
        arr = getattr(state, name)
        bad = ~np.isfinite(arr)
        cnt = int(np.count_nonzero(bad))
        by_signal[name] = cnt
        if cnt:
            idx = int(np.argmax(bad))
            if first_bad < 0 or idx < first_bad:
                first_bad = idx
    return {
        "total": state.n_samples,
        "non_finite": int(sum(by_signal.values())),
        "by_signal": by_signal,
        "first_bad_index": first_bad,
    }


def validate_trajectory(state: SimulationState) -> Tuple[bool, Optional[str]]:
    n = state.n_samples
    for name in TRAJECTORY_FIELDS:
        if getattr(state, name).shape != (n,):
            return False, "length_mismatch"
    for name in TRAJECTORY_FIELDS:
        arr = getattr(state, name)
        bad = ~np.isfinite(arr)
        if bad.any():
            return False, f"non_finite: {name}[{int(np.argmax(bad))}]"
    return True, None


def validate_metrics(metrics: SteadyStateMetrics) -> Tuple[bool, Optional[str]]:
    for name, val in metrics.as_dict().items():
        if not math.isfinite(float(val)):
            return False, f"non_finite_metric:{name}"
    if not (0.0 < metrics.efficiency <= 1.0):
        return False, "efficiency_out_of_range"
    return True, None
