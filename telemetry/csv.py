"""
CSV emitters for steady-state metrics and run trajectories.

Deterministic behavior:
- Stable column order (explicit header list, not dict iteration).
- Fixed float formatting with 6 decimal places for metrics; trajectories use
  repr-precision ("%.9g") so ripple at the millivolt level survives.
- NaN values serialized as empty string.

This module intentionally has no external dependencies beyond stdlib and numpy.
"""

from __future__ import annotations
import csv
import math
from typing import Iterable, List, Optional, TextIO

from buck_plane.types import SimulationState, TRAJECTORY_FIELDS
from .aggregator import SteadyStateMetrics


# Stable, explicit header order
_METRICS_HEADER: List[str] = [
    "run_id",
    "start_index",
    "n_window",
    "t_start",
    "v_out_avg",
    "v_out_ripple",
    "regulation_error",
    "i_l_rms",
    "i_out_avg",
    "duty_avg",
    "p_out",
    "p_inductor",
    "p_mosfet_conduction",
    "p_switching",
    "p_mosfet",
    "p_diode",
    "p_loss_total",
    "efficiency",
    "tj_mos_max",
    "tj_diode_max",
    "t_amb",
]


def _fmt(val) -> str:
    if val is None:
        return ""
    if isinstance(val, float):
        if math.isnan(val):
            return ""
        return f"{val:.6f}"
    return str(val)


def write_metrics_csv(rows: Iterable[SteadyStateMetrics], fp: TextIO, run_ids: Optional[Iterable[str]] = None) -> int:
    """
    Write SteadyStateMetrics rows to CSV with deterministic header and formatting.

    run_ids, when given, labels each row in order; otherwise rows are numbered from 0.

    Returns:
        int: number of rows written (excluding header).
    """
    writer = csv.writer(fp, lineterminator="\n")
    writer.writerow(_METRICS_HEADER)

    ids = list(run_ids) if run_ids is not None else None
    count = 0
    for m in rows:
        rec = m.as_dict()
        rid = ids[count] if ids is not None else str(count)
        writer.writerow([rid] + [_fmt(rec[k]) for k in _METRICS_HEADER[1:]])
        count += 1
    return count


def write_trajectory_csv(state: SimulationState, fp: TextIO, stride: int = 1) -> int:
    """
    Write every `stride`-th sample of the trajectories (always including the last).

    Returns:
        int: number of rows written (excluding header).
    """
    if int(stride) < 1:
        raise ValueError("stride must be >= 1")
    stride = int(stride)
    writer = csv.writer(fp, lineterminator="\n")
    writer.writerow(list(TRAJECTORY_FIELDS))

    series = [getattr(state, name) for name in TRAJECTORY_FIELDS]
    n = state.n_samples
    idx = list(range(0, n, stride))
    if idx[-1] != n - 1:
        idx.append(n - 1)
    for k in idx:
        writer.writerow([f"{float(s[k]):.9g}" for s in series])
    return len(idx)
