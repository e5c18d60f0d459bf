"""
Steady-state aggregation over the trailing window of a run.

Design choices:
- The window is the last `fraction` of the samples (default 20%) and is
  assumed representative of converged behavior.
- Window start follows the 1-based convention start = round_half_up((1-fraction)*N),
  so for the default grid (N = 60001) the window spans 0-based 48000..60000.
- Trajectories are read only; nothing here mutates the SimulationState.

Deterministic computations over the window:
- v_out_avg      = mean(v_o)
- v_out_ripple   = max(v_o) - min(v_o)
- i_l_rms        = sqrt(mean(iL^2))
- i_out_avg      = v_out_avg / r_load
- duty_avg       = mean(u)
- p_out          = v_out_avg * i_out_avg
- p_inductor, p_mosfet_conduction, p_switching, p_diode = mean of each loss series
- p_mosfet       = p_mosfet_conduction + p_switching
- p_loss_total   = p_inductor + p_mosfet + p_diode
- efficiency     = p_out / (p_out + p_loss_total)   (NaN when the denominator is 0)
- tj_*_max       = max junction temperature over the window
"""

from __future__ import annotations
from dataclasses import dataclass, fields
from typing import Dict
import math

import numpy as np

from buck_plane.types import BuckParams, SimulationState


@dataclass(frozen=True)
class WindowSpec:
    fraction: float = 0.2

    def __post_init__(self) -> None:
        f = float(self.fraction)
        if not math.isfinite(f) or f <= 0.0 or f > 1.0:
            raise ValueError("fraction must be in (0, 1]")

    def start_index(self, n: int) -> int:
        if n < 1:
            raise ValueError("n must be >= 1")
        start_1based = int(math.floor((1.0 - float(self.fraction)) * n + 0.5))
        return min(max(start_1based - 1, 0), n - 1)


@dataclass(frozen=True)
class SteadyStateMetrics:
    # Window identity
    start_index: int
    n_window: int
    t_start: float
    # Regulation
    v_out_avg: float
    v_out_ripple: float
    regulation_error: float
    i_l_rms: float
    i_out_avg: float
    duty_avg: float
    # Power
    p_out: float
    p_inductor: float
    p_mosfet_conduction: float
    p_switching: float
    p_mosfet: float
    p_diode: float
    p_loss_total: float
    efficiency: float
    # Thermal
    tj_mos_max: float
    tj_diode_max: float
    t_amb: float

    def as_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def analyze_steady_state(
    state: SimulationState,
    params: BuckParams,
    spec: WindowSpec | None = None,
) -> SteadyStateMetrics:
    """Reduce the trailing window of `state` to scalar performance metrics."""
    ws = spec or WindowSpec()
    n = state.n_samples
    k0 = ws.start_index(n)
    sl = slice(k0, n)

    vo = state.output_voltage[sl]
    il = state.inductor_current[sl]

    v_avg = float(np.mean(vo))
    i_out = v_avg / params.r_load
    p_out = v_avg * i_out
    p_l = float(np.mean(state.loss_inductor[sl]))
    p_cond = float(np.mean(state.loss_mosfet[sl]))
    p_sw = float(np.mean(state.loss_switching[sl]))
    p_d = float(np.mean(state.loss_diode[sl]))
    p_mos = p_cond + p_sw
    p_loss = p_l + p_mos + p_d
    denom = p_out + p_loss
    eff = p_out / denom if denom != 0.0 else float("nan")

    return SteadyStateMetrics(
        start_index=int(k0),
        n_window=int(n - k0),
        t_start=float(state.time[k0]),
        v_out_avg=v_avg,
        v_out_ripple=float(np.max(vo) - np.min(vo)),
        regulation_error=(v_avg - params.v_ref) / params.v_ref if params.v_ref != 0.0 else float("nan"),
        i_l_rms=float(np.sqrt(np.mean(il * il))),
        i_out_avg=i_out,
        duty_avg=float(np.mean(state.switch_command[sl])),
        p_out=p_out,
        p_inductor=p_l,
        p_mosfet_conduction=p_cond,
        p_switching=p_sw,
        p_mosfet=p_mos,
        p_diode=p_d,
        p_loss_total=p_loss,
        efficiency=eff,
        tj_mos_max=float(np.max(state.tj_mos[sl])),
        tj_diode_max=float(np.max(state.tj_diode[sl])),
        t_amb=float(params.t_amb),
    )
