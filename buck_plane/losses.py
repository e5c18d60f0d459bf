from __future__ import annotations

"""
Instantaneous loss model for the buck stage.

Per sample, with u the continuous switch command:
  inductor  = |iL|^2 * r_esr
  mosfet    = u * |iL|^2 * r_ds_on
  diode     = |(1 - u) * v_o / r_load| * v_diode
  switching = 0.5 * v_in * |iL| * (t_rise + t_fall) * f_sw

Switching loss is the period-averaged analytic term applied pointwise; no
edge detection happens. Inside the boundary layer the conduction terms are
interpolated through u like the command itself.

LossModel keeps the last breakdown and the integrated energy per component
(J) over the run.
"""

from typing import Dict

from .types import BuckParams, LossBreakdown


def compute_losses(command: float, i_l: float, v_o: float, params: BuckParams) -> LossBreakdown:
    u = float(command)
    il_abs = abs(float(i_l))
    i_diode = (1.0 - u) * float(v_o) / params.r_load
    return LossBreakdown(
        inductor=il_abs * il_abs * params.r_esr,
        mosfet=u * il_abs * il_abs * params.r_ds_on,
        diode=abs(i_diode) * params.v_diode,
        switching=0.5 * params.v_in * il_abs * (params.t_rise + params.t_fall) * params.f_sw,
    )


class LossModel:
    """
    Per-run loss tracker.

    step() computes the instantaneous breakdown and accumulates energy with
    the caller's dt.
    """

    def __init__(self, params: BuckParams) -> None:
        self.params = params
        self.last: LossBreakdown = LossBreakdown(0.0, 0.0, 0.0, 0.0)
        self.energy_accum: Dict[str, float] = {
            "inductor": 0.0,
            "mosfet": 0.0,
            "diode": 0.0,
            "switching": 0.0,
        }

    def step(self, command: float, i_l: float, v_o: float, dt: float) -> LossBreakdown:
        lb = compute_losses(command, i_l, v_o, self.params)
        self.energy_accum["inductor"] += lb.inductor * dt
        self.energy_accum["mosfet"] += lb.mosfet * dt
        self.energy_accum["diode"] += lb.diode * dt
        self.energy_accum["switching"] += lb.switching * dt
        self.last = lb
        return lb

    @property
    def total_energy(self) -> float:
        return float(sum(self.energy_accum.values()))

    def reset_energy(self) -> None:
        for k in self.energy_accum:
            self.energy_accum[k] = 0.0
