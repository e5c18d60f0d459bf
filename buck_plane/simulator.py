from __future__ import annotations

"""
Fixed-step closed-loop electro-thermal driver.

Per sample k = 1..N-1, strictly in order:
  1. controller:  u[k]          <- v_ref, v_o[k-1], integral memory
  2. plant:       iL[k], v_o[k] <- u[k], iL[k-1], v_o[k-1]
  3. losses:      P_*[k]        <- u[k], iL[k], v_o[k]
  4. thermal:     Tj_*[k]       <- P_*[k], Tj_*[k-1]

Each component receives scalars only; the history arrays are written here and
nowhere else. There is no early exit and no convergence check: the run always
fills all N samples. Non-finite values from an unstable dt propagate and are
reported afterwards by telemetry.validator.
"""

import logging
from typing import Optional

from .types import BuckParams, PlantState, SimulationState
from .controller import SMCConfig, SlidingModeController
from .plant import plant_step
from .losses import LossModel
from .thermal import ThermalConfig, ThermalRC
from utils.logging import get_logger


class BuckSimulator:
    """
    One simulation run over a validated parameter set.

    Components are built in __init__; run() may be called once and returns
    the frozen SimulationState.
    """

    def __init__(self, params: Optional[BuckParams] = None, logger: Optional[logging.Logger] = None) -> None:
        self.params = params if params is not None else BuckParams()
        self.params.validate()
        self.log = logger if logger is not None else get_logger("buck_plane")
        p = self.params
        self.controller = SlidingModeController(SMCConfig(lam=p.lam, eta=p.eta))
        self.losses = LossModel(p)
        self.thermal_mos = ThermalRC(ThermalConfig(r_th=p.r_th_mos, c_th=p.c_th_mos, t_amb=p.t_amb, t_init=p.tj_start))
        self.thermal_diode = ThermalRC(ThermalConfig(r_th=p.r_th_diode, c_th=p.c_th_diode, t_amb=p.t_amb, t_init=p.tj_start))
        self.state: Optional[SimulationState] = None

    def run(self) -> SimulationState:
        if self.state is not None:
            raise RuntimeError("BuckSimulator.run() already completed; build a new simulator")
        p = self.params
        dt = p.timestep
        n = p.n_samples
        self.log.info(f"run start n_samples={n} dt={dt:.6g} t_sim={p.t_sim:.6g}")

        st = SimulationState.allocate(n, dt, tj_start=p.tj_start)
        i_l = st.inductor_current
        v_o = st.output_voltage
        u = st.switch_command
        tj_m = st.tj_mos
        tj_d = st.tj_diode
        p_l = st.loss_inductor
        p_m = st.loss_mosfet
        p_d = st.loss_diode
        p_s = st.loss_switching

        plant = PlantState(i_l=float(i_l[0]), v_o=float(v_o[0]))
        for k in range(1, n):
            cmd = self.controller.step(p.v_ref, plant.v_o, dt)
            plant = plant_step(cmd, plant, p, dt)
            lb = self.losses.step(cmd, plant.i_l, plant.v_o, dt)
            t_mos = self.thermal_mos.step(lb.mosfet_total, dt)
            t_diode = self.thermal_diode.step(lb.diode, dt)

            u[k] = cmd
            i_l[k] = plant.i_l
            v_o[k] = plant.v_o
            p_l[k] = lb.inductor
            p_m[k] = lb.mosfet
            p_d[k] = lb.diode
            p_s[k] = lb.switching
            tj_m[k] = t_mos
            tj_d[k] = t_diode

        st.integral_error = self.controller.integral_error
        st.energy_loss = dict(self.losses.energy_accum)
        st.freeze()
        self.state = st
        self.log.info(
            f"run done v_o_final={plant.v_o:.6g} i_l_final={plant.i_l:.6g} "
            f"tj_mos_final={self.thermal_mos.temp:.6g} tj_diode_final={self.thermal_diode.temp:.6g} "
            f"energy_loss_j={self.losses.total_energy:.6g}"
        )
        return st


def simulate(params: Optional[BuckParams] = None, logger: Optional[logging.Logger] = None) -> SimulationState:
    """Validate params, run the full fixed-step loop and return the frozen trajectories."""
    return BuckSimulator(params, logger=logger).run()
