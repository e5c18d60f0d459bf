from __future__ import annotations

"""
Averaged buck power stage, explicit Euler.

  diL/dt = (u * v_in - v_o - iL * r_esr) / L
  dvo/dt = (iL - v_o / r_load) / C

u is the continuous switch command from the controller. Both derivatives are
taken at the previous state. Stability is a precondition on dt (the default
grid uses 40 steps per switching period); nothing here clamps or detects
divergence.
"""

from .types import BuckParams, PlantState


def plant_derivatives(command: float, state: PlantState, params: BuckParams) -> tuple[float, float]:
    di_l = (command * params.v_in - state.v_o - state.i_l * params.r_esr) / params.inductance
    dv_o = (state.i_l - state.v_o / params.r_load) / params.capacitance
    return di_l, dv_o


def plant_step(command: float, state: PlantState, params: BuckParams, dt: float) -> PlantState:
    di_l, dv_o = plant_derivatives(float(command), state, params)
    return PlantState(
        i_l=state.i_l + di_l * dt,
        v_o=state.v_o + dv_o * dt,
    )
