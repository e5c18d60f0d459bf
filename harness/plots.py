"""
Headless figures for a completed run.

Panels (3x2 grid, bottom row spans both columns):
  output voltage vs reference | inductor current
  switch command (steps)      | junction temperatures vs ambient
  steady-state loss breakdown bar chart

Figures are built on matplotlib.figure.Figure directly, so no GUI backend or
pyplot global state is involved.
"""

from __future__ import annotations

import os
from typing import Optional

import matplotlib

matplotlib.use("Agg")

from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

from buck_plane.types import BuckParams, SimulationState
from telemetry.aggregator import SteadyStateMetrics


def make_run_figure(
    state: SimulationState,
    metrics: SteadyStateMetrics,
    params: BuckParams,
    figsize: tuple[float, float] = (15.0, 9.0),
) -> Figure:
    t = state.time
    fig = Figure(figsize=figsize, dpi=100)
    FigureCanvasAgg(fig)
    gs = fig.add_gridspec(3, 2)

    ax_vo = fig.add_subplot(gs[0, 0])
    ax_vo.plot(t, state.output_voltage, linewidth=2)
    ax_vo.axhline(params.v_ref, linestyle="--", color="r", linewidth=1.5)
    ax_vo.set_xlabel("Time [s]")
    ax_vo.set_ylabel("V_o [V]")
    ax_vo.set_title("Output Voltage Regulation")
    ax_vo.grid(True)

    ax_il = fig.add_subplot(gs[0, 1])
    ax_il.plot(t, state.inductor_current, linewidth=2)
    ax_il.set_xlabel("Time [s]")
    ax_il.set_ylabel("i_L [A]")
    ax_il.set_title("Inductor Current")
    ax_il.grid(True)

    ax_u = fig.add_subplot(gs[1, 0])
    ax_u.step(t, state.switch_command, where="post", linewidth=1.2)
    ax_u.set_xlabel("Time [s]")
    ax_u.set_ylabel("Switch Duty")
    ax_u.set_title("Switching Signal (SMC)")
    ax_u.grid(True)

    ax_tj = fig.add_subplot(gs[1, 1])
    ax_tj.plot(t, state.tj_mos, linewidth=2, label="MOSFET Junction")
    ax_tj.plot(t, state.tj_diode, linewidth=2, label="Diode Junction")
    ax_tj.axhline(params.t_amb, linestyle="--", color="k", linewidth=1, label="Ambient")
    ax_tj.set_xlabel("Time [s]")
    ax_tj.set_ylabel("Temperature [°C]")
    ax_tj.set_title("Electro-Thermal Response")
    ax_tj.legend()
    ax_tj.grid(True)

    ax_loss = fig.add_subplot(gs[2, :])
    labels = ["Inductor", "MOSFET+Switch", "Diode"]
    ax_loss.bar(labels, [metrics.p_inductor, metrics.p_mosfet, metrics.p_diode])
    ax_loss.set_ylabel("Power Loss [W]")
    ax_loss.set_title("Average Loss Breakdown (Steady-State)")
    ax_loss.grid(True)

    fig.tight_layout()
    return fig


def save_figure(fig: Figure, path: str, dpi: int = 150) -> str:
    d = os.path.dirname(path)
    if d:
        os.makedirs(d, exist_ok=True)
    fig.savefig(path, dpi=dpi)
    return os.path.abspath(path)


def plot_run(
    state: SimulationState,
    metrics: SteadyStateMetrics,
    params: BuckParams,
    path: Optional[str] = None,
) -> Figure:
    fig = make_run_figure(state, metrics, params)
    if path:
        save_figure(fig, path)
    return fig
