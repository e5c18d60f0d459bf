# Buck-plane core types: parameter set, per-step records and the run state
from __future__ import annotations
from dataclasses import dataclass, field, fields
from typing import Dict, Optional
import math

import numpy as np


class InvalidParameterError(ValueError):
    """Raised when a BuckParams instance violates a physical precondition."""
    pass


# Fields that divide somewhere in the loop or set its time base
_STRICTLY_POSITIVE = (
    "r_load",
    "inductance",
    "capacitance",
    "r_esr",
    "r_ds_on",
    "eta",
    "f_sw",
    "r_th_mos",
    "c_th_mos",
    "r_th_diode",
    "c_th_diode",
    "t_sim",
)

_NON_NEGATIVE = ("v_diode", "t_rise", "t_fall")


@dataclass(frozen=True)
class BuckParams:
    """Physical and control constants for one run. SI units, temperatures in °C."""
    # Electrical
    v_in: float = 24.0
    v_ref: float = 12.0
    r_load: float = 10.0
    inductance: float = 150e-6
    capacitance: float = 220e-6
    r_esr: float = 0.08  # inductor ESR
    r_ds_on: float = 0.04
    v_diode: float = 0.7
    t_rise: float = 40e-9
    t_fall: float = 40e-9
    # Sliding mode controller
    lam: float = 800.0  # sliding surface gain
    eta: float = 0.01  # boundary layer half-width
    f_sw: float = 50e3
    # Thermal
    t_amb: float = 25.0
    r_th_mos: float = 0.5  # °C/W
    c_th_mos: float = 5e-3  # J/°C
    r_th_diode: float = 2.0
    c_th_diode: float = 2e-3
    # Time grid
    t_sim: float = 0.03
    steps_per_period: int = 40
    dt: Optional[float] = None  # None -> switching_period / steps_per_period
    # Junction temperature at index 0; None starts the junctions at ambient
    tj_init: Optional[float] = 0.0

    @property
    def switching_period(self) -> float:
        return 1.0 / self.f_sw

    @property
    def timestep(self) -> float:
        if self.dt is not None:
            return float(self.dt)
        return self.switching_period / int(self.steps_per_period)

    @property
    def n_samples(self) -> int:
        # Same grid as 0:dt:t_sim, with slack for representation error in t_sim/dt
        return int(math.floor(self.t_sim / self.timestep + 1e-9)) + 1

    @property
    def tj_start(self) -> float:
        return float(self.t_amb if self.tj_init is None else self.tj_init)

    def validate(self) -> None:
        for f in fields(self):
            v = getattr(self, f.name)
            if v is None:
                continue
            if isinstance(v, bool) or not isinstance(v, (int, float)):
                raise InvalidParameterError(f"{f.name} must be a real number, got {v!r}")
            if not math.isfinite(float(v)):
                raise InvalidParameterError(f"{f.name} must be finite, got {v}")
        for name in _STRICTLY_POSITIVE:
            if getattr(self, name) <= 0.0:
                raise InvalidParameterError(f"{name} must be > 0, got {getattr(self, name)}")
        for name in _NON_NEGATIVE:
            if getattr(self, name) < 0.0:
                raise InvalidParameterError(f"{name} must be >= 0, got {getattr(self, name)}")
        if int(self.steps_per_period) != self.steps_per_period or self.steps_per_period < 1:
            raise InvalidParameterError("steps_per_period must be an integer >= 1")
        if self.dt is not None and self.dt <= 0.0:
            raise InvalidParameterError(f"dt must be > 0, got {self.dt}")
        if self.timestep > self.t_sim:
            raise InvalidParameterError("timestep must not exceed t_sim")

    def as_dict(self) -> Dict[str, object]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class PlantState:
    """Electrical state after one step: inductor current [A], output voltage [V]."""
    i_l: float = 0.0
    v_o: float = 0.0


@dataclass(frozen=True)
class LossBreakdown:
    """Instantaneous dissipation [W] at one sample."""
    inductor: float
    mosfet: float  # conduction only
    diode: float
    switching: float

    @property
    def mosfet_total(self) -> float:
        # Heat routed into the MOSFET junction
        return self.mosfet + self.switching

    @property
    def total(self) -> float:
        return self.inductor + self.mosfet + self.diode + self.switching


# Per-sample series held by SimulationState, in report order
TRAJECTORY_FIELDS = (
    "time",
    "inductor_current",
    "output_voltage",
    "switch_command",
    "tj_mos",
    "tj_diode",
    "loss_inductor",
    "loss_mosfet",
    "loss_diode",
    "loss_switching",
)


@dataclass
class SimulationState:
    """
    Pre-sized trajectories of one run.

    Index 0 holds the initial conditions; the driver writes 1..N-1 once each
    and freezes the arrays when the run completes.
    """
    time: np.ndarray
    inductor_current: np.ndarray
    output_voltage: np.ndarray
    switch_command: np.ndarray
    tj_mos: np.ndarray
    tj_diode: np.ndarray
    loss_inductor: np.ndarray
    loss_mosfet: np.ndarray
    loss_diode: np.ndarray
    loss_switching: np.ndarray
    integral_error: float = 0.0
    energy_loss: Dict[str, float] = field(default_factory=dict)

    @classmethod
    def allocate(cls, n: int, dt: float, tj_start: float = 0.0) -> "SimulationState":
        if n < 1:
            raise ValueError("n must be >= 1")
        arrays = {name: np.zeros(n, dtype=float) for name in TRAJECTORY_FIELDS}
        arrays["time"] = np.arange(n, dtype=float) * float(dt)
        arrays["tj_mos"][0] = tj_start
        arrays["tj_diode"][0] = tj_start
        return cls(**arrays)

    @property
    def n_samples(self) -> int:
        return int(self.time.shape[0])

    @property
    def frozen(self) -> bool:
        return not self.time.flags.writeable

    def freeze(self) -> None:
        for name in TRAJECTORY_FIELDS:
            getattr(self, name).flags.writeable = False

    def series(self) -> Dict[str, np.ndarray]:
        return {name: getattr(self, name) for name in TRAJECTORY_FIELDS}
