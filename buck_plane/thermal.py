from __future__ import annotations

"""
Junction temperature of one power device, lumped as a single thermal node.

The device dissipates P watts into a node of heat capacity c_th that leaks to
ambient through r_th:

  c_th * dTj/dt = P - (Tj - t_amb) / r_th

Integrated with forward Euler at the converter timestep, using the loss of the
same sample. The node has no upper clamp; a runaway loss shows up as a
runaway temperature.

Units: r_th in °C/W, c_th in J/°C, temperatures in °C, dt in seconds.
"""

from dataclasses import dataclass


@dataclass
class ThermalConfig:
    r_th: float
    c_th: float
    t_amb: float
    t_init: float | None = None

    def __post_init__(self) -> None:
        if self.r_th <= 0.0:
            raise ValueError("r_th must be > 0")
        if self.c_th <= 0.0:
            raise ValueError("c_th must be > 0")
        if self.t_init is None:
            self.t_init = float(self.t_amb)

    @property
    def time_constant(self) -> float:
        return self.r_th * self.c_th

    def steady_state_temp(self, power: float) -> float:
        return self.t_amb + float(power) * self.r_th

    def heating_rate(self, temp: float, power: float) -> float:
        """dTj/dt in °C/s at junction temperature `temp` under `power` watts."""
        return (float(power) - (temp - self.t_amb) / self.r_th) / self.c_th


class ThermalRC:
    """Stateful junction node; `step` advances it by one timestep."""

    def __init__(self, config: ThermalConfig) -> None:
        self.cfg = config
        self.reset()

    def reset(self) -> None:
        start = self.cfg.t_amb if self.cfg.t_init is None else self.cfg.t_init
        self._t = float(start)
        self.max_temp_seen = self._t

    @property
    def temp(self) -> float:
        return self._t

    def step(self, power: float, dt: float) -> float:
        self._t = float(self._t + dt * self.cfg.heating_rate(self._t, power))
        self.max_temp_seen = max(self.max_temp_seen, self._t)
        return self._t
