from __future__ import annotations

"""
Digital sliding-mode voltage controller with a boundary layer.

Per call (dt = integration step):
  e     = v_ref - v_o[k-1]
  I_e  += e * dt
  s     = e + lam * I_e
  u     = 1                    if s >  eta
          0                    if s < -eta
          0.5 + s / (2 * eta)  otherwise

Inside |s| <= eta the command is a linear pseudo-duty instead of a hard
switch, which suppresses chattering around the sliding surface. The command
is continuous in s and always lies in [0, 1].

The integral of the error is the only controller memory. It is threaded
explicitly through smc_step(); SlidingModeController owns it for the driver.
"""

from dataclasses import dataclass
from typing import Tuple


def boundary_layer_command(s: float, eta: float) -> float:
    """Map the sliding variable to a switch command in [0, 1]."""
    if s > eta:
        return 1.0
    if s < -eta:
        return 0.0
    return 0.5 + s / (2.0 * eta)


def smc_step(
    reference: float,
    measured: float,
    dt: float,
    integral_error: float,
    lam: float,
    eta: float,
) -> Tuple[float, float]:
    """
    One controller update.

    Returns:
        (switch_command, updated_integral_error)
    """
    err = float(reference) - float(measured)
    integral_error = float(integral_error) + err * float(dt)
    s = err + float(lam) * integral_error
    return boundary_layer_command(s, float(eta)), integral_error


@dataclass
class SMCConfig:
    lam: float
    eta: float

    def __post_init__(self) -> None:
        if self.eta <= 0.0:
            raise ValueError("eta must be > 0")


class SlidingModeController:
    """
    Stateful wrapper used by the simulation driver.

    Calls must be made in time order: each step() consumes the integral
    left by the previous one.
    """

    def __init__(self, config: SMCConfig, integral_error: float = 0.0) -> None:
        self.cfg = config
        self._integral_error: float = float(integral_error)
        self.last_surface: float = 0.0
        self.last_command: float = 0.0

    @property
    def integral_error(self) -> float:
        return self._integral_error

    def step(self, reference: float, measured: float, dt: float) -> float:
        cmd, ie = smc_step(reference, measured, dt, self._integral_error, self.cfg.lam, self.cfg.eta)
        self.last_surface = (float(reference) - float(measured)) + self.cfg.lam * ie
        self._integral_error = ie
        self.last_command = cmd
        return cmd

    def reset(self, integral_error: float = 0.0) -> None:
        self._integral_error = float(integral_error)
        self.last_surface = 0.0
        self.last_command = 0.0
