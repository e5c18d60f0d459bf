from __future__ import annotations

# Buck-plane public API surface: parameters, components and the run driver

from .types import (
    BuckParams,
    InvalidParameterError,
    PlantState,
    LossBreakdown,
    SimulationState,
    TRAJECTORY_FIELDS,
)
from .controller import SMCConfig, SlidingModeController, boundary_layer_command, smc_step
from .plant import plant_derivatives, plant_step
from .losses import LossModel, compute_losses
from .thermal import ThermalConfig, ThermalRC
from .simulator import BuckSimulator, simulate
from .config import load_params_from_json, params_from_dict, parse_overrides

__all__ = [
    "BuckParams",
    "InvalidParameterError",
    "PlantState",
    "LossBreakdown",
    "SimulationState",
    "TRAJECTORY_FIELDS",
    "SMCConfig",
    "SlidingModeController",
    "boundary_layer_command",
    "smc_step",
    "plant_derivatives",
    "plant_step",
    "LossModel",
    "compute_losses",
    "ThermalConfig",
    "ThermalRC",
    "BuckSimulator",
    "simulate",
    "load_params_from_json",
    "params_from_dict",
    "parse_overrides",
]
