# Telemetry package: steady-state reduction, trajectory validation and CSV export
from __future__ import annotations

from .aggregator import WindowSpec, SteadyStateMetrics, analyze_steady_state
from .validator import trajectory_stats, validate_trajectory, validate_metrics
from .csv import write_metrics_csv, write_trajectory_csv

__all__ = [
    # Steady-state analysis
    "WindowSpec",
    "SteadyStateMetrics",
    "analyze_steady_state",
    # Divergence reporting
    "trajectory_stats",
    "validate_trajectory",
    "validate_metrics",
    # CSV
    "write_metrics_csv",
    "write_trajectory_csv",
]
