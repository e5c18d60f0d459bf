"""Runners, reports, plots and sweeps built on buck_plane and telemetry."""
