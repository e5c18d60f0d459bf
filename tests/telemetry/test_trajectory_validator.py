import numpy as np

from buck_plane.types import BuckParams, SimulationState
from buck_plane.simulator import simulate
from telemetry.aggregator import analyze_steady_state
from telemetry.validator import trajectory_stats, validate_metrics, validate_trajectory


def test_finite_state_passes():
    st = SimulationState.allocate(50, 1e-6)
    ok, reason = validate_trajectory(st)
    assert ok is True and reason is None
    stats = trajectory_stats(st)
    assert stats == {
        "total": 50,
        "non_finite": 0,
        "by_signal": {k: 0 for k in stats["by_signal"]},
        "first_bad_index": -1,
    }


def test_first_offending_signal_and_index_reported():
    st = SimulationState.allocate(50, 1e-6)
    st.output_voltage[30] = np.inf
    st.tj_mos[12] = np.nan
    st.tj_mos[13] = np.nan
    ok, reason = validate_trajectory(st)
    assert ok is False
    # output_voltage precedes tj_mos in trajectory order
    assert reason == "non_finite: output_voltage[30]"
    stats = trajectory_stats(st)
    assert stats["non_finite"] == 3
    assert stats["by_signal"]["tj_mos"] == 2
    assert stats["first_bad_index"] == 12


def test_unstable_timestep_diverges_silently_and_is_reported():
    # Euler on the LC tank at dt = 1e-4 grows every step until overflow
    p = BuckParams(dt=1e-4, t_sim=1.0)
    st = simulate(p)
    assert st.n_samples == p.n_samples
    ok, reason = validate_trajectory(st)
    assert ok is False
    assert reason.startswith("non_finite")


def test_metrics_validation(default_run, default_params):
    m = analyze_steady_state(default_run, default_params)
    assert validate_metrics(m) == (True, None)
    bad = analyze_steady_state(SimulationState.allocate(20, 1e-3), default_params)
    ok, reason = validate_metrics(bad)
    assert ok is False
    assert reason == "non_finite_metric:efficiency"
