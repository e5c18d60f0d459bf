import numpy as np

from buck_plane.types import BuckParams, TRAJECTORY_FIELDS
from buck_plane.simulator import simulate


def test_identical_params_give_bit_identical_trajectories():
    p = BuckParams(t_sim=0.005)
    a = simulate(p)
    b = simulate(BuckParams(t_sim=0.005))
    for name in TRAJECTORY_FIELDS:
        assert np.array_equal(getattr(a, name), getattr(b, name)), name
    assert a.integral_error == b.integral_error
    assert a.energy_loss == b.energy_loss


def test_different_load_changes_trajectory():
    a = simulate(BuckParams(t_sim=0.002))
    b = simulate(BuckParams(t_sim=0.002, r_load=5.0))
    assert not np.array_equal(a.inductor_current, b.inductor_current)
