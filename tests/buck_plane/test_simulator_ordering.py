import numpy as np
import pytest

from buck_plane.types import BuckParams, TRAJECTORY_FIELDS
from buck_plane.simulator import BuckSimulator, simulate
from buck_plane.controller import smc_step
from buck_plane.plant import plant_step
from buck_plane.losses import compute_losses
from buck_plane.thermal import ThermalConfig, ThermalRC
from buck_plane.types import PlantState


def _short(**kw):
    base = dict(t_sim=200 * 5e-7)
    base.update(kw)
    return BuckParams(**base)


def test_index_zero_holds_zero_initial_conditions():
    st = simulate(_short())
    assert st.n_samples == 201
    for name in TRAJECTORY_FIELDS:
        assert getattr(st, name)[0] == 0.0, name


def test_time_grid_is_uniform():
    p = _short()
    st = simulate(p)
    assert np.allclose(np.diff(st.time), p.timestep, rtol=1e-9, atol=0.0)
    assert st.time[-1] == pytest.approx(p.t_sim, rel=1e-9)


def test_first_step_values():
    p = _short()
    st = simulate(p)
    # Large positive error: switch fully on
    assert st.switch_command[1] == 1.0
    assert st.inductor_current[1] == pytest.approx(p.v_in / p.inductance * p.timestep, rel=1e-12)
    assert st.output_voltage[1] == 0.0
    il = st.inductor_current[1]
    assert st.loss_inductor[1] == pytest.approx(il * il * p.r_esr, rel=1e-12)
    assert st.loss_diode[1] == 0.0
    assert st.tj_mos[1] > 0.0 and st.tj_diode[1] > 0.0


def test_matches_step_by_step_composition_reading_only_previous_sample():
    p = _short()
    st = simulate(p)
    n = p.n_samples
    dt = p.timestep

    ie = 0.0
    plant = PlantState(0.0, 0.0)
    th_m = ThermalRC(ThermalConfig(p.r_th_mos, p.c_th_mos, p.t_amb, t_init=0.0))
    th_d = ThermalRC(ThermalConfig(p.r_th_diode, p.c_th_diode, p.t_amb, t_init=0.0))
    for k in range(1, n):
        assert plant.v_o == st.output_voltage[k - 1]
        u, ie = smc_step(p.v_ref, plant.v_o, dt, ie, p.lam, p.eta)
        plant = plant_step(u, plant, p, dt)
        lb = compute_losses(u, plant.i_l, plant.v_o, p)
        assert st.switch_command[k] == u
        assert st.inductor_current[k] == plant.i_l
        assert st.output_voltage[k] == plant.v_o
        assert st.loss_mosfet[k] == lb.mosfet
        assert st.loss_switching[k] == lb.switching
        assert st.tj_mos[k] == th_m.step(lb.mosfet + lb.switching, dt)
        assert st.tj_diode[k] == th_d.step(lb.diode, dt)
    assert st.integral_error == ie


def test_state_is_frozen_after_run():
    st = simulate(_short())
    assert st.frozen
    with pytest.raises(ValueError):
        st.output_voltage[3] = 1.0


def test_simulator_runs_once():
    sim = BuckSimulator(_short())
    sim.run()
    with pytest.raises(RuntimeError):
        sim.run()


def test_ambient_start_when_tj_init_is_none():
    p = _short(tj_init=None)
    st = simulate(p)
    assert st.tj_mos[0] == p.t_amb
    assert st.tj_diode[0] == p.t_amb
    assert np.all(st.tj_mos >= p.t_amb)


def test_energy_loss_reported_per_component():
    p = _short()
    st = simulate(p)
    assert set(st.energy_loss) == {"inductor", "mosfet", "diode", "switching"}
    total = (st.loss_inductor + st.loss_mosfet + st.loss_diode + st.loss_switching).sum() * p.timestep
    assert sum(st.energy_loss.values()) == pytest.approx(total, rel=1e-9)
