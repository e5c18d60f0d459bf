import logging
import os

import pytest

from buck_plane.types import BuckParams
from harness.sweep import make_sweep_report, run_sweep, write_sweep_report
from utils.logging import get_logger


BASE = BuckParams(t_sim=0.003)


def test_serial_sweep_keeps_input_order_and_records_invalid_points():
    sweep = run_sweep(BASE, "r_load", [20.0, 0.0, 5.0])
    res = sweep["results"]
    assert [r["value"] for r in res] == [20.0, 0.0, 5.0]
    assert "error" in res[1]
    assert res[0]["finite"] and res[2]["finite"]
    # Heavier load draws more current
    assert res[2]["metrics"]["i_out_avg"] > res[0]["metrics"]["i_out_avg"]


def test_process_pool_matches_serial():
    serial = run_sweep(BASE, "lam", [400.0, 800.0])
    pooled = run_sweep(BASE, "lam", [400.0, 800.0], max_workers=2)
    assert serial["results"] == pooled["results"]


def test_report_written(tmp_path):
    sweep = run_sweep(BASE, "r_load", [10.0, -1.0])
    md = make_sweep_report(sweep)
    assert md.startswith("# Sweep over `r_load`")
    assert "invalid" in md
    path = write_sweep_report(sweep, os.path.join(str(tmp_path), "rep", "sweep.md"))
    assert os.path.exists(path)


def test_non_integer_point_is_recorded_not_raised():
    sweep = run_sweep(BuckParams(t_sim=0.001), "steps_per_period", [40, 2.5])
    res = sweep["results"]
    assert res[0]["finite"]
    assert res[0]["n_samples"] == BuckParams(t_sim=0.001).n_samples
    assert "integer" in res[1]["error"]


def test_unknown_field_rejected_before_running():
    with pytest.raises(ValueError, match="unknown sweep field"):
        run_sweep(BASE, "not_a_field", [1.0, 2.0])


def test_finite_points_logged_as_metric_lines(caplog):
    lg = get_logger("harness")
    lg.propagate = True
    try:
        with caplog.at_level(logging.INFO, logger="harness"):
            run_sweep(BASE, "r_load", [10.0, 0.0])
    finally:
        lg.propagate = False
    lines = [r.getMessage() for r in caplog.records if r.getMessage().startswith("metrics ")]
    assert len(lines) == 1
    assert "r_load=10 " in lines[0]
    assert lines[0].endswith(" step=0")
