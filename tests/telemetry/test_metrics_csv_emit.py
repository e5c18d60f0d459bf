import csv
import io

import pytest

from buck_plane.types import BuckParams
from buck_plane.simulator import simulate
from telemetry.aggregator import analyze_steady_state
from telemetry.csv import write_metrics_csv, write_trajectory_csv


@pytest.fixture(scope="module")
def short_run():
    p = BuckParams(t_sim=0.002)
    return p, simulate(p)


def test_metrics_csv_header_and_formatting(short_run):
    p, st = short_run
    m = analyze_steady_state(st, p)
    buf = io.StringIO()
    n = write_metrics_csv([m, m], buf, run_ids=["a", "b"])
    assert n == 2
    rows = list(csv.reader(io.StringIO(buf.getvalue())))
    header = rows[0]
    assert header[0] == "run_id"
    assert header[1:] == list(m.as_dict().keys())
    assert rows[1][0] == "a" and rows[2][0] == "b"
    col = header.index("v_out_avg")
    assert rows[1][col] == f"{m.v_out_avg:.6f}"
    assert rows[1][header.index("start_index")] == str(m.start_index)


def test_metrics_csv_default_run_ids(short_run):
    p, st = short_run
    m = analyze_steady_state(st, p)
    buf = io.StringIO()
    write_metrics_csv([m], buf)
    assert buf.getvalue().splitlines()[1].startswith("0,")


def test_trajectory_csv_decimates_and_keeps_last_sample(short_run):
    _, st = short_run
    buf = io.StringIO()
    rows = write_trajectory_csv(st, buf, stride=7)
    lines = buf.getvalue().splitlines()
    assert len(lines) == rows + 1
    expected = len(range(0, st.n_samples, 7)) + (0 if (st.n_samples - 1) % 7 == 0 else 1)
    assert rows == expected
    assert lines[0].split(",")[0] == "time"
    last = lines[-1].split(",")
    assert float(last[0]) == pytest.approx(st.time[-1], rel=1e-8)


def test_trajectory_csv_rejects_bad_stride(short_run):
    _, st = short_run
    with pytest.raises(ValueError):
        write_trajectory_csv(st, io.StringIO(), stride=0)
