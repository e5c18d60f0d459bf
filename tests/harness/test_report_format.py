from buck_plane.types import BuckParams
from buck_plane.simulator import simulate
from telemetry.aggregator import analyze_steady_state
from harness.report import make_summary_line, make_text_report, md_table


def _metrics():
    p = BuckParams(t_sim=0.002)
    return analyze_steady_state(simulate(p), p)


def test_text_report_lists_every_quantity_in_order():
    m = _metrics()
    txt = make_text_report(m)
    labels = [
        "Average Output Voltage",
        "Output Voltage Ripple",
        "Inductor RMS Current",
        "Average Duty",
        "Output Power",
        "Inductor Loss",
        "MOSFET + Switching Loss",
        "Diode Loss",
        "Total Power Loss",
        "Overall Efficiency",
        "Max MOSFET Junction Temp",
        "Max Diode Junction Temp",
        "Ambient Temperature",
    ]
    pos = [txt.index(lb) for lb in labels]
    assert pos == sorted(pos)
    assert f"{m.v_out_avg:.4f} V" in txt
    assert f"{m.efficiency * 100.0:.2f} %" in txt
    assert "25.00 °C" in txt


def test_summary_line_carries_reason_only_when_given():
    m = _metrics()
    ok_line = make_summary_line(m, 4001, True)
    assert ok_line.startswith("SUMMARY: n_samples=4001")
    assert "reason=" not in ok_line
    bad_line = make_summary_line(m, 4001, False, "non_finite: output_voltage[5]")
    assert bad_line.endswith("reason=non_finite: output_voltage[5]")


def test_md_table_shape():
    t = md_table(["a", "b"], [["1", "2"], ["3", "4"]])
    lines = t.strip().splitlines()
    assert lines[0] == "| a | b |"
    assert lines[1] == "| --- | --- |"
    assert len(lines) == 4
