from __future__ import annotations

from typing import List, Optional

from telemetry.aggregator import SteadyStateMetrics

_RULE = "=" * 62


def _line(label: str, value: str) -> str:
    return f"{label:<28}: {value}"


def make_text_report(m: SteadyStateMetrics, title: str = "BUCK CONVERTER FULL ELECTRO-THERMAL REPORT") -> str:
    """Console summary of one run's steady-state window."""
    lines: List[str] = []
    lines.append("")
    lines.append(f"========== {title} ==========")
    lines.append(_line("Average Output Voltage", f"{m.v_out_avg:.4f} V"))
    lines.append(_line("Output Voltage Ripple", f"{m.v_out_ripple:.4f} V"))
    lines.append(_line("Inductor RMS Current", f"{m.i_l_rms:.4f} A"))
    lines.append(_line("Average Duty", f"{m.duty_avg:.4f}"))
    lines.append(_line("Output Power", f"{m.p_out:.4f} W"))
    lines.append(_line("Inductor Loss", f"{m.p_inductor:.4f} W"))
    lines.append(_line("MOSFET + Switching Loss", f"{m.p_mosfet:.4f} W"))
    lines.append(_line("Diode Loss", f"{m.p_diode:.4f} W"))
    lines.append(_line("Total Power Loss", f"{m.p_loss_total:.4f} W"))
    lines.append(_line("Overall Efficiency", f"{m.efficiency * 100.0:.2f} %"))
    lines.append(_line("Max MOSFET Junction Temp", f"{m.tj_mos_max:.2f} °C"))
    lines.append(_line("Max Diode Junction Temp", f"{m.tj_diode_max:.2f} °C"))
    lines.append(_line("Ambient Temperature", f"{m.t_amb:.2f} °C"))
    lines.append(_RULE)
    return "\n".join(lines)


def make_summary_line(m: SteadyStateMetrics, n_samples: int, ok: bool, reason: Optional[str] = None) -> str:
    """Single machine-greppable line, printed last by the runner."""
    s = (
        f"SUMMARY: n_samples={n_samples} window_start={m.start_index} "
        f"v_out_avg={m.v_out_avg:.4f} ripple={m.v_out_ripple:.4f} efficiency={m.efficiency:.4f} "
        f"tj_mos_max={m.tj_mos_max:.2f} tj_diode_max={m.tj_diode_max:.2f} finite={ok}"
    )
    if reason:
        s += f" reason={reason}"
    return s


def md_table(headers: List[str], rows: List[List[str]]) -> str:
    line1 = "| " + " | ".join(headers) + " |\n"
    line2 = "| " + " | ".join("---" for _ in headers) + " |\n"
    body = ""
    for r in rows:
        body += "| " + " | ".join(str(x) for x in r) + " |\n"
    return line1 + line2 + body
