#!/usr/bin/env python3
"""
Parameter sweep over one BuckParams field.

Each value yields an independent run (no shared state), so runs may be fanned
out over a process pool; each run's own loop stays serial. Results come back
in input order regardless of completion order.

Example:
  python -m harness.sweep --field r_load --values 5,10,20 --t-sim 0.01 --out reports/sweep_r_load.md
"""

from __future__ import annotations

import argparse
import json
import math
import os
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import fields, replace
from typing import Any, Dict, Iterable, List, Optional

from buck_plane.types import BuckParams
from buck_plane.config import params_from_dict
from buck_plane.simulator import simulate
from telemetry.aggregator import WindowSpec, analyze_steady_state
from telemetry.validator import validate_trajectory
from harness.report import md_table
from utils.logging import get_logger, log_metrics

log = get_logger("harness")


def _run_point(params: BuckParams, window_fraction: float) -> Dict[str, Any]:
    state = simulate(params)
    ok, reason = validate_trajectory(state)
    metrics = analyze_steady_state(state, params, WindowSpec(window_fraction))
    return {"finite": ok, "reason": reason, "n_samples": state.n_samples, "metrics": metrics.as_dict()}


def run_sweep(
    base: BuckParams,
    field: str,
    values: Iterable[float],
    window_fraction: float = 0.2,
    max_workers: int = 1,
) -> Dict[str, Any]:
    """
    Run one simulation per value of `field` and collect steady-state metrics.

    Points whose value is rejected (non-physical, or not an integer for an
    integer field) are recorded with their error rather than aborting the
    sweep. An unknown `field` raises ValueError before anything runs.
    """
    if field not in {f.name for f in fields(BuckParams)}:
        raise ValueError(f"unknown sweep field: {field}")
    vals = [float(v) for v in values]
    if not vals:
        raise ValueError("values must not be empty")
    out: Dict[str, Any] = {"field": field, "values": vals, "results": [None] * len(vals)}

    points: Dict[int, BuckParams] = {}
    for i, v in enumerate(vals):
        try:
            points[i] = params_from_dict({field: v}, base=base)
        except ValueError as e:
            log.warning(f"sweep {field}={v:.6g} rejected: {e}")
            out["results"][i] = {"value": v, "error": str(e)}

    if int(max_workers) <= 1:
        for i, p in points.items():
            out["results"][i] = {"value": vals[i], **_run_point(p, window_fraction)}
    else:
        with ProcessPoolExecutor(max_workers=int(max_workers)) as executor:
            futures = {executor.submit(_run_point, p, window_fraction): i for i, p in points.items()}
            for future in as_completed(futures):
                i = futures[future]
                out["results"][i] = {"value": vals[i], **future.result()}
    _log_points(field, out["results"])
    return out


def _log_points(field: str, results: List[Optional[Dict[str, Any]]]) -> None:
    keys = ("v_out_avg", "v_out_ripple", "efficiency", "p_loss_total", "tj_mos_max")
    for i, rec in enumerate(results):
        if not rec or "error" in rec or not rec["finite"]:
            continue
        row = {field: rec["value"], **{k: rec["metrics"][k] for k in keys}}
        if all(math.isfinite(v) for v in row.values()):
            log_metrics(row, step=i, logger=log)


def make_sweep_report(sweep: Dict[str, Any]) -> str:
    field = sweep.get("field", "?")
    lines: List[str] = []
    lines.append(f"# Sweep over `{field}`")
    lines.append("")
    headers = [field, "v_out_avg [V]", "ripple [V]", "efficiency [%]", "p_loss [W]", "tj_mos_max [°C]", "tj_diode_max [°C]", "status"]
    rows: List[List[str]] = []
    for rec in sweep.get("results", []):
        if rec is None:
            continue
        v = f"{float(rec['value']):.6g}"
        if "error" in rec:
            rows.append([v, "", "", "", "", "", "", "invalid"])
            continue
        m = rec["metrics"]
        rows.append([
            v,
            f"{m['v_out_avg']:.4f}",
            f"{m['v_out_ripple']:.4f}",
            f"{m['efficiency'] * 100.0:.2f}",
            f"{m['p_loss_total']:.4f}",
            f"{m['tj_mos_max']:.2f}",
            f"{m['tj_diode_max']:.2f}",
            "ok" if rec["finite"] else f"diverged ({rec['reason']})",
        ])
    lines.append(md_table(headers, rows))
    return "\n".join(lines)


def write_sweep_report(sweep: Dict[str, Any], path: str) -> str:
    if os.path.dirname(path):
        os.makedirs(os.path.dirname(path), exist_ok=True)
    md = make_sweep_report(sweep)
    with open(path, "w", encoding="utf-8") as f:
        f.write(md)
    return os.path.abspath(path)


def main(argv: Optional[List[str]] = None) -> None:
    ap = argparse.ArgumentParser(description="Buck SMC parameter sweep")
    ap.add_argument("--field", required=True, help="BuckParams field to sweep")
    ap.add_argument("--values", required=True, help="Comma-separated list of values")
    ap.add_argument("--t-sim", type=float, default=None, help="Override simulation duration [s]")
    ap.add_argument("--window-fraction", type=float, default=0.2, help="Trailing steady-state window fraction")
    ap.add_argument("--workers", type=int, default=1, help="Process pool size (1 = serial)")
    ap.add_argument("--out", default="reports/sweep.md", help="Output Markdown report path")
    args = ap.parse_args(argv)

    base = BuckParams()
    if args.t_sim is not None:
        base = replace(base, t_sim=float(args.t_sim))
    vals = [float(x.strip()) for x in str(args.values).split(",") if x.strip()]
    sweep = run_sweep(base, args.field, vals, window_fraction=args.window_fraction, max_workers=args.workers)
    path = write_sweep_report(sweep, args.out)
    print(json.dumps({"report_path": path, "field": args.field, "values": vals}, sort_keys=True, separators=(",", ":")))
    print(f"Wrote sweep report: {path}")


if __name__ == "__main__":
    main()
