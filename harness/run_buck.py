#!/usr/bin/env python3
"""
Single-run CLI for the buck SMC electro-thermal simulator.

Features:
- Parameter set from defaults, a scenario JSON (--config) and key=value overrides (--set)
- Runs the fixed-step loop, validates the trajectory for divergence
- Prints the text report and a final SUMMARY line
- Optional metrics CSV, decimated trajectory CSV and PNG figure

Exit status: 0 finite run, 1 invalid configuration, 2 diverged (non-finite) run.

Example:
  python -m harness.run_buck --set r_load=5 --plot reports/run.png
"""

from __future__ import annotations
import argparse
import os
import sys
import time
from typing import List, Optional

from buck_plane.types import BuckParams
from buck_plane.config import load_params_from_json, params_from_dict, parse_overrides
from buck_plane.simulator import simulate
from telemetry.aggregator import WindowSpec, analyze_steady_state
from telemetry.validator import trajectory_stats, validate_trajectory
from telemetry.csv import write_metrics_csv, write_trajectory_csv
from harness.report import make_summary_line, make_text_report
from utils.logging import get_logger, log_metrics, set_level

log = get_logger("harness")


def _open_out(path: str):
    d = os.path.dirname(path)
    if d:
        os.makedirs(d, exist_ok=True)
    return open(path, "w", encoding="utf-8", newline="")


def build_params(config: Optional[str], overrides: List[str]) -> tuple[BuckParams, Optional[str]]:
    scenario_id = None
    base = BuckParams()
    if config:
        base, scenario_id = load_params_from_json(config)
    if overrides:
        base = params_from_dict(parse_overrides(overrides), base=base)
    base.validate()
    return base, scenario_id


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Buck converter SMC electro-thermal run")
    ap.add_argument("--config", default=None, help="Path to scenario JSON (flat BuckParams fields)")
    ap.add_argument("--set", dest="overrides", action="append", default=[], metavar="KEY=VALUE",
                    help="Override one parameter; repeatable")
    ap.add_argument("--window-fraction", type=float, default=0.2, help="Trailing steady-state window fraction")
    ap.add_argument("--csv", default=None, help="Write steady-state metrics CSV here")
    ap.add_argument("--trajectory-csv", default=None, help="Write trajectory CSV here")
    ap.add_argument("--stride", type=int, default=1, help="Decimation stride for --trajectory-csv")
    ap.add_argument("--plot", default=None, help="Write a PNG figure here")
    ap.add_argument("--log-level", default="INFO", help="Logging level for project loggers")
    args = ap.parse_args(argv)

    try:
        set_level(args.log_level)
        params, scenario_id = build_params(args.config, args.overrides)
        spec = WindowSpec(args.window_fraction)
    except ValueError as e:
        log.error(f"invalid configuration: {e}")
        return 1

    run_id = scenario_id or "default"
    log.info(f"scenario={run_id} n_samples={params.n_samples} dt={params.timestep:.6g}")

    start = time.perf_counter()
    state = simulate(params)
    elapsed = max(1e-9, time.perf_counter() - start)

    ok, reason = validate_trajectory(state)
    metrics = analyze_steady_state(state, params, spec)
    if ok:
        log_metrics(
            {
                "v_out_avg": metrics.v_out_avg,
                "v_out_ripple": metrics.v_out_ripple,
                "efficiency": metrics.efficiency,
                "tj_mos_max": metrics.tj_mos_max,
                "tj_diode_max": metrics.tj_diode_max,
                "samples_per_sec": state.n_samples / elapsed,
            },
            logger=log,
        )
    else:
        stats = trajectory_stats(state)
        log.warning(
            f"trajectory diverged: {reason} non_finite={stats['non_finite']} "
            f"first_bad_index={stats['first_bad_index']}; metrics are unreliable"
        )

    if args.csv:
        with _open_out(args.csv) as f:
            write_metrics_csv([metrics], f, run_ids=[run_id])
        log.info(f"wrote metrics csv: {args.csv}")
    if args.trajectory_csv:
        with _open_out(args.trajectory_csv) as f:
            rows = write_trajectory_csv(state, f, stride=args.stride)
        log.info(f"wrote trajectory csv: {args.trajectory_csv} rows={rows}")
    if args.plot:
        # Deferred: matplotlib is only needed when a figure is requested
        from harness.plots import plot_run
        plot_run(state, metrics, params, path=args.plot)
        log.info(f"wrote figure: {args.plot}")

    print(make_text_report(metrics))
    print(make_summary_line(metrics, state.n_samples, ok, reason))
    return 0 if ok else 2


if __name__ == "__main__":
    sys.exit(main())
