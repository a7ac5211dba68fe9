from __future__ import annotations

import argparse
import sys
from pathlib import Path

from termbrot.computation import SCHEDULES
from termbrot.config import default_viewer_config, load_named_sweep_configs, load_viewer_config
from termbrot.palette import NORMALIZATIONS, RAMPS


def parse_args():
    parser = argparse.ArgumentParser(description="Explore the Mandelbrot set in the terminal.")
    parser.add_argument("--config", type=str, help="Path to viewer YAML file")
    parser.add_argument("--max-iterations", type=int, help="Initial iteration budget")
    parser.add_argument("--ramp", choices=sorted(RAMPS), help="Color/character ramp")
    parser.add_argument("--normalization", choices=NORMALIZATIONS, help="Ramp intensity normalization")
    parser.add_argument("--schedule", choices=SCHEDULES, help="How rows are spread over workers")
    parser.add_argument("--workers", type=int, help="Worker threads for the render")
    parser.add_argument("--fit", action="store_true", help="Fit the classic set to the terminal on start")
    parser.add_argument("--halfblock", action="store_true", help="Draw two samples per cell with half blocks")
    parser.add_argument("--no-status", action="store_true", help="Hide the status line")

    # Benchmark sweeps
    parser.add_argument("--sweep", type=str, help="Path to benchmark sweep YAML file")
    parser.add_argument("--suite", type=str, help="Name of suite/experiment within sweep file")
    parser.add_argument("--list-suites", action="store_true", help="List suites in sweep file")
    parser.add_argument("--task-id", type=int, help="Run specific config index within the suite")

    return parser.parse_args()


def run_benchmarks(args) -> int:
    from termbrot.execution import run_sweep

    sweep_path = Path(args.sweep)

    if args.list_suites:
        for name, configs in load_named_sweep_configs(sweep_path):
            print(f"{name or sweep_path.stem}: {len(configs)} configurations")
        return 0

    if args.task_id is not None and args.suite is None:
        sys.exit("ERROR: --task-id requires --suite")

    suites = load_named_sweep_configs(sweep_path, args.suite)

    exit_code = 0
    for suite_name, configs in suites:
        descriptor = f"{sweep_path}::{suite_name}" if suite_name else str(sweep_path)
        rc = run_sweep(sweep_path, args.task_id, suite_name, configs, descriptor)
        exit_code = exit_code or rc
    return exit_code


def main():
    args = parse_args()

    try:
        if args.sweep:
            return run_benchmarks(args)
        if args.suite or args.list_suites or args.task_id is not None:
            sys.exit("ERROR: --suite, --list-suites and --task-id require --sweep")

        overrides = {
            "max_iterations": args.max_iterations,
            "ramp": args.ramp,
            "normalization": args.normalization,
            "schedule": args.schedule,
            "workers": args.workers,
        }
        overrides = {key: value for key, value in overrides.items() if value is not None}
        if args.fit:
            overrides["fit_on_start"] = True
        if args.halfblock:
            overrides["halfblock"] = True
        if args.no_status:
            overrides["show_status"] = False

        if args.config:
            base = load_viewer_config(args.config).to_dict()
            config = default_viewer_config(**{**base, **overrides})
        else:
            config = default_viewer_config(**overrides)
    except (OSError, ValueError) as exc:
        sys.exit(f"ERROR: {exc}")

    from termbrot.viewer import run_viewer

    stats = run_viewer(config)
    print(f"[Viewer] Rendered {stats.frames} frames, mean {stats.mean_render_time * 1000:.2f}ms per frame")
    return 0


if __name__ == "__main__":
    sys.exit(main())
