"""Execution helpers for render benchmark workflows."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Dict, List, Optional

from .config import BenchmarkConfig, load_sweep_configs
from .logging import log_to_mlflow
from .renderer import render
from .report import BenchmarkReport
from .timing import time_function


def run_benchmark(config: BenchmarkConfig) -> BenchmarkReport:
    """Render one warm-up frame, then ``config.repeats`` timed frames."""
    camera = config.make_camera()
    settings = config.render_settings()
    dims = config.dims

    # The first call pays for JIT compilation of the kernels.
    frame, warmup = time_function(render, camera, dims, settings)

    records: List[Dict[str, float]] = []
    for repeat in range(config.repeats):
        frame = render(camera, dims, settings)
        records.append({"repeat": repeat, **frame.timing})

    totals = [record["total"] for record in records]
    timing = {
        "warmup": warmup,
        "mean_total": sum(totals) / len(totals),
        "min_total": min(totals),
        "max_total": max(totals),
        "mean_compute": sum(record["compute"] for record in records) / len(records),
        "mean_shade": sum(record["shade"] for record in records) / len(records),
        "repeats": len(records),
    }
    return BenchmarkReport(frame, timing, records)


def run_single_benchmark(config: BenchmarkConfig, suite_name: Optional[str]) -> BenchmarkReport:
    """Run one benchmark, print its timing and log it to MLflow."""
    print(
        f"[Benchmark] Starting '{config.run_name}' "
        f"(viewport={config.viewport}, schedule={config.schedule}, "
        f"workers={config.workers}, repeats={config.repeats})",
        flush=True,
    )

    report = run_benchmark(config)

    suite = suite_name or os.environ.get("TERMBROT_SUITE") or "default"
    if os.environ.get("SKIP_MLFLOW"):
        print("[Benchmark] SKIP_MLFLOW set - skipping MLflow logging.", flush=True)
    log_to_mlflow(config, report, suite)

    timing = report.timing
    print(
        f"[Timing] warmup: {timing['warmup']:.4f}s  "
        f"mean: {timing['mean_total'] * 1000:.2f}ms  "
        f"min: {timing['min_total'] * 1000:.2f}ms  "
        f"max: {timing['max_total'] * 1000:.2f}ms"
    )
    return report


def run_sweep(
    config_path: str | Path | None,
    task_id: Optional[int] = None,
    suite_name: Optional[str] = None,
    configs: Optional[list[BenchmarkConfig]] = None,
    descriptor: Optional[str] = None,
) -> int:
    """Run a sweep defined in a YAML configuration file or a pre-loaded list."""
    if configs is None:
        if config_path is None:
            raise ValueError("config_path must be provided when configs is None")
        configs = load_sweep_configs(config_path)
        descriptor = descriptor or str(config_path)
    else:
        descriptor = descriptor or (str(config_path) if config_path else "sweep")

    if not configs:
        print("ERROR: No configurations found in sweep", file=sys.stderr)
        return 1

    if task_id is not None:
        if task_id < 0 or task_id >= len(configs):
            print(f"ERROR: task-id {task_id} out of range [0, {len(configs) - 1}]", file=sys.stderr)
            return 1
        config = configs[task_id]
        print(f"[Task {task_id}] Running: {config.run_name}")
        run_single_benchmark(config, suite_name)
        return 0

    total = len(configs)
    print(f"[Sweep] {descriptor}: {total} configurations", flush=True)

    failed: list[int] = []
    for idx, cfg in enumerate(configs):
        print(f"[{idx + 1}/{total}] {cfg.run_name}")
        try:
            run_single_benchmark(cfg, suite_name)
        except Exception as exc:
            print(f"[{idx + 1}/{total}] {cfg.run_name} failed: {exc}", file=sys.stderr)
            failed.append(idx)

    print(f"[Sweep] {total - len(failed)}/{total} succeeded")
    if failed:
        names = ", ".join(f"#{idx} {configs[idx].run_name}" for idx in failed)
        print(f"[Sweep] failed: {names}", file=sys.stderr)
        return 1
    return 0
