"""MLflow logging for render benchmarks."""

from __future__ import annotations

import os
from typing import Any, Dict, List, Sequence

import mlflow
import pandas as pd
from matplotlib import pyplot as plt

from .camera import CameraLimits
from .config import BenchmarkConfig
from .report import BenchmarkReport

DEFAULT_TRACKING_URI = "file:./mlruns"
EXPERIMENT_NAME = "termbrot_render"


def log_to_mlflow(
    config: BenchmarkConfig,
    report: BenchmarkReport,
    suite_name: str = "default",
) -> None:
    """Log a benchmark to MLflow with raw per-repeat timings and a figure.

    If MLFLOW_RUN_ID is set in the environment the existing run is
    continued, otherwise a new run named after the config is created.

    Args:
        config: Benchmark configuration
        report: Rendered frame, timing summary and per-repeat table
        suite_name: Name of the suite (TESTS, schedules, ...) for tagging/filtering
    """
    # Skip logging in test mode
    if os.environ.get("SKIP_MLFLOW"):
        return

    mlflow.set_tracking_uri(_resolve_tracking_uri())
    mlflow.set_experiment(EXPERIMENT_NAME)

    existing_run_id = os.environ.get("MLFLOW_RUN_ID")
    if existing_run_id:
        run_context = mlflow.start_run(run_id=existing_run_id)
    else:
        run_context = mlflow.start_run(run_name=config.run_name)

    with run_context as run:
        mlflow.set_tags({"node_name": os.uname().nodename, "suite": suite_name})
        mlflow.log_params(config.to_dict())

        repeat_records = report.copy_repeats()
        if repeat_records:
            mlflow.log_table(_records_to_table(repeat_records), "repeats.json")

        timing = report.timing or {}
        for key in ("mean_total", "min_total", "max_total", "mean_compute", "mean_shade", "warmup"):
            mlflow.log_metric(key, float(timing.get(key, 0.0)))

        if report.frame is not None:
            mlflow.log_metric("escaped_fraction", report.frame.escaped_fraction())
            if not report.frame.is_empty:
                fig, ax = plt.subplots(figsize=(8, 4))
                ax.imshow(report.frame.iterations, aspect=1.0 / CameraLimits().cell_aspect)
                ax.set_axis_off()
                mlflow.log_figure(fig, "figures/iterations.png")
                plt.close(fig)

        print(f"[MLflow] Logged run: {config.run_name} (suite: {suite_name})")
        print(f"[MLflow] Run ID: {run.info.run_id}")


def _records_to_table(records: Sequence[Dict[str, Any]]) -> Dict[str, List[Any]]:
    """Convert row-wise records into MLflow table format."""
    frame = pd.DataFrame.from_records(records)
    return frame.to_dict(orient="list")


def _resolve_tracking_uri() -> str:
    return os.environ.get("MLFLOW_TRACKING_URI") or DEFAULT_TRACKING_URI
