"""Configuration objects and YAML loading for the viewer and render benchmarks."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from itertools import product
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

import yaml

from .camera import CameraLimits, CameraState, ViewportDimensions
from .renderer import RenderSettings


@dataclass(frozen=True)
class ViewerConfig:
    """Settings for an interactive viewer session."""

    center: Tuple[float, float] = (-0.5, 0.0)
    scale: float = 0.05
    max_iterations: int = 100
    pan_fraction: float = 0.1
    zoom_factor: float = 0.8
    iteration_step: int = 10
    min_scale: float = 1e-13
    max_scale: float = 0.5
    iteration_cap: int = 5000
    cell_aspect: float = 0.5
    ramp: str = "classic"
    normalization: str = "linear"
    schedule: str = "serial"  # 'serial', 'static', 'dynamic' or 'parallel'
    chunk_size: int = 8
    workers: int = 1
    halfblock: bool = False
    show_status: bool = True
    fit_on_start: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.center, (list, tuple)) or len(self.center) != 2:
            raise ValueError(f"center must be a (real, imag) pair, got {self.center!r}")
        if self.scale <= 0.0:
            raise ValueError(f"scale must be positive, got {self.scale}")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {self.max_iterations}")
        # Building these validates the remaining fields.
        self.camera_limits()
        self.render_settings()

    def camera_limits(self) -> CameraLimits:
        return CameraLimits(
            pan_fraction=self.pan_fraction,
            zoom_factor=self.zoom_factor,
            iteration_step=self.iteration_step,
            min_scale=self.min_scale,
            max_scale=self.max_scale,
            iteration_cap=self.iteration_cap,
            cell_aspect=self.cell_aspect,
        )

    def render_settings(self) -> RenderSettings:
        return RenderSettings(
            ramp=self.ramp,
            normalization=self.normalization,
            schedule=self.schedule,
            chunk_size=self.chunk_size,
            workers=self.workers,
            halfblock=self.halfblock,
        )

    def make_camera(self) -> CameraState:
        return CameraState.from_center(self.center, self.scale, self.max_iterations, self.camera_limits())

    def to_dict(self) -> dict:
        return asdict(self)


DEFAULT_VIEWER_CONFIG = ViewerConfig()


def default_viewer_config(**overrides: object) -> ViewerConfig:
    """Return the default viewer config optionally overridden with kwargs."""
    return _build(ViewerConfig, {**asdict(DEFAULT_VIEWER_CONFIG), **overrides})


def load_viewer_config(yaml_path: str | Path) -> ViewerConfig:
    """Load a viewer config from a YAML mapping; missing keys keep their defaults."""
    with open(yaml_path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{yaml_path}: expected a mapping at the top level")
    return default_viewer_config(**data)


@dataclass(frozen=True)
class BenchmarkConfig:
    """A single render benchmark: one viewport, one camera, one render setup."""

    columns: int
    rows: int
    center: Tuple[float, float] = (-0.5, 0.0)
    scale: float = 0.05
    max_iterations: int = 100
    ramp: str = "classic"
    normalization: str = "linear"
    schedule: str = "serial"
    chunk_size: int = 8
    workers: int = 1
    halfblock: bool = False
    repeats: int = 3

    def __post_init__(self) -> None:
        ViewportDimensions(rows=self.rows, columns=self.columns)
        if self.repeats < 1:
            raise ValueError(f"repeats must be at least 1, got {self.repeats}")
        self.render_settings()

    @property
    def dims(self) -> ViewportDimensions:
        return ViewportDimensions(rows=self.rows, columns=self.columns)

    @property
    def viewport(self) -> str:
        return f"{self.columns}x{self.rows}"

    @property
    def run_name(self) -> str:
        """Generate unique run name embedding the main parameters."""
        name = (
            f"{self.schedule}_w{self.workers}_c{self.chunk_size}_"
            f"it{self.max_iterations}_{self.viewport}"
        )
        return f"{name}_hb" if self.halfblock else name

    def render_settings(self) -> RenderSettings:
        return RenderSettings(
            ramp=self.ramp,
            normalization=self.normalization,
            schedule=self.schedule,
            chunk_size=self.chunk_size,
            workers=self.workers,
            halfblock=self.halfblock,
        )

    def make_camera(self) -> CameraState:
        return CameraState.from_center(self.center, self.scale, self.max_iterations)

    def to_dict(self) -> dict:
        """Convert to dictionary for MLflow logging."""
        return asdict(self)


def load_sweep_configs(yaml_path: str | Path) -> List[BenchmarkConfig]:
    """Load YAML config and generate all parameter sweep combinations.

    Accepts a top-level ``sweep`` as well as named suites nested under
    ``experiments``; in the latter case all suites are concatenated.
    """
    return [config for _, configs in load_named_sweep_configs(yaml_path) for config in configs]


def get_config_by_index(yaml_path: str | Path, index: int) -> BenchmarkConfig:
    """Get a specific config by index from sweep."""
    configs = load_sweep_configs(yaml_path)
    if index < 0 or index >= len(configs):
        raise ValueError(f"Config index {index} out of range [0, {len(configs) - 1}]")
    return configs[index]


def load_named_sweep_configs(
    yaml_path: str | Path,
    suite: str | None = None,
) -> List[tuple[str, List[BenchmarkConfig]]]:
    with open(yaml_path) as f:
        cfg = yaml.safe_load(f) or {}

    defaults: Dict[str, object] = cfg.get("defaults", {}) or {}
    experiments = cfg.get("experiments")
    results: List[tuple[str, List[BenchmarkConfig]]] = []

    if experiments:
        for exp in experiments:
            name = exp.get("name")
            if not name:
                continue
            if suite and name != suite:
                continue
            sweep = exp.get("sweep") or {}
            exp_defaults = {**defaults, **(exp.get("defaults", {}) or {})}
            results.append((name, _expand_sweep(exp_defaults, sweep)))
        if suite and not results:
            raise ValueError(f"Suite '{suite}' not found in {yaml_path}")
        return results

    sweep: Dict[str, object] = cfg.get("sweep", {}) or {}
    label = cfg.get("name") or Path(yaml_path).stem
    return [(label, _expand_sweep(defaults, sweep))]


def parse_viewport(value: str) -> Tuple[int, int]:
    """Parse ``"COLUMNSxROWS"`` into ``(columns, rows)``."""
    columns_str, rows_str = value.lower().split("x")
    return int(columns_str.strip()), int(rows_str.strip())


def _expand_sweep(defaults: Dict[str, object], sweep: Dict[str, object]) -> List[BenchmarkConfig]:
    """Expand sweep definition into BenchmarkConfig instances."""
    viewports = sweep.get("viewport")
    param_grid = {k: sweep[k] for k in sweep if k != "viewport"}
    keys = list(param_grid.keys())

    configs: List[BenchmarkConfig] = []
    for combo in product(*[_sweep_values(k, param_grid[k]) for k in keys]):
        data = {**defaults, **dict(zip(keys, combo))}
        configs.extend(_expand_viewports(data, viewports))
    return configs


def _expand_viewports(base: Dict[str, object], viewport_options: object) -> List[BenchmarkConfig]:
    if not viewport_options:
        return [_build_benchmark_config(base)]

    viewports: Iterable[Tuple[int, int]]
    if isinstance(viewport_options, list) and not _is_pair(viewport_options):
        viewports = [_normalize_viewport_entry(opt) for opt in viewport_options]
    else:
        viewports = [_normalize_viewport_entry(viewport_options)]

    return [
        _build_benchmark_config({**base, "columns": columns, "rows": rows})
        for columns, rows in viewports
    ]


def _build_benchmark_config(raw_data: Dict[str, object]) -> BenchmarkConfig:
    data = dict(raw_data)
    viewport = data.pop("viewport", None)
    if viewport is not None:
        columns, rows = _normalize_viewport_entry(viewport)
        data.setdefault("columns", columns)
        data.setdefault("rows", rows)
    if "columns" not in data or "rows" not in data:
        raise ValueError("Benchmark config needs a viewport (or columns and rows)")
    return _build(BenchmarkConfig, data)


def _build(cls, raw_data: Dict[str, object]):
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(raw_data) - known)
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} option(s): {', '.join(unknown)}")

    data = dict(raw_data)
    if "center" in data:
        data["center"] = _coerce_center(data["center"])
    for name in ("scale", "pan_fraction", "zoom_factor", "min_scale", "max_scale", "cell_aspect"):
        if name in data:
            data[name] = _coerce(name, data[name], float)
    for name in ("columns", "rows", "max_iterations", "iteration_step", "iteration_cap",
                 "chunk_size", "workers", "repeats"):
        if name in data:
            data[name] = _coerce(name, data[name], int)
    return cls(**data)


def _coerce(name: str, value: object, kind: type):
    try:
        return kind(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be {kind.__name__}, got {value!r}") from None


def _coerce_center(value: object) -> Tuple[float, float]:
    if isinstance(value, (list, tuple)) and len(value) == 2:
        try:
            return float(value[0]), float(value[1])
        except (TypeError, ValueError):
            pass
    raise ValueError(f"center must be a (real, imag) pair, got {value!r}")


def _normalize_viewport_entry(entry: object) -> Tuple[int, int]:
    if isinstance(entry, dict):
        columns = entry.get("columns")
        rows = entry.get("rows")
        if columns is None or rows is None:
            raise ValueError("viewport dict must include 'columns' and 'rows'")
        return int(columns), int(rows)
    if _is_pair(entry):
        return int(entry[0]), int(entry[1])  # type: ignore[index]
    if isinstance(entry, str):
        return parse_viewport(entry)
    raise ValueError(f"Unsupported viewport specification: {entry!r}")


def _is_pair(entry: object) -> bool:
    return (
        isinstance(entry, (list, tuple))
        and len(entry) == 2
        and all(isinstance(v, (int, float)) for v in entry)
    )


def _as_list(value: object) -> list:
    return list(value) if isinstance(value, (list, tuple)) else [value]


def _sweep_values(key: str, value: object) -> list:
    # A bare pair is one center, not two values to sweep over.
    if key == "center" and _is_pair(value):
        return [value]
    return _as_list(value)


__all__ = [
    "BenchmarkConfig",
    "DEFAULT_VIEWER_CONFIG",
    "ViewerConfig",
    "default_viewer_config",
    "get_config_by_index",
    "load_named_sweep_configs",
    "load_sweep_configs",
    "load_viewer_config",
    "parse_viewport",
]
