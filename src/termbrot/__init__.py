"""termbrot - Mandelbrot set explorer for the terminal."""

__version__ = "0.1.0"

# Core model and renderer - lightweight, no terminal or tracking imports
from .camera import CameraLimits, CameraState, Pan, ViewportDimensions, Zoom
from .config import BenchmarkConfig, ViewerConfig, default_viewer_config
from .frame import Frame, StyledCell
from .keys import Command, apply_command, command_for_key
from .renderer import RenderSettings, render


# Conditional imports - only loaded when needed
def __getattr__(name):
    """Lazy loading of curses and MLflow backed modules."""
    if name == "run_viewer":
        from .viewer import run_viewer

        return run_viewer
    elif name == "run_sweep":
        from .execution import run_sweep

        return run_sweep
    elif name == "run_benchmark":
        from .execution import run_benchmark

        return run_benchmark
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "BenchmarkConfig",
    "CameraLimits",
    "CameraState",
    "Command",
    "Frame",
    "Pan",
    "RenderSettings",
    "StyledCell",
    "ViewerConfig",
    "ViewportDimensions",
    "Zoom",
    "apply_command",
    "command_for_key",
    "default_viewer_config",
    "render",
    "run_benchmark",
    "run_sweep",
    "run_viewer",
]
