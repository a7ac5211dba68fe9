"""Key names to camera commands."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional

from .camera import CameraState, Pan, ViewportDimensions, Zoom

__all__ = ["Command", "KEY_BINDINGS", "apply_command", "command_for_key"]


class Command(Enum):
    PAN_UP = "pan_up"
    PAN_DOWN = "pan_down"
    PAN_LEFT = "pan_left"
    PAN_RIGHT = "pan_right"
    ZOOM_IN = "zoom_in"
    ZOOM_OUT = "zoom_out"
    MORE_ITERATIONS = "more_iterations"
    FEWER_ITERATIONS = "fewer_iterations"
    RESET = "reset"
    QUIT = "quit"


KEY_BINDINGS: Dict[str, Command] = {
    "up": Command.PAN_UP,
    "k": Command.PAN_UP,
    "down": Command.PAN_DOWN,
    "j": Command.PAN_DOWN,
    "left": Command.PAN_LEFT,
    "h": Command.PAN_LEFT,
    "right": Command.PAN_RIGHT,
    "l": Command.PAN_RIGHT,
    "+": Command.MORE_ITERATIONS,
    "=": Command.MORE_ITERATIONS,
    "-": Command.FEWER_ITERATIONS,
    "z": Command.ZOOM_IN,
    "pageup": Command.ZOOM_IN,
    "x": Command.ZOOM_OUT,
    "pagedown": Command.ZOOM_OUT,
    "r": Command.RESET,
    "q": Command.QUIT,
    "esc": Command.QUIT,
}

_PANS = {
    Command.PAN_UP: Pan.UP,
    Command.PAN_DOWN: Pan.DOWN,
    Command.PAN_LEFT: Pan.LEFT,
    Command.PAN_RIGHT: Pan.RIGHT,
}


def command_for_key(key: Optional[str]) -> Optional[Command]:
    """Return the command bound to ``key``, or ``None`` for unbound keys."""
    if not key:
        return None
    # Single characters are case sensitive, named keys are not.
    if len(key) > 1:
        key = key.lower()
    return KEY_BINDINGS.get(key)


def apply_command(
    camera: CameraState,
    command: Optional[Command],
    dims: Optional[ViewportDimensions] = None,
) -> bool:
    """Apply ``command`` to ``camera`` and report whether the view changed.

    ``QUIT`` belongs to the host loop and leaves the camera untouched.
    """
    if command is None or command is Command.QUIT:
        return False
    if command in _PANS:
        return camera.pan(_PANS[command], dims)
    if command is Command.ZOOM_IN:
        return camera.zoom(Zoom.IN)
    if command is Command.ZOOM_OUT:
        return camera.zoom(Zoom.OUT)
    if command is Command.MORE_ITERATIONS:
        return camera.adjust_iterations(camera.limits.iteration_step)
    if command is Command.FEWER_ITERATIONS:
        return camera.adjust_iterations(-camera.limits.iteration_step)
    return camera.reset()
