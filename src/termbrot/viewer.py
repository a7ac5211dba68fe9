"""Interactive viewer session: keys in, frames out."""

from __future__ import annotations

import curses
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from .camera import CameraState, ViewportDimensions
from .config import ViewerConfig
from .display import CursesDisplay
from .frame import Frame
from .keys import Command, apply_command, command_for_key
from .palette import get_ramp
from .renderer import render


class Display(Protocol):
    def viewport(self) -> ViewportDimensions: ...

    def read_key(self) -> Optional[str]: ...

    def draw(self, frame: Frame, camera: CameraState) -> None: ...


@dataclass
class SessionStats:
    frames: int = 0
    render_times: List[float] = field(default_factory=list)

    def record(self, frame: Frame) -> None:
        self.frames += 1
        self.render_times.append(frame.timing.get("total", 0.0))

    @property
    def mean_render_time(self) -> float:
        if not self.render_times:
            return 0.0
        return sum(self.render_times) / len(self.render_times)


class Viewer:
    """Runs the key/render loop against a display.

    A new frame is rendered only for the first draw, after a command that
    changed the camera, or after the viewport size changed.
    """

    def __init__(self, config: ViewerConfig, display: Display):
        self.config = config
        self.display = display
        self.camera = config.make_camera()
        self.settings = config.render_settings()
        self.stats = SessionStats()

    def run(self) -> SessionStats:
        dims = self.display.viewport()
        if self.config.fit_on_start:
            self.camera.fit(dims)

        dirty = True
        while True:
            if dirty:
                frame = render(self.camera, dims, self.settings)
                self.stats.record(frame)
                self.display.draw(frame, self.camera)

            key = self.display.read_key()
            if key == "resize":
                new_dims = self.display.viewport()
                dirty = new_dims != dims
                dims = new_dims
                continue

            command = command_for_key(key)
            if command is Command.QUIT:
                return self.stats
            dirty = apply_command(self.camera, command, dims)


def run_viewer(config: ViewerConfig) -> SessionStats:
    """Run a viewer session on the real terminal until the user quits."""

    def session(stdscr) -> SessionStats:
        display = CursesDisplay(stdscr, get_ramp(config.ramp), show_status=config.show_status)
        return Viewer(config, display).run()

    return curses.wrapper(session)
