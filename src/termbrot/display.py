"""curses display: paints frames and reads key names."""

from __future__ import annotations

import curses
from typing import Dict, Optional, Tuple

from .camera import CameraState, ViewportDimensions
from .frame import Frame
from .palette import Ramp

__all__ = ["CursesDisplay", "key_name", "status_text", "xterm_to_basic"]

_NAMED_KEYS = {
    curses.KEY_UP: "up",
    curses.KEY_DOWN: "down",
    curses.KEY_LEFT: "left",
    curses.KEY_RIGHT: "right",
    curses.KEY_PPAGE: "pageup",
    curses.KEY_NPAGE: "pagedown",
    curses.KEY_RESIZE: "resize",
    27: "esc",
}

_CUBE_LEVELS = (0, 95, 135, 175, 215, 255)

HELP = "[hjkl/arrows] pan  [z/x] zoom  [+/-] iterations  [r] reset  [q] quit"


def key_name(code: int) -> Optional[str]:
    """Translate a ``getch`` code into the key names used by ``termbrot.keys``."""
    if code in _NAMED_KEYS:
        return _NAMED_KEYS[code]
    if 32 <= code < 127:
        return chr(code)
    return None


def xterm_rgb(color: int) -> Tuple[int, int, int]:
    if color >= 232:
        level = 8 + 10 * (color - 232)
        return level, level, level
    if color >= 16:
        index = color - 16
        return _CUBE_LEVELS[index // 36], _CUBE_LEVELS[(index // 6) % 6], _CUBE_LEVELS[index % 6]
    high = 255 if color >= 8 else 192
    base = color % 8
    return (high * (base & 1), high * ((base >> 1) & 1), high * ((base >> 2) & 1))


def xterm_to_basic(color: int) -> int:
    """Nearest of the eight basic curses colors (bit 0 red, bit 1 green, bit 2 blue)."""
    r, g, b = xterm_rgb(color)
    return (r > 127) * 1 + (g > 127) * 2 + (b > 127) * 4


def status_text(camera: CameraState, frame: Frame, width: int) -> str:
    real, imag = camera.center
    millis = frame.timing.get("total", 0.0) * 1000.0
    text = (
        f" ({real:+.10g}, {imag:+.10g}) scale={camera.scale:.3g} "
        f"iter={camera.max_iterations} {millis:.1f}ms  {HELP}"
    )
    return text[: max(width - 1, 0)]


class CursesDisplay:
    """Owns the curses screen for one viewer session."""

    def __init__(self, stdscr, ramp: Ramp, show_status: bool = True):
        self.stdscr = stdscr
        self.show_status = show_status
        self._pairs: Dict[Tuple[int, int], int] = {}
        self._colors = curses.has_colors()
        self._full = False

        curses.curs_set(0)
        stdscr.keypad(True)
        if self._colors:
            curses.start_color()
            curses.use_default_colors()
            self._full = curses.COLORS >= 256
            for color in list(ramp.colors) + [ramp.inside_color]:
                self._pair(color, -1)

    def _pair(self, foreground: int, background: int) -> int:
        """Color pair number for ``(foreground, background)``, created on first use.

        ``-1`` is the terminal default. Returns 0 once the terminal runs out of pairs.
        """
        key = (foreground, background)
        pair = self._pairs.get(key)
        if pair is None:
            if not self._colors or len(self._pairs) + 1 >= curses.COLOR_PAIRS:
                return 0
            pair = len(self._pairs) + 1
            curses.init_pair(pair, self._terminal_color(foreground), self._terminal_color(background))
            self._pairs[key] = pair
        return pair

    def _terminal_color(self, color: int) -> int:
        if color < 0 or self._full:
            return color
        return xterm_to_basic(color)

    def viewport(self) -> ViewportDimensions:
        height, width = self.stdscr.getmaxyx()
        if self.show_status:
            height -= 1
        return ViewportDimensions(rows=max(height, 0), columns=max(width, 0))

    def read_key(self) -> Optional[str]:
        return key_name(self.stdscr.getch())

    def draw(self, frame: Frame, camera: CameraState) -> None:
        """Paint the whole frame, then refresh once."""
        self.stdscr.erase()
        height, width = self.stdscr.getmaxyx()
        for row in range(min(frame.rows, height)):
            last_row = row == height - 1
            for start, text, foreground, background in _runs(frame, row, width):
                attr = curses.color_pair(self._pair(foreground, background))
                if last_row and start + len(text) >= width:
                    # addstr into the bottom-right cell moves the cursor off screen
                    self.stdscr.insstr(row, start, text, attr)
                else:
                    self.stdscr.addstr(row, start, text, attr)
        if self.show_status and height > frame.rows:
            self.stdscr.addstr(height - 1, 0, status_text(camera, frame, width), curses.A_REVERSE)
        self.stdscr.refresh()


def _runs(frame: Frame, row: int, width: int):
    """Split a frame row into ``(start, text, foreground, background)`` runs of one color pair.

    ``background`` is -1 for frames without a background layer.
    """
    symbols = frame.symbols[row]
    foregrounds = frame.colors[row].tolist()
    if frame.background is None:
        backgrounds = [-1] * len(foregrounds)
    else:
        backgrounds = frame.background[row].tolist()
    columns = min(frame.columns, width)
    start = 0
    while start < columns:
        pair = (foregrounds[start], backgrounds[start])
        end = start + 1
        while end < columns and (foregrounds[end], backgrounds[end]) == pair:
            end += 1
        yield start, "".join(symbols[start:end].tolist()), pair[0], pair[1]
        start = end
