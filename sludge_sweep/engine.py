"""
Rendering Engine
=================
Double-buffered terminal renderer that maps the logical arena onto
terminal cells, with braille sub-pixels for small effects and screen
shake.
"""

from dataclasses import dataclass, field
from typing import List, Tuple
import colorsys
import random

try:
    from blessed import Terminal
except ImportError:
    raise ImportError("'blessed' library required. Install with: pip install blessed")


# ANSI 256 color constants
NEON_CYAN = 51
NEON_YELLOW = 226
NEON_GREEN = 46
NEON_LIME = 118
NEON_RED = 196
NEON_BLUE = 33

GRAY_LIGHT = 252
GRAY_MED = 245
GRAY_DARK = 238
GRAY_DARKER = 235

WHITE = 255

HUD_ROWS = 3


def hsl_to_rgb(color: Tuple[float, float, float]) -> Tuple[int, int, int]:
    """Convert an (hue deg, sat %, light %) triple to 0-255 RGB."""
    hue, saturation, lightness = color
    r, g, b = colorsys.hls_to_rgb(
        (hue % 360) / 360.0,
        max(0.0, min(1.0, lightness / 100.0)),
        max(0.0, min(1.0, saturation / 100.0)),
    )
    return int(r * 255), int(g * 255), int(b * 255)


@dataclass
class Cell:
    """A single cell in the render buffer."""
    char: str = ' '
    fg_color: int = 7

    def matches(self, other: 'Cell') -> bool:
        return self.char == other.char and self.fg_color == other.fg_color

    def reset(self):
        self.char = ' '
        self.fg_color = 7


class DoubleBuffer:
    """
    Writes go to a back buffer; present() emits only the cells that
    differ from the front buffer, then swaps.
    """

    def __init__(self, term: Terminal):
        self.term = term
        self.width = term.width
        self.height = term.height
        self.front: List[List[Cell]] = []
        self.back: List[List[Cell]] = []
        self._init_buffers()
        self._normal = term.normal

    def _init_buffers(self):
        self.front = [[Cell() for _ in range(self.width)] for _ in range(self.height)]
        self.back = [[Cell() for _ in range(self.width)] for _ in range(self.height)]

    def resize(self, width: int, height: int):
        self.width = width
        self.height = height
        self._init_buffers()

    def clear_back(self):
        for row in self.back:
            for cell in row:
                cell.reset()

    def put(self, x: int, y: int, char: str, fg_color: int = 7):
        if 0 <= x < self.width and 0 <= y < self.height:
            cell = self.back[y][x]
            cell.char = char
            cell.fg_color = fg_color

    def put_string(self, x: int, y: int, text: str, fg_color: int = 7):
        for i, char in enumerate(text):
            self.put(x + i, y, char, fg_color)

    def present(self) -> str:
        """
        Swap buffers and return the escape sequence for changed cells.

        Runs of adjacent changed cells share one cursor move, and the
        color is only re-sent when it differs from the previous cell.
        """
        parts = []
        for y, (back_row, front_row) in enumerate(zip(self.back, self.front)):
            cursor_x = -1
            current_color = None
            for x, cell in enumerate(back_row):
                if cell.matches(front_row[x]):
                    continue
                if x != cursor_x:
                    parts.append(self.term.move_xy(x, y))
                if cell.fg_color != current_color:
                    parts.append(self._normal)
                    parts.append(self.term.color(cell.fg_color))
                    current_color = cell.fg_color
                parts.append(cell.char or ' ')
                cursor_x = x + 1

        self.front, self.back = self.back, self.front
        return ''.join(parts)


class BrailleCanvas:
    """
    Sub-pixel canvas using Unicode Braille patterns.

    Each character cell is a 2x4 dot grid.
    """

    # (column, row) -> bit
    DOT_BITS = {
        (0, 0): 0x01, (0, 1): 0x02, (0, 2): 0x04, (0, 3): 0x40,
        (1, 0): 0x08, (1, 1): 0x10, (1, 2): 0x20, (1, 3): 0x80,
    }
    BASE = 0x2800

    def __init__(self, char_width: int, char_height: int):
        self.char_width = char_width
        self.char_height = char_height
        self.pixel_width = char_width * 2
        self.pixel_height = char_height * 4
        self.canvas: List[List[int]] = []
        self.colors: List[List[int]] = []
        self.clear()

    def clear(self):
        self.canvas = [[0] * self.char_width for _ in range(self.char_height)]
        self.colors = [[WHITE] * self.char_width for _ in range(self.char_height)]

    def set_pixel(self, px: int, py: int, color: int = WHITE):
        if 0 <= px < self.pixel_width and 0 <= py < self.pixel_height:
            cx, cy = px // 2, py // 4
            self.canvas[cy][cx] |= self.DOT_BITS[(px % 2, py % 4)]
            self.colors[cy][cx] = color

    def blit_to_buffer(self, buffer: DoubleBuffer):
        """Overlay dots onto empty buffer cells only."""
        for cy in range(self.char_height):
            for cx in range(self.char_width):
                pattern = self.canvas[cy][cx]
                if pattern and buffer.back[cy][cx].char == ' ':
                    buffer.put(cx, cy, chr(self.BASE + pattern), self.colors[cy][cx])


@dataclass
class GameRenderer:
    """
    High-level renderer for the arena view.

    Arena coordinates are scaled to the playable cell area above the HUD.
    Screen shake offsets arena drawing; HUD and overlays bypass it.
    """
    term: Terminal
    arena_width: float = 800.0
    arena_height: float = 600.0
    buffer: DoubleBuffer = field(init=False)
    braille: BrailleCanvas = field(init=False)

    shake_x: int = 0
    shake_y: int = 0
    shake_frames: int = 0
    shake_intensity: float = 0.0

    show_fps: bool = False
    current_fps: float = 60.0

    def __post_init__(self):
        self.buffer = DoubleBuffer(self.term)
        self.braille = BrailleCanvas(self.term.width, self.game_height)

    @property
    def width(self) -> int:
        return self.buffer.width

    @property
    def height(self) -> int:
        return self.buffer.height

    @property
    def game_height(self) -> int:
        """Height of the arena area (excluding HUD rows)."""
        return max(1, self.buffer.height - HUD_ROWS)

    @property
    def scale_x(self) -> float:
        return self.width / self.arena_width

    @property
    def scale_y(self) -> float:
        return self.game_height / self.arena_height

    def set_arena(self, width: float, height: float):
        self.arena_width = width
        self.arena_height = height

    def to_cell(self, x: float, y: float) -> Tuple[int, int]:
        """Arena coordinates -> terminal cell (before shake)."""
        return int(x * self.scale_x), int(y * self.scale_y)

    def color_for(self, color: Tuple[float, float, float]) -> int:
        """Nearest 256-color index for an HSL triple."""
        return self.term.rgb_downconvert(*hsl_to_rgb(color))

    def trigger_shake(self, intensity: float, frames: int):
        """Shake the arena; intensity is in arena units."""
        self.shake_intensity = intensity
        self.shake_frames = max(self.shake_frames, frames)

    def update_effects(self):
        if self.shake_frames > 0:
            max_dx = max(1, round(self.shake_intensity * self.scale_x))
            max_dy = max(1, round(self.shake_intensity * self.scale_y))
            self.shake_x = random.randint(-max_dx, max_dx)
            self.shake_y = random.randint(-max_dy, max_dy)
            self.shake_frames -= 1
        else:
            self.shake_x = 0
            self.shake_y = 0

    def cancel_shake(self):
        self.shake_frames = 0
        self.shake_x = 0
        self.shake_y = 0

    def begin_frame(self):
        self.buffer.clear_back()
        self.braille.clear()

    def end_frame(self) -> str:
        """Finalize frame: blit braille overlay and present."""
        self.braille.blit_to_buffer(self.buffer)
        self.update_effects()
        return self.buffer.present()

    def put_world(self, x: float, y: float, char: str, fg_color: int = 7):
        """Draw a glyph at arena coordinates (shaken, clipped to the arena)."""
        cx, cy = self.to_cell(x, y)
        cx += self.shake_x
        cy += self.shake_y
        if 0 <= cy < self.game_height:
            self.buffer.put(cx, cy, char, fg_color)

    def put_world_pixel(self, x: float, y: float, color: int = WHITE):
        """Set a braille dot at arena coordinates."""
        px = int(x * self.scale_x * 2) + self.shake_x * 2
        py = int(y * self.scale_y * 4) + self.shake_y * 4
        self.braille.set_pixel(px, py, color)

    def put_string(self, x: int, y: int, text: str, fg_color: int = 7):
        """UI text at cell coordinates, never shaken."""
        self.buffer.put_string(x, y, text, fg_color)

    def resize(self, width: int, height: int):
        self.buffer.resize(width, height)
        self.braille = BrailleCanvas(width, self.game_height)

    def draw_box(self, x: int, y: int, w: int, h: int, color: int = GRAY_DARK):
        """Draw a box-drawing border and blank its interior."""
        for row in range(1, h - 1):
            self.put_string(x + 1, y + row, ' ' * (w - 2), color)
        self.put_string(x, y, '┌' + '─' * (w - 2) + '┐', color)
        self.put_string(x, y + h - 1, '└' + '─' * (w - 2) + '┘', color)
        for row in range(1, h - 1):
            self.put_string(x, y + row, '│', color)
            self.put_string(x + w - 1, y + row, '│', color)
