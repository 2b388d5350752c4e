#!/usr/bin/env python3
"""
SLUDGE SWEEP - Terminal Arena Survival
=======================================
Your sword swings on its own. Keep moving, keep the sludge off you.

Controls:
    WASD / Arrows  - Move
    IJKL           - Aim the sweep (up/left/down/right of you)
    P              - Pause / resume
    SPACE / ENTER  - Resume
    1 2 3          - Pick an upgrade after levelling up
    M              - Toggle music
    F              - Toggle FPS display
    Q / ESC        - Quit
"""

import logging
import sys
import time

try:
    from blessed import Terminal
except ImportError:
    print("ERROR: 'blessed' library required. Install with: pip install blessed")
    sys.exit(1)

from .audio import TerminalBellAudio
from .components import Mode
from .config import (
    FRAME_TIME, LOG_FILE, LOG_LEVEL, arena_for_viewport
)
from .engine import GameRenderer
from .game import GameState
from .player import InputHandler
from .render import render_snapshot

logger = logging.getLogger(__name__)


MIN_WIDTH = 60
MIN_HEIGHT = 20

# Aim keys -> direction from the player center
AIM_KEYS = {
    'i': (0, -1),
    'j': (-1, 0),
    'k': (0, 1),
    'l': (1, 0),
}
AIM_DISTANCE = 100.0


def _write(text: str):
    print(text, end='', flush=True)


def configure_logging():
    """Log to a file only; the game owns the terminal."""
    if not LOG_FILE:
        logging.getLogger('sludge_sweep').addHandler(logging.NullHandler())
        return
    logging.basicConfig(
        filename=LOG_FILE,
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )


class App:
    """Wires the terminal (keys, screen, bell) to a GameState."""

    def __init__(self, term: Terminal):
        self.term = term
        self.running = True
        self.frame = 0
        self.input_handler = InputHandler()
        self.renderer = GameRenderer(term)

        arena_w, arena_h = arena_for_viewport(term.width, term.height * 2)
        self.game = GameState(arena_w, arena_h, audio=TerminalBellAudio(_write))
        self.renderer.set_arena(arena_w, arena_h)
        self._term_size = (term.width, term.height)

    def handle_input(self):
        """Drain all pending keys from the terminal."""
        key = self.term.inkey(timeout=0)
        while key:
            self.process_key(key)
            key = self.term.inkey(timeout=0)

    def process_key(self, key):
        key_str = key.lower() if not key.is_sequence else ''
        name = key.name or ''

        if key_str == 'q' or name == 'KEY_ESCAPE':
            self.running = False
            return

        mode = self.game.mode

        if mode == Mode.UPGRADE_SELECT:
            if key_str in ('1', '2', '3'):
                self.game.select_upgrade(int(key_str) - 1)
                self.input_handler.clear()
            return

        if key_str == 'p':
            self.game.toggle_pause()
            self.input_handler.clear()
        elif key_str == ' ' or name == 'KEY_ENTER':
            self.game.accept()
        elif key_str == 'm':
            self.game.toggle_music()
        elif key_str == 'f':
            self.renderer.show_fps = not self.renderer.show_fps
        elif key_str in AIM_KEYS:
            self._aim(*AIM_KEYS[key_str])
        elif mode == Mode.RUNNING:
            self.input_handler.press(name if key.is_sequence else key_str)

    def _aim(self, dx: int, dy: int):
        cx, cy = self.game.snapshot.player.center
        self.input_handler.point(cx + dx * AIM_DISTANCE, cy + dy * AIM_DISTANCE)

    def check_resize(self):
        size = (self.term.width, self.term.height)
        if size == self._term_size:
            return
        self._term_size = size
        self.renderer.resize(*size)
        arena_w, arena_h = arena_for_viewport(size[0], size[1] * 2)
        self.game.set_arena_size(arena_w, arena_h)
        self.renderer.set_arena(arena_w, arena_h)

    def tick(self):
        """One fixed-timestep update."""
        self.frame += 1
        self.input_handler.update()
        events = self.game.update(self.input_handler.frame())
        for event in events:
            if event['type'] == 'screen_shake':
                self.renderer.trigger_shake(event['intensity'], event['frames'])
            elif event['type'] == 'game_reset':
                self.input_handler.clear()
                self.input_handler.pointer = None

    def render(self):
        output = render_snapshot(self.renderer, self.game.snapshot, self.frame)
        if output:
            _write(output)


# =============================================================================
# MAIN LOOP
# =============================================================================

def main():
    """Entry point. Sets up the terminal and runs the 60 FPS game loop."""
    configure_logging()
    term = Terminal()

    if term.width < MIN_WIDTH or term.height < MIN_HEIGHT:
        print(
            f'Terminal too small: {term.width}x{term.height}. '
            f'Minimum: {MIN_WIDTH}x{MIN_HEIGHT}'
        )
        sys.exit(1)

    with term.fullscreen(), term.cbreak(), term.hidden_cursor():
        app = App(term)

        last_time = time.perf_counter()
        accumulator = 0.0
        fps_timer = 0.0
        fps_frame_count = 0

        _write(term.home + term.clear)

        while app.running:
            now = time.perf_counter()
            delta = now - last_time
            last_time = now

            # Clamp delta to prevent spiral of death
            delta = min(delta, FRAME_TIME * 5)
            accumulator += delta
            fps_timer += delta

            app.check_resize()
            app.handle_input()

            ticks = 0
            while accumulator >= FRAME_TIME and ticks < 4:
                app.tick()
                accumulator -= FRAME_TIME
                ticks += 1
                fps_frame_count += 1

            app.render()

            if fps_timer >= 0.5:
                app.renderer.current_fps = fps_frame_count / fps_timer
                fps_frame_count = 0
                fps_timer = 0.0

            elapsed = time.perf_counter() - now
            sleep_time = FRAME_TIME - elapsed
            if sleep_time > 0.001:
                time.sleep(sleep_time * 0.9)

        _write(term.normal)
        logger.info('Quit')


if __name__ == '__main__':
    main()
