"""
Snapshot Rendering
===================
Draws a frozen game snapshot: arena, sludge, player, sword sweep,
effects, HUD and the mode overlays.
"""

import math
import textwrap

from .components import Mode
from .config import LEVEL_UP_PULSE_DURATION, TARGET_FPS
from .engine import (
    GameRenderer, NEON_CYAN, NEON_YELLOW, NEON_GREEN, NEON_LIME, NEON_RED,
    NEON_BLUE, GRAY_LIGHT, GRAY_MED, GRAY_DARK, GRAY_DARKER, WHITE
)
from .snapshot import Snapshot, PlayerView


# Glyph per sludge size tier
SLUDGE_CHARS = {1: '.', 2: 'o', 3: 'O', 4: '@'}

SWEEP_COLOR = NEON_CYAN
PULSE_COLOR = 229


def render_snapshot(renderer: GameRenderer, snap: Snapshot, frame: int) -> str:
    """Render one frame and return the terminal output."""
    renderer.set_arena(snap.arena_width, snap.arena_height)
    if snap.mode != Mode.RUNNING:
        renderer.cancel_shake()

    renderer.begin_frame()
    render_arena_border(renderer)

    if snap.mode == Mode.GAME_OVER:
        render_game_over(renderer, snap)
    else:
        render_world(renderer, snap)
        render_hud(renderer, snap)
        if snap.mode == Mode.UPGRADE_SELECT:
            render_upgrade_select(renderer, snap, frame)
        elif snap.mode == Mode.PAUSED:
            render_paused(renderer)

    return renderer.end_frame()


def render_arena_border(renderer: GameRenderer):
    for x in range(renderer.width):
        renderer.put_string(x, renderer.game_height, '=', GRAY_DARK)


# =============================================================================
# WORLD
# =============================================================================

def render_world(renderer: GameRenderer, snap: Snapshot):
    for fx in snap.trail_fx:
        if fx.frames_remaining / 20 > 0.3:
            renderer.put_world_pixel(fx.x, fx.y, GRAY_DARK)

    for sludge in snap.particles:
        renderer.put_world(sludge.x, sludge.y,
                           SLUDGE_CHARS.get(sludge.size, '@'),
                           renderer.color_for(sludge.color))

    for spark in snap.spark_fx:
        renderer.put_world_pixel(spark.x, spark.y, renderer.color_for(spark.color))

    player = snap.player
    if player.is_level_up_pulse_active:
        render_level_up_pulse(renderer, player)
    if player.is_attacking:
        render_sweep(renderer, player)
    render_player(renderer, player)


def render_player(renderer: GameRenderer, player: PlayerView):
    """Player glyph, mirrored to face the last movement direction."""
    cx, cy = player.center
    char = '◄' if player.last_dx < 0 else '►'
    if player.last_dx == 0:
        char = '▲' if player.last_dy < 0 else '▼'
    renderer.put_world(cx, cy, char, NEON_BLUE)


def render_sweep(renderer: GameRenderer, player: PlayerView):
    """Fill the arc swept so far with braille dots, the blade tip solid."""
    cx, cy = player.center
    start = player.attack_angle_start
    end = player.attack_angle_end
    steps = max(2, int(abs(end - start) * 12))
    for i in range(steps + 1):
        angle = start + (end - start) * i / steps
        for ring in range(2, 9):
            reach = player.sword_length * ring / 8
            renderer.put_world_pixel(cx + math.cos(angle) * reach,
                                     cy + math.sin(angle) * reach, SWEEP_COLOR)
    renderer.put_world(cx + math.cos(end) * player.sword_length,
                       cy + math.sin(end) * player.sword_length, '*', WHITE)


def render_level_up_pulse(renderer: GameRenderer, player: PlayerView):
    """Expanding ring around the player after an upgrade."""
    progress = (LEVEL_UP_PULSE_DURATION - player.level_up_pulse_timer) / LEVEL_UP_PULSE_DURATION
    radius = progress * player.sword_length * 1.5
    if radius <= 0:
        return
    cx, cy = player.center
    for i in range(48):
        angle = 2 * math.pi * i / 48
        renderer.put_world_pixel(cx + math.cos(angle) * radius,
                                 cy + math.sin(angle) * radius, PULSE_COLOR)


# =============================================================================
# HUD & OVERLAYS
# =============================================================================

def _bar(value: float, maximum: float, width: int) -> str:
    filled = 0 if maximum <= 0 else max(0, min(width, int(value / maximum * width)))
    return '|' * filled + '.' * (width - filled)


def render_hud(renderer: GameRenderer, snap: Snapshot):
    """Level, XP and health in the rows below the arena."""
    y = renderer.game_height + 1
    player = snap.player

    renderer.put_string(2, y, f'LEVEL {player.level}', WHITE)

    xp_text = f'XP [{_bar(player.xp, player.xp_to_next_level, 20)}] {player.xp}/{player.xp_to_next_level}'
    renderer.put_string(12, y, xp_text, NEON_GREEN)

    hp_color = NEON_RED if player.health <= player.max_health * 0.3 else NEON_LIME
    hp_text = f'HP [{_bar(player.health, player.max_health, 20)}] {player.health}/{player.max_health}'
    renderer.put_string(12 + len(xp_text) + 3, y, hp_text, hp_color)

    controls = 'WASD/Arrows:Move  IJKL:Aim  P:Pause  M:Music  Q:Quit'
    if not snap.music_enabled:
        controls += '  (music off)'
    renderer.put_string(2, y + 1, controls, GRAY_DARKER)

    if renderer.show_fps:
        fps_text = f'FPS:{renderer.current_fps:.0f}'
        renderer.put_string(renderer.width - len(fps_text) - 2, 0, fps_text, GRAY_MED)


def render_paused(renderer: GameRenderer):
    lines = ['PAUSED', 'Press P, Space, or Enter to Resume']
    box_w = max(len(line) for line in lines) + 6
    box_x = renderer.width // 2 - box_w // 2
    box_y = renderer.game_height // 2 - 2
    renderer.draw_box(box_x, box_y, box_w, 5, GRAY_LIGHT)
    for i, line in enumerate(lines):
        renderer.put_string(renderer.width // 2 - len(line) // 2, box_y + 1 + i * 2,
                            line, WHITE)


def render_upgrade_select(renderer: GameRenderer, snap: Snapshot, frame: int):
    """Upgrade choices with wrapped descriptions."""
    box_w = min(renderer.width - 4, 56)
    wrap_w = box_w - 8
    blocks = [
        [f'({i + 1}) {choice.name}'] + textwrap.wrap(choice.description, wrap_w)
        for i, choice in enumerate(snap.upgrade_choices)
    ]
    box_h = 4 + sum(len(block) + 1 for block in blocks) + 1
    box_x = renderer.width // 2 - box_w // 2
    box_y = max(0, renderer.game_height // 2 - box_h // 2)

    renderer.draw_box(box_x, box_y, box_w, box_h, NEON_YELLOW)
    title = ' LEVEL UP! CHOOSE AN UPGRADE '
    renderer.put_string(renderer.width // 2 - len(title) // 2, box_y, title, NEON_YELLOW)

    row = box_y + 2
    for block in blocks:
        renderer.put_string(box_x + 3, row, block[0], NEON_LIME)
        for line in block[1:]:
            row += 1
            renderer.put_string(box_x + 5, row, line, WHITE)
        row += 2

    if (frame // 20) % 2 == 0:
        prompt = f'Press 1-{len(blocks)} to select'
        renderer.put_string(renderer.width // 2 - len(prompt) // 2, box_y + box_h - 2,
                            prompt, GRAY_LIGHT)


def render_game_over(renderer: GameRenderer, snap: Snapshot):
    seconds = math.ceil(snap.restart_timer / TARGET_FPS)
    lines = [
        ('GAME OVER', NEON_RED),
        (f'Reached level {snap.player.level}', NEON_YELLOW),
        (f'Restarting in {seconds}s...', WHITE),
    ]
    y = renderer.game_height // 2 - len(lines)
    for i, (text, color) in enumerate(lines):
        renderer.put_string(renderer.width // 2 - len(text) // 2, y + i * 2, text, color)
