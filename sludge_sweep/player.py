"""
Player Module
==============
Player entity creation, input intent resolution and movement.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import math
import random

from .ecs import World
from .components import (
    Position, Body, Mover, Health, Experience,
    AttackState, LevelUpPulse, PlayerTag
)
from .config import (
    TOUCH_MOVE_THRESHOLD, KEY_HOLD_FRAMES, TRAIL_SPAWN_CHANCE
)
from .geometry import clamp
from .particles import spawn_trail_particle


def create_player(world: World, arena_width: float, arena_height: float) -> int:
    """Create the player entity centered in the arena."""
    body = Body()
    return world.create_entity(
        Position(arena_width / 2 - body.width / 2,
                 arena_height / 2 - body.height / 2),
        body,
        Mover(),
        Health(),
        Experience(),
        AttackState(),
        LevelUpPulse(),
        PlayerTag(),
    )


def player_center(pos: Position, body: Body) -> Tuple[float, float]:
    return pos.x + body.width / 2, pos.y + body.height / 2


# =============================================================================
# INPUT
# =============================================================================

@dataclass(frozen=True)
class InputFrame:
    """
    Normalized device state for one tick.

    touch_dx/touch_dy are the drag offset from where the touch started.
    pointer is the aim point in arena units, or None if never set.
    """
    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False
    touch_active: bool = False
    touch_dx: float = 0.0
    touch_dy: float = 0.0
    pointer: Optional[Tuple[float, float]] = None


def resolve_movement(frame: InputFrame,
                     threshold: float = TOUCH_MOVE_THRESHOLD) -> Tuple[int, int]:
    """
    Reduce an input frame to a discrete direction in {-1, 0, 1}^2.

    Up beats down and left beats right. An active touch replaces the
    keyboard entirely, including when the drag is still inside the
    dead zone.
    """
    if frame.touch_active:
        dx = dy = 0
        if abs(frame.touch_dx) > threshold:
            dx = 1 if frame.touch_dx > 0 else -1
        if abs(frame.touch_dy) > threshold:
            dy = 1 if frame.touch_dy > 0 else -1
        return dx, dy

    dx = dy = 0
    if frame.up:
        dy = -1
    elif frame.down:
        dy = 1
    if frame.left:
        dx = -1
    elif frame.right:
        dx = 1
    return dx, dy


# Key name -> direction it holds
DIRECTION_KEYS = {
    'w': 'up', 'KEY_UP': 'up',
    's': 'down', 'KEY_DOWN': 'down',
    'a': 'left', 'KEY_LEFT': 'left',
    'd': 'right', 'KEY_RIGHT': 'right',
}


class InputHandler:
    """
    Tracks raw device state and produces one InputFrame per tick.

    Terminals report key presses but not releases, so a press keeps
    its direction held for a few frames (refreshed by key repeat).
    """

    def __init__(self, hold_duration: int = KEY_HOLD_FRAMES):
        self.keys_held: dict = {}  # key name -> frames remaining
        self.hold_duration = hold_duration

        self.touch_active = False
        self.touch_start: Tuple[float, float] = (0.0, 0.0)
        self.touch_current: Tuple[float, float] = (0.0, 0.0)
        self.pointer: Optional[Tuple[float, float]] = None

    def press(self, key_name: str) -> bool:
        """Register a directional key press. Returns False for other keys."""
        if key_name not in DIRECTION_KEYS:
            return False
        self.keys_held[key_name] = self.hold_duration
        return True

    def release(self, key_name: str):
        self.keys_held.pop(key_name, None)

    def point(self, x: float, y: float):
        """Move the aim pointer (mouse, or an aim key in the terminal)."""
        self.pointer = (x, y)

    def touch_start_at(self, x: float, y: float):
        self.touch_active = True
        self.touch_start = (x, y)
        self.touch_current = (x, y)
        self.pointer = (x, y)

    def touch_move_to(self, x: float, y: float):
        if not self.touch_active:
            return
        self.touch_current = (x, y)
        self.pointer = (x, y)

    def touch_end(self):
        self.touch_active = False

    def clear(self):
        """Drop held keys and any drag (used across mode changes)."""
        self.keys_held.clear()
        self.touch_active = False

    def update(self) -> None:
        """Update key hold timers (call once per frame)."""
        expired = []
        for key, frames in self.keys_held.items():
            self.keys_held[key] = frames - 1
            if self.keys_held[key] <= 0:
                expired.append(key)
        for key in expired:
            del self.keys_held[key]

    def frame(self) -> InputFrame:
        """Snapshot current device state as an InputFrame."""
        held = {DIRECTION_KEYS[key] for key in self.keys_held}
        return InputFrame(
            up='up' in held,
            down='down' in held,
            left='left' in held,
            right='right' in held,
            touch_active=self.touch_active,
            touch_dx=self.touch_current[0] - self.touch_start[0],
            touch_dy=self.touch_current[1] - self.touch_start[1],
            pointer=self.pointer,
        )


# =============================================================================
# MOVEMENT
# =============================================================================

def clamp_to_arena(pos: Position, body: Body,
                   arena_width: float, arena_height: float):
    """Keep the body box inside the arena."""
    pos.x = clamp(pos.x, 0, arena_width - body.width)
    pos.y = clamp(pos.y, 0, arena_height - body.height)


def player_movement_system(world: World, frame: InputFrame,
                           arena_width: float, arena_height: float,
                           rng: random.Random):
    """
    Apply this frame's movement intent to the player.

    Diagonals are scaled by 1/sqrt(2) so every direction covers the same
    distance. Facing follows the intent, not the clamped pixel delta.
    """
    for entity_id, pos, body, mover, _ in world.query(
        Position, Body, Mover, PlayerTag
    ):
        dx, dy = resolve_movement(frame)
        mover.current_move_dx = dx
        mover.current_move_dy = dy

        if dx != 0 or dy != 0:
            move_x = dx * mover.speed
            move_y = dy * mover.speed
            if dx != 0 and dy != 0:
                move_x /= math.sqrt(2)
                move_y /= math.sqrt(2)

            if rng.random() < TRAIL_SPAWN_CHANCE:
                cx, cy = player_center(pos, body)
                spawn_trail_particle(world, rng, cx, cy, body.width, body.height)

            pos.x += move_x
            pos.y += move_y

            magnitude = math.hypot(dx, dy)
            mover.last_dx = dx / magnitude
            mover.last_dy = dy / magnitude

        clamp_to_arena(pos, body, arena_width, arena_height)
