"""
Component Definitions
======================
All components are plain dataclasses with no behavior.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from .config import (
    TILE_SIZE, PLAYER_SPEED, PLAYER_MAX_HEALTH, PLAYER_XP_TO_NEXT_LEVEL,
    SWORD_SWEEP_ANGLE, SWORD_LENGTH, ATTACK_DURATION, ATTACK_COOLDOWN
)


# HSL triple: hue in degrees, saturation and lightness in percent
HSL = Tuple[float, float, float]


class Mode(Enum):
    """Top-level game modes. Exactly one is active at a time."""
    RUNNING = 'running'
    PAUSED = 'paused'
    UPGRADE_SELECT = 'upgrade_select'
    GAME_OVER = 'game_over'


# =============================================================================
# PHYSICS COMPONENTS
# =============================================================================

@dataclass
class Position:
    """
    World position in logical units.

    For the player this is the top-left corner of the body box;
    for sludge and FX it is the center.
    """
    x: float = 0.0
    y: float = 0.0


@dataclass
class Velocity:
    """Drift per frame (FX only; sludge and player move by intent)."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class Body:
    """Axis-aligned body box of the player."""
    width: float = TILE_SIZE
    height: float = TILE_SIZE

    @property
    def radius(self) -> float:
        return self.width / 2


# =============================================================================
# PLAYER COMPONENTS
# =============================================================================

@dataclass
class Mover:
    """Movement tuning, facing and this frame's raw intent."""
    speed: float = PLAYER_SPEED
    last_dx: float = 1.0
    last_dy: float = 0.0
    current_move_dx: int = 0
    current_move_dy: int = 0


@dataclass
class Health:
    current: int = PLAYER_MAX_HEALTH
    maximum: int = PLAYER_MAX_HEALTH


@dataclass
class Experience:
    """Level progression."""
    level: int = 1
    xp: int = 0
    xp_to_next_level: int = PLAYER_XP_TO_NEXT_LEVEL
    xp_multiplier: float = 1.0


@dataclass
class AttackState:
    """
    Sword sweep tuning and runtime state.

    Angles are radians measured with atan2 in screen coordinates
    (y grows downward). Timers count frames down to zero.
    """
    sweep_angle: float = SWORD_SWEEP_ANGLE
    length: float = SWORD_LENGTH
    duration: int = ATTACK_DURATION
    cooldown: int = ATTACK_COOLDOWN
    active: bool = False
    timer: int = 0
    cooldown_timer: int = 0
    angle_start: float = 0.0

    @property
    def progress(self) -> float:
        """Fraction of the sweep already covered, in [0, 1]."""
        if self.duration <= 0:
            return 1.0
        return min(1 - self.timer / self.duration, 1.0)

    @property
    def angle_end(self) -> float:
        """Current sweep front (not normalized)."""
        return self.angle_start + self.progress * self.sweep_angle


@dataclass
class LevelUpPulse:
    """Visual pulse armed after an upgrade is applied."""
    active: bool = False
    timer: int = 0


# =============================================================================
# SLUDGE COMPONENTS
# =============================================================================

@dataclass
class Sludge:
    """
    A roaming sludge particle.

    Radius, damage and XP are all derived from the size tier; build
    instances with sludge.create_sludge() so they stay consistent.
    """
    size: int = 1
    radius: float = 5.0
    damage: int = 1
    xp_value: int = 1
    speed: float = 1.0
    color: HSL = (90.0, 55.0, 30.0)


# =============================================================================
# EFFECT COMPONENTS
# =============================================================================

@dataclass
class Lifetime:
    """Entity lifetime in frames."""
    frames_remaining: int = 20


@dataclass
class Fade:
    """Size and damping of a cosmetic particle."""
    size: float = 2.0
    shrink: float = 1.0  # Size multiplier per frame
    drag: float = 1.0  # Velocity multiplier per frame
    color: HSL = (240.0, 100.0, 93.0)
    alpha: float = 0.4


# =============================================================================
# TAG COMPONENTS (empty, used for queries)
# =============================================================================

@dataclass
class PlayerTag:
    """Marks the player entity."""
    pass


@dataclass
class TrailTag:
    """Marks a movement trail particle."""
    pass


@dataclass
class SparkTag:
    """Marks a sword hit spark."""
    pass
