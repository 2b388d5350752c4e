"""
State Snapshots
================
Frozen, read-only copies of everything the presentation layer may see.
Built once per tick; never aliases live components.
"""

from dataclasses import dataclass
from typing import Tuple

from .components import HSL, Mode


@dataclass(frozen=True)
class PlayerView:
    x: float
    y: float
    width: float
    height: float
    speed: float
    health: int
    max_health: int
    level: int
    xp: int
    xp_to_next_level: int
    xp_multiplier: float
    sweep_angle: float
    sword_length: float
    attack_duration: int
    attack_cooldown: int
    is_attacking: bool
    attack_timer: int
    attack_cooldown_timer: int
    attack_angle_start: float
    attack_angle_end: float
    last_dx: float
    last_dy: float
    current_move_dx: int
    current_move_dy: int
    is_level_up_pulse_active: bool
    level_up_pulse_timer: int

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2


@dataclass(frozen=True)
class SludgeView:
    x: float
    y: float
    size: int
    radius: float
    damage: int
    xp_value: int
    speed: float
    color: HSL


@dataclass(frozen=True)
class FxView:
    x: float
    y: float
    size: float
    color: HSL
    alpha: float
    frames_remaining: int


@dataclass(frozen=True)
class UpgradeView:
    id: str
    name: str
    description: str


@dataclass(frozen=True)
class Snapshot:
    mode: Mode
    player: PlayerView
    particles: Tuple[SludgeView, ...]
    trail_fx: Tuple[FxView, ...]
    spark_fx: Tuple[FxView, ...]
    upgrade_choices: Tuple[UpgradeView, ...]
    restart_timer: int
    arena_width: float
    arena_height: float
    music_enabled: bool

    @property
    def level(self) -> int:
        return self.player.level

    @property
    def xp(self) -> int:
        return self.player.xp

    @property
    def xp_to_next_level(self) -> int:
        return self.player.xp_to_next_level

    @property
    def health(self) -> int:
        return self.player.health

    @property
    def max_health(self) -> int:
        return self.player.max_health
