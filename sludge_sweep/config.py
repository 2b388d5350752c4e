"""
Game Configuration
===================
Tuning constants for the arena, the player, sludge and the upgrade screen.
All frame counts assume a 60 FPS tick.
"""

import math
import os
from typing import Tuple


# =============================================================================
# ARENA
# =============================================================================

TILE_SIZE = 32

LOGICAL_GAME_WIDTH_LANDSCAPE = 800
LOGICAL_GAME_HEIGHT_LANDSCAPE = 600

TARGET_FPS = 60
FRAME_TIME = 1.0 / TARGET_FPS


def arena_for_viewport(width: float, height: float) -> Tuple[int, int]:
    """Pick the logical arena size for a viewport (portrait swaps axes)."""
    if height > width:
        return LOGICAL_GAME_HEIGHT_LANDSCAPE, LOGICAL_GAME_WIDTH_LANDSCAPE
    return LOGICAL_GAME_WIDTH_LANDSCAPE, LOGICAL_GAME_HEIGHT_LANDSCAPE


# =============================================================================
# GAME FLOW
# =============================================================================

GAME_RESTART_DELAY = 180  # 3 seconds of game over screen
LEVEL_UP_PULSE_DURATION = 30

SCREEN_SHAKE_INTENSITY = 8
SCREEN_SHAKE_FRAMES = 20


# =============================================================================
# PLAYER
# =============================================================================

PLAYER_SPEED = 5.0
PLAYER_MAX_HEALTH = 10
PLAYER_XP_TO_NEXT_LEVEL = 10
XP_GROWTH = 1.5

SWORD_SWEEP_ANGLE = math.pi * 0.8
SWORD_LENGTH = TILE_SIZE * 2.5
ATTACK_DURATION = 20
ATTACK_COOLDOWN = 45

TOUCH_MOVE_THRESHOLD = TILE_SIZE * 0.3
KEY_HOLD_FRAMES = 12  # Terminals only report key-down


# =============================================================================
# SLUDGE
# =============================================================================

BASE_MAX_PARTICLES = 30
PARTICLES_PER_LEVEL_INCREASE = 5
PARTICLE_SPAWN_RATE = 0.05
MAX_PARTICLE_SIZE = 4


# =============================================================================
# UPGRADES & FX
# =============================================================================

UPGRADE_CHOICE_COUNT = 3
PURGE_PULSE_RANGE = 0.75  # Fraction of sword length
MIN_ATTACK_COOLDOWN = 15

TRAIL_SPAWN_CHANCE = 0.6
MAX_TRAIL_PARTICLES = 20


# =============================================================================
# LOGGING
# =============================================================================

LOG_FILE = os.environ.get('SLUDGE_SWEEP_LOG')
LOG_LEVEL = os.environ.get('SLUDGE_SWEEP_LOG_LEVEL', 'INFO').upper()
