"""
Upgrade System
===============
Upgrade catalog, random choice generation and effect application.
"""

from dataclasses import dataclass
from typing import Callable, List, Tuple
import logging
import math
import random

from .ecs import World
from .components import Health, Experience, AttackState, Mover
from .config import MIN_ATTACK_COOLDOWN, UPGRADE_CHOICE_COUNT

logger = logging.getLogger(__name__)


# =============================================================================
# UPGRADE DEFINITIONS
# =============================================================================

@dataclass(frozen=True)
class Upgrade:
    """
    One catalog entry.

    `effect` mutates the player's components in place. The purge pulse
    has no stat effect; its area clear is handled by the game state.
    """
    id: str
    name: str
    description: str
    effect: Callable[[World, int], None]


def _longer_sword(world: World, player_id: int):
    attack = world.get_component(player_id, AttackState)
    attack.length *= 1.15


def _swift_strikes(world: World, player_id: int):
    attack = world.get_component(player_id, AttackState)
    attack.cooldown = max(MIN_ATTACK_COOLDOWN, int(math.floor(attack.cooldown * 0.85)))


def _speed_boost(world: World, player_id: int):
    world.get_component(player_id, Mover).speed += 0.5


def _fortify_hull(world: World, player_id: int):
    health = world.get_component(player_id, Health)
    health.maximum += 10
    health.current = min(health.maximum, health.current + 10)


def _xp_magnet(world: World, player_id: int):
    exp = world.get_component(player_id, Experience)
    exp.xp_multiplier = round(exp.xp_multiplier * 1.1, 2)


def _no_stat_change(world: World, player_id: int):
    pass


PURGE_PULSE = 'aoe_pulse'

UPGRADES: Tuple[Upgrade, ...] = (
    Upgrade('sword_length', 'Longer Sword',
            'Increases attack range by 15%. Slice more sludge!',
            _longer_sword),
    Upgrade('attack_speed', 'Swift Strikes',
            'Reduces attack cooldown by 15%. Attack faster!',
            _swift_strikes),
    Upgrade('move_speed', 'Speed Boost',
            'Increases movement speed by 0.5. Zoom zoom!',
            _speed_boost),
    Upgrade('max_health', 'Fortify Hull',
            'Increases Max Health by 10 and heals 10 HP.',
            _fortify_hull),
    Upgrade('xp_boost_permanent', 'XP Magnet',
            'Permanently increases all XP gained by 10%.',
            _xp_magnet),
    Upgrade(PURGE_PULSE, 'Purge Pulse',
            'Unleash an energy pulse, clearing nearby particles.',
            _no_stat_change),
)

UPGRADES_BY_ID = {upgrade.id: upgrade for upgrade in UPGRADES}


# =============================================================================
# SELECTION
# =============================================================================

def select_upgrades(rng: random.Random, catalog=UPGRADES,
                    count: int = UPGRADE_CHOICE_COUNT) -> List[Upgrade]:
    """Draw up to `count` distinct upgrades in random order."""
    return rng.sample(list(catalog), min(count, len(catalog)))


# =============================================================================
# APPLICATION
# =============================================================================

def apply_upgrade(world: World, player_id: int, upgrade: Upgrade):
    """Apply a single upgrade's stat effect to the player."""
    upgrade.effect(world, player_id)
    logger.info('Upgrade applied: %s', upgrade.name)
