"""
Sludge Module
==============
Sludge particle factory, population upkeep, homing and merging.
"""

import logging
import random
from typing import Optional

from .ecs import World
from .components import Position, Sludge, HSL
from .config import (
    BASE_MAX_PARTICLES, PARTICLES_PER_LEVEL_INCREASE, MAX_PARTICLE_SIZE
)
from .geometry import distance

logger = logging.getLogger(__name__)


def sludge_radius(size: int) -> float:
    return size * 2 + 3


def sludge_speed(size: int, rng: random.Random) -> float:
    """Small sludge is fast, big sludge crawls."""
    return max(0.25, (rng.random() * 0.75 + 0.25) / (size * 0.5))


def sludge_color(size: int, rng: random.Random) -> HSL:
    """Murky yellow-green, lighter for bigger tiers."""
    return (
        rng.random() * 40 + 70,
        rng.random() * 30 + 40,
        rng.random() * 20 + 20 * size,
    )


def create_sludge(world: World, rng: random.Random,
                  arena_width: float, arena_height: float,
                  x: Optional[float] = None, y: Optional[float] = None,
                  size: int = 1) -> int:
    """
    Create a sludge particle.

    Without explicit coordinates it lands anywhere in the arena. The size
    is clamped into the valid tier range; radius, damage and XP all
    derive from it.
    """
    size = max(1, min(MAX_PARTICLE_SIZE, int(size)))
    if x is None:
        x = rng.random() * arena_width
    if y is None:
        y = rng.random() * arena_height

    return world.create_entity(
        Position(x, y),
        Sludge(
            size=size,
            radius=sludge_radius(size),
            damage=size,
            xp_value=size,
            speed=sludge_speed(size, rng),
            color=sludge_color(size, rng),
        ),
    )


def max_sludge_for_level(level: int) -> int:
    return BASE_MAX_PARTICLES + (level - 1) * PARTICLES_PER_LEVEL_INCREASE


def sludge_spawn_system(world: World, rng: random.Random, level: int,
                        spawn_rate: float,
                        arena_width: float, arena_height: float) -> Optional[int]:
    """Roll for one new random sludge while under the level's cap."""
    if world.count(Sludge) >= max_sludge_for_level(level):
        return None
    if rng.random() < spawn_rate:
        return create_sludge(world, rng, arena_width, arena_height)
    return None


def sludge_attraction_system(world: World, target_x: float, target_y: float):
    """
    Step every sludge toward a target point at its own speed.

    Sludge already sitting within its own radius of the target holds
    still, which also rules out a zero-length direction.
    """
    for entity_id, pos, sludge in world.query(Position, Sludge):
        dx = target_x - pos.x
        dy = target_y - pos.y
        dist = distance(pos.x, pos.y, target_x, target_y)
        if dist > sludge.radius:
            pos.x += dx / dist * sludge.speed
            pos.y += dy / dist * sludge.speed


def _find_overlapping_pair(world: World):
    blobs = list(world.query(Position, Sludge))
    for i, (id_a, pos_a, sludge_a) in enumerate(blobs):
        for id_b, pos_b, sludge_b in blobs[i + 1:]:
            dist = distance(pos_a.x, pos_a.y, pos_b.x, pos_b.y)
            if dist < sludge_a.radius + sludge_b.radius:
                return (id_a, pos_a, sludge_a), (id_b, pos_b, sludge_b)
    return None


def sludge_merge_system(world: World, rng: random.Random,
                        arena_width: float, arena_height: float) -> int:
    """
    Fuse overlapping sludge pairs into one bigger blob at their midpoint.

    The scan starts over after every merge, so a fresh blob can merge
    again in the same tick. Returns the number of merges.
    """
    merges = 0
    pair = _find_overlapping_pair(world)
    while pair is not None:
        (id_a, pos_a, sludge_a), (id_b, pos_b, sludge_b) = pair
        world.destroy_entity(id_a)
        world.destroy_entity(id_b)
        combined = min(MAX_PARTICLE_SIZE, sludge_a.size + sludge_b.size)
        create_sludge(
            world, rng, arena_width, arena_height,
            x=(pos_a.x + pos_b.x) / 2,
            y=(pos_a.y + pos_b.y) / 2,
            size=combined,
        )
        logger.debug('Sludge merged: %d + %d -> %d',
                     sludge_a.size, sludge_b.size, combined)
        merges += 1
        pair = _find_overlapping_pair(world)
    return merges


def clear_sludge_near(world: World, x: float, y: float, radius: float) -> int:
    """Destroy every sludge within radius of a point. Returns the count."""
    cleared = 0
    for entity_id, pos, _ in world.query(Position, Sludge):
        if distance(pos.x, pos.y, x, y) <= radius:
            world.destroy_entity(entity_id)
            cleared += 1
    return cleared
