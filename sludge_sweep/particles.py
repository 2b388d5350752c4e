"""
Cosmetic Particle System
=========================
Movement trails and sword hit sparks. None of this feeds back into
gameplay; it only exists so the presentation layer has something to draw.
"""

import random

from .ecs import World
from .components import (
    Position, Velocity, Lifetime, Fade,
    TrailTag, SparkTag, HSL
)
from .config import MAX_TRAIL_PARTICLES


TRAIL_COLOR: HSL = (240.0, 100.0, 93.0)


def spawn_trail_particle(world: World, rng: random.Random,
                         center_x: float, center_y: float,
                         body_width: float, body_height: float) -> int:
    """Spawn a faint trail puff jittered around a body center."""
    entity_id = world.create_entity(
        Position(
            center_x + (rng.random() - 0.5) * (body_width / 4),
            center_y + (rng.random() - 0.5) * (body_height / 4),
        ),
        Velocity((rng.random() - 0.5) * 0.3, (rng.random() - 0.5) * 0.3),
        Lifetime(15 + rng.randrange(10)),
        Fade(size=rng.random() * 2 + 2, color=TRAIL_COLOR, alpha=0.4),
        TrailTag(),
    )

    # Keep the trail short: retire the oldest puffs first
    trail_ids = list(world.get_entities_with(TrailTag))
    for old_id in trail_ids[:max(0, len(trail_ids) - MAX_TRAIL_PARTICLES)]:
        world.destroy_entity(old_id)

    return entity_id


def lighten(color: HSL, amount: float = 30.0) -> HSL:
    hue, saturation, lightness = color
    return hue, saturation, min(100.0, lightness + amount)


def spawn_hit_sparks(world: World, rng: random.Random,
                     x: float, y: float, base_color: HSL):
    """Spawn a small burst of sparks where a sludge was cut."""
    color = lighten(base_color)
    for _ in range(4 + rng.randrange(4)):
        world.create_entity(
            Position(x, y),
            Velocity((rng.random() - 0.5) * 3.5, (rng.random() - 0.5) * 3.5),
            Lifetime(20 + rng.randrange(10)),
            Fade(
                size=rng.random() * 2.5 + 1,
                shrink=0.96,
                drag=0.92,
                color=color,
                alpha=0.6 + rng.random() * 0.4,
            ),
            SparkTag(),
        )


def fx_system(world: World):
    """
    Age all cosmetic particles.

    Moves by velocity, then applies drag and shrink; expired or
    vanishingly small particles are destroyed.
    """
    for entity_id, pos, vel, life, fade in world.query(
        Position, Velocity, Lifetime, Fade
    ):
        pos.x += vel.x
        pos.y += vel.y
        vel.x *= fade.drag
        vel.y *= fade.drag
        fade.size *= fade.shrink

        life.frames_remaining -= 1
        if life.frames_remaining <= 0 or fade.size < 0.5:
            world.destroy_entity(entity_id)
