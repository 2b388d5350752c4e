from __future__ import annotations

import random

import pytest

from sludge_sweep.components import Position, Sludge
from sludge_sweep.ecs import World
from sludge_sweep.sludge import (
    clear_sludge_near, create_sludge, max_sludge_for_level,
    sludge_attraction_system, sludge_merge_system, sludge_spawn_system,
)


def _sludge(world: World) -> list:
    return [(pos, sludge) for _, pos, sludge in world.query(Position, Sludge)]


def test_size_derived_attributes() -> None:
    world = World()
    rng = random.Random(7)
    for size in range(1, 5):
        entity = create_sludge(world, rng, 800, 600, x=10, y=10, size=size)
        sludge = world.get_component(entity, Sludge)
        assert sludge.radius == size * 2 + 3
        assert sludge.damage == size
        assert sludge.xp_value == size
        assert sludge.speed >= 0.25
        hue, saturation, _ = sludge.color
        assert 70 <= hue <= 110
        assert 40 <= saturation <= 70


def test_size_clamped_to_tiers() -> None:
    world = World()
    rng = random.Random(7)
    big = create_sludge(world, rng, 800, 600, size=9)
    small = create_sludge(world, rng, 800, 600, size=0)
    assert world.get_component(big, Sludge).size == 4
    assert world.get_component(small, Sludge).size == 1


def test_two_small_sludge_merge_at_midpoint() -> None:
    world = World()
    rng = random.Random(7)
    create_sludge(world, rng, 800, 600, x=100, y=100)
    create_sludge(world, rng, 800, 600, x=103, y=100)

    assert sludge_merge_system(world, rng, 800, 600) == 1
    world.process_dead_entities()

    [(pos, sludge)] = _sludge(world)
    assert (pos.x, pos.y) == (101.5, 100)
    assert sludge.size == 2
    assert sludge.radius == 7
    assert sludge.damage == 2
    assert sludge.xp_value == 2


def test_merge_caps_at_largest_tier() -> None:
    world = World()
    rng = random.Random(7)
    create_sludge(world, rng, 800, 600, x=200, y=200, size=3)
    create_sludge(world, rng, 800, 600, x=205, y=200, size=3)
    sludge_merge_system(world, rng, 800, 600)

    [(_, sludge)] = _sludge(world)
    assert sludge.size == 4


def test_merge_rescans_after_each_fusion() -> None:
    world = World()
    rng = random.Random(7)
    for _ in range(3):
        create_sludge(world, rng, 800, 600, x=300, y=300)

    assert sludge_merge_system(world, rng, 800, 600) == 2
    [(_, sludge)] = _sludge(world)
    assert sludge.size == 3


def test_distant_sludge_do_not_merge() -> None:
    world = World()
    rng = random.Random(7)
    create_sludge(world, rng, 800, 600, x=100, y=100)
    create_sludge(world, rng, 800, 600, x=110, y=100)
    assert sludge_merge_system(world, rng, 800, 600) == 0
    assert world.count(Sludge) == 2


def test_attraction_steps_toward_target() -> None:
    world = World()
    rng = random.Random(7)
    far = create_sludge(world, rng, 800, 600, x=100, y=300)
    near = create_sludge(world, rng, 800, 600, x=402, y=300)

    sludge_attraction_system(world, 400, 300)

    far_pos = world.get_component(far, Position)
    assert far_pos.x == pytest.approx(100 + world.get_component(far, Sludge).speed)
    assert far_pos.y == pytest.approx(300)
    # Already within its own radius
    assert world.get_component(near, Position).x == 402


def test_spawn_respects_level_cap() -> None:
    world = World()
    rng = random.Random(7)
    assert max_sludge_for_level(1) == 30
    assert max_sludge_for_level(3) == 40

    assert sludge_spawn_system(world, rng, 1, 1.0, 800, 600) is not None
    assert sludge_spawn_system(world, rng, 1, 0.0, 800, 600) is None

    for _ in range(29):
        create_sludge(world, rng, 800, 600)
    assert sludge_spawn_system(world, rng, 1, 1.0, 800, 600) is None
    assert sludge_spawn_system(world, rng, 2, 1.0, 800, 600) is not None


def test_clear_sludge_near() -> None:
    world = World()
    rng = random.Random(7)
    create_sludge(world, rng, 800, 600, x=400, y=340)
    create_sludge(world, rng, 800, 600, x=400, y=500)

    assert clear_sludge_near(world, 400, 300, 60) == 1
    assert world.count(Sludge) == 1
