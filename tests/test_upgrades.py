from __future__ import annotations

import random

import pytest

from sludge_sweep.components import AttackState, Experience, Health, Mover
from sludge_sweep.ecs import World
from sludge_sweep.player import create_player
from sludge_sweep.upgrades import (
    PURGE_PULSE, UPGRADES, UPGRADES_BY_ID, apply_upgrade, select_upgrades,
)


def _make_world() -> tuple[World, int]:
    world = World()
    return world, create_player(world, 800, 600)


def _apply(world: World, player: int, upgrade_id: str, times: int = 1) -> None:
    for _ in range(times):
        apply_upgrade(world, player, UPGRADES_BY_ID[upgrade_id])


def test_catalog_contents() -> None:
    assert [u.id for u in UPGRADES] == [
        'sword_length', 'attack_speed', 'move_speed',
        'max_health', 'xp_boost_permanent', PURGE_PULSE,
    ]
    assert UPGRADES_BY_ID['attack_speed'].name == 'Swift Strikes'


def test_choices_are_distinct() -> None:
    rng = random.Random(3)
    for _ in range(50):
        choices = select_upgrades(rng)
        assert len(choices) == 3
        assert len({c.id for c in choices}) == 3


def test_small_catalog_offers_everything() -> None:
    choices = select_upgrades(random.Random(3), UPGRADES[:2])
    assert sorted(c.id for c in choices) == ['attack_speed', 'sword_length']


def test_longer_sword() -> None:
    world, player = _make_world()
    _apply(world, player, 'sword_length')
    assert world.get_component(player, AttackState).length == pytest.approx(92.0)


def test_swift_strikes_floors_and_bottoms_out() -> None:
    world, player = _make_world()
    attack = world.get_component(player, AttackState)
    _apply(world, player, 'attack_speed')
    assert attack.cooldown == 38

    _apply(world, player, 'attack_speed', times=10)
    assert attack.cooldown == 15


def test_speed_boost() -> None:
    world, player = _make_world()
    _apply(world, player, 'move_speed', times=2)
    assert world.get_component(player, Mover).speed == 6.0


@pytest.mark.parametrize('current, expected', [(10, 20), (4, 14)])
def test_fortify_hull_heals_within_new_max(current: int, expected: int) -> None:
    world, player = _make_world()
    health = world.get_component(player, Health)
    health.current = current
    _apply(world, player, 'max_health')
    assert health.maximum == 20
    assert health.current == expected


def test_xp_magnet_compounds_rounded() -> None:
    world, player = _make_world()
    exp = world.get_component(player, Experience)
    _apply(world, player, 'xp_boost_permanent')
    assert exp.xp_multiplier == 1.1
    _apply(world, player, 'xp_boost_permanent')
    assert exp.xp_multiplier == 1.21


def test_purge_pulse_changes_no_stats() -> None:
    world, player = _make_world()
    _apply(world, player, PURGE_PULSE)
    assert world.get_component(player, AttackState) == AttackState()
    assert world.get_component(player, Health) == Health()
