from __future__ import annotations

import math
import random

import pytest

from sludge_sweep.audio import (
    GAME_OVER, PARTICLE_HIT_SWORD, PLAYER_ATTACK, PLAYER_TAKE_DAMAGE,
)
from sludge_sweep.combat import (
    aim_direction, attack_cooldown_system, attack_start_system, award_xp,
    contact_damage_system, sweep_hit_system,
)
from sludge_sweep.components import (
    AttackState, Experience, Health, Sludge, SparkTag,
)
from sludge_sweep.ecs import World
from sludge_sweep.player import create_player
from sludge_sweep.sludge import create_sludge

# Player center in an 800x600 arena
CX, CY = 400, 300


def _make_world() -> tuple[World, int]:
    world = World()
    return world, create_player(world, 800, 600)


def _full_sweep(world: World, player: int) -> AttackState:
    """Arm an attack facing right that finishes on the next tick."""
    attack = world.get_component(player, AttackState)
    attack.active = True
    attack.timer = 1
    attack.angle_start = -0.4 * math.pi
    attack.cooldown_timer = 100
    return attack


def test_aim_uses_pointer_then_facing() -> None:
    assert aim_direction(0, 0, (0, 10), 1, 0) == pytest.approx((0, 1))
    assert aim_direction(0, 0, (0, 0), 1, 0) == (1, 0)
    assert aim_direction(0, 0, None, -1, 0) == (-1, 0)


def test_attack_starts_centered_on_pointer(audio) -> None:
    world, player = _make_world()
    events = attack_start_system(world, (CX, CY + 100), audio)

    attack = world.get_component(player, AttackState)
    assert attack.active
    assert attack.timer == 20
    assert attack.cooldown_timer == 45
    assert attack.angle_start == pytest.approx(0.5 * math.pi - 0.4 * math.pi)
    assert [e['type'] for e in events] == ['attack_started']
    assert audio.played == [PLAYER_ATTACK]


def test_attack_without_pointer_follows_facing(audio) -> None:
    world, player = _make_world()
    attack_start_system(world, None, audio)
    assert world.get_component(player, AttackState).angle_start == pytest.approx(-0.4 * math.pi)


def test_attack_waits_for_cooldown(audio) -> None:
    world, player = _make_world()
    attack = world.get_component(player, AttackState)
    attack.cooldown_timer = 2

    assert attack_start_system(world, None, audio) == []
    attack_cooldown_system(world)
    attack_cooldown_system(world)
    assert attack.cooldown_timer == 0
    assert len(attack_start_system(world, None, audio)) == 1
    # Already swinging
    assert attack_start_system(world, None, audio) == []


def test_sweep_progress_reaches_full_arc() -> None:
    attack = AttackState(active=True, timer=20, angle_start=0.0)
    assert attack.progress == 0
    attack.timer = 10
    assert attack.angle_end == pytest.approx(0.4 * math.pi)
    attack.timer = 0
    assert attack.angle_end == pytest.approx(0.8 * math.pi)


def test_sweep_hits_only_between_body_and_blade(rng, audio) -> None:
    world, player = _make_world()
    _full_sweep(world, player)
    inside_body = create_sludge(world, rng, 800, 600, x=CX + 10, y=CY)
    in_reach = create_sludge(world, rng, 800, 600, x=CX + 60, y=CY)
    too_far = create_sludge(world, rng, 800, 600, x=CX + 100, y=CY)
    behind = create_sludge(world, rng, 800, 600, x=CX - 60, y=CY)

    events = sweep_hit_system(world, rng, audio)

    assert [e['type'] for e in events] == ['sludge_hit']
    assert not world.is_alive(in_reach)
    for survivor in (inside_body, too_far, behind):
        assert world.is_alive(survivor)
    assert world.get_component(player, Experience).xp == 1
    assert audio.played == [PARTICLE_HIT_SWORD]
    assert 4 <= world.count(SparkTag) <= 7


def test_sweep_only_covers_arc_swept_so_far(rng, audio) -> None:
    world, player = _make_world()
    attack = _full_sweep(world, player)
    attack.timer = 20
    # After one tick the front is barely past the start
    target = create_sludge(world, rng, 800, 600, x=CX + 60, y=CY)

    assert sweep_hit_system(world, rng, audio) == []
    assert world.is_alive(target)
    assert attack.timer == 19


def test_attack_retires_when_timer_runs_out(rng, audio) -> None:
    world, player = _make_world()
    attack = _full_sweep(world, player)
    sweep_hit_system(world, rng, audio)
    assert not attack.active
    assert attack.cooldown_timer == 100


def test_xp_multiplier_floors_award(rng, audio) -> None:
    world, player = _make_world()
    _full_sweep(world, player)
    exp = world.get_component(player, Experience)
    exp.xp_multiplier = 1.21
    create_sludge(world, rng, 800, 600, x=CX + 60, y=CY, size=2)

    sweep_hit_system(world, rng, audio)
    assert exp.xp == 2


def test_award_xp_carries_overflow() -> None:
    exp = Experience(xp=9)
    assert award_xp(exp, 3)
    assert (exp.level, exp.xp, exp.xp_to_next_level) == (2, 2, 15)

    assert not award_xp(exp, 12)
    assert award_xp(exp, 1)
    assert (exp.level, exp.xp, exp.xp_to_next_level) == (3, 0, 22)


def test_level_up_stops_the_pass(rng, audio) -> None:
    world, player = _make_world()
    attack = _full_sweep(world, player)
    world.get_component(player, Experience).xp = 9
    first = create_sludge(world, rng, 800, 600, x=CX + 60, y=CY + 5)
    newest = create_sludge(world, rng, 800, 600, x=CX + 60, y=CY - 5)

    events = sweep_hit_system(world, rng, audio)

    assert [e['type'] for e in events] == ['sludge_hit', 'level_up']
    assert events[-1]['level'] == 2
    assert not world.is_alive(newest)
    assert world.is_alive(first)
    # The pass ended before the attack was retired
    assert attack.active


def test_contact_damage_absorbs_sludge(rng, audio) -> None:
    world, player = _make_world()
    blob = create_sludge(world, rng, 800, 600, x=CX, y=CY, size=2)
    create_sludge(world, rng, 800, 600, x=CX + 30, y=CY)

    events = contact_damage_system(world, audio)

    assert [e['type'] for e in events] == ['player_damaged', 'screen_shake']
    assert events[0]['damage'] == 2
    assert events[1]['intensity'] == 8
    assert events[1]['frames'] == 20
    assert world.get_component(player, Health).current == 8
    assert not world.is_alive(blob)
    assert world.count(Sludge) == 1
    assert audio.played == [PLAYER_TAKE_DAMAGE]


def test_lethal_contact_clamps_health_and_ends_game(rng, audio) -> None:
    world, player = _make_world()
    health = world.get_component(player, Health)
    health.current = 1
    create_sludge(world, rng, 800, 600, x=CX, y=CY, size=2)
    create_sludge(world, rng, 800, 600, x=CX + 5, y=CY, size=2)

    events = contact_damage_system(world, audio)

    assert health.current == 0
    assert [e['type'] for e in events].count('game_over') == 1
    assert events[-1] == {'type': 'game_over'}
    assert audio.played == [PLAYER_TAKE_DAMAGE, GAME_OVER]
