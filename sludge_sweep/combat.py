"""
Combat Systems
===============
Sword timing, sweep hit detection, XP and contact damage.
Each system returns a list of event dicts for the presentation layer.
"""

from typing import List, Optional, Tuple
import logging
import math
import random

from .ecs import World
from .components import (
    Position, Body, Mover, Health, Experience,
    AttackState, LevelUpPulse, Sludge, PlayerTag
)
from .audio import (
    AudioSink, PLAYER_ATTACK, PARTICLE_HIT_SWORD,
    PLAYER_TAKE_DAMAGE, GAME_OVER
)
from .config import XP_GROWTH, SCREEN_SHAKE_INTENSITY, SCREEN_SHAKE_FRAMES
from .geometry import angle_in_sweep, normalize, distance
from .particles import spawn_hit_sparks
from .player import player_center

logger = logging.getLogger(__name__)


def aim_direction(center_x: float, center_y: float,
                  pointer: Optional[Tuple[float, float]],
                  facing_x: float, facing_y: float) -> Tuple[float, float]:
    """Unit vector towards the pointer, or the facing when that is degenerate."""
    if pointer is not None:
        dx, dy = normalize(pointer[0] - center_x, pointer[1] - center_y)
        if dx != 0 or dy != 0:
            return dx, dy
    return facing_x, facing_y


def attack_cooldown_system(world: World):
    for entity_id, attack in world.query(AttackState):
        if attack.cooldown_timer > 0:
            attack.cooldown_timer -= 1


def attack_start_system(world: World, pointer: Optional[Tuple[float, float]],
                        audio: AudioSink) -> List[dict]:
    """
    Swing automatically whenever the sword is idle and off cooldown.

    The sweep is centered on the aim direction, so it starts half the
    sweep angle before it.
    """
    events = []
    for entity_id, pos, body, mover, attack in world.query(
        Position, Body, Mover, AttackState
    ):
        if attack.active or attack.cooldown_timer > 0:
            continue

        attack.active = True
        attack.timer = attack.duration
        attack.cooldown_timer = attack.cooldown

        cx, cy = player_center(pos, body)
        dx, dy = aim_direction(cx, cy, pointer, mover.last_dx, mover.last_dy)
        attack.angle_start = math.atan2(dy, dx) - attack.sweep_angle / 2

        audio.play(PLAYER_ATTACK)
        events.append({'type': 'attack_started', 'angle': attack.angle_start})
    return events


def award_xp(exp: Experience, amount: int) -> bool:
    """
    Add XP and resolve a level-up. Returns True if the player levelled.

    Overflow XP carries into the next level and the threshold grows
    by half, rounded down.
    """
    exp.xp += amount
    if exp.xp < exp.xp_to_next_level:
        return False
    exp.level += 1
    exp.xp = max(0, exp.xp - exp.xp_to_next_level)
    exp.xp_to_next_level = int(math.floor(exp.xp_to_next_level * XP_GROWTH))
    logger.info('Level up! Now level %d (%d/%d XP)',
                exp.level, exp.xp, exp.xp_to_next_level)
    return True


def sweep_hit_system(world: World, rng: random.Random,
                     audio: AudioSink) -> List[dict]:
    """
    Advance the active sweep and cut every sludge the front has passed.

    Sludge inside the player's own body radius or beyond the blade is
    safe. A level-up stops the pass immediately: the remaining sludge
    is left alone this tick and the attack timer is not retired, and the
    returned events end with a 'level_up' event.
    """
    events = []
    for entity_id, pos, body, exp, attack in world.query(
        Position, Body, Experience, AttackState
    ):
        if not attack.active:
            continue

        attack.timer -= 1
        cx, cy = player_center(pos, body)
        sweep_start = attack.angle_start
        sweep_end = attack.angle_end

        # Newest sludge first
        targets = list(world.query(Position, Sludge))
        for sludge_id, s_pos, sludge in reversed(targets):
            dist = distance(cx, cy, s_pos.x, s_pos.y)
            if dist > attack.length or dist <= body.radius:
                continue
            angle = math.atan2(s_pos.y - cy, s_pos.x - cx)
            if not angle_in_sweep(angle, sweep_start, sweep_end):
                continue

            world.destroy_entity(sludge_id)
            spawn_hit_sparks(world, rng, s_pos.x, s_pos.y, sludge.color)
            audio.play(PARTICLE_HIT_SWORD)
            events.append({
                'type': 'sludge_hit',
                'x': s_pos.x, 'y': s_pos.y,
                'size': sludge.size, 'color': sludge.color,
            })

            if award_xp(exp, int(math.floor(sludge.xp_value * exp.xp_multiplier))):
                events.append({'type': 'level_up', 'level': exp.level})
                return events

        if attack.timer <= 0:
            attack.active = False
    return events


def level_up_pulse_system(world: World):
    for entity_id, pulse in world.query(LevelUpPulse):
        if pulse.active:
            pulse.timer -= 1
            if pulse.timer <= 0:
                pulse.active = False


def contact_damage_system(world: World, audio: AudioSink) -> List[dict]:
    """
    Sludge touching the player's body is absorbed and deals its damage.

    Health that drops to zero or below is clamped to zero and a
    'game_over' event is emitted; the caller owns the mode change.
    """
    events = []
    for entity_id, pos, body, health, _ in world.query(
        Position, Body, Health, PlayerTag
    ):
        cx, cy = player_center(pos, body)
        targets = list(world.query(Position, Sludge))
        for sludge_id, s_pos, sludge in reversed(targets):
            if health.current <= 0:
                break
            if distance(cx, cy, s_pos.x, s_pos.y) >= body.radius + sludge.radius:
                continue

            health.current -= sludge.damage
            world.destroy_entity(sludge_id)
            audio.play(PLAYER_TAKE_DAMAGE)
            logger.debug('Player hit by sludge! Damage: %d, Health: %d',
                         sludge.damage, health.current)
            events.append({
                'type': 'player_damaged',
                'damage': sludge.damage,
                'health': max(0, health.current),
            })
            events.append({
                'type': 'screen_shake',
                'intensity': SCREEN_SHAKE_INTENSITY,
                'frames': SCREEN_SHAKE_FRAMES,
            })

            if health.current <= 0:
                health.current = 0
                audio.play(GAME_OVER)
                logger.info('Game Over!')
                events.append({'type': 'game_over'})
    return events
