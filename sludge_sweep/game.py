"""
Game State
===========
The simulation core: owns the ECS world, the active mode and the
per-tick update. Knows nothing about terminals, keys or sound devices.
"""

from typing import List, Optional, Sequence
import logging
import random

from .ecs import World
from .components import (
    Position, Body, Mover, Health, Experience, AttackState,
    LevelUpPulse, Sludge, Lifetime, Fade, TrailTag, SparkTag, Mode
)
from .audio import AudioSink, LEVEL_UP, PARTICLE_COMBINE
from .config import (
    LOGICAL_GAME_WIDTH_LANDSCAPE, LOGICAL_GAME_HEIGHT_LANDSCAPE,
    GAME_RESTART_DELAY, LEVEL_UP_PULSE_DURATION, BASE_MAX_PARTICLES,
    PARTICLE_SPAWN_RATE, PURGE_PULSE_RANGE
)
from .player import (
    InputFrame, create_player, player_center,
    player_movement_system, clamp_to_arena
)
from .sludge import (
    create_sludge, sludge_spawn_system, sludge_attraction_system,
    sludge_merge_system, clear_sludge_near
)
from .combat import (
    attack_cooldown_system, attack_start_system, sweep_hit_system,
    level_up_pulse_system, contact_damage_system
)
from .particles import fx_system
from .upgrades import Upgrade, UPGRADES, PURGE_PULSE, select_upgrades, apply_upgrade
from .snapshot import Snapshot, PlayerView, SludgeView, FxView, UpgradeView

logger = logging.getLogger(__name__)


class GameState:
    """
    Central game state container.

    Drive it with one update() per display frame plus the discrete
    input methods (toggle_pause, accept, select_upgrade, toggle_music,
    set_arena_size). After every one of those calls `snapshot` holds a
    fresh frozen copy of the visible state.
    """

    def __init__(self, arena_width: float = LOGICAL_GAME_WIDTH_LANDSCAPE,
                 arena_height: float = LOGICAL_GAME_HEIGHT_LANDSCAPE,
                 audio: Optional[AudioSink] = None,
                 rng: Optional[random.Random] = None,
                 spawn_rate: float = PARTICLE_SPAWN_RATE,
                 initial_sludge: int = BASE_MAX_PARTICLES // 2,
                 upgrade_catalog: Sequence[Upgrade] = UPGRADES):
        _check_arena(arena_width, arena_height)
        self.arena_width = arena_width
        self.arena_height = arena_height
        self.audio = audio if audio is not None else AudioSink()
        self.rng = rng if rng is not None else random.Random()
        self.spawn_rate = spawn_rate
        self.initial_sludge = initial_sludge
        self.upgrade_catalog = upgrade_catalog
        self.music_enabled = True

        self.world: Optional[World] = None
        self.player_id: Optional[int] = None
        self.mode = Mode.RUNNING
        self.restart_timer = 0
        self.upgrade_choices: List[Upgrade] = []
        self.snapshot: Optional[Snapshot] = None

        self.reset()

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def reset(self):
        """Start a fresh run: new world, new player, seeded sludge."""
        self.world = World()
        self.player_id = create_player(self.world, self.arena_width, self.arena_height)
        for _ in range(min(self.initial_sludge, BASE_MAX_PARTICLES)):
            create_sludge(self.world, self.rng, self.arena_width, self.arena_height)

        self.mode = Mode.RUNNING
        self.restart_timer = 0
        self.upgrade_choices = []
        logger.info('Game Reset/Started.')
        self.publish()

    def set_arena_size(self, width: float, height: float):
        """Adopt a new arena rectangle and pull the player back inside it."""
        _check_arena(width, height)
        if (width, height) != (self.arena_width, self.arena_height):
            logger.info('Arena resized to %sx%s', width, height)
        self.arena_width = width
        self.arena_height = height
        self._clamp_player()
        self.publish()

    def _clamp_player(self):
        pos = self.world.get_component(self.player_id, Position)
        body = self.world.get_component(self.player_id, Body)
        clamp_to_arena(pos, body, self.arena_width, self.arena_height)

    # -------------------------------------------------------------------------
    # Tick
    # -------------------------------------------------------------------------

    def update(self, frame: Optional[InputFrame] = None) -> List[dict]:
        """
        Run one fixed-step tick of game logic.

        Returns the events produced this tick, in order.
        """
        if frame is None:
            frame = InputFrame()
        events = self._tick(frame)
        self.world.process_dead_entities()
        self.publish()
        return events

    def _tick(self, frame: InputFrame) -> List[dict]:
        if self.mode in (Mode.UPGRADE_SELECT, Mode.PAUSED):
            return []

        if self.mode == Mode.GAME_OVER:
            self.restart_timer -= 1
            if self.restart_timer <= 0:
                self.reset()
                return [{'type': 'game_reset'}]
            return []

        # Arena may have changed between ticks
        self._clamp_player()

        world = self.world
        events = []

        player_movement_system(world, frame, self.arena_width,
                               self.arena_height, self.rng)

        exp = world.get_component(self.player_id, Experience)
        sludge_spawn_system(world, self.rng, exp.level, self.spawn_rate,
                            self.arena_width, self.arena_height)

        cx, cy = self._player_center()
        sludge_attraction_system(world, cx, cy)
        sludge_merge_system(world, self.rng, self.arena_width, self.arena_height)

        attack_cooldown_system(world)
        events.extend(attack_start_system(world, frame.pointer, self.audio))

        hit_events = sweep_hit_system(world, self.rng, self.audio)
        events.extend(hit_events)
        if hit_events and hit_events[-1]['type'] == 'level_up':
            self._enter_upgrade_select()
            return events

        level_up_pulse_system(world)
        fx_system(world)

        damage_events = contact_damage_system(world, self.audio)
        events.extend(damage_events)
        if any(event['type'] == 'game_over' for event in damage_events):
            self.mode = Mode.GAME_OVER
            self.restart_timer = GAME_RESTART_DELAY

        return events

    def _player_center(self):
        pos = self.world.get_component(self.player_id, Position)
        body = self.world.get_component(self.player_id, Body)
        return player_center(pos, body)

    # -------------------------------------------------------------------------
    # Upgrade episode
    # -------------------------------------------------------------------------

    def _enter_upgrade_select(self):
        choices = select_upgrades(self.rng, self.upgrade_catalog)
        if not choices:
            # Nothing to offer; an episode with no choices could never close
            return
        self.upgrade_choices = choices
        self.mode = Mode.UPGRADE_SELECT

    def select_upgrade(self, index: int) -> List[dict]:
        """
        Apply the chosen upgrade and resume play.

        Ignored outside the upgrade screen or for an index that is not
        on offer.
        """
        if self.mode != Mode.UPGRADE_SELECT:
            return []
        if index < 0 or index >= len(self.upgrade_choices):
            return []

        upgrade = self.upgrade_choices[index]
        apply_upgrade(self.world, self.player_id, upgrade)
        events = [{'type': 'upgrade_applied', 'id': upgrade.id}]

        if upgrade.id == PURGE_PULSE:
            events.append(self._purge_pulse())

        self.mode = Mode.RUNNING
        self.upgrade_choices = []
        self.audio.play(LEVEL_UP)

        pulse = self.world.get_component(self.player_id, LevelUpPulse)
        pulse.active = True
        pulse.timer = LEVEL_UP_PULSE_DURATION

        self.world.process_dead_entities()
        self.publish()
        return events

    def _purge_pulse(self) -> dict:
        """Wipe sludge near the player. No XP is granted for it."""
        attack = self.world.get_component(self.player_id, AttackState)
        cx, cy = self._player_center()
        cleared = clear_sludge_near(self.world, cx, cy,
                                    attack.length * PURGE_PULSE_RANGE)
        self.audio.play(PARTICLE_COMBINE)
        logger.debug('Purge pulse cleared %d sludge', cleared)
        return {'type': 'purge_pulse', 'cleared': cleared}

    # -------------------------------------------------------------------------
    # Discrete input events
    # -------------------------------------------------------------------------

    def toggle_pause(self):
        """Pause from Running, resume from Paused; ignored otherwise."""
        if self.mode == Mode.RUNNING:
            self.mode = Mode.PAUSED
            logger.info('Game Paused')
        elif self.mode == Mode.PAUSED:
            self.mode = Mode.RUNNING
            logger.info('Game Resumed')
        self.publish()

    def accept(self):
        """Any accept input (space, enter, tap) resumes a paused game."""
        if self.mode == Mode.PAUSED:
            self.mode = Mode.RUNNING
            logger.info('Game Resumed by accept input')
            self.publish()

    def toggle_music(self):
        self.music_enabled = not self.music_enabled
        logger.info('Music %s', 'enabled' if self.music_enabled else 'disabled')
        self.audio.set_music(self.music_enabled)
        self.publish()

    # -------------------------------------------------------------------------
    # Snapshot
    # -------------------------------------------------------------------------

    def publish(self) -> Snapshot:
        """Rebuild the frozen snapshot of everything visible."""
        self.snapshot = Snapshot(
            mode=self.mode,
            player=self._player_view(),
            particles=tuple(
                SludgeView(pos.x, pos.y, s.size, s.radius, s.damage,
                           s.xp_value, s.speed, s.color)
                for _, pos, s in self.world.query(Position, Sludge)
            ),
            trail_fx=self._fx_views(TrailTag),
            spark_fx=self._fx_views(SparkTag),
            upgrade_choices=tuple(
                UpgradeView(u.id, u.name, u.description)
                for u in self.upgrade_choices
            ),
            restart_timer=self.restart_timer,
            arena_width=self.arena_width,
            arena_height=self.arena_height,
            music_enabled=self.music_enabled,
        )
        return self.snapshot

    def _fx_views(self, tag):
        return tuple(
            FxView(pos.x, pos.y, fade.size, fade.color, fade.alpha,
                   life.frames_remaining)
            for _, pos, fade, life, _ in self.world.query(Position, Fade, Lifetime, tag)
        )

    def _player_view(self) -> PlayerView:
        get = self.world.get_component
        pid = self.player_id
        pos = get(pid, Position)
        body = get(pid, Body)
        mover = get(pid, Mover)
        health = get(pid, Health)
        exp = get(pid, Experience)
        attack = get(pid, AttackState)
        pulse = get(pid, LevelUpPulse)
        return PlayerView(
            x=pos.x, y=pos.y, width=body.width, height=body.height,
            speed=mover.speed,
            health=health.current, max_health=health.maximum,
            level=exp.level, xp=exp.xp,
            xp_to_next_level=exp.xp_to_next_level,
            xp_multiplier=exp.xp_multiplier,
            sweep_angle=attack.sweep_angle, sword_length=attack.length,
            attack_duration=attack.duration, attack_cooldown=attack.cooldown,
            is_attacking=attack.active, attack_timer=attack.timer,
            attack_cooldown_timer=attack.cooldown_timer,
            attack_angle_start=attack.angle_start,
            attack_angle_end=attack.angle_end,
            last_dx=mover.last_dx, last_dy=mover.last_dy,
            current_move_dx=mover.current_move_dx,
            current_move_dy=mover.current_move_dy,
            is_level_up_pulse_active=pulse.active,
            level_up_pulse_timer=pulse.timer,
        )


def _check_arena(width: float, height: float):
    if width <= 0 or height <= 0:
        raise ValueError(f'Arena must have positive size, got {width}x{height}')

