"""
Audio Sinks
============
The simulation fires named sound cues and never waits on them.
A sink decides what, if anything, to play.
"""

import logging

logger = logging.getLogger(__name__)


PLAYER_ATTACK = 'player_attack'
PARTICLE_HIT_SWORD = 'particle_hit_sword'
PLAYER_TAKE_DAMAGE = 'player_take_damage'
GAME_OVER = 'game_over'
LEVEL_UP = 'level_up'
PARTICLE_COMBINE = 'particle_combine'

SOUNDS = (
    PLAYER_ATTACK, PARTICLE_HIT_SWORD, PLAYER_TAKE_DAMAGE,
    GAME_OVER, LEVEL_UP, PARTICLE_COMBINE,
)


class AudioSink:
    """Silent sink: accepts every cue and plays nothing. Subclass to make noise."""

    def play(self, name: str) -> None:
        pass

    def set_music(self, enabled: bool) -> None:
        pass


class TerminalBellAudio(AudioSink):
    """
    Rings the terminal bell on the cues that matter most.

    `write` is any callable taking a string (e.g. a bound print).
    """

    BELL_SOUNDS = (PLAYER_TAKE_DAMAGE, GAME_OVER)

    def __init__(self, write):
        self._write = write
        self.music_enabled = True

    def play(self, name: str) -> None:
        if name in self.BELL_SOUNDS:
            self._write('\a')

    def set_music(self, enabled: bool) -> None:
        # No music channel in a terminal; remember the preference only
        self.music_enabled = enabled
        logger.info('Background music %s', 'ON' if enabled else 'OFF')
