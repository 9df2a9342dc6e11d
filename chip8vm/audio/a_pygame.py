#!/usr/bin/env python3

"""
PyGame Audio Plugin

Plays the machine's buzzer through PyGame / SDL.

The buzzer only has an 'on' or 'off' status, so it is emulated by looping a
square wave.  A single period of the wave is built at start-up, stretched to
fit an 8-bit PyGame / SDL buffer at the playback frequency.

The machine asks for a beep once per step while its sound timer runs.  A
request starts a short burst of the looped wave unless one is already
playing, so the tone carries on for as long as the requests keep coming, and
falls silent shortly after they stop.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .a_null import Audio as AudioBase

PLAYBACK_FREQUENCY = 44100.0
BUZZER_FREQUENCY = 440.0
BEEP_DURATION_MS = 50
DEFAULT_VOLUME = 0.1


class Audio(AudioBase):
    def __init__(self):
        self.channel = None
        pygame.mixer.pre_init(int(PLAYBACK_FREQUENCY), size=8, channels=1, buffer=1, allowedchanges=0)
        pygame.mixer.init()
        self.sound = pygame.mixer.Sound(self._build_square_wave(BUZZER_FREQUENCY))
        self.sound.set_volume(DEFAULT_VOLUME)
        super().__init__()

    def _build_square_wave(self, frequency):
        # One full period: high for the first half, low for the second
        period = int(PLAYBACK_FREQUENCY / frequency)
        buffer = memoryview(bytearray(period))

        for pos in range(period // 2):
            buffer[pos] = 0xFF

        return buffer

    def beep(self):
        # If there is already a burst playing, let it run rather than restarting the waveform mid-period
        if self.channel is None or not self.channel.get_busy():
            self.channel = self.sound.play(-1, maxtime=BEEP_DURATION_MS)

        super().beep()

    def shutdown(self):
        if self.sound:
            self.sound.stop()

        pygame.mixer.quit()
        super().shutdown()
