#!/usr/bin/env python3

"""
Curses Audio Plugin

Allows beeps to be played in the Terminal window (no sampled sound)!

Terminal beeps are a fixed length CTRL+G (character 7 - BEL), and cannot be
stopped once started.  Since the machine asks for a beep on every step while
the sound timer runs, only the first beep of each run of steps is sent,
otherwise the terminal would be flooded with bells.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import curses
from time import perf_counter
from .a_null import Audio as AudioBase

# Beep requests closer together than this are treated as one continuous tone
BEEP_GAP = 0.1


class Audio(AudioBase):
    def __init__(self):
        self.last_beep_time = None
        super().__init__()

    def beep(self):
        this_time = perf_counter()

        if self.last_beep_time is None or this_time - self.last_beep_time > BEEP_GAP:
            curses.beep()

        self.last_beep_time = this_time
        super().beep()
