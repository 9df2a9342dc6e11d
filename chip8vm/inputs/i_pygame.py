#!/usr/bin/env python3

"""
PyGame Input Plugin

Unlike the Curses plugin, this sees real key 'press' and 'release' events, so
the keypad snapshot is simply latched from them as they arrive.  Events are
only pumped when the driver asks (at 60Hz), as constantly checking the queue
is time consuming.

If the window loses focus, every key is released, since the matching
'release' events will go to some other window.

If the application is quit (or ESC is released), the driver is told to stop,
and it will then shut PyGame down, so any linked Renderer must be able to
handle that.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .i_null import Inputs as InputsBase


class Inputs(InputsBase):
    def __init__(self, keymap, renderer):
        super().__init__(keymap, renderer)

        # Key events only differ in the state they latch
        self.key_event_states = {
            pygame.KEYDOWN: True,
            pygame.KEYUP:   False
        }

    def process_messages(self):
        quit_program = False

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                quit_program = True  # Process more events, even if planning to quit
            elif event.type == pygame.WINDOWFOCUSLOST:
                self.release_all()
            else:
                key_down = self.key_event_states.get(event.type)

                if key_down is None:
                    continue

                if not key_down and event.key == pygame.K_ESCAPE:
                    quit_program = True
                    continue

                hex_key = self.keymap_dict.get(event.key)

                if hex_key is not None:
                    self.key_states[hex_key] = key_down

        return quit_program
