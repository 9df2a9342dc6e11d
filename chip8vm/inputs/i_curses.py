#!/usr/bin/env python3

"""
Curses TTY Terminal Input Plugin

A background thread reads characters from the Curses screen and queues up the
keypad keys they map to.  Standard TTY Terminals only understand characters:
they never say when a key is 'pressed' or 'released'.

Instead, each keypad key has a release deadline.  Every time its character is
seen, the deadline is pushed a short way into the future, and the key counts
as held until the deadline passes.  Keyboard auto-repeat keeps pushing it back
while the host key is held down, so holding a key works as expected, provided
the repeat rate is faster than the hold time.

We will also quit if ESC (char 27) or CTRL+C (char 3) is detected.

Note that using the 'nodelay(True)' setting instead of blocking inside a thread
is slightly slower, and can lag, due to constant external calls.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import queue
from threading import Event, Thread
from time import perf_counter
from .i_null import Inputs as InputsBase, host_lower
from ..constants import NUM_KEYS

# How long a key stays held after its character was last seen
KEY_HOLD_TIME = 0.2

QUIT_CHARS = (27, 3)  # ESC, CTRL+C


class KeyReader(Thread):
    """
    Reads characters until told to stop, queueing the keypad key for each
    mapped character, or None once a quit character is seen.
    """

    def __init__(self, curses_screen, keymap_dict, key_queue):
        # Daemon, so the program can still exit while this is blocked waiting for a keypress
        super().__init__(daemon=True)
        self.curses_screen = curses_screen
        self.keymap_dict = keymap_dict
        self.key_queue = key_queue
        self.stop_requested = Event()

    def run(self):
        while not self.stop_requested.is_set():
            char = self.curses_screen.getch()  # Blocks, so a stop request is only seen after the next keypress

            if char < 0:
                continue

            char = host_lower(char)

            if char in QUIT_CHARS:
                self.key_queue.put(None)
                return

            hex_key = self.keymap_dict.get(char)

            if hex_key is not None:
                try:
                    self.key_queue.put(hex_key, block=False)
                except queue.Full:
                    pass  # The main thread is behind, and the key will repeat anyway

    def stop(self):
        self.stop_requested.set()


class Inputs(InputsBase):
    def __init__(self, keymap, renderer):
        super().__init__(keymap, renderer, force_lowercase=True)

        self.key_deadlines = [0.0] * NUM_KEYS
        self.key_queue = queue.Queue(NUM_KEYS)
        self.reader = KeyReader(renderer.get_curses_screen(), self.keymap_dict, self.key_queue)
        self.reader.start()

    def shutdown(self):
        # Don't wait for the thread to quit (because this is likely to happen after a keypress)
        self.reader.stop()

    def process_messages(self):
        now = perf_counter()

        while True:
            try:
                # Blocking here would lock up the main thread if nothing was pressed
                hex_key = self.key_queue.get(block=False)
            except queue.Empty:
                return False

            if hex_key is None:
                return True

            self.key_deadlines[hex_key] = now + KEY_HOLD_TIME

    def get_key_states(self):
        now = perf_counter()
        self.key_states = [deadline > now for deadline in self.key_deadlines]
        return list(self.key_states)

    def release_all(self):
        self.key_deadlines = [0.0] * NUM_KEYS
        super().release_all()
