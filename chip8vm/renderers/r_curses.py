#!/usr/bin/env python3

"""
Curses Renderer Plugin

Draws frames in a standard Linux-style TTY Terminal, the Windows Command
Prompt, or PowerShell.

Each lit pixel is drawn as a run of inverted spaces, 'scale' characters wide,
so that the picture keeps roughly the right aspect ratio.  The top line is
reserved for the title bar.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import curses
import _curses
from .r_null import Renderer as RendererBase


class Renderer(RendererBase):
    def __init__(self, scale=None, curses_cursor_mode=0, **kwargs):
        if scale is None:
            scale = 2  # Default horizontal stretch if not supplied, or set to default

        super().__init__(scale)
        self.pixel_char = " " * scale
        self.last_screen_height = -1
        self.last_screen_width = -1
        self.refresh_needed = False
        self.cursor_mode = curses_cursor_mode
        self.screen = curses.initscr()
        curses.curs_set(self.cursor_mode)
        curses.noecho()
        curses.cbreak()

        # We have to allow one extra character, presumably for the cursor, otherwise we can't write the furthest
        # bottom-right pixel.  The extra line is for the title.
        self.pad = curses.newpad(self.height + 1, self.width * self.scale + 1)

    def draw(self, display):
        width = self.width
        scale = self.scale

        for location, pixel in enumerate(display):
            y, x = divmod(location, width)
            self.pad.addstr(y + 1, x * scale, self.pixel_char, curses.A_REVERSE if pixel else curses.A_NORMAL)

        self.refresh_needed = True
        super().draw(display)

    def refresh_display(self):
        screen_height, screen_width = self.screen.getmaxyx()  # This doesn't seem to ever change/work on Windows?!

        if screen_height == self.last_screen_height and screen_width == self.last_screen_width:
            # Fast delta update
            if self.refresh_needed:
                self.pad.refresh(0, 0, 0, 0, screen_height - 1, screen_width - 1)
                self.refresh_needed = False
        else:
            # Screen resolution changed, redraw everything
            self.screen.clear()

            if hasattr(curses, "resizeterm"):
                # This doesn't work on Windows
                curses.resizeterm(screen_height, screen_width)

            self.screen.refresh()
            self.last_screen_height = screen_height
            self.last_screen_width = screen_width
            self.refresh_needed = True

    def set_title(self, title):
        title_len = len(title)
        line_len = self.width * self.scale

        if line_len > title_len:
            self.pad.addstr(0, 0, title + " " * (line_len - title_len), curses.A_REVERSE)
            self.refresh_needed = True

        super().set_title(title)

    def shutdown(self):
        curses.nocbreak()
        curses.echo()

        if self.cursor_mode != 1:
            try:
                curses.curs_set(1)
            except _curses.error:
                pass

        curses.endwin()
        super().shutdown()

    # No Superclass for these Curses-specific methods

    def get_curses_screen(self):
        return self.screen
