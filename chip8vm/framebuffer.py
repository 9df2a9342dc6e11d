#!/usr/bin/env python3

"""
Framebuffer Emulator

Pixels are written here, and are only painted to the actual display (the host
rendering system) when the renderer gets round to it, usually at 60Hz.  The
renderer polls the 'redraw' flag, reads the whole frame, and then clears the
flag again.  This keeps the number of calls into PyGame/Curses down to one
per frame, no matter how many sprites were drawn in between.

Programs for this system cannot write directly into video RAM.  Instead,
sprites are drawn to the screen using an XOR method against a single 1-bit
plane of 64x32 pixels, stored row-major with one byte per pixel (0 = off,
1 = on).

Collisions (where a pixel was set, but was unset by the XOR) are reported
back to the caller.  Sprites always wrap around the edges of the screen.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import DISPLAY_WIDTH, DISPLAY_HEIGHT


class Framebuffer:
    def __init__(self, vid_width=DISPLAY_WIDTH, vid_height=DISPLAY_HEIGHT):
        self.vid_width = vid_width
        self.vid_height = vid_height
        self.vid_size = vid_width * vid_height
        self.pixels = memoryview(bytearray(self.vid_size))
        self.redraw = False

    def clear(self):
        self.pixels[:] = bytes(self.vid_size)
        self.redraw = True

    def reset(self):
        # As 'clear', but the renderer is not told about it
        self.pixels[:] = bytes(self.vid_size)
        self.redraw = False

    def xor_pixel(self, x, y):
        # Returns True if an existing pixel was switched off
        x %= self.vid_width
        y %= self.vid_height
        vram_loc = y * self.vid_width + x
        pixel = self.pixels[vram_loc]
        self.pixels[vram_loc] = pixel ^ 1
        return pixel != 0

    def get_display(self):
        return self.pixels.toreadonly()

    def set_redraw(self):
        self.redraw = True

    def needs_redraw(self):
        return self.redraw

    def clear_redraw(self):
        self.redraw = False
