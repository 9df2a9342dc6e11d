#!/usr/bin/env python3

"""
Null Renderer Plugin

This serves as a base class for other rendering plugins.

This module can be used on its own as a Renderer plugin if you only want to see
trace output.  Without a renderer, performance data will also not be shown.

The driver hands over a complete frame (a row-major sequence of 0/1 bytes)
whenever the machine has drawn something, and separately asks for the display
to be presented at the host frame rate.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from ..constants import DISPLAY_WIDTH, DISPLAY_HEIGHT


class RendererError(Exception):
    pass


class Renderer:
    def __init__(self, scale=None, **kwargs):  # pylint: disable=unused-argument
        self.scale = 1 if scale is None else scale
        self.width = DISPLAY_WIDTH
        self.height = DISPLAY_HEIGHT
        self.frames_drawn = 0
        self.title = None

    def draw(self, display):  # pylint: disable=unused-argument
        self.frames_drawn += 1

    def refresh_display(self):
        pass

    def set_title(self, title):
        self.title = title

    def shutdown(self):
        pass
