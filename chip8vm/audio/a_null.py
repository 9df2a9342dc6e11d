#!/usr/bin/env python3

"""
Null Audio Plugin

Serves as a base class for other Audio plugins.  Can be used on its own if no
sound is required.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class Audio:
    def __init__(self):
        self.beeps = 0

    def beep(self):
        # Called once per machine step while the sound timer is running.  Must never block.
        self.beeps += 1

    def shutdown(self):
        pass
