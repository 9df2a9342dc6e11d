#!/usr/bin/env python3

"""
Machine Driver

The machine itself has no idea how fast it should run.  The driver owns the
main loop, and paces it: the machine is stepped at the requested clock speed,
while input messages are pumped and the display is refreshed at a steady 60Hz,
independent of that clock speed.

Between steps, the current state of all 16 keypad keys is copied from the
input plugin into the machine.  Whenever the machine reports it has drawn
something, the whole frame is passed on to the renderer and the redraw flag is
handed back.

Fatal machine errors are not caught here.  They stop the loop, and whoever
started the driver decides what to do next.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from time import perf_counter
from .constants import APP_NAME, DEFAULT_CLOCK_SPEED

DISPLAY_FREQ = 60.0  # 60Hz display refresh
DISPLAY_INTERVAL = 1.0 / DISPLAY_FREQ


class Driver:
    def __init__(self, machine, renderer, inputs, clock_speed=None):
        self.machine = machine
        self.renderer = renderer
        self.inputs = inputs

        if clock_speed is None:
            clock_speed = DEFAULT_CLOCK_SPEED

        # Zero (or less) runs uncapped
        self.core_interval = None if clock_speed <= 0 else 1.0 / clock_speed

        # Performance-related vars
        self.next_display_update_time = 0
        self.perf_counter_fps = 0
        self.perf_counter_ops = 0
        self.next_perf_report_time = 0
        self.report_perf()

    def run(self):
        while True:
            this_time = perf_counter()  # Do this first for maximum precision

            # Performance counters
            if this_time >= self.next_perf_report_time:
                self.next_perf_report_time = int(this_time) + 1.0
                # Reporting the performance should be done before a refresh, as refreshing will likely show the report
                self.report_perf(self.perf_counter_fps, self.perf_counter_ops)
                self.perf_counter_ops = 0
                self.perf_counter_fps = 0

            # Prevent unnecessary display rendering in excess of host frame rate
            if this_time >= self.next_display_update_time:
                if self.inputs.process_messages():  # Process inputs at 60Hz too, to avoid slowdown
                    self.refresh_display()
                    return

                self.next_display_update_time = this_time + DISPLAY_INTERVAL
                self.refresh_display()
                self.perf_counter_fps += 1

            self.cycle()

            if self.core_interval is not None:
                # Wait for next step.  Do this last for maximum precision (takes into account time spent on this step)
                next_time = this_time + self.core_interval

                while perf_counter() < next_time:  # Unfortunately we have to do this to get the timing right
                    pass

    def cycle(self):
        self.machine.set_key_state(self.inputs.get_key_states())
        self.machine.step()
        self.perf_counter_ops += 1

    def refresh_display(self):
        # Only pass a frame across if something has been drawn since the last one
        machine = self.machine

        if machine.needs_redraw():
            self.renderer.draw(machine.get_display())
            machine.clear_redraw_flag()

        self.renderer.refresh_display()

    def report_perf(self, fps=0, ops=0):
        self.renderer.set_title("{} - {} FPS, {} OPS".format(APP_NAME, fps, ops))
