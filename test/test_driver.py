#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from chip8vm.constants import APP_NAME, DEFAULT_KEYMAP
from chip8vm.driver import Driver
from chip8vm.errors import UnsupportedOpcode
from chip8vm.inputs.i_null import Inputs
from chip8vm.machine import Machine
from chip8vm.renderers.r_null import Renderer


class ScriptedInputs(Inputs):
    # Holds down a fixed set of keys, and asks to quit after a number of message pumps
    def __init__(self, keymap, renderer, held_keys=(), quit_after=None):
        super().__init__(keymap, renderer)
        self.quit_after = quit_after
        self.pumps = 0

        for key in held_keys:
            self.key_states[key] = True

    def process_messages(self):
        self.pumps += 1
        return self.quit_after is not None and self.pumps > self.quit_after


class TestDriver(unittest.TestCase):
    def setUp(self):
        self.machine = Machine()
        self.renderer = Renderer()

    def _make_driver(self, inputs=None, clock_speed=0):
        if inputs is None:
            inputs = Inputs(DEFAULT_KEYMAP, self.renderer)

        return Driver(self.machine, self.renderer, inputs, clock_speed=clock_speed)

    def test_driver_clock_speed(self):
        self.assertIsNone(self._make_driver(clock_speed=0).core_interval)
        self.assertEqual(0.002, self._make_driver(clock_speed=500).core_interval)
        self.assertEqual(0.002, self._make_driver(clock_speed=None).core_interval)

    def test_driver_reports_title(self):
        self._make_driver()
        self.assertEqual("{} - 0 FPS, 0 OPS".format(APP_NAME), self.renderer.title)

    def test_driver_cycle_copies_keys(self):
        inputs = ScriptedInputs(DEFAULT_KEYMAP, self.renderer, held_keys=(0x7,))
        driver = self._make_driver(inputs)
        self.machine.load_program(b"\xF2\x0A")
        driver.cycle()
        self.assertEqual(0x7, self.machine.v[0x2])
        self.assertEqual(0x202, self.machine.pc)
        self.assertEqual(1, driver.perf_counter_ops)

    def test_driver_refresh_only_draws_changes(self):
        driver = self._make_driver()
        self.machine.load_program(b"\x00\xE0\x00\xE0")
        driver.refresh_display()
        self.assertEqual(0, self.renderer.frames_drawn)
        driver.cycle()
        driver.refresh_display()
        self.assertEqual(1, self.renderer.frames_drawn)
        self.assertFalse(self.machine.needs_redraw())
        driver.refresh_display()
        self.assertEqual(1, self.renderer.frames_drawn)

    def test_driver_run_until_quit(self):
        inputs = ScriptedInputs(DEFAULT_KEYMAP, self.renderer, quit_after=1)
        driver = self._make_driver(inputs)
        self.machine.load_program(b"\x00\xE0\x12\x02")  # Clear the screen, then spin forever
        driver.run()
        self.assertEqual(2, inputs.pumps)
        self.assertEqual(0x202, self.machine.pc)
        self.assertEqual(1, self.renderer.frames_drawn)

    def test_driver_run_stops_on_machine_error(self):
        inputs = ScriptedInputs(DEFAULT_KEYMAP, self.renderer)
        driver = self._make_driver(inputs)
        self.machine.load_program(b"\x00\x00")
        self.assertRaises(UnsupportedOpcode, driver.run)
