#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import queue
import unittest
from chip8vm.audio.a_null import Audio
from chip8vm.constants import DEFAULT_KEYMAP
from chip8vm.inputs.i_curses import Inputs as CursesInputs, KeyReader
from chip8vm.inputs.i_null import Inputs, InputsError, host_lower, parse_keymap
from chip8vm.renderers.r_null import Renderer


class ScriptedScreen:
    # Hands out a fixed run of characters, then reports 'no character' forever
    def __init__(self, chars=()):
        self.chars = list(chars)

    def getch(self):
        return self.chars.pop(0) if self.chars else -1


class IdleRenderer(Renderer):
    # Gives the Curses input plugin a screen that never types anything
    def __init__(self):
        super().__init__()
        self.screen = ScriptedScreen()

    def get_curses_screen(self):
        return self.screen


class TestKeymap(unittest.TestCase):
    def test_keymap_default(self):
        keymap_dict = parse_keymap(DEFAULT_KEYMAP)
        self.assertEqual(16, len(keymap_dict))
        self.assertEqual(0x0, keymap_dict[ord("x")])
        self.assertEqual(0x1, keymap_dict[ord("1")])
        self.assertEqual(0xC, keymap_dict[ord("4")])
        self.assertEqual(0xF, keymap_dict[ord("v")])

    def test_keymap_force_lowercase(self):
        keymap = ",".join(str(ord(c)) for c in "X123QWEASDZC4RFV")
        keymap_dict = parse_keymap(keymap, force_lowercase=True)
        self.assertEqual(0x0, keymap_dict[ord("x")])
        self.assertEqual(0xD, keymap_dict[ord("r")])
        self.assertNotIn(ord("X"), keymap_dict)

    def test_keymap_lowercase_duplicates(self):
        keymap = ",".join(str(ord(c)) for c in "Xx23QWEASDZC4RFV")
        self.assertEqual(16, len(parse_keymap(keymap)))
        self.assertRaises(InputsError, parse_keymap, keymap, True)

    def test_keymap_wrong_key_count(self):
        self.assertRaises(InputsError, parse_keymap, "1,2,3")
        self.assertRaises(InputsError, parse_keymap, ",".join(str(n) for n in range(17)))

    def test_keymap_not_integers(self):
        self.assertRaises(InputsError, parse_keymap, ",".join(["a"] * 16))

    def test_keymap_duplicate_keys(self):
        self.assertRaises(InputsError, parse_keymap, ",".join(["1"] * 16))

    def test_host_lower(self):
        self.assertEqual(ord("a"), host_lower(ord("A")))
        self.assertEqual(ord("1"), host_lower(ord("1")))
        self.assertEqual(0x130, host_lower(0x130))  # Outside ASCII, so left alone


class TestInputs(unittest.TestCase):
    def setUp(self):
        self.renderer = Renderer()

    def test_inputs_null_states(self):
        inputs = Inputs(DEFAULT_KEYMAP, self.renderer)
        self.assertFalse(inputs.process_messages())
        self.assertEqual([False] * 16, inputs.get_key_states())

    def test_inputs_key_states_are_a_snapshot(self):
        inputs = Inputs(DEFAULT_KEYMAP, self.renderer)
        inputs.key_states[0x3] = True
        states = inputs.get_key_states()
        inputs.key_states[0x3] = False
        self.assertTrue(states[0x3])
        self.assertFalse(inputs.get_key_states()[0x3])

    def test_inputs_release_all(self):
        inputs = Inputs(DEFAULT_KEYMAP, self.renderer)
        inputs.key_states[0x0] = inputs.key_states[0xF] = True
        inputs.release_all()
        self.assertEqual([False] * 16, inputs.get_key_states())


class TestCursesInputs(unittest.TestCase):
    def setUp(self):
        self.inputs = CursesInputs(DEFAULT_KEYMAP, IdleRenderer())

    def tearDown(self):
        self.inputs.shutdown()

    def test_curses_inputs_hold_key(self):
        inputs = self.inputs
        inputs.key_queue.put(0x5)
        self.assertFalse(inputs.process_messages())
        states = inputs.get_key_states()
        self.assertTrue(states[0x5])
        self.assertEqual(1, states.count(True))

        inputs.key_deadlines[0x5] = 0.0  # Hold time has passed
        self.assertEqual([False] * 16, inputs.get_key_states())

    def test_curses_inputs_quit(self):
        self.inputs.key_queue.put(0x1)
        self.inputs.key_queue.put(None)
        self.assertTrue(self.inputs.process_messages())

    def test_curses_inputs_release_all(self):
        self.inputs.key_queue.put(0xA)
        self.inputs.process_messages()
        self.inputs.release_all()
        self.assertEqual([False] * 16, self.inputs.get_key_states())


class TestKeyReader(unittest.TestCase):
    def _read(self, chars, keymap_dict=None):
        # Run the reader in this thread, so the queued keys can be checked once it has finished
        if keymap_dict is None:
            keymap_dict = parse_keymap(DEFAULT_KEYMAP, force_lowercase=True)

        key_queue = queue.Queue(16)
        KeyReader(ScriptedScreen(chars), keymap_dict, key_queue).run()
        return [key_queue.get(block=False) for _ in range(key_queue.qsize())]

    def test_key_reader_maps_and_quits(self):
        self.assertEqual([0x5, 0x5, 0xF, None], self._read([ord("w"), ord("W"), -1, ord("p"), ord("v"), 27, ord("x")]))

    def test_key_reader_ctrl_c(self):
        self.assertEqual([None], self._read([3]))

    def test_key_reader_stop(self):
        key_queue = queue.Queue(16)
        reader = KeyReader(ScriptedScreen([ord("x")]), {}, key_queue)
        reader.stop()
        reader.run()
        self.assertTrue(key_queue.empty())


class TestNullPlugins(unittest.TestCase):
    def test_null_audio_counts_beeps(self):
        audio = Audio()
        audio.beep()
        audio.beep()
        self.assertEqual(2, audio.beeps)

    def test_null_renderer(self):
        renderer = Renderer()
        self.assertEqual((64, 32), (renderer.width, renderer.height))
        renderer.draw(bytes(2048))
        renderer.set_title("Title")
        self.assertEqual(1, renderer.frames_drawn)
        self.assertEqual("Title", renderer.title)
