#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest import mock
from chip8vm import main
from chip8vm.constants import DEFAULT_KEYMAP
from chip8vm.errors import LoadError
from chip8vm.inputs.i_null import InputsError
from chip8vm.renderers.r_null import RendererError


class TestStartup(unittest.TestCase):
    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.filename = os.path.join(self.tmp_dir.name, "program.ch8")

        with open(self.filename, "wb") as f:
            f.write(b"\x12\x00")

        self.args = {
            "filename": self.filename,
            "clock_speed": None,
            "renderer": "null",
            "scale": None,
            "smoothing": 0,
            "mute": None,
            "keymap": DEFAULT_KEYMAP,
            "pygame_palette": None,
            "trace": False
        }

        renderer_patcher = mock.patch("chip8vm.renderers.r_null.Renderer")
        audio_patcher = mock.patch("chip8vm.audio.a_null.Audio")
        self.renderer_class = renderer_patcher.start()
        self.audio_class = audio_patcher.start()
        self.addCleanup(renderer_patcher.stop)
        self.addCleanup(audio_patcher.stop)

    def tearDown(self):
        self.tmp_dir.cleanup()

    def _main(self):
        with redirect_stdout(io.StringIO()):
            main(self.args)

    def test_startup_missing_program(self):
        self.args["filename"] = os.path.join(self.tmp_dir.name, "NoFile.ch8")
        self.assertRaises(LoadError, self._main)
        self.renderer_class.assert_not_called()
        self.audio_class.assert_not_called()

    def test_startup_renderer_failure(self):
        self.renderer_class.side_effect = RendererError("No display")
        self.assertRaises(RendererError, self._main)
        self.audio_class.assert_not_called()

    def test_startup_bad_keymap_shuts_down(self):
        self.args["keymap"] = "1,2,3"
        self.assertRaises(InputsError, self._main)
        self.audio_class.return_value.shutdown.assert_called_once_with()
        self.renderer_class.return_value.shutdown.assert_called_once_with()

    def test_startup_audio_failure_shuts_down_renderer(self):
        self.audio_class.side_effect = RuntimeError("No audio device")
        self.assertRaises(RuntimeError, self._main)
        self.renderer_class.return_value.shutdown.assert_called_once_with()
