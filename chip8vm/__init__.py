#!/usr/bin/env python3

"""
Main Startup Module

Simply call main(args) to start the emulator, replacing args with a dictionary
of options.  This can be done via the Terminal or GUI.

All options must be supplied.  Defaults can be specified with a 'None'.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import APP_INTRO, APP_COPYRIGHT
from .driver import Driver
from .hostio import Loader
from .machine import Machine
from .tracer import Tracer


class StartupError(Exception):
    pass


def main(args):
    print("".join((APP_INTRO, APP_COPYRIGHT)))

    opt_renderer = args["renderer"]
    auto_select_renderer = opt_renderer is None  # If necessary, try PyGame first, then Curses.
    mute_audio = args["mute"]

    # flake8: noqa: F401
    if auto_select_renderer or opt_renderer == "pygame":
        # pylint: disable=unused-import, import-outside-toplevel, raise-missing-from
        try:
            import pygame
        except ImportError:
            if auto_select_renderer:
                opt_renderer = "curses"
            else:
                raise StartupError(
                    "PyGame does not appear to be installed."
                )
        else:
            opt_renderer = "pygame"
            from .inputs.i_pygame import Inputs
            from .renderers.r_pygame import Renderer

            if mute_audio:
                from .audio.a_null import Audio
            else:
                from .audio.a_pygame import Audio

    if opt_renderer == "curses":
        # pylint: disable=unused-import, import-outside-toplevel, raise-missing-from
        try:
            import curses
        except ImportError:
            if auto_select_renderer:
                raise StartupError(
                    "Neither PyGame nor Curses (or Windows-Curses) appear to be installed."
                )

            raise StartupError(
                "Curses (or Windows-Curses) does not appear to be installed."
            )
        else:
            from .inputs.i_curses import Inputs
            from .renderers.r_curses import Renderer

            # Terminal bells are irritating, so these are off unless asked for
            if mute_audio or mute_audio is None:
                from .audio.a_null import Audio
            else:
                from .audio.a_curses import Audio

    if opt_renderer == "null":
        # pylint: disable=import-outside-toplevel
        from .inputs.i_null import Inputs
        from .renderers.r_null import Renderer
        from .audio.a_null import Audio

    # Read the program before anything takes over the screen, so a bad or oversized file is reported cleanly
    program = Loader().load_binary(args["filename"])

    # Set up tracer and live output if necessary
    tracer = Tracer()
    tracer.set_live(args["trace"])

    # Set up a new rendering system.  Everything started after it must be shut down again, whatever happens
    renderer = Renderer(
        scale=args["scale"],
        pygame_palette=args["pygame_palette"],
        smoothing=args["smoothing"]
    )
    audio = None
    inputs = None

    try:
        audio = Audio()

        # Build a machine in its reset state, and write the program into its memory
        machine = Machine(audio=audio, tracer=tracer)
        machine.load_program(program)

        # Link host inputs to the renderer, in case it provides inputs too
        inputs = Inputs(args["keymap"], renderer)

        Driver(machine, renderer, inputs, clock_speed=args["clock_speed"]).run()
    finally:
        # The driver has stopped (or never started), so shut down the host systems.  __del__ cannot be relied upon
        # when using PyPy
        if inputs is not None:
            inputs.shutdown()

        if audio is not None:
            audio.shutdown()

        renderer.shutdown()
