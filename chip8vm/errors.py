#!/usr/bin/env python3

"""
Machine Errors

Every error the core can raise while loading or stepping a program.  All of
them are fatal to the running program: once one is raised, the machine state
can no longer be trusted, and it is up to the driver to stop or reset.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class MachineError(Exception):
    pass


class OutOfBounds(MachineError):
    # Memory, stack or keypad access outside the valid range
    pass


class UnsupportedOpcode(MachineError):
    pass


class LoadError(MachineError):
    # Raised before any stepping begins, and never leaves a partial program in memory
    pass
