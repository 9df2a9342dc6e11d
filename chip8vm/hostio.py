#!/usr/bin/env python3

"""
Host I/O Functionality

Handles loading program binaries from the host for later writing into the
machine's memory.  Program images are flat, with no header, so the bytes are
passed through exactly as read.

Anything that stops a program from being loaded (a missing or unreadable
file, or one too large for the machine's program area) is reported as a
LoadError, so the caller can report it before any rendering or audio system
has been started.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import MAX_PROGRAM_SIZE
from .errors import LoadError


class Loader:
    def __init__(self, max_size=MAX_PROGRAM_SIZE):
        self.max_size = max_size

    def load_binary(self, filename):
        try:
            with open(filename, "rb") as f:
                # Read one byte past the limit, so oversized files are caught without reading them in full
                data = f.read(self.max_size + 1)
        except OSError as err:
            raise LoadError("Unable to read '{}': {}".format(filename, err.strerror or err)) from None

        if len(data) > self.max_size:
            raise LoadError("'{}' is larger than the {} bytes available for programs".format(filename, self.max_size))

        return data
