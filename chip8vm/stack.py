#!/usr/bin/env python3

"""
Stack Emulator

The call stack holds return addresses only, and there is no specified
location for it in memory, nor a stack pointer register exposed to the
running program.  This means we can simply wrap a list to fully (and quickly)
emulate it, with the list length standing in for the stack pointer.

The COSMAC VIP left overflow and underflow undefined (in practice,
memory was trampled).  Here, both are reported as OutOfBounds errors so that
a runaway program halts instead.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import STACK_DEPTH
from .errors import OutOfBounds


class Stack:
    def __init__(self, size=STACK_DEPTH):
        self.items = []
        self.size = size

    def push(self, item):
        # Fetching the stack size with 'len' should be immediate, so no slow loop
        if len(self.items) >= self.size:
            raise OutOfBounds("Stack overflow (more than {} nested calls)".format(self.size))

        self.items.append(item)

    def pop(self):
        try:
            return self.items.pop()
        except IndexError:
            raise OutOfBounds("Stack underflow (return without a call)") from None

    @property
    def pointer(self):
        # Index of the next free slot
        return len(self.items)

    def clear(self):
        self.items.clear()

    def get_items(self):
        # For tracing
        return self.items
