#!/usr/bin/env python3

"""
Memory Emulator

A flat, fixed-size block of byte-addressable memory.  Supports reading and
writing of blocks of memory or individual bytes, and zeroing the whole bank.

There is no address wrapping.  Any access which falls outside the bank is
reported as an OutOfBounds error rather than silently corrupting another
part of memory.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import MEMORY_SIZE
from .errors import OutOfBounds


class Memory:
    def __init__(self, mem_size=MEMORY_SIZE):
        self.mem = memoryview(bytearray(mem_size))
        self.mem_top = mem_size - 1
        self.mem_size = mem_size

    def read(self, location):
        self.check_bounds(location)
        return self.mem[location]

    def read_block(self, location, size=1):
        self.check_bounds(location)
        self.check_bounds(location + size - 1)
        return self.mem[location:location + size]

    def write(self, location, byte):
        self.check_bounds(location)
        self.mem[location] = byte & 0xFF

    def write_block(self, location, block):
        if not block:
            return

        block_top = location + len(block)

        # Check both ends before writing, so a failed write never leaves a partial block behind
        self.check_bounds(location)
        self.check_bounds(block_top - 1)
        self.mem[location:block_top] = block

    def check_bounds(self, location):
        if location < 0 or location > self.mem_top:
            raise OutOfBounds("Memory access at 0x{:04x} is outside 0x000-0x{:03x}".format(location, self.mem_top))

    def clear(self):
        # Slice assignment is much faster than zeroing byte by byte
        self.mem[:] = bytes(self.mem_size)
