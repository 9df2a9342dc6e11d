#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from chip8vm.errors import OutOfBounds
from chip8vm.ram import Memory


class TestMemory(unittest.TestCase):
    def setUp(self):
        self.memory = Memory(5)

    def test_memory_default_size(self):
        memory = Memory()
        self.assertEqual(4096, memory.mem_size)
        self.assertEqual(0xFFF, memory.mem_top)

    def test_memory_init(self):
        self.assertEqual("0000000000", self.memory.mem.hex())

    def test_memory_write(self):
        self.memory.write(1, 255)
        self.assertEqual("00ff000000", self.memory.mem.hex())

    def test_memory_write_masks_to_byte(self):
        self.memory.write(0, 0x1FE)
        self.assertEqual(0xFE, self.memory.read(0))

    def test_memory_write_block(self):
        self.memory.write_block(1, bytearray(b"\xFD\xFE"))
        self.memory.write_block(4, bytearray(b"\xFF"))
        self.assertEqual("00fdfe00ff", self.memory.mem.hex())

    def test_memory_read_block(self):
        self.memory.write_block(2, b"\x12\x34")
        self.assertEqual(b"\x12\x34", bytes(self.memory.read_block(2, 2)))

    def test_memory_byte_overflow(self):
        self.assertRaises(OutOfBounds, self.memory.write, 5, 255)
        self.assertRaises(OutOfBounds, self.memory.read, 5)

    def test_memory_negative_address(self):
        self.assertRaises(OutOfBounds, self.memory.read, -1)
        self.assertRaises(OutOfBounds, self.memory.write, -1, 0)

    def test_memory_block_overflow(self):
        self.assertRaises(OutOfBounds, self.memory.write_block, 4, bytearray(b"\xFE\xFF"))
        self.assertRaises(OutOfBounds, self.memory.read_block, 4, 2)

    def test_memory_block_overflow_leaves_memory_untouched(self):
        self.assertRaises(OutOfBounds, self.memory.write_block, 3, bytearray(b"\x01\x02\x03"))
        self.assertEqual("0000000000", self.memory.mem.hex())

    def test_memory_clear(self):
        self.memory.write_block(1, bytearray(b"\xFD\xFE"))
        self.assertEqual("00fdfe0000", self.memory.mem.hex())
        self.memory.clear()
        self.assertEqual("0000000000", self.memory.mem.hex())
