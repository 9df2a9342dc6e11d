#!/usr/bin/env python3

"""
Machine Emulator (CHIP-8)

Like a real computer, this is where most of the processing happens.  The
machine owns its memory, call stack, framebuffer, registers, timers and keypad
latches, and moves them forward one instruction at a time when 'step' is
called.  Nothing here knows about wall-clock time: the timers count down once
per step, and it is the driver's job to call 'step' at a sensible rate.

Opcodes are looked up in a dictionary of bound methods, first by their top
nibble, and then (for families sharing a top nibble) by the opcode masked down
to the bits that tell the family members apart.

Every instruction moves the program counter exactly once: forward by 2, by 4
when a skip is taken, or directly to a new address.  The one exception is
'LD Vx, K', which leaves it alone while no key is held, so the same
instruction runs again on the next step.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from random import Random
from .audio.a_null import Audio
from .constants import (
    APP_INTRO, FONT_BASE, FONT_GLYPH_SIZE, FONT_SET, MAX_PROGRAM_SIZE, NUM_KEYS, PROGRAM_START
)
from .errors import LoadError, OutOfBounds, UnsupportedOpcode
from .framebuffer import Framebuffer
from .ram import Memory
from .stack import Stack
from .tracer import Tracer

CPU_ENDIAN = "big"  # CHIP-8 is big-endian


class Machine:
    def __init__(self, audio=None, tracer=None, rng=None):
        self.audio = Audio() if audio is None else audio
        self.tracer = Tracer() if tracer is None else tracer
        self.live_trace = self.tracer.is_live()
        self.rng = Random() if rng is None else rng

        self.memory = Memory()
        self.stack = Stack()
        self.framebuffer = Framebuffer()

        # Define instruction pointers.
        # n = Nibble
        # kk = Byte
        # nnn = address
        # x/y = register (0-15)
        self.instructions = {
            # Initial lookup for instructions' first nibble
            0x0: self._0nnn,  # Alias for bitmask 0xFFFF
            0x1: self._1nnn,
            0x2: self._2nnn,
            0x3: self._3xkk,
            0x4: self._4xkk,
            0x5: self._5xy0,  # Low nibble is ignored
            0x6: self._6xkk,
            0x7: self._7xkk,
            0x8: self._8nnn,  # Alias for bitmask 0xF00F
            0x9: self._9xy0,  # Low nibble is ignored
            0xA: self._Annn,
            0xB: self._Bnnn,
            0xC: self._Cxkk,
            0xD: self._Dxyn,
            0xE: self._Ennn_Fnnn,  # Alias for bitmask 0xF0FF
            0xF: self._Ennn_Fnnn,  # Alias for bitmask 0xF0FF
            # Instructions beginning with nibble 0x0, bitmask 0xFFFF (i.e., exact match)
            0x00E0: self._00E0,
            0x00EE: self._00EE,
            # Instructions beginning with nibble 0x8, bitmask 0xF00F
            0x8000: self._8xy0,
            0x8001: self._8xy1,
            0x8002: self._8xy2,
            0x8003: self._8xy3,
            0x8004: self._8xy4,
            0x8005: self._8xy5,
            0x8006: self._8xy6,
            0x8007: self._8xy7,
            0x800E: self._8xyE,
            # Instructions beginning with nibble 0xE/0xF, bitmask 0xF0FF
            0xE09E: self._Ex9E,
            0xE0A1: self._ExA1,
            0xF007: self._Fx07,
            0xF00A: self._Fx0A,
            0xF015: self._Fx15,
            0xF018: self._Fx18,
            0xF01E: self._Fx1E,
            0xF029: self._Fx29,
            0xF033: self._Fx33,
            0xF055: self._Fx55,
            0xF065: self._Fx65
        }

        self.reset()

    def reset(self):
        self.memory.clear()
        self.memory.write_block(FONT_BASE, FONT_SET)
        self.stack.clear()
        self.framebuffer.reset()

        # Registers.  Bytearrays are mutable, so this should be fast when a register is updated
        self.v = memoryview(bytearray(16))
        self.i = 0  # Index register

        # Timers
        self.dt = 0  # Delay timer
        self.st = 0  # Sound timer

        # Keypad latches, written only by the input collaborator
        self.keys = [False] * NUM_KEYS

        # Program counter, plus the address and opcode of the instruction in progress for tracing
        self.pc = PROGRAM_START
        self.debug_pc = PROGRAM_START
        self.opcode = 0

    def load_program(self, data):
        # The caller is expected to reset first, as nothing else is touched here
        if len(data) > MAX_PROGRAM_SIZE:
            raise LoadError(
                "Program is {} bytes, but only {} bytes are available from 0x{:03x}".format(
                    len(data), MAX_PROGRAM_SIZE, PROGRAM_START
                )
            )

        self.memory.write_block(PROGRAM_START, data)

    def step(self):
        # Keep track of the program counter before altering it in any way for tracing purposes
        self.debug_pc = self.pc
        self.opcode = self.fetch()
        self.decode_exec()
        self.tick_timers()

    def fetch(self):
        return int.from_bytes(self.memory.read_block(self.pc, 2), CPU_ENDIAN, signed=False)

    def _call_masked_instruction(self, masked_opcode):
        instruction = self.instructions.get(masked_opcode)

        if instruction is None:
            self._opcode_unsupported()

        instruction()

    def decode_exec(self):
        self._call_masked_instruction((0xF000 & self.opcode) >> 12)

    def tick_timers(self):
        # Runs after every instruction, whichever one it was
        if self.st > 0:
            self.st -= 1
            self.audio.beep()

        if self.dt > 0:
            self.dt -= 1

    def get_display(self):
        return self.framebuffer.get_display()

    def needs_redraw(self):
        return self.framebuffer.needs_redraw()

    def clear_redraw_flag(self):
        self.framebuffer.clear_redraw()

    def set_key_state(self, states):
        states = list(states)

        if len(states) != NUM_KEYS:
            raise ValueError("Expected {} key states, got {}".format(NUM_KEYS, len(states)))

        self.keys = [bool(state) for state in states]

    def inc_pc(self):
        self.pc = (self.pc + 2) & 0xFFFF

    # References to Vx, Vy, byte and addr are always in the same opcode position throughout all instructions, so avoid
    # excessive code duplication (ever so slight slowdown).  Don't reference these more than necessary as they are
    # recalculated each time.
    @property
    def vx(self):
        return (self.opcode & 0xF00) >> 8

    @property
    def vy(self):
        return (self.opcode & 0xF0) >> 4

    @property
    def addr(self):
        return self.opcode & 0xFFF

    @property
    def byte(self):
        return self.opcode & 0xFF

    @property
    def nibble(self):
        return self.opcode & 0xF

    def _opcode_unsupported(self):
        raise UnsupportedOpcode(
            (
                "Emulation halted.\n\n" +
                "{}Trace:\n" +
                "{}\n\nOpcode 0x{:04x} at address 0x{:03x} is not a CHIP-8 instruction."
            ).format(
                APP_INTRO, self.tracer.trace(self, "???", verbose=True), self.opcode, self.debug_pc
            )
        )

    def trace(self, instruction):
        self.tracer.output(self, instruction)

    def _skip_if(self, condition):
        if condition:
            self.inc_pc()

        self.inc_pc()

    def _key_down(self, key):
        if key >= NUM_KEYS:
            raise OutOfBounds("Key 0x{:02x} does not exist on the keypad".format(key))

        return self.keys[key]

    def _0nnn(self):
        opcode = self.opcode

        if opcode < 0x10:
            # Let's use opcodes 0x0 - 0xF internally for indexing, since they're not valid instructions
            self._opcode_unsupported()

        self._call_masked_instruction(opcode)

    def _8nnn(self):
        self._call_masked_instruction(self.opcode & 0xF00F)

    def _Ennn_Fnnn(self):
        self._call_masked_instruction(self.opcode & 0xF0FF)

    def _00E0(self):  # CLS
        if self.live_trace:
            self.trace("CLS")

        self.framebuffer.clear()
        self.inc_pc()

    def _00EE(self):  # RET
        if self.live_trace:
            self.trace("RET")

        # The stack holds the address of the call itself, so step over it
        self.pc = self.stack.pop()
        self.inc_pc()

    def _1nnn(self):  # JP addr
        if self.live_trace:
            self.trace("JP 0x{:03x}".format(self.addr))

        self.pc = self.addr

    def _2nnn(self):  # CALL addr
        if self.live_trace:
            self.trace("CALL 0x{:03x}".format(self.addr))

        self.stack.push(self.pc)
        self.pc = self.addr

    def _3xkk(self):  # SE Vx, byte
        if self.live_trace:
            self.trace("SE V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        self._skip_if(self.v[self.vx] == self.byte)

    def _4xkk(self):  # SNE Vx, byte
        if self.live_trace:
            self.trace("SNE V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        self._skip_if(self.v[self.vx] != self.byte)

    def _5xy0(self):  # SE Vx, Vy
        if self.live_trace:
            self.trace("SE V{:01x}, V{:01x}".format(self.vx, self.vy))

        self._skip_if(self.v[self.vx] == self.v[self.vy])

    def _6xkk(self):  # LD Vx, byte
        if self.live_trace:
            self.trace("LD V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        self.v[self.vx] = self.byte
        self.inc_pc()

    def _7xkk(self):  # ADD Vx, byte
        vx = self.vx
        byte = self.byte

        if self.live_trace:
            self.trace("ADD V{:01x}, 0x{:02x}".format(vx, byte))

        # No carry flag for this one
        self.v[vx] = (self.v[vx] + byte) & 0xFF
        self.inc_pc()

    def _8xy0(self):  # LD Vx, Vy
        if self.live_trace:
            self.trace("LD V{:01x}, V{:01x}".format(self.vx, self.vy))

        self.v[self.vx] = self.v[self.vy]
        self.inc_pc()

    def _8xy1(self):  # OR Vx, Vy
        if self.live_trace:
            self.trace("OR V{:01x}, V{:01x}".format(self.vx, self.vy))

        self.v[self.vx] |= self.v[self.vy]
        self.inc_pc()

    def _8xy2(self):  # AND Vx, Vy
        if self.live_trace:
            self.trace("AND V{:01x}, V{:01x}".format(self.vx, self.vy))

        self.v[self.vx] &= self.v[self.vy]
        self.inc_pc()

    def _8xy3(self):  # XOR Vx, Vy
        if self.live_trace:
            self.trace("XOR V{:01x}, V{:01x}".format(self.vx, self.vy))

        self.v[self.vx] ^= self.v[self.vy]
        self.inc_pc()

    # For the arithmetic and shift instructions below, Vf is written BEFORE Vx.  If Vf is also the target register,
    # the result overwrites the flag.

    def _8xy4(self):  # ADD Vx, Vy
        vx = self.vx
        vy = self.vy

        if self.live_trace:
            self.trace("ADD V{:01x}, V{:01x}".format(vx, vy))

        self.v[0xF] = int(self.v[vy] > 0xFF - self.v[vx])  # Vf is set when carrying
        self.v[vx] = (self.v[vx] + self.v[vy]) & 0xFF
        self.inc_pc()

    def _8xy5(self):  # SUB Vx, Vy
        vx = self.vx
        vy = self.vy

        if self.live_trace:
            self.trace("SUB V{:01x}, V{:01x}".format(vx, vy))

        # Vf is cleared when borrowing.  Equal values count as a borrow.
        self.v[0xF] = int(self.v[vy] < self.v[vx])
        self.v[vx] = (self.v[vx] - self.v[vy]) & 0xFF
        self.inc_pc()

    def _8xy6(self):  # SHR Vx
        vx = self.vx

        if self.live_trace:
            self.trace("SHR V{:01x}".format(vx))

        self.v[0xF] = self.v[vx] & 1
        self.v[vx] >>= 1
        self.inc_pc()

    def _8xy7(self):  # SUBN Vx, Vy
        vx = self.vx
        vy = self.vy

        if self.live_trace:
            self.trace("SUBN V{:01x}, V{:01x}".format(vx, vy))

        self.v[0xF] = int(self.v[vx] > self.v[vy])
        self.v[vx] = (self.v[vy] - self.v[vx]) & 0xFF
        self.inc_pc()

    def _8xyE(self):  # SHL Vx
        vx = self.vx

        if self.live_trace:
            self.trace("SHL V{:01x}".format(vx))

        # The flag is the raw top bit (0x00 or 0x80), not 0 or 1.  Some programs depend on this.
        self.v[0xF] = self.v[vx] & 0x80
        self.v[vx] = (self.v[vx] << 1) & 0xFF
        self.inc_pc()

    def _9xy0(self):  # SNE Vx, Vy
        if self.live_trace:
            self.trace("SNE V{:01x}, V{:01x}".format(self.vx, self.vy))

        self._skip_if(self.v[self.vx] != self.v[self.vy])

    def _Annn(self):  # LD I, addr
        if self.live_trace:
            self.trace("LD I, 0x{:03x}".format(self.addr))

        self.i = self.addr
        self.inc_pc()

    def _Bnnn(self):  # JP V0, addr
        if self.live_trace:
            self.trace("JP V0, 0x{:03x}".format(self.addr))

        # Can land beyond the top of memory, in which case the next fetch fails
        self.pc = self.addr + self.v[0]

    def _Cxkk(self):  # RND Vx, byte
        if self.live_trace:
            self.trace("RND V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        # The ANDing here is intentional.  This is not a random number between 0 and 'byte' inclusive.
        self.v[self.vx] = self.rng.randint(0, 0xFF) & self.byte
        self.inc_pc()

    def _Dxyn(self):  # DRW Vx, Vy, nibble
        height = self.nibble

        if self.live_trace:
            self.trace("DRW V{:01x}, V{:01x}, 0x{:01x}".format(self.vx, self.vy, height))

        # Read the position before the flag is cleared, in case either register is Vf
        vx_pos = self.v[self.vx]
        vy_pos = self.v[self.vy]
        i = self.i
        collided = False
        self.v[0xF] = 0

        for y in range(height):
            spr_data = self.memory.read(i + y)

            for x in range(8):
                if spr_data & (0x80 >> x):
                    # Don't stop drawing on a collision.  Set the flag, and never unset it for this sprite.
                    if self.framebuffer.xor_pixel(vx_pos + x, vy_pos + y):
                        collided = True

        self.v[0xF] = int(collided)
        self.framebuffer.set_redraw()
        self.inc_pc()

    def _Ex9E(self):  # SKP Vx
        if self.live_trace:
            self.trace("SKP V{:01x}".format(self.vx))

        self._skip_if(self._key_down(self.v[self.vx]))

    def _ExA1(self):  # SKNP Vx
        if self.live_trace:
            self.trace("SKNP V{:01x}".format(self.vx))

        self._skip_if(not self._key_down(self.v[self.vx]))

    def _Fx07(self):  # LD Vx, DT
        if self.live_trace:
            self.trace("LD V{:01x}, DT".format(self.vx))

        self.v[self.vx] = self.dt
        self.inc_pc()

    def _Fx0A(self):  # LD Vx, K
        if self.live_trace:
            self.trace("LD V{:01x}, K".format(self.vx))

        # This opcode waits for a keypress, but since the timers still need to expire and the display still needs
        # updating, we'll return control to the driver and leave the program counter where it is, so this instruction
        # comes round again on the next step.  The lowest numbered key wins.

        for key, key_down in enumerate(self.keys):
            if key_down:
                self.v[self.vx] = key
                self.inc_pc()
                break

    def _Fx15(self):  # LD DT, Vx
        if self.live_trace:
            self.trace("LD DT, V{:01x}".format(self.vx))

        self.dt = self.v[self.vx]
        self.inc_pc()

    def _Fx18(self):  # LD ST, Vx
        if self.live_trace:
            self.trace("LD ST, V{:01x}".format(self.vx))

        self.st = self.v[self.vx]
        self.inc_pc()

    def _Fx1E(self):  # ADD I, Vx
        if self.live_trace:
            self.trace("ADD I, V{:01x}".format(self.vx))

        # No overflow flag
        self.i = (self.i + self.v[self.vx]) & 0xFFFF
        self.inc_pc()

    def _Fx29(self):  # LD F, Vx
        if self.live_trace:
            self.trace("LD F, V{:01x}".format(self.vx))

        self.i = FONT_BASE + FONT_GLYPH_SIZE * self.v[self.vx]
        self.inc_pc()

    def _Fx33(self):  # LD B, Vx
        if self.live_trace:
            self.trace("LD B, V{:01x}".format(self.vx))

        val = self.v[self.vx]
        i = self.i
        self.memory.write(i, val // 100)             # Most-significant digit
        self.memory.write(i + 1, (val // 10) % 10)  # Middle digit
        self.memory.write(i + 2, val % 10)          # Least-significant digit
        self.inc_pc()

    def _Fx55(self):  # LD [I], Vx
        if self.live_trace:
            self.trace("LD [I], V{:01x}".format(self.vx))

        # Ensure with +1 that the final register is copied.  I is left alone.
        self.memory.write_block(self.i, self.v[:self.vx + 1])
        self.inc_pc()

    def _Fx65(self):  # LD Vx, [I]
        vx = self.vx

        if self.live_trace:
            self.trace("LD V{:01x}, [I]".format(vx))

        self.v[:vx + 1] = self.memory.read_block(self.i, vx + 1)

        # The COSMAC VIP interpreter left I pointing just past the last byte loaded
        self.i = (self.i + vx + 1) & 0xFFFF
        self.inc_pc()
