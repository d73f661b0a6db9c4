"""The processor: registers, flags, memory map and the fetch/execute loop."""

from __future__ import annotations

import logging
from enum import Enum, IntEnum
from functools import partial
from typing import Any, Callable, Optional, TextIO

from gemu.peripherals import Audio, Graphics, Interrupts, Serial, Timer

logger = logging.getLogger(__name__)

CYCLES_PER_FRAME = 70224

_LOW_MEMORY_END = 0xFF00
_HIGH_MEMORY_START = 0xFF80
_IE_ADDRESS = 0xFFFF


class EmulatorError(Exception):
    """Raised when the emulator reaches a state it cannot handle."""


class Reg8(Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    H = "H"
    L = "L"


class Reg16(Enum):
    BC = "BC"
    DE = "DE"
    HL = "HL"
    SP = "SP"
    AF = "AF"


class Flag(Enum):
    """Flags in the low byte of AF; the value is the bit index."""

    Z = 7
    H = 5
    C = 4
    N = 6


class FlagValue(IntEnum):
    CLEARED = 0
    SET = 1


class IME(Enum):
    DISABLED = 0
    ENABLED = 1


# register -> (backing 16-bit attribute, bit shift)
_REG8_SLOTS = {
    Reg8.A: ("af", 8),
    Reg8.B: ("bc", 8),
    Reg8.C: ("bc", 0),
    Reg8.D: ("de", 8),
    Reg8.E: ("de", 0),
    Reg8.H: ("hl", 8),
    Reg8.L: ("hl", 0),
}

_REG16_SLOTS = {
    Reg16.AF: "af",
    Reg16.BC: "bc",
    Reg16.DE: "de",
    Reg16.HL: "hl",
    Reg16.SP: "sp",
}


def _write_line(stream: Optional[TextIO], message: str) -> None:
    if stream is not None:
        stream.write(message + "\n")


class CPU:
    """The processor and its memory map.

    ``disassembler`` must provide ``next_instruction(counter)`` returning an
    object whose ``execute(cpu)`` runs it and returns its cycle count.
    """

    def __init__(
        self,
        disassembler: Any,
        *,
        serial_output: Optional[TextIO] = None,
        call_graph_log: Optional[TextIO] = None,
        high_mem_log: Optional[TextIO] = None,
        instruction_log: Optional[TextIO] = None,
    ) -> None:
        self.disassembler = disassembler
        self.interrupts = Interrupts()
        self.graphics = Graphics()
        self.timer = Timer()
        self.audio = Audio()
        self.serial = Serial(output=serial_output)
        self.call_graph_log = call_graph_log
        self.high_mem_log = high_mem_log
        self.instruction_log = instruction_log

        self.memory = bytearray(_LOW_MEMORY_END)
        self.high_memory = bytearray(_IE_ADDRESS - _HIGH_MEMORY_START)
        self.current_instruction: Any = None
        self._remaining_ticks = 0
        self.ime = IME.ENABLED

        self.af = 0x100
        self.bc = 0xFF13
        self.de = 0x00C1
        self.hl = 0x8403
        self.pc = 0x100
        self.sp = 0xFFFE

        self._io_writers: dict[int, Callable[[int], None]] = {
            0xFF01: self.serial.write_data,
            0xFF02: self.serial.write_control,
            0xFF07: partial(setattr, self.timer, "tac"),
            0xFF0F: partial(setattr, self.interrupts, "if_"),
            0xFF20: partial(setattr, self.audio, "nr41"),
            0xFF24: partial(setattr, self.audio, "nr50"),
            0xFF25: partial(setattr, self.audio, "nr51"),
            0xFF26: partial(setattr, self.audio, "nr52"),
            0xFF40: partial(setattr, self.graphics, "lcdc"),
            0xFF41: partial(setattr, self.graphics, "stat"),
            0xFF42: partial(setattr, self.graphics, "scy"),
            0xFF43: partial(setattr, self.graphics, "scx"),
            0xFF47: partial(setattr, self.graphics, "bgp"),
            0xFF4A: partial(setattr, self.graphics, "wy"),
            0xFF4B: partial(setattr, self.graphics, "wx"),
            _IE_ADDRESS: partial(setattr, self.interrupts, "ie"),
        }

    # -- execution -------------------------------------------------------

    def tick(self) -> None:
        """Advance one cycle, fetching and running an instruction when due."""
        if self._remaining_ticks == 0:
            instruction = self.disassembler.next_instruction(self.pc)
            logger.debug("Instruction is %s", instruction)
            old_pc = self.pc
            cycles = instruction.execute(self)
            self.current_instruction = instruction
            _write_line(self.instruction_log, f"Instruction is {instruction}")
            if self.pc == old_pc:
                raise EmulatorError("Forgot to increase pc")
            logger.debug("%s", self.state_report())
            self._remaining_ticks = max(int(cycles or 0), 1)
        self._remaining_ticks -= 1

    def increase_pc(self, amount: int) -> None:
        self.pc = (self.pc + amount) & 0xFFFF

    def set_pc(self, pc: int) -> None:
        self.pc = pc & 0xFFFF

    def modify_sp(self, amount: int) -> None:
        self.sp = (self.sp + amount) & 0xFFFF

    def disable_interrupts(self) -> None:
        self.ime = IME.DISABLED

    # -- flags -----------------------------------------------------------

    def get_flag(self, flag: Flag) -> FlagValue:
        return FlagValue.SET if self.af & (1 << flag.value) else FlagValue.CLEARED

    def set_flag(self, flag: Flag) -> None:
        self.af |= 1 << flag.value

    def clear_flag(self, flag: Flag) -> None:
        self.af &= ~(1 << flag.value) & 0xFFFF

    def clear_all_flags(self) -> None:
        for flag in (Flag.N, Flag.Z, Flag.C, Flag.H):
            self.clear_flag(flag)

    # -- registers -------------------------------------------------------

    def get_reg8(self, reg: Reg8) -> int:
        try:
            name, shift = _REG8_SLOTS[reg]
        except KeyError:
            raise EmulatorError(f"Unknown reg in get_reg8: {reg!r}") from None
        return (getattr(self, name) >> shift) & 0xFF

    def set_reg8(self, reg: Reg8, value: int) -> None:
        try:
            name, shift = _REG8_SLOTS[reg]
        except KeyError:
            raise EmulatorError(f"Unhandled reg in set_reg8: {reg!r}") from None
        kept = getattr(self, name) & ~(0xFF << shift) & 0xFFFF
        setattr(self, name, kept | ((value & 0xFF) << shift))

    def get_reg16(self, reg: Reg16) -> int:
        try:
            return getattr(self, _REG16_SLOTS[reg])
        except KeyError:
            raise EmulatorError(f"Unknown reg in get_reg16: {reg!r}") from None

    def set_reg16(self, reg: Reg16, value: int) -> None:
        try:
            name = _REG16_SLOTS[reg]
        except KeyError:
            raise EmulatorError(f"Unhandled reg in set_reg16: {reg!r}") from None
        setattr(self, name, value & 0xFFFF)

    # -- memory ----------------------------------------------------------

    def read_memory(self, address: int) -> int:
        address &= 0xFFFF
        if address < _LOW_MEMORY_END:
            return self.memory[address]
        if _HIGH_MEMORY_START <= address < _IE_ADDRESS:
            return self.high_memory[address - _HIGH_MEMORY_START]
        if address == _IE_ADDRESS:
            return self.interrupts.ie
        raise EmulatorError(f"Could not read the memory at 0x{address:x}")

    def write_memory(self, address: int, value: int) -> None:
        address &= 0xFFFF
        value &= 0xFF
        if address < _LOW_MEMORY_END:
            self.memory[address] = value
            return
        if _HIGH_MEMORY_START <= address < _IE_ADDRESS:
            _write_line(self.high_mem_log, f"0x{address:x} = 0x{value:x}")
            self.high_memory[address - _HIGH_MEMORY_START] = value
            return
        writer = self._io_writers.get(address)
        if writer is None:
            raise EmulatorError(
                f"Found address access for an I/O register at 0x{address:x}"
            )
        writer(value)

    # -- diagnostics -----------------------------------------------------

    def state_report(self) -> str:
        """Describe the registers and flags, one item per line."""
        flags = ", ".join(
            f"{flag.name}: {int(self.get_flag(flag))}"
            for flag in (Flag.Z, Flag.N, Flag.H, Flag.C)
        )
        return (
            "CPU state:\n"
            f"PC: {self.pc:x}\n"
            f"SP: {self.sp:x}\n"
            f"AF: {self.af:x}\n"
            f"BC: {self.bc:x}\n"
            f"DE: {self.de:x}\n"
            f"HL: {self.hl:x}\n"
            f"Flags: {flags}\n"
        )