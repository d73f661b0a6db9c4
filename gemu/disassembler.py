"""Decoding of program bytes into executable instructions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from gemu.alu import ADC, ADD, AND, CP, DEC, INC, OR, RLCA, RR, RRA, SRL, SUB, XOR
from gemu.control import CALL, DI, JP, JR, NOP, POP, PUSH, RET, STOP, Condition
from gemu.cpu import EmulatorError, Flag, Reg8, Reg16
from gemu.instruction import Instruction
from gemu.load import LD, LDH, LDAction, LDHAction

logger = logging.getLogger(__name__)

PREFIX_OPCODE = 0xCB


@dataclass(frozen=True)
class _Operands:
    """The bytes following an opcode at a given program counter."""

    program: bytes
    counter: int

    def byte(self, offset: int) -> int:
        address = self.counter + offset
        if not 0 <= address < len(self.program):
            raise EmulatorError(
                f"Read past the end of the program at 0x{address:x}"
            )
        return self.program[address]

    @property
    def opcode(self) -> int:
        return self.byte(0)

    @property
    def n8(self) -> int:
        return self.byte(1)

    @property
    def n16(self) -> int:
        return self.byte(1) | (self.byte(2) << 8)


_Decoder = Callable[[_Operands], Instruction]


def _reg_to_reg(source: Reg8, dest: Reg8) -> _Decoder:
    return lambda ops: LD(LDAction.REG_TO_REG, source, dest)


def _reg_to_hl(reg: Reg8) -> _Decoder:
    return lambda ops: LD(LDAction.REG_TO_HL, reg)


def _decode_prefixed(ops: _Operands) -> Instruction:
    value = ops.n8
    logger.debug("Second byte for prefix is 0x%x", value)
    factory = _PREFIXED.get(value)
    if factory is None:
        raise EmulatorError(
            f"Could not decode prefixed instruction 0x{value:02x} "
            f"at 0x{ops.counter:04x}"
        )
    return factory()


_PREFIXED: dict[int, Callable[[], Instruction]] = {
    0x19: lambda: RR(Reg8.C),
    0x38: lambda: SRL(Reg8.B),
    0x3F: lambda: SRL(Reg8.A),
}

_OPCODES: dict[int, _Decoder] = {
    0x00: lambda o: NOP(),
    0x01: lambda o: LD(LDAction.N16_TO_R16, Reg16.BC, o.n16),
    0x03: lambda o: INC(Reg16.BC),
    0x04: lambda o: INC(Reg8.B),
    0x05: lambda o: DEC(Reg8.B),
    0x06: lambda o: LD(LDAction.N8_TO_R8, Reg8.B, o.n8),
    0x07: lambda o: RLCA(),
    0x0A: lambda o: LD(LDAction.R16_ADDR_TO_A, Reg16.BC),
    0x0B: lambda o: DEC(Reg16.BC),
    0x0C: lambda o: INC(Reg8.C),
    0x0D: lambda o: DEC(Reg8.C),
    0x0E: lambda o: LD(LDAction.N8_TO_R8, Reg8.C, o.n8),
    0x10: lambda o: STOP(o.n8),
    0x11: lambda o: LD(LDAction.N16_TO_R16, Reg16.DE, o.n16),
    0x12: lambda o: LD(LDAction.A_TO_REG16_ADDR, Reg16.DE),
    0x13: lambda o: INC(Reg16.DE),
    0x14: lambda o: INC(Reg8.D),
    0x18: lambda o: JR(o.n8),
    0x19: lambda o: ADD(Reg16.DE),
    0x1A: lambda o: LD(LDAction.R16_ADDR_TO_A, Reg16.DE),
    0x1C: lambda o: INC(Reg8.E),
    0x1F: lambda o: RRA(),
    0x20: lambda o: JR(o.n8, Flag.Z, Condition.NOT),
    0x21: lambda o: LD(LDAction.N16_TO_R16, Reg16.HL, o.n16),
    0x22: lambda o: LD(LDAction.A_TO_HL_INC),
    0x23: lambda o: INC(Reg16.HL),
    0x24: lambda o: INC(Reg8.H),
    0x28: lambda o: JR(o.n8, Flag.Z, Condition.NORMAL),
    0x2A: lambda o: LD(LDAction.HL_TO_A_INC),
    0x2C: lambda o: INC(Reg8.L),
    0x30: lambda o: JR(o.n8, Flag.C, Condition.NOT),
    0x31: lambda o: LD(LDAction.N16_TO_R16, Reg16.SP, o.n16),
    0x32: lambda o: LD(LDAction.A_TO_HL_DEC),
    0x3C: lambda o: INC(Reg8.A),
    0x3D: lambda o: DEC(Reg8.A),
    0x3E: lambda o: LD(LDAction.N8_TO_R8, Reg8.A, o.n8),
    0x6E: lambda o: LD(LDAction.HL_TO_REG, Reg8.L),
    0x80: lambda o: ADD(Reg8.B),
    0x8D: lambda o: ADC(Reg8.L),
    0xA9: lambda o: XOR(Reg8.C),
    0xAF: lambda o: XOR(Reg8.A),
    0xB0: lambda o: OR(Reg8.B),
    0xB1: lambda o: OR(Reg8.C),
    0xC0: lambda o: RET(Flag.Z, Condition.NOT),
    0xC1: lambda o: POP(Reg16.BC),
    0xC3: lambda o: JP(o.n16),
    0xC5: lambda o: PUSH(Reg16.BC),
    0xC6: lambda o: ADD(o.n8),
    0xC8: lambda o: RET(Flag.Z, Condition.NORMAL),
    0xC9: lambda o: RET(),
    PREFIX_OPCODE: _decode_prefixed,
    0xCD: lambda o: CALL(o.n16, o.counter + 3),
    0xCE: lambda o: ADC(o.n8),
    0xCF: lambda o: CALL(0x08, o.counter + 1),
    0xD0: lambda o: RET(Flag.C, Condition.NOT),
    0xD1: lambda o: POP(Reg16.DE),
    0xD5: lambda o: PUSH(Reg16.DE),
    0xD6: lambda o: SUB(o.n8),
    0xE0: lambda o: LDH(LDHAction.A_TO_ADDRESS, o.n8),
    0xE1: lambda o: POP(Reg16.HL),
    0xE5: lambda o: PUSH(Reg16.HL),
    0xE6: lambda o: AND(o.n8),
    0xE9: lambda o: JP(),
    0xEA: lambda o: LD(LDAction.A_TO_A16, o.n16),
    0xEF: lambda o: CALL(0x28, o.counter + 1),
    0xF0: lambda o: LDH(LDHAction.ADDRESS_TO_A, o.n8),
    0xF1: lambda o: POP(Reg16.AF),
    0xF3: lambda o: DI(),
    0xF5: lambda o: PUSH(Reg16.AF),
    0xF7: lambda o: CALL(0x30, o.counter + 1),
    0xFA: lambda o: LD(LDAction.A16_TO_A, o.n16),
    0xFE: lambda o: CP(o.n8),
    0xFF: lambda o: CALL(0x38, o.counter + 1),
}

# (opcode, source, destination) for register-to-register loads
for _opcode, _source, _dest in (
    (0x40, Reg8.B, Reg8.B),
    (0x47, Reg8.A, Reg8.B),
    (0x50, Reg8.B, Reg8.D),
    (0x54, Reg8.H, Reg8.D),
    (0x57, Reg8.A, Reg8.D),
    (0x58, Reg8.B, Reg8.E),
    (0x5D, Reg8.L, Reg8.E),
    (0x5F, Reg8.A, Reg8.E),
    (0x63, Reg8.E, Reg8.H),
    (0x67, Reg8.A, Reg8.H),
    (0x69, Reg8.C, Reg8.L),
    (0x6F, Reg8.A, Reg8.L),
    (0x78, Reg8.B, Reg8.A),
    (0x7A, Reg8.D, Reg8.A),
    (0x7C, Reg8.H, Reg8.A),
    (0x7D, Reg8.L, Reg8.A),
):
    _OPCODES[_opcode] = _reg_to_reg(_source, _dest)

for _opcode, _reg in (
    (0x70, Reg8.B),
    (0x71, Reg8.C),
    (0x72, Reg8.D),
    (0x73, Reg8.E),
    (0x74, Reg8.H),
    (0x75, Reg8.L),
    (0x77, Reg8.A),
):
    _OPCODES[_opcode] = _reg_to_hl(_reg)


class Disassembler:
    """Decodes the instruction found at a program counter in a program image."""

    def __init__(self, program: bytes) -> None:
        self.program = bytes(program)

    def next_instruction(self, counter: int) -> Instruction:
        """Decode the instruction starting at ``counter``."""
        ops = _Operands(self.program, counter & 0xFFFF)
        value = ops.opcode
        logger.debug("Counter is 0x%x, value is 0x%x", ops.counter, value)
        decoder = _OPCODES.get(value)
        if decoder is None:
            raise EmulatorError(
                f"Could not decode instruction 0x{value:02x} at 0x{ops.counter:04x}"
            )
        return decoder(ops)