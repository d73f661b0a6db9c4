"""Load instructions moving data between registers and memory."""

from __future__ import annotations

from enum import Enum, auto
from typing import Optional

from gemu.cpu import CPU, EmulatorError, Reg8, Reg16
from gemu.instruction import Instruction


class LDAction(Enum):
    N8_TO_R8 = auto()
    N16_TO_R16 = auto()
    A_TO_A16 = auto()
    A16_TO_A = auto()
    R16_ADDR_TO_A = auto()
    ADDR16_TO_A = auto()
    REG_TO_REG = auto()
    REG_TO_HL = auto()
    HL_TO_REG = auto()
    HL_TO_A_INC = auto()
    A_TO_HL_INC = auto()
    A_TO_HL_DEC = auto()
    A_TO_REG16_ADDR = auto()


class LDHAction(Enum):
    A_TO_ADDRESS = auto()
    ADDRESS_TO_A = auto()


_OPERANDS: dict[LDAction, tuple[type, ...]] = {
    LDAction.N8_TO_R8: (Reg8, int),
    LDAction.N16_TO_R16: (Reg16, int),
    LDAction.A_TO_A16: (int,),
    LDAction.A16_TO_A: (int,),
    LDAction.ADDR16_TO_A: (int,),
    LDAction.R16_ADDR_TO_A: (Reg16,),
    LDAction.A_TO_REG16_ADDR: (Reg16,),
    LDAction.REG_TO_REG: (Reg8, Reg8),
    LDAction.REG_TO_HL: (Reg8,),
    LDAction.HL_TO_REG: (Reg8,),
    LDAction.HL_TO_A_INC: (),
    LDAction.A_TO_HL_INC: (),
    LDAction.A_TO_HL_DEC: (),
}


def _matches(operand: object, kind: type) -> bool:
    if kind is int:
        return isinstance(operand, int) and not isinstance(operand, bool)
    return isinstance(operand, kind)


class LD(Instruction):
    """Load a value; the operands expected depend on ``action``.

    N8_TO_R8 and N16_TO_R16 take a register and a value, REG_TO_REG a source
    and a destination register, the absolute-address forms an address, the
    register-indirect forms a single register and the HL+/HL- forms nothing.
    """

    def __init__(self, action: LDAction, *operands: object) -> None:
        if not isinstance(action, LDAction):
            raise TypeError(f"LD action must be an LDAction, got {action!r}")
        kinds = _OPERANDS[action]
        if len(operands) != len(kinds) or not all(
            _matches(operand, kind) for operand, kind in zip(operands, kinds)
        ):
            raise TypeError(f"LD {action.name} got invalid operands {operands!r}")
        self.action = action
        self.reg8: Optional[Reg8] = None
        self.reg16: Optional[Reg16] = None
        self.source: Optional[Reg8] = None
        self.dest: Optional[Reg8] = None
        self.value = 0
        self.address = 0
        super().__init__(self._configure(operands), cycles=1)

    def _configure(self, operands: tuple) -> str:
        action = self.action
        if action is LDAction.N8_TO_R8:
            self.reg8, value = operands
            self.value = value & 0xFF
            return f"LD {self.reg8.value}, 0x{self.value:x}"
        if action is LDAction.N16_TO_R16:
            self.reg16, value = operands
            self.value = value & 0xFFFF
            return f"LD {self.reg16.value}, 0x{self.value:x}"
        if action is LDAction.REG_TO_REG:
            self.source, self.dest = operands
            return f"LD {self.dest.value}, {self.source.value}"
        if action in (LDAction.A_TO_A16, LDAction.A16_TO_A, LDAction.ADDR16_TO_A):
            self.address = operands[0] & 0xFFFF
            return "LD"
        if action in (LDAction.REG_TO_HL, LDAction.HL_TO_REG):
            self.reg8 = operands[0]
            return "LD to HL"
        if action in (LDAction.R16_ADDR_TO_A, LDAction.A_TO_REG16_ADDR):
            self.reg16 = operands[0]
            if action is LDAction.A_TO_REG16_ADDR:
                return f"LD [{self.reg16.value}], A"
            return ""
        if action is LDAction.HL_TO_A_INC:
            return "LD A, [HL+]"
        return ""

    def execute(self, cpu: CPU) -> int:
        action = self.action
        if action is LDAction.N8_TO_R8:
            cpu.increase_pc(2)
            cpu.set_reg8(self.reg8, self.value)
        elif action is LDAction.N16_TO_R16:
            cpu.set_reg16(self.reg16, self.value)
            cpu.increase_pc(3)
        elif action is LDAction.A_TO_A16:
            cpu.write_memory(self.address, cpu.get_reg8(Reg8.A))
            cpu.increase_pc(3)
        elif action is LDAction.A16_TO_A:
            cpu.set_reg8(Reg8.A, cpu.read_memory(self.address))
            cpu.increase_pc(3)
        elif action is LDAction.R16_ADDR_TO_A:
            cpu.increase_pc(1)
            cpu.set_reg8(Reg8.A, cpu.read_memory(cpu.get_reg16(self.reg16)))
        elif action is LDAction.A_TO_REG16_ADDR:
            cpu.increase_pc(1)
            cpu.write_memory(cpu.get_reg16(self.reg16), cpu.get_reg8(Reg8.A))
        elif action is LDAction.REG_TO_REG:
            cpu.increase_pc(1)
            cpu.set_reg8(self.dest, cpu.get_reg8(self.source))
        elif action is LDAction.REG_TO_HL:
            cpu.increase_pc(1)
            cpu.write_memory(cpu.get_reg16(Reg16.HL), cpu.get_reg8(self.reg8))
        elif action is LDAction.HL_TO_REG:
            cpu.increase_pc(1)
            cpu.set_reg8(self.reg8, cpu.read_memory(cpu.get_reg16(Reg16.HL)))
        elif action is LDAction.A_TO_HL_INC:
            cpu.increase_pc(1)
            cpu.write_memory(cpu.get_reg16(Reg16.HL), cpu.get_reg8(Reg8.A))
            cpu.set_reg16(Reg16.HL, cpu.get_reg16(Reg16.HL) + 1)
        elif action is LDAction.A_TO_HL_DEC:
            cpu.increase_pc(1)
            cpu.write_memory(cpu.get_reg16(Reg16.HL), cpu.get_reg8(Reg8.A))
            cpu.set_reg16(Reg16.HL, cpu.get_reg16(Reg16.HL) - 1)
        elif action is LDAction.HL_TO_A_INC:
            cpu.increase_pc(1)
            cpu.set_reg8(Reg8.A, cpu.read_memory(cpu.get_reg16(Reg16.HL)))
            cpu.set_reg16(Reg16.HL, cpu.get_reg16(Reg16.HL) + 1)
        else:
            raise EmulatorError(f"Found unsupported LD action {action.name}")
        return self.cycles


class LDH(Instruction):
    """Load between A and the high page addressed by a one-byte offset."""

    def __init__(self, action: LDHAction, address: int) -> None:
        if not isinstance(action, LDHAction):
            raise TypeError(f"LDH action must be an LDHAction, got {action!r}")
        if isinstance(address, bool) or not isinstance(address, int):
            raise TypeError(f"LDH address must be an int, got {address!r}")
        self.action = action
        self.address = address & 0xFF
        super().__init__(f"LDH with address {0xFF00 + self.address:x}", cycles=3)

    def execute(self, cpu: CPU) -> int:
        if self.action is LDHAction.A_TO_ADDRESS:
            cpu.write_memory(0xFF00 + self.address, cpu.get_reg8(Reg8.A))
        else:
            cpu.set_reg8(Reg8.A, cpu.read_memory(0xFF + self.address))
        cpu.increase_pc(2)
        return self.cycles