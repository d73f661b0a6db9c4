"""Arithmetic, logic, rotate and shift instructions."""

from __future__ import annotations

from typing import Optional, Union

from gemu.cpu import CPU, Flag, Reg8, Reg16
from gemu.instruction import Instruction


def _update(cpu: CPU, flag: Flag, condition: bool) -> None:
    if condition:
        cpu.set_flag(flag)
    else:
        cpu.clear_flag(flag)


def _flag_bit(cpu: CPU, flag: Flag) -> int:
    return int(cpu.get_flag(flag))


def _check_value(operand: object, name: str) -> int:
    if isinstance(operand, bool) or not isinstance(operand, int):
        raise TypeError(f"{name} operand must be an int, got {operand!r}")
    return operand & 0xFF


def _check_reg8(reg: object, name: str) -> Reg8:
    if not isinstance(reg, Reg8):
        raise TypeError(f"{name} operand must be a Reg8, got {reg!r}")
    return reg


class ADC(Instruction):
    """Add a register or an immediate byte plus the carry flag to A."""

    def __init__(self, operand: Union[Reg8, int]) -> None:
        self.reg: Optional[Reg8] = None
        self.value = 0
        if isinstance(operand, Reg8):
            self.reg = operand
            super().__init__("ADC")
        else:
            self.value = _check_value(operand, "ADC")
            super().__init__("ADC n8")

    def execute(self, cpu: CPU) -> int:
        if self.reg is not None:
            cpu.increase_pc(1)
            other = cpu.get_reg8(self.reg)
            cycles = 1
        else:
            cpu.increase_pc(2)
            other = self.value
            cycles = 2
        a = cpu.get_reg8(Reg8.A)
        _update(cpu, Flag.C, a + other + _flag_bit(cpu, Flag.C) > 0xFF)
        _update(cpu, Flag.H, (a & 0xF) + (other & 0xF) + _flag_bit(cpu, Flag.Z) > 0xF)
        cpu.set_reg8(Reg8.A, a + other + _flag_bit(cpu, Flag.C))
        cpu.clear_flag(Flag.N)
        if cpu.get_reg8(Reg8.A) == 0:
            cpu.set_flag(Flag.Z)
        return cycles


class ADD(Instruction):
    """Add a 16-bit register to HL, or a register or immediate byte to A."""

    def __init__(self, operand: Union[Reg16, Reg8, int]) -> None:
        self.reg16: Optional[Reg16] = None
        self.reg8: Optional[Reg8] = None
        self.value = 0
        if isinstance(operand, Reg16):
            self.reg16 = operand
            super().__init__("ADD to HL")
        elif isinstance(operand, Reg8):
            self.reg8 = operand
            super().__init__("ADD reg8 to A")
        else:
            self.value = _check_value(operand, "ADD")
            super().__init__("ADD n8 to A")

    def execute(self, cpu: CPU) -> int:
        if self.reg16 is not None:
            cpu.increase_pc(1)
            cpu.set_reg16(Reg16.HL, cpu.get_reg16(Reg16.HL) + cpu.get_reg16(self.reg16))
            cpu.clear_flag(Flag.N)
            hl = cpu.get_reg16(Reg16.HL)
            other = cpu.get_reg16(self.reg16)
            _update(cpu, Flag.C, hl + other > 0xFFFF)
            _update(cpu, Flag.H, (hl & 0xFFF) + (other & 0xFFF) > 0xFFF)
            return 2

        a = cpu.get_reg8(Reg8.A)
        if self.reg8 is not None:
            cpu.increase_pc(1)
            other = cpu.get_reg8(self.reg8)
            cpu.set_reg8(Reg8.A, a + other)
            cpu.clear_flag(Flag.N)
            if cpu.get_reg8(Reg8.A) == 0:
                cpu.set_flag(Flag.Z)
            if a + other > 0xFF:
                cpu.set_flag(Flag.C)
            if (a & 0xF) + (other & 0xF) > 0xF:
                cpu.set_flag(Flag.H)
            return 1

        cpu.increase_pc(2)
        _update(cpu, Flag.C, a + self.value > 0xFF)
        _update(cpu, Flag.H, (a & 0xF) + (self.value & 0xF) > 0xF)
        cpu.set_reg8(Reg8.A, a + self.value)
        cpu.clear_flag(Flag.N)
        if cpu.get_reg8(Reg8.A) == 0:
            cpu.set_flag(Flag.Z)
        return 2


class AND(Instruction):
    """Bitwise AND of A with an immediate byte."""

    def __init__(self, value: int) -> None:
        super().__init__("AND")
        self.value = _check_value(value, "AND")

    def execute(self, cpu: CPU) -> int:
        cpu.set_reg8(Reg8.A, cpu.get_reg8(Reg8.A) & self.value)
        cpu.clear_all_flags()
        if cpu.get_reg8(Reg8.A) == 0:
            cpu.set_flag(Flag.Z)
        cpu.set_flag(Flag.H)
        cpu.increase_pc(1)
        return 2


class CP(Instruction):
    """Compare A with an immediate byte, setting Z when they are equal."""

    def __init__(self, value: int) -> None:
        super().__init__("CP")
        self.value = _check_value(value, "CP")

    def execute(self, cpu: CPU) -> int:
        cpu.set_flag(Flag.N)
        self.cycles = 2
        result = (cpu.get_reg8(Reg8.A) - self.value) & 0xFF
        _update(cpu, Flag.Z, result == 0)
        cpu.increase_pc(2)
        return 2


class DEC(Instruction):
    """Decrement an 8-bit or 16-bit register."""

    def __init__(self, reg: Union[Reg8, Reg16]) -> None:
        self.reg = reg
        if isinstance(reg, Reg16):
            super().__init__("DEC r16")
        elif isinstance(reg, Reg8):
            super().__init__(f"DEC {reg.value}")
        else:
            raise TypeError(f"DEC operand must be a register, got {reg!r}")

    def execute(self, cpu: CPU) -> int:
        cpu.increase_pc(1)
        if isinstance(self.reg, Reg16):
            cpu.set_reg16(self.reg, cpu.get_reg16(self.reg) - 1)
            return 2
        cpu.set_reg8(self.reg, cpu.get_reg8(self.reg) - 1)
        cpu.set_flag(Flag.N)
        value = cpu.get_reg8(self.reg)
        _update(cpu, Flag.Z, value == 0)
        _update(cpu, Flag.H, value == 0xFF)
        return 1


class INC(Instruction):
    """Increment an 8-bit or 16-bit register."""

    def __init__(self, reg: Union[Reg8, Reg16]) -> None:
        self.reg = reg
        if isinstance(reg, Reg16):
            super().__init__("INC r16")
        elif isinstance(reg, Reg8):
            super().__init__(f"INC {reg.value}")
        else:
            raise TypeError(f"INC operand must be a register, got {reg!r}")

    def execute(self, cpu: CPU) -> int:
        cpu.increase_pc(1)
        if isinstance(self.reg, Reg16):
            cpu.set_reg16(self.reg, cpu.get_reg16(self.reg) + 1)
            return 0
        cpu.set_reg8(self.reg, cpu.get_reg8(self.reg) + 1)
        cpu.clear_flag(Flag.N)
        value = cpu.get_reg8(self.reg)
        _update(cpu, Flag.Z, value == 0)
        _update(cpu, Flag.H, value == 0xFF)
        return 0


class OR(Instruction):
    """Bitwise OR of A with a register."""

    def __init__(self, reg: Reg8) -> None:
        super().__init__("OR")
        self.reg = _check_reg8(reg, "OR")

    def execute(self, cpu: CPU) -> int:
        cpu.set_reg8(Reg8.A, cpu.get_reg8(Reg8.A) | cpu.get_reg8(self.reg))
        cpu.clear_all_flags()
        if cpu.get_reg8(Reg8.A) == 0:
            cpu.set_flag(Flag.Z)
        cpu.increase_pc(1)
        return 1


class SUB(Instruction):
    """Subtract-with-flags operation on A and an immediate byte."""

    def __init__(self, value: int) -> None:
        super().__init__("SUB")
        self.value = _check_value(value, "SUB")

    def execute(self, cpu: CPU) -> int:
        cpu.increase_pc(2)
        a = cpu.get_reg8(Reg8.A)
        _update(cpu, Flag.C, a > self.value)
        _update(cpu, Flag.H, (a & 0xF) > (self.value & 0xF))
        cpu.set_reg8(Reg8.A, a + self.value)
        cpu.set_flag(Flag.N)
        _update(cpu, Flag.Z, cpu.get_reg8(Reg8.A) == 0)
        return 2


class XOR(Instruction):
    """Bitwise XOR of A with a register."""

    def __init__(self, reg: Reg8) -> None:
        super().__init__("XOR")
        self.reg = _check_reg8(reg, "XOR")

    def execute(self, cpu: CPU) -> int:
        cpu.set_reg8(Reg8.A, cpu.get_reg8(Reg8.A) ^ cpu.get_reg8(self.reg))
        cpu.clear_all_flags()
        if cpu.get_reg8(Reg8.A) == 0:
            cpu.set_flag(Flag.Z)
        cpu.increase_pc(1)
        return 1


class RLCA(Instruction):
    """Shift A left, moving its top bit into the carry flag."""

    def __init__(self) -> None:
        super().__init__("RLCA")

    def execute(self, cpu: CPU) -> int:
        cpu.increase_pc(1)
        cpu.clear_all_flags()
        a = cpu.get_reg8(Reg8.A)
        highest = a & 0x80
        cpu.set_reg8(Reg8.A, (a << 1) | (highest & 0x1))
        if highest:
            cpu.set_flag(Flag.C)
        return 1


class RR(Instruction):
    """Rotate a register right through the carry flag."""

    def __init__(self, reg: Reg8) -> None:
        self.reg = _check_reg8(reg, "RR")
        super().__init__(f"RR {reg.value}")

    def execute(self, cpu: CPU) -> int:
        cpu.increase_pc(2)
        carry = _flag_bit(cpu, Flag.C)
        cpu.clear_all_flags()
        value = cpu.get_reg8(self.reg)
        if value & 0x1:
            cpu.set_flag(Flag.C)
        cpu.set_reg8(self.reg, (value >> 1) | (carry << 7))
        if cpu.get_reg8(self.reg) == 0:
            cpu.set_flag(Flag.Z)
        return 2


class RRA(Instruction):
    """Rotate A right through the carry flag."""

    def __init__(self) -> None:
        super().__init__("RRA ")

    def execute(self, cpu: CPU) -> int:
        cpu.increase_pc(1)
        carry = _flag_bit(cpu, Flag.C)
        cpu.clear_all_flags()
        a = cpu.get_reg8(Reg8.A)
        if a & 0x1:
            cpu.set_flag(Flag.C)
        cpu.set_reg8(Reg8.A, (a >> 1) | (carry << 7))
        return 1


class SRL(Instruction):
    """Shift a register right logically, moving bit 0 into the carry flag."""

    def __init__(self, reg: Reg8) -> None:
        self.reg = _check_reg8(reg, "SRL")
        super().__init__(f"SRL {reg.value}")

    def execute(self, cpu: CPU) -> int:
        cpu.increase_pc(2)
        cpu.clear_all_flags()
        value = cpu.get_reg8(self.reg)
        if value & 0x1:
            cpu.set_flag(Flag.C)
        cpu.set_reg8(self.reg, value >> 1)
        if cpu.get_reg8(self.reg) == 0:
            cpu.set_flag(Flag.Z)
        return 2