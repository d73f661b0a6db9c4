"""Control-flow, stack and miscellaneous instructions."""

from __future__ import annotations

from enum import Enum
from typing import Optional, TextIO, Union

from gemu.cpu import CPU, Flag, FlagValue, Reg16
from gemu.instruction import Instruction


class Condition(Enum):
    """Whether a conditional jump or return fires on a set or a cleared flag."""

    NORMAL = "normal"
    NOT = "not"


def _check_int(value: object, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} operand must be an int, got {value!r}")
    return value


def _check_flag(flag: object, condition: object, name: str) -> None:
    if not isinstance(flag, Flag):
        raise TypeError(f"{name} flag must be a Flag, got {flag!r}")
    if not isinstance(condition, Condition):
        raise TypeError(f"{name} condition must be a Condition, got {condition!r}")


def _signed8(value: int) -> int:
    value &= 0xFF
    return value - 0x100 if value & 0x80 else value


def _condition_met(cpu: CPU, flag: Flag, condition: Condition) -> bool:
    is_set = cpu.get_flag(flag) is FlagValue.SET
    return is_set if condition is Condition.NORMAL else not is_set


def _log(stream: Optional[TextIO], message: str) -> None:
    if stream is not None:
        stream.write(message + "\n")


def _push16(cpu: CPU, value: int) -> None:
    cpu.modify_sp(-1)
    cpu.write_memory(cpu.sp, (value >> 8) & 0xFF)
    cpu.modify_sp(-1)
    cpu.write_memory(cpu.sp, value & 0xFF)


def _pop16(cpu: CPU) -> int:
    low = cpu.read_memory(cpu.get_reg16(Reg16.SP)) & 0xFF
    cpu.modify_sp(1)
    high = cpu.read_memory(cpu.get_reg16(Reg16.SP)) & 0xFF
    cpu.modify_sp(1)
    return low | (high << 8)


class NOP(Instruction):
    """Do nothing for one cycle."""

    def __init__(self) -> None:
        super().__init__("NOP", cycles=1)

    def execute(self, cpu: CPU) -> int:
        cpu.increase_pc(1)
        return self.cycles


class STOP(Instruction):
    """Stop instruction; skips over its operand byte."""

    def __init__(self, value: int) -> None:
        super().__init__("STOP", cycles=1)
        self.value = _check_int(value, "STOP") & 0xFF

    def execute(self, cpu: CPU) -> int:
        cpu.increase_pc(2)
        return self.cycles


class DI(Instruction):
    """Disable interrupts."""

    def __init__(self) -> None:
        super().__init__("DI", cycles=1)

    def execute(self, cpu: CPU) -> int:
        cpu.disable_interrupts()
        cpu.increase_pc(1)
        return self.cycles


class JP(Instruction):
    """Jump to an absolute address, or to HL when no address is given."""

    def __init__(self, address: Optional[int] = None) -> None:
        if address is None:
            self.address: Optional[int] = None
            super().__init__("", cycles=1)
        else:
            self.address = _check_int(address, "JP") & 0xFFFF
            super().__init__(f"JP 0x{self.address:x}", cycles=3)

    def execute(self, cpu: CPU) -> int:
        if self.address is None:
            cpu.set_pc(cpu.get_reg16(Reg16.HL))
        else:
            cpu.set_pc(self.address)
        return self.cycles


class JR(Instruction):
    """Relative jump by a signed byte, optionally conditional on a flag."""

    def __init__(
        self,
        offset: int,
        flag: Optional[Flag] = None,
        condition: Condition = Condition.NORMAL,
    ) -> None:
        self.offset = _signed8(_check_int(offset, "JR"))
        self.flag = flag
        self.condition = condition
        if flag is None:
            text = f"JR uncond {self.offset & 0xFFFFFFFF:x}"
        else:
            _check_flag(flag, condition, "JR")
            prefix = "N" if condition is Condition.NOT else ""
            text = f"JR  {prefix}{flag.name}"
        super().__init__(text, cycles=2)

    def execute(self, cpu: CPU) -> int:
        if self.flag is None or _condition_met(cpu, self.flag, self.condition):
            cpu.increase_pc(2 + self.offset)
        else:
            cpu.increase_pc(2)
        return self.cycles


class PUSH(Instruction):
    """Push a 16-bit register or a literal address onto the stack."""

    def __init__(self, operand: Union[Reg16, int]) -> None:
        self.reg: Optional[Reg16] = None
        self.address = 0
        if isinstance(operand, Reg16):
            self.reg = operand
            super().__init__("Push register", cycles=4)
        else:
            self.address = _check_int(operand, "PUSH") & 0xFFFF
            super().__init__("Push address", cycles=4)

    def execute(self, cpu: CPU) -> int:
        cpu.increase_pc(1)
        value = cpu.get_reg16(self.reg) if self.reg is not None else self.address
        _push16(cpu, value)
        return self.cycles


class POP(Instruction):
    """Pop a 16-bit value from the stack into a register."""

    def __init__(self, reg: Reg16) -> None:
        if not isinstance(reg, Reg16):
            raise TypeError(f"POP operand must be a Reg16, got {reg!r}")
        self.reg = reg
        super().__init__("POP", cycles=3)

    def execute(self, cpu: CPU) -> int:
        cpu.increase_pc(1)
        cpu.set_reg16(self.reg, _pop16(cpu))
        return self.cycles


class CALL(Instruction):
    """Push a return address and jump to a subroutine."""

    def __init__(self, address: int, return_address: int) -> None:
        self.address = _check_int(address, "CALL") & 0xFFFF
        self.return_address = _check_int(return_address, "CALL") & 0xFFFF
        super().__init__(f"Call {self.address:x}", cycles=6)

    def execute(self, cpu: CPU) -> int:
        PUSH(self.return_address).execute(cpu)
        JP(self.address).execute(cpu)
        _log(
            cpu.call_graph_log,
            f"Call 0x{self.address:x} with return address 0x{self.return_address:x}",
        )
        return self.cycles


class RET(Instruction):
    """Return from a subroutine, optionally conditional on a flag."""

    def __init__(
        self, flag: Optional[Flag] = None, condition: Condition = Condition.NORMAL
    ) -> None:
        self.flag = flag
        self.condition = condition
        if flag is None:
            super().__init__("RET", cycles=4)
        else:
            _check_flag(flag, condition, "RET")
            super().__init__("RET cc", cycles=2)

    def execute(self, cpu: CPU) -> int:
        if self.flag is None:
            pc = _pop16(cpu)
            cpu.set_pc(pc)
            _log(cpu.call_graph_log, f"RET to 0x{pc:x}")
            return self.cycles
        cpu.increase_pc(1)
        if _condition_met(cpu, self.flag, self.condition):
            pc = _pop16(cpu)
            cpu.set_pc(pc)
            _log(cpu.call_graph_log, f"RET cc to 0x{pc:x}")
        return self.cycles