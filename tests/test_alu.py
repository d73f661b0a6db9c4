import pytest

from gemu.alu import ADC, ADD, AND, CP, DEC, INC, OR, RLCA, RR, RRA, SRL, SUB, XOR
from gemu.cpu import CPU, Flag, FlagValue, Reg8, Reg16

SET = FlagValue.SET
CLEARED = FlagValue.CLEARED


@pytest.fixture
def cpu():
    return CPU(None)


def flags(cpu):
    return {flag: cpu.get_flag(flag) for flag in Flag}


def test_xor_a_clears_a_and_sets_zero(cpu):
    start = cpu.pc
    assert XOR(Reg8.A).execute(cpu) == 1
    assert cpu.get_reg8(Reg8.A) == 0
    assert cpu.get_flag(Flag.Z) == SET
    assert cpu.pc == start + 1


def test_or_combines_registers(cpu):
    cpu.set_reg8(Reg8.A, 0x0F)
    cpu.set_reg8(Reg8.B, 0xF0)
    cpu.set_flag(Flag.C)
    assert OR(Reg8.B).execute(cpu) == 1
    assert cpu.get_reg8(Reg8.A) == 0x0F | 0xF0
    assert cpu.get_flag(Flag.C) == CLEARED
    assert cpu.get_flag(Flag.Z) == CLEARED


def test_and_to_zero_sets_zero_and_half(cpu):
    cpu.set_reg8(Reg8.A, 0xF0)
    start = cpu.pc
    assert AND(0x0F).execute(cpu) == 2
    assert cpu.get_reg8(Reg8.A) == 0
    assert cpu.get_flag(Flag.Z) == SET
    assert cpu.get_flag(Flag.H) == SET
    assert cpu.pc == start + 1


def test_cp_equal_sets_zero_and_subtract(cpu):
    cpu.set_reg8(Reg8.A, 0x42)
    start = cpu.pc
    instruction = CP(0x42)
    assert instruction.execute(cpu) == 2
    assert instruction.cycles == 2
    assert cpu.get_flag(Flag.Z) == SET
    assert cpu.get_flag(Flag.N) == SET
    assert cpu.get_reg8(Reg8.A) == 0x42
    assert cpu.pc == start + 2


def test_cp_different_clears_zero(cpu):
    cpu.set_reg8(Reg8.A, 0x42)
    cpu.set_flag(Flag.Z)
    CP(0x41).execute(cpu)
    assert cpu.get_flag(Flag.Z) == CLEARED


def test_dec_r8_to_zero(cpu):
    cpu.set_reg8(Reg8.B, 1)
    assert DEC(Reg8.B).execute(cpu) == 1
    assert cpu.get_reg8(Reg8.B) == 0
    assert cpu.get_flag(Flag.Z) == SET
    assert cpu.get_flag(Flag.N) == SET


def test_dec_r8_wraps_and_sets_half(cpu):
    cpu.set_reg8(Reg8.C, 0)
    DEC(Reg8.C).execute(cpu)
    assert cpu.get_reg8(Reg8.C) == 0xFF
    assert cpu.get_flag(Flag.H) == SET
    assert cpu.get_flag(Flag.Z) == CLEARED


def test_dec_r16_wraps(cpu):
    cpu.set_reg16(Reg16.BC, 0)
    before = flags(cpu)
    assert DEC(Reg16.BC).execute(cpu) == 2
    assert cpu.get_reg16(Reg16.BC) == 0xFFFF
    assert flags(cpu) == before


def test_inc_r8_wraps_to_zero(cpu):
    cpu.set_reg8(Reg8.C, 0xFF)
    start = cpu.pc
    assert INC(Reg8.C).execute(cpu) == 0
    assert cpu.get_reg8(Reg8.C) == 0
    assert cpu.get_flag(Flag.Z) == SET
    assert cpu.get_flag(Flag.N) == CLEARED
    assert cpu.pc == start + 1


def test_inc_then_dec_r16_round_trips(cpu):
    original = cpu.get_reg16(Reg16.HL)
    INC(Reg16.HL).execute(cpu)
    assert cpu.get_reg16(Reg16.HL) == original + 1
    DEC(Reg16.HL).execute(cpu)
    assert cpu.get_reg16(Reg16.HL) == original


def test_add_n8_sets_carry_on_overflow(cpu):
    cpu.set_reg8(Reg8.A, 0xFF)
    start = cpu.pc
    assert ADD(1).execute(cpu) == 2
    assert cpu.get_reg8(Reg8.A) == 0
    assert cpu.get_flag(Flag.C) == SET
    assert cpu.get_flag(Flag.H) == SET
    assert cpu.get_flag(Flag.Z) == SET
    assert cpu.pc == start + 2


def test_add_n8_without_carry(cpu):
    cpu.set_reg8(Reg8.A, 0x10)
    ADD(0x20).execute(cpu)
    assert cpu.get_reg8(Reg8.A) == 0x10 + 0x20
    assert cpu.get_flag(Flag.C) == CLEARED
    assert cpu.get_flag(Flag.H) == CLEARED


def test_add_reg8_to_a(cpu):
    cpu.set_reg8(Reg8.A, 0x10)
    cpu.set_reg8(Reg8.B, 0x05)
    assert ADD(Reg8.B).execute(cpu) == 1
    assert cpu.get_reg8(Reg8.A) == 0x10 + 0x05
    assert cpu.get_flag(Flag.N) == CLEARED


def test_add_reg16_to_hl(cpu):
    cpu.set_reg16(Reg16.HL, 0x1000)
    cpu.set_reg16(Reg16.DE, 0x0234)
    start = cpu.pc
    assert ADD(Reg16.DE).execute(cpu) == 2
    assert cpu.get_reg16(Reg16.HL) == 0x1000 + 0x0234
    assert cpu.get_flag(Flag.C) == CLEARED
    assert cpu.pc == start + 1


def test_adc_n8_adds_to_a(cpu):
    cpu.set_reg8(Reg8.A, 1)
    assert ADC(2).execute(cpu) == 2
    assert cpu.get_reg8(Reg8.A) == 1 + 2
    assert cpu.get_flag(Flag.C) == CLEARED


def test_adc_reg_cycles_and_pc(cpu):
    cpu.set_reg8(Reg8.A, 1)
    cpu.set_reg8(Reg8.L, 4)
    start = cpu.pc
    assert ADC(Reg8.L).execute(cpu) == 1
    assert cpu.get_reg8(Reg8.A) == 1 + 4
    assert cpu.pc == start + 1


def test_sub_sets_subtract_flag_and_advances(cpu):
    cpu.set_reg8(Reg8.A, 5)
    start = cpu.pc
    assert SUB(3).execute(cpu) == 2
    assert cpu.get_flag(Flag.N) == SET
    assert cpu.get_flag(Flag.C) == SET
    assert cpu.pc == start + 2


def test_srl_moves_low_bit_into_carry(cpu):
    cpu.set_reg8(Reg8.B, 0x01)
    assert SRL(Reg8.B).execute(cpu) == 2
    assert cpu.get_reg8(Reg8.B) == 0
    assert cpu.get_flag(Flag.C) == SET
    assert cpu.get_flag(Flag.Z) == SET


def test_srl_halves_even_value(cpu):
    cpu.set_reg8(Reg8.A, 0x80)
    SRL(Reg8.A).execute(cpu)
    assert cpu.get_reg8(Reg8.A) == 0x80 >> 1
    assert cpu.get_flag(Flag.C) == CLEARED


def test_rr_rotates_carry_into_top_bit(cpu):
    cpu.set_reg8(Reg8.C, 0)
    cpu.set_flag(Flag.C)
    RR(Reg8.C).execute(cpu)
    assert cpu.get_reg8(Reg8.C) == 0x80
    assert cpu.get_flag(Flag.C) == CLEARED


def test_rr_low_bit_into_carry(cpu):
    cpu.set_reg8(Reg8.C, 0x01)
    RR(Reg8.C).execute(cpu)
    assert cpu.get_reg8(Reg8.C) == 0
    assert cpu.get_flag(Flag.C) == SET
    assert cpu.get_flag(Flag.Z) == SET


def test_rra_leaves_zero_flag_clear(cpu):
    cpu.set_reg8(Reg8.A, 0x01)
    cpu.set_flag(Flag.Z)
    assert RRA().execute(cpu) == 1
    assert cpu.get_reg8(Reg8.A) == 0
    assert cpu.get_flag(Flag.C) == SET
    assert cpu.get_flag(Flag.Z) == CLEARED


def test_rlca_top_bit_into_carry(cpu):
    cpu.set_reg8(Reg8.A, 0x80)
    RLCA().execute(cpu)
    assert cpu.get_reg8(Reg8.A) == 0
    assert cpu.get_flag(Flag.C) == SET


def test_rlca_shifts_left(cpu):
    cpu.set_reg8(Reg8.A, 0x01)
    RLCA().execute(cpu)
    assert cpu.get_reg8(Reg8.A) == 0x01 << 1
    assert cpu.get_flag(Flag.C) == CLEARED


@pytest.mark.parametrize(
    "instruction, text",
    [
        (INC(Reg8.B), "INC B"),
        (INC(Reg16.DE), "INC r16"),
        (DEC(Reg8.C), "DEC C"),
        (DEC(Reg16.BC), "DEC r16"),
        (SRL(Reg8.A), "SRL A"),
        (RR(Reg8.C), "RR C"),
        (ADD(Reg16.DE), "ADD to HL"),
        (ADD(Reg8.B), "ADD reg8 to A"),
        (ADD(5), "ADD n8 to A"),
        (ADC(Reg8.L), "ADC"),
        (ADC(5), "ADC n8"),
        (AND(1), "AND"),
        (OR(Reg8.B), "OR"),
        (XOR(Reg8.A), "XOR"),
        (CP(1), "CP"),
        (SUB(1), "SUB"),
    ],
)
def test_mnemonics(instruction, text):
    assert str(instruction) == text


@pytest.mark.parametrize("factory", [ADD, ADC, AND, CP, SUB, INC, DEC, OR, XOR, RR, SRL])
def test_bad_operand_type_rejected(factory):
    with pytest.raises(TypeError):
        factory("B")