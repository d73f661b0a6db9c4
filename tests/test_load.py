import pytest

from gemu.cpu import CPU, EmulatorError, Reg8, Reg16
from gemu.load import LD, LDH, LDAction, LDHAction


@pytest.fixture
def cpu():
    return CPU(None)


def test_n8_to_r8(cpu):
    start = cpu.pc
    instruction = LD(LDAction.N8_TO_R8, Reg8.B, 0x42)
    instruction.execute(cpu)
    assert cpu.get_reg8(Reg8.B) == 0x42
    assert cpu.pc == start + 2
    assert str(instruction) == "LD B, 0x42"


def test_n8_negative_value_is_a_byte(cpu):
    LD(LDAction.N8_TO_R8, Reg8.C, -1).execute(cpu)
    assert cpu.get_reg8(Reg8.C) == (-1) & 0xFF


def test_n16_to_r16(cpu):
    start = cpu.pc
    instruction = LD(LDAction.N16_TO_R16, Reg16.HL, 0xC123)
    instruction.execute(cpu)
    assert cpu.get_reg16(Reg16.HL) == 0xC123
    assert cpu.pc == start + 3
    assert str(instruction) == "LD HL, 0xc123"


def test_a16_store_and_load_round_trip(cpu):
    cpu.set_reg8(Reg8.A, 0x5A)
    LD(LDAction.A_TO_A16, 0xC000).execute(cpu)
    cpu.set_reg8(Reg8.A, 0)
    start = cpu.pc
    LD(LDAction.A16_TO_A, 0xC000).execute(cpu)
    assert cpu.get_reg8(Reg8.A) == 0x5A
    assert cpu.pc == start + 3


def test_register_indirect_round_trip(cpu):
    cpu.set_reg16(Reg16.DE, 0xC010)
    cpu.set_reg8(Reg8.A, 0x77)
    store = LD(LDAction.A_TO_REG16_ADDR, Reg16.DE)
    store.execute(cpu)
    assert cpu.read_memory(0xC010) == 0x77
    assert str(store) == "LD [DE], A"
    cpu.set_reg8(Reg8.A, 0)
    LD(LDAction.R16_ADDR_TO_A, Reg16.DE).execute(cpu)
    assert cpu.get_reg8(Reg8.A) == 0x77


def test_reg_to_reg_copies_source_into_dest(cpu):
    cpu.set_reg8(Reg8.A, 0x99)
    instruction = LD(LDAction.REG_TO_REG, Reg8.A, Reg8.B)
    instruction.execute(cpu)
    assert cpu.get_reg8(Reg8.B) == 0x99
    assert str(instruction) == "LD B, A"


def test_reg_to_hl_and_back(cpu):
    cpu.set_reg16(Reg16.HL, 0xC200)
    cpu.set_reg8(Reg8.D, 0x3C)
    LD(LDAction.REG_TO_HL, Reg8.D).execute(cpu)
    assert cpu.read_memory(0xC200) == 0x3C
    LD(LDAction.HL_TO_REG, Reg8.E).execute(cpu)
    assert cpu.get_reg8(Reg8.E) == 0x3C


def test_a_to_hl_inc_and_dec(cpu):
    cpu.set_reg16(Reg16.HL, 0xC300)
    cpu.set_reg8(Reg8.A, 0x11)
    LD(LDAction.A_TO_HL_INC).execute(cpu)
    assert cpu.read_memory(0xC300) == 0x11
    assert cpu.get_reg16(Reg16.HL) == 0xC300 + 1
    LD(LDAction.A_TO_HL_DEC).execute(cpu)
    assert cpu.read_memory(0xC300 + 1) == 0x11
    assert cpu.get_reg16(Reg16.HL) == 0xC300


def test_hl_to_a_inc(cpu):
    cpu.write_memory(0xC400, 0x66)
    cpu.set_reg16(Reg16.HL, 0xC400)
    instruction = LD(LDAction.HL_TO_A_INC)
    instruction.execute(cpu)
    assert cpu.get_reg8(Reg8.A) == 0x66
    assert cpu.get_reg16(Reg16.HL) == 0xC400 + 1
    assert str(instruction) == "LD A, [HL+]"


def test_every_handled_action_advances_pc(cpu):
    cpu.set_reg16(Reg16.HL, 0xC500)
    start = cpu.pc
    LD(LDAction.A_TO_HL_INC).execute(cpu)
    LD(LDAction.REG_TO_REG, Reg8.B, Reg8.C).execute(cpu)
    assert cpu.pc == start + 2


def test_unsupported_action_raises(cpu):
    with pytest.raises(EmulatorError):
        LD(LDAction.ADDR16_TO_A, 0xC000).execute(cpu)


@pytest.mark.parametrize(
    "action, operands",
    [
        (LDAction.N8_TO_R8, (Reg16.BC, 1)),
        (LDAction.REG_TO_REG, (Reg8.A,)),
        (LDAction.HL_TO_A_INC, (Reg8.A,)),
        (LDAction.A_TO_A16, (True,)),
    ],
)
def test_invalid_operands_raise(action, operands):
    with pytest.raises(TypeError):
        LD(action, *operands)


def test_ldh_store_to_high_memory(cpu):
    cpu.set_reg8(Reg8.A, 0x24)
    start = cpu.pc
    instruction = LDH(LDHAction.A_TO_ADDRESS, 0x80)
    instruction.execute(cpu)
    assert cpu.read_memory(0xFF00 + 0x80) == 0x24
    assert cpu.pc == start + 2
    assert str(instruction) == "LDH with address ff80"


def test_ldh_store_to_io_register(cpu):
    cpu.set_reg8(Reg8.A, 0x91)
    LDH(LDHAction.A_TO_ADDRESS, 0x40).execute(cpu)
    assert cpu.graphics.lcdc == 0x91


def test_ldh_load_reads_offset_from_0xff(cpu):
    cpu.write_memory(0xFF + 0x44, 0x90)
    start = cpu.pc
    LDH(LDHAction.ADDRESS_TO_A, 0x44).execute(cpu)
    assert cpu.get_reg8(Reg8.A) == 0x90
    assert cpu.pc == start + 2


def test_ldh_rejects_bad_action():
    with pytest.raises(TypeError):
        LDH("store", 0x10)