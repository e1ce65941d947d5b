import pytest

from senne.opcodes import (
    OPCODES,
    AddressMode,
    InstructionInfo,
    InvalidInstructionError,
    Mnemonic,
    Opcode,
    decode,
    instruction_info,
)

BRANCHES = [
    Mnemonic.BCC,
    Mnemonic.BCS,
    Mnemonic.BEQ,
    Mnemonic.BMI,
    Mnemonic.BNE,
    Mnemonic.BPL,
    Mnemonic.BVC,
    Mnemonic.BVS,
]


@pytest.mark.parametrize(
    "byte, mnemonic, mode",
    [
        (0xA9, Mnemonic.LDA, AddressMode.IMMEDIATE),
        (0xB1, Mnemonic.LDA, AddressMode.INDIRECT_INDEXED),
        (0x6C, Mnemonic.JMP, AddressMode.INDIRECT),
        (0x0A, Mnemonic.ASL, AddressMode.ACCUMULATOR),
        (0x00, Mnemonic.BRK, AddressMode.IMPLIED),
        (0x40, Mnemonic.RTI, AddressMode.IMPLIED),
        (0xD0, Mnemonic.BNE, AddressMode.RELATIVE),
        (0xB4, Mnemonic.LDY, AddressMode.ZERO_PAGE_X),
    ],
)
def test_decode_known(byte, mnemonic, mode):
    assert decode(byte) == Opcode(byte, mnemonic, mode)


@pytest.mark.parametrize("byte", [0x02, 0xFF, 0x80])
def test_decode_invalid(byte):
    with pytest.raises(InvalidInstructionError) as info:
        decode(byte)
    assert info.value.byte == byte


def test_decode_out_of_range():
    with pytest.raises(ValueError):
        decode(0x100)


def test_decode_round_trips_code():
    for byte, opcode in OPCODES.items():
        assert decode(byte).code == byte
        assert opcode.code == byte


def test_decode_all_bytes_either_known_or_invalid():
    for byte in range(0x100):
        if byte in OPCODES:
            assert decode(byte) is OPCODES[byte]
        else:
            with pytest.raises(InvalidInstructionError):
                decode(byte)


def test_every_opcode_has_timing_except_ldy_indexed_x():
    broken = {0xB4, 0xBC}
    for byte, opcode in OPCODES.items():
        if byte in broken:
            with pytest.raises(ValueError):
                instruction_info(opcode.mnemonic, opcode.mode, False)
        else:
            info = instruction_info(opcode.mnemonic, opcode.mode, False)
            assert info.size >= 1
            assert info.cycles >= 2


def test_size_follows_mode_for_one_byte_forms():
    for opcode in OPCODES.values():
        if opcode.mode in (AddressMode.IMPLIED, AddressMode.ACCUMULATOR):
            assert instruction_info(opcode.mnemonic, opcode.mode, False).size == 1


def test_immediate_is_two_bytes_two_cycles():
    for opcode in OPCODES.values():
        if opcode.mode is AddressMode.IMMEDIATE:
            assert instruction_info(opcode.mnemonic, opcode.mode, False) == InstructionInfo(
                cycles=2, size=2, jumps=False
            )


def test_lda_absolute_x_page_cross_timing_quirk():
    crossed = instruction_info(Mnemonic.LDA, AddressMode.ABSOLUTE_X, True)
    plain = instruction_info(Mnemonic.LDA, AddressMode.ABSOLUTE_X, False)
    assert crossed.cycles < plain.cycles
    assert crossed.size == plain.size == 3


def test_arithmetic_page_cross_adds_one_cycle():
    for mnemonic in (Mnemonic.AND, Mnemonic.ADC, Mnemonic.CMP):
        for mode in (AddressMode.ABSOLUTE_X, AddressMode.INDIRECT_INDEXED):
            crossed = instruction_info(mnemonic, mode, True)
            plain = instruction_info(mnemonic, mode, False)
            assert crossed.cycles == plain.cycles + 1


def test_page_cross_ignored_without_penalty():
    for mode in (AddressMode.ABSOLUTE_X, AddressMode.ABSOLUTE_Y):
        assert instruction_info(Mnemonic.STA, mode, True) == instruction_info(
            Mnemonic.STA, mode, False
        )


@pytest.mark.parametrize("mnemonic", BRANCHES)
def test_branch_base_cost(mnemonic):
    plain = instruction_info(mnemonic, AddressMode.RELATIVE, False)
    crossed = instruction_info(mnemonic, AddressMode.RELATIVE, True)
    assert plain == InstructionInfo(cycles=2, size=2, jumps=False)
    assert crossed.cycles == plain.cycles + 2
    assert not crossed.jumps


@pytest.mark.parametrize(
    "mnemonic, mode",
    [
        (Mnemonic.JMP, AddressMode.ABSOLUTE),
        (Mnemonic.JMP, AddressMode.INDIRECT),
        (Mnemonic.JSR, AddressMode.ABSOLUTE),
        (Mnemonic.RTS, AddressMode.IMPLIED),
        (Mnemonic.BRK, AddressMode.IMPLIED),
        (Mnemonic.RTI, AddressMode.IMPLIED),
    ],
)
def test_control_flow_instructions_jump(mnemonic, mode):
    assert instruction_info(mnemonic, mode, False).jumps is True


def test_brk_timing():
    assert instruction_info(Mnemonic.BRK, AddressMode.IMPLIED, False) == InstructionInfo(
        cycles=7, size=1, jumps=True
    )


def test_read_modify_write_costs_more_than_load():
    for mode in (AddressMode.ZERO_PAGE, AddressMode.ABSOLUTE):
        assert (
            instruction_info(Mnemonic.INC, mode, False).cycles
            > instruction_info(Mnemonic.LDA, mode, False).cycles
        )


@pytest.mark.parametrize(
    "mnemonic, mode",
    [
        (Mnemonic.STA, AddressMode.IMMEDIATE),
        (Mnemonic.BIT, AddressMode.IMMEDIATE),
        (Mnemonic.NOP, AddressMode.ABSOLUTE),
        (Mnemonic.LDY, AddressMode.ABSOLUTE_X),
    ],
)
def test_unsupported_mode_raises(mnemonic, mode):
    with pytest.raises(ValueError):
        instruction_info(mnemonic, mode, False)