"""Instruction decoding and per-instruction size and timing tables."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType
from typing import Mapping, NamedTuple


class InvalidInstructionError(ValueError):
    """Raised when a byte does not decode to a known instruction."""

    def __init__(self, byte: int) -> None:
        super().__init__(f"invalid instruction {byte:#04x}")
        self.byte = byte


class AddressMode(Enum):
    """How an instruction finds its operand."""

    IMPLIED = auto()
    ACCUMULATOR = auto()
    IMMEDIATE = auto()
    ZERO_PAGE = auto()
    ZERO_PAGE_X = auto()
    ZERO_PAGE_Y = auto()
    RELATIVE = auto()
    ABSOLUTE = auto()
    ABSOLUTE_X = auto()
    ABSOLUTE_Y = auto()
    INDIRECT = auto()
    INDEXED_INDIRECT = auto()
    INDIRECT_INDEXED = auto()


class Mnemonic(str, Enum):
    """Instruction names."""

    LDA = "LDA"
    LDX = "LDX"
    LDY = "LDY"
    STA = "STA"
    STX = "STX"
    STY = "STY"
    TAX = "TAX"
    TAY = "TAY"
    TXA = "TXA"
    TYA = "TYA"
    TSX = "TSX"
    TXS = "TXS"
    PHA = "PHA"
    PHP = "PHP"
    PLA = "PLA"
    PLP = "PLP"
    AND = "AND"
    EOR = "EOR"
    ORA = "ORA"
    BIT = "BIT"
    ADC = "ADC"
    SBC = "SBC"
    CMP = "CMP"
    CPX = "CPX"
    CPY = "CPY"
    INC = "INC"
    INX = "INX"
    INY = "INY"
    DEC = "DEC"
    DEX = "DEX"
    DEY = "DEY"
    ASL = "ASL"
    LSR = "LSR"
    ROL = "ROL"
    ROR = "ROR"
    JMP = "JMP"
    JSR = "JSR"
    RTS = "RTS"
    BCC = "BCC"
    BCS = "BCS"
    BEQ = "BEQ"
    BMI = "BMI"
    BNE = "BNE"
    BPL = "BPL"
    BVC = "BVC"
    BVS = "BVS"
    CLC = "CLC"
    CLD = "CLD"
    CLI = "CLI"
    CLV = "CLV"
    SEC = "SEC"
    SED = "SED"
    SEI = "SEI"
    BRK = "BRK"
    NOP = "NOP"
    RTI = "RTI"


@dataclass(frozen=True)
class Opcode:
    """A decoded opcode byte."""

    code: int
    mnemonic: Mnemonic
    mode: AddressMode


@dataclass(frozen=True)
class InstructionInfo:
    """Size in bytes, cycle count, and whether the instruction sets the PC itself.

    For branches this is the cost of a branch not taken; the caller adds the
    extra cycle and marks the jump when the branch is taken.
    """

    cycles: int
    size: int
    jumps: bool = False


M = Mnemonic
A = AddressMode

_ENCODING: dict[int, tuple[Mnemonic, AddressMode]] = {
    0xA9: (M.LDA, A.IMMEDIATE),
    0xA5: (M.LDA, A.ZERO_PAGE),
    0xB5: (M.LDA, A.ZERO_PAGE_X),
    0xAD: (M.LDA, A.ABSOLUTE),
    0xBD: (M.LDA, A.ABSOLUTE_X),
    0xB9: (M.LDA, A.ABSOLUTE_Y),
    0xA1: (M.LDA, A.INDEXED_INDIRECT),
    0xB1: (M.LDA, A.INDIRECT_INDEXED),
    0xA2: (M.LDX, A.IMMEDIATE),
    0xA6: (M.LDX, A.ZERO_PAGE),
    0xB6: (M.LDX, A.ZERO_PAGE_Y),
    0xAE: (M.LDX, A.ABSOLUTE),
    0xBE: (M.LDX, A.ABSOLUTE_Y),
    0xA0: (M.LDY, A.IMMEDIATE),
    0xA4: (M.LDY, A.ZERO_PAGE),
    0xB4: (M.LDY, A.ZERO_PAGE_X),
    0xAC: (M.LDY, A.ABSOLUTE),
    0xBC: (M.LDY, A.ABSOLUTE_X),
    0x85: (M.STA, A.ZERO_PAGE),
    0x95: (M.STA, A.ZERO_PAGE_X),
    0x8D: (M.STA, A.ABSOLUTE),
    0x9D: (M.STA, A.ABSOLUTE_X),
    0x99: (M.STA, A.ABSOLUTE_Y),
    0x81: (M.STA, A.INDEXED_INDIRECT),
    0x91: (M.STA, A.INDIRECT_INDEXED),
    0x86: (M.STX, A.ZERO_PAGE),
    0x96: (M.STX, A.ZERO_PAGE_Y),
    0x8E: (M.STX, A.ABSOLUTE),
    0x84: (M.STY, A.ZERO_PAGE),
    0x94: (M.STY, A.ZERO_PAGE_X),
    0x8C: (M.STY, A.ABSOLUTE),
    0xAA: (M.TAX, A.IMPLIED),
    0xA8: (M.TAY, A.IMPLIED),
    0x8A: (M.TXA, A.IMPLIED),
    0x98: (M.TYA, A.IMPLIED),
    0xBA: (M.TSX, A.IMPLIED),
    0x9A: (M.TXS, A.IMPLIED),
    0x48: (M.PHA, A.IMPLIED),
    0x08: (M.PHP, A.IMPLIED),
    0x68: (M.PLA, A.IMPLIED),
    0x28: (M.PLP, A.IMPLIED),
    0x29: (M.AND, A.IMMEDIATE),
    0x25: (M.AND, A.ZERO_PAGE),
    0x35: (M.AND, A.ZERO_PAGE_X),
    0x2D: (M.AND, A.ABSOLUTE),
    0x3D: (M.AND, A.ABSOLUTE_X),
    0x39: (M.AND, A.ABSOLUTE_Y),
    0x21: (M.AND, A.INDEXED_INDIRECT),
    0x31: (M.AND, A.INDIRECT_INDEXED),
    0x49: (M.EOR, A.IMMEDIATE),
    0x45: (M.EOR, A.ZERO_PAGE),
    0x55: (M.EOR, A.ZERO_PAGE_X),
    0x4D: (M.EOR, A.ABSOLUTE),
    0x5D: (M.EOR, A.ABSOLUTE_X),
    0x59: (M.EOR, A.ABSOLUTE_Y),
    0x41: (M.EOR, A.INDEXED_INDIRECT),
    0x51: (M.EOR, A.INDIRECT_INDEXED),
    0x09: (M.ORA, A.IMMEDIATE),
    0x05: (M.ORA, A.ZERO_PAGE),
    0x15: (M.ORA, A.ZERO_PAGE_X),
    0x0D: (M.ORA, A.ABSOLUTE),
    0x1D: (M.ORA, A.ABSOLUTE_X),
    0x19: (M.ORA, A.ABSOLUTE_Y),
    0x01: (M.ORA, A.INDEXED_INDIRECT),
    0x11: (M.ORA, A.INDIRECT_INDEXED),
    0x24: (M.BIT, A.ZERO_PAGE),
    0x2C: (M.BIT, A.ABSOLUTE),
    0x69: (M.ADC, A.IMMEDIATE),
    0x65: (M.ADC, A.ZERO_PAGE),
    0x75: (M.ADC, A.ZERO_PAGE_X),
    0x6D: (M.ADC, A.ABSOLUTE),
    0x7D: (M.ADC, A.ABSOLUTE_X),
    0x79: (M.ADC, A.ABSOLUTE_Y),
    0x61: (M.ADC, A.INDEXED_INDIRECT),
    0x71: (M.ADC, A.INDIRECT_INDEXED),
    0xE9: (M.SBC, A.IMMEDIATE),
    0xE5: (M.SBC, A.ZERO_PAGE),
    0xF5: (M.SBC, A.ZERO_PAGE_X),
    0xED: (M.SBC, A.ABSOLUTE),
    0xFD: (M.SBC, A.ABSOLUTE_X),
    0xF9: (M.SBC, A.ABSOLUTE_Y),
    0xE1: (M.SBC, A.INDEXED_INDIRECT),
    0xF1: (M.SBC, A.INDIRECT_INDEXED),
    0xC9: (M.CMP, A.IMMEDIATE),
    0xC5: (M.CMP, A.ZERO_PAGE),
    0xD5: (M.CMP, A.ZERO_PAGE_X),
    0xCD: (M.CMP, A.ABSOLUTE),
    0xDD: (M.CMP, A.ABSOLUTE_X),
    0xD9: (M.CMP, A.ABSOLUTE_Y),
    0xC1: (M.CMP, A.INDEXED_INDIRECT),
    0xD1: (M.CMP, A.INDIRECT_INDEXED),
    0xE0: (M.CPX, A.IMMEDIATE),
    0xE4: (M.CPX, A.ZERO_PAGE),
    0xEC: (M.CPX, A.ABSOLUTE),
    0xC0: (M.CPY, A.IMMEDIATE),
    0xC4: (M.CPY, A.ZERO_PAGE),
    0xCC: (M.CPY, A.ABSOLUTE),
    0xE6: (M.INC, A.ZERO_PAGE),
    0xF6: (M.INC, A.ZERO_PAGE_X),
    0xEE: (M.INC, A.ABSOLUTE),
    0xFE: (M.INC, A.ABSOLUTE_X),
    0xE8: (M.INX, A.IMPLIED),
    0xC8: (M.INY, A.IMPLIED),
    0xC6: (M.DEC, A.ZERO_PAGE),
    0xD6: (M.DEC, A.ZERO_PAGE_X),
    0xCE: (M.DEC, A.ABSOLUTE),
    0xDE: (M.DEC, A.ABSOLUTE_X),
    0xCA: (M.DEX, A.IMPLIED),
    0x88: (M.DEY, A.IMPLIED),
    0x0A: (M.ASL, A.ACCUMULATOR),
    0x06: (M.ASL, A.ZERO_PAGE),
    0x16: (M.ASL, A.ZERO_PAGE_X),
    0x0E: (M.ASL, A.ABSOLUTE),
    0x1E: (M.ASL, A.ABSOLUTE_X),
    0x4A: (M.LSR, A.ACCUMULATOR),
    0x46: (M.LSR, A.ZERO_PAGE),
    0x56: (M.LSR, A.ZERO_PAGE_X),
    0x4E: (M.LSR, A.ABSOLUTE),
    0x5E: (M.LSR, A.ABSOLUTE_X),
    0x2A: (M.ROL, A.ACCUMULATOR),
    0x26: (M.ROL, A.ZERO_PAGE),
    0x36: (M.ROL, A.ZERO_PAGE_X),
    0x2E: (M.ROL, A.ABSOLUTE),
    0x3E: (M.ROL, A.ABSOLUTE_X),
    0x6A: (M.ROR, A.ACCUMULATOR),
    0x66: (M.ROR, A.ZERO_PAGE),
    0x76: (M.ROR, A.ZERO_PAGE_X),
    0x6E: (M.ROR, A.ABSOLUTE),
    0x7E: (M.ROR, A.ABSOLUTE_X),
    0x4C: (M.JMP, A.ABSOLUTE),
    0x6C: (M.JMP, A.INDIRECT),
    0x20: (M.JSR, A.ABSOLUTE),
    0x60: (M.RTS, A.IMPLIED),
    0x90: (M.BCC, A.RELATIVE),
    0xB0: (M.BCS, A.RELATIVE),
    0xF0: (M.BEQ, A.RELATIVE),
    0x30: (M.BMI, A.RELATIVE),
    0xD0: (M.BNE, A.RELATIVE),
    0x10: (M.BPL, A.RELATIVE),
    0x50: (M.BVC, A.RELATIVE),
    0x70: (M.BVS, A.RELATIVE),
    0x18: (M.CLC, A.IMPLIED),
    0xD8: (M.CLD, A.IMPLIED),
    0x58: (M.CLI, A.IMPLIED),
    0xB8: (M.CLV, A.IMPLIED),
    0x38: (M.SEC, A.IMPLIED),
    0xF8: (M.SED, A.IMPLIED),
    0x78: (M.SEI, A.IMPLIED),
    0x00: (M.BRK, A.IMPLIED),
    0xEA: (M.NOP, A.IMPLIED),
    0x40: (M.RTI, A.IMPLIED),
}

OPCODES: Mapping[int, Opcode] = MappingProxyType(
    {code: Opcode(code, mnemonic, mode) for code, (mnemonic, mode) in _ENCODING.items()}
)


class _Timing(NamedTuple):
    size: int
    cycles: int
    crossed_cycles: int | None = None


_LOAD_A = {
    A.IMMEDIATE: _Timing(2, 2),
    A.ZERO_PAGE: _Timing(2, 3),
    A.ZERO_PAGE_X: _Timing(2, 4),
    A.ABSOLUTE: _Timing(3, 4),
    A.ABSOLUTE_X: _Timing(3, 5, 4),
    A.ABSOLUTE_Y: _Timing(3, 5, 4),
    A.INDEXED_INDIRECT: _Timing(2, 6),
    A.INDIRECT_INDEXED: _Timing(3, 5, 6),
}

_LOAD_INDEX = {
    A.IMMEDIATE: _Timing(2, 2),
    A.ZERO_PAGE: _Timing(2, 3),
    A.ZERO_PAGE_Y: _Timing(2, 4),
    A.ABSOLUTE: _Timing(3, 4),
    A.ABSOLUTE_Y: _Timing(3, 4, 5),
}

_STORE_A = {
    A.ZERO_PAGE: _Timing(2, 3),
    A.ZERO_PAGE_X: _Timing(2, 4),
    A.ABSOLUTE: _Timing(3, 4),
    A.ABSOLUTE_X: _Timing(3, 5),
    A.ABSOLUTE_Y: _Timing(3, 5),
    A.INDEXED_INDIRECT: _Timing(2, 6),
    A.INDIRECT_INDEXED: _Timing(2, 6),
}

_ARITHMETIC = {
    A.IMMEDIATE: _Timing(2, 2),
    A.ZERO_PAGE: _Timing(2, 3),
    A.ZERO_PAGE_X: _Timing(2, 4),
    A.ABSOLUTE: _Timing(3, 4),
    A.ABSOLUTE_X: _Timing(3, 4, 5),
    A.ABSOLUTE_Y: _Timing(3, 4, 5),
    A.INDEXED_INDIRECT: _Timing(2, 6),
    A.INDIRECT_INDEXED: _Timing(2, 5, 6),
}

_COMPARE_INDEX = {
    A.IMMEDIATE: _Timing(2, 2),
    A.ZERO_PAGE: _Timing(2, 3),
    A.ABSOLUTE: _Timing(3, 4),
}

_READ_MODIFY_WRITE = {
    A.ZERO_PAGE: _Timing(2, 5),
    A.ZERO_PAGE_X: _Timing(2, 6),
    A.ABSOLUTE: _Timing(3, 6),
    A.ABSOLUTE_X: _Timing(3, 7),
}

_SHIFT = {A.ACCUMULATOR: _Timing(1, 2), **_READ_MODIFY_WRITE}

_BRANCH = {A.RELATIVE: _Timing(2, 2, 4)}


def _implied(cycles: int) -> dict[AddressMode, _Timing]:
    return {A.IMPLIED: _Timing(1, cycles)}


_TIMINGS: dict[Mnemonic, dict[AddressMode, _Timing]] = {
    M.LDA: _LOAD_A,
    M.LDX: _LOAD_INDEX,
    M.LDY: _LOAD_INDEX,
    M.STA: _STORE_A,
    M.STX: {A.ZERO_PAGE: _Timing(2, 3), A.ZERO_PAGE_Y: _Timing(2, 4), A.ABSOLUTE: _Timing(3, 4)},
    M.STY: {A.ZERO_PAGE: _Timing(2, 3), A.ZERO_PAGE_X: _Timing(2, 4), A.ABSOLUTE: _Timing(3, 4)},
    **{m: _implied(2) for m in (M.TAX, M.TAY, M.TXA, M.TYA, M.TSX, M.TXS)},
    M.PHA: _implied(3),
    M.PHP: _implied(3),
    M.PLA: _implied(4),
    M.PLP: _implied(4),
    **{m: _ARITHMETIC for m in (M.AND, M.EOR, M.ORA, M.ADC, M.SBC, M.CMP)},
    M.BIT: {A.ZERO_PAGE: _Timing(2, 3), A.ABSOLUTE: _Timing(3, 4)},
    M.CPX: _COMPARE_INDEX,
    M.CPY: _COMPARE_INDEX,
    M.INC: _READ_MODIFY_WRITE,
    M.DEC: _READ_MODIFY_WRITE,
    **{m: _implied(2) for m in (M.INX, M.INY, M.DEX, M.DEY)},
    **{m: _SHIFT for m in (M.ASL, M.LSR, M.ROL, M.ROR)},
    M.JMP: {A.ABSOLUTE: _Timing(3, 3), A.INDIRECT: _Timing(3, 5)},
    M.JSR: {A.ABSOLUTE: _Timing(3, 6)},
    M.RTS: _implied(6),
    **{m: _BRANCH for m in (M.BCC, M.BCS, M.BEQ, M.BMI, M.BNE, M.BPL, M.BVC, M.BVS)},
    **{m: _implied(2) for m in (M.CLC, M.CLD, M.CLI, M.CLV, M.SEC, M.SED, M.SEI)},
    M.BRK: _implied(7),
    M.NOP: _implied(2),
    M.RTI: _implied(6),
}

_JUMPS = frozenset({M.JMP, M.JSR, M.RTS, M.BRK, M.RTI})

del M, A


def decode(byte: int) -> Opcode:
    """Decode an opcode byte, raising InvalidInstructionError if unknown."""
    if not 0 <= byte <= 0xFF:
        raise ValueError(f"opcode byte out of range: {byte}")
    try:
        return OPCODES[byte]
    except KeyError:
        raise InvalidInstructionError(byte) from None


def instruction_info(
    mnemonic: Mnemonic, mode: AddressMode, page_crossed: bool = False
) -> InstructionInfo:
    """Size and cycle cost of ``mnemonic`` in ``mode``.

    Raises ValueError when the instruction has no timing for that mode.
    """
    try:
        timing = _TIMINGS[mnemonic][mode]
    except KeyError:
        raise ValueError(
            f"mode {mode.name} not supported by {Mnemonic(mnemonic).value}"
        ) from None
    cycles = timing.cycles
    if page_crossed and timing.crossed_cycles is not None:
        cycles = timing.crossed_cycles
    return InstructionInfo(cycles=cycles, size=timing.size, jumps=mnemonic in _JUMPS)