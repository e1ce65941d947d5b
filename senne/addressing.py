"""Effective-address calculation for each addressing mode."""

from __future__ import annotations

from typing import Callable

from senne.opcodes import AddressMode

Reader = Callable[[int], int]


class UnsupportedModeError(ValueError):
    """Raised for modes that do not name a memory address."""

    def __init__(self, mode: AddressMode) -> None:
        super().__init__(f"address mode {mode.name} does not resolve to an address")
        self.mode = mode


def _word(lb: int, hb: int) -> int:
    return ((hb & 0xFF) << 8) | (lb & 0xFF)


def _signed(byte: int) -> int:
    return byte - 0x100 if byte & 0x80 else byte


def resolve_address(
    mode: AddressMode, read: Reader, pc: int, x: int, y: int
) -> tuple[int, bool]:
    """Resolve the operand address of the instruction at ``pc``.

    ``read`` fetches one byte from memory. Returns the address and whether
    indexing crossed a page boundary.
    """

    def operand(offset: int) -> int:
        return read((pc + offset) & 0xFFFF)

    def absolute_base() -> tuple[int, int]:
        lb = operand(1)
        return _word(lb, operand(2)), lb

    match mode:
        case AddressMode.IMMEDIATE:
            return (pc + 1) & 0xFFFF, False
        case AddressMode.ZERO_PAGE:
            return operand(1), False
        case AddressMode.ZERO_PAGE_X:
            return (operand(1) + x) & 0xFF, False
        case AddressMode.ZERO_PAGE_Y:
            return (operand(1) + y) & 0xFF, False
        case AddressMode.ABSOLUTE:
            base, _ = absolute_base()
            return base, False
        case AddressMode.ABSOLUTE_X | AddressMode.ABSOLUTE_Y:
            index = x if mode is AddressMode.ABSOLUTE_X else y
            base, lb = absolute_base()
            return (base + index) & 0xFFFF, lb + index > 0xFF
        case AddressMode.RELATIVE:
            rel = _signed(operand(1))
            low = _signed(pc & 0xFF)
            page_crossed = not -0x80 <= low + rel <= 0x7F
            return (pc + rel) & 0xFFFF, page_crossed
        case AddressMode.INDIRECT:
            pointer, _ = absolute_base()
            return _word(read(pointer), read((pointer + 1) & 0xFFFF)), False
        case AddressMode.INDEXED_INDIRECT:
            pointer = (operand(1) + x) & 0xFF
            return _word(read(pointer), read(pointer + 1)), False
        case AddressMode.INDIRECT_INDEXED:
            pointer = operand(1)
            low = read(pointer) + y
            carry = low > 0xFF
            high = read((pointer + 1) & 0xFFFF) + int(carry)
            return _word(low, high), carry
        case _:
            raise UnsupportedModeError(mode)