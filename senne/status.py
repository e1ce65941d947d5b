"""The processor status register."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag


class StatusFlag(IntFlag):
    """Bits of the status register."""

    CARRY = 0b00000001
    ZERO = 0b00000010
    INTERRUPT_DISABLE = 0b00000100
    DECIMAL = 0b00001000
    BREAK = 0b00010000
    UNUSED = 0b00100000
    OVERFLOW = 0b01000000
    NEGATIVE = 0b10000000


def _flag_property(flag: StatusFlag, doc: str) -> property:
    def getter(self: ProcessorStatus) -> bool:
        return bool(self.bits & flag)

    def setter(self: ProcessorStatus, value: bool) -> None:
        if value:
            self.bits |= flag
        else:
            self.bits &= ~flag & 0xFF

    return property(getter, setter, doc=doc)


@dataclass
class ProcessorStatus:
    """Eight status bits; starts with only the unused bit set."""

    bits: int = int(StatusFlag.UNUSED)

    def __post_init__(self) -> None:
        if not 0 <= self.bits <= 0xFF:
            raise ValueError(f"status register value out of range: {self.bits}")
        self.bits = int(self.bits)

    def __int__(self) -> int:
        return self.bits

    negative = _flag_property(StatusFlag.NEGATIVE, "Negative flag.")
    overflow = _flag_property(StatusFlag.OVERFLOW, "Overflow flag.")
    break_flag = _flag_property(StatusFlag.BREAK, "Break flag.")
    decimal = _flag_property(StatusFlag.DECIMAL, "Decimal mode flag.")
    interrupt_disable = _flag_property(
        StatusFlag.INTERRUPT_DISABLE, "Interrupt disable flag."
    )
    zero = _flag_property(StatusFlag.ZERO, "Zero flag.")
    carry = _flag_property(StatusFlag.CARRY, "Carry flag.")