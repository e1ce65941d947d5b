"""The CPU's view of the address space: 2 KiB of internal RAM."""

from __future__ import annotations

RAM_SIZE = 0x0800


class BusError(LookupError):
    """Raised when an address has no device mapped to it."""


class Bus:
    """Memory bus holding the console's internal RAM."""

    def __init__(self) -> None:
        self._ram = bytearray(RAM_SIZE)

    @property
    def vram(self) -> bytes:
        """A snapshot of the whole internal RAM."""
        return bytes(self._ram)

    def _check(self, addr: int) -> None:
        if not 0 <= addr < RAM_SIZE:
            raise BusError(f"no device mapped at address {addr:#06x}")

    def read(self, addr: int) -> int:
        """Read one byte from ``addr``."""
        self._check(addr)
        return self._ram[addr]

    def write(self, addr: int, value: int) -> None:
        """Write one byte to ``addr``."""
        self._check(addr)
        if not 0 <= value <= 0xFF:
            raise ValueError(f"byte value out of range: {value}")
        self._ram[addr] = value