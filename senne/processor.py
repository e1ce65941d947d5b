"""The CPU core: registers, the tick-driven execution state and the instruction set."""

from __future__ import annotations

import operator
from dataclasses import dataclass, replace
from typing import Callable, Dict

from senne.addressing import resolve_address
from senne.bus import Bus
from senne.opcodes import (
    AddressMode,
    InstructionInfo,
    Mnemonic,
    Opcode,
    decode,
    instruction_info,
)
from senne.status import ProcessorStatus

STACK_BASE = 0x0100
BRK_VECTOR = 0xFFFE


@dataclass(frozen=True)
class Ready:
    """The processor will fetch and execute an instruction on the next tick."""


@dataclass(frozen=True)
class Pending:
    """The current instruction still needs ``remaining_ticks`` ticks."""

    remaining_ticks: int


ExecutionState = Ready | Pending


def _signed(byte: int) -> int:
    return byte - 0x100 if byte & 0x80 else byte


class Processor:
    """A 6502-style processor stepping one cycle per tick."""

    def __init__(self, bus: Bus | None = None) -> None:
        self.bus = bus if bus is not None else Bus()
        self.program_counter = 0
        self.stack_pointer = 0xFF
        self.accumulator = 0
        self.index_x = 0
        self.index_y = 0
        self.status = ProcessorStatus()
        self.execution_state: ExecutionState = Ready()

    @property
    def vram(self) -> bytes:
        """A snapshot of the internal RAM."""
        return self.bus.vram

    def read(self, addr: int) -> int:
        """Read one byte through the bus."""
        return self.bus.read(addr)

    def write(self, addr: int, value: int) -> None:
        """Write one byte through the bus."""
        self.bus.write(addr, value)

    def tick(self) -> None:
        """Advance one cycle, executing an instruction when ready."""
        state = self.execution_state
        if isinstance(state, Ready):
            info = self._perform()
            if not info.jumps:
                self.program_counter = (self.program_counter + info.size) & 0xFFFF
            self.execution_state = Pending(info.cycles - 1)
        else:
            remaining = state.remaining_ticks - 1
            self.execution_state = Ready() if remaining == 0 else Pending(remaining)

    # -- helpers -----------------------------------------------------------

    def _perform(self) -> InstructionInfo:
        opcode = decode(self.read(self.program_counter))
        return _HANDLERS[opcode.mnemonic](self, opcode)

    def _address(self, mode: AddressMode) -> tuple[int, bool]:
        return resolve_address(
            mode, self.read, self.program_counter, self.index_x, self.index_y
        )

    def _operand(self, mode: AddressMode) -> tuple[int, bool]:
        addr, crossed = self._address(mode)
        return self.read(addr), crossed

    def _set_zn(self, value: int) -> None:
        self.status.zero = value == 0
        self.status.negative = bool(value & 0x80)

    def _push(self, value: int) -> None:
        self.write(STACK_BASE + self.stack_pointer, value)
        self.stack_pointer = (self.stack_pointer - 1) & 0xFF

    def _pop(self) -> int:
        value = self.read(STACK_BASE + self.stack_pointer)
        self.stack_pointer = (self.stack_pointer + 1) & 0xFF
        return value

    def _decrement_sp(self) -> None:
        if self.stack_pointer == 0:
            raise OverflowError("stack pointer underflow")
        self.stack_pointer -= 1

    def _increment_sp(self) -> None:
        if self.stack_pointer == 0xFF:
            raise OverflowError("stack pointer overflow")
        self.stack_pointer += 1

    # -- loads and stores --------------------------------------------------

    def _lda(self, op: Opcode) -> InstructionInfo:
        self.accumulator, crossed = self._operand(op.mode)
        self._set_zn(self.accumulator)
        return instruction_info(op.mnemonic, op.mode, crossed)

    def _ldx(self, op: Opcode) -> InstructionInfo:
        self.index_x, crossed = self._operand(op.mode)
        self._set_zn(self.index_x)
        return instruction_info(op.mnemonic, op.mode, crossed)

    def _ldy(self, op: Opcode) -> InstructionInfo:
        self.index_y, crossed = self._operand(op.mode)
        self._set_zn(self.index_y)
        return instruction_info(op.mnemonic, op.mode, crossed)

    def _store(self, op: Opcode, value: int) -> InstructionInfo:
        addr, _ = self._address(op.mode)
        self.write(addr, value)
        return instruction_info(op.mnemonic, op.mode)

    def _sta(self, op: Opcode) -> InstructionInfo:
        return self._store(op, self.accumulator)

    def _stx(self, op: Opcode) -> InstructionInfo:
        return self._store(op, self.index_x)

    def _sty(self, op: Opcode) -> InstructionInfo:
        return self._store(op, self.index_y)

    # -- transfers and stack -----------------------------------------------

    def _tax(self, op: Opcode) -> InstructionInfo:
        self.index_x = self.accumulator
        self._set_zn(self.index_x)
        return instruction_info(op.mnemonic, op.mode)

    def _tay(self, op: Opcode) -> InstructionInfo:
        self.index_y = self.accumulator
        self._set_zn(self.index_y)
        return instruction_info(op.mnemonic, op.mode)

    def _txa(self, op: Opcode) -> InstructionInfo:
        self.accumulator = self.index_x
        # Flags are only ever set here, never cleared.
        if self.accumulator == 0:
            self.status.zero = True
        if self.accumulator & 0x80:
            self.status.negative = True
        return instruction_info(op.mnemonic, op.mode)

    def _tya(self, op: Opcode) -> InstructionInfo:
        self.accumulator = self.index_y
        self._set_zn(self.accumulator)
        return instruction_info(op.mnemonic, op.mode)

    def _tsx(self, op: Opcode) -> InstructionInfo:
        self.index_x = self.stack_pointer
        self._set_zn(self.index_x)
        return instruction_info(op.mnemonic, op.mode)

    def _txs(self, op: Opcode) -> InstructionInfo:
        self.stack_pointer = self.index_x
        return instruction_info(op.mnemonic, op.mode)

    def _pha(self, op: Opcode) -> InstructionInfo:
        self._push(self.accumulator)
        return instruction_info(op.mnemonic, op.mode)

    def _php(self, op: Opcode) -> InstructionInfo:
        self._push(int(self.status))
        return instruction_info(op.mnemonic, op.mode)

    def _pla(self, op: Opcode) -> InstructionInfo:
        self.accumulator = self._pop()
        self._set_zn(self.accumulator)
        return instruction_info(op.mnemonic, op.mode)

    def _plp(self, op: Opcode) -> InstructionInfo:
        self.status = ProcessorStatus(self._pop())
        return instruction_info(op.mnemonic, op.mode)

    # -- logic and arithmetic ----------------------------------------------

    def _logic(self, op: Opcode) -> InstructionInfo:
        value, crossed = self._operand(op.mode)
        self.accumulator = _LOGIC[op.mnemonic](self.accumulator, value)
        self._set_zn(self.accumulator)
        return instruction_info(op.mnemonic, op.mode, crossed)

    def _bit(self, op: Opcode) -> InstructionInfo:
        value, _ = self._operand(op.mode)
        self.status.zero = (self.accumulator & value) == 0
        self.status.overflow = bool(value & 0x40)
        self.status.negative = bool(value & 0x80)
        return instruction_info(op.mnemonic, op.mode)

    def _adc(self, op: Opcode) -> InstructionInfo:
        value, crossed = self._operand(op.mode)
        total = self.accumulator + value
        signed_total = _signed(self.accumulator) + _signed(value)
        self.accumulator = total & 0xFF
        self._set_zn(self.accumulator)
        self.status.carry = total > 0xFF
        self.status.overflow = not -0x80 <= signed_total <= 0x7F
        return instruction_info(op.mnemonic, op.mode, crossed)

    def _sbc(self, op: Opcode) -> InstructionInfo:
        value, crossed = self._operand(op.mode)
        borrow = self.accumulator < value
        signed_diff = _signed(self.accumulator) - _signed(value)
        self.accumulator = (self.accumulator - value) & 0xFF
        self._set_zn(self.accumulator)
        self.status.carry = borrow
        self.status.overflow = not -0x80 <= signed_diff <= 0x7F
        return instruction_info(op.mnemonic, op.mode, crossed)

    def _compare(self, op: Opcode, register: int) -> InstructionInfo:
        value, crossed = self._operand(op.mode)
        result = (register - value) & 0xFF
        self._set_zn(result)
        self.status.carry = register >= value
        return instruction_info(op.mnemonic, op.mode, crossed)

    def _cmp(self, op: Opcode) -> InstructionInfo:
        return self._compare(op, self.accumulator)

    def _cpx(self, op: Opcode) -> InstructionInfo:
        return self._compare(op, self.index_x)

    def _cpy(self, op: Opcode) -> InstructionInfo:
        return self._compare(op, self.index_y)

    # -- increments and decrements -----------------------------------------

    def _modify_memory(self, op: Opcode, delta: int) -> InstructionInfo:
        addr, _ = self._address(op.mode)
        value = (self.read(addr) + delta) & 0xFF
        self.write(addr, value)
        self._set_zn(value)
        return instruction_info(op.mnemonic, op.mode)

    def _inc(self, op: Opcode) -> InstructionInfo:
        return self._modify_memory(op, 1)

    def _dec(self, op: Opcode) -> InstructionInfo:
        return self._modify_memory(op, -1)

    def _inx(self, op: Opcode) -> InstructionInfo:
        self.index_x = (self.index_x + 1) & 0xFF
        self._set_zn(self.index_x)
        return instruction_info(op.mnemonic, op.mode)

    def _iny(self, op: Opcode) -> InstructionInfo:
        self.index_y = (self.index_y + 1) & 0xFF
        self._set_zn(self.index_y)
        return instruction_info(op.mnemonic, op.mode)

    def _dex(self, op: Opcode) -> InstructionInfo:
        self.index_x = (self.index_x - 1) & 0xFF
        self._set_zn(self.index_x)
        return instruction_info(op.mnemonic, op.mode)

    def _dey(self, op: Opcode) -> InstructionInfo:
        # Decrements X while reporting flags for Y.
        self.index_x = (self.index_x - 1) & 0xFF
        self._set_zn(self.index_y)
        return instruction_info(op.mnemonic, op.mode)

    # -- shifts and rotates ------------------------------------------------

    def _shift(self, op: Opcode) -> InstructionInfo:
        if op.mode is AddressMode.ACCUMULATOR:
            value = self.accumulator
        else:
            value, _ = self._operand(op.mode)
        carry_in = self.status.carry
        match op.mnemonic:
            case Mnemonic.ASL:
                result, carry_out = (value << 1) & 0xFF, bool(value & 0x80)
            case Mnemonic.ROL:
                result = ((value << 1) & 0xFF) | int(carry_in)
                carry_out = bool(value & 0x80)
            case Mnemonic.LSR:
                result, carry_out = value >> 1, bool(value & 0x01)
            case _:
                result = (value >> 1) | (0x80 if carry_in else 0)
                carry_out = bool(value & 0x01)
        self._set_zn(result)
        self.status.carry = carry_out
        # The result always lands in the accumulator, whatever the mode.
        self.accumulator = result
        return instruction_info(op.mnemonic, op.mode)

    # -- jumps, calls and branches -----------------------------------------

    def _jmp(self, op: Opcode) -> InstructionInfo:
        self.program_counter, _ = self._address(op.mode)
        return instruction_info(op.mnemonic, op.mode)

    def _jsr(self, op: Opcode) -> InstructionInfo:
        addr, _ = self._address(AddressMode.ABSOLUTE)
        self.program_counter = addr
        return_addr = addr + 2
        if return_addr > 0xFFFF:
            raise OverflowError("return address out of range")
        self.write(STACK_BASE + self.stack_pointer, return_addr >> 8)
        self._decrement_sp()
        self.write(STACK_BASE + self.stack_pointer, return_addr & 0xFF)
        self._decrement_sp()
        return instruction_info(op.mnemonic, AddressMode.ABSOLUTE)

    def _rts(self, op: Opcode) -> InstructionInfo:
        self._increment_sp()
        lb = self.read(STACK_BASE + self.stack_pointer)
        self._increment_sp()
        hb = self.read(STACK_BASE + self.stack_pointer)
        addr = ((hb << 8) | lb) + 1
        if addr > 0xFFFF:
            raise OverflowError("return address out of range")
        self.program_counter = addr
        return instruction_info(op.mnemonic, op.mode)

    def _branch(self, op: Opcode) -> InstructionInfo:
        taken = _BRANCH_CONDITIONS[op.mnemonic](self.status)
        addr, crossed = self._address(AddressMode.RELATIVE)
        info = instruction_info(op.mnemonic, AddressMode.RELATIVE, crossed)
        if not taken:
            return info
        self.program_counter = addr
        return replace(info, cycles=info.cycles + 1, jumps=True)

    # -- flags and system --------------------------------------------------

    def _flag(self, op: Opcode) -> InstructionInfo:
        name, value = _FLAG_OPS[op.mnemonic]
        setattr(self.status, name, value)
        return instruction_info(op.mnemonic, op.mode)

    def _brk(self, op: Opcode) -> InstructionInfo:
        pc = self.program_counter
        status = int(self.status)
        self._push(pc >> 8)
        self._push(pc & 0xFF)
        self._push(status)
        addr = self.read(BRK_VECTOR) | (self.read(BRK_VECTOR + 1) << 8)
        self.status.break_flag = True
        self.program_counter = addr
        return instruction_info(op.mnemonic, op.mode)

    def _nop(self, op: Opcode) -> InstructionInfo:
        return instruction_info(op.mnemonic, op.mode)

    def _rti(self, op: Opcode) -> InstructionInfo:
        status = self._pop()
        lb = self._pop()
        hb = self._pop()
        self.status = ProcessorStatus(status)
        self.program_counter = (hb << 8) | lb
        return instruction_info(op.mnemonic, op.mode)


M = Mnemonic

_LOGIC: Dict[Mnemonic, Callable[[int, int], int]] = {
    M.AND: operator.and_,
    M.EOR: operator.xor,
    M.ORA: operator.or_,
}

_BRANCH_CONDITIONS: Dict[Mnemonic, Callable[[ProcessorStatus], bool]] = {
    M.BCC: lambda s: not s.carry,
    M.BCS: lambda s: s.carry,
    M.BEQ: lambda s: s.zero,
    M.BMI: lambda s: s.negative,
    M.BNE: lambda s: not s.zero,
    M.BPL: lambda s: not s.negative,
    M.BVC: lambda s: not s.overflow,
    M.BVS: lambda s: s.overflow,
}

_FLAG_OPS: Dict[Mnemonic, tuple[str, bool]] = {
    M.CLC: ("carry", False),
    M.CLD: ("decimal", False),
    M.CLI: ("interrupt_disable", False),
    M.CLV: ("overflow", False),
    M.SEC: ("carry", True),
    M.SED: ("decimal", True),
    M.SEI: ("interrupt_disable", True),
}

_HANDLERS: Dict[Mnemonic, Callable[[Processor, Opcode], InstructionInfo]] = {
    M.LDA: Processor._lda,
    M.LDX: Processor._ldx,
    M.LDY: Processor._ldy,
    M.STA: Processor._sta,
    M.STX: Processor._stx,
    M.STY: Processor._sty,
    M.TAX: Processor._tax,
    M.TAY: Processor._tay,
    M.TXA: Processor._txa,
    M.TYA: Processor._tya,
    M.TSX: Processor._tsx,
    M.TXS: Processor._txs,
    M.PHA: Processor._pha,
    M.PHP: Processor._php,
    M.PLA: Processor._pla,
    M.PLP: Processor._plp,
    **{m: Processor._logic for m in _LOGIC},
    M.BIT: Processor._bit,
    M.ADC: Processor._adc,
    M.SBC: Processor._sbc,
    M.CMP: Processor._cmp,
    M.CPX: Processor._cpx,
    M.CPY: Processor._cpy,
    M.INC: Processor._inc,
    M.DEC: Processor._dec,
    M.INX: Processor._inx,
    M.INY: Processor._iny,
    M.DEX: Processor._dex,
    M.DEY: Processor._dey,
    **{m: Processor._shift for m in (M.ASL, M.LSR, M.ROL, M.ROR)},
    M.JMP: Processor._jmp,
    M.JSR: Processor._jsr,
    M.RTS: Processor._rts,
    **{m: Processor._branch for m in _BRANCH_CONDITIONS},
    **{m: Processor._flag for m in _FLAG_OPS},
    M.BRK: Processor._brk,
    M.NOP: Processor._nop,
    M.RTI: Processor._rti,
}

del M