import pytest

from senne.addressing import UnsupportedModeError, resolve_address
from senne.opcodes import AddressMode


def reader(memory):
    return lambda addr: memory.get(addr, 0)


PC = 0x0200


def test_immediate_points_after_opcode():
    addr, crossed = resolve_address(AddressMode.IMMEDIATE, reader({}), PC, 0, 0)
    assert addr == PC + 1
    assert crossed is False


def test_zero_page_reads_operand():
    read = reader({PC + 1: 0x42})
    assert resolve_address(AddressMode.ZERO_PAGE, read, PC, 0, 0) == (0x42, False)


@pytest.mark.parametrize("base", [0x00, 0x10, 0x80, 0xFF])
@pytest.mark.parametrize("index", [0, 1, 0x7F, 0xFF])
def test_zero_page_indexed_x_and_y_agree_and_stay_in_page(base, index):
    read = reader({PC + 1: base})
    via_x = resolve_address(AddressMode.ZERO_PAGE_X, read, PC, index, 0)
    via_y = resolve_address(AddressMode.ZERO_PAGE_Y, read, PC, 0, index)
    assert via_x == via_y
    assert 0 <= via_x[0] <= 0xFF
    assert via_x[1] is False


def test_zero_page_x_with_zero_index_is_zero_page():
    read = reader({PC + 1: 0x33})
    assert resolve_address(AddressMode.ZERO_PAGE_X, read, PC, 0, 0) == (
        resolve_address(AddressMode.ZERO_PAGE, read, PC, 0, 0)
    )


def test_zero_page_x_wraps():
    read = reader({PC + 1: 0xFF})
    assert resolve_address(AddressMode.ZERO_PAGE_X, read, PC, 1, 0) == (0x00, False)


def test_absolute_is_little_endian():
    read = reader({PC + 1: 0x34, PC + 2: 0x12})
    assert resolve_address(AddressMode.ABSOLUTE, read, PC, 0, 0) == (0x1234, False)


@pytest.mark.parametrize("mode", [AddressMode.ABSOLUTE_X, AddressMode.ABSOLUTE_Y])
def test_absolute_indexed_zero_index_matches_absolute(mode):
    read = reader({PC + 1: 0x34, PC + 2: 0x12})
    base, _ = resolve_address(AddressMode.ABSOLUTE, read, PC, 0, 0)
    assert resolve_address(mode, read, PC, 0, 0) == (base, False)


@pytest.mark.parametrize("low, index, crossed", [(0x00, 1, False), (0xFE, 1, False), (0xFF, 1, True), (0x80, 0x80, True)])
def test_absolute_x_page_crossing(low, index, crossed):
    read = reader({PC + 1: low, PC + 2: 0x03})
    base, _ = resolve_address(AddressMode.ABSOLUTE, read, PC, 0, 0)
    addr, page_crossed = resolve_address(AddressMode.ABSOLUTE_X, read, PC, index, 0)
    assert addr - base == index
    assert page_crossed is crossed
    assert resolve_address(AddressMode.ABSOLUTE_Y, read, PC, 0, index) == (addr, page_crossed)


def test_relative_forward_and_backward():
    forward = resolve_address(AddressMode.RELATIVE, reader({PC + 1: 0x02}), PC, 0, 0)
    backward = resolve_address(AddressMode.RELATIVE, reader({PC + 1: 0xFE}), PC, 0, 0)
    assert forward == (PC + 2, False)
    assert backward == (PC - 2, False)


def test_relative_signed_overflow_counts_as_page_cross():
    pc = 0x027F
    addr, crossed = resolve_address(AddressMode.RELATIVE, reader({pc + 1: 0x01}), pc, 0, 0)
    assert addr == pc + 1
    assert crossed is True


def test_relative_wraps_below_zero():
    addr, _ = resolve_address(AddressMode.RELATIVE, reader({1: 0xFF}), 0x0000, 0, 0)
    assert addr == 0xFFFF


def test_indirect_follows_pointer():
    read = reader({PC + 1: 0x40, PC + 2: 0x03, 0x0340: 0xCD, 0x0341: 0x01})
    assert resolve_address(AddressMode.INDIRECT, read, PC, 0, 0) == (0x01CD, False)


def test_indexed_indirect_uses_pointer_after_x():
    read = reader({PC + 1: 0x20, 0x24: 0x78, 0x25: 0x05})
    assert resolve_address(AddressMode.INDEXED_INDIRECT, read, PC, 4, 0) == (0x0578, False)


def test_indirect_indexed_zero_y_is_pointer():
    read = reader({PC + 1: 0x30, 0x30: 0x10, 0x31: 0x06})
    assert resolve_address(AddressMode.INDIRECT_INDEXED, read, PC, 0, 0) == (0x0610, False)


@pytest.mark.parametrize("low, y", [(0x10, 5), (0xFF, 1), (0x80, 0x90)])
def test_indirect_indexed_matches_absolute_y_of_pointer(low, y):
    memory = {PC + 1: 0x30, 0x30: low, 0x31: 0x06}
    indirect = resolve_address(AddressMode.INDIRECT_INDEXED, reader(memory), PC, 0, y)
    direct = resolve_address(
        AddressMode.ABSOLUTE_Y, reader({PC + 1: low, PC + 2: 0x06}), PC, 0, y
    )
    assert indirect == direct


@pytest.mark.parametrize("mode", [AddressMode.ACCUMULATOR, AddressMode.IMPLIED])
def test_modes_without_address_raise(mode):
    with pytest.raises(UnsupportedModeError) as excinfo:
        resolve_address(mode, reader({}), PC, 0, 0)
    assert excinfo.value.mode is mode
    assert isinstance(excinfo.value, ValueError)