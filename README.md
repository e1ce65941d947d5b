# senne

senne is a 6502-style processor core that advances one clock cycle at a
time, with 2 KiB of internal RAM and a small terminal inspector that prints
the registers, flags, execution state and memory after every cycle.

## Installing

```
pip install .
```

To run the test suite as well:

```
pip install ".[test]"
pytest
```

## The inspector

```
senne
```

Each time, the inspector prints four sections:

- **Memory**: the 2 KiB of internal RAM as bracketed hex bytes, 32 to a row.
  The byte at the program counter is shown in blue, the stack top in yellow
  and the bytes already on the stack (in page `$01`) in light yellow.
- **Registers**: the accumulator, X, Y and the program counter, in hex.
- **Flags**: negative, overflow, decimal, interrupt disable, zero and carry.
- **Internals**: `Ready`, or `Pending (n)` with the ticks still left in the
  current instruction.

When standard output is a terminal the screen is cleared before each print.

Input is read a line at a time:

- an empty line (just Enter) advances the processor by one tick;
- any other line ends the session after one more line is read;
- end of input ends the session.

If a tick fails (an unknown opcode, an address outside RAM, a stack or
return-address overflow), the inspector prints `senne: <message>` to
standard error and exits with status 1. Otherwise it exits with status 0.

### What the inspector does not do

The inspector starts with empty RAM and has no way to load a program, a ROM
or a cartridge. Since RAM is all zeros, the first instruction is `BRK`,
which reads its vector from `$FFFE`; that address is not mapped, so the
first tick ends the session with a bus error. To run code, drive the
processor from Python as shown below. There is no picture, sound or
controller input.

## Using it as a library

```python
from senne.bus import Bus
from senne.processor import Processor, Ready

cpu = Processor(Bus())

# LDA #$42 at address $0000
cpu.write(0x0000, 0xA9)
cpu.write(0x0001, 0x42)

cpu.tick()  # decodes and carries out the instruction
cpu.tick()  # the second of its two cycles

assert cpu.accumulator == 0x42
assert cpu.program_counter == 0x0002
assert cpu.execution_state == Ready()
```

`Processor()` with no argument makes its own `Bus`. The processor starts
with the program counter at `$0000`, the stack pointer at `$FF`, the other
registers at zero and only the unused status bit set.

Its state is held in plain attributes: `accumulator`, `index_x`, `index_y`,
`program_counter`, `stack_pointer`, `status` and `execution_state`. `vram`
gives a snapshot of RAM as `bytes`; `read` and `write` go through the bus.

Each call to `Processor.tick` is one clock cycle. When the processor is
`Ready`, the instruction at the program counter is decoded and carried out
in full, and the state becomes `Pending(remaining_ticks)` for the rest of
its cycle count; later ticks count down until it is `Ready` again. Reads
that cross a page boundary and branches that are taken change the cycle
count.

### Memory

`senne.bus.Bus` holds the 2 KiB of internal RAM at `$0000`–`$07FF`. Reading
or writing any other address raises `BusError` (a `LookupError`); writing a
value outside `0`–`255` raises `ValueError`.

### Instructions

`senne.opcodes.decode(byte)` returns an `Opcode` with its `Mnemonic` and
`AddressMode`, and raises `InvalidInstructionError` for bytes that are not
instructions. `senne.opcodes.instruction_info(mnemonic, mode, page_crossed)`
returns an `InstructionInfo` with the size in bytes, the cycle count and
whether the instruction sets the program counter itself; it raises
`ValueError` for a mode the instruction does not have.

`senne.addressing.resolve_address(mode, read, pc, x, y)` works out the
effective address of an operand and whether indexing crossed a page, and
raises `UnsupportedModeError` for modes that name no address.

The documented 6502 instructions are supported, except that there are no
interrupts other than `BRK`. Some behaviour differs from the hardware:

- `ADC` and `SBC` ignore the carry flag on input and there is no decimal
  mode; `SBC` sets carry when a borrow occurs.
- Shifts and rotates on memory put their result in the accumulator and
  leave memory unchanged.
- `TXA` only ever sets the zero and negative flags, never clears them.
- `DEY` decrements X and sets the flags from Y.

### Status register

`senne.status.ProcessorStatus` wraps the status byte, with one boolean
property per flag (`negative`, `overflow`, `break_flag`, `decimal`,
`interrupt_disable`, `zero`, `carry`). Its bits are named by `StatusFlag`,
and `int()` on a status gives the raw byte, which is what `PHP` and `BRK`
push to the stack.

### Building a display

`senne.app` exposes the pieces the inspector prints: `register_lines`,
`flag_lines`, `internals_line` and `memory_rows` each take a processor and
return text or `Span` objects, and `Span.render()` gives a span's text with
ANSI colour codes.