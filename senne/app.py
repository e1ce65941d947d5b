"""Terminal front end: shows registers, flags, state and RAM, stepping on Enter."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from typing import TextIO

from senne.processor import Pending, Processor, Ready

MEMORY_COLUMNS = 32
STACK_END = 0x1FF

_FOREGROUND = {
    "black": "30",
    "red": "31",
    "green": "32",
    "yellow": "33",
    "blue": "34",
    "magenta": "35",
    "white": "37",
    "light_yellow": "93",
}
_BACKGROUND = {
    "black": "40",
    "white": "47",
}


@dataclass(frozen=True)
class Span:
    """A run of text with an optional foreground and background colour."""

    text: str
    color: str | None = None
    background: str | None = None

    def render(self) -> str:
        """The text wrapped in ANSI colour codes, if it has any colour."""
        codes = []
        if self.color is not None:
            codes.append(_FOREGROUND[self.color])
        if self.background is not None:
            codes.append(_BACKGROUND[self.background])
        if not codes:
            return self.text
        return f"\x1b[{';'.join(codes)}m{self.text}\x1b[0m"


def _value_span(text: str) -> Span:
    return Span(text, color="white", background="black")


def register_lines(processor: Processor) -> list[list[Span]]:
    """Lines for the accumulator, index registers and program counter."""
    return [
        [Span("ACC", "red"), Span(": "), _value_span(f"{processor.accumulator:02X}")],
        [Span("X  ", "magenta"), Span(": "), _value_span(f"{processor.index_x:02X}")],
        [Span("Y  ", "green"), Span(": "), _value_span(f"{processor.index_y:02X}")],
        [Span("PC", "blue"), Span(" : "), _value_span(f"{processor.program_counter:04X}")],
    ]


def flag_lines(processor: Processor) -> list[str]:
    """One line per displayed status flag."""
    status = processor.status
    flags = [
        ("NEGATIVE", status.negative),
        ("OVERFLOW", status.overflow),
        ("DECIMAL", status.decimal),
        ("INTERRUPT_DISABLE", status.interrupt_disable),
        ("ZERO", status.zero),
        ("CARRY", status.carry),
    ]
    return [f"{name} = {str(value).lower()}" for name, value in flags]


def internals_line(processor: Processor) -> list[Span]:
    """The execution state of the processor."""
    state = processor.execution_state
    if isinstance(state, Ready):
        shown = Span("Ready", "green")
    elif isinstance(state, Pending):
        shown = Span(f"Pending ({state.remaining_ticks})", "red")
    else:
        raise TypeError(f"unknown execution state: {state!r}")
    return [Span("State: "), shown]


def _memory_color(processor: Processor, addr: int, stack_top: int) -> str:
    if processor.program_counter == addr:
        return "blue"
    if addr == stack_top and stack_top <= STACK_END:
        return "yellow"
    if stack_top < addr <= STACK_END:
        return "light_yellow"
    return "white"


def memory_rows(processor: Processor) -> list[list[Span]]:
    """RAM as rows of bracketed hex bytes, highlighting PC and the stack."""
    stack_top = processor.stack_pointer + 0x100 + 1
    ram = processor.vram
    return [
        [
            Span(f"[{value:02X}]", _memory_color(processor, start + offset, stack_top))
            for offset, value in enumerate(ram[start : start + MEMORY_COLUMNS])
        ]
        for start in range(0, len(ram), MEMORY_COLUMNS)
    ]


def _render_line(spans: list[Span]) -> str:
    return "".join(span.render() for span in spans)


def _render_screen(processor: Processor) -> str:
    sections = [
        ("Memory", [_render_line(row) for row in memory_rows(processor)]),
        ("Registers", [_render_line(line) for line in register_lines(processor)]),
        ("Flags", flag_lines(processor)),
        ("Internals", [_render_line(internals_line(processor))]),
    ]
    parts = []
    for title, lines in sections:
        parts.append(f"-- {title} --")
        parts.extend(lines)
        parts.append("")
    return "\n".join(parts) + "\n"


def _read_key(stream: TextIO) -> str | None:
    """One line of input without its newline, or None at end of input."""
    line = stream.readline()
    if line == "":
        return None
    return line.rstrip("\r\n")


def main(argv: list[str] | None = None) -> int:
    """Run the interactive stepper: Enter ticks the processor, other input quits."""
    parser = argparse.ArgumentParser(
        prog="senne",
        description="Step a 6502-style processor one cycle per Enter key.",
    )
    parser.parse_args(argv)

    processor = Processor()
    stdin, stdout = sys.stdin, sys.stdout
    clear = "\x1b[2J\x1b[H" if stdout.isatty() else ""

    while True:
        stdout.write(clear + _render_screen(processor))
        stdout.flush()

        key = _read_key(stdin)
        if key == "":
            try:
                processor.tick()
            except (LookupError, ValueError, OverflowError) as exc:
                print(f"senne: {exc}", file=sys.stderr)
                return 1
            continue
        if key is None:
            break
        # Quitting takes a second key press.
        _read_key(stdin)
        break
    return 0