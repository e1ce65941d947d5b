"""A cycle-stepped 6502-style processor core with RAM and a terminal inspector."""

__version__ = "0.1.0"