"""Memory-mapped hardware registers: audio, graphics, interrupts, timer and serial."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, TextIO


@dataclass
class Audio:
    """Sound control registers."""

    nr52: int = 0
    nr51: int = 0
    nr50: int = 0
    nr41: int = 0


@dataclass
class Graphics:
    """LCD control, scrolling, window and palette registers."""

    ly: int = 0
    lyc: int = 0
    stat: int = 0
    scx: int = 0
    scy: int = 0
    wy: int = 0
    wx: int = 0
    lcdc: int = 0
    bgp: int = 0


@dataclass
class Interrupts:
    """Interrupt enable (IE) and interrupt flag (IF) registers."""

    ie: int = 0
    if_: int = 0


@dataclass
class Timer:
    """Timer control register."""

    tac: int = 0


@dataclass
class Serial:
    """Serial data (SB) and control (SC) registers.

    Every write to the control register emits the current data byte to
    ``output`` when one is attached.
    """

    sb: int = 0
    sc: int = 0
    output: Optional[TextIO] = None

    def write_data(self, value: int) -> None:
        """Store a byte in the serial data register."""
        self.sb = value & 0xFF

    def write_control(self, value: int) -> None:
        """Store the control byte and emit the pending data byte."""
        self.sc = value & 0xFF
        if self.output is not None:
            self.output.write(f"0x{self.sb:x}\n")