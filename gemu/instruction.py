"""The common base of every decoded instruction."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class Instruction(ABC):
    """A decoded instruction with a printable mnemonic.

    ``execute`` runs the instruction against a CPU, advances its program
    counter and returns the number of cycles the instruction takes.
    """

    def __init__(self, text: str = "", cycles: int = 0) -> None:
        self.text = text
        self.cycles = cycles

    @abstractmethod
    def execute(self, cpu: Any) -> int:
        """Run the instruction on ``cpu`` and return its cycle count."""

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.text!r})"