"""Command-line entry point: load a cartridge image and run frames."""

from __future__ import annotations

import argparse
import logging
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import Optional, Sequence

from gemu.cpu import CPU, CYCLES_PER_FRAME, EmulatorError
from gemu.disassembler import Disassembler

logger = logging.getLogger(__name__)

_LOG_FILES = {
    "call_graph_log": "callGraph.txt",
    "high_mem_log": "highMemWrites.txt",
    "instruction_log": "instructions.txt",
    "serial_output": "serial.txt",
}


def load_rom(path: str | Path) -> bytes:
    """Read a cartridge image from ``path``."""
    data = Path(path).read_bytes()
    logger.debug("size of program is 0x%x", len(data))
    return data


def run_frame(cpu: CPU) -> int:
    """Tick the CPU for one frame's worth of cycles and return the tick count."""
    for _ in range(CYCLES_PER_FRAME):
        cpu.tick()
    return CYCLES_PER_FRAME


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="gemu", description="Run a cartridge image.")
    parser.add_argument("rom", help="path of the cartridge image")
    parser.add_argument(
        "--frames", type=int, default=1, help="number of frames to run (default: 1)"
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="directory for call graph, high memory, instruction and serial logs",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    try:
        program = load_rom(args.rom)
    except OSError as exc:
        print(f"Error opening game file: {exc}", file=sys.stderr)
        return 1

    with ExitStack() as stack:
        logs = {}
        if args.log_dir is not None:
            args.log_dir.mkdir(parents=True, exist_ok=True)
            for key, name in _LOG_FILES.items():
                logs[key] = stack.enter_context(
                    open(args.log_dir / name, "w", encoding="utf-8")
                )
        cpu = CPU(Disassembler(program), **logs)
        try:
            for _ in range(args.frames):
                run_frame(cpu)
        except EmulatorError as exc:
            print(f"gemu: {exc}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())