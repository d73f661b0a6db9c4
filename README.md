# gemu

An early-stage Game Boy emulator core. It decodes a subset of the
Game Boy CPU instruction set from a ROM image and executes it against
an emulated register file, memory and a handful of memory-mapped I/O
registers (audio, graphics, interrupts, serial, timer).

Only a small set of opcodes is decoded so far. Any opcode, prefixed
opcode or I/O register that is not handled stops the emulator with a
`gemu.cpu.EmulatorError`.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Running a ROM

```
gemu path/to/game.gb
```

This reads the ROM, starts the CPU at address `0x100` with the
post-boot register values and runs one frame's worth of CPU ticks
(70224). Options:

- `--frames N` runs `N` frames instead of one.
- `--log-dir DIR` creates `DIR` if needed and writes four logs into it:
  `callGraph.txt` (calls and returns), `highMemWrites.txt` (writes to
  `0xFF80`–`0xFFFE`), `instructions.txt` (each executed instruction)
  and `serial.txt` (the serial data byte, written on every write to the
  serial control register).

The command exits with status 1 if the ROM cannot be read or if the
emulator raises an `EmulatorError`, printing the reason to standard
error, and with status 0 otherwise. Decoded instructions and CPU state
are reported through the `logging` module at debug level.

## Using the library

```python
from gemu.cli import load_rom, run_frame
from gemu.cpu import CPU, Flag, Reg8
from gemu.disassembler import Disassembler

rom = load_rom("game.gb")
cpu = CPU(Disassembler(rom))

cpu.tick()                      # decode and execute one instruction
print(cpu.get_reg8(Reg8.A))
print(cpu.get_flag(Flag.Z))
print(cpu.state_report())

run_frame(cpu)                  # tick for one frame
```

- `gemu.cpu.CPU` holds the registers (`get_reg8`, `set_reg8`,
  `get_reg16`, `set_reg16`), the flags (`get_flag`, `set_flag`,
  `clear_flag`, `clear_all_flags`) and the memory map (`read_memory`,
  `write_memory`). Its constructor also takes optional text streams:
  `serial_output`, `call_graph_log`, `high_mem_log` and
  `instruction_log`.
- `gemu.disassembler.Disassembler(program).next_instruction(counter)`
  returns the instruction at a program-counter offset without running
  it. Each instruction's `str()` is its text form and `execute(cpu)`
  runs it and returns its cycle count.
- The instruction classes live in `gemu.alu` (arithmetic, logic,
  rotates and shifts), `gemu.control` (jumps, calls, returns, stack,
  `NOP`, `STOP`, `DI`) and `gemu.load` (`LD`, `LDH`), all built on
  `gemu.instruction.Instruction`.
- `gemu.peripherals` has the register holders `Audio`, `Graphics`,
  `Interrupts`, `Timer` and `Serial`.

## What it does not do

- There is no screen: nothing is drawn and the graphics registers are
  only stored.
- There is no sound output and no joypad input.
- Interrupts are not dispatched and the timer does not count; their
  registers are only stored.
- The ROM image is only used for decoding instructions; it is not
  mapped into the CPU's memory, and there is no cartridge bank
  switching.