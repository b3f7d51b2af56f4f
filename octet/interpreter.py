"""Mutable interpreter handle for external drivers.

The core is a set of pure, jitted functions over ``EmulatorState``. This class
owns one state value, swaps it on every call, and turns the fault fields the
core reports into Python exceptions and log lines.
"""

from typing import List, Optional

import jax
import numpy as np

from octet.constants import NUM_KEYS, STACK_OK, STACK_OVERFLOW, STACK_UNDERFLOW
from octet.emulator import step, load_program, current_opcode
from octet.errors import StackOverflow, StackUnderflow
from octet.keypad import set_key
from octet.logging import ConsoleLogger
from octet.state import EmulatorState, create_state
from octet.timers import tick_timers


class Interpreter:
    """A CHIP-8 machine driven one step and one timer tick at a time.

    Args:
        seed: Seed of the PRNG behind the random instruction
        modern_mode: Use modern shift and load/store semantics instead of the
            COSMAC VIP ones
        logger: Logger for diagnostics, a quiet ``ConsoleLogger`` by default
    """

    def __init__(self, seed: int = 0, modern_mode: bool = True, logger: Optional[ConsoleLogger] = None):
        self.seed = seed
        self.modern_mode = modern_mode
        self.logger = logger or ConsoleLogger(log_level="WARNING")
        self.reset()

    def reset(self):
        """Return every component to its power-on state."""
        self.state = create_state(jax.random.PRNGKey(self.seed), modern_mode=self.modern_mode)
        self.faults = 0
        self.last_opcode = 0
        self.logger.debug("Interpreter reset")

    def load_game(self, data: bytes):
        """Install a program image at 0x200. Raises ``RomTooLarge``."""
        self.state = load_program(self.state, bytes(data))
        self.logger.debug(f"Loaded {len(data)} byte program")

    def load_rom(self, filename: str):
        """Read a program image from disk and install it."""
        with open(filename, "rb") as f:
            self.load_game(f.read())

    def step(self):
        """Execute one instruction.

        Raises:
            StackOverflow: a call was made with a full stack
            StackUnderflow: a return was made with an empty stack
        """
        pc = int(self.state.pc)
        opcode = current_opcode(self.state)
        state = step(self.state)
        self.state = state
        self.last_opcode = opcode

        if bool(state.unknown_opcode):
            self.faults += 1
            self.logger.warning(f"Unknown opcode 0x{opcode:04X} at PC=0x{pc:03X}")

        fault = int(state.stack_fault)
        if fault == STACK_OVERFLOW:
            self.logger.error(f"Stack overflow at PC=0x{pc:03X}")
            raise StackOverflow(pc, opcode)
        if fault == STACK_UNDERFLOW:
            self.logger.error(f"Stack underflow at PC=0x{pc:03X}")
            raise StackUnderflow(pc, opcode)

    tick = step

    def run(self, steps: int):
        """Execute ``steps`` instructions."""
        for _ in range(steps):
            self.step()

    def tick_timers(self):
        """Count both timers down once."""
        self.state = tick_timers(self.state)

    def set_key(self, index: int, pressed: bool):
        """Press or release key ``index`` (0-15)."""
        if not 0 <= index < NUM_KEYS:
            raise ValueError(f"Key index must be in 0..{NUM_KEYS - 1}, got {index}")
        self.state = set_key(self.state, index, pressed)

    @property
    def display(self) -> np.ndarray:
        """Frame buffer as a ``(64, 32)`` boolean array indexed ``[x, y]``."""
        return np.array(self.state.display, dtype=np.bool_)

    def get_display(self) -> List[bool]:
        """Frame buffer as a flat row-major list, ``x + 64 * y``."""
        return self.display.T.ravel().tolist()

    @property
    def unknown_opcode(self) -> bool:
        """Whether the last step decoded an unsupported instruction."""
        return bool(self.state.unknown_opcode)

    @property
    def stack_fault(self) -> int:
        """Stack fault code of the last step, ``STACK_OK`` when none."""
        return int(self.state.stack_fault)

    @property
    def halted(self) -> bool:
        return self.stack_fault != STACK_OK

    @property
    def waiting_for_key(self) -> bool:
        return bool(self.state.waiting_for_key)

    @property
    def registers(self) -> List[int]:
        return [int(v) for v in self.state.V]

    @property
    def pc(self) -> int:
        return int(self.state.pc)

    @property
    def index(self) -> int:
        return int(self.state.I)

    @property
    def delay_timer(self) -> int:
        return int(self.state.delay_timer)

    @property
    def sound_timer(self) -> int:
        return int(self.state.sound_timer)

    @property
    def sound_active(self) -> bool:
        """Tone should play while the sound timer is running."""
        return self.sound_timer > 0

    @property
    def memory(self) -> np.ndarray:
        return np.array(self.state.memory, dtype=np.uint8)

    def __repr__(self) -> str:
        return (
            f"Interpreter(pc=0x{self.pc:03X}, I=0x{self.index:03X}, "
            f"dt={self.delay_timer}, st={self.sound_timer}, faults={self.faults})"
        )
