"""CHIP-8 interpreter package."""

from octet.state import EmulatorState, StackState, create_state
from octet.emulator import execute, step, fetch, load_program, load_rom
from octet.decode import Op, DecodedInstruction, decode
from octet.timers import tick_timers
from octet.keypad import set_key
from octet.errors import Chip8Error, RomTooLarge, StackError, StackOverflow, StackUnderflow
from octet.interpreter import Interpreter
from octet.constants import *

__all__ = [
    "EmulatorState",
    "StackState",
    "create_state",
    "fetch",
    "execute",
    "step",
    "load_program",
    "load_rom",
    "tick_timers",
    "set_key",
    "Op",
    "DecodedInstruction",
    "decode",
    "Interpreter",
    "Chip8Error",
    "RomTooLarge",
    "StackError",
    "StackOverflow",
    "StackUnderflow",
    "MEMORY_SIZE",
    "PROGRAM_START",
    "MAX_PROGRAM_SIZE",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "STACK_SIZE",
    "STACK_OK",
    "STACK_OVERFLOW",
    "STACK_UNDERFLOW",
]
