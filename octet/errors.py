"""Exceptions raised at the interpreter boundary."""


class Chip8Error(Exception):
    """Base class for interpreter errors."""


class RomTooLarge(Chip8Error, ValueError):
    """Program image does not fit between 0x200 and the end of memory."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"ROM is {size} bytes, at most {limit} bytes fit in memory")
        self.size = size
        self.limit = limit


class StackError(Chip8Error):
    """A call or return broke the bounded stack. Fatal to the current run."""

    reason = "stack fault"

    def __init__(self, pc: int, opcode: int):
        super().__init__(f"{self.reason} at PC=0x{pc:03X} (opcode 0x{opcode:04X})")
        self.pc = pc
        self.opcode = opcode


class StackOverflow(StackError):
    reason = "stack overflow"


class StackUnderflow(StackError):
    reason = "stack underflow"
