"""Headless frame pump and host key mapping.

A front end owns real time. Once per 60 Hz frame it forwards host key events,
runs a fixed number of instructions and ticks the timers once. This module
gives that loop for terminals and scripts. It does no drawing besides a
text dump of the frame buffer.
"""

from typing import Optional

import numpy as np

from octet.interpreter import Interpreter
from octet.logging import ConsoleLogger, build_progress_bar

STEPS_PER_FRAME = 5

# Host keys laid out as the 4x4 hex keypad:
#   1 2 3 C      1 2 3 4
#   4 5 6 D  ->  q w e r
#   7 8 9 E      a s d f
#   A 0 B F      z x c v
KEY_MAP = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "q": 0x4, "w": 0x5, "e": 0x6, "r": 0xD,
    "a": 0x7, "s": 0x8, "d": 0x9, "f": 0xE,
    "z": 0xA, "x": 0x0, "c": 0xB, "v": 0xF,
}


def key_to_index(key: str) -> Optional[int]:
    """Keypad index for a host key name, or None if the key is unmapped."""
    return KEY_MAP.get(key.lower())


def render_ascii(display: np.ndarray, on: str = "#", off: str = ".") -> str:
    """Render a ``(64, 32)`` frame buffer as lines of text, one per row."""
    pixels = np.asarray(display, dtype=np.bool_).T
    return "\n".join("".join(on if pixel else off for pixel in row) for row in pixels)


class FramePump:
    """Runs an interpreter at a fixed instruction count per timer tick."""

    def __init__(self, interpreter: Interpreter, steps_per_frame: int = STEPS_PER_FRAME,
                 logger: Optional[ConsoleLogger] = None):
        if steps_per_frame < 1:
            raise ValueError(f"steps_per_frame must be positive, got {steps_per_frame}")
        self.interpreter = interpreter
        self.steps_per_frame = steps_per_frame
        self.logger = logger or interpreter.logger
        self.frames = 0

    def press(self, key: str) -> bool:
        """Forward a host key press. Returns False for unmapped keys."""
        return self._forward(key, True)

    def release(self, key: str) -> bool:
        """Forward a host key release. Returns False for unmapped keys."""
        return self._forward(key, False)

    def _forward(self, key: str, pressed: bool) -> bool:
        index = key_to_index(key)
        if index is None:
            return False
        self.interpreter.set_key(index, pressed)
        return True

    def frame(self):
        """Run one frame: the configured number of steps, then one timer tick."""
        self.interpreter.run(self.steps_per_frame)
        self.interpreter.tick_timers()
        self.frames += 1

    def run(self, frames: int, progress: bool = False):
        """Run ``frames`` frames. Stack faults stop the pump and propagate."""
        faults_before = self.interpreter.faults
        with build_progress_bar(frames, disable=not progress) as bar:
            for _ in range(frames):
                self.frame()
                bar.update(1)
        self.logger.info(
            f"Ran {frames} frames ({frames * self.steps_per_frame} steps), "
            f"{self.interpreter.faults - faults_before} unknown opcodes, "
            f"PC=0x{self.interpreter.pc:03X}"
        )
