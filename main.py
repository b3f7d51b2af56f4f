"""
Headless CHIP-8 runner: load a ROM, pump frames, print the screen
"""

import argparse
import sys

from octet import Interpreter, Chip8Error
from octet.driver import FramePump, STEPS_PER_FRAME, render_ascii
from octet.logging import ConsoleLogger


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run a CHIP-8 ROM without a window.")
    parser.add_argument("rom", help="Path to the program image")
    parser.add_argument("--frames", type=int, default=600, help="Number of 60 Hz frames to run")
    parser.add_argument("--steps-per-frame", type=int, default=STEPS_PER_FRAME,
                        help="Instructions executed per timer tick")
    parser.add_argument("--seed", type=int, default=0, help="Seed for the random instruction")
    parser.add_argument("--legacy", action="store_true", help="Use COSMAC VIP shift and load/store quirks")
    parser.add_argument("--log-level", default="INFO", help="DEBUG, INFO, WARNING, ERROR or CRITICAL")
    parser.add_argument("--no-progress", action="store_true", help="Hide the progress bar")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logger = ConsoleLogger(log_level=args.log_level)

    interpreter = Interpreter(seed=args.seed, modern_mode=not args.legacy, logger=logger)
    try:
        interpreter.load_rom(args.rom)
    except (OSError, Chip8Error) as e:
        logger.error(f"Could not load {args.rom}: {e}")
        return 1
    logger.info(f"Loaded: {args.rom}")

    pump = FramePump(interpreter, steps_per_frame=args.steps_per_frame, logger=logger)
    try:
        pump.run(args.frames, progress=not args.no_progress)
    except Chip8Error as e:
        logger.error(f"Stopped after {pump.frames} frames: {e}")
        print(render_ascii(interpreter.display))
        return 2

    print(render_ascii(interpreter.display))
    return 0


if __name__ == "__main__":
    sys.exit(main())
