"""Command line entry point: ``chip8 <rom-file>`` or ``python -m chip8vm <rom-file>``."""

import argparse
import logging
import random
import sys

from .constants import CPU_HZ, TIMER_HZ, SCALE
from .cpu import Chip8
from .errors import Chip8Error

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(prog="chip8", description="CHIP-8 virtual machine")
    parser.add_argument("rom", help="path to a CHIP-8 ROM image")
    parser.add_argument("--cpu-hz", type=int, default=CPU_HZ,
                        help=f"instructions per second (default {CPU_HZ})")
    parser.add_argument("--scale", type=int, default=SCALE,
                        help=f"window pixels per CHIP-8 pixel (default {SCALE})")
    parser.add_argument("--no-index-overflow-flag", action="store_true",
                        help="leave VF alone on ADD I, Vx")
    parser.add_argument("--seed", type=int, default=None,
                        help="seed for the RND instruction")
    parser.add_argument("--headless", action="store_true",
                        help="run without a window and print the final screen")
    parser.add_argument("--steps", type=int, default=1000,
                        help="instructions to run in headless mode (default 1000)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="enable debug logging")
    return parser


def configure_logging(verbose=False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run_headless(vm, steps, cpu_hz=CPU_HZ, out=None):
    out = out or sys.stdout
    frames = vm.run(steps, steps_per_tick=max(1, cpu_hz // TIMER_HZ))
    logger.info("Ran %d steps, %d display updates", steps, frames)
    print(vm.display.to_text(), file=out)


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    rng = random.Random(args.seed) if args.seed is not None else None
    vm = Chip8(rng=rng, index_overflow_flag=not args.no_index_overflow_flag)
    try:
        vm.load_file(args.rom)
        if args.headless:
            run_headless(vm, args.steps, cpu_hz=args.cpu_hz)
        else:
            # pyglet wants a display as soon as it is imported
            from .app import run_window
            run_window(vm, cpu_hz=args.cpu_hz, scale=args.scale)
    except (Chip8Error, OSError) as e:
        logger.error("Emulation stopped: %s", e)
        return 1
    return 0
