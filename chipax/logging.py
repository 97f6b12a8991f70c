"""Console logging for chipax.

Holds the package logger, the host callback that reports opcodes the decoder
skipped, and a tqdm progress bar for frame scans driven through io_callback.
"""

import sys
import time
from typing import Callable, Optional

import jax
import numpy as np
from jax.experimental import io_callback
from tqdm import tqdm

# Level name -> (rank, ANSI color)
LEVELS = {
    "DEBUG": (0, "\033[36m"),
    "INFO": (1, "\033[32m"),
    "WARNING": (2, "\033[33m"),
    "ERROR": (3, "\033[31m"),
    "CRITICAL": (4, "\033[35m"),
}
_RESET = "\033[0m"


class ConsoleLogger:
    """Leveled console logger with optional colors and elapsed-time stamps."""

    def __init__(
        self,
        name: str = "chipax",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream=None,
    ):
        self.name = name
        self.stream = stream if stream is not None else sys.stdout
        self.use_colors = use_colors and getattr(self.stream, "isatty", lambda: False)()
        self.show_timestamps = show_timestamps
        self.start_time = time.time()
        self.set_level(log_level)

    def set_level(self, log_level: str):
        """Change the minimum level that gets printed."""
        if log_level.upper() not in LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVELS)}")
        self.log_level = log_level.upper()

    def log(self, level: str, message: str):
        level = level.upper()
        rank, color = LEVELS[level]
        if rank < LEVELS[self.log_level][0]:
            return

        tag = f"[{level:>8s}]"
        if self.use_colors:
            tag = f"{color}{tag}{_RESET}"
        stamp = f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        print(f"{stamp}{tag}[{self.name}] {message}", file=self.stream, flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


logger = ConsoleLogger()


def report_unknown_opcodes(known, instruction, pc):
    """Host callback: warn about every opcode the decoder could not match.

    Receives scalars, or arrays when the emulator runs under vmap.
    """
    known = np.atleast_1d(np.asarray(known))
    instructions = np.broadcast_to(np.atleast_1d(np.asarray(instruction)), known.shape)
    pcs = np.broadcast_to(np.atleast_1d(np.asarray(pc)), known.shape)
    for raw, address in zip(instructions[~known], pcs[~known]):
        # PC was already advanced past the skipped word
        logger.warning(f"Unknown opcode 0x{int(raw):04X} at 0x{(int(address) - 2) & 0xFFFF:03X}, skipped")


def _when(predicate, callback, *args):
    jax.lax.cond(
        predicate,
        lambda: io_callback(callback, None, *args, ordered=True),
        lambda: None,
    )


def scan_with_progress(
    n: int,
    print_rate: Optional[int] = None,
    desc: Optional[str] = None,
    **tqdm_kwargs,
) -> Callable:
    """Wrap a scan body so a tqdm bar tracks its n iterations.

    The body's scanned input must be the iteration index (or a tuple led by
    it). The bar advances every print_rate iterations and is topped up to n
    and closed after the last one. Ordered callbacks cannot run under vmap.
    """
    if desc is None:
        desc = f"Emulating ({n:,} frames)"
    if print_rate is None:
        print_rate = max(1, min(n // 20, 50))
    else:
        print_rate = max(1, min(print_rate, n))
    remainder = n % print_rate

    bars = {}

    def _open():
        bars[0] = tqdm(total=n, desc=desc, unit="frame", **tqdm_kwargs)

    def _advance(steps):
        bars[0].update(int(steps))

    def _close():
        bars.pop(0).close()

    def decorator(func):
        def wrapper(carry, x):
            iter_num = x[0] if isinstance(x, tuple) else x
            _when(iter_num == 0, _open)

            result = func(carry, x)

            done = iter_num + 1
            _when(done % print_rate == 0, _advance, print_rate)
            if remainder:
                _when(done == n, _advance, remainder)
            _when(done == n, _close)
            return result

        return wrapper

    return decorator
