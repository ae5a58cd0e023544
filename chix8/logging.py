"""Console logging for chix8.

``ConsoleLogger`` prints levelled, optionally coloured host-side messages
(faults, program loads). ``scan_with_progress`` reports the progress of a run
compiled into ``jax.lax.scan`` on a tqdm bar, fed from the device through
``io_callback``.
"""

import sys
import time
from typing import Callable, Optional, TextIO, Tuple

import jax
from jax.experimental import io_callback
from tqdm import tqdm

LEVELS = {"DEBUG": 0, "INFO": 1, "WARNING": 2, "ERROR": 3, "CRITICAL": 4}

COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
RESET = "\033[0m"


class ConsoleLogger:
    """Console logger with level filtering, colors and elapsed-time stamps."""

    def __init__(
        self,
        name: str = "chix8",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream: Optional[TextIO] = None,
    ):
        self.name = name
        self.stream = stream
        self.set_level(log_level)
        # Colors only when writing to a terminal
        out = stream if stream is not None else sys.stdout
        self.use_colors = use_colors and hasattr(out, "isatty") and out.isatty()
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

    def set_level(self, log_level: str):
        level = log_level.upper()
        if level not in LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVELS)}")
        self.log_level = level

    def is_enabled_for(self, level: str) -> bool:
        return LEVELS.get(level.upper(), LEVELS["INFO"]) >= LEVELS[self.log_level]

    def format(self, level: str, message: str) -> str:
        level = level.upper()
        prefix = f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        tag = f"[{level:>8s}]"
        if self.use_colors:
            tag = f"{COLORS.get(level, '')}{tag}{RESET}"
        return f"{prefix}{tag}[{self.name}] {message}"

    def log(self, level: str, message: str):
        if self.is_enabled_for(level):
            print(self.format(level, message), file=self.stream or sys.stdout, flush=True)

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


def build_tqdm_progress_bar(
    n: int,
    print_rate: Optional[int] = None,
    desc: Optional[str] = None,
    **tqdm_kwargs,
) -> Tuple[Callable, Callable]:
    """Host callbacks for a tqdm bar over ``n`` scan iterations.

    Returns ``(update, close)``. ``update(i)`` must be called at the start of
    iteration ``i`` and ``close(result, i)`` at its end; both are traceable.
    The bar advances every ``print_rate`` iterations so the device does not
    call back to the host on every step.
    """
    if desc is None:
        desc = f"Emulating ({n:,} steps)"
    if print_rate is None:
        print_rate = max(1, min(n // 20, 50))
    else:
        print_rate = max(1, min(print_rate, n))
    for reserved in ("total", "mininterval", "maxinterval", "miniters"):
        tqdm_kwargs.pop(reserved, None)

    bars = {}

    def _open():
        bars["bar"] = tqdm(total=n, desc=desc, unit="step", **tqdm_kwargs)

    def _advance(count):
        if "bar" in bars:
            bars["bar"].update(int(count))

    def _close():
        bar = bars.pop("bar", None)
        if bar is not None:
            bar.update(bar.total - bar.n)
            bar.close()

    def _callback_when(condition, fn, *args):
        jax.lax.cond(
            condition,
            lambda: io_callback(fn, None, *args, ordered=True),
            lambda: None,
        )

    def update(iter_num):
        _callback_when(iter_num == 0, _open)
        _callback_when((iter_num > 0) & (iter_num % print_rate == 0), _advance, print_rate)

    def close(result, iter_num):
        _callback_when(iter_num == n - 1, _close)
        return result

    return update, close


def scan_with_progress(
    n: int,
    print_rate: Optional[int] = None,
    desc: Optional[str] = None,
    **tqdm_kwargs,
) -> Callable:
    """Decorate a ``lax.scan`` body so the scan reports to a tqdm bar.

    The scanned ``xs`` must be the iteration index (or a tuple starting with
    it), e.g. ``jax.lax.scan(body, carry, jnp.arange(n))``.
    """
    update, close = build_tqdm_progress_bar(n, print_rate, desc, **tqdm_kwargs)

    def decorator(body):
        def body_with_progress(carry, x):
            iter_num = x[0] if isinstance(x, tuple) else x
            update(iter_num)
            return close(body(carry, x), iter_num)

        return body_with_progress

    return decorator
