"""Wall-clock helpers."""

import time


def microtime() -> float:
    """Current time in seconds, with sub-second precision."""
    return time.time()


def time_ms() -> int:
    """Current time in whole milliseconds since the epoch."""
    return time.time_ns() // 1_000_000