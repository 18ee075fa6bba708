"""Test helpers for aineko tests."""

import time


def wait_until(predicate, timeout: float = 5.0, interval: float = 0.02) -> bool:
    """Poll predicate until it returns True or timeout seconds pass."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()
