"""Timing utilities for sweep and check stages."""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Dict


@contextmanager
def timed(stage: str, metrics: Dict[str, int]):
    start = time.time()
    try:
        yield
    finally:
        metrics[f"duration_{stage}"] = elapsed_ms(start)


def elapsed_ms(start: float) -> int:
    return int((time.time() - start) * 1000)
