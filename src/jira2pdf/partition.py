# src/jira2pdf/partition.py
from __future__ import annotations

from typing import List, Tuple


def partition(length: int, chunk_size: int) -> List[Tuple[int, int]]:
    """Split ``range(length)`` into contiguous half-open ``(start, end)`` chunks.

    Every chunk holds ``chunk_size`` items except possibly the last one:

    >>> partition(5, 2)
    [(0, 2), (2, 4), (4, 5)]
    >>> partition(0, 2)
    []
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    if length < 0:
        raise ValueError(f"length must not be negative, got {length}")
    return [(start, min(start + chunk_size, length)) for start in range(0, length, chunk_size)]
