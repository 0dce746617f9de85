"""Small helpers shared across the package."""

from __future__ import annotations

from itertools import islice
from typing import Iterable, TypeVar

T = TypeVar("T")


def chunked(items: Iterable[T], size: int) -> list[list[T]]:
    """Split items into consecutive lists of ``size``; the last may be shorter."""
    if size <= 0:
        raise ValueError("chunk size must be positive")
    iterator = iter(items)
    chunks = []
    while chunk := list(islice(iterator, size)):
        chunks.append(chunk)
    return chunks