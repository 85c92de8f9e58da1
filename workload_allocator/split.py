from __future__ import annotations

from typing import Sequence, TypeVar

T = TypeVar("T")


def split_workload(items: Sequence[T], num_chunks: int) -> list[list[T]]:
    """Split ``items`` into ``num_chunks`` contiguous, order-preserving chunks.

    Chunk lengths differ by at most one; the first ``len(items) % num_chunks``
    chunks carry the extra element. Chunk ``i`` is meant for endpoint ``i``.
    """
    if num_chunks <= 0:
        if items:
            raise ValueError("num_chunks must be > 0 to split a non-empty list")
        return []

    base, extra = divmod(len(items), num_chunks)
    chunks: list[list[T]] = []
    start = 0
    for index in range(num_chunks):
        size = base + (1 if index < extra else 0)
        chunks.append(list(items[start : start + size]))
        start += size
    return chunks


__all__ = ["split_workload"]
