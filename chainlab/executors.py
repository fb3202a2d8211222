from __future__ import annotations

from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Protocol, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class ChainExecutor(Protocol):
    def map_ordered(self, fn: Callable[[T], R], items: Sequence[T]) -> list[R]:
        raise NotImplementedError


@dataclass(frozen=True)
class SerialExecutor:
    def map_ordered(self, fn: Callable[[T], R], items: Sequence[T]) -> list[R]:
        return [fn(item) for item in items]


@dataclass(frozen=True)
class PooledExecutor:
    """Run per-chain work on a thread pool.

    Each outcome is written into the slot of its input position, so the
    returned list is in input order regardless of completion order. The first
    exception raised by any task propagates to the caller.
    """

    workers: int

    def map_ordered(self, fn: Callable[[T], R], items: Sequence[T]) -> list[R]:
        slots: list[R | None] = [None] * len(items)
        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            futures = {pool.submit(fn, item): index for index, item in enumerate(items)}
            for future in as_completed(futures):
                slots[futures[future]] = future.result()
        return slots  # type: ignore[return-value]


def default_executor(workers: int = 1) -> ChainExecutor:
    if workers < 1:
        raise ValueError(f"workers must be >= 1 (got {workers})")
    if workers == 1:
        return SerialExecutor()
    return PooledExecutor(workers=workers)
