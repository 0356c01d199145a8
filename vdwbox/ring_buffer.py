#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Fixed-Capacity Ring Buffer
================================================================================

Project:        Van der Waals Box
Module:         ring_buffer.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 18, 2026
Last Updated:   October 18, 2026

License:        MIT License
================================================================================

A single circular buffer used for every bounded window in the engine:
pressure samples, pressure history and energy history. Numeric buffers can
keep a running sum that is updated on push/evict in O(1).
"""

from collections import deque
from typing import Generic, Iterator, Optional, TypeVar


T = TypeVar("T")


class RingBuffer(Generic[T]):
    """
    Bounded FIFO. Pushing onto a full buffer evicts the oldest entry.

    Iteration runs from oldest to newest. Index 0 is the oldest entry and
    index -1 the newest.
    """

    def __init__(self, capacity: int, track_sum: bool = False):
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self._data: deque = deque()
        self._capacity = capacity
        self._track_sum = track_sum
        self._sum = 0.0

    def push(self, value: T) -> Optional[T]:
        """
        Append value, returning the evicted oldest entry if the buffer was full.
        """
        evicted = None
        if len(self._data) == self._capacity:
            evicted = self._data.popleft()
            if self._track_sum:
                self._sum -= evicted
        self._data.append(value)
        if self._track_sum:
            self._sum += value
        return evicted

    def peek(self) -> Optional[T]:
        """Newest entry without removing it."""
        return self._data[-1] if self._data else None

    def lookback(self, frames: int) -> Optional[T]:
        """
        Entry pushed `frames` pushes before the newest one.

        Falls back to the oldest entry when the buffer does not reach that far.
        """
        if not self._data:
            return None
        index = max(len(self._data) - 1 - frames, 0)
        return self._data[index]

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def total(self) -> float:
        """Running sum of the stored values (requires track_sum)."""
        if not self._track_sum:
            raise AttributeError("running sum is not tracked for this buffer")
        return self._sum

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[T]:
        return iter(self._data)

    def __getitem__(self, index: int) -> T:
        return self._data[index]

    def __repr__(self) -> str:
        return f"RingBuffer(capacity={self._capacity}, len={len(self._data)})"
