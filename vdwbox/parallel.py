#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
================================================================================
Fork-Join Parallel Map
================================================================================

Project:        Van der Waals Box
Module:         parallel.py

Author:         Ryan Kamp
Affiliation:    University of Cincinnati Department of Computer Science
Email:          kamprj@mail.uc.edu
GitHub:         https://github.com/ryanjosephkamp

Created:        October 18, 2026
Last Updated:   October 18, 2026

License:        MIT License
================================================================================

Per-particle work in a step is embarrassingly parallel: every particle reads
the same snapshot of positions and writes only its own output row. The
ParallelMap splits the particle range into contiguous chunks, hands each
chunk to a worker thread and waits for all of them before returning.
The compiled force kernels release the GIL, so the threads genuinely
overlap.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger("vdwbox")


def split_range(n: int, chunks: int) -> List[Tuple[int, int]]:
    """Split range(n) into at most `chunks` contiguous (start, stop) pieces."""
    chunks = max(1, min(chunks, n))
    if n == 0:
        return []
    base, extra = divmod(n, chunks)
    bounds = []
    start = 0
    for c in range(chunks):
        stop = start + base + (1 if c < extra else 0)
        bounds.append((start, stop))
        start = stop
    return bounds


class ParallelMap:
    """
    Thread pool fan-out over index ranges.

    Args:
        workers: Number of worker threads (1 runs everything inline)
    """

    def __init__(self, workers: int = 1):
        self.workers = max(1, int(workers))
        self._pool: Optional[ThreadPoolExecutor] = None
        if self.workers > 1:
            self._pool = ThreadPoolExecutor(
                max_workers=self.workers, thread_name_prefix="vdwbox"
            )
            logger.debug("Started force pool with %d workers", self.workers)

    def for_each_chunk(self, n: int, fn: Callable[[int, int], None]) -> None:
        """
        Call fn(start, stop) over chunks covering range(n) and wait for all.

        Exceptions raised by a worker are re-raised here after the join.
        """
        chunks = split_range(n, self.workers * 4 if self._pool else 1)
        if self._pool is None:
            for start, stop in chunks:
                fn(start, stop)
            return

        futures = [self._pool.submit(fn, start, stop) for start, stop in chunks]
        for future in futures:
            future.result()

    def close(self) -> None:
        if self._pool is not None:
            self._pool.shutdown(wait=True)
            self._pool = None

    def __enter__(self) -> "ParallelMap":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
