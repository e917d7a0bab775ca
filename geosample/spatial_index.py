"""Point buffers used by the rejection loop."""

from __future__ import annotations

import numpy as np

from .geometry import squared_distances


class BruteForcePointBuffer:
    """Append-only buffer of accepted points with vectorized distance queries.

    Storage is preallocated to `capacity` rows. Every query scans all points
    accepted so far, which is fine for the moderate sample sizes this package
    targets.
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be > 0")

        self._xy = np.zeros((capacity, 2), dtype=np.float64)
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def append(self, x: float, y: float) -> None:
        """Add one accepted point."""
        if self._size >= self._xy.shape[0]:
            raise IndexError("point buffer is full")

        self._xy[self._size, 0] = x
        self._xy[self._size, 1] = y
        self._size += 1

    def min_squared_distance(self, x: float, y: float) -> float:
        """Return squared distance from (x, y) to the nearest stored point."""
        if self._size == 0:
            return float("inf")

        return float(squared_distances(self._xy[: self._size], x, y).min())
