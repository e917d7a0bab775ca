"""Geometry helpers for projected planar coordinates."""

from __future__ import annotations

import math

import numpy as np


def squared_distances(xy: np.ndarray, x: float, y: float) -> np.ndarray:
    """Return squared distances from every row of an (N, 2) array to (x, y)."""
    dx = xy[:, 0] - x
    dy = xy[:, 1] - y
    return dx * dx + dy * dy


def pairwise_min_distance(xy: np.ndarray) -> float:
    """Return the smallest distance between any two rows, or inf for fewer than two."""
    pts = np.asarray(xy, dtype=np.float64)
    if pts.shape[0] < 2:
        return math.inf

    deltas = pts[:, None, :] - pts[None, :, :]
    dists = np.sqrt(np.sum(deltas * deltas, axis=2))
    np.fill_diagonal(dists, np.inf)
    return float(dists.min())


def disk_offset(rng: np.random.Generator, radius: float, min_radius: float = 0.0) -> tuple[float, float]:
    """Draw an offset uniformly by area inside a disk of `radius`.

    The angle is drawn first, then r = radius * sqrt(U). Radii below
    `min_radius` are raised to `min_radius`.
    """
    angle = 2.0 * math.pi * float(rng.uniform(0.0, 1.0))
    r = radius * math.sqrt(float(rng.uniform(0.0, 1.0)))
    if r < min_radius:
        r = min_radius
    return r * math.cos(angle), r * math.sin(angle)
