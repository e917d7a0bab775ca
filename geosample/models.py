"""Typed data models produced by the inhibitory sampler."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass
from enum import Enum
from typing import Any

import numpy as np
import pandas as pd

from .config import EffectiveParameters
from .geometry import pairwise_min_distance


class PointKind(str, Enum):
    """How a sampled point was generated."""

    PRIMARY = "primary"
    CLOSE_PAIR = "close_pair"


@dataclass(frozen=True)
class SampledPoint:
    """One generated coordinate.

    Primary points carry the position of their population row. Close-pair
    points carry the position of their anchor in the primary sequence.
    """

    x: float
    y: float
    kind: PointKind
    row_position: int | None = None
    anchor: int | None = None

    def __post_init__(self) -> None:
        if not (np.isfinite(self.x) and np.isfinite(self.y)):
            raise ValueError("sampled point coordinates must be finite")

        if self.kind == PointKind.PRIMARY and self.row_position is None:
            raise ValueError("primary points require row_position")

        if self.kind == PointKind.CLOSE_PAIR and self.anchor is None:
            raise ValueError("close-pair points require anchor")

    @staticmethod
    def primary(x: float, y: float, row_position: int) -> "SampledPoint":
        """Factory helper for primary points."""
        return SampledPoint(x=float(x), y=float(y), kind=PointKind.PRIMARY, row_position=int(row_position))

    @staticmethod
    def close_pair(x: float, y: float, anchor: int) -> "SampledPoint":
        """Factory helper for close-pair points."""
        return SampledPoint(x=float(x), y=float(y), kind=PointKind.CLOSE_PAIR, anchor=int(anchor))

    @property
    def is_primary(self) -> bool:
        return self.kind == PointKind.PRIMARY


@dataclass(frozen=True)
class SampleResult:
    """Sampled rows plus the inhibition distance actually enforced."""

    sampled_population: pd.DataFrame
    scaled_min_distance: float
    points: tuple[SampledPoint, ...]
    parameters: EffectiveParameters
    source_index: tuple[Hashable | None, ...] = ()
    n_dropped_rows: int = 0
    n_attempts: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.points, tuple):
            object.__setattr__(self, "points", tuple(self.points))

        if not isinstance(self.source_index, tuple):
            object.__setattr__(self, "source_index", tuple(self.source_index))

        if self.source_index and len(self.source_index) != len(self.sampled_population):
            raise ValueError("source_index must have one entry per sampled row")

    @property
    def n_sampled(self) -> int:
        """Return number of rows in the sampled table."""
        return len(self.sampled_population)

    @property
    def primary_points(self) -> tuple[SampledPoint, ...]:
        return tuple(p for p in self.points if p.is_primary)

    @property
    def close_pair_points(self) -> tuple[SampledPoint, ...]:
        return tuple(p for p in self.points if not p.is_primary)

    def coordinates(self) -> np.ndarray:
        """Return generated coordinates as an (n_points, 2) float array."""
        if not self.points:
            return np.zeros((0, 2), dtype=np.float64)
        return np.asarray([(p.x, p.y) for p in self.points], dtype=np.float64)

    def min_primary_distance(self) -> float:
        """Return the smallest distance between two primary points."""
        return pairwise_min_distance(np.asarray([(p.x, p.y) for p in self.primary_points]))

    def to_summary_dict(self) -> dict[str, Any]:
        """Return plain-typed run statistics for logging or JSON output."""
        return {
            "n_sampled": int(self.n_sampled),
            "n_primary": int(len(self.primary_points)),
            "n_close_pairs": int(len(self.close_pair_points)),
            "scaled_min_distance": float(self.scaled_min_distance),
            "circle_radius": float(self.parameters.circle_radius),
            "circle_radius_clamped": bool(self.parameters.circle_radius_clamped),
            "n_dropped_rows": int(self.n_dropped_rows),
            "n_attempts": int(self.n_attempts),
        }
