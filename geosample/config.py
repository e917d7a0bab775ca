"""Configuration objects for inhibitory spatial sampling."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
import numbers
from typing import Any
import warnings

from .errors import InvalidParameter, ParameterAdjustedWarning

logger = logging.getLogger(__name__)

CLOSE_PAIR_ROW_POLICIES = ("anchor", "nearest", "match")


@dataclass(frozen=True)
class SampleRequest:
    """Statistical design of one sample.

    Distances are in the units of the projected coordinates (normally metres).
    """

    # Total number of points n, primary points plus close pairs.
    sample_size: int

    # Zero-based column positions of the X and Y coordinates.
    x_index: int
    y_index: int

    # Base inhibition distance before close-pair rescaling.
    minimum_distance: float

    # Number of close-pair points, 0 <= close_pairs <= sample_size / 2.
    close_pairs: int = 0

    # Maximum offset of a close-pair point from its anchor.
    circle_radius: float = 0.0

    def __post_init__(self) -> None:
        """Normalize numeric types and validate scalar ranges once at construction time."""
        for name in ("sample_size", "x_index", "y_index", "close_pairs"):
            object.__setattr__(self, name, _as_count(getattr(self, name), name))

        for name in ("minimum_distance", "circle_radius"):
            object.__setattr__(self, name, _as_real(getattr(self, name), name))

        if self.sample_size <= 0:
            raise InvalidParameter("sample_size must be > 0")

        if self.x_index < 0 or self.y_index < 0:
            raise InvalidParameter("x_index and y_index must be >= 0")

        if self.x_index == self.y_index:
            raise InvalidParameter("x_index and y_index must refer to different columns")

        if not math.isfinite(self.minimum_distance) or self.minimum_distance <= 0:
            raise InvalidParameter("minimum_distance must be a finite value > 0")

        if self.close_pairs < 0:
            raise InvalidParameter("close_pairs must be >= 0")

        if self.close_pairs > self.sample_size / 2:
            raise InvalidParameter("close_pairs must be between 0 and sample_size/2")

        if not math.isfinite(self.circle_radius) or self.circle_radius < 0:
            raise InvalidParameter("circle_radius must be a finite value >= 0")

    @property
    def primary_count(self) -> int:
        """Return number of points drawn under the full inhibition constraint."""
        return self.sample_size - self.close_pairs


@dataclass(frozen=True)
class EffectiveParameters:
    """Parameters actually enforced for one request."""

    scaled_min_distance: float
    d_squared: float
    primary_count: int
    close_pairs: int
    circle_radius: float
    circle_radius_clamped: bool = False

    @property
    def min_offset_radius(self) -> float:
        """Return the floor applied to close-pair offset radii."""
        return self.scaled_min_distance / 4.0

    @classmethod
    def from_request(cls, request: SampleRequest) -> "EffectiveParameters":
        """Rescale the inhibition distance for the close-pair budget.

        Reserving slots for close pairs leaves fewer primary points, so they
        are spread with distance * sqrt(n / (n - close_pairs)) to keep the
        overall design density.
        """
        n = request.sample_size
        scaled = request.minimum_distance * math.sqrt(n / (n - request.close_pairs))

        radius = float(request.circle_radius)
        clamped = False
        if radius > scaled / 2:
            radius = scaled / 2
            clamped = True
            message = (
                f"circle_radius {request.circle_radius} > scaled minimum distance/2; "
                f"circle_radius={radius} will be used"
            )
            logger.warning(message)
            warnings.warn(message, ParameterAdjustedWarning, stacklevel=3)

        return cls(
            scaled_min_distance=float(scaled),
            d_squared=float(scaled * scaled),
            primary_count=request.primary_count,
            close_pairs=request.close_pairs,
            circle_radius=radius,
            circle_radius_clamped=clamped,
        )


@dataclass(frozen=True)
class SamplerConfig:
    """Runtime options that do not change the statistical design."""

    # Consecutive rejected candidates allowed for one primary slot. None means unbounded.
    max_attempts_per_point: int | None = 100_000

    # How close-pair points become output rows: "anchor", "nearest" or "match".
    close_pair_rows: str = "anchor"

    # Seed used only when no random generator is passed to the sampler.
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.max_attempts_per_point is not None and self.max_attempts_per_point <= 0:
            raise InvalidParameter("max_attempts_per_point must be > 0 when provided")

        if self.close_pair_rows not in CLOSE_PAIR_ROW_POLICIES:
            raise InvalidParameter(
                f"close_pair_rows must be one of {list(CLOSE_PAIR_ROW_POLICIES)}, got {self.close_pair_rows!r}"
            )


def _as_count(value: Any, name: str) -> int:
    """Return `value` as an int, accepting integral floats and rejecting bools."""
    if isinstance(value, bool):
        raise InvalidParameter(f"{name} must be an integer, got {value!r}")

    if isinstance(value, numbers.Integral):
        return int(value)

    if isinstance(value, numbers.Real) and float(value).is_integer():
        return int(value)

    raise InvalidParameter(f"{name} must be an integer, got {value!r}")


def _as_real(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidParameter(f"{name} must be a number, got {value!r}")
    return float(value)
