"""Inhibitory spatial sampling with close pairs."""

from __future__ import annotations

import logging
from typing import Any, Union

import numpy as np

from .config import EffectiveParameters, SampleRequest, SamplerConfig
from .errors import InfeasibleConstraint
from .geometry import disk_offset
from .models import SampledPoint, SampleResult
from .resolver import PopulationResolver
from .spatial_index import BruteForcePointBuffer
from .validation import (
    check_close_pairs,
    check_population_size,
    coordinate_array,
    validate_population,
)

logger = logging.getLogger(__name__)

RandomSource = Union[np.random.Generator, int, None]


def make_rng(rng: RandomSource = None, seed: int | None = None) -> np.random.Generator:
    """Return `rng` if it is already a Generator, else build one from it or `seed`."""
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(seed if rng is None else rng)


class InhibitorySampler:
    """Draw an inhibitory sample with close pairs from a population table.

    The sample is built in two phases:
    - primary points, drawn by sequential rejection so that every pair is at
      least the scaled inhibition distance apart
    - close-pair points, each offset from a distinct primary anchor by a
      disk-uniform radius
    """

    def __init__(
        self,
        request: SampleRequest,
        config: SamplerConfig | None = None,
        rng: RandomSource = None,
    ) -> None:
        self.request = request
        self.config = config or SamplerConfig()
        self.rng = make_rng(rng, self.config.seed)

    def run(self, population: Any) -> SampleResult:
        """Validate `population`, sample it and resolve the sampled rows."""
        request = self.request
        check_close_pairs(request.sample_size, request.close_pairs)

        df, n_dropped = validate_population(population, request.x_index, request.y_index)
        params = EffectiveParameters.from_request(request)
        check_population_size(len(df), params.primary_count)

        logger.info(
            f"Sampling {request.sample_size} points ({params.primary_count} primary, "
            f"{params.close_pairs} close pairs) from {len(df):,} rows; "
            f"inhibition distance {params.scaled_min_distance:.4g}"
        )

        xy = coordinate_array(df, request.x_index, request.y_index)
        primary, n_attempts = self.sample_primary(xy, params)
        close = self.sample_close_pairs(primary, params)
        points = primary + close

        resolver = PopulationResolver(df, request.x_index, request.y_index)
        sampled, source_index = resolver.resolve(points, close_pair_rows=self.config.close_pair_rows)

        logger.info(f"Sampled {len(sampled)} rows after {n_attempts:,} primary candidate draws")

        return SampleResult(
            sampled_population=sampled,
            scaled_min_distance=params.scaled_min_distance,
            points=tuple(points),
            parameters=params,
            source_index=source_index,
            n_dropped_rows=n_dropped,
            n_attempts=n_attempts,
        )

    def sample_primary(
        self,
        xy: np.ndarray,
        params: EffectiveParameters,
    ) -> tuple[list[SampledPoint], int]:
        """Draw `params.primary_count` points pairwise at least the scaled distance apart.

        Candidates are drawn with replacement from the whole population, so a
        rejected or already accepted row can be drawn again.
        """
        n_rows = xy.shape[0]
        max_attempts = self.config.max_attempts_per_point

        seed_position = int(self.rng.integers(0, n_rows))
        points = [SampledPoint.primary(xy[seed_position, 0], xy[seed_position, 1], seed_position)]
        buffer = BruteForcePointBuffer(params.primary_count)
        buffer.append(xy[seed_position, 0], xy[seed_position, 1])
        total_attempts = 1

        for slot in range(1, params.primary_count):
            attempts = 0
            while True:
                if max_attempts is not None and attempts >= max_attempts:
                    raise InfeasibleConstraint(
                        f"no candidate at least {params.scaled_min_distance:.4g} from the "
                        f"{slot} accepted points after {attempts} attempts; "
                        "reduce minimum_distance or sample_size"
                    )

                take = int(self.rng.integers(0, n_rows))
                attempts += 1
                x, y = xy[take, 0], xy[take, 1]
                if buffer.min_squared_distance(x, y) >= params.d_squared:
                    break

            buffer.append(x, y)
            points.append(SampledPoint.primary(x, y, take))
            total_attempts += attempts
            logger.debug(f"slot {slot}: accepted row {take} after {attempts} attempts")

        return points, total_attempts

    def sample_close_pairs(
        self,
        primary: list[SampledPoint],
        params: EffectiveParameters,
    ) -> list[SampledPoint]:
        """Place one close-pair point near each of `params.close_pairs` distinct anchors."""
        if params.close_pairs == 0:
            return []

        anchors = self.rng.choice(len(primary), size=params.close_pairs, replace=False)

        points: list[SampledPoint] = []
        for anchor in anchors:
            origin = primary[int(anchor)]
            dx, dy = disk_offset(self.rng, params.circle_radius, params.min_offset_radius)
            points.append(SampledPoint.close_pair(origin.x + dx, origin.y + dy, int(anchor)))

        return points


def generate_sample(
    population: Any,
    sample_size: int,
    x_index: int,
    y_index: int,
    minimum_distance: float,
    close_pairs: int = 0,
    circle_radius: float = 0.0,
    *,
    rng: RandomSource = None,
    config: SamplerConfig | None = None,
) -> SampleResult:
    """Draw an inhibitory sample with close pairs.

    Parameters
    ----------
    population:
        DataFrame, 2D array or sequence of rows with projected coordinates.
    sample_size:
        Total number of points n.
    x_index, y_index:
        Zero-based positions of the coordinate columns.
    minimum_distance:
        Base inhibition distance, rescaled by sqrt(n / (n - close_pairs)).
    close_pairs:
        Number of close-pair points, at most n/2.
    circle_radius:
        Maximum anchor offset of a close pair, capped at half the scaled distance.
    rng:
        Random generator or integer seed. Falls back to `config.seed`.
    """
    request = SampleRequest(
        sample_size=sample_size,
        x_index=x_index,
        y_index=y_index,
        minimum_distance=minimum_distance,
        close_pairs=close_pairs,
        circle_radius=circle_radius,
    )
    return InhibitorySampler(request, config=config, rng=rng).run(population)
