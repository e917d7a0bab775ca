"""Map generated coordinates back to rows of the population table."""

from __future__ import annotations

from collections.abc import Hashable, Sequence
import logging
import warnings

import numpy as np
import pandas as pd

from .config import CLOSE_PAIR_ROW_POLICIES
from .errors import DataQualityWarning, InvalidParameter
from .geometry import squared_distances
from .models import SampledPoint
from .validation import coordinate_array

logger = logging.getLogger(__name__)


class PopulationResolver:
    """Resolve sampled points into an output table with the population's columns.

    Primary points are matched by exact coordinate equality, which holds
    because they are drawn from the table's own coordinate values. Close-pair
    points are synthetic offsets and are handled by a row policy:

    - ``"anchor"``: copy the anchor's row and overwrite its X/Y.
    - ``"nearest"``: use the nearest population row not already sampled.
    - ``"match"``: exact coordinate lookup; unmatched points are dropped.
    """

    def __init__(self, population: pd.DataFrame, x_index: int, y_index: int) -> None:
        self._population = population
        self._x_index = x_index
        self._y_index = y_index
        self._xy = coordinate_array(population, x_index, y_index)

    def match_positions(self, x: float, y: float) -> np.ndarray:
        """Return positions of all rows whose coordinates equal (x, y) exactly."""
        hit = (self._xy[:, 0] == x) & (self._xy[:, 1] == y)
        return np.flatnonzero(hit)

    def resolve(
        self,
        points: Sequence[SampledPoint],
        close_pair_rows: str = "anchor",
    ) -> tuple[pd.DataFrame, tuple[Hashable | None, ...]]:
        """Build the sampled table in point order.

        Returns the table and, per output row, the population index label it
        came from (None for synthesized rows).
        """
        if close_pair_rows not in CLOSE_PAIR_ROW_POLICIES:
            raise InvalidParameter(f"unsupported close_pair_rows policy: {close_pair_rows!r}")

        primary_positions = [p.row_position for p in points if p.is_primary]

        # One source row position per output row; synthesized rows reuse their anchor's row.
        positions: list[int] = []
        labels: list[Hashable | None] = []
        synthesized: list[tuple[int, float, float]] = []
        taken: set[int] = set()
        n_unmatched = 0

        for point in points:
            if point.is_primary:
                position = self._resolve_primary(point)
                taken.add(position)
                positions.append(position)
                labels.append(self._population.index[position])
                continue

            if close_pair_rows == "anchor":
                synthesized.append((len(positions), point.x, point.y))
                positions.append(primary_positions[point.anchor])
                labels.append(None)
            elif close_pair_rows == "nearest":
                position = self._nearest_free_position(point, taken)
                taken.add(position)
                positions.append(position)
                labels.append(self._population.index[position])
            else:
                matches = self.match_positions(point.x, point.y)
                if len(matches) == 0:
                    n_unmatched += 1
                    continue
                for position in matches:
                    positions.append(int(position))
                    labels.append(self._population.index[int(position)])

        if n_unmatched:
            message = f"{n_unmatched} close-pair points have no exact coordinate match and were dropped"
            logger.warning(message)
            warnings.warn(message, DataQualityWarning, stacklevel=3)

        return self._assemble(positions, synthesized), tuple(labels)

    def _resolve_primary(self, point: SampledPoint) -> int:
        matches = self.match_positions(point.x, point.y)
        position = int(point.row_position)

        if position not in matches:
            raise InvalidParameter(
                f"primary point ({point.x}, {point.y}) does not match population row {position}"
            )

        if len(matches) > 1:
            logger.debug(f"coordinates ({point.x}, {point.y}) are shared by {len(matches)} rows")

        return position

    def _nearest_free_position(self, point: SampledPoint, taken: set[int]) -> int:
        dist2 = squared_distances(self._xy, point.x, point.y)
        if taken:
            dist2 = dist2.copy()
            dist2[list(taken)] = np.inf

        position = int(np.argmin(dist2))
        if not np.isfinite(dist2[position]):
            raise InvalidParameter("no unsampled population row is left for a close-pair point")
        return position

    def _assemble(self, positions: list[int], synthesized: list[tuple[int, float, float]]) -> pd.DataFrame:
        """Take rows by position, then overwrite coordinates of synthesized rows.

        Columns are addressed by position only, so duplicated column labels
        are preserved.
        """
        out = self._population.iloc[positions].reset_index(drop=True)
        if not synthesized:
            return out

        for column in (self._x_index, self._y_index):
            if not pd.api.types.is_float_dtype(out.dtypes.iloc[column]):
                # Synthetic close-pair coordinates are not integral.
                out.isetitem(column, pd.to_numeric(out.iloc[:, column]).astype(np.float64))

        rows = [row for row, _, _ in synthesized]
        out.iloc[rows, self._x_index] = [x for _, x, _ in synthesized]
        out.iloc[rows, self._y_index] = [y for _, _, y in synthesized]
        return out
