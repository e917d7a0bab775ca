"""Population validation applied before any sampling work."""

from __future__ import annotations

from collections.abc import Sequence
import logging
from typing import Any
import warnings

import numpy as np
import pandas as pd

from .errors import DataQualityWarning, InvalidInput, InvalidParameter

logger = logging.getLogger(__name__)


def as_population_frame(population: Any) -> pd.DataFrame:
    """Return `population` as a DataFrame, or raise InvalidInput if it is not tabular."""
    if isinstance(population, pd.DataFrame):
        return population

    if isinstance(population, np.ndarray):
        if population.ndim != 2:
            raise InvalidInput(f"population array must be 2D, got ndim={population.ndim}")
        return pd.DataFrame(population)

    if isinstance(population, (str, bytes)) or not isinstance(population, Sequence):
        raise InvalidInput("population must be a DataFrame, a 2D array or a sequence of rows")

    rows = list(population)
    if rows and any(isinstance(row, (str, bytes)) or not isinstance(row, Sequence) for row in rows):
        raise InvalidInput("every population row must be a sequence of fields")

    widths = {len(row) for row in rows}
    if len(widths) > 1:
        raise InvalidInput("population rows must all have the same width")

    return pd.DataFrame(rows)


def validate_population(population: Any, x_index: int, y_index: int) -> tuple[pd.DataFrame, int]:
    """Check the population table and drop rows with missing coordinates.

    Returns the working table (never the caller's object when rows are
    dropped) and the number of rows removed.
    """
    df = as_population_frame(population)

    n_columns = df.shape[1]
    if n_columns < 2:
        raise InvalidInput("population must have at least two columns")

    for name, index in (("x_index", x_index), ("y_index", y_index)):
        if not 0 <= index < n_columns:
            raise InvalidParameter(f"{name}={index} is out of range for {n_columns} columns")

    if x_index == y_index:
        raise InvalidParameter("x_index and y_index must refer to different columns")

    x = _coordinate_series(df.iloc[:, x_index], "x")
    y = _coordinate_series(df.iloc[:, y_index], "y")

    missing = x.isna().to_numpy() | y.isna().to_numpy()
    n_dropped = int(missing.sum())
    if n_dropped:
        message = f"NA's not allowed in the coordinates; eliminating {n_dropped} rows with NA's"
        logger.warning(message)
        warnings.warn(message, DataQualityWarning, stacklevel=2)
        df = df.loc[~missing]

    return df, n_dropped


def check_close_pairs(sample_size: int, close_pairs: int) -> None:
    """Raise InvalidParameter unless 0 <= close_pairs <= sample_size / 2."""
    if close_pairs < 0 or close_pairs > sample_size / 2:
        raise InvalidParameter("close_pairs must be between 0 and sample_size/2")


def check_population_size(n_rows: int, primary_count: int) -> None:
    """Raise InvalidParameter when the table cannot supply `primary_count` distinct points."""
    if n_rows == 0:
        raise InvalidParameter("population has no rows with complete coordinates")

    if primary_count > n_rows:
        raise InvalidParameter(
            f"cannot draw {primary_count} primary points from a population of {n_rows} rows"
        )


def coordinate_array(df: pd.DataFrame, x_index: int, y_index: int) -> np.ndarray:
    """Return the coordinate columns of a validated table as an (N, 2) float array."""
    x = pd.to_numeric(df.iloc[:, x_index], errors="raise").to_numpy(dtype=np.float64)
    y = pd.to_numeric(df.iloc[:, y_index], errors="raise").to_numpy(dtype=np.float64)
    return np.column_stack([x, y])


def _coordinate_series(series: pd.Series, name: str) -> pd.Series:
    numeric = pd.to_numeric(series, errors="coerce")

    bad = numeric.isna() & series.notna()
    if bad.any():
        raise InvalidInput(f"{name} coordinate column contains non-numeric values")

    values = numeric.to_numpy(dtype=np.float64, na_value=np.nan)
    if np.isinf(values).any():
        raise InvalidInput(f"{name} coordinate column contains infinite values")

    return numeric
