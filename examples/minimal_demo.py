"""Minimal demo for inhibitory sampling with close pairs.

Run:
    python examples/minimal_demo.py
"""

from __future__ import annotations

import logging
from pathlib import Path
import sys

import numpy as np
import pandas as pd

# Ensure package import works when running this script directly.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from geosample import generate_sample


def make_demo_population(n_rows: int = 1000, seed: int = 0) -> pd.DataFrame:
    """Create uniformly scattered building centroids with one covariate."""
    rng = np.random.default_rng(seed)
    return pd.DataFrame(
        {
            "x": rng.uniform(0.0, 1000.0, n_rows),
            "y": rng.uniform(0.0, 1000.0, n_rows),
            "households": rng.integers(1, 8, n_rows),
        }
    )


def main() -> None:
    """Draw 45 primary points and 5 close pairs, then print a short report."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

    population = make_demo_population()
    result = generate_sample(
        population,
        sample_size=50,
        x_index=0,
        y_index=1,
        minimum_distance=20.0,
        close_pairs=5,
        circle_radius=10.0,
        rng=16713,
    )

    print("Summary:", result.to_summary_dict())
    print(result.sampled_population.tail(8).to_string())


if __name__ == "__main__":
    main()
