"""Tests for inhibitory sampling with close pairs."""

from __future__ import annotations

import math
import unittest

import numpy as np
import pandas as pd

from geosample import (
    DataQualityWarning,
    InfeasibleConstraint,
    InhibitorySampler,
    InvalidInput,
    InvalidParameter,
    ParameterAdjustedWarning,
    PointKind,
    SampleRequest,
    SamplerConfig,
    generate_sample,
)


def _uniform_population(n_rows: int = 1000, seed: int = 0) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    return pd.DataFrame(
        {
            "x": rng.uniform(0.0, 1000.0, n_rows),
            "y": rng.uniform(0.0, 1000.0, n_rows),
            "building_id": np.arange(n_rows, dtype=np.int64),
            "households": rng.integers(1, 6, n_rows).astype(np.float64),
        }
    )


class GenerateSampleTest(unittest.TestCase):
    """Validate sampling guarantees on a uniformly scattered population."""

    def setUp(self) -> None:
        self.population = _uniform_population()

    def _run(self, **overrides):
        params = {
            "sample_size": 50,
            "x_index": 0,
            "y_index": 1,
            "minimum_distance": 20.0,
            "close_pairs": 5,
            "circle_radius": 10.0,
            "rng": 16713,
        }
        params.update(overrides)
        return generate_sample(self.population, **params)

    def test_example_design_returns_full_sample(self) -> None:
        result = self._run()

        self.assertEqual(result.n_sampled, 50)
        self.assertEqual(len(result.primary_points), 45)
        self.assertEqual(len(result.close_pair_points), 5)
        self.assertEqual(list(result.sampled_population.columns), list(self.population.columns))

    def test_primary_points_respect_scaled_distance(self) -> None:
        result = self._run()

        expected = 20.0 * math.sqrt(50 / 45)
        self.assertAlmostEqual(result.scaled_min_distance, expected, places=12)

        self.assertGreaterEqual(result.min_primary_distance(), result.scaled_min_distance - 1e-9)

    def test_primary_points_are_distinct_rows(self) -> None:
        result = self._run()
        positions = [p.row_position for p in result.primary_points]
        self.assertEqual(len(set(positions)), len(positions))

    def test_close_pairs_stay_near_distinct_anchors(self) -> None:
        result = self._run()
        primary = result.primary_points
        bound = max(result.parameters.circle_radius, result.scaled_min_distance / 4)

        anchors = [p.anchor for p in result.close_pair_points]
        self.assertEqual(len(set(anchors)), len(anchors))

        for point in result.close_pair_points:
            origin = primary[point.anchor]
            distance = math.hypot(point.x - origin.x, point.y - origin.y)
            self.assertLessEqual(distance, bound + 1e-9)
            self.assertGreaterEqual(distance, result.scaled_min_distance / 4 - 1e-9)

    def test_output_order_is_primary_then_close_pairs(self) -> None:
        result = self._run()
        kinds = [p.kind for p in result.points]
        self.assertEqual(kinds, [PointKind.PRIMARY] * 45 + [PointKind.CLOSE_PAIR] * 5)

        coords = result.sampled_population[["x", "y"]].to_numpy()
        self.assertTrue(np.allclose(coords, result.coordinates()))

    def test_primary_rows_carry_covariates(self) -> None:
        result = self._run()

        for i, point in enumerate(result.primary_points):
            source = self.population.iloc[point.row_position]
            self.assertEqual(result.source_index[i], self.population.index[point.row_position])
            self.assertEqual(result.sampled_population.loc[i, "building_id"], source["building_id"])
            self.assertEqual(result.sampled_population.loc[i, "x"], source["x"])

    def test_close_pair_rows_copy_anchor_covariates(self) -> None:
        result = self._run()
        primary = result.primary_points

        for offset, point in enumerate(result.close_pair_points):
            row = result.sampled_population.iloc[45 + offset]
            anchor_row = self.population.iloc[primary[point.anchor].row_position]
            self.assertEqual(row["building_id"], anchor_row["building_id"])
            self.assertEqual(row["households"], anchor_row["households"])
            self.assertIsNone(result.source_index[45 + offset])

    def test_scaled_distance_equals_minimum_without_close_pairs(self) -> None:
        result = self._run(close_pairs=0, circle_radius=0.0)

        self.assertEqual(result.scaled_min_distance, 20.0)
        self.assertEqual(result.n_sampled, 50)
        self.assertEqual(len(result.close_pair_points), 0)

    def test_scaled_distance_grows_with_close_pairs(self) -> None:
        previous = 0.0
        for close_pairs in (0, 5, 10, 25):
            result = self._run(close_pairs=close_pairs, circle_radius=1.0)
            self.assertGreaterEqual(result.scaled_min_distance, 20.0)
            self.assertGreater(result.scaled_min_distance, previous)
            previous = result.scaled_min_distance

    def test_same_seed_gives_identical_output(self) -> None:
        first = self._run(rng=42)
        second = self._run(rng=42)

        pd.testing.assert_frame_equal(first.sampled_population, second.sampled_population)
        self.assertEqual(first.points, second.points)

    def test_generator_handle_is_used_directly(self) -> None:
        first = self._run(rng=np.random.default_rng(7))
        second = self._run(rng=np.random.default_rng(7))
        self.assertEqual(first.points, second.points)

    def test_config_seed_is_used_without_rng(self) -> None:
        config = SamplerConfig(seed=99)
        first = self._run(rng=None, config=config)
        second = self._run(rng=99)
        self.assertEqual(first.points, second.points)

    def test_too_many_close_pairs_is_rejected(self) -> None:
        with self.assertRaises(InvalidParameter):
            self._run(sample_size=10, close_pairs=6)

    def test_population_smaller_than_primary_count_is_rejected(self) -> None:
        with self.assertRaises(InvalidParameter):
            generate_sample(self.population.head(5), 10, 0, 1, 1.0, 0, 0.0, rng=1)

    def test_non_tabular_population_is_rejected(self) -> None:
        with self.assertRaises(InvalidInput):
            generate_sample(np.arange(10.0), 3, 0, 1, 1.0, rng=1)

    def test_circle_radius_is_clamped_with_warning(self) -> None:
        with self.assertWarns(ParameterAdjustedWarning):
            result = self._run(circle_radius=100.0)

        self.assertTrue(result.parameters.circle_radius_clamped)
        self.assertAlmostEqual(result.parameters.circle_radius, result.scaled_min_distance / 2)

        primary = result.primary_points
        for point in result.close_pair_points:
            origin = primary[point.anchor]
            distance = math.hypot(point.x - origin.x, point.y - origin.y)
            self.assertLessEqual(distance, result.scaled_min_distance / 2 + 1e-9)

    def test_small_circle_radius_is_floored(self) -> None:
        result = self._run(circle_radius=0.0)
        primary = result.primary_points

        for point in result.close_pair_points:
            origin = primary[point.anchor]
            distance = math.hypot(point.x - origin.x, point.y - origin.y)
            self.assertAlmostEqual(distance, result.scaled_min_distance / 4, places=9)

    def test_rows_with_missing_coordinates_are_dropped(self) -> None:
        population = self.population.copy()
        population.loc[[3, 17, 400], "x"] = np.nan
        population.loc[[500], "y"] = np.nan

        with self.assertWarns(DataQualityWarning):
            result = generate_sample(population, 50, 0, 1, 20.0, 5, 10.0, rng=3)

        self.assertEqual(result.n_dropped_rows, 4)
        self.assertEqual(result.n_sampled, 50)
        self.assertFalse(result.sampled_population[["x", "y"]].isna().any().any())
        for label in (3, 17, 400, 500):
            self.assertNotIn(label, result.source_index)

    def test_array_population_is_accepted(self) -> None:
        array = self.population[["x", "y", "households"]].to_numpy()
        result = generate_sample(array, 20, 0, 1, 30.0, 4, 5.0, rng=11)

        self.assertEqual(result.sampled_population.shape, (20, 3))

    def test_row_sequence_population_is_accepted(self) -> None:
        rows = [(float(i % 20) * 10.0, float(i // 20) * 10.0, i) for i in range(400)]
        result = generate_sample(rows, 10, 0, 1, 25.0, 2, 5.0, rng=5)

        self.assertEqual(result.n_sampled, 10)
        self.assertGreaterEqual(result.min_primary_distance(), result.scaled_min_distance - 1e-9)

    def test_swapped_coordinate_columns(self) -> None:
        population = self.population[["building_id", "y", "x"]]
        result = generate_sample(population, 30, 2, 1, 25.0, 3, 8.0, rng=21)

        primary_xy = np.asarray([(p.x, p.y) for p in result.primary_points])
        self.assertTrue(np.allclose(primary_xy[:, 0], result.sampled_population["x"].to_numpy()[:27]))
        self.assertGreaterEqual(result.min_primary_distance(), result.scaled_min_distance - 1e-9)

    def test_duplicated_column_labels_are_kept(self) -> None:
        population = self.population[["x", "y", "households"]].copy()
        population.columns = ["x", "y", "x"]

        result = generate_sample(population, 20, 0, 1, 20.0, 2, 5.0, rng=1)

        self.assertEqual(result.sampled_population.shape, (20, 3))
        self.assertEqual(list(result.sampled_population.columns), ["x", "y", "x"])
        sampled_x = result.sampled_population.iloc[:, 0].to_numpy()
        self.assertTrue(np.allclose(sampled_x, [p.x for p in result.points]))


class InhibitorySamplerTest(unittest.TestCase):
    """Validate the class interface and the rejection-loop attempt budget."""

    def test_attempt_budget_raises_infeasible_constraint(self) -> None:
        population = pd.DataFrame({"x": np.linspace(0.0, 1.0, 10), "y": np.zeros(10)})
        request = SampleRequest(sample_size=3, x_index=0, y_index=1, minimum_distance=100.0)
        sampler = InhibitorySampler(request, config=SamplerConfig(max_attempts_per_point=50), rng=0)

        with self.assertRaises(InfeasibleConstraint):
            sampler.run(population)

    def test_run_reports_attempts_and_summary(self) -> None:
        population = _uniform_population(seed=4)
        request = SampleRequest(
            sample_size=40,
            x_index=0,
            y_index=1,
            minimum_distance=15.0,
            close_pairs=8,
            circle_radius=6.0,
        )
        result = InhibitorySampler(request, rng=8).run(population)

        self.assertGreaterEqual(result.n_attempts, 32)
        summary = result.to_summary_dict()
        self.assertEqual(summary["n_sampled"], 40)
        self.assertEqual(summary["n_primary"], 32)
        self.assertEqual(summary["n_close_pairs"], 8)
        self.assertFalse(summary["circle_radius_clamped"])

    def test_nearest_policy_returns_population_rows(self) -> None:
        population = _uniform_population(seed=9)
        request = SampleRequest(
            sample_size=30,
            x_index=0,
            y_index=1,
            minimum_distance=20.0,
            close_pairs=6,
            circle_radius=10.0,
        )
        result = InhibitorySampler(request, config=SamplerConfig(close_pair_rows="nearest"), rng=2).run(population)

        self.assertEqual(result.n_sampled, 30)
        self.assertNotIn(None, result.source_index)
        self.assertEqual(len(set(result.source_index)), 30)

    def test_match_policy_drops_unmatched_close_pairs(self) -> None:
        population = _uniform_population(seed=10)
        request = SampleRequest(
            sample_size=30,
            x_index=0,
            y_index=1,
            minimum_distance=20.0,
            close_pairs=6,
            circle_radius=10.0,
        )
        config = SamplerConfig(close_pair_rows="match")

        with self.assertWarns(DataQualityWarning):
            result = InhibitorySampler(request, config=config, rng=2).run(population)

        self.assertEqual(result.n_sampled, 24)
        self.assertEqual(len(result.points), 30)


if __name__ == "__main__":
    unittest.main()
