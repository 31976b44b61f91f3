import math
import unittest

import numpy as np

from bellgen.api.models import ShapeConfig
from bellgen.engine.adjustments import correct_sum, refine_mean
from bellgen.engine.density import draw_shape, integerize, sample_density
from bellgen.engine.generation import run_pipeline
from bellgen.engine.unimodal import (
    edges_ok,
    is_unimodal_about,
    peak_index,
    repair_unimodal,
)
from bellgen.runtime.rng import RNG
from bellgen.scoring.metrics import weighted_mean


class DensityTests(unittest.TestCase):
    def test_symmetric_density_peaks_at_mean(self):
        weights = sample_density([7, 8, 9], 8.0, 1.0)
        self.assertAlmostEqual(float(weights[1]), 1.0)
        self.assertAlmostEqual(float(weights[0]), math.exp(-0.5))
        self.assertAlmostEqual(float(weights[0]), float(weights[2]))

    def test_asymmetric_density_uses_side_specific_sigma(self):
        weights = sample_density([6, 8, 10], 8.0, 1.0, 2.0)
        self.assertAlmostEqual(float(weights[0]), math.exp(-2.0))
        self.assertAlmostEqual(float(weights[2]), math.exp(-0.5))
        self.assertGreater(float(weights[2]), float(weights[0]))

    def test_integerize_scales_to_total(self):
        counts = integerize([1.0, 1.0, 2.0], peak=2, total=100)
        self.assertEqual(counts.tolist(), [25, 25, 50])

    def test_integerize_rounds_half_up(self):
        counts = integerize([1.0, 1.0], peak=0, total=5)
        self.assertEqual(counts.tolist(), [3, 3])

    def test_integerize_puts_total_on_peak_when_weights_vanish(self):
        counts = integerize(np.zeros(3), peak=1, total=100)
        self.assertEqual(counts.tolist(), [0, 100, 0])

    def test_fixed_shape_does_not_consume_randomness(self):
        shape = ShapeConfig(strategy="fixed", sigma=1.5)
        self.assertEqual(draw_shape(RNG(1), shape), (1.5, 1.5))

    def test_symmetric_shape_draws_within_bounds(self):
        shape = ShapeConfig(strategy="symmetric", sigma_min=1.0, sigma_max=2.0)
        for seed in range(10):
            left, right = draw_shape(RNG(seed), shape)
            self.assertEqual(left, right)
            self.assertTrue(1.0 <= left <= 2.0)

    def test_skewed_shape_splits_sigma(self):
        shape = ShapeConfig(strategy="skewed", sigma_min=1.0, sigma_max=2.0, skew_max=0.3)
        for seed in range(10):
            left, right = draw_shape(RNG(seed), shape)
            sigma = (left + right) / 2.0
            self.assertTrue(1.0 - 1e-9 <= sigma <= 2.0 + 1e-9)
            self.assertLessEqual(abs(left - right) / 2.0, 0.3 * sigma + 1e-9)


class UnimodalTests(unittest.TestCase):
    def test_peak_index_prefers_closest_label(self):
        self.assertEqual(peak_index([5, 6, 7, 8], 6.8), 2)

    def test_peak_index_breaks_ties_toward_lower_index(self):
        self.assertEqual(peak_index([5, 6, 7], 6.5), 1)

    def test_peak_index_clamps_outside_range(self):
        self.assertEqual(peak_index([5, 6, 7], 100.0), 2)
        self.assertEqual(peak_index([5, 6, 7], -3.0), 0)

    def test_repair_clamps_both_sides_of_peak(self):
        repaired = repair_unimodal([1, 3, 2, 5, 4, 6, 0], peak=3)
        self.assertEqual(repaired, [1, 3, 3, 5, 4, 4, 0])
        self.assertTrue(is_unimodal_about(repaired, 3))

    def test_is_unimodal_about_checks_direction_around_peak(self):
        self.assertTrue(is_unimodal_about([5, 4], 0))
        self.assertFalse(is_unimodal_about([4, 5], 0))
        self.assertFalse(is_unimodal_about([1, 3, 2, 5], 3))
        self.assertFalse(is_unimodal_about([0, -1, 0], 0))

    def test_edges_ok_only_checks_touched_neighbours(self):
        values = [1, 4, 2, 5, 1]
        self.assertTrue(edges_ok(values, (4,), peak=3))
        self.assertFalse(edges_ok(values, (2,), peak=3))


class AdjustmentTests(unittest.TestCase):
    labels = [1, 2, 3, 4]

    def test_correct_sum_raises_under_total(self):
        values = correct_sum([10, 30, 40, 15], self.labels, peak=2, target=2.65)
        self.assertEqual(sum(values), 100)
        self.assertTrue(is_unimodal_about(values, 2))

    def test_correct_sum_lowers_over_total(self):
        values = correct_sum([10, 35, 50, 15], self.labels, peak=2, target=2.6)
        self.assertEqual(sum(values), 100)
        self.assertTrue(is_unimodal_about(values, 2))

    def test_correct_sum_stops_at_budget(self):
        values = correct_sum([10, 30, 40, 15], self.labels, peak=2, target=2.65, budget=2)
        self.assertEqual(sum(values), 97)

    def test_correct_sum_picks_step_that_best_matches_mean(self):
        values = correct_sum([0, 50, 49, 0], self.labels, peak=1, target=2.5)
        self.assertEqual(values, [0, 50, 50, 0])

    def test_refine_mean_moves_toward_target(self):
        labels = [1, 2, 3, 4, 5]
        start = [10, 20, 40, 20, 10]
        values = refine_mean(start, labels, peak=2, target=3.2)
        self.assertEqual(sum(values), 100)
        self.assertTrue(is_unimodal_about(values, 2))
        self.assertLess(abs(weighted_mean(values, labels) - 3.2), 0.005)

    def test_refine_mean_keeps_vector_when_already_converged(self):
        labels = [1, 2, 3]
        start = [25, 50, 25]
        self.assertEqual(refine_mean(start, labels, peak=1, target=2.0), start)

    def test_refine_mean_pulls_peak_into_band(self):
        labels = [1, 2, 3]
        values = refine_mean(
            [20, 60, 20],
            labels,
            peak=1,
            target=2.0,
            peak_band=(25, 50),
            band_weight=0.05,
        )
        self.assertEqual(sum(values), 100)
        self.assertLessEqual(values[1], 50)
        self.assertTrue(is_unimodal_about(values, 1))
        self.assertLess(abs(weighted_mean(values, labels) - 2.0), 0.011)

    def test_refine_mean_respects_budget(self):
        labels = [1, 2, 3, 4, 5]
        start = [10, 20, 40, 20, 10]
        values = refine_mean(start, labels, peak=2, target=3.2, budget=0)
        self.assertEqual(values, start)


class PipelineTests(unittest.TestCase):
    def test_pipeline_produces_valid_row(self):
        labels = list(range(5, 16))
        values, score, peak = run_pipeline(labels, 8.0, 1.8, 1.8)
        self.assertEqual(sum(values), 100)
        self.assertEqual(labels[peak], 8)
        self.assertTrue(is_unimodal_about(values, peak))
        self.assertLess(score, 0.05)

    def test_pipeline_band_raises_flat_peak(self):
        labels = list(range(5, 16))
        shape = ShapeConfig(strategy="fixed", peak_band=(25, 50), band_weight=0.05)
        values, _score, peak = run_pipeline(labels, 10.0, 2.4, 2.4, shape=shape)
        self.assertEqual(sum(values), 100)
        self.assertTrue(is_unimodal_about(values, peak))
        self.assertTrue(25 <= values[peak] <= 50)
        self.assertLess(abs(weighted_mean(values, labels) - 10.0), 0.05)

    def test_pipeline_handles_mean_far_outside_range(self):
        labels = [5, 6]
        values, _score, peak = run_pipeline(labels, 40.0, 1.2, 1.2)
        self.assertEqual(peak, 1)
        self.assertEqual(values, [0, 100])


if __name__ == "__main__":
    unittest.main()
