import unittest
from unittest.mock import patch

from bellgen.api.models import ShapeConfig, TableConfig
from bellgen.engine.generation import generate_table, synthesize_row
from bellgen.runtime.rng import RNG
from bellgen.schema import defaults
from bellgen.scoring.metrics import is_unimodal, weighted_mean


class _Logger:
    def __init__(self):
        self.info_messages = []
        self.warning_messages = []

    def info(self, message):
        self.info_messages.append(str(message))

    def warning(self, message):
        self.warning_messages.append(str(message))


def _counts(table, row):
    return [row.values[col] for col in table.columns]


class GenerateTableTests(unittest.TestCase):
    def _assert_valid_rows(self, table):
        for row in table.rows:
            counts = _counts(table, row)
            self.assertEqual(sum(counts), defaults.TOTAL)
            self.assertEqual(row.sum, defaults.TOTAL)
            self.assertTrue(all(c >= 0 for c in counts))
            self.assertTrue(is_unimodal(counts), counts)
            self.assertEqual(list(row.values.keys()), table.columns)

    def test_default_range_rows_are_valid_and_close_to_target(self):
        config = TableConfig(first_row_expectation=8.0, min_col=5, max_col=15)
        table = generate_table(config, rng=RNG(1))

        self.assertEqual(table.columns, list(range(5, 16)))
        self.assertEqual(len(table.rows), defaults.ROW_COUNT)
        self.assertEqual([row.row_index for row in table.rows], list(range(1, 17)))
        self._assert_valid_rows(table)
        self.assertEqual(table.rows[0].target_expectation, 8.0)
        self.assertLess(abs(table.rows[0].actual_expectation - 8.0), 0.05)
        for row in table.rows:
            self.assertLess(row.mean_error, defaults.DEFAULT_MEAN_TOLERANCE)

    def test_actual_expectation_is_weighted_mean_of_counts(self):
        config = TableConfig(first_row_expectation=9.0, min_col=5, max_col=15)
        table = generate_table(config, rng=RNG(2))
        for row in table.rows:
            self.assertAlmostEqual(
                row.actual_expectation,
                weighted_mean(_counts(table, row), table.columns),
            )

    def test_max_diff_bounds_target_spread(self):
        config = TableConfig(8.0, 5, 15, max_diff=2.5)
        for seed in range(5):
            table = generate_table(config, rng=RNG(seed))
            targets = table.targets()
            self.assertLessEqual(max(targets) - min(targets), 2.5 + 1e-9)

    def test_default_max_diff_applies_when_absent(self):
        table = generate_table(TableConfig(8.0, 5, 15), rng=RNG(6))
        targets = table.targets()
        self.assertLessEqual(
            max(targets) - min(targets), defaults.DEFAULT_MAX_DIFF + 1e-9
        )

    def test_two_column_range_terminates_with_valid_rows(self):
        table = generate_table(TableConfig(5.5, 5, 6, max_diff=0.5), rng=RNG(3))
        self.assertEqual(table.columns, [5, 6])
        self._assert_valid_rows(table)

    def test_target_outside_range_piles_onto_boundary(self):
        table = generate_table(TableConfig(8.0, 5, 6), rng=RNG(4))
        self._assert_valid_rows(table)
        for row in table.rows:
            self.assertEqual(row.peak_column, 6)

    def test_midpoint_expectation_peaks_at_midpoint(self):
        table = generate_table(TableConfig(10.0, 5, 15), rng=RNG(5))
        first = table.rows[0]
        self.assertEqual(first.peak_column, 10)
        self.assertEqual(first.values[10], max(first.values.values()))

    def test_same_seed_same_table(self):
        config = TableConfig(7.5, 3, 14, max_diff=2.0)
        a = generate_table(config, rng=RNG(11))
        b = generate_table(config, rng=11)
        self.assertEqual(a, b)

    def test_different_seeds_differ(self):
        config = TableConfig(7.5, 3, 14, max_diff=2.0)
        a = generate_table(config, rng=RNG(11))
        b = generate_table(config, rng=RNG(12))
        self.assertNotEqual(a.targets(), b.targets())

    def test_fixed_strategy_uses_one_sigma(self):
        shape = ShapeConfig(strategy="fixed", sigma=1.8)
        table = generate_table(TableConfig(8.0, 5, 15), rng=RNG(7), shape=shape)
        for row in table.rows:
            self.assertEqual(row.sigma_left, 1.8)
            self.assertEqual(row.sigma_right, 1.8)

    def test_parallel_rows_match_sequential(self):
        config = TableConfig(8.0, 5, 15)
        sequential = generate_table(config, rng=RNG(8), row_workers=1)
        parallel = generate_table(config, rng=RNG(8), row_workers=2)
        self.assertEqual(sequential, parallel)

    def test_parallel_failure_falls_back_to_sequential(self):
        logger = _Logger()
        config = TableConfig(8.0, 5, 15)
        with patch(
            "bellgen.engine.generation.ProcessPoolExecutor",
            side_effect=RuntimeError("no processes"),
        ):
            table = generate_table(config, rng=RNG(8), row_workers=4, logger=logger)

        self.assertEqual(table, generate_table(config, rng=RNG(8)))
        self.assertTrue(
            any("falling back to sequential" in m for m in logger.warning_messages)
        )

    def test_logger_receives_row_progress(self):
        logger = _Logger()
        generate_table(TableConfig(8.0, 5, 15), rng=RNG(9), logger=logger)
        self.assertTrue(any("[EXPECTATIONS]" in m for m in logger.info_messages))
        self.assertEqual(
            sum(1 for m in logger.info_messages if m.startswith("[ROW ")),
            defaults.ROW_COUNT,
        )

    def test_exhausted_sum_budget_logs_row_warning(self):
        logger = _Logger()
        table = generate_table(
            TableConfig(8.0, 5, 15), rng=RNG(1), sum_budget=1, logger=logger
        )
        short_rows = [row for row in table.rows if row.sum != defaults.TOTAL]
        self.assertTrue(short_rows)
        for row in short_rows:
            self.assertIn(
                f"[ROW {row.row_index}/{defaults.ROW_COUNT}] sum={row.sum} "
                f"budget exhausted before reaching {defaults.TOTAL}",
                logger.warning_messages,
            )
        self.assertEqual(len(logger.warning_messages), len(short_rows))

    def test_quiet_logger_gets_no_info(self):
        logger = _Logger()
        generate_table(
            TableConfig(8.0, 5, 15), rng=RNG(9), logger=logger, log_level="quiet"
        )
        self.assertEqual(logger.info_messages, [])


class SynthesizeRowTests(unittest.TestCase):
    labels = list(range(5, 16))

    def test_best_candidate_has_lowest_score(self):
        rng = RNG(21)
        best = synthesize_row(self.labels, 8.37, rng, attempts=5)
        self.assertTrue(0 <= best.attempt < 5)
        for attempt in range(5):
            single = synthesize_row(
                self.labels, 8.37, RNG(21), attempts=attempt + 1
            )
            self.assertLessEqual(best.score, single.score + 1e-12)

    def test_fixed_strategy_runs_single_attempt(self):
        shape = ShapeConfig(strategy="fixed")
        best = synthesize_row(self.labels, 8.0, RNG(1), shape=shape, attempts=5)
        self.assertEqual(best.attempt, 0)


if __name__ == "__main__":
    unittest.main()
