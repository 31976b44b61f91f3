import unittest

from bellgen.api.models import RowData, TableResult
from bellgen.scoring.metrics import (
    band_violation,
    build_quality_report,
    candidate_score,
    expectation_spread,
    is_unimodal,
    mean_error,
    weighted_mean,
)


def _row(index, target, counts, labels):
    actual = weighted_mean(counts, labels)
    return RowData(
        row_index=index,
        target_expectation=target,
        actual_expectation=actual,
        values=dict(zip(labels, counts)),
        sum=sum(counts),
        peak_column=labels[counts.index(max(counts))],
    )


class MetricHelperTests(unittest.TestCase):
    def test_weighted_mean_divides_by_total(self):
        self.assertAlmostEqual(weighted_mean([50, 50], [5, 6]), 5.5)
        self.assertAlmostEqual(weighted_mean([1, 1], [5, 6], total=2), 5.5)

    def test_mean_error_is_absolute(self):
        self.assertAlmostEqual(mean_error([50, 50], [5, 6], 5.7), 0.2)
        self.assertAlmostEqual(mean_error([50, 50], [5, 6], 5.3), 0.2)

    def test_band_violation_distance(self):
        self.assertEqual(band_violation(30, None), 0.0)
        self.assertEqual(band_violation(30, (25, 50)), 0.0)
        self.assertEqual(band_violation(20, (25, 50)), 5.0)
        self.assertEqual(band_violation(60, (25, 50)), 10.0)

    def test_candidate_score_adds_weighted_band_penalty(self):
        counts = [20, 60, 20]
        labels = [1, 2, 3]
        self.assertAlmostEqual(candidate_score(counts, labels, 2.0), 0.0)
        self.assertAlmostEqual(
            candidate_score(counts, labels, 2.0, peak_band=(25, 50), band_weight=0.01),
            0.1,
        )

    def test_is_unimodal(self):
        self.assertTrue(is_unimodal([1, 3, 3, 5, 4, 4, 0]))
        self.assertTrue(is_unimodal([5, 5, 5]))
        self.assertTrue(is_unimodal([0, 100]))
        self.assertTrue(is_unimodal([]))
        self.assertFalse(is_unimodal([3, 1, 1, 2]))
        self.assertFalse(is_unimodal([1, 2, 1, 2]))
        self.assertFalse(is_unimodal([1, -1, 0]))

    def test_expectation_spread(self):
        self.assertEqual(expectation_spread([]), 0.0)
        self.assertAlmostEqual(expectation_spread([8.0, 8.8, 6.3]), 2.5)


class QualityReportTests(unittest.TestCase):
    labels = [1, 2, 3]

    def _table(self):
        rows = [
            _row(1, 2.0, [25, 50, 25], self.labels),
            _row(2, 2.2, [20, 50, 30], self.labels),
            _row(3, 1.5, [30, 40, 29], self.labels),
        ]
        return TableResult(columns=list(self.labels), rows=rows)

    def test_report_flags_sum_and_tracks_errors(self):
        report = build_quality_report(self._table(), max_diff=1.0, top_n=2)

        self.assertFalse(report["sums_ok"])
        self.assertTrue(report["unimodal_ok"])
        self.assertTrue(report["spread_ok"])
        self.assertAlmostEqual(report["expectation_spread"], 0.7)
        self.assertAlmostEqual(report["max_mean_error"], 0.47)
        self.assertFalse(report["within_tolerance"])
        self.assertEqual(len(report["worst_rows"]), 2)
        self.assertEqual(report["worst_rows"][0]["row_index"], 3)
        self.assertEqual(report["rows"][2]["sum"], 99)

    def test_report_spread_check_uses_max_diff(self):
        report = build_quality_report(self._table(), max_diff=0.5)
        self.assertFalse(report["spread_ok"])
        report = build_quality_report(self._table())
        self.assertTrue(report["spread_ok"])
        self.assertIsNone(report["max_diff"])


if __name__ == "__main__":
    unittest.main()
