from __future__ import annotations

import unittest

import numpy as np

from statetrack.scales import format_tick, format_ticks_for_axis, generate_nice_ticks, padded_range


class ScalesTests(unittest.TestCase):
    def test_nice_ticks_cover_unit_range(self) -> None:
        ticks = generate_nice_ticks(0.0, 10.0, 5)
        self.assertEqual(ticks.tolist(), [0.0, 2.0, 4.0, 6.0, 8.0, 10.0])

    def test_nice_ticks_stay_inside_range(self) -> None:
        ticks = generate_nice_ticks(0.3, 9.7, 5)
        self.assertGreaterEqual(float(ticks.min()), 0.3)
        self.assertLessEqual(float(ticks.max()), 9.7)

    def test_degenerate_range_yields_single_tick(self) -> None:
        self.assertEqual(generate_nice_ticks(3.0, 3.0, 5).tolist(), [3.0])

    def test_rejects_non_positive_target(self) -> None:
        with self.assertRaises(ValueError):
            generate_nice_ticks(0.0, 1.0, 0)

    def test_padded_range_widens_single_value(self) -> None:
        rng = padded_range(np.asarray([3.0]))
        self.assertEqual((rng.vmin, rng.vmax), (2.0, 4.0))
        self.assertEqual(rng.span, 2.0)

    def test_padded_range_ignores_non_finite(self) -> None:
        rng = padded_range(np.asarray([np.nan, 1.0, 5.0, np.inf]), buffer_ratio=0.25)
        self.assertEqual((rng.vmin, rng.vmax), (0.0, 6.0))

    def test_padded_range_requires_finite_values(self) -> None:
        with self.assertRaises(ValueError):
            padded_range(np.asarray([np.nan]))

    def test_tick_labels_follow_step_precision(self) -> None:
        self.assertEqual(format_ticks_for_axis(np.asarray([0.0, 0.5, 1.0])), ["0", "0.5", "1"])
        self.assertEqual(format_tick(-0.0), "0")
        self.assertEqual(format_tick(2_500_000.0), "2.5000e+06")


if __name__ == "__main__":
    unittest.main()
