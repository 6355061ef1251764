from __future__ import annotations

import datetime as dt
import unittest

import numpy as np

from ohlcview_plot.errors import MalformedSeriesError
from ohlcview_plot.records import PriceRecord
from ohlcview_plot.scales import (
    EMPTY_DOMAIN_DAY,
    LinearScale,
    Margin,
    build_scales,
    format_ticks_for_axis,
    generate_nice_ticks,
)


def _record(day: dt.date, low: float, high: float) -> PriceRecord:
    mid = (low + high) / 2.0
    return PriceRecord(date=day, open=mid, high=high, low=low, close=mid)


def _daily(start: dt.date, count: int) -> list[PriceRecord]:
    return [_record(start + dt.timedelta(days=i), 10.0 + i, 12.0 + i) for i in range(count)]


class ScaleBuilderTests(unittest.TestCase):
    def test_domains_span_dates_and_low_high(self) -> None:
        series = [
            PriceRecord(dt.date(2024, 1, 1), 10.0, 12.0, 9.0, 11.0),
            PriceRecord(dt.date(2024, 1, 2), 11.0, 13.0, 10.0, 12.5),
        ]
        scales = build_scales(series, 1000, 600, 60)
        self.assertEqual(scales.x.date_domain, (dt.date(2024, 1, 1), dt.date(2024, 1, 2)))
        self.assertEqual(scales.y.domain, (9.0, 13.0))
        self.assertEqual(scales.x.range, (60.0, 940.0))
        self.assertEqual(scales.y.range, (540.0, 60.0))
        self.assertAlmostEqual(scales.x(dt.date(2024, 1, 1)), 60.0)
        self.assertAlmostEqual(scales.x(dt.date(2024, 1, 2)), 940.0)
        self.assertAlmostEqual(scales.y(9.0), 540.0)
        self.assertAlmostEqual(scales.y(13.0), 60.0)
        self.assertAlmostEqual(scales.y(11.0), 300.0)

    def test_x_is_non_decreasing_and_y_is_non_increasing(self) -> None:
        series = _daily(dt.date(2024, 3, 1), 30)
        scales = build_scales(series, 800, 500, 60)
        xs = scales.x.map([r.date for r in series])
        self.assertTrue(np.all(np.diff(xs) >= 0))
        prices = np.linspace(scales.y.domain[0], scales.y.domain[1], 50)
        ys = scales.y.map(prices)
        self.assertTrue(np.all(np.diff(ys) <= 0))

    def test_per_side_margins(self) -> None:
        scales = build_scales(_daily(dt.date(2024, 1, 1), 3), 400, 300, Margin(top=10, right=20, bottom=30, left=40))
        self.assertEqual(scales.x.range, (40.0, 380.0))
        self.assertEqual(scales.y.range, (270.0, 10.0))

    def test_single_record_widens_degenerate_domains(self) -> None:
        day = dt.date(2024, 6, 3)
        scales = build_scales([PriceRecord(day, 100.0, 100.0, 100.0, 100.0)], 1000, 600, 60)
        self.assertEqual(scales.y.domain, (95.0, 105.0))
        self.assertAlmostEqual(scales.x(day), 500.0)
        self.assertAlmostEqual(scales.y(100.0), 300.0)

    def test_flat_small_prices_widen_by_at_least_one(self) -> None:
        day = dt.date(2024, 6, 3)
        scales = build_scales([PriceRecord(day, 2.0, 2.0, 2.0, 2.0)], 1000, 600, 60)
        self.assertEqual(scales.y.domain, (1.0, 3.0))

    def test_empty_series_uses_placeholder_domains(self) -> None:
        scales = build_scales([], 1000, 600, 60)
        lo, hi = scales.x.domain
        self.assertAlmostEqual((lo + hi) / 2.0, float(EMPTY_DOMAIN_DAY.toordinal()))
        self.assertEqual(scales.y.domain, (0.0, 1.0))

    def test_rejects_bad_dimensions(self) -> None:
        with self.assertRaisesRegex(ValueError, "width/height"):
            build_scales([], 0, 600, 60)
        with self.assertRaisesRegex(ValueError, "drawable"):
            build_scales([], 100, 600, 60)
        with self.assertRaisesRegex(ValueError, ">= 0"):
            build_scales([], 1000, 600, -1)

    def test_invalid_records_are_rejected_before_scaling(self) -> None:
        series = [PriceRecord(dt.date(2024, 1, 1), 1.0, 2.0, 0.5, 1.5), PriceRecord(dt.date(2024, 1, 2), 1.0, float("nan"), 0.5, 1.5)]
        with self.assertRaisesRegex(MalformedSeriesError, "`high` must be finite"):
            build_scales(series, 1000, 600, 60)

    def test_linear_scale_rejects_zero_span_and_inverts(self) -> None:
        with self.assertRaises(ValueError):
            LinearScale(domain=(1.0, 1.0), range=(0.0, 10.0))
        scale = LinearScale(domain=(0.0, 10.0), range=(100.0, 0.0))
        self.assertAlmostEqual(scale.invert(scale(7.5)), 7.5)


class TickTests(unittest.TestCase):
    def test_price_ticks_are_nice_and_inside_the_domain(self) -> None:
        scale = LinearScale(domain=(9.0, 13.0), range=(540.0, 60.0))
        ticks = scale.ticks(10)
        self.assertEqual(ticks.tolist(), [9.0, 9.5, 10.0, 10.5, 11.0, 11.5, 12.0, 12.5, 13.0])
        self.assertEqual(scale.tick_labels(ticks)[:3], ["9", "9.5", "10"])

    def test_week_ticks_fall_on_sundays(self) -> None:
        scales = build_scales(_daily(dt.date(2024, 1, 1), 31), 1000, 600, 60)
        ticks = scales.x.ticks(6)
        self.assertEqual(ticks, [dt.date(2024, 1, 7), dt.date(2024, 1, 14), dt.date(2024, 1, 21), dt.date(2024, 1, 28)])
        self.assertEqual(scales.x.tick_labels(ticks, 6)[0], "Jan 07")

    def test_year_long_series_ticks_by_quarter(self) -> None:
        series = [_record(dt.date(2024, 1, 1), 1.0, 2.0), _record(dt.date(2024, 12, 31), 1.0, 2.0)]
        scales = build_scales(series, 1000, 600, 60)
        ticks = scales.x.ticks(6)
        self.assertEqual(ticks, [dt.date(2024, 1, 1), dt.date(2024, 4, 1), dt.date(2024, 7, 1), dt.date(2024, 10, 1)])
        self.assertEqual(scales.x.tick_labels(ticks, 6)[0], "Jan 2024")

    def test_labels_follow_the_interval_of_the_requested_count(self) -> None:
        series = [_record(dt.date(2023, 1, 1), 1.0, 2.0), _record(dt.date(2024, 12, 31), 1.0, 2.0)]
        scales = build_scales(series, 1000, 600, 60)
        self.assertEqual(scales.x.tick_interval(6), ("month", 3))
        ticks = scales.x.ticks(6)
        self.assertEqual(ticks[0], dt.date(2023, 1, 1))
        # A single visible tick keeps the quarterly format, not a yearly one.
        self.assertEqual(scales.x.tick_labels(ticks[:1], 6), ["Jan 2023"])
        with self.assertRaises(ValueError):
            scales.x.tick_labels(ticks, 0)

    def test_ticks_stay_within_the_time_domain(self) -> None:
        series = _daily(dt.date(2023, 11, 20), 30)
        scales = build_scales(series, 1000, 600, 60)
        for day in scales.x.ticks(6):
            self.assertGreaterEqual(day, series[0].date)
            self.assertLessEqual(day, series[-1].date)

    def test_nice_ticks_snap_near_zero(self) -> None:
        ticks = generate_nice_ticks(-1.0, 1.0, 5)
        self.assertIn(0.0, ticks.tolist())
        self.assertEqual(format_ticks_for_axis(np.asarray([20.0, 30.0, 40.0])), ["20", "30", "40"])


if __name__ == "__main__":
    unittest.main()
