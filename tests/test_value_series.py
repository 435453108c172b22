"""Unit tests for asset value history helpers."""

from __future__ import annotations

from datetime import date

import pytest

from analysis.dto import Sample, ValuePoint
from analysis.value_series import (
    compute_line_points,
    sort_value_series,
    summarize_value_series,
    value_series_samples,
)

pytestmark = pytest.mark.unit


def test_sort_value_series_orders_by_day() -> None:
    """Points are sorted oldest first regardless of API order."""

    points = [
        ValuePoint(date(2025, 1, 1), 3.0),
        ValuePoint(date(2024, 1, 1), 5.0),
        ValuePoint(date(2024, 6, 1), 4.0),
    ]
    assert [point.day.year for point in sort_value_series(points)] == [2024, 2024, 2025]


def test_value_series_samples_use_iso_labels(sample_value_series) -> None:
    """Samples are labelled with ISO dates."""

    samples = value_series_samples(sample_value_series)
    assert samples[0] == Sample("2024-01-01", 4_000_000.0)


def test_summary_reports_change(sample_value_series) -> None:
    """The summary captures first, latest and percentage change."""

    summary = summarize_value_series(sample_value_series)
    assert summary.count == 3
    assert summary.first == 4_000_000.0
    assert summary.latest == 3_200_000.0
    assert summary.minimum == 3_200_000.0
    assert summary.maximum == 4_000_000.0
    assert summary.change == -800_000.0
    assert summary.change_percent == pytest.approx(-20.0)


def test_summary_of_empty_series() -> None:
    """An empty series has a zero count and no values."""

    summary = summarize_value_series(())
    assert summary.count == 0
    assert summary.latest is None
    assert summary.change_percent is None


def test_summary_skips_percent_when_first_is_zero() -> None:
    """A zero starting value has no meaningful percentage change."""

    summary = summarize_value_series([ValuePoint(date(2024, 1, 1), 0.0), ValuePoint(date(2024, 2, 1), 10.0)])
    assert summary.change == 10.0
    assert summary.change_percent is None


def test_line_points_span_the_padded_canvas() -> None:
    """First and last points touch the padded edges; the maximum touches the top."""

    samples = [Sample("a", 0), Sample("b", 50), Sample("c", 100)]
    points = compute_line_points(samples, width=220, height=120, padding=10)
    assert [point.x for point in points] == [10, 110, 210]
    assert points[0].y == pytest.approx(110)
    assert points[1].y == pytest.approx(60)
    assert points[2].y == pytest.approx(10)


def test_single_point_is_centered() -> None:
    """A lone sample sits in the horizontal middle of the canvas."""

    (point,) = compute_line_points([Sample("a", 1)], width=100, height=50)
    assert point.x == 50


def test_line_points_reject_oversized_padding() -> None:
    """Padding that leaves no drawable area is rejected."""

    with pytest.raises(ValueError):
        compute_line_points([Sample("a", 1)], width=20, height=20, padding=10)


def test_negative_amounts_stay_on_the_canvas() -> None:
    """Negative values are drawn on the bottom edge of the padded area."""

    samples = [Sample("a", -50), Sample("b", 100)]
    points = compute_line_points(samples, width=120, height=120, padding=10)
    assert points[0].y == pytest.approx(110)
    assert all(10 <= point.y <= 110 for point in points)
