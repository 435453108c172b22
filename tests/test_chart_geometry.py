"""Unit tests for bar and donut chart geometry."""

from __future__ import annotations

import math

import pytest

from analysis.chart_geometry import (
    EmptyDatasetError,
    bar_proportions_from_samples,
    compute_bar_proportions,
    compute_donut_angles,
)
from analysis.dto import Sample, Segment

pytestmark = pytest.mark.unit

WEEKLY_TRIPS = [32, 44, 40, 48, 62, 55, 70]
OCCUPANCY = [
    Segment("Full", 62, "#2E7D32"),
    Segment("Partial", 28, "#81C784"),
    Segment("Empty", 10, "#C8E6C9"),
]


def test_bar_proportions_scale_against_series_maximum() -> None:
    """Each bar is its value divided by the series maximum."""

    bars = compute_bar_proportions(WEEKLY_TRIPS)
    assert len(bars) == len(WEEKLY_TRIPS)
    assert bars[0].height_fraction == pytest.approx(0.457, abs=1e-3)
    assert bars[-1].height_fraction == pytest.approx(1.0)
    assert bars[-1].height_percent == pytest.approx(100.0)


def test_bar_proportions_preserve_input_order() -> None:
    """Bars are returned in input order without sorting."""

    bars = compute_bar_proportions([5, 1, 3])
    assert [bar.value for bar in bars] == [5.0, 1.0, 3.0]


def test_bar_proportions_floor_maximum_at_one() -> None:
    """Sub-unit or all-zero series divide by 1 instead of their own maximum."""

    assert [bar.height_fraction for bar in compute_bar_proportions([0, 0, 0])] == [0.0, 0.0, 0.0]
    assert compute_bar_proportions([0.5])[0].height_fraction == pytest.approx(0.5)


def test_bar_proportions_handle_empty_input() -> None:
    """An empty series produces no bars."""

    assert compute_bar_proportions([]) == ()


def test_bar_proportions_reject_misaligned_labels() -> None:
    """Labels must align one-to-one with values."""

    with pytest.raises(ValueError):
        compute_bar_proportions([1, 2], ["Mon"])


def test_bar_proportions_from_samples_carry_labels() -> None:
    """Sample labels are attached to the matching bars."""

    bars = bar_proportions_from_samples([Sample("Mon", 10), Sample("Tue", 20)])
    assert [bar.label for bar in bars] == ["Mon", "Tue"]
    assert bars[0].height_fraction == pytest.approx(0.5)


def test_donut_angles_follow_segment_fractions() -> None:
    """Slice boundaries land at the cumulative value fractions of a full turn."""

    slices = compute_donut_angles(OCCUPANCY)
    assert len(slices) == 3
    assert slices[0].start_angle == 0.0
    assert slices[0].end_angle == pytest.approx(0.62 * 2 * math.pi)
    assert slices[1].end_angle == pytest.approx(0.90 * 2 * math.pi)
    assert slices[2].end_angle == pytest.approx(2 * math.pi)


def test_donut_slices_are_contiguous() -> None:
    """Every slice starts exactly where the previous one ended."""

    slices = compute_donut_angles(OCCUPANCY)
    for previous, current in zip(slices, slices[1:]):
        assert current.start_angle == previous.end_angle


def test_donut_arc_length_matches_radius() -> None:
    """Arc length is sweep times radius and feeds the stroke dash array."""

    slices = compute_donut_angles(OCCUPANCY, radius=60)
    assert slices[0].arc_length == pytest.approx(slices[0].sweep * 60)
    visible, gap = (float(part) for part in slices[0].dash_array(60).split())
    assert visible + gap == pytest.approx(2 * math.pi * 60, abs=1e-3)


def test_donut_keeps_zero_value_segments() -> None:
    """Zero-valued segments produce zero-sweep slices instead of disappearing."""

    slices = compute_donut_angles([Segment("A", 0, "#000"), Segment("B", 5, "#111")])
    assert slices[0].sweep == 0.0
    assert slices[1].end_angle == pytest.approx(2 * math.pi)


@pytest.mark.parametrize("segments", [[], [Segment("A", 0, "#000"), Segment("B", 0, "#111")]])
def test_donut_zero_total_raises_empty_dataset(segments) -> None:
    """A zero total is reported as EmptyDatasetError rather than a division error."""

    with pytest.raises(EmptyDatasetError) as excinfo:
        compute_donut_angles(segments)
    assert excinfo.value.segment_count == len(segments)
    assert excinfo.value.total == 0.0


def test_donut_rejects_negative_values() -> None:
    """Negative weights are invalid input."""

    with pytest.raises(ValueError):
        compute_donut_angles([Segment("A", -1, "#000"), Segment("B", 5, "#111")])
