"""Chart geometry for the dashboard bar and donut charts.

Both charts are drawn directly as SVG/CSS by the templates, so this module
turns ordered numeric inputs into proportions and angles without any knowledge
of the rendering layer. All functions are pure: identical inputs always yield
identical outputs, and nothing is re-sorted.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Final

from .dto import BarProportion, DonutSlice, Sample, Segment

DONUT_RADIUS: Final[float] = 60.0
DONUT_CIRCUMFERENCE: Final[float] = 2 * math.pi * DONUT_RADIUS
FULL_TURN: Final[float] = 2 * math.pi


class EmptyDatasetError(ValueError):
    """Raised when a donut chart has no positive total to divide by."""

    def __init__(self, *, segment_count: int, total: float) -> None:
        """Initialize the error.

        Args:
            segment_count: Number of segments supplied by the caller.
            total: Sum of the supplied segment values.
        """

        super().__init__(
            f"Cannot compute donut angles for {segment_count} segment(s) with total {total!r}; "
            "at least one segment must have a positive value."
        )
        self.segment_count = segment_count
        self.total = total


def compute_bar_proportions(
    values: Sequence[float],
    labels: Sequence[str] | None = None,
) -> tuple[BarProportion, ...]:
    """Scale bar values against the series maximum.

    The maximum is floored at 1 so an all-zero series renders flat bars
    instead of dividing by zero.

    Args:
        values: Ordered bar values.
        labels: Optional labels aligned with `values`.

    Returns:
        One BarProportion per value, in input order. Empty input yields an
        empty tuple.

    Raises:
        ValueError: When `labels` is given with a different length.
    """

    if labels is not None and len(labels) != len(values):
        raise ValueError(f"labels has {len(labels)} entries but values has {len(values)}")
    if not values:
        return ()

    maximum = max(1.0, max(float(v) for v in values))
    return tuple(
        BarProportion(
            label=labels[idx] if labels is not None else None,
            value=float(value),
            height_fraction=float(value) / maximum,
        )
        for idx, value in enumerate(values)
    )


def bar_proportions_from_samples(samples: Sequence[Sample]) -> tuple[BarProportion, ...]:
    """Compute bar proportions for labelled samples."""

    return compute_bar_proportions(
        [sample.value for sample in samples],
        [sample.label for sample in samples],
    )


def compute_donut_angles(
    segments: Sequence[Segment],
    *,
    radius: float = DONUT_RADIUS,
) -> tuple[DonutSlice, ...]:
    """Resolve weighted segments into consecutive donut slices.

    Slices start at angle 0 and advance clockwise in input order; each slice
    starts exactly where the previous one ended, and the final slice ends at
    a full turn.

    Args:
        segments: Weighted segments in legend order.
        radius: Circle radius used to derive stroke-dash arc lengths.

    Returns:
        One DonutSlice per segment, in input order.

    Raises:
        EmptyDatasetError: When the segment values sum to zero (including an
            empty segment list).
        ValueError: When a segment value is negative or not finite.
    """

    for segment in segments:
        if not math.isfinite(segment.value) or segment.value < 0:
            raise ValueError(f"Segment {segment.label!r} has invalid value {segment.value!r}")

    total = float(sum(segment.value for segment in segments))
    if total <= 0:
        raise EmptyDatasetError(segment_count=len(segments), total=total)

    slices: list[DonutSlice] = []
    start = 0.0
    for segment in segments:
        end = start + (segment.value / total) * FULL_TURN
        slices.append(
            DonutSlice(
                label=segment.label,
                color=segment.color,
                value=float(segment.value),
                start_angle=start,
                end_angle=end,
                arc_length=(end - start) * radius,
            )
        )
        start = end
    return tuple(slices)
