"""Asset value history helpers.

The value chart on the bus detail screen plots an asset's valuation over
time. The API returns points in no guaranteed order, so they are sorted
chronologically here before any layout runs.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .dto import Point, Sample, ValuePoint, ValueSeriesSummary


def sort_value_series(points: Iterable[ValuePoint]) -> tuple[ValuePoint, ...]:
    """Return value points sorted by day (stable for equal days)."""

    return tuple(sorted(points, key=lambda point: point.day))


def value_series_samples(points: Sequence[ValuePoint]) -> tuple[Sample, ...]:
    """Convert value points into ISO-date labelled chart samples."""

    return tuple(Sample(label=point.day.isoformat(), value=point.amount) for point in points)


def summarize_value_series(points: Sequence[ValuePoint]) -> ValueSeriesSummary:
    """Summarize a chronologically ordered value series.

    Args:
        points: Value points, oldest first.

    Returns:
        ValueSeriesSummary; every field except `count` is None for an empty
        series, and `change_percent` is None when the first amount is zero.
    """

    if not points:
        return ValueSeriesSummary(
            count=0,
            first=None,
            latest=None,
            minimum=None,
            maximum=None,
            change=None,
            change_percent=None,
        )

    amounts = [point.amount for point in points]
    first = amounts[0]
    latest = amounts[-1]
    change = latest - first
    change_percent = (change / first) * 100.0 if first != 0 else None
    return ValueSeriesSummary(
        count=len(amounts),
        first=first,
        latest=latest,
        minimum=min(amounts),
        maximum=max(amounts),
        change=change,
        change_percent=change_percent,
    )


def compute_line_points(
    samples: Sequence[Sample],
    *,
    width: float,
    height: float,
    padding: float = 0.0,
) -> tuple[Point, ...]:
    """Project ordered samples onto an SVG canvas for a polyline.

    X positions are spread evenly across the padded width (a single sample is
    centered). Y positions use the same `max(1, max(values))` floor as the bar
    chart, with 0 at the bottom edge. Negative amounts are clamped to the
    bottom edge so every point stays inside the padded area.

    Args:
        samples: Ordered samples (already sorted by the caller).
        width: Canvas width.
        height: Canvas height.
        padding: Inset applied on every side.

    Returns:
        One Point per sample, in input order.

    Raises:
        ValueError: When the padded drawing area is not positive.
    """

    inner_width = width - 2 * padding
    inner_height = height - 2 * padding
    if inner_width <= 0 or inner_height <= 0:
        raise ValueError("padding leaves no drawable area")
    if not samples:
        return ()

    maximum = max(1.0, max(sample.value for sample in samples))
    step = inner_width / (len(samples) - 1) if len(samples) > 1 else 0.0
    points: list[Point] = []
    for idx, sample in enumerate(samples):
        x = padding + (idx * step if len(samples) > 1 else inner_width / 2)
        ratio = max(0.0, sample.value / maximum)
        y = padding + inner_height * (1 - ratio)
        points.append(Point(x, y))
    return tuple(points)
