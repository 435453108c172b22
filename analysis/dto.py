"""DTO types returned by the analysis layer.

DTOs are plain data containers used to transport geometry and layout results
to the UI. They intentionally avoid any Django/ORM dependencies.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime

from .categories import ActivityCategory, classify_activity


@dataclass(frozen=True, slots=True)
class Sample:
    """A single labelled value for bar and line charts.

    Attributes:
        label: Axis label (weekday, ISO date, ...).
        value: Numeric value plotted for the label.
    """

    label: str
    value: float


@dataclass(frozen=True, slots=True)
class Segment:
    """A weighted donut chart segment.

    Attributes:
        label: Legend label.
        value: Non-negative weight of the segment.
        color: Stroke color for the segment.
    """

    label: str
    value: float
    color: str


@dataclass(frozen=True, slots=True)
class BarProportion:
    """Bar height expressed as a fraction of the series maximum.

    Attributes:
        label: Optional axis label aligned with the input value.
        value: The original input value.
        height_fraction: `value / max(1, max(values))`, in the range [0, 1].
    """

    label: str | None
    value: float
    height_fraction: float

    @property
    def height_percent(self) -> float:
        """Return the bar height as a CSS-friendly percentage."""

        return self.height_fraction * 100.0


@dataclass(frozen=True, slots=True)
class DonutSlice:
    """A donut segment resolved into angles and a stroke-dash arc length.

    Attributes:
        label: Legend label from the input segment.
        color: Stroke color from the input segment.
        value: Original segment weight.
        start_angle: Start angle in radians, measured from 0.
        end_angle: End angle in radians.
        arc_length: `(end_angle - start_angle) * radius`.
    """

    label: str
    color: str
    value: float
    start_angle: float
    end_angle: float
    arc_length: float

    @property
    def sweep(self) -> float:
        """Return the angular size of the slice in radians."""

        return self.end_angle - self.start_angle

    @property
    def start_degrees(self) -> float:
        """Return the start angle in degrees (SVG `rotate()` units)."""

        return math.degrees(self.start_angle)

    def dash_array(self, radius: float) -> str:
        """Return an SVG `stroke-dasharray` drawing only this slice's arc."""

        circumference = 2 * math.pi * radius
        return f"{self.arc_length:.4f} {circumference - self.arc_length:.4f}"


@dataclass(frozen=True, slots=True)
class ActivityEvent:
    """A single entry of an asset's activity log.

    Attributes:
        timestamp: When the activity happened (as provided by the API).
        actor: User identifier that performed the activity.
        description: Free-text subject of the activity.
        actor_full_name: Optional display name of the actor.
    """

    timestamp: datetime | str
    actor: str
    description: str
    actor_full_name: str | None = None

    @property
    def category(self) -> ActivityCategory:
        """Return the category derived from the description keywords."""

        return classify_activity(self.description)

    @property
    def display_actor(self) -> str:
        """Return the full name when known, falling back to the user id."""

        return self.actor_full_name or self.actor


@dataclass(frozen=True, slots=True)
class Point:
    """A 2D point in canvas coordinates."""

    x: float
    y: float


@dataclass(frozen=True, slots=True)
class NodePosition:
    """Canvas position for one timeline node.

    Attributes:
        index: Index of the event in the (newest-first) input sequence.
        x: Horizontal canvas coordinate.
        y: Vertical canvas coordinate.
    """

    index: int
    x: float
    y: float

    @property
    def is_latest(self) -> bool:
        """Return True for the node representing the most recent event."""

        return self.index == 0


@dataclass(frozen=True, slots=True)
class ConnectorCurve:
    """A quadratic Bézier connector between two consecutive timeline nodes.

    Attributes:
        from_index: Index of the starting node.
        to_index: Index of the ending node.
        start: Start point (the `from_index` node).
        control_point: Quadratic Bézier control point.
        end: End point (the `to_index` node).
    """

    from_index: int
    to_index: int
    start: Point
    control_point: Point
    end: Point

    def svg_path(self) -> str:
        """Return the SVG path descriptor `M x0 y0 Q cx cy x1 y1`."""

        return (
            f"M {_fmt(self.start.x)} {_fmt(self.start.y)} "
            f"Q {_fmt(self.control_point.x)} {_fmt(self.control_point.y)} "
            f"{_fmt(self.end.x)} {_fmt(self.end.y)}"
        )


@dataclass(frozen=True, slots=True)
class TimelineLayout:
    """Fully computed timeline layout.

    Attributes:
        positions: One NodePosition per event, in input order.
        total_width: Canvas width needed to fit every node.
        height: Canvas height used for vertical centering.
    """

    positions: tuple[NodePosition, ...]
    total_width: float
    height: float


@dataclass(frozen=True, slots=True)
class ValuePoint:
    """A single asset valuation on a given day.

    Attributes:
        day: Valuation date.
        amount: Asset value on that date.
    """

    day: date
    amount: float


@dataclass(frozen=True, slots=True)
class ValueSeriesSummary:
    """Headline numbers for an asset value history.

    Attributes:
        count: Number of valuation points.
        first: Earliest amount, or None when the series is empty.
        latest: Most recent amount, or None when the series is empty.
        minimum: Lowest amount, or None when the series is empty.
        maximum: Highest amount, or None when the series is empty.
        change: `latest - first`, or None when the series is empty.
        change_percent: Percent change relative to `first`, or None when it
            cannot be computed.
    """

    count: int
    first: float | None
    latest: float | None
    minimum: float | None
    maximum: float | None
    change: float | None
    change_percent: float | None


def _fmt(value: float) -> str:
    """Format a coordinate compactly for SVG path strings."""

    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text in {"", "-0"} else text
