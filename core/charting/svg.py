"""Template-ready chart view models.

Charts are drawn as inline SVG (donut, timeline, value line) or CSS bars by
the templates. The builders here call the pure `analysis` geometry and package
the results with the labels, colors and empty-state messages each template
needs, so templates only iterate and print.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from analysis.categories import ActivityCategory
from analysis.chart_geometry import (
    DONUT_CIRCUMFERENCE,
    DONUT_RADIUS,
    EmptyDatasetError,
    bar_proportions_from_samples,
    compute_donut_angles,
)
from analysis.dto import (
    ActivityEvent,
    BarProportion,
    ConnectorCurve,
    DonutSlice,
    NodePosition,
    Sample,
    Segment,
    ValuePoint,
    ValueSeriesSummary,
)
from analysis.timeline import (
    DEFAULT_TIMELINE,
    TimelineConstants,
    category_counts,
    compute_connector_curves,
    compute_timeline_layout,
    order_events,
)
from analysis.value_series import compute_line_points, summarize_value_series, value_series_samples

logger = logging.getLogger(__name__)

DONUT_EMPTY_MESSAGE = "No occupancy data yet."
VALUE_CHART_EMPTY_MESSAGE = "No value history recorded for this asset."


@dataclass(frozen=True, slots=True)
class BarChartView:
    """A CSS bar chart."""

    title: str
    color: str
    bars: tuple[BarProportion, ...]


@dataclass(frozen=True, slots=True)
class DonutChartView:
    """A stroke-dash donut chart, or an empty-state placeholder."""

    title: str
    radius: float
    circumference: float
    slices: tuple[DonutSlice, ...]
    legend: tuple[Segment, ...]
    empty_message: str | None = None

    @property
    def is_empty(self) -> bool:
        """Return True when the chart should render its placeholder."""

        return not self.slices

    @property
    def inner_radius(self) -> float:
        """Return the radius of the hole drawn over the ring."""

        return self.radius - 18

    @property
    def arcs(self) -> tuple[tuple[DonutSlice, str], ...]:
        """Return each slice paired with its `stroke-dasharray` value."""

        return tuple((item, item.dash_array(self.radius)) for item in self.slices)


@dataclass(frozen=True, slots=True)
class TimelineNodeView:
    """One activity node with its resolved position and category styling."""

    event: ActivityEvent
    position: NodePosition
    category: ActivityCategory

    @property
    def is_latest(self) -> bool:
        return self.position.is_latest


@dataclass(frozen=True, slots=True)
class TimelineConnectorView:
    """One dashed connector between consecutive nodes."""

    curve: ConnectorCurve
    gradient_id: str
    path: str


@dataclass(frozen=True, slots=True)
class TimelineView:
    """The activity timeline canvas."""

    width: float
    height: float
    nodes: tuple[TimelineNodeView, ...]
    connectors: tuple[TimelineConnectorView, ...]
    legend: tuple[tuple[ActivityCategory, int], ...]

    @property
    def is_empty(self) -> bool:
        return not self.nodes


@dataclass(frozen=True, slots=True)
class ValueChartView:
    """A polyline chart of an asset's value history."""

    width: float
    height: float
    polyline: str
    markers: tuple[tuple[float, float, str, float], ...]
    summary: ValueSeriesSummary
    empty_message: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.summary.count == 0


def build_bar_chart(samples: Sequence[Sample], *, title: str, color: str = "#2E7D32") -> BarChartView:
    """Build a bar chart view from ordered samples."""

    return BarChartView(title=title, color=color, bars=bar_proportions_from_samples(samples))


def build_donut_chart(segments: Sequence[Segment], *, title: str) -> DonutChartView:
    """Build a donut chart view, falling back to an empty state for zero totals."""

    try:
        slices = compute_donut_angles(segments, radius=DONUT_RADIUS)
    except EmptyDatasetError as exc:
        logger.info("Rendering empty donut %r: %s", title, exc)
        return DonutChartView(
            title=title,
            radius=DONUT_RADIUS,
            circumference=DONUT_CIRCUMFERENCE,
            slices=(),
            legend=tuple(segments),
            empty_message=DONUT_EMPTY_MESSAGE,
        )
    return DonutChartView(
        title=title,
        radius=DONUT_RADIUS,
        circumference=DONUT_CIRCUMFERENCE,
        slices=slices,
        legend=tuple(segments),
    )


def build_timeline(
    events: Sequence[ActivityEvent],
    *,
    newest_first: bool = True,
    constants: TimelineConstants = DEFAULT_TIMELINE,
) -> TimelineView:
    """Lay out an activity log as timeline nodes and connectors.

    Args:
        events: Activity events as delivered by the API.
        newest_first: Whether `events` is already ordered newest first.
        constants: Layout constants.

    Returns:
        TimelineView whose first node is the most recent event.
    """

    ordered = order_events(events, newest_first=newest_first)
    layout = compute_timeline_layout(len(ordered), constants)
    nodes = tuple(
        TimelineNodeView(event=event, position=position, category=event.category)
        for event, position in zip(ordered, layout.positions)
    )
    connectors = tuple(
        TimelineConnectorView(curve=curve, gradient_id=f"timeline-gradient-{curve.from_index}", path=curve.svg_path())
        for curve in compute_connector_curves(layout.positions, lift_amount=constants.lift_amount)
    )
    counts = category_counts(ordered)
    legend = tuple((category, counts[category]) for category in ActivityCategory if category in counts)
    return TimelineView(
        width=layout.total_width,
        height=layout.height,
        nodes=nodes,
        connectors=connectors,
        legend=legend,
    )


def build_value_chart(
    points: Sequence[ValuePoint],
    *,
    width: float = 640.0,
    height: float = 220.0,
    padding: float = 24.0,
) -> ValueChartView:
    """Build the asset value line chart from chronologically sorted points."""

    summary = summarize_value_series(points)
    if summary.count == 0:
        return ValueChartView(
            width=width,
            height=height,
            polyline="",
            markers=(),
            summary=summary,
            empty_message=VALUE_CHART_EMPTY_MESSAGE,
        )

    samples = value_series_samples(points)
    coords = compute_line_points(samples, width=width, height=height, padding=padding)
    polyline = " ".join(f"{point.x:.2f},{point.y:.2f}" for point in coords)
    markers = tuple(
        (round(point.x, 2), round(point.y, 2), sample.label, sample.value) for point, sample in zip(coords, samples)
    )
    return ValueChartView(width=width, height=height, polyline=polyline, markers=markers, summary=summary)
