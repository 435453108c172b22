"""Activity timeline layout.

The bus detail screen shows an asset's activity log as a horizontally
scrollable row of nodes joined by dashed curves. This module computes the node
positions and connector curves; the template only draws them.

Placement is index-driven rather than force-directed: node `i` sits at a fixed
horizontal step from the left margin, with a small sinusoidal vertical offset
so neighbouring labels do not line up. Index 0 is always the most recent
event, which the template highlights.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

from .categories import ActivityCategory, classify_activity
from .dto import ActivityEvent, ConnectorCurve, NodePosition, Point, TimelineLayout

__all__ = [
    "DEFAULT_TIMELINE",
    "category_counts",
    "TimelineConstants",
    "classify_activity",
    "compute_connector_curves",
    "compute_timeline_layout",
    "order_events",
]


@dataclass(frozen=True, slots=True)
class TimelineConstants:
    """Layout constants for the activity timeline canvas.

    Args:
        base_x0: Left margin of the first node.
        min_node_spacing: Horizontal distance between consecutive nodes.
        container_height: Canvas height; nodes oscillate around its middle.
        amplitude: Maximum vertical offset of the wave.
        phase_step: Phase advance (radians) per node index.
        minimum_canvas_width: Lower bound for the canvas width.
        margin: Extra width reserved after the last node.
        lift_amount: How far connector control points rise above the higher node.
    """

    base_x0: float = 80.0
    min_node_spacing: float = 120.0
    container_height: float = 150.0
    amplitude: float = 15.0
    phase_step: float = 0.8
    minimum_canvas_width: float = 600.0
    margin: float = 120.0
    lift_amount: float = 15.0

    def __post_init__(self) -> None:
        """Validate the constants are finite and non-negative where required."""

        for name in (
            "base_x0",
            "min_node_spacing",
            "container_height",
            "amplitude",
            "phase_step",
            "minimum_canvas_width",
            "margin",
            "lift_amount",
        ):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite (got {value!r})")
        for name in ("min_node_spacing", "container_height", "minimum_canvas_width", "margin"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")


DEFAULT_TIMELINE: Final[TimelineConstants] = TimelineConstants()


def compute_timeline_layout(
    event_count: int,
    constants: TimelineConstants = DEFAULT_TIMELINE,
) -> TimelineLayout:
    """Compute node positions and canvas width for `event_count` events.

    Args:
        event_count: Number of timeline nodes.
        constants: Layout constants.

    Returns:
        TimelineLayout with one NodePosition per event and the canvas width.

    Raises:
        ValueError: When `event_count` is negative.
    """

    if event_count < 0:
        raise ValueError("event_count must be >= 0")

    center_y = constants.container_height / 2
    positions = tuple(
        NodePosition(
            index=index,
            x=constants.base_x0 + index * constants.min_node_spacing,
            y=center_y + constants.amplitude * math.sin(index * constants.phase_step),
        )
        for index in range(event_count)
    )
    total_width = max(
        constants.minimum_canvas_width,
        event_count * constants.min_node_spacing + constants.margin,
    )
    return TimelineLayout(positions=positions, total_width=total_width, height=constants.container_height)


def compute_connector_curves(
    positions: Sequence[NodePosition],
    *,
    lift_amount: float = DEFAULT_TIMELINE.lift_amount,
) -> tuple[ConnectorCurve, ...]:
    """Build upward-bowing quadratic curves between consecutive nodes.

    Args:
        positions: Node positions in timeline order.
        lift_amount: Distance the control point sits above the higher node.

    Returns:
        `len(positions) - 1` curves, or an empty tuple for fewer than two nodes.
    """

    curves: list[ConnectorCurve] = []
    for current, following in zip(positions, positions[1:]):
        curves.append(
            ConnectorCurve(
                from_index=current.index,
                to_index=following.index,
                start=Point(current.x, current.y),
                control_point=Point(
                    (current.x + following.x) / 2,
                    min(current.y, following.y) - lift_amount,
                ),
                end=Point(following.x, following.y),
            )
        )
    return tuple(curves)


def order_events(events: Sequence[ActivityEvent], *, newest_first: bool) -> tuple[ActivityEvent, ...]:
    """Return events newest-first so index 0 is the latest activity.

    The sequence is only flipped when the caller supplies oldest-first data;
    timestamps are never inspected.

    Args:
        events: Activity events in the caller's ordering.
        newest_first: Whether `events` is already newest-first.

    Returns:
        The events as a newest-first tuple.
    """

    return tuple(events) if newest_first else tuple(reversed(events))


def category_counts(events: Sequence[ActivityEvent]) -> dict[ActivityCategory, int]:
    """Count events per category, keeping only categories that occur."""

    counts: dict[ActivityCategory, int] = {}
    for event in events:
        category = event.category
        counts[category] = counts.get(category, 0) + 1
    return counts
