"""Pure analysis package for Elimu Ride.

This package contains deterministic, testable computations (chart geometry,
timeline layout, status rules) that operate on in-memory inputs and return
DTOs. It must not import Django or perform any I/O.
"""

from .chart_geometry import EmptyDatasetError, compute_bar_proportions, compute_donut_angles
from .timeline import classify_activity, compute_connector_curves, compute_timeline_layout

__all__ = [
    "EmptyDatasetError",
    "classify_activity",
    "compute_bar_proportions",
    "compute_connector_curves",
    "compute_donut_angles",
    "compute_timeline_layout",
]
