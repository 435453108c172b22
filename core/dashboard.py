"""Home dashboard content.

The stat cards, weekly trip counts, occupancy split and pickup list are kept
in `core/data/dashboard.yaml` so they can be edited without touching views.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from django.conf import settings

from analysis.dto import Sample, Segment


@dataclass(frozen=True, slots=True)
class StatCard:
    """A headline number on the dashboard."""

    title: str
    value: str
    delta: str | None = None
    color: str | None = None


@dataclass(frozen=True, slots=True)
class DashboardContent:
    """Parsed dashboard content."""

    stat_cards: tuple[StatCard, ...]
    trips_title: str
    trips_color: str
    weekly_trips: tuple[Sample, ...]
    occupancy_title: str
    occupancy: tuple[Segment, ...]
    upcoming_pickups: tuple[str, ...]


def parse_dashboard_content(payload: dict[str, Any]) -> DashboardContent:
    """Validate and convert a dashboard YAML mapping.

    Args:
        payload: Mapping loaded from YAML.

    Returns:
        DashboardContent with typed samples and segments.

    Raises:
        ValueError: When a required section is missing or malformed.
    """

    if not isinstance(payload, dict):
        raise ValueError("Dashboard content must be a mapping.")

    try:
        trips = payload["weekly_trips"]
        occupancy = payload["occupancy"]
        stat_cards = tuple(
            StatCard(
                title=str(card["title"]),
                value=str(card["value"]),
                delta=str(card["delta"]) if card.get("delta") is not None else None,
                color=card.get("color"),
            )
            for card in payload.get("stat_cards") or ()
        )
        samples = tuple(Sample(label=str(row["label"]), value=float(row["value"])) for row in trips["samples"])
        segments = tuple(
            Segment(label=str(row["label"]), value=float(row["value"]), color=str(row["color"]))
            for row in occupancy["segments"]
        )
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Malformed dashboard content: {exc}") from exc

    return DashboardContent(
        stat_cards=stat_cards,
        trips_title=str(trips.get("title") or "Weekly Trips"),
        trips_color=str(trips.get("color") or "#2E7D32"),
        weekly_trips=samples,
        occupancy_title=str(occupancy.get("title") or "Occupancy"),
        occupancy=segments,
        upcoming_pickups=tuple(str(item) for item in payload.get("upcoming_pickups") or ()),
    )


@lru_cache(maxsize=4)
def _load(path: Path) -> DashboardContent:
    with path.open(encoding="utf-8") as handle:
        return parse_dashboard_content(yaml.safe_load(handle) or {})


def load_dashboard_content(path: Path | None = None) -> DashboardContent:
    """Load dashboard content from YAML (cached per path).

    Args:
        path: Optional override; defaults to `settings.ELIMU_DASHBOARD_CONTENT`.
    """

    return _load(Path(path or settings.ELIMU_DASHBOARD_CONTENT))
