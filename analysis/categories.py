"""Shared activity category definitions.

ActivityCategory is a semantic classification of asset activity entries. The
timeline uses it to pick node colors and labels, so the set is closed and the
values are stable identifiers.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final


class ActivityCategory(StrEnum):
    """Semantic category for an asset activity entry."""

    created = "created"
    transferred = "transferred"
    submitted = "submitted"
    scrapped = "scrapped"
    restored = "restored"
    repair = "repair"
    out_of_order = "out_of_order"
    activity = "activity"

    @property
    def label(self) -> str:
        """Return the human-friendly label shown beside a timeline node."""

        return ACTIVITY_LABELS[self]

    @property
    def color(self) -> str:
        """Return the node/connector color for this category."""

        return ACTIVITY_COLORS[self]


# Priority order for keyword matching; the first keyword found wins.
ACTIVITY_KEYWORDS: Final[tuple[tuple[str, ActivityCategory], ...]] = (
    ("created", ActivityCategory.created),
    ("transferred", ActivityCategory.transferred),
    ("submitted", ActivityCategory.submitted),
    ("scrapped", ActivityCategory.scrapped),
    ("restored", ActivityCategory.restored),
    ("repair", ActivityCategory.repair),
    ("out of order", ActivityCategory.out_of_order),
)

ACTIVITY_LABELS: Final[dict[ActivityCategory, str]] = {
    ActivityCategory.created: "Created",
    ActivityCategory.transferred: "Transferred",
    ActivityCategory.submitted: "Submitted",
    ActivityCategory.scrapped: "Scrapped",
    ActivityCategory.restored: "Restored",
    ActivityCategory.repair: "Repair",
    ActivityCategory.out_of_order: "Out of Order",
    ActivityCategory.activity: "Activity",
}

ACTIVITY_COLORS: Final[dict[ActivityCategory, str]] = {
    ActivityCategory.created: "#43A047",
    ActivityCategory.transferred: "#2196F3",
    ActivityCategory.submitted: "#FF9800",
    ActivityCategory.scrapped: "#F44336",
    ActivityCategory.restored: "#4CAF50",
    ActivityCategory.repair: "#FF5722",
    ActivityCategory.out_of_order: "#E91E63",
    ActivityCategory.activity: "#9E9E9E",
}


def classify_activity(description: str) -> ActivityCategory:
    """Classify an activity description into an ActivityCategory.

    Matching is a case-insensitive substring search over `ACTIVITY_KEYWORDS`
    in priority order, so "Scrapped asset after repair" is `scrapped`.

    Args:
        description: Free-text activity subject.

    Returns:
        The first matching category, or `ActivityCategory.activity` when no
        keyword is present.
    """

    lowered = (description or "").lower()
    for keyword, category in ACTIVITY_KEYWORDS:
        if keyword in lowered:
            return category
    return ActivityCategory.activity
