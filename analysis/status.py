"""Asset status presentation rules.

Statuses come from the remote asset API as free text ("Submitted",
"Partially Depreciated", "Scrapped", ...). The badge color is picked by
keyword, and the Manage menu hides whichever of Scrap/Restore does not apply.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Final


@dataclass(frozen=True, slots=True)
class StatusStyle:
    """Badge colors for an asset status.

    Attributes:
        color: Foreground/text color.
        background: Translucent badge background.
        border: Translucent badge border.
    """

    color: str
    background: str
    border: str


def _style(hex_color: str, rgb: str) -> StatusStyle:
    return StatusStyle(color=hex_color, background=f"rgba({rgb},0.1)", border=f"rgba({rgb},0.2)")


DEFAULT_STATUS_STYLE: Final[StatusStyle] = _style("#2196F3", "33,150,243")

# Checked in order. "inactive" contains "active", so it is listed first to
# keep inactive assets on the grey badge instead of the green one.
STATUS_STYLES: Final[tuple[tuple[str, StatusStyle], ...]] = (
    ("scrapped", _style("#E53935", "229,57,53")),
    ("depreciated", _style("#FF9800", "255,152,0")),
    ("inactive", _style("#9E9E9E", "158,158,158")),
    ("active", _style("#2E7D32", "46,125,50")),
    ("maintenance", _style("#FF5722", "255,87,34")),
    ("repair", _style("#E91E63", "233,30,99")),
)


def status_style(status: str | None) -> StatusStyle:
    """Return the badge style for an asset status.

    Args:
        status: Free-text status from the asset API.

    Returns:
        The style of the first keyword found in `status`, or the default style.
    """

    lowered = (status or "").lower()
    for keyword, style in STATUS_STYLES:
        if keyword in lowered:
            return style
    return DEFAULT_STATUS_STYLE


class AssetAction(StrEnum):
    """Entries of the bus detail Manage menu."""

    restore = "restore"
    scrap = "scrap"
    maintain = "maintain"
    repair = "repair"
    adjust_value = "adjust_value"

    @property
    def label(self) -> str:
        """Return the menu label."""

        return _ACTION_LABELS[self]


_ACTION_LABELS: Final[dict[AssetAction, str]] = {
    AssetAction.restore: "Restore Asset",
    AssetAction.scrap: "Scrap Asset",
    AssetAction.maintain: "Maintain Asset",
    AssetAction.repair: "Repair Asset",
    AssetAction.adjust_value: "Adjust Asset Value",
}

SCRAPPED_STATUS: Final[str] = "Scrapped"


def is_scrapped(status: str | None) -> bool:
    """Return True when the asset status is exactly "Scrapped"."""

    return (status or "").strip() == SCRAPPED_STATUS


def available_actions(status: str | None) -> tuple[AssetAction, ...]:
    """Return the Manage menu entries for an asset in `status`.

    Scrapped assets can be restored but not scrapped again; every other
    status can be scrapped but not restored.
    """

    hidden = AssetAction.scrap if is_scrapped(status) else AssetAction.restore
    return tuple(action for action in AssetAction if action is not hidden)
