"""Template context processors for Elimu Ride."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from django.http import HttpRequest

from core.session import drawer_open, get_theme, get_token


@dataclass(frozen=True, slots=True)
class ThemeColors:
    """Palette used by the base template for one theme."""

    bg_gradient: str
    card_bg: str
    text_primary: str
    text_muted: str
    border: str
    bg_secondary: str


THEME_COLORS: Final[dict[str, ThemeColors]] = {
    "light": ThemeColors(
        bg_gradient="linear-gradient(135deg, #E7F5EC 0%, #F8FBF8 50%, #F1FFF6 100%)",
        card_bg="#fff",
        text_primary="#1f2a24",
        text_muted="rgba(0,0,0,0.6)",
        border="rgba(0,0,0,0.08)",
        bg_secondary="#f8f9fa",
    ),
    "dark": ThemeColors(
        bg_gradient="#0B1712",
        card_bg="#142019",
        text_primary="#E7F5EC",
        text_muted="rgba(231,245,236,0.7)",
        border="rgba(255,255,255,0.12)",
        bg_secondary="#1a2520",
    ),
}

# (label, icon, url name or None for entries without a screen yet)
NAV_ITEMS: Final[tuple[tuple[str, str, str | None], ...]] = (
    ("Dashboard", "📊", "core:home"),
    ("Students", "🎒", None),
    ("Buses", "🚌", "core:buses"),
    ("Routes", "🗺️", None),
    ("Pickups & Drop-offs", "📍", None),
    ("Drivers", "👨‍✈️", None),
    ("Attendance", "🧾", None),
    ("Alerts", "🔔", None),
    ("Settings", "⚙️", None),
)


def ui_preferences(request: HttpRequest) -> dict[str, object]:
    """Expose theme, drawer state and navigation to all templates.

    Args:
        request: Current request object.

    Returns:
        Context dict with `theme`, `colors`, `drawer_open`, `nav_items` and
        `signed_in`.
    """

    theme = get_theme(request)
    return {
        "theme": theme,
        "colors": THEME_COLORS[theme],
        "drawer_open": drawer_open(request),
        "nav_items": NAV_ITEMS,
        "signed_in": get_token(request) is not None,
    }
