"""App configuration for the Elimu Ride dashboard app."""

from __future__ import annotations

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Configuration for the `core` app (views, forms and the API client)."""

    name = "core"
    verbose_name = "Elimu Ride dashboard"
