"""Pytest fixtures shared across the Elimu Ride test suite."""

from __future__ import annotations

import io
import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import pytest

from analysis.dto import ActivityEvent, ValuePoint
from core.api_client import AssetApiClient
from core.assets import Bus
from core.session import TOKEN_SESSION_KEY


@dataclass
class FakeAssetApi:
    """In-memory stand-in for `AssetApiClient` used by view tests.

    Each attribute holds the value an endpoint returns; assign an exception
    instance to make the endpoint raise it instead. Calls are recorded in
    `calls` as `(method_name, args)` tuples.
    """

    buses: Any = ()
    bus: Any = field(default_factory=lambda: Bus(asset_no="ACC-ASS-0001", bus_no="KDA 123A", status="Submitted"))
    activities: Any = ()
    counts: Any = field(default_factory=dict)
    series: Any = ()
    accounts: Any = ("Depreciation - ER", "Cash - ER")
    message: Any = "Done."
    calls: list[tuple[str, tuple]] = field(default_factory=list)

    def _answer(self, name: str, value: Any, *args: Any) -> Any:
        self.calls.append((name, args))
        if isinstance(value, Exception):
            raise value
        return value

    def registered_buses(self):
        return self._answer("registered_buses", self.buses)

    def bus_details(self, asset_no):
        return self._answer("bus_details", self.bus, asset_no)

    def asset_activity(self, asset_no):
        return self._answer("asset_activity", self.activities, asset_no)

    def document_counts(self, asset_no):
        return self._answer("document_counts", self.counts, asset_no)

    def asset_value_series(self, asset_no):
        return self._answer("asset_value_series", self.series, asset_no)

    def school_accounts(self):
        return self._answer("school_accounts", self.accounts)

    def register_bus(self, registration, image=None):
        return self._answer("register_bus", self.message, registration, image)

    def create_repair(self, asset_no, repair):
        return self._answer("create_repair", self.message, asset_no, repair)

    def adjust_value(self, asset_no, adjustment):
        return self._answer("adjust_value", self.message, asset_no, adjustment)

    def scrap_asset(self, asset_no):
        return self._answer("scrap_asset", self.message, asset_no)

    def restore_asset(self, asset_no):
        return self._answer("restore_asset", self.message, asset_no)


@pytest.fixture
def fake_api(monkeypatch) -> FakeAssetApi:
    """Route every view's API client to an in-memory fake."""

    api = FakeAssetApi()
    monkeypatch.setattr("core.views.api_client_for", lambda request: api)
    return api


@pytest.fixture
def auth_client(client, db):
    """Return a Django test client whose session holds an API token."""

    session = client.session
    session[TOKEN_SESSION_KEY] = "test-token"
    session.save()
    return client


@pytest.fixture
def sample_activities() -> tuple[ActivityEvent, ...]:
    """Return a newest-first activity log covering several categories."""

    return (
        ActivityEvent("2025-03-04 10:00:00", "admin@school.ac.ke", "Asset Repair completed", "Jane Wanjiru"),
        ActivityEvent("2025-02-01 09:30:00", "admin@school.ac.ke", "Asset submitted"),
        ActivityEvent("2025-01-15 08:00:00", "clerk@school.ac.ke", "Asset created"),
    )


@pytest.fixture
def sample_value_series() -> tuple[ValuePoint, ...]:
    """Return an oldest-first valuation history."""

    from datetime import date

    return (
        ValuePoint(day=date(2024, 1, 1), amount=4_000_000.0),
        ValuePoint(day=date(2024, 7, 1), amount=3_600_000.0),
        ValuePoint(day=date(2025, 1, 1), amount=3_200_000.0),
    )


class FakeOpener:
    """Record urllib requests and reply with queued responses or errors."""

    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses)
        self.requests: list[Any] = []
        self.timeouts: list[float] = []

    def __call__(self, request, timeout=None):
        self.requests.append(request)
        self.timeouts.append(timeout)
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        if isinstance(response, bytes):
            return io.BytesIO(response)
        return io.BytesIO(json.dumps(response).encode("utf-8"))


@pytest.fixture
def make_client():
    """Return a factory building an `AssetApiClient` around a FakeOpener."""

    def factory(*responses: Any, token: str | None = "test-token") -> tuple[AssetApiClient, FakeOpener]:
        opener = FakeOpener(*responses)
        client = AssetApiClient(base_url="http://api.test/", token=token, timeout=5.0, opener=opener)
        return client, opener

    return factory


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    - `unit`: pure, fast tests with no database or session access.
    - `integration`: tests touching Django sessions, views, or IO.

    Each test must have exactly one of these markers.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
