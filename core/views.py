"""Views for the login, dashboard and bus management screens.

All data comes from the remote asset API. Views follow one pattern: call the
client, and on `AuthenticationExpired` drop the stored token and send the
user back to the login screen; on any other `AssetApiError` show the message
and render what is available.
"""

from __future__ import annotations

import logging
from typing import Any

from django.conf import settings
from django.contrib import messages
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views.decorators.http import require_POST

from analysis.status import available_actions, is_scrapped, status_style
from core.api_client import (
    AssetApiClient,
    AssetApiError,
    AuthenticationExpired,
    default_difference_account,
)
from core.charting.svg import build_bar_chart, build_donut_chart, build_timeline, build_value_chart
from core.dashboard import load_dashboard_content
from core.forms import AssetRepairForm, AssetValueAdjustmentForm, BusRegistrationForm, LoginForm
from core.session import (
    api_client_for,
    api_token_required,
    clear_token,
    get_token,
    login_redirect,
    safe_redirect,
    store_token,
    toggle_drawer,
    toggle_theme,
)

logger = logging.getLogger(__name__)

# Document types shown as counters on the bus detail screen.
DOCUMENT_TYPES: tuple[str, ...] = (
    "Asset Movement",
    "Asset Value Adjustment",
    "Journal Entry",
    "Asset Maintenance",
    "Asset Repair",
    "Asset Activity",
    "School Trip Manifest",
)


def _session_expired(request: HttpRequest, exc: AuthenticationExpired) -> HttpResponse:
    """Forget the token and redirect to login with the API's message."""

    clear_token(request)
    messages.warning(request, exc.message)
    return login_redirect(request)


def login_view(request: HttpRequest) -> HttpResponse:
    """Render the sign-in screen and exchange credentials for an API token."""

    next_url = request.GET.get("next", "")
    if get_token(request) is not None:
        return redirect(settings.LOGIN_REDIRECT_URL)

    form = LoginForm(initial={"remember": True})
    if request.method == "POST":
        next_url = request.POST.get("next", next_url)
        form = LoginForm(request.POST)
        if form.is_valid():
            client = AssetApiClient.from_settings()
            try:
                result = client.login(form.cleaned_data["email"], form.cleaned_data["password"])
            except AssetApiError as exc:
                form.add_error(None, exc.message)
            else:
                store_token(request, result.token, remember=bool(form.cleaned_data.get("remember")))
                messages.success(request, result.message)
                return safe_redirect(
                    request,
                    candidates=[request.POST.get("next"), request.GET.get("next")],
                    fallback=settings.LOGIN_REDIRECT_URL,
                )

    return render(request, "core/login.html", {"form": form, "next": next_url})


@require_POST
def logout_view(request: HttpRequest) -> HttpResponse:
    """End the session and return to the sign-in screen."""

    request.session.flush()
    return redirect("core:login")


@require_POST
def toggle_theme_view(request: HttpRequest) -> HttpResponse:
    """Switch between the light and dark themes."""

    toggle_theme(request)
    return safe_redirect(
        request,
        candidates=[request.POST.get("next"), request.META.get("HTTP_REFERER")],
        fallback=reverse("core:home"),
    )


@require_POST
def toggle_drawer_view(request: HttpRequest) -> HttpResponse:
    """Expand or collapse the navigation drawer."""

    toggle_drawer(request)
    return safe_redirect(
        request,
        candidates=[request.POST.get("next"), request.META.get("HTTP_REFERER")],
        fallback=reverse("core:home"),
    )


def about(request: HttpRequest) -> HttpResponse:
    """Render the static about page."""

    return render(request, "core/about.html")


@api_token_required
def home(request: HttpRequest) -> HttpResponse:
    """Render the dashboard: stat cards, weekly trips and occupancy."""

    content = load_dashboard_content()
    return render(
        request,
        "core/home.html",
        {
            "stat_cards": content.stat_cards,
            "trips_chart": build_bar_chart(content.weekly_trips, title=content.trips_title, color=content.trips_color),
            "occupancy_chart": build_donut_chart(content.occupancy, title=content.occupancy_title),
            "upcoming_pickups": content.upcoming_pickups,
        },
    )


def _bus_list_context(request: HttpRequest, client: AssetApiClient, form: BusRegistrationForm) -> dict[str, Any]:
    """Fetch and filter the bus list; raises AuthenticationExpired to the caller."""

    bus_list: tuple = ()
    error: str | None = None
    try:
        bus_list = client.registered_buses()
    except AuthenticationExpired:
        raise
    except AssetApiError as exc:
        error = exc.message

    query = (request.GET.get("q") or "").strip().lower()
    if query:
        bus_list = tuple(bus for bus in bus_list if query in bus.bus_no.lower() or query in bus.asset_no.lower())

    return {
        "buses": bus_list,
        "error": error,
        "query": request.GET.get("q", ""),
        "registration_form": form,
    }


@api_token_required
def buses(request: HttpRequest) -> HttpResponse:
    """List registered buses with the registration form."""

    form = BusRegistrationForm(initial={"schedule_maintenance": True})
    try:
        context = _bus_list_context(request, api_client_for(request), form)
    except AuthenticationExpired as exc:
        return _session_expired(request, exc)
    return render(request, "core/buses.html", context)


@api_token_required
@require_POST
def register_bus(request: HttpRequest) -> HttpResponse:
    """Validate and submit a new bus registration."""

    client = api_client_for(request)
    form = BusRegistrationForm(request.POST, request.FILES)
    if not form.is_valid():
        messages.error(request, "Please correct the highlighted registration fields.")
        try:
            context = _bus_list_context(request, client, form)
        except AuthenticationExpired as exc:
            return _session_expired(request, exc)
        context["show_registration"] = True
        return render(request, "core/buses.html", context, status=400)

    try:
        message = client.register_bus(form.to_registration(), image=form.to_upload())
    except AuthenticationExpired as exc:
        return _session_expired(request, exc)
    except AssetApiError as exc:
        messages.error(request, exc.message)
    else:
        messages.success(request, message)
    return redirect("core:buses")


def _bus_detail_context(client: AssetApiClient, asset_no: str) -> dict[str, Any]:
    """Collect the bus detail payloads; only the bus itself is mandatory."""

    bus = client.bus_details(asset_no)
    context: dict[str, Any] = {
        "bus": bus,
        "status_style": status_style(bus.status),
        "actions": available_actions(bus.status),
        "is_scrapped": is_scrapped(bus.status),
        "activities_error": None,
        "documents_error": None,
        "value_error": None,
    }

    try:
        context["timeline"] = build_timeline(client.asset_activity(asset_no), newest_first=True)
    except AuthenticationExpired:
        raise
    except AssetApiError as exc:
        context["timeline"] = build_timeline(())
        context["activities_error"] = exc.message

    try:
        counts = client.document_counts(asset_no)
    except AuthenticationExpired:
        raise
    except AssetApiError as exc:
        counts = {}
        context["documents_error"] = exc.message
    context["document_counts"] = tuple((doctype, counts.get(doctype, 0)) for doctype in DOCUMENT_TYPES)

    try:
        context["value_chart"] = build_value_chart(client.asset_value_series(asset_no))
    except AuthenticationExpired:
        raise
    except AssetApiError as exc:
        context["value_chart"] = build_value_chart(())
        context["value_error"] = exc.message
    return context


@api_token_required
def bus_detail(request: HttpRequest, asset_no: str) -> HttpResponse:
    """Render one bus: details, document counts, actions, timeline and value chart."""

    client = api_client_for(request)
    try:
        context = _bus_detail_context(client, asset_no)
    except AuthenticationExpired as exc:
        return _session_expired(request, exc)
    except AssetApiError as exc:
        messages.error(request, exc.message)
        return redirect("core:buses")

    accounts: tuple[str, ...] = ()
    try:
        accounts = client.school_accounts()
    except AuthenticationExpired as exc:
        return _session_expired(request, exc)
    except AssetApiError as exc:
        logger.warning("Could not load accounts for %s: %s", asset_no, exc.message)

    context["repair_form"] = AssetRepairForm(initial={"repair_status": "Pending"})
    context["adjust_form"] = AssetValueAdjustmentForm(
        accounts=accounts,
        initial={"difference_account": default_difference_account(accounts) or ""},
    )
    return render(request, "core/bus_detail.html", context)


def _back_to_bus(asset_no: str) -> HttpResponse:
    return redirect("core:bus_detail", asset_no=asset_no)


@api_token_required
@require_POST
def repair_asset(request: HttpRequest, asset_no: str) -> HttpResponse:
    """Record a repair for the bus."""

    form = AssetRepairForm(request.POST)
    if not form.is_valid():
        for errors in form.errors.values():
            for error in errors:
                messages.error(request, error)
        return _back_to_bus(asset_no)

    try:
        message = api_client_for(request).create_repair(asset_no, form.to_repair())
    except AuthenticationExpired as exc:
        return _session_expired(request, exc)
    except AssetApiError as exc:
        messages.error(request, exc.message)
    else:
        messages.success(request, message)
    return _back_to_bus(asset_no)


@api_token_required
@require_POST
def adjust_asset_value(request: HttpRequest, asset_no: str) -> HttpResponse:
    """Adjust the bus's book value."""

    client = api_client_for(request)
    try:
        accounts = client.school_accounts()
    except AuthenticationExpired as exc:
        return _session_expired(request, exc)
    except AssetApiError:
        accounts = ()

    form = AssetValueAdjustmentForm(request.POST, accounts=accounts)
    if not form.is_valid():
        for errors in form.errors.values():
            for error in errors:
                messages.error(request, error)
        return _back_to_bus(asset_no)

    try:
        message = client.adjust_value(asset_no, form.to_adjustment())
    except AuthenticationExpired as exc:
        return _session_expired(request, exc)
    except AssetApiError as exc:
        messages.error(request, exc.message)
    else:
        messages.success(request, message)
    return _back_to_bus(asset_no)


@api_token_required
@require_POST
def scrap_asset(request: HttpRequest, asset_no: str) -> HttpResponse:
    """Scrap the bus."""

    try:
        message = api_client_for(request).scrap_asset(asset_no)
    except AuthenticationExpired as exc:
        return _session_expired(request, exc)
    except AssetApiError as exc:
        messages.error(request, exc.message)
    else:
        messages.success(request, message)
    return _back_to_bus(asset_no)


@api_token_required
@require_POST
def restore_asset(request: HttpRequest, asset_no: str) -> HttpResponse:
    """Restore a scrapped bus."""

    try:
        message = api_client_for(request).restore_asset(asset_no)
    except AuthenticationExpired as exc:
        return _session_expired(request, exc)
    except AssetApiError as exc:
        messages.error(request, exc.message)
    else:
        messages.success(request, message)
    return _back_to_bus(asset_no)
