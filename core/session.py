"""Session-held auth token and UI preferences.

The API bearer token lives in the server-side session instead of browser
storage. "Remember me" keeps the session for `SESSION_COOKIE_AGE`; otherwise
it ends when the browser closes. Theme and drawer state are stored alongside
and exposed to templates through a context processor.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from functools import wraps
from typing import Final, Literal
from urllib.parse import urlencode

from django.conf import settings
from django.core.exceptions import DisallowedHost
from django.http import HttpRequest, HttpResponse, HttpResponseRedirect
from django.shortcuts import redirect
from django.urls import reverse
from django.utils.http import url_has_allowed_host_and_scheme

from core.api_client import AssetApiClient

TOKEN_SESSION_KEY: Final[str] = "elimu_auth_token"
THEME_SESSION_KEY: Final[str] = "elimu_theme"
DRAWER_SESSION_KEY: Final[str] = "elimu_drawer_open"

Theme = Literal["light", "dark"]


def store_token(request: HttpRequest, token: str, *, remember: bool) -> None:
    """Persist the API token for the current session.

    Args:
        request: Incoming request whose session will be updated.
        token: Bearer token returned by the login call.
        remember: Keep the session beyond the browser session when True.
    """

    request.session.cycle_key()
    request.session[TOKEN_SESSION_KEY] = token
    # None falls back to SESSION_COOKIE_AGE; 0 expires at browser close.
    request.session.set_expiry(None if remember else 0)


def get_token(request: HttpRequest) -> str | None:
    """Return the stored API token, if any."""

    token = getattr(request, "session", {}).get(TOKEN_SESSION_KEY)
    return str(token) if token else None


def clear_token(request: HttpRequest) -> None:
    """Forget the stored API token while keeping UI preferences."""

    request.session.pop(TOKEN_SESSION_KEY, None)
    request.session.modified = True


def api_client_for(request: HttpRequest) -> AssetApiClient:
    """Return an API client authenticated with the session token."""

    return AssetApiClient.from_settings(token=get_token(request))


def login_redirect(request: HttpRequest) -> HttpResponse:
    """Redirect to the login screen, preserving the current path as `next`."""

    return redirect(f"{reverse('core:login')}?{urlencode({'next': request.get_full_path()})}")


def api_token_required(view: Callable[..., HttpResponse]) -> Callable[..., HttpResponse]:
    """Decorate a view so it only runs when an API token is stored."""

    @wraps(view)
    def wrapped(request: HttpRequest, *args, **kwargs) -> HttpResponse:
        if get_token(request) is None:
            return login_redirect(request)
        return view(request, *args, **kwargs)

    return wrapped


def get_theme(request: HttpRequest) -> Theme:
    """Return the session theme, defaulting to light."""

    value = getattr(request, "session", {}).get(THEME_SESSION_KEY)
    return "dark" if value == "dark" else "light"


def toggle_theme(request: HttpRequest) -> Theme:
    """Flip the session theme and return the new value."""

    theme: Theme = "light" if get_theme(request) == "dark" else "dark"
    request.session[THEME_SESSION_KEY] = theme
    return theme


def drawer_open(request: HttpRequest) -> bool:
    """Return whether the navigation drawer is expanded (default True)."""

    return bool(getattr(request, "session", {}).get(DRAWER_SESSION_KEY, True))


def toggle_drawer(request: HttpRequest) -> bool:
    """Flip the drawer state and return the new value."""

    state = not drawer_open(request)
    request.session[DRAWER_SESSION_KEY] = state
    return state


def _allowed_hosts(request: HttpRequest) -> set[str]:
    hosts = set(settings.ALLOWED_HOSTS)
    try:
        hosts.add(request.get_host())
    except DisallowedHost:
        pass
    return hosts


def safe_redirect(
    request: HttpRequest,
    *,
    candidates: Iterable[str | None],
    fallback: str,
) -> HttpResponseRedirect:
    """Redirect to the first candidate that stays on this site.

    Used for `next` after sign-in and for returning to the referring page after
    a preference toggle. Off-site targets, `http://` targets on secure
    requests, and the login screen itself are skipped.

    Args:
        request: Incoming request used for host and scheme validation.
        candidates: Candidate URLs in preference order.
        fallback: URL used when no candidate is acceptable.
    """

    hosts = _allowed_hosts(request)
    login_path = reverse("core:login")
    for candidate in candidates:
        target = (candidate or "").strip()
        if not target or target == login_path:
            continue
        if url_has_allowed_host_and_scheme(url=target, allowed_hosts=hosts, require_https=request.is_secure()):
            return redirect(target)
    return redirect(fallback)
