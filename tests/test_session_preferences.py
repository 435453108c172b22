"""Integration tests for session-held tokens and UI preferences."""

from __future__ import annotations

import pytest
from django.urls import reverse

from core.session import DRAWER_SESSION_KEY, THEME_SESSION_KEY, TOKEN_SESSION_KEY

pytestmark = pytest.mark.integration


@pytest.mark.django_db
def test_protected_pages_redirect_to_login(client) -> None:
    """Without a token every dashboard page redirects to login with `next`."""

    response = client.get(reverse("core:buses"))
    assert response.status_code == 302
    assert response["Location"] == f"{reverse('core:login')}?next=%2Fbuses%2F"


@pytest.mark.django_db
def test_theme_toggle_flips_and_returns(auth_client) -> None:
    """Toggling the theme stores it in the session and returns to `next`."""

    response = auth_client.post(reverse("core:toggle_theme"), {"next": reverse("core:about")})
    assert response.status_code == 302
    assert response["Location"] == reverse("core:about")
    assert auth_client.session[THEME_SESSION_KEY] == "dark"

    auth_client.post(reverse("core:toggle_theme"))
    assert auth_client.session[THEME_SESSION_KEY] == "light"


@pytest.mark.django_db
def test_theme_toggle_requires_post(auth_client) -> None:
    """Preference toggles only accept POST."""

    assert auth_client.get(reverse("core:toggle_theme")).status_code == 405


@pytest.mark.django_db
def test_drawer_toggle_defaults_open(auth_client) -> None:
    """The drawer starts open and collapses on the first toggle."""

    auth_client.post(reverse("core:toggle_drawer"))
    assert auth_client.session[DRAWER_SESSION_KEY] is False


@pytest.mark.django_db
def test_dark_theme_is_rendered(auth_client) -> None:
    """The base template reflects the session theme."""

    session = auth_client.session
    session[THEME_SESSION_KEY] = "dark"
    session.save()
    response = auth_client.get(reverse("core:about"))
    assert response.context["theme"] == "dark"
    assert 'data-theme="dark"' in response.content.decode("utf-8")


@pytest.mark.django_db
def test_logout_is_a_post_form_and_flushes_session(auth_client) -> None:
    """Signed-in pages render logout as a POST form; posting ends the session."""

    html = auth_client.get(reverse("core:about")).content.decode("utf-8")
    assert f'action="{reverse("core:logout")}"' in html
    assert f'href="{reverse("core:logout")}"' not in html

    response = auth_client.post(reverse("core:logout"))
    assert response.status_code == 302
    assert response["Location"] == reverse("core:login")
    assert TOKEN_SESSION_KEY not in auth_client.session
