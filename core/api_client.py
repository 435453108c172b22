"""HTTP client for the remote Elimu asset-management API.

Every screen in the dashboard is backed by this API; the app keeps no domain
data of its own. Endpoints are Frappe whitelisted methods under
`/api/method/eagles_apis.apis.*` and (apart from login) wrap their payload as
`{"message": {"status": 200, "message": "...", "result": ...}}`.

Error policy:
- HTTP 401 raises `AuthenticationExpired` so views can drop the stored token
  and send the user back to the login screen.
- Any other transport failure, non-2xx response, malformed JSON, or envelope
  status other than 200 raises `AssetApiError` carrying the server message
  when one is available.
"""

from __future__ import annotations

import json
import logging
import mimetypes
import urllib.error
import urllib.request
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Final, TypeVar
from urllib.parse import urlencode
from uuid import uuid4

from django.conf import settings

from analysis.dto import ActivityEvent, ValuePoint
from analysis.value_series import sort_value_series

from .assets import (
    Bus,
    BusRegistration,
    RepairRecord,
    ValueAdjustment,
    activity_from_payload,
    parse_number,
    value_point_from_payload,
)

logger = logging.getLogger(__name__)

API_METHOD_PREFIX: Final[str] = "/api/method/eagles_apis.apis."
USER_AGENT: Final[str] = "ElimuRide/1.0 (dashboard)"
INVALID_RESPONSE: Final[str] = "Invalid response from server"
T = TypeVar("T")


class AssetApiError(Exception):
    """Raised when a remote API call fails or reports an error."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialize the error.

        Args:
            message: User-presentable failure message.
            status_code: HTTP status code, when the failure came from a response.
        """

        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthenticationExpired(AssetApiError):
    """Raised when the API rejects (or the session lacks) the bearer token."""


@dataclass(frozen=True, slots=True)
class LoginResult:
    """Outcome of a successful login."""

    token: str
    message: str


@dataclass(frozen=True, slots=True)
class UploadedImage:
    """An image file attached to a bus registration."""

    filename: str
    content: bytes
    content_type: str | None = None


Opener = Callable[..., Any]


class AssetApiClient:
    """Thin wrapper around the asset API endpoints used by the dashboard."""

    def __init__(
        self,
        *,
        base_url: str,
        token: str | None = None,
        timeout: float = 30.0,
        opener: Opener | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API origin, e.g. `http://elimu.com:8000`.
            token: Bearer token from a previous login, if any.
            timeout: Socket timeout in seconds for each call.
            opener: Optional replacement for `urllib.request.urlopen`.
        """

        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._opener = opener

    @classmethod
    def from_settings(cls, *, token: str | None = None) -> "AssetApiClient":
        """Build a client configured from Django settings."""

        return cls(
            base_url=settings.ELIMU_API_BASE_URL,
            token=token,
            timeout=settings.ELIMU_API_TIMEOUT,
        )

    # Accounts

    def login(self, email: str, password: str) -> LoginResult:
        """Exchange credentials for a bearer token.

        Raises:
            AssetApiError: When the credentials are rejected or the call fails.
        """

        payload = self._request(
            "accounts.login",
            json_body={"email": email.strip(), "password": password},
            authenticated=False,
        )
        status = str(payload.get("status") or "").lower()
        message = str(payload.get("message") or "Unexpected response")
        if status != "success":
            raise AssetApiError(message)
        data = payload.get("data") or {}
        token = str(data.get("authorization_token") or "")
        if not token:
            raise AssetApiError("Login succeeded but no authorization token was returned.")
        return LoginResult(token=token, message=message)

    # Buses

    def registered_buses(self) -> tuple[Bus, ...]:
        """Return every bus registered for the signed-in school."""

        result = self._call("assets.get_registered_buses", method="GET", action="fetch buses")
        return _parse_rows(result, Bus.from_payload, endpoint="get_registered_buses")

    def bus_details(self, asset_no: str) -> Bus:
        """Return full details (including status) for one bus."""

        result = self._call(
            "assets.get_bus_details",
            json_body={"asset_name": asset_no},
            action="fetch bus details",
        )
        if not isinstance(result, dict):
            raise AssetApiError("Failed to fetch bus details")
        (bus,) = _parse_rows([result], Bus.from_payload, endpoint="get_bus_details")
        return bus

    def asset_activity(self, asset_no: str) -> tuple[ActivityEvent, ...]:
        """Return the asset's activity log as delivered (newest first)."""

        result = self._call(
            "assets.get_asset_activity",
            json_body={"asset_no": asset_no},
            action="fetch activities",
        )
        return _parse_rows(result, activity_from_payload, endpoint="get_asset_activity")

    def document_counts(self, asset_no: str) -> dict[str, int]:
        """Return linked document counts keyed by document type."""

        result = self._call(
            "assets.get_asset_document_counts",
            json_body={"asset_no": asset_no},
            action="fetch document counts",
        )
        counts = _mapping(result, "counts", endpoint="get_asset_document_counts") or {}
        if not isinstance(counts, dict):
            raise _invalid("get_asset_document_counts")
        pairs = _parse_rows(
            list(counts.items()),
            lambda item: (str(item[0]), int(parse_number(item[1]))),
            endpoint="get_asset_document_counts",
        )
        return dict(pairs)

    def asset_value_series(self, asset_no: str) -> tuple[ValuePoint, ...]:
        """Return the asset's value history sorted oldest first."""

        result = self._call(
            "assets.get_asset_value_series",
            json_body={"asset_name": asset_no},
            action="fetch asset value series",
        )
        rows = _mapping(result, "series", endpoint="get_asset_value_series")
        points = _parse_rows(rows, value_point_from_payload, endpoint="get_asset_value_series")
        return sort_value_series(point for point in points if point is not None)

    def register_bus(self, registration: BusRegistration, image: UploadedImage | None = None) -> str:
        """Register a new bus; returns the server confirmation message."""

        files = {"bus_image": image} if image is not None else {}
        return self._call_for_message(
            "assets.register_school_bus",
            form_fields=registration.as_form_fields(),
            files=files,
            action="register bus",
        )

    # Asset actions

    def create_repair(self, asset_no: str, repair: RepairRecord) -> str:
        """Record a repair against the asset."""

        return self._call_for_message(
            "assets.create_asset_repair",
            json_body=repair.as_payload(asset_no),
            action="create asset repair",
        )

    def school_accounts(self) -> tuple[str, ...]:
        """Return ledger accounts usable as a value-adjustment difference account."""

        result = self._call("assets.get_accounts_by_school", method="GET", action="fetch accounts")
        return _parse_rows(result, str, endpoint="get_accounts_by_school")

    def adjust_value(self, asset_no: str, adjustment: ValueAdjustment) -> str:
        """Adjust the asset's book value."""

        return self._call_for_message(
            "assets.adjust_asset_value",
            json_body=adjustment.as_payload(asset_no),
            action="adjust asset value",
        )

    def scrap_asset(self, asset_no: str) -> str:
        """Mark the asset as scrapped."""

        return self._call_for_message(
            "assets.scrap_asset",
            json_body={"asset_no": asset_no},
            action="scrap asset",
        )

    def restore_asset(self, asset_no: str) -> str:
        """Restore a scrapped asset."""

        return self._call_for_message(
            "assets.restore_asset",
            query={"asset_name": asset_no},
            action="restore asset",
        )

    # Transport

    def _call_for_message(self, endpoint: str, *, action: str, **kwargs: Any) -> str:
        envelope = self._envelope(endpoint, action=action, **kwargs)
        return str(envelope.get("message") or "Done.")

    def _call(self, endpoint: str, *, action: str, **kwargs: Any) -> Any:
        return self._envelope(endpoint, action=action, **kwargs).get("result")

    def _envelope(self, endpoint: str, *, action: str, **kwargs: Any) -> dict[str, Any]:
        """Call an authenticated endpoint and unwrap the `message` envelope."""

        payload = self._request(endpoint, **kwargs)
        envelope = payload.get("message")
        if not isinstance(envelope, dict):
            raise AssetApiError(f"Failed to {action}")
        if envelope.get("status") != 200:
            raise AssetApiError(str(envelope.get("message") or f"Failed to {action}"))
        return envelope

    def _request(
        self,
        endpoint: str,
        *,
        method: str = "POST",
        json_body: dict[str, Any] | None = None,
        form_fields: dict[str, str] | None = None,
        files: dict[str, UploadedImage] | None = None,
        query: dict[str, str] | None = None,
        authenticated: bool = True,
    ) -> dict[str, Any]:
        """Send one request and decode the JSON response body.

        Raises:
            AuthenticationExpired: On HTTP 401 or when no token is available.
            AssetApiError: On any other failure.
        """

        url = f"{self.base_url}{API_METHOD_PREFIX}{endpoint}"
        if query:
            url = f"{url}?{urlencode(query)}"

        headers = {"Accept": "application/json", "User-Agent": USER_AGENT}
        if authenticated:
            if not self.token:
                raise AuthenticationExpired("You are not signed in.", status_code=401)
            headers["Authorization"] = f"Bearer {self.token}"

        data: bytes | None = None
        if form_fields is not None or files:
            data, content_type = encode_multipart(form_fields or {}, files or {})
            headers["Content-Type"] = content_type
        elif json_body is not None:
            data = json.dumps(json_body).encode("utf-8")
            headers["Content-Type"] = "application/json"
        elif method == "GET":
            headers["Content-Type"] = "application/json"

        request = urllib.request.Request(url, data=data, headers=headers, method=method)
        opener = self._opener or urllib.request.urlopen
        try:
            with opener(request, timeout=self.timeout) as response:
                raw = response.read()
        except urllib.error.HTTPError as exc:
            if exc.code == 401:
                logger.info("API rejected token for %s", endpoint)
                raise AuthenticationExpired("Your session has expired. Please sign in again.", status_code=401) from exc
            message = _error_message(exc) or f"HTTP error! status: {exc.code}"
            logger.warning("API %s failed with HTTP %s: %s", endpoint, exc.code, message)
            raise AssetApiError(message, status_code=exc.code) from exc
        except (urllib.error.URLError, TimeoutError, OSError) as exc:
            logger.warning("API %s unreachable: %s", endpoint, exc)
            raise AssetApiError("Network error: the asset service could not be reached.") from exc

        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("API %s returned a non-JSON body", endpoint)
            raise AssetApiError(INVALID_RESPONSE) from exc
        if not isinstance(payload, dict):
            raise AssetApiError(INVALID_RESPONSE)
        return payload


def default_difference_account(accounts: tuple[str, ...] | list[str]) -> str | None:
    """Return the first account mentioning "depreciation", if any."""

    for account in accounts:
        if "depreciation" in account.lower():
            return account
    return None


def encode_multipart(fields: dict[str, str], files: dict[str, UploadedImage]) -> tuple[bytes, str]:
    """Encode form fields and files as `multipart/form-data`.

    Returns:
        The encoded body and the matching Content-Type header value.
    """

    boundary = f"----ElimuRide{uuid4().hex}"
    lines: list[bytes] = []
    for name, value in fields.items():
        lines.append(f"--{boundary}".encode())
        lines.append(f'Content-Disposition: form-data; name="{_quote(name)}"'.encode())
        lines.append(b"")
        lines.append(value.encode("utf-8"))
    for name, upload in files.items():
        content_type = upload.content_type or mimetypes.guess_type(upload.filename)[0] or "application/octet-stream"
        lines.append(f"--{boundary}".encode())
        lines.append(f'Content-Disposition: form-data; name="{_quote(name)}"; filename="{_quote(upload.filename)}"'.encode())
        lines.append(f"Content-Type: {_quote(content_type)}".encode())
        lines.append(b"")
        lines.append(upload.content)
    lines.append(f"--{boundary}--".encode())
    lines.append(b"")
    return b"\r\n".join(lines), f"multipart/form-data; boundary={boundary}"



def _quote(value: str) -> str:
    """Percent-encode the characters that would break a quoted header parameter."""

    return value.replace("\r", "%0D").replace("\n", "%0A").replace('"', "%22")

def _error_message(exc: urllib.error.HTTPError) -> str | None:
    """Extract a server-provided message from an HTTP error body, if present."""

    try:
        body = json.loads(exc.read().decode("utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return None
    if not isinstance(body, dict):
        return None
    message = body.get("message")
    if isinstance(message, dict):
        message = message.get("message")
    if isinstance(message, str) and message.strip():
        return message.strip()
    return None


def _invalid(endpoint: str) -> AssetApiError:
    logger.warning("API %s returned an unexpected payload shape", endpoint)
    return AssetApiError(INVALID_RESPONSE)


def _mapping(result: Any, key: str, *, endpoint: str) -> Any:
    """Return `result[key]` from an object result (None when the result is empty)."""

    if result is None:
        return None
    if not isinstance(result, dict):
        raise _invalid(endpoint)
    return result.get(key)


def _parse_rows(rows: Any, parse: Callable[[Any], T], *, endpoint: str) -> tuple[T, ...]:
    """Parse a list result row by row.

    Raises:
        AssetApiError: When `rows` is not a list or any row cannot be parsed.
    """

    if rows is None:
        return ()
    if not isinstance(rows, list):
        raise _invalid(endpoint)
    try:
        return tuple(parse(row) for row in rows)
    except (ValueError, TypeError, AttributeError, IndexError, OverflowError) as exc:
        logger.warning("API %s returned an unparsable row: %s", endpoint, exc)
        raise AssetApiError(INVALID_RESPONSE) from exc
