"""Typed views of the remote asset API payloads.

The remote API returns loosely typed JSON (numbers as strings, missing keys,
`0/1` flags). These dataclasses normalize the fields the screens use so
templates and views never index into raw dictionaries.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from analysis.dto import ActivityEvent, ValuePoint


def _text(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    return "" if value is None else str(value)


def parse_number(value: object) -> float:
    """Coerce a JSON number or numeric string into a float (0.0 when blank)."""

    if value is None or value == "":
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(Decimal(str(value).replace(",", "").strip()))
    except InvalidOperation as exc:
        raise ValueError(f"Not a number: {value!r}") from exc


def _flag(value: object) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes"}
    return bool(value)


def parse_api_date(value: object) -> date | None:
    """Parse the leading `YYYY-MM-DD` part of an API date/datetime string."""

    if not value:
        return None
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


@dataclass(frozen=True, slots=True)
class Bus:
    """A registered school bus (an asset in the remote system).

    Attributes:
        asset_no: Remote asset identifier (used in every per-bus call).
        bus_no: Registration plate / fleet number.
        status: Free-text asset status; empty in list responses.
        purchase_amount: Net purchase amount.
        gross_purchase_amount: Gross purchase amount.
        insured_value: Insured value.
        maintenance_scheduled: Whether scheduled maintenance is enabled.
        image_url: Absolute or API-relative image URL, if any.
    """

    asset_no: str
    bus_no: str
    item_code: str = ""
    company: str = ""
    status: str = ""
    purchase_date: date | None = None
    available_for_use_date: date | None = None
    purchase_amount: float = 0.0
    gross_purchase_amount: float = 0.0
    asset_quantity: int = 1
    policy_number: str = ""
    insurer: str = ""
    insured_value: float = 0.0
    maintenance_scheduled: bool = False
    docstatus: int = 0
    image_url: str = ""

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Bus":
        """Build a Bus from a `get_registered_buses`/`get_bus_details` row."""

        return cls(
            asset_no=_text(payload, "asset_no"),
            bus_no=_text(payload, "bus_no"),
            item_code=_text(payload, "item_code"),
            company=_text(payload, "company"),
            status=_text(payload, "status"),
            purchase_date=parse_api_date(payload.get("purchase_date")),
            available_for_use_date=parse_api_date(payload.get("available_for_use_date")),
            purchase_amount=parse_number(payload.get("purchase_amount")),
            gross_purchase_amount=parse_number(payload.get("gross_purchase_amount")),
            asset_quantity=int(parse_number(payload.get("asset_quantity")) or 1),
            policy_number=_text(payload, "policy_number"),
            insurer=_text(payload, "insurer"),
            insured_value=parse_number(payload.get("insured_value")),
            maintenance_scheduled=_flag(payload.get("maintenance_scheduled")),
            docstatus=int(parse_number(payload.get("docstatus"))),
            image_url=_text(payload, "image_url") or _text(payload, "image"),
        )


def activity_from_payload(payload: dict[str, Any]) -> ActivityEvent:
    """Build an ActivityEvent from a `get_asset_activity` row."""

    return ActivityEvent(
        timestamp=_text(payload, "date"),
        actor=_text(payload, "user"),
        description=_text(payload, "subject"),
        actor_full_name=_text(payload, "user_full_name") or None,
    )


def value_point_from_payload(payload: dict[str, Any]) -> ValuePoint | None:
    """Build a ValuePoint from a `get_asset_value_series` row (None if undated)."""

    day = parse_api_date(payload.get("date"))
    if day is None:
        return None
    return ValuePoint(day=day, amount=parse_number(payload.get("amount")))


@dataclass(frozen=True, slots=True)
class BusRegistration:
    """Fields submitted when registering a new bus."""

    bus_no: str
    purchase_date: date
    purchase_amount: Decimal
    insurer_company_name: str
    policy_number: str
    insured_value: Decimal
    schedule_maintenance: bool = True

    def as_form_fields(self) -> dict[str, str]:
        """Return the multipart form fields expected by the API."""

        return {
            "bus_no": self.bus_no,
            "purchase_date": self.purchase_date.isoformat(),
            "purchase_amount": str(self.purchase_amount),
            "schedule_maintenance": "1" if self.schedule_maintenance else "0",
            "insurer_company_name": self.insurer_company_name,
            "policy_number": self.policy_number,
            "insured_value": str(self.insured_value),
        }


@dataclass(frozen=True, slots=True)
class RepairRecord:
    """Fields submitted when recording an asset repair."""

    failure_date: date
    repair_status: str
    failure_description: str
    actions_undertaken: str
    create_receipt: bool = False
    party_conducting_repair: str = ""
    supplier_receipt_no: str = ""
    total_cost_incurred: Decimal | None = None

    def as_payload(self, asset_no: str) -> dict[str, str]:
        """Return the JSON body for `create_asset_repair`."""

        return {
            "asset": asset_no,
            "failure_date": self.failure_date.isoformat(),
            "repair_status": self.repair_status,
            "create_receipt": "1" if self.create_receipt else "0",
            "party_conducting_repair": self.party_conducting_repair,
            "specify_supplier_receipt_no": self.supplier_receipt_no,
            "total_cost_incurred": "" if self.total_cost_incurred is None else str(self.total_cost_incurred),
            "failure_description": self.failure_description,
            "actions_undertaken": self.actions_undertaken,
        }


@dataclass(frozen=True, slots=True)
class ValueAdjustment:
    """Fields submitted when adjusting an asset's book value."""

    adjusted_on: date
    new_asset_value: Decimal
    difference_account: str | None = None

    def as_payload(self, asset_no: str) -> dict[str, str]:
        """Return the JSON body for `adjust_asset_value` (account omitted when unset)."""

        payload = {
            "asset_name": asset_no,
            "adjusted_on": self.adjusted_on.isoformat(),
            "new_asset_value": str(self.new_asset_value),
        }
        if self.difference_account:
            payload["difference_account"] = self.difference_account
        return payload
