"""Unit tests for form validation and payload conversion."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from core.forms import (
    MAX_BUS_IMAGE_BYTES,
    AssetRepairForm,
    AssetValueAdjustmentForm,
    BusRegistrationForm,
    LoginForm,
)

pytestmark = pytest.mark.unit

REGISTRATION = {
    "bus_no": " kda 123a ",
    "purchase_date": "2024-01-05",
    "purchase_amount": "4500000",
    "schedule_maintenance": "on",
    "insurer_company_name": "Jubilee Insurance",
    "policy_number": "POL-77",
    "insured_value": "4000000",
}


def test_login_form_requires_email_and_password() -> None:
    """Short passwords and invalid emails are rejected."""

    form = LoginForm({"email": "not-an-email", "password": "abc"})
    assert not form.is_valid()
    assert set(form.errors) == {"email", "password"}

    form = LoginForm({"email": "clerk@school.ac.ke", "password": "secret"})
    assert form.is_valid()
    assert form.cleaned_data["remember"] is False


def test_registration_form_builds_payload() -> None:
    """Valid registrations become a BusRegistration with a normalized bus number."""

    form = BusRegistrationForm(REGISTRATION)
    assert form.is_valid(), form.errors
    registration = form.to_registration()
    assert registration.bus_no == "KDA 123A"
    assert registration.purchase_date == date(2024, 1, 5)
    assert registration.purchase_amount == Decimal("4500000")
    assert registration.schedule_maintenance is True
    assert form.to_upload() is None


def test_registration_form_accepts_image_upload() -> None:
    """Image uploads are converted into an UploadedImage."""

    photo = SimpleUploadedFile("bus.png", b"\x89PNG data", content_type="image/png")
    form = BusRegistrationForm(REGISTRATION, {"bus_image": photo})
    assert form.is_valid(), form.errors
    upload = form.to_upload()
    assert upload.filename == "bus.png"
    assert upload.content == b"\x89PNG data"
    assert upload.content_type == "image/png"


def test_registration_form_rejects_non_images_and_large_files() -> None:
    """Only image uploads up to the size limit are accepted."""

    text = SimpleUploadedFile("notes.txt", b"hello", content_type="text/plain")
    assert "bus_image" in BusRegistrationForm(REGISTRATION, {"bus_image": text}).errors

    huge = SimpleUploadedFile("bus.jpg", b"x" * (MAX_BUS_IMAGE_BYTES + 1), content_type="image/jpeg")
    assert "bus_image" in BusRegistrationForm(REGISTRATION, {"bus_image": huge}).errors


def test_registration_form_rejects_negative_amounts() -> None:
    """Money fields must be non-negative."""

    form = BusRegistrationForm({**REGISTRATION, "purchase_amount": "-1"})
    assert "purchase_amount" in form.errors


REPAIR = {
    "failure_date": "2025-01-02",
    "repair_status": "Pending",
    "failure_description": "Brake failure",
    "actions_undertaken": "Towed to garage",
}


def test_repair_form_without_receipt() -> None:
    """Receipt fields are optional when no receipt is requested."""

    form = AssetRepairForm(REPAIR)
    assert form.is_valid(), form.errors
    repair = form.to_repair()
    assert repair.create_receipt is False
    assert repair.total_cost_incurred is None
    assert repair.as_payload("ACC-1")["total_cost_incurred"] == ""


def test_repair_form_requires_receipt_details() -> None:
    """Requesting a receipt requires supplier, receipt number and cost."""

    form = AssetRepairForm({**REPAIR, "create_receipt": "on"})
    assert not form.is_valid()
    assert {"party_conducting_repair", "specify_supplier_receipt_no", "total_cost_incurred"} <= set(form.errors)

    form = AssetRepairForm(
        {
            **REPAIR,
            "create_receipt": "on",
            "party_conducting_repair": "Nairobi Motors",
            "specify_supplier_receipt_no": "R-9",
            "total_cost_incurred": "12000",
        }
    )
    assert form.is_valid(), form.errors
    payload = form.to_repair().as_payload("ACC-1")
    assert payload["create_receipt"] == "1"
    assert payload["specify_supplier_receipt_no"] == "R-9"
    assert payload["total_cost_incurred"] == "12000"


def test_adjustment_form_limits_accounts() -> None:
    """The difference account must be one of the school's accounts."""

    accounts = ("Depreciation - ER", "Cash - ER")
    data = {"adjusted_on": "2025-01-03", "new_asset_value": "3000000", "difference_account": "Depreciation - ER"}
    form = AssetValueAdjustmentForm(data, accounts=accounts)
    assert form.is_valid(), form.errors
    adjustment = form.to_adjustment()
    assert adjustment.difference_account == "Depreciation - ER"
    assert adjustment.as_payload("ACC-1")["difference_account"] == "Depreciation - ER"

    form = AssetValueAdjustmentForm({**data, "difference_account": "Unknown"}, accounts=accounts)
    assert "difference_account" in form.errors


def test_adjustment_form_allows_default_account() -> None:
    """Leaving the account blank omits it from the payload."""

    form = AssetValueAdjustmentForm({"adjusted_on": "2025-01-03", "new_asset_value": "10"}, accounts=())
    assert form.is_valid(), form.errors
    assert "difference_account" not in form.to_adjustment().as_payload("ACC-1")
