"""Forms for the Elimu Ride screens.

Each form validates user input and converts it into the typed payload the
asset API client sends, so views never assemble request bodies by hand.
"""

from __future__ import annotations

from decimal import Decimal

from django import forms

from core.api_client import UploadedImage
from core.assets import BusRegistration, RepairRecord, ValueAdjustment

REPAIR_STATUS_CHOICES = (
    ("Pending", "Pending"),
    ("Completed", "Completed"),
    ("Cancelled", "Cancelled"),
)

MAX_BUS_IMAGE_BYTES = 5 * 1024 * 1024


class LoginForm(forms.Form):
    """Validate sign-in credentials before calling the login endpoint."""

    email = forms.EmailField(
        label="Email",
        widget=forms.EmailInput(attrs={"autocomplete": "email", "placeholder": "you@school.ac.ke"}),
    )
    password = forms.CharField(
        label="Password",
        min_length=4,
        strip=False,
        widget=forms.PasswordInput(attrs={"autocomplete": "current-password"}),
    )
    remember = forms.BooleanField(required=False, initial=True, label="Remember me")

    def clean_email(self) -> str:
        """Return the trimmed email address."""

        return (self.cleaned_data.get("email") or "").strip()


class BusRegistrationForm(forms.Form):
    """Validate a new bus registration."""

    bus_no = forms.CharField(max_length=40, label="Bus number")
    purchase_date = forms.DateField(widget=forms.DateInput(attrs={"type": "date"}), label="Purchase date")
    purchase_amount = forms.DecimalField(min_value=Decimal("0"), max_digits=14, decimal_places=2, label="Purchase amount (KSh)")
    schedule_maintenance = forms.BooleanField(required=False, initial=True, label="Schedule maintenance")
    insurer_company_name = forms.CharField(max_length=140, label="Insurer")
    policy_number = forms.CharField(max_length=80, label="Policy number")
    insured_value = forms.DecimalField(min_value=Decimal("0"), max_digits=14, decimal_places=2, label="Insured value (KSh)")
    bus_image = forms.FileField(
        required=False,
        label="Bus photo",
        widget=forms.ClearableFileInput(attrs={"accept": "image/*"}),
    )

    def clean_bus_no(self) -> str:
        """Normalize the bus number to upper case without surrounding spaces."""

        return (self.cleaned_data.get("bus_no") or "").strip().upper()

    def clean_bus_image(self):
        """Reject non-image or oversized photos before they reach the API."""

        image = self.cleaned_data.get("bus_image")
        content_type = getattr(image, "content_type", "") or ""
        if image and not content_type.startswith("image/"):
            raise forms.ValidationError("Upload an image file (JPEG, PNG, ...).")
        if image and image.size > MAX_BUS_IMAGE_BYTES:
            raise forms.ValidationError("Bus photo must be 5 MB or smaller.")
        return image

    def to_registration(self) -> BusRegistration:
        """Return the validated registration payload."""

        data = self.cleaned_data
        return BusRegistration(
            bus_no=data["bus_no"],
            purchase_date=data["purchase_date"],
            purchase_amount=data["purchase_amount"],
            insurer_company_name=data["insurer_company_name"].strip(),
            policy_number=data["policy_number"].strip(),
            insured_value=data["insured_value"],
            schedule_maintenance=bool(data.get("schedule_maintenance")),
        )

    def to_upload(self) -> UploadedImage | None:
        """Return the attached photo, if any."""

        image = self.cleaned_data.get("bus_image")
        if not image:
            return None
        image.seek(0)
        return UploadedImage(
            filename=image.name,
            content=image.read(),
            content_type=getattr(image, "content_type", None),
        )


class AssetRepairForm(forms.Form):
    """Validate a repair record; receipt fields are required only with a receipt."""

    failure_date = forms.DateField(widget=forms.DateInput(attrs={"type": "date"}), label="Failure date")
    repair_status = forms.ChoiceField(choices=REPAIR_STATUS_CHOICES, initial="Pending", label="Repair status")
    create_receipt = forms.BooleanField(required=False, label="Create purchase receipt")
    party_conducting_repair = forms.CharField(required=False, max_length=140, label="Supplier conducting repair")
    specify_supplier_receipt_no = forms.CharField(required=False, max_length=80, label="Supplier receipt number")
    total_cost_incurred = forms.DecimalField(
        required=False,
        min_value=Decimal("0"),
        max_digits=14,
        decimal_places=2,
        label="Total cost incurred (KSh)",
    )
    failure_description = forms.CharField(widget=forms.Textarea(attrs={"rows": 3}), label="Failure description")
    actions_undertaken = forms.CharField(widget=forms.Textarea(attrs={"rows": 3}), label="Actions undertaken")

    def clean(self) -> dict:
        """Require supplier, receipt number and cost when a receipt is requested."""

        cleaned = super().clean()
        if cleaned.get("create_receipt"):
            required = {
                "party_conducting_repair": "Enter the supplier conducting the repair.",
                "specify_supplier_receipt_no": "Enter the supplier receipt number.",
                "total_cost_incurred": "Enter the total cost incurred.",
            }
            for field, message in required.items():
                if cleaned.get(field) in (None, ""):
                    self.add_error(field, message)
        return cleaned

    def to_repair(self) -> RepairRecord:
        """Return the validated repair payload."""

        data = self.cleaned_data
        return RepairRecord(
            failure_date=data["failure_date"],
            repair_status=data["repair_status"],
            failure_description=data["failure_description"].strip(),
            actions_undertaken=data["actions_undertaken"].strip(),
            create_receipt=bool(data.get("create_receipt")),
            party_conducting_repair=(data.get("party_conducting_repair") or "").strip(),
            supplier_receipt_no=(data.get("specify_supplier_receipt_no") or "").strip(),
            total_cost_incurred=data.get("total_cost_incurred"),
        )


class AssetValueAdjustmentForm(forms.Form):
    """Validate a book-value adjustment against the school's ledger accounts."""

    adjusted_on = forms.DateField(widget=forms.DateInput(attrs={"type": "date"}), label="Adjusted on")
    new_asset_value = forms.DecimalField(
        min_value=Decimal("0"),
        max_digits=14,
        decimal_places=2,
        label="New asset value (KSh)",
    )
    difference_account = forms.ChoiceField(required=False, choices=(), label="Difference account")

    def __init__(self, *args, accounts: tuple[str, ...] = (), **kwargs) -> None:
        """Initialize the form with the accounts offered as difference accounts."""

        super().__init__(*args, **kwargs)
        self.fields["difference_account"].choices = [("", "Default account")] + [
            (account, account) for account in accounts
        ]

    def to_adjustment(self) -> ValueAdjustment:
        """Return the validated adjustment payload."""

        data = self.cleaned_data
        return ValueAdjustment(
            adjusted_on=data["adjusted_on"],
            new_asset_value=data["new_asset_value"],
            difference_account=data.get("difference_account") or None,
        )
