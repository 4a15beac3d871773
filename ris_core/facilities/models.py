# ris_core/facilities/models.py
from __future__ import annotations

import uuid

from django.core.validators import MaxValueValidator, MinValueValidator, RegexValidator
from django.db import models
from django.db.models.functions import Lower

from ris_core.common.models import TimeStampedModel

FACILITY_CODE_VALIDATOR = RegexValidator(
    regex=r"^[A-Za-z0-9_-]+$",
    message="Facility code may contain only letters, digits, hyphens and underscores.",
)


class FacilityType(models.TextChoices):
    HOSPITAL = "Hospital", "Hospital"
    DIAGNOSTIC_CENTER = "Diagnostic Center", "Diagnostic Center"
    CLINIC = "Clinic", "Clinic"


class IntegrationStatus(models.TextChoices):
    CONNECTED = "Connected", "Connected"
    PENDING = "Pending", "Pending"
    FAILED = "Failed", "Failed"


class FacilityStatus(models.TextChoices):
    ACTIVE = "Active", "Active"
    INACTIVE = "Inactive", "Inactive"
    SUSPENDED = "Suspended", "Suspended"


class Facility(TimeStampedModel):
    """
    A hospital / diagnostic center / clinic in the network.

    Notes:
    - Staff point at a facility through accounts.User.facility_id (a string),
      so there is no FK in either direction; see ris_core.associations.
    - created_by / modified_by hold the acting accounts.User id, also without FK.
    - Facilities are hard deleted, and only when no live staff reference them.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Basic info
    facility_name = models.CharField(max_length=200)
    facility_code = models.CharField(
        max_length=50,
        null=True,
        blank=True,
        validators=[FACILITY_CODE_VALIDATOR],
    )
    facility_type = models.CharField(max_length=24, choices=FacilityType.choices, db_index=True)
    facility_description = models.TextField(blank=True, default="")

    # Address & contact
    address_line_1 = models.CharField(max_length=255, blank=True, default="")
    address_line_2 = models.CharField(max_length=255, blank=True, default="")
    city = models.CharField(max_length=100, blank=True, default="")
    state = models.CharField(max_length=100, blank=True, default="")
    country = models.CharField(max_length=100, blank=True, default="")
    pincode = models.CharField(max_length=10, blank=True, default="")
    contact_number = models.CharField(max_length=15, blank=True, default="")
    email_id = models.EmailField(max_length=255, blank=True, default="")

    # Letterhead
    letterhead_logo = models.CharField(max_length=500, blank=True, default="")
    header_text = models.TextField(blank=True, default="")
    footer_text = models.TextField(blank=True, default="")

    # PACS / RIS integration
    pacs_ae_title = models.CharField(max_length=50, blank=True, default="")
    pacs_ip_address = models.GenericIPAddressField(null=True, blank=True)
    pacs_port = models.PositiveIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(65535)],
    )
    ris_url = models.URLField(max_length=500, blank=True, default="")
    integration_status = models.CharField(
        max_length=16,
        choices=IntegrationStatus.choices,
        default=IntegrationStatus.PENDING,
        db_index=True,
    )

    status = models.CharField(
        max_length=16,
        choices=FacilityStatus.choices,
        default=FacilityStatus.ACTIVE,
        db_index=True,
    )

    # Audit (logical references to accounts.User.id)
    created_by = models.UUIDField(null=True, blank=True, db_index=True)
    modified_by = models.UUIDField(null=True, blank=True)

    class Meta:
        db_table = "facilities_facility"
        constraints = [
            models.UniqueConstraint(fields=["facility_code"], name="uq_facility_code"),
            models.UniqueConstraint(Lower("facility_name"), name="uq_facility_name_ci"),
        ]
        indexes = [
            models.Index(fields=["facility_type", "status"], name="idx_facility_type_status"),
        ]

    def __str__(self) -> str:
        if self.facility_code:
            return f"{self.facility_name} ({self.facility_code})"
        return self.facility_name
