# ris_core/accounts/models.py
from __future__ import annotations

import uuid

from django.contrib.auth.base_user import AbstractBaseUser, BaseUserManager
from django.contrib.auth.models import PermissionsMixin
from django.db import models
from django.db.models import Q
from django.db.models.functions import Lower

from ris_core.common.models import TimeStampedModel


class StaffRole(models.TextChoices):
    TECHNICIAN = "Technician", "Technician"
    FRONT_DESK = "FrontDesk", "Front Desk"
    RADIOLOGIST = "Radiologist", "Radiologist"


class Gender(models.TextChoices):
    MALE = "Male", "Male"
    FEMALE = "Female", "Female"
    OTHER = "Other", "Other"


class AccountStatus(models.TextChoices):
    ACTIVE = "Active", "Active"
    INACTIVE = "Inactive", "Inactive"


class UserManager(BaseUserManager):
    """
    Default manager: soft-deleted accounts are invisible.
    Every read path goes through here unless it explicitly opts into
    `User.all_objects`.
    """

    def get_queryset(self):
        return super().get_queryset().filter(is_deleted=False)


class AllUsersManager(BaseUserManager):
    """Unfiltered manager, including soft-deleted rows."""


class User(AbstractBaseUser, PermissionsMixin, TimeStampedModel):
    """
    Staff account (technician, front desk, radiologist).

    Notes:
    - `password` holds the hash only (column `password_hash`).
    - `facility_id` is a logical reference to facilities.Facility.id kept as a
      plain string; it is resolved by ris_core.associations, never by FK.
    - `role_details` carries exactly the attribute set allowed for `role`
      (see ris_core.accounts.roles).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Identity
    username = models.CharField(max_length=50, db_index=True)
    email = models.EmailField(max_length=100, db_index=True)
    mobile_number = models.CharField(max_length=10, db_index=True)

    # Security
    password = models.CharField("password", max_length=128, db_column="password_hash")

    # Profile
    full_name = models.CharField(max_length=100)
    gender = models.CharField(max_length=8, choices=Gender.choices)
    date_of_birth = models.DateField(null=True, blank=True)

    status = models.CharField(
        max_length=10,
        choices=AccountStatus.choices,
        default=AccountStatus.INACTIVE,
        db_index=True,
    )

    # Affiliation (logical FK, see class docstring)
    facility_id = models.CharField(max_length=64, null=True, blank=True, db_index=True)

    # Role discriminant + role-shaped payload
    role = models.CharField(max_length=16, choices=StaffRole.choices, db_index=True)
    role_details = models.JSONField(default=dict, blank=True)

    # Soft delete
    is_deleted = models.BooleanField(default=False, db_index=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    # Django admin access
    is_staff = models.BooleanField(default=False)

    objects = UserManager()
    all_objects = AllUsersManager()

    USERNAME_FIELD = "username"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS = ["email", "mobile_number", "full_name"]

    class Meta:
        db_table = "accounts_user"
        constraints = [
            models.UniqueConstraint(
                Lower("email"),
                condition=Q(is_deleted=False),
                name="uq_user_email_live",
            ),
            models.UniqueConstraint(
                fields=["username"],
                condition=Q(is_deleted=False),
                name="uq_user_username_live",
            ),
            models.UniqueConstraint(
                fields=["mobile_number"],
                condition=Q(is_deleted=False),
                name="uq_user_mobile_live",
            ),
        ]
        indexes = [
            models.Index(fields=["role", "status"], name="idx_user_role_status"),
            models.Index(fields=["facility_id", "is_deleted"], name="idx_user_facility_live"),
        ]

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"

    @property
    def is_active(self) -> bool:
        # Consulted by Django auth and simplejwt when resolving tokens.
        return self.status == AccountStatus.ACTIVE and not self.is_deleted
