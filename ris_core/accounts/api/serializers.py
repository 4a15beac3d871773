# ris_core/accounts/api/serializers.py
from __future__ import annotations

from django.core.validators import RegexValidator
from django.utils import timezone
from drf_spectacular.utils import extend_schema_field
from rest_framework import serializers

from ris_core.accounts.models import AccountStatus, Gender, StaffRole, User
from ris_core.accounts.roles import ROLE_FIELDS
from ris_core.accounts.validators import mobile_number_validator
from ris_core.associations.resolver import resolve_facility, resolve_or_none

username_validator = RegexValidator(
    regex=r"^[\w.@+-]+$",
    message="Username may contain only letters, digits and @/./+/-/_ characters.",
)


def _validate_date_of_birth(value):
    if value and value > timezone.localdate():
        raise serializers.ValidationError("Date of birth cannot be in the future.")
    return value


class RoleFieldsMixin:
    """
    Role-specific attributes arrive flat (employee_id, doctor_id, ...) or
    nested under "role_details". They are collected untouched into
    validated_data["role_fields"]; the role registry validates them.
    """

    def to_internal_value(self, data):
        validated = super().to_internal_value(data)

        role_fields = {}
        nested = data.get("role_details") if hasattr(data, "get") else None
        if isinstance(nested, dict):
            role_fields.update({k: v for k, v in nested.items() if k in ROLE_FIELDS})
        role_fields.update({k: data[k] for k in ROLE_FIELDS if k in data})

        if role_fields:
            validated["role_fields"] = role_fields
        return validated


class UserCreateSerializer(RoleFieldsMixin, serializers.Serializer):
    username = serializers.CharField(min_length=3, max_length=50, validators=[username_validator])
    email = serializers.EmailField(max_length=100)
    mobile_number = serializers.CharField(max_length=10, validators=[mobile_number_validator])
    password = serializers.CharField(write_only=True, trim_whitespace=False, max_length=128)
    full_name = serializers.CharField(min_length=2, max_length=100)
    gender = serializers.ChoiceField(choices=Gender.choices)
    date_of_birth = serializers.DateField(required=False, allow_null=True, validators=[_validate_date_of_birth])
    role = serializers.ChoiceField(choices=StaffRole.choices)
    facility_id = serializers.CharField(max_length=64, required=False, allow_null=True, allow_blank=True)


class UserUpdateSerializer(RoleFieldsMixin, serializers.Serializer):
    """
    Partial update contract (PATCH / PUT). Unknown keys, including id,
    is_deleted and deleted_at, are ignored.
    """
    username = serializers.CharField(min_length=3, max_length=50, required=False, validators=[username_validator])
    email = serializers.EmailField(max_length=100, required=False)
    mobile_number = serializers.CharField(max_length=10, required=False, validators=[mobile_number_validator])
    password = serializers.CharField(write_only=True, trim_whitespace=False, max_length=128, required=False)
    full_name = serializers.CharField(min_length=2, max_length=100, required=False)
    gender = serializers.ChoiceField(choices=Gender.choices, required=False)
    date_of_birth = serializers.DateField(required=False, allow_null=True, validators=[_validate_date_of_birth])
    role = serializers.ChoiceField(choices=StaffRole.choices, required=False)
    status = serializers.ChoiceField(choices=AccountStatus.choices, required=False)
    facility_id = serializers.CharField(max_length=64, required=False, allow_null=True, allow_blank=True)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(trim_whitespace=False)
    new_password = serializers.CharField(trim_whitespace=False, max_length=128)


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "mobile_number",
            "full_name",
            "gender",
            "date_of_birth",
            "status",
            "role",
            "role_details",
            "facility_id",
            "last_login",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class FacilityRefSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    facility_name = serializers.CharField()
    facility_code = serializers.CharField(allow_null=True)
    facility_type = serializers.CharField()
    status = serializers.CharField()


class UserDetailSerializer(UserSerializer):
    """UserSerializer plus the resolved facility (null when the reference dangles)."""
    facility = serializers.SerializerMethodField()

    class Meta(UserSerializer.Meta):
        fields = UserSerializer.Meta.fields + ["facility"]

    @extend_schema_field(FacilityRefSerializer(allow_null=True))
    def get_facility(self, obj):
        facility = resolve_or_none(resolve_facility, obj.facility_id)
        if facility is None:
            return None
        return FacilityRefSerializer(facility).data
