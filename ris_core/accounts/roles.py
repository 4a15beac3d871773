# ris_core/accounts/roles.py
"""
Role schema registry.

Each staff role carries a fixed set of extra attributes, described by one
serializer per role. The registry says which are required and which are
merely allowed, and turns a raw payload into the role's typed details
record. Fields outside the role's allowed set are dropped without error.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Mapping, Optional

from rest_framework import serializers
from rest_framework.exceptions import ValidationError

from ris_core.accounts.models import StaffRole

MAX_TEXT_LENGTH = 100


@dataclass(frozen=True)
class TechnicianDetails:
    employee_id: str
    department: list[str]
    qualification: str
    experience_years: Optional[int] = None
    reporting_supervisor: Optional[str] = None


@dataclass(frozen=True)
class FrontDeskDetails:
    assigned_counter: str
    shift_timing: str


@dataclass(frozen=True)
class RadiologistDetails:
    doctor_id: str
    registration_number: str
    specialty: str
    signature: Optional[str] = None
    peer_reviewer: Optional[bool] = None
    reporting_modality_access: list[str] = field(default_factory=list)


class TextListField(serializers.ListField):
    """List of non-blank strings; a bare string is taken as a one-item list."""

    def __init__(self, **kwargs):
        kwargs.setdefault("child", serializers.CharField(max_length=MAX_TEXT_LENGTH))
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        if isinstance(data, str):
            data = [data]
        return super().to_internal_value(data)


class TechnicianFieldsSerializer(serializers.Serializer):
    employee_id = serializers.CharField(max_length=MAX_TEXT_LENGTH)
    department = TextListField(allow_empty=False)
    qualification = serializers.CharField(max_length=MAX_TEXT_LENGTH)
    experience_years = serializers.IntegerField(min_value=0, required=False)
    reporting_supervisor = serializers.CharField(max_length=MAX_TEXT_LENGTH, required=False)


class FrontDeskFieldsSerializer(serializers.Serializer):
    assigned_counter = serializers.CharField(max_length=MAX_TEXT_LENGTH)
    shift_timing = serializers.CharField(max_length=MAX_TEXT_LENGTH)


class RadiologistFieldsSerializer(serializers.Serializer):
    doctor_id = serializers.CharField(max_length=MAX_TEXT_LENGTH)
    registration_number = serializers.CharField(max_length=MAX_TEXT_LENGTH)
    specialty = serializers.CharField(max_length=MAX_TEXT_LENGTH)
    signature = serializers.CharField(max_length=MAX_TEXT_LENGTH, required=False)
    peer_reviewer = serializers.BooleanField(required=False)
    reporting_modality_access = TextListField(required=False)


@dataclass(frozen=True)
class RoleSchema:
    role: str
    serializer_cls: type[serializers.Serializer]
    details_cls: type

    @property
    def required(self) -> frozenset[str]:
        fields = self.serializer_cls().fields
        return frozenset(name for name, f in fields.items() if f.required)

    @property
    def allowed(self) -> frozenset[str]:
        return frozenset(self.serializer_cls().fields)


ROLE_SCHEMAS: dict[str, RoleSchema] = {
    StaffRole.TECHNICIAN: RoleSchema(
        role=StaffRole.TECHNICIAN,
        serializer_cls=TechnicianFieldsSerializer,
        details_cls=TechnicianDetails,
    ),
    StaffRole.FRONT_DESK: RoleSchema(
        role=StaffRole.FRONT_DESK,
        serializer_cls=FrontDeskFieldsSerializer,
        details_cls=FrontDeskDetails,
    ),
    StaffRole.RADIOLOGIST: RoleSchema(
        role=StaffRole.RADIOLOGIST,
        serializer_cls=RadiologistFieldsSerializer,
        details_cls=RadiologistDetails,
    ),
}

# Every role-specific attribute known to any role.
ROLE_FIELDS: frozenset[str] = frozenset().union(*(s.allowed for s in ROLE_SCHEMAS.values()))


def schema_for(role: str) -> RoleSchema:
    try:
        return ROLE_SCHEMAS[role]
    except KeyError:
        raise ValidationError({"role": f'"{role}" is not a valid role.'})


def required_fields_for(role: str) -> frozenset[str]:
    return schema_for(role).required


def allowed_fields_for(role: str) -> frozenset[str]:
    return schema_for(role).allowed


def build_role_details(role: str, payload: Mapping[str, Any]):
    """
    Validate `payload` against the schema of `role` and return its details
    record. Unknown keys are ignored; None counts as absent.
    """
    schema = schema_for(role)
    data = {k: v for k, v in payload.items() if k in schema.allowed and v is not None}

    s = schema.serializer_cls(data=data)
    if not s.is_valid():
        raise ValidationError(s.errors)

    return schema.details_cls(**s.validated_data)


def details_to_dict(details) -> dict[str, Any]:
    """Serialize a details record for storage, leaving out unset optionals."""
    data = asdict(details)
    return {k: v for k, v in data.items() if v is not None and v != []}
