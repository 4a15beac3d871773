# ris_core/facilities/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from ris_core.facilities.models import (
    FACILITY_CODE_VALIDATOR,
    Facility,
    FacilityStatus,
    FacilityType,
    IntegrationStatus,
)


class FacilitySerializer(serializers.ModelSerializer):
    class Meta:
        model = Facility
        fields = [
            "id",
            "facility_name",
            "facility_code",
            "facility_type",
            "facility_description",
            "address_line_1",
            "address_line_2",
            "city",
            "state",
            "country",
            "pincode",
            "contact_number",
            "email_id",
            "letterhead_logo",
            "header_text",
            "footer_text",
            "pacs_ae_title",
            "pacs_ip_address",
            "pacs_port",
            "ris_url",
            "integration_status",
            "status",
            "created_by",
            "modified_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class UserSummarySerializer(serializers.Serializer):
    id = serializers.UUIDField()
    username = serializers.CharField()
    full_name = serializers.CharField()
    email = serializers.EmailField()
    role = serializers.CharField()
    status = serializers.CharField()


class FacilityDetailSerializer(serializers.Serializer):
    """Serializes selectors.FacilityWithAudit: the facility flattened, audit users nested."""
    created_by_user = UserSummarySerializer(allow_null=True)
    modified_by_user = UserSummarySerializer(allow_null=True)

    def to_representation(self, instance):
        data = FacilitySerializer(instance.facility).data
        data.update(super().to_representation(instance))
        return data


class FacilityStatsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    by_type = serializers.DictField(child=serializers.IntegerField())
    by_status = serializers.DictField(child=serializers.IntegerField())
    by_integration_status = serializers.DictField(child=serializers.IntegerField())


class FacilityCreateSerializer(serializers.Serializer):
    facility_name = serializers.CharField(min_length=3, max_length=200)
    facility_code = serializers.CharField(
        max_length=50,
        required=False,
        allow_null=True,
        allow_blank=True,
        validators=[FACILITY_CODE_VALIDATOR],
    )
    facility_type = serializers.ChoiceField(choices=FacilityType.choices)
    facility_description = serializers.CharField(required=False, allow_blank=True, default="")

    address_line_1 = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    address_line_2 = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    city = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    state = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    country = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    pincode = serializers.CharField(max_length=10, required=False, allow_blank=True, default="")
    contact_number = serializers.CharField(max_length=15, required=False, allow_blank=True, default="")
    email_id = serializers.EmailField(max_length=255, required=False, allow_blank=True, default="")

    letterhead_logo = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")
    header_text = serializers.CharField(required=False, allow_blank=True, default="")
    footer_text = serializers.CharField(required=False, allow_blank=True, default="")

    pacs_ae_title = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    pacs_ip_address = serializers.IPAddressField(required=False, allow_null=True, allow_blank=True)
    pacs_port = serializers.IntegerField(min_value=1, max_value=65535, required=False, allow_null=True)
    ris_url = serializers.URLField(max_length=500, required=False, allow_blank=True, default="")
    integration_status = serializers.ChoiceField(choices=IntegrationStatus.choices, required=False)

    status = serializers.ChoiceField(choices=FacilityStatus.choices, required=False)


class FacilityUpdateSerializer(serializers.Serializer):
    """
    Partial update contract. id, created_by and created_at are not part of
    it and are ignored if sent.
    """
    facility_name = serializers.CharField(min_length=3, max_length=200, required=False)
    facility_code = serializers.CharField(
        max_length=50,
        required=False,
        allow_null=True,
        allow_blank=True,
        validators=[FACILITY_CODE_VALIDATOR],
    )
    facility_type = serializers.ChoiceField(choices=FacilityType.choices, required=False)
    facility_description = serializers.CharField(required=False, allow_blank=True)

    address_line_1 = serializers.CharField(max_length=255, required=False, allow_blank=True)
    address_line_2 = serializers.CharField(max_length=255, required=False, allow_blank=True)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    state = serializers.CharField(max_length=100, required=False, allow_blank=True)
    country = serializers.CharField(max_length=100, required=False, allow_blank=True)
    pincode = serializers.CharField(max_length=10, required=False, allow_blank=True)
    contact_number = serializers.CharField(max_length=15, required=False, allow_blank=True)
    email_id = serializers.EmailField(max_length=255, required=False, allow_blank=True)

    letterhead_logo = serializers.CharField(max_length=500, required=False, allow_blank=True)
    header_text = serializers.CharField(required=False, allow_blank=True)
    footer_text = serializers.CharField(required=False, allow_blank=True)

    pacs_ae_title = serializers.CharField(max_length=50, required=False, allow_blank=True)
    pacs_ip_address = serializers.IPAddressField(required=False, allow_null=True, allow_blank=True)
    pacs_port = serializers.IntegerField(min_value=1, max_value=65535, required=False, allow_null=True)
    ris_url = serializers.URLField(max_length=500, required=False, allow_blank=True)
    integration_status = serializers.ChoiceField(choices=IntegrationStatus.choices, required=False)

    status = serializers.ChoiceField(choices=FacilityStatus.choices, required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs
