# ris_core/facilities/api/views.py
from __future__ import annotations

from uuid import UUID

from django_filters.utils import translate_validation
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from ris_core.associations.resolver import resolve_staff
from ris_core.common.api.exceptions import EntityNotFound
from ris_core.common.api.pagination import paginate
from ris_core.common.permissions import IsDirectoryAdminOrReadOnly
from ris_core.facilities.api.filters import FacilityFilter
from ris_core.facilities.api.serializers import (
    FacilityCreateSerializer,
    FacilityDetailSerializer,
    FacilitySerializer,
    FacilityStatsSerializer,
    FacilityUpdateSerializer,
    UserSummarySerializer,
)
from ris_core.facilities.models import Facility
from ris_core.facilities.selectors import facility_stats, get_facility, get_with_audit, list_facilities
from ris_core.facilities.services import FacilityRegistry


def _parse_facility_id(pk) -> UUID:
    try:
        return UUID(str(pk))
    except (TypeError, ValueError):
        raise EntityNotFound("Facility", pk)


class FacilityViewSet(viewsets.ViewSet):
    permission_classes = [IsDirectoryAdminOrReadOnly]

    serializer_class = FacilitySerializer
    queryset = Facility.objects.none()

    @extend_schema(
        tags=["Facilities"],
        responses={200: FacilitySerializer(many=True)},
        parameters=[
            OpenApiParameter(
                name="facility_type", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False
            ),
            OpenApiParameter(name="status", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(
                name="integration_status", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False
            ),
            OpenApiParameter(name="page", type=OpenApiTypes.INT, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="limit", type=OpenApiTypes.INT, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        f = FacilityFilter(request.query_params, queryset=list_facilities())
        if not f.is_valid():
            raise translate_validation(f.errors)
        return paginate(request, f.qs, FacilitySerializer)

    @extend_schema(tags=["Facilities"], request=FacilityCreateSerializer, responses={201: FacilitySerializer})
    def create(self, request):
        s = FacilityCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        obj = FacilityRegistry.create(actor_id=request.user.id, data=s.validated_data)
        return Response(FacilitySerializer(obj).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Facilities"], responses={200: FacilityDetailSerializer})
    def retrieve(self, request, pk=None):
        detail = get_with_audit(facility_id=_parse_facility_id(pk))
        return Response(FacilityDetailSerializer(detail).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Facilities"], request=FacilityUpdateSerializer, responses={200: FacilitySerializer})
    def partial_update(self, request, pk=None):
        facility_id = _parse_facility_id(pk)

        s = FacilityUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        obj = FacilityRegistry.update(actor_id=request.user.id, facility_id=facility_id, data=s.validated_data)
        return Response(FacilitySerializer(obj).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Facilities"], request=FacilityUpdateSerializer, responses={200: FacilitySerializer})
    def update(self, request, pk=None):
        return self.partial_update(request, pk=pk)

    @extend_schema(tags=["Facilities"], responses={204: None})
    def destroy(self, request, pk=None):
        FacilityRegistry.delete(actor_id=request.user.id, facility_id=_parse_facility_id(pk))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["Facilities"], responses={200: UserSummarySerializer(many=True)})
    @action(detail=True, methods=["get"], url_path="staff")
    def staff(self, request, pk=None):
        facility = get_facility(facility_id=_parse_facility_id(pk))
        members = resolve_staff(facility.id)
        return Response(UserSummarySerializer(members, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Facilities"], responses={200: FacilityStatsSerializer})
    @action(detail=False, methods=["get"], url_path="stats")
    def stats(self, request):
        return Response(FacilityStatsSerializer(facility_stats()).data, status=status.HTTP_200_OK)
