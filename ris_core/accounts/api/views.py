# ris_core/accounts/api/views.py
from __future__ import annotations

from uuid import UUID

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response

from ris_core.accounts.api.serializers import (
    ChangePasswordSerializer,
    UserCreateSerializer,
    UserDetailSerializer,
    UserSerializer,
    UserUpdateSerializer,
)
from ris_core.accounts.models import User
from ris_core.accounts.selectors import get_user, list_users
from ris_core.accounts.services import UserDirectory
from ris_core.common.api.exceptions import EntityNotFound
from ris_core.common.api.pagination import paginate
from ris_core.common.permissions import IsDirectoryAdminOrSelf, is_directory_admin

# Fields an account holder may not change on their own record.
ADMIN_ONLY_FIELDS = frozenset({"role", "status", "facility_id", "role_fields", "password"})


def _parse_user_id(pk) -> UUID:
    try:
        return UUID(str(pk))
    except (TypeError, ValueError):
        raise EntityNotFound("User", pk)


class UserViewSet(viewsets.ViewSet):
    """
    Thin API layer over the staff directory:
    - validation via serializers
    - reads via selectors
    - writes via UserDirectory
    """
    permission_classes = [IsDirectoryAdminOrSelf]

    serializer_class = UserSerializer
    queryset = User.objects.none()

    def _get_object(self, request, pk) -> User:
        user = get_user(user_id=_parse_user_id(pk))
        self.check_object_permissions(request, user)
        return user

    @extend_schema(
        tags=["Users"],
        responses={200: UserSerializer(many=True)},
        parameters=[
            OpenApiParameter(name="role", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="status", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(
                name="facility_id", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False
            ),
            OpenApiParameter(
                name="search",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Case-insensitive match on full name, email or username.",
            ),
            OpenApiParameter(name="page", type=OpenApiTypes.INT, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="limit", type=OpenApiTypes.INT, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        qp = request.query_params
        qs = list_users(
            role=qp.get("role") or None,
            status=qp.get("status") or None,
            facility_id=qp.get("facility_id") or None,
            search=qp.get("search") or None,
        )
        return paginate(request, qs, UserSerializer)

    @extend_schema(tags=["Users"], request=UserCreateSerializer, responses={201: UserSerializer})
    def create(self, request):
        s = UserCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        user = UserDirectory.create(actor_id=request.user.id, **s.validated_data)
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Users"], responses={200: UserDetailSerializer})
    def retrieve(self, request, pk=None):
        user = self._get_object(request, pk)
        return Response(UserDetailSerializer(user).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Users"], request=UserUpdateSerializer, responses={200: UserSerializer})
    def partial_update(self, request, pk=None):
        user = self._get_object(request, pk)

        s = UserUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        d = s.validated_data

        if not is_directory_admin(request.user) and ADMIN_ONLY_FIELDS.intersection(d):
            raise PermissionDenied(
                "Only an administrator can change role, status, facility or password here. "
                "Use the password endpoint to change your own password."
            )

        updated = UserDirectory.update(actor_id=request.user.id, user_id=user.id, data=d)
        return Response(UserSerializer(updated).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Users"], request=UserUpdateSerializer, responses={200: UserSerializer})
    def update(self, request, pk=None):
        # PUT is partial as well.
        return self.partial_update(request, pk=pk)

    @extend_schema(tags=["Users"], responses={204: None})
    def destroy(self, request, pk=None):
        user = self._get_object(request, pk)
        UserDirectory.soft_delete(actor_id=request.user.id, user_id=user.id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["Users"], request=ChangePasswordSerializer, responses={200: UserSerializer})
    @action(detail=True, methods=["post"], url_path="password")
    def change_password(self, request, pk=None):
        user = get_user(user_id=_parse_user_id(pk))
        if str(user.id) != str(request.user.id):
            raise PermissionDenied("You can only change your own password.")

        s = ChangePasswordSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        updated = UserDirectory.change_password(
            user_id=user.id,
            current_password=s.validated_data["current_password"],
            new_password=s.validated_data["new_password"],
        )
        return Response(UserSerializer(updated).data, status=status.HTTP_200_OK)
