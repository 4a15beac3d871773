# ris_core/iam/api/me.py

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from ris_core.accounts.api.serializers import UserDetailSerializer


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: UserDetailSerializer}, tags=["IAM"])
    def get(self, request):
        """The authenticated account, with its facility resolved."""
        return Response(UserDetailSerializer(request.user).data, status=status.HTTP_200_OK)
