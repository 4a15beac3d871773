# ris_core/api/urls.py
from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter

from ris_core.accounts.api.views import UserViewSet
from ris_core.facilities.api.views import FacilityViewSet
from ris_core.iam.api.auth import LoginView, LogoutView, RefreshView
from ris_core.iam.api.me import MeView

router = DefaultRouter()
router.register(r"users", UserViewSet, basename="users")
router.register(r"facilities", FacilityViewSet, basename="facilities")

urlpatterns = [
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/refresh/", RefreshView.as_view(), name="refresh"),
    path("auth/logout/", LogoutView.as_view(), name="logout"),
    path("me/", MeView.as_view(), name="me"),

    # Router URLs last (so explicit paths win if ever overlapping)
    *router.urls,
]
