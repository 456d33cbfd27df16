"""URL routing for reservation holds."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import ReservationHoldViewSet

router = DefaultRouter()
router.register(r"", ReservationHoldViewSet, basename="reservation")

urlpatterns = [
    path("", include(router.urls)),
]
