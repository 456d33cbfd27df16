"""API views for reservation holds."""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore

from .application.engine import booking_engine
from .filters import ReservationHoldFilterSet
from .models import ReservationHold
from .serializers import (
    ReservationHoldCancelSerializer,
    ReservationHoldCreateSerializer,
    ReservationHoldSerializer,
)


class IsHoldStakeholder(permissions.BasePermission):
    """Staff see every hold, guests only the holds they placed."""

    def has_object_permission(self, request, view, obj: ReservationHold):  # type: ignore
        user = request.user
        if not user.is_authenticated:
            return False
        if user.is_staff or user.is_superuser:
            return True
        return obj.created_by_id == user.id


class ReservationHoldViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Create holds and drive them through confirm / cancel / complete."""

    queryset = ReservationHold.objects.select_related("room").all()
    serializer_class = ReservationHoldSerializer
    permission_classes = [permissions.IsAuthenticated, IsHoldStakeholder]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = ReservationHoldFilterSet
    ordering_fields = ["created_at", "check_in", "expires_at"]

    def get_queryset(self):  # type: ignore
        user = self.request.user
        qs = super().get_queryset()
        if user.is_staff or user.is_superuser:
            return qs
        return qs.filter(created_by=user)

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return ReservationHoldCreateSerializer
        return ReservationHoldSerializer

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        hold = booking_engine.create_hold(
            data["room"],
            data["check_in"],
            data["check_out"],
            units=data["units"],
            guest_name=data["guest_name"],
            guest_email=data["guest_email"],
            created_by=request.user,
        )
        return self._hold_response(hold.id, status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def confirm(self, request, pk=None):  # type: ignore
        hold = self.get_object()
        booking_engine.confirm_reservation(hold.pk)
        return self._hold_response(hold.pk)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        hold = self.get_object()
        serializer = ReservationHoldCancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking_engine.cancel_reservation(hold.pk, serializer.validated_data["reason"])
        return self._hold_response(hold.pk)

    @action(detail=True, methods=["post"], permission_classes=[permissions.IsAdminUser])
    def complete(self, request, pk=None):  # type: ignore
        hold = self.get_object()
        booking_engine.complete_reservation(hold.pk)
        return self._hold_response(hold.pk)

    def _hold_response(self, hold_id: int, http_status: int = status.HTTP_200_OK) -> Response:
        row = ReservationHold.objects.select_related("room").get(pk=hold_id)
        data = ReservationHoldSerializer(row, context=self.get_serializer_context()).data
        return Response(data, status=http_status)
