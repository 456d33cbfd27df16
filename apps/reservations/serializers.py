"""Serializers for the reservation API."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import ReservationHold


class ReservationHoldCreateSerializer(serializers.Serializer):
    """Guest request for a pending hold."""

    room = serializers.IntegerField()
    check_in = serializers.DateField()
    check_out = serializers.DateField()
    units = serializers.IntegerField(required=False, default=1)
    guest_name = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    guest_email = serializers.EmailField(required=False, allow_blank=True, default="")


class ReservationHoldCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")


class ReservationHoldSerializer(serializers.ModelSerializer):
    """Detailed hold representation."""

    room_id = serializers.ReadOnlyField(source="room.id")
    room_name = serializers.ReadOnlyField(source="room.name")
    status_display = serializers.ReadOnlyField(source="get_status_display")
    nights = serializers.ReadOnlyField()

    class Meta:
        model = ReservationHold
        fields = [
            "id",
            "hold_code",
            "room_id",
            "room_name",
            "check_in",
            "check_out",
            "nights",
            "units_requested",
            "status",
            "status_display",
            "quoted_total",
            "currency",
            "guest_name",
            "guest_email",
            "expires_at",
            "confirmed_at",
            "cancelled_at",
            "completed_at",
            "cancellation_reason",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
