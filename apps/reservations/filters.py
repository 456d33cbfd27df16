"""FilterSet definitions for reservation hold listing."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import ReservationHold


class ReservationHoldFilterSet(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=ReservationHold.Status.choices)
    room = django_filters.NumberFilter(field_name="room_id", lookup_expr="exact")
    check_in_from = django_filters.DateFilter(field_name="check_in", lookup_expr="gte")
    check_in_to = django_filters.DateFilter(field_name="check_in", lookup_expr="lte")
    hold_code = django_filters.CharFilter(field_name="hold_code", lookup_expr="iexact")

    class Meta:
        model = ReservationHold
        fields = ["status", "room", "hold_code"]
