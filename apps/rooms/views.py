"""Room pricing, availability and calendar API views."""

from __future__ import annotations

from django.shortcuts import get_object_or_404  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from .filters import PriceRuleFilterSet
from .models import PriceRule, Room
from .repositories import PricingProfileStore, QuotaLedger
from .serializers import (
    BulkEditResultSerializer,
    BulkRangeSerializer,
    CalendarDaySerializer,
    CalendarRangeQuerySerializer,
    DatePriceSerializer,
    DateQuerySerializer,
    DateQuotaSerializer,
    NightlyPriceSerializer,
    PriceRuleSerializer,
    PricingProfileUpdateSerializer,
    PricingSnapshotSerializer,
    StayQuerySerializer,
    StayQuoteSerializer,
)
from .services import AvailabilityChecker, BulkRangeEditor, CalendarReader, PriceResolver, StayPriceCalculator


class RoomCalendarMixin:
    """Resolves the room from the URL before the handler runs."""

    room_lookup_url_kwarg = "room_id"
    permission_classes = [permissions.IsAdminUser]
    public_lookup = False

    def initial(self, request, *args, **kwargs):  # type: ignore
        super().initial(request, *args, **kwargs)
        filters = {"pk": kwargs.get(self.room_lookup_url_kwarg)}
        if self.public_lookup:
            filters["is_active"] = True
        self.room = get_object_or_404(Room, **filters)

    def get_room(self) -> Room:
        return self.room

    def get_serializer_context(self):  # type: ignore
        context = super().get_serializer_context()
        context["room"] = getattr(self, "room", None)
        return context


class RoomPriceView(RoomCalendarMixin, APIView):
    """Nightly price of one date."""

    permission_classes = [permissions.AllowAny]
    public_lookup = True

    def get(self, request, room_id):  # type: ignore
        query = DateQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        night = PriceResolver().resolve_night(room_id, query.validated_data["date"])
        return Response({"room_id": room_id, **NightlyPriceSerializer(night).data})


class RoomQuoteView(RoomCalendarMixin, APIView):
    """Total price of a stay with its per-night breakdown."""

    permission_classes = [permissions.AllowAny]
    public_lookup = True

    def get(self, request, room_id):  # type: ignore
        query = StayQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        quote = StayPriceCalculator().compute_total(
            room_id,
            query.validated_data["check_in"],
            query.validated_data["check_out"],
        )
        return Response(StayQuoteSerializer(quote).data)


class RoomAvailabilityView(RoomCalendarMixin, APIView):
    permission_classes = [permissions.AllowAny]
    public_lookup = True

    def get(self, request, room_id):  # type: ignore
        query = StayQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = query.validated_data
        unavailable = AvailabilityChecker().unavailable_nights(
            room_id,
            data["check_in"],
            data["check_out"],
            data["units"],
        )
        return Response(
            {
                "room_id": room_id,
                "check_in": data["check_in"],
                "check_out": data["check_out"],
                "units": data["units"],
                "available": not unavailable,
                "unavailable_dates": unavailable,
            }
        )


class RoomBulkCalendarView(RoomCalendarMixin, APIView):
    """Apply one price and/or quota to an inclusive date range."""

    def post(self, request, room_id):  # type: ignore
        serializer = BulkRangeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = BulkRangeEditor().apply_range(
            room_id,
            data["date_from"],
            data["date_to"],
            price=data.get("price"),
            quota=data.get("quota"),
        )
        return Response(BulkEditResultSerializer(result).data, status=status.HTTP_200_OK)


class RoomCalendarView(RoomCalendarMixin, APIView):
    """Per-date price, quota and rule names for the admin calendar screen."""

    def get(self, request, room_id):  # type: ignore
        query = CalendarRangeQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        days = CalendarReader().month(room_id, query.validated_data["start"], query.validated_data["end"])
        return Response(
            {
                "room_id": room_id,
                "currency": self.get_room().currency,
                "dates": CalendarDaySerializer(days, many=True).data,
            }
        )


class RoomPricingView(RoomCalendarMixin, APIView):
    """Base price and weekday prices of a room."""

    def get(self, request, room_id):  # type: ignore
        snapshot = PricingProfileStore().snapshot(room_id)
        return Response(PricingSnapshotSerializer(snapshot).data)

    def patch(self, request, room_id):  # type: ignore
        serializer = PricingProfileUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        snapshot = PricingProfileStore().update_profile(
            room_id,
            base_price=serializer.validated_data.get("base_price"),
            weekday_prices=serializer.validated_data.get("weekday_prices"),
        )
        return Response(PricingSnapshotSerializer(snapshot).data)


class RoomDatePriceView(RoomCalendarMixin, APIView):
    """Set or clear the explicit price of a single date."""

    def put(self, request, room_id, day):  # type: ignore
        serializer = DatePriceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        PricingProfileStore().set_date_price(room_id, day, serializer.validated_data["price"])
        night = PriceResolver().resolve_night(room_id, day)
        return Response(NightlyPriceSerializer(night).data)

    def delete(self, request, room_id, day):  # type: ignore
        PricingProfileStore().clear_date_price(room_id, day)
        return Response(status=status.HTTP_204_NO_CONTENT)


class RoomDateQuotaView(RoomCalendarMixin, APIView):
    """Read, set or reset the quota of a single date."""

    def get(self, request, room_id, day):  # type: ignore
        quota = QuotaLedger().get(room_id, day)
        return Response({"date": day, "quota": quota, "stop_sell": quota == 0})

    def put(self, request, room_id, day):  # type: ignore
        serializer = DateQuotaSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        quota = serializer.validated_data["quota"]
        QuotaLedger().set_quota(room_id, [day], quota)
        return Response({"date": day, "quota": quota, "stop_sell": quota == 0})

    def delete(self, request, room_id, day):  # type: ignore
        QuotaLedger().clear_quota(room_id, day)
        return Response(status=status.HTTP_204_NO_CONTENT)


class PriceRuleViewSet(RoomCalendarMixin, viewsets.ModelViewSet):
    """Catalog of seasonal/weekend/holiday rules of a room."""

    serializer_class = PriceRuleSerializer
    queryset = PriceRule.objects.select_related("room").all()
    filter_backends = [DjangoFilterBackend]
    filterset_class = PriceRuleFilterSet

    def get_queryset(self):  # type: ignore
        return super().get_queryset().filter(room=self.get_room()).order_by("start_date", "name")

    def perform_create(self, serializer):  # type: ignore
        serializer.save(room=self.get_room())
