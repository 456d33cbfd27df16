"""URL routing for room pricing and availability."""

from __future__ import annotations

from datetime import date

from django.urls import path, register_converter  # type: ignore

from .views import (
    PriceRuleViewSet,
    RoomAvailabilityView,
    RoomBulkCalendarView,
    RoomCalendarView,
    RoomDatePriceView,
    RoomDateQuotaView,
    RoomPricingView,
    RoomPriceView,
    RoomQuoteView,
)


class IsoDateConverter:
    regex = r"\d{4}-\d{2}-\d{2}"

    def to_python(self, value: str) -> date:
        # ValueError on impossible dates makes the pattern not match (404)
        return date.fromisoformat(value)

    def to_url(self, value: date) -> str:
        return value.isoformat()


register_converter(IsoDateConverter, "isodate")

price_rule_list = PriceRuleViewSet.as_view({"get": "list", "post": "create"})
price_rule_detail = PriceRuleViewSet.as_view(
    {"patch": "partial_update", "put": "update", "delete": "destroy", "get": "retrieve"}
)

urlpatterns = [
    # Guest-facing reads
    path("<int:room_id>/price/", RoomPriceView.as_view(), name="room-price"),
    path("<int:room_id>/quote/", RoomQuoteView.as_view(), name="room-quote"),
    path("<int:room_id>/availability/", RoomAvailabilityView.as_view(), name="room-availability"),
    # Administrator calendar management
    path("<int:room_id>/calendar/", RoomCalendarView.as_view(), name="room-calendar"),
    path("<int:room_id>/calendar/bulk/", RoomBulkCalendarView.as_view(), name="room-calendar-bulk"),
    path("<int:room_id>/pricing/", RoomPricingView.as_view(), name="room-pricing"),
    path(
        "<int:room_id>/date-prices/<isodate:day>/",
        RoomDatePriceView.as_view(),
        name="room-date-price",
    ),
    path(
        "<int:room_id>/quotas/<isodate:day>/",
        RoomDateQuotaView.as_view(),
        name="room-date-quota",
    ),
    # Price rule catalog
    path("<int:room_id>/price-rules/", price_rule_list, name="room-price-rule-list"),
    path("<int:room_id>/price-rules/<int:pk>/", price_rule_detail, name="room-price-rule-detail"),
]
