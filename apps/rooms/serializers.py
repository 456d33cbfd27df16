"""Serializers for the room pricing and availability API."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import PriceRule


class DateQuerySerializer(serializers.Serializer):
    date = serializers.DateField()


class StayQuerySerializer(serializers.Serializer):
    check_in = serializers.DateField()
    check_out = serializers.DateField()
    units = serializers.IntegerField(required=False, default=1)


class CalendarRangeQuerySerializer(serializers.Serializer):
    start = serializers.DateField()
    end = serializers.DateField()


class NightlyPriceSerializer(serializers.Serializer):
    date = serializers.DateField()
    price = serializers.DecimalField(source="amount", max_digits=10, decimal_places=2)
    source = serializers.CharField(source="source.value")


class StayQuoteSerializer(serializers.Serializer):
    """Read-only view of a StayQuote."""

    room_id = serializers.IntegerField()
    check_in = serializers.DateField(source="stay.start_date")
    check_out = serializers.DateField(source="stay.end_date")
    night_count = serializers.IntegerField()
    total = serializers.DecimalField(source="total.amount", max_digits=12, decimal_places=2)
    currency = serializers.CharField(source="total.currency")
    nights = NightlyPriceSerializer(many=True)


class BulkRangeSerializer(serializers.Serializer):
    """Body of a bulk calendar edit; price and quota are both optional."""

    date_from = serializers.DateField()
    date_to = serializers.DateField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    quota = serializers.IntegerField(required=False, allow_null=True)


class BulkEditResultSerializer(serializers.Serializer):
    room_id = serializers.IntegerField()
    start = serializers.DateField()
    end = serializers.DateField()
    days = serializers.IntegerField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2, allow_null=True)
    quota = serializers.IntegerField(allow_null=True)


class CalendarDaySerializer(serializers.Serializer):
    """One date of the admin calendar."""

    date = serializers.DateField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    price_source = serializers.CharField(source="price_source.value")
    quota = serializers.IntegerField()
    stop_sell = serializers.BooleanField()
    rules = serializers.ListField(child=serializers.CharField())


class PricingSnapshotSerializer(serializers.Serializer):
    room_id = serializers.IntegerField()
    base_price = serializers.DecimalField(max_digits=10, decimal_places=2)
    weekday_prices = serializers.DictField(child=serializers.DecimalField(max_digits=10, decimal_places=2))
    currency = serializers.CharField()


class PricingProfileUpdateSerializer(serializers.Serializer):
    """Base and weekday prices; weekday keys are 0 (Sunday) .. 6 (Saturday).

    A null weekday price removes that weekday's rule.
    """

    base_price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    weekday_prices = serializers.DictField(
        child=serializers.DecimalField(max_digits=10, decimal_places=2, allow_null=True),
        required=False,
    )

    def validate_weekday_prices(self, value):  # type: ignore
        prices = {}
        for key, price in value.items():
            try:
                weekday = int(key)
            except (TypeError, ValueError):
                raise serializers.ValidationError(f"Invalid weekday: {key}")
            if weekday not in range(7):
                raise serializers.ValidationError("Weekdays run from 0 (Sunday) to 6 (Saturday).")
            prices[weekday] = price
        return prices


class DatePriceSerializer(serializers.Serializer):
    price = serializers.DecimalField(max_digits=10, decimal_places=2)


class DateQuotaSerializer(serializers.Serializer):
    quota = serializers.IntegerField()


class PriceRuleSerializer(serializers.ModelSerializer):
    rule_type_display = serializers.ReadOnlyField(source="get_rule_type_display")

    class Meta:
        model = PriceRule
        fields = [
            "id",
            "name",
            "rule_type",
            "rule_type_display",
            "start_date",
            "end_date",
            "modifier_percent",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at", "rule_type_display"]

    def validate(self, attrs):  # type: ignore
        start = attrs.get("start_date", getattr(self.instance, "start_date", None))
        end = attrs.get("end_date", getattr(self.instance, "end_date", None))
        if start and end and start > end:
            raise serializers.ValidationError({"end_date": "End date cannot be before start date."})
        return attrs
