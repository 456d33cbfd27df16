"""Pure pricing and quota rules, no database."""

from datetime import date
from decimal import Decimal

import pytest

from apps.rooms.domain.pricing import PriceSource, PricingSnapshot, StayQuote, validate_price, weekday_index
from apps.rooms.domain.quota import QuotaSnapshot, validate_units
from shared.domain.exceptions import ValidationError
from shared.domain.value_objects import DateRange


@pytest.fixture
def scenario_a_snapshot():
    return PricingSnapshot(
        room_id=1,
        base_price=Decimal("1000"),
        weekday_prices={5: Decimal("1200")},
        date_overrides={date(2025, 7, 4): Decimal("1500")},
    )


def test_weekday_index_starts_on_sunday():
    assert weekday_index(date(2025, 7, 6)) == 0  # Sunday
    assert weekday_index(date(2025, 7, 3)) == 4  # Thursday
    assert weekday_index(date(2025, 7, 4)) == 5  # Friday
    assert weekday_index(date(2025, 7, 5)) == 6  # Saturday


def test_date_override_beats_weekday_price(scenario_a_snapshot):
    night = scenario_a_snapshot.price_for(date(2025, 7, 4))

    assert night.amount == Decimal("1500")
    assert night.source is PriceSource.DATE_OVERRIDE


def test_weekday_price_beats_base_price(scenario_a_snapshot):
    night = scenario_a_snapshot.price_for(date(2025, 7, 11))

    assert night.amount == Decimal("1200")
    assert night.source is PriceSource.WEEKDAY


def test_base_price_is_the_fallback(scenario_a_snapshot):
    night = scenario_a_snapshot.price_for(date(2025, 7, 3))

    assert night.amount == Decimal("1000")
    assert night.source is PriceSource.BASE


def test_stay_total_is_the_sum_of_nightly_prices(scenario_a_snapshot):
    stay = DateRange(date(2025, 7, 3), date(2025, 7, 5))
    quote = StayQuote.from_nights(1, stay, scenario_a_snapshot.prices_for(stay), "TRY")

    assert quote.total.amount == Decimal("2500.00")
    assert quote.night_count == 2
    assert quote.by_source() == {PriceSource.BASE: 1, PriceSource.DATE_OVERRIDE: 1}


@pytest.mark.parametrize("value", [Decimal("-0.01"), -5, "abc", float("nan"), True])
def test_invalid_prices_are_rejected(value):
    with pytest.raises(ValidationError) as excinfo:
        validate_price(value, "price")

    assert excinfo.value.field == "price"


def test_snapshot_rejects_negative_weekday_price():
    with pytest.raises(ValidationError):
        PricingSnapshot(room_id=1, base_price=Decimal("100"), weekday_prices={1: Decimal("-1")})


class TestQuotaSnapshot:
    def test_missing_dates_fall_back_to_default(self):
        snapshot = QuotaSnapshot(room_id=1, default_unit_count=3, per_date={date(2025, 8, 2): 0})

        assert snapshot.quota_for(date(2025, 8, 1)) == 3
        assert snapshot.quota_for(date(2025, 8, 2)) == 0
        assert snapshot.is_stop_sell(date(2025, 8, 2))
        assert not snapshot.is_stop_sell(date(2025, 8, 1))

    def test_shortfalls_list_every_failing_night(self):
        snapshot = QuotaSnapshot(
            room_id=1,
            default_unit_count=2,
            per_date={date(2025, 8, 2): 1, date(2025, 8, 3): 0},
        )
        stay = DateRange(date(2025, 8, 1), date(2025, 8, 4))

        assert snapshot.shortfalls(stay, 2) == [date(2025, 8, 2), date(2025, 8, 3)]
        assert snapshot.shortfalls(stay, 1) == [date(2025, 8, 3)]
        assert not snapshot.can_supply(stay, 1)

    @pytest.mark.parametrize("units", [0, -1, 1.5, True])
    def test_units_must_be_a_positive_integer(self, units):
        with pytest.raises(ValidationError) as excinfo:
            validate_units(units)

        assert excinfo.value.field == "units"
