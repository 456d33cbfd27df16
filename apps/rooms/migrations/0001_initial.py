from decimal import Decimal

import apps.rooms.models
import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Room",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("hotel_name", models.CharField(blank=True, max_length=255)),
                ("name", models.CharField(max_length=255)),
                (
                    "room_type",
                    models.CharField(
                        choices=[
                            ("standard", "Standard"),
                            ("deluxe", "Deluxe"),
                            ("suite", "Suite"),
                            ("family", "Family"),
                        ],
                        default="standard",
                        max_length=20,
                    ),
                ),
                (
                    "capacity",
                    models.PositiveSmallIntegerField(
                        default=2,
                        help_text="Maximum number of guests per unit.",
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                (
                    "room_count",
                    models.PositiveIntegerField(
                        default=1,
                        help_text="Units of this type in the hotel; seeds the default daily inventory.",
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                (
                    "currency",
                    models.CharField(
                        choices=[("TRY", "TRY"), ("USD", "USD"), ("EUR", "EUR"), ("GBP", "GBP")],
                        default=apps.rooms.models.default_currency,
                        max_length=3,
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Room",
                "verbose_name_plural": "Rooms",
                "ordering": ["hotel_name", "name"],
            },
        ),
        migrations.CreateModel(
            name="RoomPricingProfile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "base_nightly_price",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "room",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="pricing_profile",
                        to="rooms.room",
                    ),
                ),
            ],
            options={
                "verbose_name": "Pricing profile",
                "verbose_name_plural": "Pricing profiles",
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("base_nightly_price__gte", 0)),
                        name="pricing_profile_base_price_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="WeekdayPrice",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "weekday",
                    models.PositiveSmallIntegerField(
                        choices=[
                            (0, "Sunday"),
                            (1, "Monday"),
                            (2, "Tuesday"),
                            (3, "Wednesday"),
                            (4, "Thursday"),
                            (5, "Friday"),
                            (6, "Saturday"),
                        ]
                    ),
                ),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "profile",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="weekday_prices",
                        to="rooms.roompricingprofile",
                    ),
                ),
            ],
            options={
                "verbose_name": "Weekday price",
                "verbose_name_plural": "Weekday prices",
                "ordering": ["weekday"],
                "constraints": [
                    models.UniqueConstraint(fields=("profile", "weekday"), name="weekday_price_unique"),
                    models.CheckConstraint(condition=models.Q(("price__gte", 0)), name="weekday_price_non_negative"),
                    models.CheckConstraint(condition=models.Q(("weekday__lte", 6)), name="weekday_price_valid_weekday"),
                ],
            },
        ),
        migrations.CreateModel(
            name="DatePriceOverride",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "profile",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="date_overrides",
                        to="rooms.roompricingprofile",
                    ),
                ),
            ],
            options={
                "verbose_name": "Date price override",
                "verbose_name_plural": "Date price overrides",
                "ordering": ["date"],
                "constraints": [
                    models.UniqueConstraint(fields=("profile", "date"), name="date_price_override_unique"),
                    models.CheckConstraint(
                        condition=models.Q(("price__gte", 0)),
                        name="date_price_override_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="QuotaCalendar",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "default_unit_count",
                    models.PositiveIntegerField(
                        default=1,
                        help_text="Bookable units on any date without an explicit quota row.",
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "room",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="quota_calendar",
                        to="rooms.room",
                    ),
                ),
            ],
            options={
                "verbose_name": "Quota calendar",
                "verbose_name_plural": "Quota calendars",
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("default_unit_count__gte", 1)),
                        name="quota_calendar_default_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="DailyQuota",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                ("quota", models.IntegerField(validators=[django.core.validators.MinValueValidator(0)])),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "calendar",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="daily_quotas",
                        to="rooms.quotacalendar",
                    ),
                ),
            ],
            options={
                "verbose_name": "Daily quota",
                "verbose_name_plural": "Daily quotas",
                "ordering": ["date"],
                "indexes": [models.Index(fields=["calendar", "date"], name="daily_quota_calendar_date_idx")],
                "constraints": [
                    models.UniqueConstraint(fields=("calendar", "date"), name="daily_quota_unique"),
                    models.CheckConstraint(condition=models.Q(("quota__gte", 0)), name="daily_quota_non_negative"),
                ],
            },
        ),
        migrations.CreateModel(
            name="PriceRule",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100)),
                (
                    "rule_type",
                    models.CharField(
                        choices=[
                            ("seasonal", "Seasonal"),
                            ("weekend", "Weekend"),
                            ("holiday", "Holiday"),
                            ("special", "Special"),
                        ],
                        max_length=20,
                    ),
                ),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                (
                    "modifier_percent",
                    models.SmallIntegerField(
                        help_text="Percentage change relative to the nightly price (-99..300).",
                        validators=[
                            django.core.validators.MinValueValidator(-99),
                            django.core.validators.MaxValueValidator(300),
                        ],
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "room",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="price_rules",
                        to="rooms.room",
                    ),
                ),
            ],
            options={
                "verbose_name": "Price rule",
                "verbose_name_plural": "Price rules",
                "ordering": ["start_date", "name"],
                "indexes": [
                    models.Index(fields=["room", "start_date", "end_date"], name="price_rule_room_dates_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("end_date__gte", models.F("start_date"))),
                        name="price_rule_valid_date_range",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("modifier_percent__gte", -99), ("modifier_percent__lte", 300)),
                        name="price_rule_modifier_bounds",
                    ),
                ],
            },
        ),
    ]
