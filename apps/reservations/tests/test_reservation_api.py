"""Integration tests for reservation hold endpoints."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.reservations.models import ReservationHold
from apps.rooms.models import Room
from apps.rooms.repositories import PricingProfileStore, QuotaLedger

User = get_user_model()


class ReservationAPITests(APITestCase):
    """Covers hold creation, confirmation conflicts, cancellation and visibility."""

    def setUp(self) -> None:
        self.guest = User.objects.create_user(username="guest", password="GuestPass123")
        self.other_guest = User.objects.create_user(username="other", password="OtherPass123")
        self.staff = User.objects.create_user(username="manager", password="ManagerPass123", is_staff=True)
        self.room = Room.objects.create(name="Family Suite", hotel_name="Hotel Bosphorus", room_count=2)
        PricingProfileStore().update_profile(self.room.id, base_price=Decimal("1000"))
        self.client.force_authenticate(self.guest)
        self.list_url = reverse("reservation-list")

    def _payload(self, check_in: str = "2025-10-10", check_out: str = "2025-10-12", **extra) -> dict:
        return {"room": self.room.id, "check_in": check_in, "check_out": check_out, **extra}

    def _create(self, **extra) -> dict:
        response = self.client.post(self.list_url, self._payload(**extra), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return response.data

    def test_guest_can_create_hold(self) -> None:
        data = self._create(units=2, guest_name="Mehmet Yilmaz", guest_email="mehmet@example.com")

        self.assertEqual(data["status"], "pending")
        self.assertEqual(data["room_id"], self.room.id)
        self.assertEqual(data["units_requested"], 2)
        self.assertEqual(data["nights"], 2)
        self.assertEqual(data["quoted_total"], "4000.00")
        self.assertEqual(data["currency"], "TRY")
        self.assertEqual(len(data["hold_code"]), 8)
        hold = ReservationHold.objects.get(pk=data["id"])
        self.assertEqual(hold.created_by, self.guest)

    def test_create_rejects_inverted_stay(self) -> None:
        response = self.client.post(
            self.list_url,
            self._payload(check_in="2025-10-12", check_out="2025-10-10"),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["field"], "check_out")
        self.assertFalse(ReservationHold.objects.exists())

    def test_create_for_unknown_room(self) -> None:
        response = self.client.post(self.list_url, {**self._payload(), "room": 999_999}, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_confirm_consumes_inventory(self) -> None:
        data = self._create()

        response = self.client.post(reverse("reservation-confirm", kwargs={"pk": data["id"]}))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], "confirmed")
        self.assertIsNotNone(response.data["confirmed_at"])
        self.assertIsNone(response.data["expires_at"])
        self.assertEqual(QuotaLedger().get(self.room.id, date(2025, 10, 10)), 1)

    def test_confirm_on_stop_sell_is_a_conflict(self) -> None:
        QuotaLedger().set_quota(self.room.id, [date(2025, 10, 11)], 0)
        data = self._create()

        response = self.client.post(reverse("reservation-confirm", kwargs={"pk": data["id"]}))

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "insufficient_availability")
        self.assertEqual(response.data["dates"], ["2025-10-11"])
        self.assertEqual(ReservationHold.objects.get(pk=data["id"]).status, "pending")

    def test_cancel_confirmed_hold_releases_inventory(self) -> None:
        data = self._create()
        self.client.post(reverse("reservation-confirm", kwargs={"pk": data["id"]}))

        response = self.client.post(
            reverse("reservation-cancel", kwargs={"pk": data["id"]}),
            {"reason": "Flight cancelled"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], "cancelled")
        self.assertEqual(response.data["cancellation_reason"], "Flight cancelled")
        self.assertEqual(QuotaLedger().get(self.room.id, date(2025, 10, 10)), 2)

    def test_guest_cannot_complete_hold(self) -> None:
        data = self._create()
        self.client.post(reverse("reservation-confirm", kwargs={"pk": data["id"]}))

        response = self.client.post(reverse("reservation-complete", kwargs={"pk": data["id"]}))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_staff_completes_confirmed_hold(self) -> None:
        data = self._create()
        self.client.post(reverse("reservation-confirm", kwargs={"pk": data["id"]}))
        self.client.force_authenticate(self.staff)

        response = self.client.post(reverse("reservation-complete", kwargs={"pk": data["id"]}))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], "completed")

    def test_completing_pending_hold_is_a_conflict(self) -> None:
        data = self._create()
        self.client.force_authenticate(self.staff)

        response = self.client.post(reverse("reservation-complete", kwargs={"pk": data["id"]}))

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "invalid_transition")

    def test_guests_only_see_their_own_holds(self) -> None:
        own = self._create()
        self.client.force_authenticate(self.other_guest)
        foreign = self._create(check_in="2025-11-01", check_out="2025-11-02")

        listed = self.client.get(self.list_url)
        self.assertEqual([item["id"] for item in listed.data], [foreign["id"]])

        response = self.client.get(reverse("reservation-detail", kwargs={"pk": own["id"]}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

        response = self.client.post(reverse("reservation-cancel", kwargs={"pk": own["id"]}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(ReservationHold.objects.get(pk=own["id"]).status, "pending")

    def test_staff_list_filters_by_status(self) -> None:
        pending = self._create()
        confirmed = self._create(check_in="2025-11-01", check_out="2025-11-02")
        self.client.post(reverse("reservation-confirm", kwargs={"pk": confirmed["id"]}))
        self.client.force_authenticate(self.staff)

        response = self.client.get(self.list_url, {"status": "pending"})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual([item["id"] for item in response.data], [pending["id"]])

    def test_anonymous_requests_are_rejected(self) -> None:
        self.client.force_authenticate(None)

        response = self.client.post(self.list_url, self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
