"""Model signal handlers that provision a room's calendars."""

from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import QuotaCalendar, Room, RoomPricingProfile


@receiver(post_save, sender=Room)
def create_room_calendars(sender, instance, created, raw=False, **kwargs):
    """Every new room gets a pricing profile (base price 0) and a quota calendar."""
    if not created or raw:
        return

    RoomPricingProfile.objects.get_or_create(room=instance)
    QuotaCalendar.objects.get_or_create(
        room=instance,
        defaults={"default_unit_count": instance.room_count},
    )
