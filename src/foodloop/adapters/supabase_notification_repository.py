"""Supabase-backed notification repository."""

from dataclasses import dataclass

from supabase import Client

from foodloop.domain.models import ReservationNotice
from foodloop.services.reservations import NotificationRepository


@dataclass
class SupabaseNotificationRepository(NotificationRepository):
    """Writes owner notifications to the notifications table."""

    client: Client
    table: str = "notifications"

    def create_reservation_notice(self, notice: ReservationNotice) -> None:
        """Insert a reservation notice row."""
        response = (
            self.client.table(self.table)
            .insert(
                {
                    "owner_id": notice.owner_id,
                    "reserver_id": notice.reserver_id,
                    "food_item_id": notice.listing_id,
                    "food_title": notice.listing_title,
                    "timestamp": notice.created_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create reservation notification")
