"""Supabase-backed user repository."""

from dataclasses import dataclass

from supabase import Client

from foodloop.adapters.supabase_records import parse_profile
from foodloop.domain.models import UserProfile
from foodloop.services.saved_items import UserRepository


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user profiles."""

    client: Client

    def get_profile(self, user_id: str) -> UserProfile | None:
        """Return the profile for a user id, if present."""
        response = (
            self.client.table("users")
            .select("id, username, saved_items, level, foods_saved")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        if response.data:
            return parse_profile(response.data[0])
        return None

    def update_saved_items(self, user_id: str, saved_items: list[str]) -> None:
        """Replace the saved listing ids for a user."""
        self.client.table("users").update({"saved_items": saved_items}).eq(
            "id", user_id
        ).execute()
