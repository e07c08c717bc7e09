"""Supabase-backed category repository."""

from dataclasses import dataclass

from supabase import Client

from foodloop.adapters.supabase_records import serialize_category
from foodloop.domain.listings import Category
from foodloop.services.categories import CategoryRepository


@dataclass
class SupabaseCategoryRepository(CategoryRepository):
    """Supabase implementation for category writes."""

    client: Client
    table: str = "categories"

    def create_categories(self, categories: list[Category]) -> None:
        """Insert category rows in a single request."""
        if not categories:
            return
        self.client.table(self.table).insert(
            [serialize_category(category) for category in categories]
        ).execute()
