"""Category loading with de-duplication and default seeding."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import uuid4

from foodloop.domain.listings import Category
from foodloop.services.pipeline import dedupe_categories

_logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES: tuple[tuple[str, str], ...] = (
    ("Fruit & Vegetables", "leaf.fill"),
    ("Bakery", "birthday.cake"),
    ("Dairy", "drop.fill"),
    ("Ready Meals", "fork.knife"),
    ("Canned Goods", "shippingbox.fill"),
    ("Drinks", "cup.and.saucer.fill"),
    ("Other", "ellipsis.circle.fill"),
)


class CategorySource(Protocol):
    """Read side of the storage gateway for categories."""

    async def fetch_categories(self) -> list[Category]:
        """Return every stored category; raises RemoteFetchError."""


class CategoryRepository(Protocol):
    """Write side for categories."""

    def create_categories(self, categories: list[Category]) -> None:
        """Persist new category records."""


@dataclass
class CategoryService:
    """Loads the category set, falling back to defaults on an empty store."""

    source: CategorySource
    repository: CategoryRepository

    async def load_categories(self) -> list[Category]:
        """Return categories sorted by name with duplicate names removed."""
        categories = await self.source.fetch_categories()
        if not categories:
            return self._seed_defaults()
        return dedupe_categories(categories)

    def _seed_defaults(self) -> list[Category]:
        defaults = [
            Category(id=str(uuid4()), name=name, icon=icon)
            for name, icon in DEFAULT_CATEGORIES
        ]
        try:
            self.repository.create_categories(defaults)
        except Exception:
            _logger.exception("Failed to seed default categories")
        else:
            _logger.info("Seeded %s default categories", len(defaults))
        return dedupe_categories(defaults)
