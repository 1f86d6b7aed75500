"""User-defined feed categories.

A category is a named set of feed URLs. A feed can sit in any number of
categories, and a category may list URLs that are not loaded this session.
Every successful change saves the whole list; a rejected change saves
nothing.
"""

import logging
from typing import List, Optional

from termfeed.errors import ValidationError
from termfeed.models.schemas import FeedCategory
from termfeed.storage.state_store import StateStore

logger = logging.getLogger(__name__)


class CategoryManager:
    """Ordered list of categories plus the current selection."""

    def __init__(
        self,
        categories: Optional[List[FeedCategory]] = None,
        store: Optional[StateStore] = None,
    ):
        self.categories: List[FeedCategory] = list(categories or [])
        self.selected: Optional[int] = None
        self.store = store

    def __len__(self) -> int:
        return len(self.categories)

    def __getitem__(self, index: int) -> FeedCategory:
        return self.categories[index]

    def __iter__(self):
        return iter(self.categories)

    def create(self, name: str) -> FeedCategory:
        """Append a new, empty category and select it.

        Raises:
            ValidationError: If the trimmed name is empty or already used
        """
        name = self._validate_name(name)

        category = FeedCategory(name=name)
        self.categories.append(category)
        self.selected = len(self.categories) - 1
        logger.info(f"Created category '{name}' ({category.id})")

        self._save()
        return category

    def rename(self, index: int, new_name: str) -> None:
        """Rename the category at ``index``.

        Raises:
            ValidationError: On an empty or duplicate name, or a bad index
        """
        new_name = self._validate_name(new_name, exclude=index)
        category = self._get(index)

        logger.info(f"Renamed category '{category.name}' to '{new_name}'")
        category.name = new_name
        self._save()

    def delete(self, index: int) -> FeedCategory:
        category = self._get(index)
        del self.categories[index]

        if self.categories and self.selected is not None:
            if self.selected >= len(self.categories):
                self.selected = len(self.categories) - 1
        else:
            self.selected = None

        logger.info(f"Deleted category '{category.name}'")
        self._save()
        return category

    def assign_feed(self, url: str, index: int) -> None:
        category = self._get(index)
        category.add_feed(url)
        logger.info(f"Added {url} to category '{category.name}'")
        self._save()

    def remove_feed(self, url: str, index: int) -> None:
        """Take ``url`` out of the category at ``index``.

        Raises:
            ValidationError: If the index is invalid or the feed is not a member
        """
        category = self._get(index)
        if not category.remove_feed(url):
            raise ValidationError("Feed not found in category")

        logger.info(f"Removed {url} from category '{category.name}'")
        self._save()

    def toggle_expanded(self, index: int) -> None:
        self._get(index).toggle_expanded()
        self._save()

    def category_for_feed(self, url: str) -> Optional[int]:
        """Index of the first category containing ``url``.

        A feed may be in several categories; only the first one is reported.
        """
        for index, category in enumerate(self.categories):
            if category.contains_feed(url):
                return index
        return None

    def forget_feed(self, url: str) -> bool:
        """Remove ``url`` from every category. Saves only if something changed."""
        changed = False
        for category in self.categories:
            if category.remove_feed(url):
                changed = True

        if changed:
            self._save()
        return changed

    def move_selection(self, delta: int) -> None:
        if not self.categories:
            self.selected = None
        elif self.selected is None:
            self.selected = 0
        else:
            self.selected = max(0, min(len(self.categories) - 1, self.selected + delta))

    def reset_selection(self) -> None:
        self.selected = 0 if self.categories else None

    def _get(self, index: int) -> FeedCategory:
        if not 0 <= index < len(self.categories):
            raise ValidationError("Invalid category index")
        return self.categories[index]

    def _validate_name(self, name: str, exclude: Optional[int] = None) -> str:
        name = name.strip()
        if not name:
            raise ValidationError("Category name cannot be empty")

        for index, category in enumerate(self.categories):
            if index != exclude and category.name == name:
                raise ValidationError("Category with this name already exists")
        return name

    def _save(self) -> None:
        if self.store is not None:
            self.store.save_categories(self.categories)
