from typing import Iterable

from db import CategoryOrderRepository
from settings_schema import DEFAULT_CATEGORIES
from view_selector import ALL_CATEGORIES


class CategoryOrderService:
    """Keep the user's category order consistent with the canonical set."""

    def __init__(
        self,
        repo: CategoryOrderRepository,
        categories: Iterable[str] = DEFAULT_CATEGORIES,
    ) -> None:
        self.repo = repo
        self.categories = list(categories)

    def reconcile(self, saved: Iterable[str]) -> list[str]:
        """Drop unknown or repeated names and append missing canonical ones."""
        order: list[str] = []
        for name in saved:
            if name in self.categories and name not in order:
                order.append(name)
        order.extend(c for c in self.categories if c not in order)
        return order

    def order(self) -> list[str]:
        return self.reconcile(self.repo.load())

    def ordered_categories(self) -> list[str]:
        return [ALL_CATEGORIES] + self.order()

    def reorder(self, moved: str, target: str) -> list[str]:
        """Move ``moved`` to the slot ``target`` occupies and save.

        Returns the resulting order; nothing is saved when ``moved`` equals
        ``target`` or either name is not a known category.
        """
        order = self.order()
        if moved == target or moved not in order or target not in order:
            return order
        index = order.index(target)
        order.remove(moved)
        order.insert(index, moved)
        self.repo.save(order)
        return order

    def reset(self) -> None:
        self.repo.clear()
