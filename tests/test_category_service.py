import os
import sys
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from category_service import CategoryOrderService
from db import CategoryOrderRepository, KeyValueRepository


class CategoryOrderServiceTest(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = "test_category_order.db"
        if os.path.exists(self.db_path):
            os.remove(self.db_path)
        self.repo = CategoryOrderRepository(KeyValueRepository(self.db_path))
        self.service = CategoryOrderService(
            self.repo, ["Biceps", "Triceps", "Legs", "Chest", "Back", "Shoulders"]
        )

    def tearDown(self) -> None:
        if os.path.exists(self.db_path):
            os.remove(self.db_path)

    def test_default_order_is_canonical(self) -> None:
        self.assertEqual(
            self.service.ordered_categories(),
            ["All", "Biceps", "Triceps", "Legs", "Chest", "Back", "Shoulders"],
        )

    def test_reconcile_drops_unknown_and_appends_missing(self) -> None:
        self.repo.save(["Back", "Arms", "Legs", "Back"])
        self.assertEqual(
            self.service.order(),
            ["Back", "Legs", "Biceps", "Triceps", "Chest", "Shoulders"],
        )

    def test_reorder_moves_before_target_slot(self) -> None:
        service = CategoryOrderService(self.repo, ["Biceps", "Legs", "Chest", "Back"])
        self.assertEqual(
            service.reorder("Legs", "Chest"), ["Biceps", "Chest", "Legs", "Back"]
        )
        self.assertEqual(self.repo.load(), ["Biceps", "Chest", "Legs", "Back"])
        self.assertEqual(service.ordered_categories()[0], "All")

    def test_reorder_upwards(self) -> None:
        service = CategoryOrderService(self.repo, ["Biceps", "Legs", "Chest", "Back"])
        self.assertEqual(
            service.reorder("Back", "Legs"), ["Biceps", "Back", "Legs", "Chest"]
        )

    def test_reorder_noops_do_not_save(self) -> None:
        self.service.reorder("Legs", "Legs")
        self.service.reorder("All", "Legs")
        self.service.reorder("Legs", "Arms")
        self.assertEqual(self.repo.load(), [])

    def test_reset(self) -> None:
        self.service.reorder("Shoulders", "Biceps")
        self.assertEqual(self.service.order()[0], "Shoulders")
        self.service.reset()
        self.assertEqual(self.service.order()[0], "Biceps")


if __name__ == "__main__":
    unittest.main()
