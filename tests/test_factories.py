import unittest
from pathlib import Path
import re

# Adjust path to import from src
import sys
src_path = Path(__file__).resolve().parent.parent / 'src'
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from e2eharness.fixtures import (
    Address,
    Order,
    OrderFactory,
    Product,
    ProductFactory,
    User,
    UserFactory,
)
from e2eharness.fixtures.factories import DEPARTMENTS, ORDER_STATUSES


class TestUserFactory(unittest.TestCase):

    def test_build_user(self):
        user = UserFactory.build()
        self.assertIsInstance(user, User)
        self.assertIsInstance(user.address, Address)
        self.assertIn("@", user.email)
        self.assertEqual(len(user.password), 12)

    def test_admin_and_regular_emails(self):
        self.assertRegex(UserFactory.admin().email, r"^admin\.[A-Za-z0-9]{5}@example\.com$")
        self.assertRegex(UserFactory.regular().email, r"^user\.[A-Za-z0-9]{5}@example\.com$")

    def test_overrides_win(self):
        admin = UserFactory.admin(first_name="Ada", email="ada@example.com")
        self.assertEqual(admin.first_name, "Ada")
        self.assertEqual(admin.email, "ada@example.com")


class TestProductFactory(unittest.TestCase):

    def test_product_fields(self):
        for product in ProductFactory.create_many(20):
            self.assertIsInstance(product, Product)
            self.assertTrue(re.fullmatch(r"[A-Z0-9]{10}", product.sku))
            self.assertTrue(0 <= product.quantity <= 100)
            self.assertTrue(1 <= product.price <= 1000)
            self.assertIn(product.category, DEPARTMENTS)

    def test_create_many_applies_overrides(self):
        products = ProductFactory.create_many(3, in_stock=True)
        self.assertEqual(len(products), 3)
        self.assertTrue(all(p.in_stock for p in products))


class TestOrderFactory(unittest.TestCase):

    def test_order_fields(self):
        order = OrderFactory.build()
        self.assertIsInstance(order, Order)
        self.assertTrue(1 <= len(order.products) <= 5)
        self.assertIn(order.status, ORDER_STATUSES)
        self.assertEqual(len(order.order_id), 36)
        self.assertNotEqual(order.order_id, order.user_id)

    def test_orders_are_distinct(self):
        first, second = OrderFactory.create_many(2)
        self.assertNotEqual(first.order_id, second.order_id)


if __name__ == '__main__':
    unittest.main()
