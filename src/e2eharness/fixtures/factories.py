"""
Test data factories

Builds realistic users, products and orders for form-filling tests.

Usage:
    user = UserFactory.build()
    admin = UserFactory.admin(first_name="Ada")
    products = ProductFactory.create_many(3, in_stock=True)
"""
import string
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

import factory
from faker import Faker

fake = Faker()

ALPHANUMERIC = string.ascii_letters + string.digits
ORDER_STATUSES = ["pending", "processing", "shipped", "delivered", "cancelled"]
DEPARTMENTS = ["Books", "Electronics", "Garden", "Grocery", "Health", "Home", "Sports", "Toys"]


@dataclass
class Address:
    street: str
    city: str
    state: str
    zip_code: str
    country: str


@dataclass
class User:
    first_name: str
    last_name: str
    email: str
    password: str
    phone: str
    address: Address


@dataclass
class Product:
    name: str
    description: str
    price: float
    category: str
    sku: str
    in_stock: bool
    quantity: int


@dataclass
class Order:
    order_id: str
    user_id: str
    total_amount: float
    status: str
    created_at: datetime
    products: List[Product] = field(default_factory=list)


class BaseFactory(factory.Factory):
    """Adds `create_many` to every factory."""

    class Meta:
        abstract = True

    @classmethod
    def create_many(cls, count: int, **overrides):
        return cls.build_batch(count, **overrides)


class AddressFactory(BaseFactory):
    class Meta:
        model = Address

    street = factory.LazyFunction(fake.street_address)
    city = factory.LazyFunction(fake.city)
    state = factory.LazyFunction(fake.state)
    zip_code = factory.LazyFunction(fake.zipcode)
    country = factory.LazyFunction(fake.country)


class UserFactory(BaseFactory):
    class Meta:
        model = User

    first_name = factory.LazyFunction(fake.first_name)
    last_name = factory.LazyFunction(fake.last_name)
    email = factory.LazyFunction(fake.email)
    password = factory.LazyFunction(lambda: fake.password(length=12))
    phone = factory.LazyFunction(fake.phone_number)
    address = factory.SubFactory(AddressFactory)

    @classmethod
    def admin(cls, **overrides) -> User:
        overrides.setdefault("email", f"admin.{fake.lexify('?????', letters=ALPHANUMERIC)}@example.com")
        return cls.build(**overrides)

    @classmethod
    def regular(cls, **overrides) -> User:
        overrides.setdefault("email", f"user.{fake.lexify('?????', letters=ALPHANUMERIC)}@example.com")
        return cls.build(**overrides)


class ProductFactory(BaseFactory):
    class Meta:
        model = Product

    name = factory.LazyFunction(lambda: fake.catch_phrase())
    description = factory.LazyFunction(lambda: fake.paragraph(nb_sentences=2))
    price = factory.LazyFunction(lambda: fake.pyfloat(min_value=1, max_value=1000, right_digits=2))
    category = factory.LazyFunction(lambda: fake.random_element(DEPARTMENTS))
    sku = factory.LazyFunction(lambda: fake.lexify("?" * 10, letters=ALPHANUMERIC).upper())
    in_stock = factory.LazyFunction(fake.pybool)
    quantity = factory.LazyFunction(lambda: fake.pyint(min_value=0, max_value=100))


class OrderFactory(BaseFactory):
    class Meta:
        model = Order

    order_id = factory.LazyFunction(lambda: str(uuid.uuid4()))
    user_id = factory.LazyFunction(lambda: str(uuid.uuid4()))
    products = factory.LazyFunction(lambda: ProductFactory.create_many(fake.pyint(min_value=1, max_value=5)))
    total_amount = factory.LazyFunction(lambda: fake.pyfloat(min_value=10, max_value=1000, right_digits=2))
    status = factory.LazyFunction(lambda: fake.random_element(ORDER_STATUSES))
    created_at = factory.LazyFunction(lambda: fake.past_datetime())
