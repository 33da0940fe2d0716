from .factories import (
    Address,
    AddressFactory,
    Order,
    OrderFactory,
    Product,
    ProductFactory,
    User,
    UserFactory,
)

__all__ = [
    "Address",
    "AddressFactory",
    "Order",
    "OrderFactory",
    "Product",
    "ProductFactory",
    "User",
    "UserFactory",
]
