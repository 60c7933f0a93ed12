"""In-memory test doubles.

``InMemoryJsonStore`` is the real JsonStore with its file helpers swapped
for a dict, so transactions, versions and uniqueness behave exactly as in
production. No file I/O, no side effects.
"""

from __future__ import annotations

import copy
from datetime import date, time
from pathlib import Path

from bakery.application.order_service import OrderService
from bakery.domain.model.order import Order, OrderItem
from bakery.domain.model.pickup_location import PickupLocation
from bakery.domain.model.product import Product
from bakery.domain.model.user import Role, User
from bakery.infrastructure.bootstrap import Services, build_services
from bakery.infrastructure.persistence.json_store import JsonStore


class InMemoryJsonStore(JsonStore):

    def __init__(self) -> None:
        super().__init__(Path("unused"))
        self.files: dict[str, list[dict]] = {}
        self.flushes = 0

    def _read_file(self, collection: str) -> list[dict]:
        return copy.deepcopy(self.files.get(collection, []))

    def _write_file(self, collection: str, records: list[dict]) -> None:
        self.files[collection] = copy.deepcopy(records)
        self.flushes += 1


def make_services(today: date | None = None) -> tuple[Services, InMemoryJsonStore]:
    store = InMemoryJsonStore()
    services = build_services(store)
    if today is not None:
        services.orders = OrderService(services.orders.repository, store, today=lambda: today)
    return services, store


def seed(services: Services) -> dict:
    """Two products, two pickup locations, an admin and a barista."""
    admin = services.users.save(None, _user("admin@bakery.test", "Ada", "Admin", Role.ADMIN))
    barista = services.users.save(None, _user("barista@bakery.test", "Bo", "Barista", Role.BARISTA))
    croissant = services.products.save(admin, Product(name="Croissant", price=500))
    cake = services.products.save(admin, Product(name="Strawberry Cake", price=1200))
    store = services.locations.save(admin, PickupLocation(name="Store"))
    bakery = services.locations.save(admin, PickupLocation(name="Bakery"))
    return {
        "admin": admin,
        "barista": barista,
        "croissant": croissant,
        "cake": cake,
        "store": store,
        "bakery": bakery,
    }


def place_order(services: Services, fixtures: dict, acting_user: User | None = None) -> Order:
    """One croissant for Alice, picked up at the Store."""

    def fill(user: User, order: Order) -> None:
        order.customer.full_name = "Alice"
        order.customer.phone_number = "040 123 4567"
        order.due_date = date(2030, 1, 15)
        order.due_time = time(16, 0)
        order.pickup_location = fixtures["store"]
        order.items = [OrderItem(product=fixtures["croissant"], quantity=1)]

    return services.orders.save_order(acting_user or fixtures["barista"], None, fill)


def _user(email: str, first: str, last: str, role: str) -> User:
    return User(email=email, password_hash="hashed-secret", first_name=first, last_name=last, role=role)
