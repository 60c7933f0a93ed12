"""Composition root: wires the JSON store and repositories into services.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from dataclasses import dataclass

from bakery.application.order_service import OrderService
from bakery.application.pickup_location_service import PickupLocationService
from bakery.application.product_service import ProductService
from bakery.application.user_service import UserService
from bakery.infrastructure.persistence.json_order_repository import JsonOrderRepository
from bakery.infrastructure.persistence.json_pickup_location_repository import (
    JsonPickupLocationRepository,
)
from bakery.infrastructure.persistence.json_product_repository import JsonProductRepository
from bakery.infrastructure.persistence.json_store import JsonStore
from bakery.infrastructure.persistence.json_user_repository import JsonUserRepository
from bakery.infrastructure.settings import get_settings


@dataclass
class Services:
    """Every application service, sharing one store and unit of work."""

    products: ProductService
    locations: PickupLocationService
    users: UserService
    orders: OrderService


def json_store() -> JsonStore:
    return JsonStore(get_settings().data_dir)


def build_services(store: JsonStore | None = None) -> Services:
    store = store if store is not None else json_store()
    product_repo = JsonProductRepository(store)
    location_repo = JsonPickupLocationRepository(store)
    user_repo = JsonUserRepository(store)
    order_repo = JsonOrderRepository(store, product_repo, location_repo, user_repo)
    return Services(
        products=ProductService(product_repo, store),
        locations=PickupLocationService(location_repo, store),
        users=UserService(user_repo, store),
        orders=OrderService(order_repo, store),
    )
