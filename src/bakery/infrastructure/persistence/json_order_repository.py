"""JSON-file-backed implementation of OrderRepository.

Each order record embeds its customer, its items and its history.
Products, pickup locations and users are stored in their own collections
and referenced by id; they are resolved when an order is loaded.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from collections.abc import Collection
from dataclasses import dataclass
from datetime import date, datetime, time

from bakery.domain.model.customer import Customer
from bakery.domain.model.order import HistoryItem, Order, OrderItem, OrderState, OrderSummary
from bakery.domain.model.pickup_location import PickupLocation
from bakery.domain.model.product import Product
from bakery.domain.model.user import User
from bakery.domain.repository.order_repository import OrderRepository
from bakery.domain.repository.paging import LoadGraph, Page, PageRequest
from bakery.infrastructure.persistence.json_pickup_location_repository import (
    JsonPickupLocationRepository,
)
from bakery.infrastructure.persistence.json_product_repository import JsonProductRepository
from bakery.infrastructure.persistence.json_repository import (
    JsonRepository,
    Predicate,
    contains_ignore_case,
)
from bakery.infrastructure.persistence.json_store import JsonStore
from bakery.infrastructure.persistence.json_user_repository import JsonUserRepository


@dataclass
class _References:
    """Referenced entities, read once per query."""

    products: dict[int, Product]
    locations: dict[int, PickupLocation]
    users: dict[int, User]


def _due_date(raw: dict) -> date | None:
    value = raw.get("due_date")
    return date.fromisoformat(value) if value else None


def _due_from(floor: date) -> Predicate:
    def predicate(raw: dict) -> bool:
        due = _due_date(raw)
        return due is not None and due >= floor

    return predicate


def _customer_name_contains(text: str) -> Predicate:
    return lambda raw: contains_ignore_case((raw.get("customer") or {}).get("full_name"), text)


def _in_state(state: OrderState) -> Predicate:
    return lambda raw: raw.get("state") == state.value


def _refers_to(collection: str, entity_id: int) -> Predicate:
    def predicate(raw: dict) -> bool:
        if collection == JsonProductRepository.collection:
            return any(item.get("product_id") == entity_id for item in raw.get("items") or [])
        if collection == JsonPickupLocationRepository.collection:
            return raw.get("pickup_location_id") == entity_id
        if collection == JsonUserRepository.collection:
            return any(entry.get("created_by_id") == entity_id for entry in raw.get("history") or [])
        return False

    return predicate


class JsonOrderRepository(JsonRepository[Order], OrderRepository):

    collection = "orders"

    def __init__(
        self,
        store: JsonStore,
        product_repo: JsonProductRepository,
        location_repo: JsonPickupLocationRepository,
        user_repo: JsonUserRepository,
    ) -> None:
        super().__init__(store)
        self._product_repo = product_repo
        self._location_repo = location_repo
        self._user_repo = user_repo
        for referenced in (product_repo, location_repo, user_repo):
            referenced.add_referrer(self)

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, entity_id: int, graph: LoadGraph = LoadGraph.FULL) -> Order | None:
        raw = self._find_raw(entity_id)
        if raw is None:
            return None
        return self._to_order(raw, self._referenced_entities(), graph)

    def load_history(self, order_id: int) -> list[HistoryItem]:
        raw = self._find_raw(order_id)
        if raw is None:
            return []
        users = self._user_repo.all_by_id()
        return [
            self._history_to_domain(h, users, position)
            for position, h in enumerate(raw.get("history") or [], start=1)
        ]

    def find_by_due_date_from(self, floor: date, page: PageRequest) -> Page[Order]:
        return self._query(_due_from(floor), page)

    def find_by_customer_name_containing(self, text: str, page: PageRequest) -> Page[Order]:
        return self._query(_customer_name_contains(text), page)

    def find_by_customer_name_containing_and_due_date_from(
        self, text: str, floor: date, page: PageRequest
    ) -> Page[Order]:
        by_name, by_date = _customer_name_contains(text), _due_from(floor)
        return self._query(lambda raw: by_name(raw) and by_date(raw), page)

    def count_by_due_date_from(self, floor: date) -> int:
        return self._count(_due_from(floor))

    def count_by_customer_name_containing(self, text: str) -> int:
        return self._count(_customer_name_contains(text))

    def count_by_customer_name_containing_and_due_date_from(self, text: str, floor: date) -> int:
        by_name, by_date = _customer_name_contains(text), _due_from(floor)
        return self._count(lambda raw: by_name(raw) and by_date(raw))

    def find_summaries_due_from(self, floor: date) -> list[OrderSummary]:
        return self._to_domain_many(self._matching(_due_from(floor)))

    def count_by_due_date(self, due_date: date) -> int:
        return self._count(lambda raw: _due_date(raw) == due_date)

    def count_by_due_date_and_state_in(self, due_date: date, states: Collection[OrderState]) -> int:
        values = {state.value for state in states}
        return self._count(lambda raw: _due_date(raw) == due_date and raw.get("state") in values)

    def count_by_state(self, state: OrderState) -> int:
        return self._count(_in_state(state))

    def references(self, collection: str, entity_id: int) -> bool:
        return self._count(_refers_to(collection, entity_id)) > 0

    # --- Reporting queries ----------------------------------------------------

    def count_per_month(self, state: OrderState, year: int) -> list[tuple[int, int]]:
        months = Counter(due.month for due in self._due_dates(state) if due.year == year)
        return sorted(months.items())

    def sum_per_month_last_three_years(self, state: OrderState, year: int) -> list[tuple[int, int, int]]:
        prices = {pid: p.price for pid, p in self._product_repo.all_by_id().items()}
        sums: dict[tuple[int, int], int] = defaultdict(int)
        for raw in self._matching(_in_state(state)):
            due = _due_date(raw)
            if due is None or not year - 3 <= due.year <= year:
                continue
            for item in raw.get("items") or []:
                price = prices.get(item.get("product_id"))
                if price is None or item.get("quantity") is None:
                    continue
                sums[(due.year, due.month)] += item["quantity"] * price
        ordered = sorted(sums.items(), key=lambda entry: (-entry[0][0], entry[0][1]))
        return [(y, m, total) for (y, m), total in ordered]

    def count_per_day(self, state: OrderState, year: int, month: int) -> list[tuple[int, int]]:
        days = Counter(
            due.day for due in self._due_dates(state) if (due.year, due.month) == (year, month)
        )
        return sorted(days.items())

    def count_per_product(self, state: OrderState, year: int, month: int) -> list[tuple[Product, int]]:
        products = self._product_repo.all_by_id()
        quantities: dict[int, int] = defaultdict(int)
        for raw in self._matching(_in_state(state)):
            due = _due_date(raw)
            if due is None or (due.year, due.month) != (year, month):
                continue
            for item in raw.get("items") or []:
                product_id = item.get("product_id")
                if product_id in products and item.get("quantity") is not None:
                    quantities[product_id] += item["quantity"]
        return [(products[pid], quantities[pid]) for pid in sorted(quantities)]

    def _due_dates(self, state: OrderState) -> list[date]:
        dates = (_due_date(raw) for raw in self._matching(_in_state(state)))
        return [due for due in dates if due is not None]

    # --- JsonRepository overrides ---------------------------------------------

    def save(self, order: Order) -> Order:
        if order.history is None and order.id is not None:
            order.history = self.load_history(order.id)
        return super().save(order)

    def _to_domain_many(self, records: list[dict]) -> list[Order]:
        refs = self._referenced_entities()
        return [self._to_order(raw, refs, LoadGraph.BRIEF) for raw in records]

    def _to_domain(self, raw: dict) -> Order:
        return self._to_order(raw, self._referenced_entities(), LoadGraph.FULL)

    def _after_save(self, order: Order) -> None:
        # Owned entities are numbered by position and share the order's version.
        if order.customer is not None:
            order.customer.id, order.customer.version = order.id, order.version
        for position, item in enumerate(order.items, start=1):
            item.id, item.version = position, order.version
        for position, entry in enumerate(order.history or [], start=1):
            entry.id = position

    # --- Serialization --------------------------------------------------------

    def _to_raw(self, order: Order) -> dict:
        customer = order.customer or Customer()
        return {
            "due_date": order.due_date.isoformat() if order.due_date else None,
            "due_time": order.due_time.isoformat() if order.due_time else None,
            "pickup_location_id": order.pickup_location.id if order.pickup_location else None,
            "state": order.state.value if order.state else None,
            "customer": {
                "full_name": customer.full_name,
                "phone_number": customer.phone_number,
                "details": customer.details,
            },
            "items": [
                {
                    "product_id": item.product.id if item.product else None,
                    "quantity": item.quantity,
                    "comment": item.comment,
                }
                for item in order.items
            ],
            "history": [
                {
                    "new_state": entry.new_state.value if entry.new_state else None,
                    "message": entry.message,
                    "timestamp": entry.timestamp.isoformat(),
                    "created_by_id": entry.created_by.id if entry.created_by else None,
                }
                for entry in order.history or []
            ],
        }

    def _to_order(self, raw: dict, refs: _References, graph: LoadGraph) -> Order:
        order_id, version = raw["id"], raw.get("version", 0)
        customer_raw = raw.get("customer") or {}
        due_time = raw.get("due_time")
        return Order(
            id=order_id,
            version=version,
            due_date=_due_date(raw),
            due_time=time.fromisoformat(due_time) if due_time else None,
            pickup_location=refs.locations.get(raw.get("pickup_location_id")),
            customer=Customer(
                id=order_id,
                version=version,
                full_name=customer_raw.get("full_name"),
                phone_number=customer_raw.get("phone_number"),
                details=customer_raw.get("details"),
            ),
            items=[
                OrderItem(
                    id=position,
                    version=version,
                    product=refs.products.get(item.get("product_id")),
                    quantity=item.get("quantity"),
                    comment=item.get("comment"),
                )
                for position, item in enumerate(raw.get("items") or [], start=1)
            ],
            state=OrderState(raw["state"]) if raw.get("state") else None,
            history=(
                [self._history_to_domain(h, refs.users, position)
                 for position, h in enumerate(raw.get("history") or [], start=1)]
                if graph is LoadGraph.FULL
                else None
            ),
        )

    @staticmethod
    def _history_to_domain(raw: dict, users: dict[int, User], position: int | None = None) -> HistoryItem:
        return HistoryItem.reconstitute(
            datetime.fromisoformat(raw["timestamp"]),
            id=position,
            created_by=users.get(raw.get("created_by_id")),
            message=raw.get("message"),
            new_state=OrderState(raw["new_state"]) if raw.get("new_state") else None,
        )

    def _referenced_entities(self) -> _References:
        return _References(
            products=self._product_repo.all_by_id(),
            locations=self._location_repo.all_by_id(),
            users=self._user_repo.all_by_id(),
        )
