"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from bakery.domain.model.product import Product
from bakery.domain.repository.paging import Page, PageRequest
from bakery.domain.repository.product_repository import ProductRepository
from bakery.infrastructure.persistence.json_repository import JsonRepository, contains_ignore_case


class JsonProductRepository(JsonRepository[Product], ProductRepository):

    collection = "products"
    unique_fields = ("name",)

    # --- ProductRepository interface ------------------------------------------

    def get_by_name(self, name: str) -> Product | None:
        for raw in self._matching(lambda raw: (raw.get("name") or "").casefold() == name.casefold()):
            return self._to_domain(raw)
        return None

    def find_by_name_containing(self, text: str, page: PageRequest) -> Page[Product]:
        return self._query(lambda raw: contains_ignore_case(raw.get("name"), text), page)

    def count_by_name_containing(self, text: str) -> int:
        return self._count(lambda raw: contains_ignore_case(raw.get("name"), text))

    # --- Serialization --------------------------------------------------------

    def _to_raw(self, entity: Product) -> dict:
        return {"name": entity.name, "price": entity.price}

    def _to_domain(self, raw: dict) -> Product:
        return Product(
            id=raw["id"],
            version=raw.get("version", 0),
            name=raw.get("name"),
            price=raw.get("price"),
        )
