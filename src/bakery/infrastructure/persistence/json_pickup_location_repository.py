"""JSON-file-backed implementation of PickupLocationRepository."""

from __future__ import annotations

from bakery.domain.model.pickup_location import PickupLocation
from bakery.domain.repository.paging import Page, PageRequest
from bakery.domain.repository.pickup_location_repository import PickupLocationRepository
from bakery.infrastructure.persistence.json_repository import JsonRepository, contains_ignore_case


class JsonPickupLocationRepository(JsonRepository[PickupLocation], PickupLocationRepository):

    collection = "pickup_locations"
    unique_fields = ("name",)

    def get_by_name(self, name: str) -> PickupLocation | None:
        for raw in self._matching(lambda raw: (raw.get("name") or "").casefold() == name.casefold()):
            return self._to_domain(raw)
        return None

    def find_by_name_containing(self, text: str, page: PageRequest) -> Page[PickupLocation]:
        return self._query(lambda raw: contains_ignore_case(raw.get("name"), text), page)

    def count_by_name_containing(self, text: str) -> int:
        return self._count(lambda raw: contains_ignore_case(raw.get("name"), text))

    def _to_raw(self, entity: PickupLocation) -> dict:
        return {"name": entity.name}

    def _to_domain(self, raw: dict) -> PickupLocation:
        return PickupLocation(id=raw["id"], version=raw.get("version", 0), name=raw.get("name"))
