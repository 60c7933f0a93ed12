"""Abstract repository for PickupLocation."""

from __future__ import annotations

from abc import abstractmethod

from bakery.domain.model.pickup_location import PickupLocation
from bakery.domain.repository.crud_repository import CrudRepository
from bakery.domain.repository.paging import Page, PageRequest


class PickupLocationRepository(CrudRepository[PickupLocation]):

    @abstractmethod
    def get_by_name(self, name: str) -> PickupLocation | None:
        """Return the location with this name (ignoring case), or None."""

    @abstractmethod
    def find_by_name_containing(self, text: str, page: PageRequest) -> Page[PickupLocation]:
        """Locations whose name contains ``text``, ignoring case."""

    @abstractmethod
    def count_by_name_containing(self, text: str) -> int:
        """Count of ``find_by_name_containing`` matches."""
