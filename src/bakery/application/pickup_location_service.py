"""Application service: Pickup locations."""

from __future__ import annotations

from bakery.application.crud_service import FilterableCrudService
from bakery.domain.exceptions import EntityNotFoundError
from bakery.domain.model.pickup_location import PickupLocation
from bakery.domain.model.user import User
from bakery.domain.repository.paging import Page, PageRequest
from bakery.domain.repository.pickup_location_repository import PickupLocationRepository
from bakery.domain.repository.unit_of_work import UnitOfWork


class PickupLocationService(FilterableCrudService[PickupLocation]):

    def __init__(self, location_repo: PickupLocationRepository, unit_of_work: UnitOfWork) -> None:
        super().__init__(unit_of_work)
        self._location_repo = location_repo

    @property
    def repository(self) -> PickupLocationRepository:
        return self._location_repo

    def find_any_matching(self, filter_text: str | None, page: PageRequest) -> Page[PickupLocation]:
        if filter_text is not None:
            return self._location_repo.find_by_name_containing(filter_text, page)
        return self._location_repo.find_all(page)

    def count_any_matching(self, filter_text: str | None) -> int:
        if filter_text is not None:
            return self._location_repo.count_by_name_containing(filter_text)
        return self.count()

    def get_default(self) -> PickupLocation:
        """The first stored location, used to pre-fill new orders."""
        first_page = self.find_any_matching(None, PageRequest.of(0, 1))
        if not first_page.content:
            raise EntityNotFoundError("No pickup locations defined")
        return first_page.content[0]

    def create_new(self, acting_user: User) -> PickupLocation:
        return PickupLocation()
