"""Application service: Product catalog."""

from __future__ import annotations

from bakery.application.crud_service import FilterableCrudService
from bakery.domain.exceptions import DataConflictError
from bakery.domain.model.product import Product
from bakery.domain.model.user import User
from bakery.domain.repository.paging import Page, PageRequest
from bakery.domain.repository.product_repository import ProductRepository
from bakery.domain.repository.unit_of_work import UnitOfWork

DUPLICATE_NAME_MESSAGE = (
    "There is already a product with that name. Please select a unique name for the product."
)


class ProductService(FilterableCrudService[Product]):

    def __init__(self, product_repo: ProductRepository, unit_of_work: UnitOfWork) -> None:
        super().__init__(unit_of_work)
        self._product_repo = product_repo

    @property
    def repository(self) -> ProductRepository:
        return self._product_repo

    def find_any_matching(self, filter_text: str | None, page: PageRequest) -> Page[Product]:
        if filter_text is not None:
            return self._product_repo.find_by_name_containing(filter_text, page)
        return self.find(page)

    def count_any_matching(self, filter_text: str | None) -> int:
        if filter_text is not None:
            return self._product_repo.count_by_name_containing(filter_text)
        return self.count()

    def find(self, page: PageRequest) -> Page[Product]:
        return self._product_repo.find_all(page)

    def create_new(self, acting_user: User) -> Product:
        return Product()

    def save(self, acting_user: User, entity: Product) -> Product:
        try:
            return super().save(acting_user, entity)
        except DataConflictError as exc:
            raise DataConflictError(DUPLICATE_NAME_MESSAGE) from exc
