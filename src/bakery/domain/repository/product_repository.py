"""Abstract repository for Product."""

from __future__ import annotations

from abc import abstractmethod

from bakery.domain.model.product import Product
from bakery.domain.repository.crud_repository import CrudRepository
from bakery.domain.repository.paging import Page, PageRequest


class ProductRepository(CrudRepository[Product]):

    @abstractmethod
    def get_by_name(self, name: str) -> Product | None:
        """Return the product with this name (ignoring case), or None."""

    @abstractmethod
    def find_by_name_containing(self, text: str, page: PageRequest) -> Page[Product]:
        """Products whose name contains ``text``, ignoring case."""

    @abstractmethod
    def count_by_name_containing(self, text: str) -> int:
        """Count of ``find_by_name_containing`` matches."""
