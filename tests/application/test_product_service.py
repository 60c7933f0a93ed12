"""Integration tests for the product and pickup location services."""

import pytest

from bakery.application.product_service import DUPLICATE_NAME_MESSAGE
from bakery.domain.exceptions import DataConflictError, EntityNotFoundError, ValidationError
from bakery.domain.model.product import Product
from bakery.domain.repository.paging import PageRequest
from tests.fakes import make_services, place_order, seed


def _setup():
    services, store = make_services()
    fixtures = seed(services)
    return services, store, fixtures


class TestProductSave:

    def test_save_assigns_id_and_version(self):
        services, _, fixtures = _setup()
        product = services.products.save(fixtures["admin"], Product(name="Bagel", price=250))

        assert product.id is not None
        assert product.version == 0
        assert services.products.load(product.id).name == "Bagel"

    def test_update_bumps_version(self):
        services, _, fixtures = _setup()
        product = services.products.load(fixtures["croissant"].id)
        product.price = 550

        saved = services.products.save(fixtures["admin"], product)
        assert saved.version == 1
        assert services.products.load(product.id).price == 550

    def test_duplicate_name_rejected_without_write(self):
        services, store, fixtures = _setup()
        before = store.read("products")

        with pytest.raises(DataConflictError) as exc_info:
            services.products.save(fixtures["admin"], Product(name="croissant", price=100))

        assert str(exc_info.value) == DUPLICATE_NAME_MESSAGE
        assert store.read("products") == before

    def test_invalid_product_rejected(self):
        services, store, fixtures = _setup()
        flushes = store.flushes

        with pytest.raises(ValidationError, match="name"):
            services.products.save(fixtures["admin"], Product(name="", price=100))
        assert store.flushes == flushes

    def test_create_new_is_transient(self):
        services, _, fixtures = _setup()
        product = services.products.create_new(fixtures["admin"])

        assert product.id is None
        assert services.products.count() == 2


class TestProductDelete:

    def test_delete_by_id(self):
        services, _, fixtures = _setup()
        services.products.delete_by_id(fixtures["admin"], fixtures["cake"].id)

        assert services.products.count() == 1
        with pytest.raises(EntityNotFoundError):
            services.products.load(fixtures["cake"].id)

    def test_delete_missing_entity(self):
        services, _, fixtures = _setup()
        with pytest.raises(EntityNotFoundError):
            services.products.delete(fixtures["admin"], None)
        with pytest.raises(EntityNotFoundError):
            services.products.delete_by_id(fixtures["admin"], 999)


class TestProductSearch:

    def test_filter_is_case_insensitive_contains(self):
        services, _, _ = _setup()
        page = services.products.find_any_matching("CAKE", PageRequest())

        assert [p.name for p in page] == ["Strawberry Cake"]
        assert services.products.count_any_matching("CAKE") == 1

    def test_no_filter_returns_everything(self):
        services, _, _ = _setup()
        page = services.products.find_any_matching(None, PageRequest())

        assert [p.name for p in page] == ["Croissant", "Strawberry Cake"]
        assert services.products.count_any_matching(None) == 2

    def test_paging(self):
        services, _, _ = _setup()
        page = services.products.find_any_matching(None, PageRequest.of(1, 1))

        assert [p.name for p in page] == ["Strawberry Cake"]
        assert page.total == 2
        assert page.total_pages == 2
        assert not page.has_next


class TestPickupLocationService:

    def test_default_is_first_location(self):
        services, _, fixtures = _setup()
        assert services.locations.get_default() == fixtures["store"]

    def test_default_without_locations(self):
        services, _ = make_services()
        with pytest.raises(EntityNotFoundError):
            services.locations.get_default()

    def test_search_by_name(self):
        services, _, _ = _setup()
        assert [loc.name for loc in services.locations.find_any_matching("bak", PageRequest())] == ["Bakery"]
        assert services.locations.count_any_matching("o") == 1


class TestDeleteReferencedEntities:

    def test_ordered_product_cannot_be_deleted(self):
        services, store, fixtures = _setup()
        order = place_order(services, fixtures)
        before = store.read("products")

        with pytest.raises(DataConflictError, match="'Croissant' is used by existing orders"):
            services.products.delete(fixtures["admin"], fixtures["croissant"])

        assert store.read("products") == before
        stored = services.orders.load(order.id)
        assert stored.items[0].product == fixtures["croissant"]
        assert stored.total_price == 500

    def test_pickup_location_in_use_cannot_be_deleted(self):
        services, store, fixtures = _setup()
        order = place_order(services, fixtures)
        before = store.read("pickup_locations")

        with pytest.raises(DataConflictError, match="'Store' is used by existing orders"):
            services.locations.delete_by_id(fixtures["admin"], fixtures["store"].id)

        assert store.read("pickup_locations") == before
        assert services.orders.load(order.id).pickup_location == fixtures["store"]

    def test_unreferenced_entities_can_be_deleted(self):
        services, _, fixtures = _setup()
        place_order(services, fixtures)

        services.products.delete(fixtures["admin"], fixtures["cake"])
        services.locations.delete(fixtures["admin"], fixtures["bakery"])

        assert services.products.count() == 1
        assert services.locations.count() == 1
