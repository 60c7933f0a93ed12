"""Integration tests for OrderService: transactional saves and search."""

from datetime import date, time, timedelta

import pytest

from bakery.domain.exceptions import (
    ConcurrentModificationError,
    EntityNotFoundError,
    ValidationError,
)
from bakery.domain.model.order import Order, OrderItem, OrderState
from bakery.domain.repository.paging import PageRequest
from tests.fakes import make_services, seed

TODAY = date(2024, 5, 10)


def _setup():
    services, store = make_services(today=TODAY)
    fixtures = seed(services)
    return services, store, fixtures


def _filler(fixtures, name="Alice", due=TODAY, items=None):
    def fill(user, order):
        order.customer.full_name = name
        order.customer.phone_number = "040 123 4567"
        order.due_date = due
        order.due_time = time(16, 0)
        order.pickup_location = fixtures["store"]
        order.items = items if items is not None else [
            OrderItem(product=fixtures["croissant"], quantity=2),
            OrderItem(product=fixtures["cake"], quantity=1),
        ]
    return fill


def _place(services, fixtures, **kwargs) -> Order:
    return services.orders.save_order(fixtures["barista"], None, _filler(fixtures, **kwargs))


class TestSaveOrder:

    def test_new_order_is_persisted_with_placed_history(self):
        services, _, fixtures = _setup()
        order = _place(services, fixtures)

        stored = services.orders.load(order.id)
        assert stored.state is OrderState.NEW
        assert stored.total_price == 2200
        assert [h.message for h in stored.history] == ["Order placed"]
        assert stored.history[0].created_by == fixtures["barista"]

    def test_existing_order_is_mutated_and_saved(self):
        services, _, fixtures = _setup()
        order = _place(services, fixtures)

        saved = services.orders.save_order(
            fixtures["admin"], order.id, lambda user, o: o.change_state(user, OrderState.CONFIRMED)
        )

        assert saved.version == 1
        stored = services.orders.load(order.id)
        assert stored.state is OrderState.CONFIRMED
        assert [h.message for h in stored.history] == ["Order placed", "Order Confirmed"]

    def test_same_state_twice_records_one_entry(self):
        services, _, fixtures = _setup()
        order = _place(services, fixtures)
        confirm = lambda user, o: o.change_state(user, OrderState.CONFIRMED)  # noqa: E731

        services.orders.save_order(fixtures["admin"], order.id, confirm)
        services.orders.save_order(fixtures["admin"], order.id, confirm)

        assert len(services.orders.load(order.id).history) == 2

    def test_unknown_order_id(self):
        services, _, fixtures = _setup()
        with pytest.raises(EntityNotFoundError):
            services.orders.save_order(fixtures["admin"], 42, lambda user, o: None)

    def test_failing_mutator_rolls_back_everything(self):
        services, store, fixtures = _setup()
        order = _place(services, fixtures)
        before = store.read("orders")

        def explode(user, o):
            o.change_state(user, OrderState.CANCELLED)
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            services.orders.save_order(fixtures["admin"], order.id, explode)

        assert store.read("orders") == before
        assert not store.in_transaction

    def test_invalid_order_is_not_stored(self):
        services, store, fixtures = _setup()

        with pytest.raises(ValidationError, match="items"):
            _place(services, fixtures, items=[])
        assert store.read("orders") == []

    def test_stale_version_rejected(self):
        services, _, fixtures = _setup()
        order = _place(services, fixtures)
        stale = services.orders.load(order.id)
        services.orders.save_order(
            fixtures["admin"], order.id, lambda user, o: o.change_state(user, OrderState.READY)
        )

        stale.change_state(fixtures["admin"], OrderState.CANCELLED)
        with pytest.raises(ConcurrentModificationError):
            services.orders.save(fixtures["admin"], stale)


class TestAddComment:

    def test_comment_is_appended_and_stored(self):
        services, _, fixtures = _setup()
        order = _place(services, fixtures)

        updated = services.orders.add_comment(fixtures["admin"], order, "Customer will be late")

        assert updated.history[-1].message == "Customer will be late"
        assert updated.history[-1].new_state is OrderState.NEW
        stored = services.orders.load(order.id)
        assert [h.message for h in stored.history] == ["Order placed", "Customer will be late"]

    def test_failed_comment_leaves_caller_instance_untouched(self):
        services, store, fixtures = _setup()
        order = _place(services, fixtures)
        before = store.read("orders")

        with pytest.raises(ValidationError):
            services.orders.add_comment(fixtures["admin"], order, "")

        assert [h.message for h in order.history] == ["Order placed"]
        assert order.version == 0
        assert store.read("orders") == before

    def test_comment_on_brief_loaded_order_keeps_history(self):
        services, _, fixtures = _setup()
        _place(services, fixtures)
        brief = services.orders.find_any_matching_after_due_date(None, None, PageRequest()).content[0]
        assert brief.history is None

        services.orders.add_comment(fixtures["admin"], brief, "Extra candles")

        stored = services.orders.load(brief.id)
        assert [h.message for h in stored.history] == ["Order placed", "Extra candles"]


class TestCreateNew:

    def test_defaults_to_today_at_four_pm(self):
        services, store, fixtures = _setup()
        order = services.orders.create_new(fixtures["barista"])

        assert order.due_date == TODAY
        assert order.due_time == time(16, 0)
        assert order.state is OrderState.NEW
        assert order.id is None
        assert store.read("orders") == []


class TestFindAnyMatching:

    def _seed_orders(self):
        services, store, fixtures = _setup()
        _place(services, fixtures, name="Alice Smith", due=TODAY - timedelta(days=1))
        _place(services, fixtures, name="Bob Smith", due=TODAY)
        _place(services, fixtures, name="alice jones", due=TODAY + timedelta(days=3))
        return services, fixtures

    def _ids(self, page):
        return [o.id for o in page]

    def test_no_filters_equals_find_all(self):
        services, _ = self._seed_orders()
        page = services.orders.find_any_matching_after_due_date(None, None, PageRequest())

        assert self._ids(page) == self._ids(services.orders.repository.find_all(PageRequest()))
        assert services.orders.count_any_matching_after_due_date(None, None) == services.orders.count() == 3

    def test_empty_name_is_no_filter(self):
        services, _ = self._seed_orders()
        assert services.orders.count_any_matching_after_due_date("", None) == 3

    def test_name_filter_is_case_insensitive(self):
        services, _ = self._seed_orders()
        page = services.orders.find_any_matching_after_due_date("ALICE", None, PageRequest())

        assert [o.customer.full_name for o in page] == ["Alice Smith", "alice jones"]
        assert services.orders.count_any_matching_after_due_date("ALICE", None) == 2

    def test_due_date_floor_is_inclusive(self):
        services, _ = self._seed_orders()
        page = services.orders.find_any_matching_after_due_date(None, TODAY, PageRequest())

        assert [o.customer.full_name for o in page] == ["Bob Smith", "alice jones"]

    def test_combined_filters_are_the_intersection(self):
        services, _ = self._seed_orders()
        by_name = set(self._ids(services.orders.find_any_matching_after_due_date("smith", None, PageRequest())))
        by_date = set(self._ids(services.orders.find_any_matching_after_due_date(None, TODAY, PageRequest())))
        both = services.orders.find_any_matching_after_due_date("smith", TODAY, PageRequest())

        assert set(self._ids(both)) == by_name & by_date
        assert services.orders.count_any_matching_after_due_date("smith", TODAY) == 1

    def test_results_are_loaded_brief(self):
        services, _ = self._seed_orders()
        page = services.orders.find_any_matching_after_due_date(None, None, PageRequest())
        assert all(o.history is None for o in page)

    def test_starting_today(self):
        services, _ = self._seed_orders()
        summaries = services.orders.find_any_matching_starting_today()

        assert [s.customer.full_name for s in summaries] == ["Bob Smith", "alice jones"]
        assert summaries[0].total_price == 2200
