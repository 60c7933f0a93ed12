"""Unit tests for the Order aggregate and its state history."""

from datetime import date, datetime, time

import pytest

from bakery.domain.model.customer import Customer
from bakery.domain.model.order import ORDER_PLACED_MESSAGE, HistoryItem, Order, OrderItem, OrderState
from bakery.domain.model.pickup_location import PickupLocation
from bakery.domain.model.product import Product
from bakery.domain.model.user import Role, User


def _user() -> User:
    return User(id=1, email="baker@bakery.test", first_name="Ben", last_name="Baker", role=Role.BAKER)


def _valid_order() -> Order:
    order = Order.create(_user())
    order.customer.full_name = "Alice"
    order.customer.phone_number = "+358 40 123 4567"
    order.due_date = date(2024, 5, 10)
    order.due_time = time(16, 0)
    order.pickup_location = PickupLocation(id=1, name="Store")
    order.items = [OrderItem(product=Product(id=1, name="Croissant", price=500), quantity=2)]
    return order


class TestOrderCreation:

    def test_new_order_starts_in_new_state(self):
        order = Order.create(_user())
        assert order.state is OrderState.NEW
        assert order.id is None  # assigned by repository
        assert order.items == []
        assert isinstance(order.customer, Customer)

    def test_creation_records_order_placed(self):
        user = _user()
        order = Order.create(user)

        assert len(order.history) == 1
        entry = order.history[0]
        assert entry.message == ORDER_PLACED_MESSAGE
        assert entry.new_state is OrderState.NEW
        assert entry.created_by is user


class TestOrderTotal:

    def test_total_is_sum_of_item_totals(self):
        order = Order.create(_user())
        order.items = [
            OrderItem(product=Product(name="Croissant", price=500), quantity=2),
            OrderItem(product=Product(name="Strawberry Cake", price=1200), quantity=1),
        ]
        assert order.total_price == 2200

    def test_items_without_product_or_quantity_count_as_zero(self):
        order = Order.create(_user())
        order.items = [
            OrderItem(product=None, quantity=3),
            OrderItem(product=Product(name="Bun", price=None), quantity=3),
            OrderItem(product=Product(name="Bun", price=100), quantity=None),
        ]
        assert order.total_price == 0

    def test_empty_order_totals_zero(self):
        assert Order.create(_user()).total_price == 0


class TestChangeState:

    def test_change_records_history_with_display_name(self):
        order = Order.create(_user())
        order.change_state(_user(), OrderState.CONFIRMED)

        assert order.state is OrderState.CONFIRMED
        assert order.history[-1].message == "Order Confirmed"
        assert order.history[-1].new_state is OrderState.CONFIRMED

    def test_repeating_the_same_state_is_idempotent(self):
        order = Order.create(_user())
        order.change_state(_user(), OrderState.CONFIRMED)
        order.change_state(_user(), OrderState.CONFIRMED)

        assert len(order.history) == 2  # placed + confirmed once

    def test_any_transition_is_accepted(self):
        order = Order.create(_user())
        order.change_state(_user(), OrderState.DELIVERED)
        order.change_state(_user(), OrderState.NEW)

        assert order.state is OrderState.NEW
        assert [h.message for h in order.history][1:] == ["Order Delivered", "Order New"]

    def test_no_history_when_previous_state_undefined(self):
        order = Order(history=[])
        order.change_state(_user(), OrderState.READY)

        assert order.state is OrderState.READY
        assert order.history == []

    def test_no_history_when_new_state_undefined(self):
        order = Order.create(_user())
        order.change_state(_user(), None)

        assert order.state is None
        assert len(order.history) == 1


class TestHistory:

    def test_comment_snapshots_current_state(self):
        order = Order.create(_user())
        order.change_state(_user(), OrderState.READY)
        order.add_history_item(_user(), "Customer called")

        assert order.history[-1].message == "Customer called"
        assert order.history[-1].new_state is OrderState.READY

    def test_snapshot_is_not_affected_by_later_changes(self):
        order = Order.create(_user())
        order.add_history_item(_user(), "Note")
        order.change_state(_user(), OrderState.CANCELLED)

        assert order.history[1].new_state is OrderState.NEW

    def test_history_list_is_created_when_not_loaded(self):
        order = Order(state=OrderState.NEW)
        assert not order.history_loaded

        order.add_history_item(_user(), "Note")
        assert order.history_loaded
        assert len(order.history) == 1


class TestHistoryTimestamp:

    def test_timestamp_is_not_a_constructor_argument(self):
        with pytest.raises(TypeError):
            HistoryItem(message="Backdated", timestamp=datetime(2000, 1, 1))

    def test_new_entries_are_stamped_now(self):
        before = datetime.now()
        entry = Order.create(_user()).history[0]

        assert before <= entry.timestamp <= datetime.now()

    def test_reconstitute_keeps_stored_timestamp(self):
        stored = datetime(2024, 5, 1, 8, 30)
        entry = HistoryItem.reconstitute(stored, id=1, message="Order placed", new_state=OrderState.NEW)

        assert entry.timestamp == stored
        assert entry.id == 1
        assert entry.message == "Order placed"


class TestConventionalFlow:

    def test_forward_steps_allowed(self):
        assert OrderState.NEW.can_transition_to(OrderState.CONFIRMED)
        assert OrderState.CONFIRMED.can_transition_to(OrderState.READY)
        assert OrderState.READY.can_transition_to(OrderState.DELIVERED)

    def test_cancelled_is_terminal(self):
        assert not any(OrderState.CANCELLED.can_transition_to(s) for s in OrderState)

    def test_skipping_steps_not_in_flow(self):
        assert not OrderState.NEW.can_transition_to(OrderState.DELIVERED)


class TestOrderValidation:

    def test_complete_order_is_valid(self):
        assert _valid_order().validate() == []

    def test_missing_fields_are_all_reported(self):
        order = Order.create(_user())
        fields = {v.field for v in order.validate()}

        assert {"due_date", "due_time", "pickup_location", "items", "customer.full_name"} <= fields

    def test_item_quantity_must_be_positive(self):
        order = _valid_order()
        order.items[0].quantity = 0

        assert [v.field for v in order.validate()] == ["items[0].quantity"]

    def test_history_entry_needs_author(self):
        order = _valid_order()
        order.add_history_item(None, "anonymous")

        assert [v.field for v in order.validate()] == ["history[1].created_by"]
