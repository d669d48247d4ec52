"""
订单聚合根测试。
"""
from decimal import Decimal

import pytest

from orders.domain.entities import (
    Order,
    OrderItem,
    OrderStatus,
    _STATUS_TRANSITIONS,
    validate_order_item,
)
from orders.domain.errors import OrderError, OrderErrorCode
from orders.domain.events import OrderStatusChangedEvent


def _advance(order, *steps):
    for step in steps:
        getattr(order, step)()
    return order


def _order_in(status, order_factory):
    order = order_factory(items=[(1, 2, "10.00")])
    path = {
        OrderStatus.PENDING: (),
        OrderStatus.CONFIRMED: ("confirm",),
        OrderStatus.PROCESSING: ("confirm", "start_processing"),
        OrderStatus.SHIPPED: ("confirm", "start_processing", "ship"),
        OrderStatus.DELIVERED: ("confirm", "start_processing", "ship", "deliver"),
        OrderStatus.REFUNDED: ("confirm", "start_processing", "ship", "deliver", "refund"),
        OrderStatus.CANCELLED: ("cancel",),
    }[status]
    return _advance(order, *path)


def _snapshot(order):
    return (order.status, order.items, order.total_amount, order.updated_at)


class TestOrderCreate:

    def test_new_order_is_pending_and_empty(self):
        order = Order.create(42)

        assert order.customer_id == 42
        assert order.status is OrderStatus.PENDING
        assert order.items == ()
        assert order.total_amount == Decimal("0")
        assert order.id is None
        assert order.created_at == order.updated_at
        assert order.created_at.tzinfo is not None

    @pytest.mark.parametrize("customer_id", [0, -5, "7", None, True, 1.5])
    def test_rejects_invalid_customer_id(self, customer_id):
        with pytest.raises(OrderError) as exc_info:
            Order.create(customer_id)
        assert exc_info.value.code == OrderErrorCode.INVALID_CUSTOMER_ID
        assert exc_info.value.field == "customer_id"


class TestValidateOrderItem:

    def test_returns_trimmed_values_and_decimal_price(self):
        sku, name, price = validate_order_item(1, "  SKU-1 ", " Mouse ", 2, "19.90")
        assert (sku, name, price) == ("SKU-1", "Mouse", Decimal("19.90"))

    def test_float_price_is_converted_without_binary_noise(self):
        _, _, price = validate_order_item(1, "SKU", "Name", 1, 0.1)
        assert price == Decimal("0.1")

    def test_price_is_kept_in_cents(self):
        _, _, price = validate_order_item(1, "SKU", "Name", 1, "10.500")
        assert str(price) == "10.50"

    @pytest.mark.parametrize(
        "args, code",
        [
            ((0, "SKU", "Name", 1, "1.00"), OrderErrorCode.INVALID_PRODUCT_ID),
            ((-1, "SKU", "Name", 1, "1.00"), OrderErrorCode.INVALID_PRODUCT_ID),
            ((True, "SKU", "Name", 1, "1.00"), OrderErrorCode.INVALID_PRODUCT_ID),
            ((1, "", "Name", 1, "1.00"), OrderErrorCode.INVALID_PRODUCT_SKU),
            ((1, "   ", "Name", 1, "1.00"), OrderErrorCode.INVALID_PRODUCT_SKU),
            ((1, None, "Name", 1, "1.00"), OrderErrorCode.INVALID_PRODUCT_SKU),
            ((1, "SKU", "", 1, "1.00"), OrderErrorCode.INVALID_PRODUCT_NAME),
            ((1, "SKU", "Name", 0, "1.00"), OrderErrorCode.INVALID_QUANTITY),
            ((1, "SKU", "Name", -3, "1.00"), OrderErrorCode.INVALID_QUANTITY),
            ((1, "SKU", "Name", 1, "0"), OrderErrorCode.INVALID_UNIT_PRICE),
            ((1, "SKU", "Name", 1, "-2.50"), OrderErrorCode.INVALID_UNIT_PRICE),
            ((1, "SKU", "Name", 1, "abc"), OrderErrorCode.INVALID_UNIT_PRICE),
            ((1, "SKU", "Name", 1, "NaN"), OrderErrorCode.INVALID_UNIT_PRICE),
            ((1, "SKU", "Name", 1, Decimal("0.004")), OrderErrorCode.INVALID_UNIT_PRICE),
            ((1, "SKU", "Name", 1, Decimal("10.005")), OrderErrorCode.INVALID_UNIT_PRICE),
        ],
    )
    def test_rejects_invalid_fields(self, args, code):
        with pytest.raises(OrderError) as exc_info:
            validate_order_item(*args)
        assert exc_info.value.code == code

    def test_first_invalid_field_wins(self):
        with pytest.raises(OrderError) as exc_info:
            validate_order_item(0, "", "", 0, "0")
        assert exc_info.value.code == OrderErrorCode.INVALID_PRODUCT_ID

    def test_order_item_create_uses_same_rules(self):
        with pytest.raises(OrderError) as exc_info:
            OrderItem.create(1, "SKU", "Name", 0, "1.00")
        assert exc_info.value.code == OrderErrorCode.INVALID_QUANTITY

        item = OrderItem.create(1, " SKU ", "Name", 3, "2.50")
        assert item.product_sku == "SKU"
        assert item.total_price == Decimal("7.50")


class TestOrderItems:

    def test_add_item_appends_and_recomputes_total(self, order_factory):
        order = order_factory(items=[(1, 2, "10.00"), (2, 1, "5.50")])

        assert [item.product_id for item in order.items] == [1, 2]
        assert order.total_amount == Decimal("25.50")
        assert order.get_item_count() == 2
        assert order.get_total_quantity() == 3

    def test_add_existing_product_merges_quantity(self, order_factory):
        order = order_factory(items=[(1, 2, "10.00")])
        order.add_item(1, "OTHER", "Other name", 3, Decimal("99.00"))

        assert len(order.items) == 1
        item = order.get_item(1)
        assert item.quantity == 5
        assert item.unit_price == Decimal("10.00")
        assert item.product_sku == "SKU-1"
        assert order.total_amount == Decimal("50.00")

    def test_add_item_touches_updated_at(self, order_factory):
        order = order_factory()
        before = order.updated_at
        order.add_item(1, "SKU", "Name", 1, "1.00")
        assert order.updated_at >= before

    def test_remove_item_keeps_order_of_remaining(self, order_factory):
        order = order_factory(items=[(1, 1, "1.00"), (2, 1, "2.00"), (3, 1, "3.00")])
        order.remove_item(2)

        assert [item.product_id for item in order.items] == [1, 3]
        assert order.total_amount == Decimal("4.00")

    def test_remove_missing_item(self, order_factory):
        order = order_factory(items=[(1, 1, "1.00")])
        with pytest.raises(OrderError) as exc_info:
            order.remove_item(99)
        assert exc_info.value.code == OrderErrorCode.ORDER_ITEM_NOT_FOUND
        assert exc_info.value.field == "product_id"

    def test_update_quantity_replaces(self, order_factory):
        order = order_factory(items=[(1, 2, "10.00")])
        order.update_item_quantity(1, 7)

        assert order.get_item(1).quantity == 7
        assert order.total_amount == Decimal("70.00")

    def test_update_quantity_validates_before_lookup(self, order_factory):
        order = order_factory(items=[(1, 2, "10.00")])
        with pytest.raises(OrderError) as exc_info:
            order.update_item_quantity(99, 0)
        assert exc_info.value.code == OrderErrorCode.INVALID_QUANTITY

    def test_update_quantity_missing_item(self, order_factory):
        order = order_factory(items=[(1, 2, "10.00")])
        with pytest.raises(OrderError) as exc_info:
            order.update_item_quantity(99, 1)
        assert exc_info.value.code == OrderErrorCode.ORDER_ITEM_NOT_FOUND

    def test_items_view_is_read_only(self, order_factory):
        order = order_factory(items=[(1, 1, "1.00")])
        items = order.items
        assert isinstance(items, tuple)
        with pytest.raises(AttributeError):
            items[0].quantity = 10
        assert order.get_item(1).quantity == 1

    def test_calculate_total_is_idempotent(self, order_factory):
        order = order_factory(items=[(1, 3, "0.10")])
        assert order.calculate_total() == Decimal("0.30")
        assert order.calculate_total() == Decimal("0.30")
        assert order.check_invariants()

    @pytest.mark.parametrize(
        "status",
        [OrderStatus.CANCELLED, OrderStatus.DELIVERED, OrderStatus.REFUNDED],
    )
    def test_terminal_statuses_reject_item_changes(self, status, order_factory):
        order = _order_in(status, order_factory)
        before = _snapshot(order)

        for action in (
            lambda: order.add_item(2, "SKU", "Name", 1, "1.00"),
            lambda: order.remove_item(1),
            lambda: order.update_item_quantity(1, 5),
        ):
            with pytest.raises(OrderError) as exc_info:
                action()
            assert exc_info.value.code == OrderErrorCode.ORDER_NOT_MODIFIABLE

        assert _snapshot(order) == before

    @pytest.mark.parametrize(
        "status",
        [OrderStatus.CONFIRMED, OrderStatus.PROCESSING, OrderStatus.SHIPPED],
    )
    def test_non_terminal_statuses_allow_item_changes(self, status, order_factory):
        order = _order_in(status, order_factory)
        order.add_item(2, "SKU-2", "Name", 1, "1.00")
        assert order.get_item_count() == 2

    def test_failed_add_leaves_order_untouched(self, order_factory):
        order = order_factory(items=[(1, 2, "10.00")])
        before = _snapshot(order)

        with pytest.raises(OrderError):
            order.add_item(1, "SKU", "Name", 1, "-1")

        assert _snapshot(order) == before


class TestOrderTransitions:

    def test_happy_path(self, order_factory):
        order = order_factory(items=[(1, 1, "5.00")])
        for step, expected in [
            ("confirm", OrderStatus.CONFIRMED),
            ("start_processing", OrderStatus.PROCESSING),
            ("ship", OrderStatus.SHIPPED),
            ("deliver", OrderStatus.DELIVERED),
            ("refund", OrderStatus.REFUNDED),
        ]:
            getattr(order, step)()
            assert order.status is expected

    def test_confirm_empty_order(self, order_factory):
        order = order_factory()
        with pytest.raises(OrderError) as exc_info:
            order.confirm()
        assert exc_info.value.code == OrderErrorCode.EMPTY_ORDER
        assert order.is_pending()

    def test_confirm_twice(self, order_factory):
        order = _order_in(OrderStatus.CONFIRMED, order_factory)
        with pytest.raises(OrderError) as exc_info:
            order.confirm()
        assert exc_info.value.code == OrderErrorCode.ONLY_PENDING_CAN_BE_CONFIRMED

    @pytest.mark.parametrize(
        "status",
        [OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PROCESSING],
    )
    def test_cancel_allowed(self, status, order_factory):
        order = _order_in(status, order_factory)
        order.cancel()
        assert order.is_cancelled()

    @pytest.mark.parametrize(
        "status",
        [OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED, OrderStatus.REFUNDED],
    )
    def test_cancel_rejected(self, status, order_factory):
        order = _order_in(status, order_factory)
        with pytest.raises(OrderError) as exc_info:
            order.cancel()
        assert exc_info.value.code == OrderErrorCode.ORDER_CANNOT_BE_CANCELLED
        assert order.status is status

    @pytest.mark.parametrize(
        "status, step, code",
        [
            (OrderStatus.PENDING, "start_processing", OrderErrorCode.ONLY_CONFIRMED_CAN_PROCESS),
            (OrderStatus.CONFIRMED, "ship", OrderErrorCode.ONLY_PROCESSING_CAN_SHIP),
            (OrderStatus.PROCESSING, "deliver", OrderErrorCode.ONLY_SHIPPED_CAN_DELIVER),
            (OrderStatus.SHIPPED, "refund", OrderErrorCode.ONLY_DELIVERED_CAN_REFUND),
            (OrderStatus.CANCELLED, "start_processing", OrderErrorCode.ONLY_CONFIRMED_CAN_PROCESS),
        ],
    )
    def test_out_of_order_transitions(self, status, step, code, order_factory):
        order = _order_in(status, order_factory)
        before = _snapshot(order)

        with pytest.raises(OrderError) as exc_info:
            getattr(order, step)()

        assert exc_info.value.code == code
        assert _snapshot(order) == before

    def test_transition_records_status_changed_event(self, order_factory):
        order = order_factory(items=[(1, 1, "5.00")])
        order.confirm()

        events = order.domain_events
        assert len(events) == 1
        assert isinstance(events[0], OrderStatusChangedEvent)
        assert (events[0].old_status, events[0].new_status) == ("pending", "confirmed")

    def test_failed_transition_records_nothing(self, order_factory):
        order = order_factory()
        with pytest.raises(OrderError):
            order.confirm()
        assert order.domain_events == []


class TestTransitionTo:

    def test_every_status_has_a_transition_entry(self):
        assert set(_STATUS_TRANSITIONS) == set(OrderStatus)

    @pytest.mark.parametrize(
        "target, expected",
        [
            ("confirmed", OrderStatus.CONFIRMED),
            ("cancelled", OrderStatus.CANCELLED),
            (OrderStatus.CONFIRMED, OrderStatus.CONFIRMED),
        ],
    )
    def test_dispatches_to_transition(self, target, expected, order_factory):
        order = order_factory(items=[(1, 1, "5.00")])
        order.transition_to(target)
        assert order.status is expected

    def test_walks_full_lifecycle(self, order_factory):
        order = order_factory(items=[(1, 1, "5.00")])
        for target in ("confirmed", "processing", "shipped", "delivered", "refunded"):
            order.transition_to(target)
        assert order.status is OrderStatus.REFUNDED

    def test_pending_target_is_unsupported(self, order_factory):
        order = order_factory(items=[(1, 1, "5.00")])
        with pytest.raises(OrderError) as exc_info:
            order.transition_to("pending")
        assert exc_info.value.code == OrderErrorCode.UNSUPPORTED_STATUS_TRANSITION

    @pytest.mark.parametrize("target", ["archived", "CONFIRMED", "", None])
    def test_unknown_status(self, target, order_factory):
        order = order_factory(items=[(1, 1, "5.00")])
        with pytest.raises(OrderError) as exc_info:
            order.transition_to(target)
        assert exc_info.value.code == OrderErrorCode.INVALID_ORDER_STATUS
        assert order.is_pending()

    def test_precondition_errors_surface(self, order_factory):
        order = order_factory(items=[(1, 1, "5.00")])
        with pytest.raises(OrderError) as exc_info:
            order.transition_to("shipped")
        assert exc_info.value.code == OrderErrorCode.ONLY_PROCESSING_CAN_SHIP


class TestOrderStatus:

    def test_values_are_lowercase_literals(self):
        assert OrderStatus.values() == [
            "pending", "confirmed", "processing", "shipped",
            "delivered", "cancelled", "refunded",
        ]
        assert str(OrderStatus.SHIPPED) == "shipped"

    def test_parse_accepts_member_and_value(self):
        assert OrderStatus.parse("delivered") is OrderStatus.DELIVERED
        assert OrderStatus.parse(OrderStatus.DELIVERED) is OrderStatus.DELIVERED


class TestOrderQueries:

    def test_query_helpers(self, order_factory):
        order = order_factory(items=[(1, 1, "5.00")])
        assert order.is_pending() and order.is_modifiable() and order.can_be_cancelled()
        assert not order.is_empty()

        order.confirm()
        assert order.is_confirmed()

        order.cancel()
        assert order.is_cancelled()
        assert not order.is_modifiable()
        assert not order.can_be_cancelled()

    def test_rehydrated_order_recomputes_total(self):
        items = [OrderItem(1, "SKU", "Name", 2, Decimal("3.00"), id=10)]
        order = Order(customer_id=5, items=items, status="shipped", id=7, version=3)

        assert order.total_amount == Decimal("6.00")
        assert order.status is OrderStatus.SHIPPED
        assert order.version == 3
        assert order.is_persisted
