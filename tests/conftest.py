import os

os.environ.setdefault("DJANGO_ENV", "testing")

from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402

from core.domain.events import DomainEvents  # noqa: E402


def make_order(customer_id=1, items=None):
    """构造一个pending订单，items为 (product_id, quantity, unit_price) 列表"""
    from orders.domain.entities import Order

    order = Order.create(customer_id)
    for product_id, quantity, unit_price in items or []:
        order.add_item(
            product_id,
            f"SKU-{product_id}",
            f"Product {product_id}",
            quantity,
            Decimal(str(unit_price)),
        )
    return order


@pytest.fixture
def order_factory():
    return make_order


@pytest.fixture
def captured_events():
    """收集发布的订单领域事件"""
    from orders.domain.events import (
        OrderCreatedEvent,
        OrderStatusChangedEvent,
        OrderDeletedEvent,
    )

    events = []
    handler = events.append
    event_types = (OrderCreatedEvent, OrderStatusChangedEvent, OrderDeletedEvent)
    for event_type in event_types:
        DomainEvents.register(event_type, handler)
    yield events
    for event_type in event_types:
        DomainEvents.unregister(event_type, handler)
