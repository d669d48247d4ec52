"""
订单领域事件处理器。
将订单事件写入审计日志。
"""
from loguru import logger

from core.domain.events import DomainEvents
from orders.domain.events import (
    OrderCreatedEvent,
    OrderStatusChangedEvent,
    OrderDeletedEvent,
)


def log_order_created(event: OrderCreatedEvent) -> None:
    logger.info(
        f"[{event.event_name}] order_id={event.order_id} "
        f"customer_id={event.customer_id} total_amount={event.total_amount}"
    )


def log_order_status_changed(event: OrderStatusChangedEvent) -> None:
    logger.info(
        f"[{event.event_name}] order_id={event.order_id} "
        f"{event.old_status} -> {event.new_status}"
    )


def log_order_deleted(event: OrderDeletedEvent) -> None:
    logger.info(f"[{event.event_name}] order_id={event.order_id}")


def register_order_event_handlers() -> None:
    """注册订单事件处理器，重复调用不会重复注册"""
    DomainEvents.register(OrderCreatedEvent, log_order_created)
    DomainEvents.register(OrderStatusChangedEvent, log_order_status_changed)
    DomainEvents.register(OrderDeletedEvent, log_order_deleted)
