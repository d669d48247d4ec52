"""
订单领域模型包。
提供订单聚合根、订单项、订单状态、领域错误、领域事件和仓储接口。
"""

# 实体
from orders.domain.entities import (
    Order,
    OrderItem,
    OrderStatus,
    IMMUTABLE_STATUSES,
    CANCELLABLE_STATUSES,
    validate_order_item,
)

# 领域错误
from orders.domain.errors import OrderError, OrderErrorCode, OrderErrorCategory

# 领域事件
from orders.domain.events import (
    OrderCreatedEvent,
    OrderStatusChangedEvent,
    OrderDeletedEvent,
)

# 仓储接口
from orders.domain.repositories import OrderRepository

__all__ = [
    # 实体
    'Order',
    'OrderItem',
    'OrderStatus',
    'IMMUTABLE_STATUSES',
    'CANCELLABLE_STATUSES',
    'validate_order_item',

    # 领域错误
    'OrderError',
    'OrderErrorCode',
    'OrderErrorCategory',

    # 领域事件
    'OrderCreatedEvent',
    'OrderStatusChangedEvent',
    'OrderDeletedEvent',

    # 仓储接口
    'OrderRepository',
]
