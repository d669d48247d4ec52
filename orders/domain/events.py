"""
订单领域模型中的事件。
定义订单相关的领域事件。
"""
from decimal import Decimal
from typing import Any

from core.domain.events import DomainEvent


class OrderCreatedEvent(DomainEvent):
    """订单创建事件"""

    def __init__(self, order_id: Any, customer_id: int, total_amount: Decimal):
        """
        初始化订单创建事件。

        Args:
            order_id: 订单ID
            customer_id: 客户ID
            total_amount: 订单总金额
        """
        super().__init__()
        self.order_id = order_id
        self.customer_id = customer_id
        self.total_amount = total_amount


class OrderStatusChangedEvent(DomainEvent):
    """订单状态变更事件"""

    def __init__(self, order_id: Any, old_status: str, new_status: str):
        super().__init__()
        self.order_id = order_id
        self.old_status = old_status
        self.new_status = new_status


class OrderDeletedEvent(DomainEvent):
    """订单删除（软删除）事件"""

    def __init__(self, order_id: Any):
        super().__init__()
        self.order_id = order_id
