"""
订单应用服务层的命令对象。
定义用于修改系统状态的命令。
"""
from decimal import Decimal
from typing import List, Optional


class OrderItemData:
    """订单项数据，用于创建订单和添加订单项"""

    def __init__(
        self,
        product_id: int,
        product_sku: str,
        product_name: str,
        quantity: int,
        unit_price: Decimal,
    ):
        """
        初始化订单项数据。

        Args:
            product_id: 商品ID
            product_sku: 商品SKU
            product_name: 商品名称
            quantity: 数量
            unit_price: 单价
        """
        self.product_id = product_id
        self.product_sku = product_sku
        self.product_name = product_name
        self.quantity = quantity
        self.unit_price = unit_price


class CreateOrderCommand:
    """创建订单命令"""

    def __init__(self, customer_id: int, items: Optional[List[OrderItemData]] = None):
        """
        初始化创建订单命令。

        Args:
            customer_id: 客户ID
            items: 初始订单项，相同商品会合并数量
        """
        self.customer_id = customer_id
        self.items = items or []


class AddOrderItemCommand:
    """向订单添加订单项命令"""

    def __init__(self, order_id: int, item: OrderItemData):
        self.order_id = order_id
        self.item = item


class RemoveOrderItemCommand:
    """从订单移除订单项命令"""

    def __init__(self, order_id: int, product_id: int):
        self.order_id = order_id
        self.product_id = product_id


class UpdateItemQuantityCommand:
    """更新订单项数量命令"""

    def __init__(self, order_id: int, product_id: int, quantity: int):
        """
        初始化更新订单项数量命令。

        Args:
            order_id: 订单ID
            product_id: 商品ID
            quantity: 新数量（替换原数量）
        """
        self.order_id = order_id
        self.product_id = product_id
        self.quantity = quantity


class ConfirmOrderCommand:
    """确认订单命令"""

    def __init__(self, order_id: int):
        self.order_id = order_id


class CancelOrderCommand:
    """取消订单命令"""

    def __init__(self, order_id: int):
        self.order_id = order_id


class TransitionOrderStatusCommand:
    """订单状态流转命令"""

    def __init__(self, order_id: int, status: str):
        """
        初始化订单状态流转命令。

        Args:
            order_id: 订单ID
            status: 目标状态
        """
        self.order_id = order_id
        self.status = status


class DeleteOrderCommand:
    """删除订单命令（软删除）"""

    def __init__(self, order_id: int):
        self.order_id = order_id
