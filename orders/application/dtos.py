"""
订单应用服务层的数据传输对象(DTOs)。
定义应用服务与外部通信使用的数据结构，以及与订单聚合之间的双向转换。
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from orders.domain.entities import Order, OrderItem, OrderStatus

_CENT = Decimal("0.01")


def format_decimal(value: Decimal) -> str:
    """金额转字符串，至少保留两位小数且不丢失精度"""
    if value.as_tuple().exponent >= -2:
        value = value.quantize(_CENT)
    return str(value)


def format_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


class OrderItemDTO:
    """订单项数据传输对象"""

    def __init__(
        self,
        id: Optional[int],
        product_id: int,
        product_sku: str,
        product_name: str,
        quantity: int,
        unit_price: Decimal,
        total_price: Decimal,
    ):
        self.id = id
        self.product_id = product_id
        self.product_sku = product_sku
        self.product_name = product_name
        self.quantity = quantity
        self.unit_price = unit_price
        self.total_price = total_price

    @classmethod
    def from_item(cls, item: OrderItem) -> 'OrderItemDTO':
        return cls(
            id=item.id,
            product_id=item.product_id,
            product_sku=item.product_sku,
            product_name=item.product_name,
            quantity=item.quantity,
            unit_price=item.unit_price,
            total_price=item.total_price,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OrderItemDTO':
        return cls(
            id=data.get('id'),
            product_id=data['product_id'],
            product_sku=data['product_sku'],
            product_name=data['product_name'],
            quantity=data['quantity'],
            unit_price=Decimal(str(data['unit_price'])),
            total_price=Decimal(str(data['total_price'])),
        )

    def to_item(self) -> OrderItem:
        """重建订单项，小计由数量和单价推导"""
        return OrderItem(
            product_id=self.product_id,
            product_sku=self.product_sku,
            product_name=self.product_name,
            quantity=self.quantity,
            unit_price=self.unit_price,
            id=self.id,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'product_id': self.product_id,
            'product_sku': self.product_sku,
            'product_name': self.product_name,
            'quantity': self.quantity,
            'unit_price': format_decimal(self.unit_price),
            'total_price': format_decimal(self.total_price),
        }


class OrderDTO:
    """订单数据传输对象，用于返回订单详情"""

    def __init__(
        self,
        id: Optional[int],
        customer_id: int,
        items: List[OrderItemDTO],
        item_count: int,
        total_items: int,
        total_amount: Decimal,
        status: str,
        created_at: datetime,
        updated_at: datetime,
        version: int = 0,
    ):
        """
        初始化订单DTO。

        Args:
            id: 订单ID
            customer_id: 客户ID
            items: 订单项
            item_count: 不同商品数量
            total_items: 商品总件数
            total_amount: 订单总金额
            status: 订单状态
            created_at: 创建时间
            updated_at: 更新时间
            version: 版本号
        """
        self.id = id
        self.customer_id = customer_id
        self.items = items
        self.item_count = item_count
        self.total_items = total_items
        self.total_amount = total_amount
        self.status = status
        self.created_at = created_at
        self.updated_at = updated_at
        self.version = version

    @classmethod
    def from_order(cls, order: Order) -> 'OrderDTO':
        """
        从订单聚合创建DTO。

        Args:
            order: 订单聚合根

        Returns:
            订单DTO
        """
        return cls(
            id=order.id,
            customer_id=order.customer_id,
            items=[OrderItemDTO.from_item(item) for item in order.items],
            item_count=order.get_item_count(),
            total_items=order.get_total_quantity(),
            total_amount=order.total_amount,
            status=order.status.value,
            created_at=order.created_at,
            updated_at=order.updated_at,
            version=order.version,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OrderDTO':
        """从to_dict()的输出重建DTO"""
        items = [OrderItemDTO.from_dict(item) for item in data.get('items', [])]
        return cls(
            id=data.get('id'),
            customer_id=data['customer_id'],
            items=items,
            item_count=data.get('item_count', len(items)),
            total_items=data.get('total_items', sum(item.quantity for item in items)),
            total_amount=Decimal(str(data['total_amount'])),
            status=data['status'],
            created_at=parse_datetime(data.get('created_at')),
            updated_at=parse_datetime(data.get('updated_at')),
            version=data.get('version', 0),
        )

    def to_order(self) -> Order:
        """重建订单聚合，状态直接赋值，不经过状态流转"""
        return Order(
            customer_id=self.customer_id,
            items=[item.to_item() for item in self.items],
            status=OrderStatus.parse(self.status),
            created_at=self.created_at,
            updated_at=self.updated_at,
            id=self.id,
            version=self.version,
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        转换为字典表示。

        Returns:
            订单字典，金额为字符串，时间为ISO-8601格式
        """
        return {
            'id': self.id,
            'customer_id': self.customer_id,
            'items': [item.to_dict() for item in self.items],
            'item_count': self.item_count,
            'total_items': self.total_items,
            'total_amount': format_decimal(self.total_amount),
            'status': self.status,
            'created_at': format_datetime(self.created_at),
            'updated_at': format_datetime(self.updated_at),
            'version': self.version,
        }


class OrderSummaryDTO:
    """订单摘要DTO，用于轻量级的列表展示"""

    def __init__(
        self,
        id: Optional[int],
        customer_id: int,
        item_count: int,
        total_amount: Decimal,
        status: str,
        created_at: datetime,
        updated_at: datetime,
    ):
        self.id = id
        self.customer_id = customer_id
        self.item_count = item_count
        self.total_amount = total_amount
        self.status = status
        self.created_at = created_at
        self.updated_at = updated_at

    @classmethod
    def from_order_dto(cls, order: OrderDTO) -> 'OrderSummaryDTO':
        return cls(
            id=order.id,
            customer_id=order.customer_id,
            item_count=order.item_count,
            total_amount=order.total_amount,
            status=order.status,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'customer_id': self.customer_id,
            'item_count': self.item_count,
            'total_amount': format_decimal(self.total_amount),
            'status': self.status,
            'created_at': format_datetime(self.created_at),
            'updated_at': format_datetime(self.updated_at),
        }


class OrderListDTO:
    """订单列表DTO，用于返回分页订单列表"""

    def __init__(
        self,
        orders: List[OrderDTO],
        total: int,
        page: int,
        page_size: int,
    ):
        """
        初始化订单列表DTO。

        Args:
            orders: 当前页的订单
            total: 总记录数
            page: 当前页码（从0开始）
            page_size: 每页大小
        """
        self.orders = orders
        self.total = total
        self.page = page
        self.page_size = page_size

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return (self.total + self.page_size - 1) // self.page_size

    @property
    def has_more(self) -> bool:
        """是否还有下一页"""
        return (self.page + 1) * self.page_size < self.total

    def to_items(self, summary: bool = False) -> List[Dict[str, Any]]:
        """
        转换当前页的订单。

        Args:
            summary: 是否只返回订单摘要
        """
        if summary:
            return [OrderSummaryDTO.from_order_dto(order).to_dict() for order in self.orders]
        return [order.to_dict() for order in self.orders]

    def to_dict(self, summary: bool = False) -> Dict[str, Any]:
        return {
            'orders': self.to_items(summary),
            'total': self.total,
            'page': self.page,
            'page_size': self.page_size,
            'total_pages': self.total_pages,
            'has_more': self.has_more,
        }
