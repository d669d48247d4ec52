"""
订单领域模型中的实体。
包含订单聚合根Order、订单项OrderItem以及订单状态OrderStatus。
"""
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from core.domain import AggregateRoot, ValueObject
from orders.domain.errors import OrderError, OrderErrorCode
from orders.domain.events import OrderStatusChangedEvent


def _now() -> datetime:
    return datetime.now(timezone.utc)


class OrderStatus(str, Enum):
    """订单状态，值为存储和传输时使用的小写字符串"""
    PENDING = "pending"        # 待确认，唯一的初始状态
    CONFIRMED = "confirmed"    # 已确认
    PROCESSING = "processing"  # 处理中
    SHIPPED = "shipped"        # 已发货
    DELIVERED = "delivered"    # 已送达
    CANCELLED = "cancelled"    # 已取消（终态）
    REFUNDED = "refunded"      # 已退款（终态）

    @classmethod
    def parse(cls, value: Union[str, 'OrderStatus']) -> 'OrderStatus':
        """
        将字符串解析为订单状态。

        Raises:
            OrderError: INVALID_ORDER_STATUS，如果值不是已知状态
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise OrderError(
                OrderErrorCode.INVALID_ORDER_STATUS,
                f"Invalid order status: {value!r}",
            ) from None

    @classmethod
    def values(cls) -> List[str]:
        return [status.value for status in cls]

    def __str__(self) -> str:
        return self.value


# 不允许修改订单项的状态
IMMUTABLE_STATUSES = frozenset({
    OrderStatus.CANCELLED,
    OrderStatus.DELIVERED,
    OrderStatus.REFUNDED,
})

# 允许取消的状态
CANCELLABLE_STATUSES = frozenset({
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PROCESSING,
})

# 金额精度：分
CENT = Decimal("0.01")


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    try:
        # float先转字符串，避免二进制误差
        return Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return None


def validate_order_item(
    product_id: Any,
    product_sku: Optional[str],
    product_name: Optional[str],
    quantity: Any,
    unit_price: Any,
) -> Tuple[str, str, Decimal]:
    """
    校验订单项数据，新增订单项与单独构造订单项共用此函数。
    按 product_id、sku、名称、数量、单价 的顺序校验，遇到第一个错误即抛出。

    Args:
        product_id: 商品ID
        product_sku: 商品SKU
        product_name: 商品名称
        quantity: 数量
        unit_price: 单价

    Returns:
        (去除首尾空白的SKU, 去除首尾空白的名称, 保留两位小数的Decimal单价)

    Raises:
        OrderError: 对应字段的校验错误
    """
    if not isinstance(product_id, int) or isinstance(product_id, bool) or product_id <= 0:
        raise OrderError(OrderErrorCode.INVALID_PRODUCT_ID)

    sku = (product_sku or "").strip()
    if not sku:
        raise OrderError(OrderErrorCode.INVALID_PRODUCT_SKU)

    name = (product_name or "").strip()
    if not name:
        raise OrderError(OrderErrorCode.INVALID_PRODUCT_NAME)

    if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
        raise OrderError(OrderErrorCode.INVALID_QUANTITY)

    price = _to_decimal(unit_price)
    if price is None or not price.is_finite() or price <= 0:
        raise OrderError(OrderErrorCode.INVALID_UNIT_PRICE)
    # 金额按分存储，超过两位小数的单价无法原样保存
    try:
        cents = price.quantize(CENT)
    except InvalidOperation:
        raise OrderError(OrderErrorCode.INVALID_UNIT_PRICE) from None
    if cents != price:
        raise OrderError(OrderErrorCode.INVALID_UNIT_PRICE)

    return sku, name, cents


class OrderItem(ValueObject):
    """
    订单项值对象，仅属于其所在的订单。
    订单项不可变，数量变化时由订单替换为新的订单项（保留持久化ID）。
    """

    def __init__(
        self,
        product_id: int,
        product_sku: str,
        product_name: str,
        quantity: int,
        unit_price: Decimal,
        id: Optional[int] = None,
    ):
        """
        直接构造订单项，不做校验，用于从存储重建。
        新建订单项请使用 OrderItem.create。

        Args:
            product_id: 商品ID
            product_sku: 商品SKU
            product_name: 商品名称
            quantity: 数量
            unit_price: 单价
            id: 持久化ID，未持久化时为None
        """
        self._id = id
        self._product_id = product_id
        self._product_sku = product_sku
        self._product_name = product_name
        self._quantity = quantity
        self._unit_price = _to_decimal(unit_price)
        self._total_price = self._unit_price * quantity

    @classmethod
    def create(
        cls,
        product_id: int,
        product_sku: str,
        product_name: str,
        quantity: int,
        unit_price: Any,
    ) -> 'OrderItem':
        """
        构造经过校验的订单项。

        Raises:
            OrderError: 订单项校验失败
        """
        sku, name, price = validate_order_item(
            product_id, product_sku, product_name, quantity, unit_price
        )
        return cls(product_id, sku, name, quantity, price)

    @property
    def id(self) -> Optional[int]:
        return self._id

    @property
    def product_id(self) -> int:
        return self._product_id

    @property
    def product_sku(self) -> str:
        return self._product_sku

    @property
    def product_name(self) -> str:
        return self._product_name

    @property
    def quantity(self) -> int:
        return self._quantity

    @property
    def unit_price(self) -> Decimal:
        return self._unit_price

    @property
    def total_price(self) -> Decimal:
        """小计 = 数量 × 单价"""
        return self._total_price

    def with_quantity(self, quantity: int) -> 'OrderItem':
        """返回数量替换后的新订单项"""
        return OrderItem(
            self._product_id,
            self._product_sku,
            self._product_name,
            quantity,
            self._unit_price,
            id=self._id,
        )

    def _equality_fields(self) -> Dict[str, Any]:
        return {
            "id": self._id,
            "product_id": self._product_id,
            "product_sku": self._product_sku,
            "product_name": self._product_name,
            "quantity": self._quantity,
            "unit_price": self._unit_price,
            "total_price": self._total_price,
        }


class Order(AggregateRoot):
    """
    订单聚合根。
    负责维护订单项集合、重新计算总金额以及控制状态流转：

        pending -> confirmed -> processing -> shipped -> delivered -> refunded
        pending / confirmed / processing -> cancelled

    所有操作在修改任何字段之前完成全部校验，失败的操作不会留下部分修改。
    """

    def __init__(
        self,
        customer_id: int,
        items: Optional[Iterable[OrderItem]] = None,
        status: Union[str, OrderStatus] = OrderStatus.PENDING,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
        id: Optional[int] = None,
        version: int = 0,
    ):
        """
        直接构造订单，用于从存储或DTO重建。新订单请使用 Order.create。

        Args:
            customer_id: 客户ID
            items: 订单项，保持给定顺序
            status: 订单状态
            created_at: 创建时间
            updated_at: 更新时间
            id: 订单ID，持久化之前为None
            version: 版本号，用于乐观锁
        """
        super().__init__(id, version=version)
        now = _now()
        self._customer_id = customer_id
        self._items: List[OrderItem] = list(items or [])
        self._status = OrderStatus.parse(status)
        self._created_at = created_at or now
        self._updated_at = updated_at or self._created_at
        self._total_amount = Decimal("0")
        self.calculate_total()

    @classmethod
    def create(cls, customer_id: int) -> 'Order':
        """
        创建新订单：状态为pending，没有订单项，总金额为0。

        Args:
            customer_id: 客户ID，必须为正整数

        Raises:
            OrderError: INVALID_CUSTOMER_ID
        """
        if not isinstance(customer_id, int) or isinstance(customer_id, bool) or customer_id <= 0:
            raise OrderError(OrderErrorCode.INVALID_CUSTOMER_ID)
        now = _now()
        return cls(customer_id=customer_id, created_at=now, updated_at=now)

    # ==================== 属性 ====================

    @property
    def customer_id(self) -> int:
        return self._customer_id

    @property
    def items(self) -> Tuple[OrderItem, ...]:
        """订单项的只读视图"""
        return tuple(self._items)

    @property
    def total_amount(self) -> Decimal:
        return self._total_amount

    @property
    def status(self) -> OrderStatus:
        return self._status

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    # ==================== 订单项操作 ====================

    def add_item(
        self,
        product_id: int,
        product_sku: str,
        product_name: str,
        quantity: int,
        unit_price: Any,
    ) -> None:
        """
        添加订单项。
        如果商品已存在，则在原有数量上累加（而不是替换），单价保持不变。

        Raises:
            OrderError: ORDER_NOT_MODIFIABLE 或订单项校验错误
        """
        self._ensure_modifiable()
        sku, name, price = validate_order_item(
            product_id, product_sku, product_name, quantity, unit_price
        )

        index = self._find_index(product_id)
        if index is not None:
            existing = self._items[index]
            self._items[index] = existing.with_quantity(existing.quantity + quantity)
        else:
            self._items.append(OrderItem(product_id, sku, name, quantity, price))

        self.calculate_total()
        self._touch()

    def remove_item(self, product_id: int) -> None:
        """
        移除订单项，其余订单项保持原有顺序。

        Raises:
            OrderError: ORDER_NOT_MODIFIABLE 或 ORDER_ITEM_NOT_FOUND
        """
        self._ensure_modifiable()
        index = self._require_index(product_id)
        del self._items[index]
        self.calculate_total()
        self._touch()

    def update_item_quantity(self, product_id: int, quantity: int) -> None:
        """
        更新订单项数量（直接替换，不累加）。

        Raises:
            OrderError: ORDER_NOT_MODIFIABLE、INVALID_QUANTITY 或 ORDER_ITEM_NOT_FOUND
        """
        self._ensure_modifiable()
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
            raise OrderError(OrderErrorCode.INVALID_QUANTITY)
        index = self._require_index(product_id)
        self._items[index] = self._items[index].with_quantity(quantity)
        self.calculate_total()
        self._touch()

    def calculate_total(self) -> Decimal:
        """根据当前订单项重新计算总金额，幂等"""
        self._total_amount = sum((item.total_price for item in self._items), Decimal("0"))
        return self._total_amount

    # ==================== 状态流转 ====================

    def confirm(self) -> None:
        """
        确认订单：只有非空的pending订单可以确认。

        Raises:
            OrderError: ONLY_PENDING_CAN_BE_CONFIRMED 或 EMPTY_ORDER
        """
        if self._status != OrderStatus.PENDING:
            raise OrderError(OrderErrorCode.ONLY_PENDING_CAN_BE_CONFIRMED)
        if self.is_empty():
            raise OrderError(OrderErrorCode.EMPTY_ORDER)
        self._change_status(OrderStatus.CONFIRMED)

    def cancel(self) -> None:
        """
        取消订单：只有pending、confirmed、processing状态可以取消。

        Raises:
            OrderError: ORDER_CANNOT_BE_CANCELLED
        """
        if not self.can_be_cancelled():
            raise OrderError(OrderErrorCode.ORDER_CANNOT_BE_CANCELLED)
        self._change_status(OrderStatus.CANCELLED)

    def start_processing(self) -> None:
        """confirmed -> processing"""
        if self._status != OrderStatus.CONFIRMED:
            raise OrderError(OrderErrorCode.ONLY_CONFIRMED_CAN_PROCESS)
        self._change_status(OrderStatus.PROCESSING)

    def ship(self) -> None:
        """processing -> shipped"""
        if self._status != OrderStatus.PROCESSING:
            raise OrderError(OrderErrorCode.ONLY_PROCESSING_CAN_SHIP)
        self._change_status(OrderStatus.SHIPPED)

    def deliver(self) -> None:
        """shipped -> delivered"""
        if self._status != OrderStatus.SHIPPED:
            raise OrderError(OrderErrorCode.ONLY_SHIPPED_CAN_DELIVER)
        self._change_status(OrderStatus.DELIVERED)

    def refund(self) -> None:
        """delivered -> refunded"""
        if self._status != OrderStatus.DELIVERED:
            raise OrderError(OrderErrorCode.ONLY_DELIVERED_CAN_REFUND)
        self._change_status(OrderStatus.REFUNDED)

    def transition_to(self, target: Union[str, OrderStatus]) -> None:
        """
        通用状态流转入口，根据目标状态分发到对应的流转方法。

        Args:
            target: 目标状态（字符串或OrderStatus）

        Raises:
            OrderError: INVALID_ORDER_STATUS（未知状态）、
                UNSUPPORTED_STATUS_TRANSITION（目标为pending），
                或对应流转方法的前置条件错误
        """
        status = OrderStatus.parse(target)
        handler = _STATUS_TRANSITIONS[status]
        if handler is None:
            raise OrderError(
                OrderErrorCode.UNSUPPORTED_STATUS_TRANSITION,
                f"unsupported status transition to {status.value}",
            )
        handler(self)

    # ==================== 查询方法 ====================

    def is_modifiable(self) -> bool:
        return self._status not in IMMUTABLE_STATUSES

    def can_be_cancelled(self) -> bool:
        return self._status in CANCELLABLE_STATUSES

    def is_empty(self) -> bool:
        return not self._items

    def is_pending(self) -> bool:
        return self._status == OrderStatus.PENDING

    def is_confirmed(self) -> bool:
        return self._status == OrderStatus.CONFIRMED

    def is_cancelled(self) -> bool:
        return self._status == OrderStatus.CANCELLED

    def is_delivered(self) -> bool:
        return self._status == OrderStatus.DELIVERED

    def get_item(self, product_id: int) -> OrderItem:
        """
        获取指定商品的订单项。

        Raises:
            OrderError: ORDER_ITEM_NOT_FOUND
        """
        return self._items[self._require_index(product_id)]

    def get_item_count(self) -> int:
        """不同商品的数量"""
        return len(self._items)

    def get_total_quantity(self) -> int:
        """所有订单项数量之和"""
        return sum(item.quantity for item in self._items)

    def check_invariants(self) -> bool:
        product_ids = [item.product_id for item in self._items]
        if len(product_ids) != len(set(product_ids)):
            return False
        expected = sum((item.total_price for item in self._items), Decimal("0"))
        return self._total_amount == expected

    # ==================== 内部方法 ====================

    def _ensure_modifiable(self) -> None:
        if not self.is_modifiable():
            raise OrderError(OrderErrorCode.ORDER_NOT_MODIFIABLE)

    def _find_index(self, product_id: int) -> Optional[int]:
        for index, item in enumerate(self._items):
            if item.product_id == product_id:
                return index
        return None

    def _require_index(self, product_id: int) -> int:
        index = self._find_index(product_id)
        if index is None:
            raise OrderError(OrderErrorCode.ORDER_ITEM_NOT_FOUND)
        return index

    def _change_status(self, new_status: OrderStatus) -> None:
        old_status = self._status
        self._status = new_status
        self._touch()
        self.add_domain_event(
            OrderStatusChangedEvent(self.id, old_status.value, new_status.value)
        )

    def _touch(self) -> None:
        self._updated_at = _now()

    def __repr__(self) -> str:
        return (
            f"Order(id={self.id!r}, customer_id={self._customer_id!r}, "
            f"status={self._status.value!r}, items={len(self._items)}, "
            f"total_amount={self._total_amount!r})"
        )


# 目标状态 -> 流转方法；每个状态都必须有一项，None表示不支持流转到该状态
_STATUS_TRANSITIONS: Dict[OrderStatus, Optional[Callable[[Order], None]]] = {
    OrderStatus.PENDING: None,
    OrderStatus.CONFIRMED: Order.confirm,
    OrderStatus.PROCESSING: Order.start_processing,
    OrderStatus.SHIPPED: Order.ship,
    OrderStatus.DELIVERED: Order.deliver,
    OrderStatus.CANCELLED: Order.cancel,
    OrderStatus.REFUNDED: Order.refund,
}
