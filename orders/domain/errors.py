"""
订单领域错误。
所有订单相关的失败都通过一个带标签的异常OrderError表达：
错误码(code)、消息(message)以及可选的出错字段(field)。
错误码可以直接比较，调用方据此分发（例如映射为HTTP状态码）。
"""
from enum import Enum
from typing import Dict, Optional, Tuple

from core.domain.exceptions import DomainException


class OrderErrorCategory(Enum):
    """错误类别"""
    VALIDATION = "validation"      # 输入数据不合法
    STATE = "state"                # 当前状态不允许该操作
    LOOKUP = "lookup"              # 订单项不存在
    INVALID_ENUM = "invalid_enum"  # 状态值非法或不支持的状态转换
    NOT_FOUND = "not_found"        # 订单不存在
    CONFLICT = "conflict"          # 订单已存在
    PERSISTENCE = "persistence"    # 存储失败


class OrderErrorCode(str, Enum):
    """订单错误码，值即对外暴露的机器可读字符串"""

    # 校验错误
    INVALID_CUSTOMER_ID = "INVALID_CUSTOMER_ID"
    INVALID_PRODUCT_ID = "INVALID_PRODUCT_ID"
    INVALID_PRODUCT_SKU = "INVALID_PRODUCT_SKU"
    INVALID_PRODUCT_NAME = "INVALID_PRODUCT_NAME"
    INVALID_QUANTITY = "INVALID_QUANTITY"
    INVALID_UNIT_PRICE = "INVALID_UNIT_PRICE"

    # 状态错误
    ORDER_NOT_MODIFIABLE = "ORDER_NOT_MODIFIABLE"
    ONLY_PENDING_CAN_BE_CONFIRMED = "ONLY_PENDING_CAN_BE_CONFIRMED"
    EMPTY_ORDER = "EMPTY_ORDER"
    ORDER_CANNOT_BE_CANCELLED = "ORDER_CANNOT_BE_CANCELLED"
    ONLY_CONFIRMED_CAN_PROCESS = "ONLY_CONFIRMED_CAN_PROCESS"
    ONLY_PROCESSING_CAN_SHIP = "ONLY_PROCESSING_CAN_SHIP"
    ONLY_SHIPPED_CAN_DELIVER = "ONLY_SHIPPED_CAN_DELIVER"
    ONLY_DELIVERED_CAN_REFUND = "ONLY_DELIVERED_CAN_REFUND"

    # 查找错误
    ORDER_ITEM_NOT_FOUND = "ORDER_ITEM_NOT_FOUND"

    # 非法枚举值
    INVALID_ORDER_STATUS = "INVALID_ORDER_STATUS"
    UNSUPPORTED_STATUS_TRANSITION = "UNSUPPORTED_STATUS_TRANSITION"

    # 应用层/存储层错误
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    ORDER_ALREADY_EXISTS = "ORDER_ALREADY_EXISTS"
    FAILED_TO_CREATE_ORDER = "FAILED_TO_CREATE_ORDER"
    FAILED_TO_UPDATE_ORDER = "FAILED_TO_UPDATE_ORDER"
    FAILED_TO_DELETE_ORDER = "FAILED_TO_DELETE_ORDER"
    FAILED_TO_LIST_ORDERS = "FAILED_TO_LIST_ORDERS"


_C = OrderErrorCode
_K = OrderErrorCategory

# 错误目录：错误码 -> (类别, 默认消息, 出错字段)
ERROR_CATALOGUE: Dict[OrderErrorCode, Tuple[OrderErrorCategory, str, Optional[str]]] = {
    _C.INVALID_CUSTOMER_ID: (_K.VALIDATION, "Customer ID is required", "customer_id"),
    _C.INVALID_PRODUCT_ID: (_K.VALIDATION, "Product ID is required", "product_id"),
    _C.INVALID_PRODUCT_SKU: (_K.VALIDATION, "Product SKU is required", "product_sku"),
    _C.INVALID_PRODUCT_NAME: (_K.VALIDATION, "Product name is required", "product_name"),
    _C.INVALID_QUANTITY: (_K.VALIDATION, "Quantity must be positive", "quantity"),
    _C.INVALID_UNIT_PRICE: (_K.VALIDATION, "Unit price must be positive", "unit_price"),

    _C.ORDER_NOT_MODIFIABLE: (_K.STATE, "order cannot be modified in current status", None),
    _C.ONLY_PENDING_CAN_BE_CONFIRMED: (_K.STATE, "only pending orders can be confirmed", None),
    _C.EMPTY_ORDER: (_K.STATE, "cannot confirm empty order", None),
    _C.ORDER_CANNOT_BE_CANCELLED: (_K.STATE, "order cannot be cancelled in current status", None),
    _C.ONLY_CONFIRMED_CAN_PROCESS: (_K.STATE, "only confirmed orders can be moved to processing", None),
    _C.ONLY_PROCESSING_CAN_SHIP: (_K.STATE, "only processing orders can be shipped", None),
    _C.ONLY_SHIPPED_CAN_DELIVER: (_K.STATE, "only shipped orders can be delivered", None),
    _C.ONLY_DELIVERED_CAN_REFUND: (_K.STATE, "only delivered orders can be refunded", None),

    _C.ORDER_ITEM_NOT_FOUND: (_K.LOOKUP, "item not found in order", "product_id"),

    _C.INVALID_ORDER_STATUS: (_K.INVALID_ENUM, "Invalid order status", "status"),
    _C.UNSUPPORTED_STATUS_TRANSITION: (_K.INVALID_ENUM, "unsupported status transition", "status"),

    _C.ORDER_NOT_FOUND: (_K.NOT_FOUND, "Order not found", None),
    _C.ORDER_ALREADY_EXISTS: (_K.CONFLICT, "Order with this ID already exists", "id"),
    _C.FAILED_TO_CREATE_ORDER: (_K.PERSISTENCE, "Failed to create order", None),
    _C.FAILED_TO_UPDATE_ORDER: (_K.PERSISTENCE, "Failed to update order", None),
    _C.FAILED_TO_DELETE_ORDER: (_K.PERSISTENCE, "Failed to delete order", None),
    _C.FAILED_TO_LIST_ORDERS: (_K.PERSISTENCE, "Failed to list orders", None),
}


class OrderError(DomainException):
    """
    订单错误。

    Args:
        code: 错误码
        message: 错误消息，默认取错误目录中的消息
        field: 出错字段，默认取错误目录中的字段

    Example:
        >>> err = OrderError(OrderErrorCode.INVALID_QUANTITY)
        >>> err.field
        'quantity'
    """

    def __init__(
        self,
        code: OrderErrorCode,
        message: Optional[str] = None,
        field: Optional[str] = None,
    ):
        category, default_message, default_field = ERROR_CATALOGUE[code]
        self.code = code
        self.category = category
        self.field = field if field is not None else default_field
        super().__init__(message or default_message)

    def __str__(self) -> str:
        if self.field:
            return f"{self.code.value}: {self.message} (field: {self.field})"
        return f"{self.code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"OrderError(code={self.code.value!r}, message={self.message!r}, field={self.field!r})"

    def to_dict(self) -> Dict[str, Optional[str]]:
        """转换为对外暴露的字典"""
        return {
            "error": self.code.value,
            "message": self.message,
            "field": self.field,
        }
