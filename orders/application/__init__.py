"""
订单应用服务层包。
提供订单相关的应用服务、数据传输对象、命令和查询。
"""

# DTO
from orders.application.dtos import (
    OrderItemDTO,
    OrderDTO,
    OrderSummaryDTO,
    OrderListDTO,
)

# 命令
from orders.application.commands import (
    OrderItemData,
    CreateOrderCommand,
    AddOrderItemCommand,
    RemoveOrderItemCommand,
    UpdateItemQuantityCommand,
    ConfirmOrderCommand,
    CancelOrderCommand,
    TransitionOrderStatusCommand,
    DeleteOrderCommand,
)

# 查询
from orders.application.queries import (
    normalize_pagination,
    GetOrderQuery,
    ListOrdersQuery,
    GetCustomerOrdersQuery,
    GetOrdersByStatusQuery,
)

# 应用服务
from orders.application.order_service import OrderApplicationService

__all__ = [
    # DTO
    'OrderItemDTO',
    'OrderDTO',
    'OrderSummaryDTO',
    'OrderListDTO',

    # 命令
    'OrderItemData',
    'CreateOrderCommand',
    'AddOrderItemCommand',
    'RemoveOrderItemCommand',
    'UpdateItemQuantityCommand',
    'ConfirmOrderCommand',
    'CancelOrderCommand',
    'TransitionOrderStatusCommand',
    'DeleteOrderCommand',

    # 查询
    'normalize_pagination',
    'GetOrderQuery',
    'ListOrdersQuery',
    'GetCustomerOrdersQuery',
    'GetOrdersByStatusQuery',

    # 应用服务
    'OrderApplicationService',
]
