"""
订单应用服务层的查询对象。
定义用于查询系统状态的查询。分页参数在构造时规范化，页码从0开始。
"""
from typing import Optional, Tuple

from orders.domain import config


def normalize_pagination(page: Optional[int], page_size: Optional[int]) -> Tuple[int, int]:
    """
    规范化分页参数。

    Args:
        page: 页码，小于0时置为0
        page_size: 每页大小，小于1或大于上限时置为默认值

    Returns:
        (page, page_size)
    """
    if page is None or page < 0:
        page = 0
    if page_size is None or page_size < 1 or page_size > config.MAX_PAGE_SIZE:
        page_size = config.DEFAULT_PAGE_SIZE
    return page, page_size


class PaginatedQuery:
    """分页查询基类"""

    def __init__(self, page: Optional[int] = 0, page_size: Optional[int] = None):
        self.page, self.page_size = normalize_pagination(page, page_size)

    @property
    def offset(self) -> int:
        """跳过的记录数"""
        return self.page * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size


class GetOrderQuery:
    """获取单个订单的查询"""

    def __init__(self, order_id: int):
        """
        初始化获取订单查询。

        Args:
            order_id: 订单ID
        """
        self.order_id = order_id


class ListOrdersQuery(PaginatedQuery):
    """获取订单列表的查询"""
    pass


class GetCustomerOrdersQuery(PaginatedQuery):
    """获取客户订单列表的查询"""

    def __init__(self, customer_id: int, page: Optional[int] = 0, page_size: Optional[int] = None):
        """
        初始化客户订单查询。

        Args:
            customer_id: 客户ID
            page: 页码
            page_size: 每页大小
        """
        super().__init__(page, page_size)
        self.customer_id = customer_id


class GetOrdersByStatusQuery(PaginatedQuery):
    """按状态获取订单列表的查询"""

    def __init__(self, status: str, page: Optional[int] = 0, page_size: Optional[int] = None):
        """
        初始化按状态查询。

        Args:
            status: 订单状态，由应用服务校验
            page: 页码
            page_size: 每页大小
        """
        super().__init__(page, page_size)
        self.status = status
