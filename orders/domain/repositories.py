"""
订单领域模型中的仓储接口。
定义用于持久化和检索订单聚合根的仓储接口。
所有列表查询均排除已软删除的订单，按创建时间倒序，并预加载订单项。
"""
from abc import abstractmethod
from typing import Any, List, Optional

from core.domain.repositories import PagedRepository
from orders.domain.entities import Order, OrderStatus


class OrderRepository(PagedRepository[Order]):
    """
    订单仓储接口。
    """

    @abstractmethod
    def create(self, order: Order) -> Order:
        """
        持久化新订单及其订单项。

        Args:
            order: 未持久化的订单

        Returns:
            分配了订单ID和订单项ID的订单

        Raises:
            OrderError: FAILED_TO_CREATE_ORDER 或 ORDER_ALREADY_EXISTS
        """
        pass

    @abstractmethod
    def get_by_id(self, id: Any) -> Optional[Order]:
        """
        根据ID获取订单。

        Args:
            id: 订单ID

        Returns:
            找到的订单，不存在或已删除则返回None
        """
        pass

    @abstractmethod
    def update(self, order: Order) -> Order:
        """
        更新订单，并使存储中的订单项与聚合中的订单项保持一致。

        Args:
            order: 要更新的订单

        Returns:
            更新后的订单

        Raises:
            ConcurrencyException: 版本号不匹配
            OrderError: ORDER_NOT_FOUND 或 FAILED_TO_UPDATE_ORDER
        """
        pass

    @abstractmethod
    def delete(self, id: Any) -> None:
        """
        软删除订单。

        Args:
            id: 订单ID
        """
        pass

    @abstractmethod
    def list(self, limit: int = 10, offset: int = 0) -> List[Order]:
        pass

    @abstractmethod
    def get_by_customer_id(self, customer_id: int, limit: int = 10, offset: int = 0) -> List[Order]:
        """
        获取客户的订单列表。

        Args:
            customer_id: 客户ID
            limit: 返回的最大记录数
            offset: 跳过的记录数
        """
        pass

    @abstractmethod
    def get_by_status(self, status: OrderStatus, limit: int = 10, offset: int = 0) -> List[Order]:
        """
        获取指定状态的订单列表。

        Args:
            status: 订单状态
            limit: 返回的最大记录数
            offset: 跳过的记录数
        """
        pass

    @abstractmethod
    def count(self) -> int:
        pass

    @abstractmethod
    def count_by_customer_id(self, customer_id: int) -> int:
        pass

    @abstractmethod
    def count_by_status(self, status: OrderStatus) -> int:
        pass
