"""
订单应用服务。
定义订单相关的应用层服务，处理命令和查询，协调领域层和基础设施层。
"""
from typing import Callable, List, Optional

from loguru import logger
from core.infrastructure.cache import CacheService
from core.infrastructure.transaction import TransactionManager

from orders.domain import config
from orders.domain.entities import Order, OrderStatus
from orders.domain.errors import OrderError, OrderErrorCode
from orders.domain.repositories import OrderRepository
from orders.application.dtos import OrderDTO, OrderListDTO
from orders.application.commands import (
    CreateOrderCommand,
    AddOrderItemCommand,
    RemoveOrderItemCommand,
    UpdateItemQuantityCommand,
    ConfirmOrderCommand,
    CancelOrderCommand,
    TransitionOrderStatusCommand,
    DeleteOrderCommand,
)
from orders.application.queries import (
    GetOrderQuery,
    ListOrdersQuery,
    GetCustomerOrdersQuery,
    GetOrdersByStatusQuery,
)


class OrderApplicationService:
    """
    订单应用服务。
    每个用例在一个事务中执行：读取订单、调用聚合方法、写回仓储。
    订单详情以 (版本号, 订单DTO) 缓存在 order:{id} 键下。
    写操作提交后写入新版本，读操作只在键不存在时回填，
    因此读到旧数据的查询不会覆盖写操作写入的新版本。
    """

    def __init__(
        self,
        order_repository: OrderRepository,
        transaction_manager: TransactionManager,
        cache_service: Optional[CacheService] = None,
        cache_timeout: Optional[int] = None
    ):
        """
        初始化订单应用服务。

        Args:
            order_repository: 订单仓储
            transaction_manager: 事务管理器
            cache_service: 缓存服务
            cache_timeout: 缓存超时（秒），默认取订单模块配置
        """
        self.order_repository = order_repository
        self.transaction_manager = transaction_manager
        self.cache_service = cache_service
        self.cache_timeout = cache_timeout if cache_timeout is not None else config.CACHE_TIMEOUT

    @staticmethod
    def _cache_key(order_id) -> str:
        return f"order:{order_id}"

    def _store_order_cache(self, order_id, version: int, order_dto: Optional[OrderDTO]) -> None:
        """
        写操作提交后更新缓存，缓存中已有同版本或更新版本时不覆盖。
        order_dto为None表示订单已删除。
        """
        if not self.cache_service:
            return
        cache_key = self._cache_key(order_id)
        cached = self.cache_service.get(cache_key)
        if cached is not None and cached[0] >= version:
            return
        self.cache_service.set(cache_key, (version, order_dto), ttl=self.cache_timeout)

    def _get_order_or_raise(self, order_id) -> Order:
        order = self.order_repository.get_by_id(order_id)
        if order is None:
            raise OrderError(OrderErrorCode.ORDER_NOT_FOUND, f"Order not found: ID={order_id}")
        return order

    def _modify_order(self, order_id, action: Callable[[Order], None]) -> OrderDTO:
        """读取订单，执行聚合操作并写回，返回更新后的订单DTO"""
        with self.transaction_manager.start():
            order = self._get_order_or_raise(order_id)
            action(order)
            updated = self.order_repository.update(order)
        order_dto = OrderDTO.from_order(updated)
        self._store_order_cache(order_id, updated.version, order_dto)
        return order_dto

    # ==================== 命令处理方法 ====================

    def create_order(self, command: CreateOrderCommand) -> OrderDTO:
        """
        创建订单。相同商品的订单项会合并数量。

        Args:
            command: 创建订单命令

        Returns:
            创建的订单DTO
        """
        logger.info(f"创建订单: customer_id={command.customer_id}, items={len(command.items)}")
        try:
            with self.transaction_manager.start():
                order = Order.create(command.customer_id)
                for item in command.items:
                    order.add_item(
                        item.product_id,
                        item.product_sku,
                        item.product_name,
                        item.quantity,
                        item.unit_price,
                    )
                created = self.order_repository.create(order)
        except Exception as e:
            logger.error(f"创建订单失败: {e}")
            raise

        logger.info(f"订单创建成功: order_id={created.id}")
        return OrderDTO.from_order(created)

    def add_item_to_order(self, command: AddOrderItemCommand) -> OrderDTO:
        """
        向订单添加订单项。

        Args:
            command: 添加订单项命令

        Returns:
            更新后的订单DTO
        """
        item = command.item
        logger.info(f"添加订单项: order_id={command.order_id}, product_id={item.product_id}")
        try:
            return self._modify_order(
                command.order_id,
                lambda order: order.add_item(
                    item.product_id,
                    item.product_sku,
                    item.product_name,
                    item.quantity,
                    item.unit_price,
                ),
            )
        except Exception as e:
            logger.error(f"添加订单项失败: {e}")
            raise

    def remove_item_from_order(self, command: RemoveOrderItemCommand) -> OrderDTO:
        """移除订单项"""
        logger.info(f"移除订单项: order_id={command.order_id}, product_id={command.product_id}")
        try:
            return self._modify_order(
                command.order_id,
                lambda order: order.remove_item(command.product_id),
            )
        except Exception as e:
            logger.error(f"移除订单项失败: {e}")
            raise

    def update_item_quantity(self, command: UpdateItemQuantityCommand) -> OrderDTO:
        """更新订单项数量"""
        logger.info(
            f"更新订单项数量: order_id={command.order_id}, "
            f"product_id={command.product_id}, quantity={command.quantity}"
        )
        try:
            return self._modify_order(
                command.order_id,
                lambda order: order.update_item_quantity(command.product_id, command.quantity),
            )
        except Exception as e:
            logger.error(f"更新订单项数量失败: {e}")
            raise

    def confirm_order(self, command: ConfirmOrderCommand) -> OrderDTO:
        """确认订单"""
        logger.info(f"确认订单: order_id={command.order_id}")
        try:
            return self._modify_order(command.order_id, lambda order: order.confirm())
        except Exception as e:
            logger.error(f"确认订单失败: {e}")
            raise

    def cancel_order(self, command: CancelOrderCommand) -> OrderDTO:
        """取消订单"""
        logger.info(f"取消订单: order_id={command.order_id}")
        try:
            return self._modify_order(command.order_id, lambda order: order.cancel())
        except Exception as e:
            logger.error(f"取消订单失败: {e}")
            raise

    def transition_order_status(self, command: TransitionOrderStatusCommand) -> OrderDTO:
        """
        将订单流转到目标状态。
        先确认订单存在，再由聚合校验目标状态并分发。

        Args:
            command: 状态流转命令

        Returns:
            更新后的订单DTO
        """
        logger.info(f"订单状态流转: order_id={command.order_id}, status={command.status}")
        try:
            return self._modify_order(
                command.order_id,
                lambda order: order.transition_to(command.status),
            )
        except Exception as e:
            logger.error(f"订单状态流转失败: {e}")
            raise

    def delete_order(self, command: DeleteOrderCommand) -> None:
        """
        删除订单（软删除）。

        Raises:
            OrderError: ORDER_NOT_FOUND
        """
        logger.info(f"删除订单: order_id={command.order_id}")
        try:
            with self.transaction_manager.start():
                order = self._get_order_or_raise(command.order_id)
                self.order_repository.delete(command.order_id)
        except Exception as e:
            logger.error(f"删除订单失败: {e}")
            raise
        # 删除会使版本号加一
        self._store_order_cache(command.order_id, order.version + 1, None)

    # ==================== 查询处理方法 ====================

    def get_order(self, query: GetOrderQuery) -> OrderDTO:
        """
        获取单个订单。

        Args:
            query: 获取订单查询

        Returns:
            订单DTO

        Raises:
            OrderError: ORDER_NOT_FOUND
        """
        cache_key = self._cache_key(query.order_id)
        if self.cache_service:
            cached = self.cache_service.get(cache_key)
            if cached is not None:
                _, order_dto = cached
                if order_dto is None:
                    raise OrderError(
                        OrderErrorCode.ORDER_NOT_FOUND, f"Order not found: ID={query.order_id}"
                    )
                return order_dto

        try:
            order = self._get_order_or_raise(query.order_id)
        except Exception as e:
            logger.error(f"获取订单失败: {e}")
            raise

        order_dto = OrderDTO.from_order(order)
        if self.cache_service:
            self.cache_service.add(cache_key, (order.version, order_dto), ttl=self.cache_timeout)
        return order_dto

    def list_orders(self, query: ListOrdersQuery) -> OrderListDTO:
        """获取订单列表"""
        try:
            orders = self.order_repository.list(limit=query.limit, offset=query.offset)
            total = self.order_repository.count()
        except Exception as e:
            logger.error(f"获取订单列表失败: {e}")
            raise
        return self._to_list_dto(orders, total, query.page, query.page_size)

    def get_customer_orders(self, query: GetCustomerOrdersQuery) -> OrderListDTO:
        """获取客户的订单列表"""
        try:
            orders = self.order_repository.get_by_customer_id(
                query.customer_id, limit=query.limit, offset=query.offset
            )
            total = self.order_repository.count_by_customer_id(query.customer_id)
        except Exception as e:
            logger.error(f"获取客户订单失败: {e}")
            raise
        return self._to_list_dto(orders, total, query.page, query.page_size)

    def get_orders_by_status(self, query: GetOrdersByStatusQuery) -> OrderListDTO:
        """
        获取指定状态的订单列表。

        Raises:
            OrderError: INVALID_ORDER_STATUS
        """
        try:
            status = OrderStatus.parse(query.status)
            orders = self.order_repository.get_by_status(
                status, limit=query.limit, offset=query.offset
            )
            total = self.order_repository.count_by_status(status)
        except Exception as e:
            logger.error(f"按状态获取订单失败: {e}")
            raise
        return self._to_list_dto(orders, total, query.page, query.page_size)

    @staticmethod
    def _to_list_dto(orders: List[Order], total: int, page: int, page_size: int) -> OrderListDTO:
        return OrderListDTO(
            orders=[OrderDTO.from_order(order) for order in orders],
            total=total,
            page=page,
            page_size=page_size,
        )
