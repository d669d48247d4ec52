"""
订单仓储的Django实现。
实现领域仓储接口，处理订单聚合根与数据库模型之间的转换。
"""
from typing import Any, Dict, Iterable, List, Optional

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import F
from django.utils import timezone
from loguru import logger

from core.domain.events import DomainEvents
from core.domain.exceptions import ConcurrencyException
from orders.domain.entities import Order, OrderItem, OrderStatus
from orders.domain.errors import OrderError, OrderErrorCode
from orders.domain.events import OrderCreatedEvent, OrderDeletedEvent
from orders.domain.repositories import OrderRepository
from orders.infrastructure.models.order_models import (
    Order as OrderModel,
    OrderItem as OrderItemModel,
)


class DjangoOrderRepository(OrderRepository):
    """
    基于Django ORM的订单仓储实现。
    删除为软删除，所有查询只返回未删除的订单。
    """

    def _alive(self):
        return OrderModel.objects.alive().with_items()

    # ==================== 写操作 ====================

    def create(self, order: Order) -> Order:
        """
        持久化新订单及其订单项。

        Args:
            order: 未持久化的订单

        Returns:
            分配了ID的订单
        """
        if order.is_persisted and OrderModel.objects.filter(id=order.id).exists():
            raise OrderError(OrderErrorCode.ORDER_ALREADY_EXISTS)

        try:
            with transaction.atomic():
                order_model = OrderModel.objects.create(
                    id=order.id,
                    customer_id=order.customer_id,
                    total_amount=order.total_amount,
                    status=order.status.value,
                    created_at=order.created_at,
                    updated_at=order.updated_at,
                    version=order.version,
                )
                self._create_item_models(order_model, order.items)
        except IntegrityError as e:
            logger.error(f"创建订单失败: {e}")
            if order.is_persisted:
                raise OrderError(OrderErrorCode.ORDER_ALREADY_EXISTS) from e
            raise OrderError(OrderErrorCode.FAILED_TO_CREATE_ORDER) from e
        except DatabaseError as e:
            logger.error(f"创建订单失败: {e}")
            raise OrderError(OrderErrorCode.FAILED_TO_CREATE_ORDER) from e

        logger.debug(f"订单已写入: order_id={order_model.id}")

        created = self.get_by_id(order_model.id)
        DomainEvents.publish(
            OrderCreatedEvent(created.id, created.customer_id, created.total_amount)
        )
        self._publish_events(order)
        return created

    def update(self, order: Order) -> Order:
        """
        更新订单。
        仅当存储中的版本号与聚合加载时的版本号一致时写入，写入后版本号加一。

        Args:
            order: 要更新的订单

        Returns:
            更新后的订单

        Raises:
            ConcurrencyException: 订单已被其他事务修改
            OrderError: ORDER_NOT_FOUND 或 FAILED_TO_UPDATE_ORDER
        """
        try:
            with transaction.atomic():
                updated = OrderModel.objects.alive().filter(
                    id=order.id,
                    version=order.version,
                ).update(
                    customer_id=order.customer_id,
                    total_amount=order.total_amount,
                    status=order.status.value,
                    updated_at=order.updated_at,
                    version=F('version') + 1,
                )

                if not updated:
                    if OrderModel.objects.alive().filter(id=order.id).exists():
                        raise ConcurrencyException("Order", order.id, order.version)
                    raise OrderError(
                        OrderErrorCode.ORDER_NOT_FOUND,
                        f"Order not found: ID={order.id}",
                    )

                self._sync_item_models(order.id, order.items)
        except DatabaseError as e:
            logger.error(f"更新订单失败: order_id={order.id}, {e}")
            raise OrderError(OrderErrorCode.FAILED_TO_UPDATE_ORDER) from e

        order.increment_version()
        self._publish_events(order)
        return self.get_by_id(order.id)

    def delete(self, id: Any) -> None:
        """
        软删除订单：设置deleted_at，保留订单和订单项数据。

        Args:
            id: 订单ID
        """
        try:
            deleted = OrderModel.objects.alive().filter(id=id).update(
                deleted_at=timezone.now(),
                version=F('version') + 1,
            )
        except DatabaseError as e:
            logger.error(f"删除订单失败: order_id={id}, {e}")
            raise OrderError(OrderErrorCode.FAILED_TO_DELETE_ORDER) from e

        if not deleted:
            raise OrderError(OrderErrorCode.ORDER_NOT_FOUND, f"Order not found: ID={id}")

        DomainEvents.publish(OrderDeletedEvent(id))

    # ==================== 读操作 ====================

    def get_by_id(self, id: Any) -> Optional[Order]:
        """
        根据ID获取订单。

        Args:
            id: 订单ID

        Returns:
            找到的订单，不存在或已删除则返回None
        """
        try:
            order_model = self._alive().get(id=id)
        except (OrderModel.DoesNotExist, ValueError, TypeError):
            return None
        except DatabaseError as e:
            logger.error(f"获取订单失败: order_id={id}, {e}")
            raise OrderError(OrderErrorCode.FAILED_TO_LIST_ORDERS) from e
        return self._to_domain(order_model)

    def list(self, limit: int = 10, offset: int = 0) -> List[Order]:
        return self._fetch(self._alive(), limit, offset)

    def get_by_customer_id(self, customer_id: int, limit: int = 10, offset: int = 0) -> List[Order]:
        return self._fetch(self._alive().filter(customer_id=customer_id), limit, offset)

    def get_by_status(self, status: OrderStatus, limit: int = 10, offset: int = 0) -> List[Order]:
        status = OrderStatus.parse(status)
        return self._fetch(self._alive().filter(status=status.value), limit, offset)

    def count(self) -> int:
        return self._count(OrderModel.objects.alive())

    def count_by_customer_id(self, customer_id: int) -> int:
        return self._count(OrderModel.objects.alive().filter(customer_id=customer_id))

    def count_by_status(self, status: OrderStatus) -> int:
        status = OrderStatus.parse(status)
        return self._count(OrderModel.objects.alive().filter(status=status.value))

    # ==================== 内部方法 ====================

    def _fetch(self, queryset, limit: int, offset: int) -> List[Order]:
        try:
            order_models = list(queryset.order_by('-created_at', '-id')[offset:offset + limit])
        except DatabaseError as e:
            logger.error(f"获取订单列表失败: {e}")
            raise OrderError(OrderErrorCode.FAILED_TO_LIST_ORDERS) from e
        return [self._to_domain(model) for model in order_models]

    @staticmethod
    def _count(queryset) -> int:
        try:
            return queryset.count()
        except DatabaseError as e:
            logger.error(f"统计订单数量失败: {e}")
            raise OrderError(OrderErrorCode.FAILED_TO_LIST_ORDERS) from e

    @staticmethod
    def _create_item_models(order_model: OrderModel, items: Iterable[OrderItem]) -> None:
        OrderItemModel.objects.bulk_create([
            OrderItemModel(
                order=order_model,
                product_id=item.product_id,
                product_sku=item.product_sku,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total_price=item.total_price,
                position=position,
            )
            for position, item in enumerate(items)
        ])

    def _sync_item_models(self, order_id: Any, items: Iterable[OrderItem]) -> None:
        """
        使存储中的订单项与聚合保持一致。
        按product_id匹配：已有的更新并保留ID，聚合中没有的删除，新增的插入。
        """
        items = list(items)
        existing: Dict[int, OrderItemModel] = {
            model.product_id: model
            for model in OrderItemModel.objects.filter(order_id=order_id)
        }
        wanted = {item.product_id for item in items}

        stale = [pid for pid in existing if pid not in wanted]
        if stale:
            OrderItemModel.objects.filter(order_id=order_id, product_id__in=stale).delete()

        new_models = []
        for position, item in enumerate(items):
            model = existing.get(item.product_id)
            if model is None:
                new_models.append(OrderItemModel(
                    order_id=order_id,
                    product_id=item.product_id,
                    product_sku=item.product_sku,
                    product_name=item.product_name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    total_price=item.total_price,
                    position=position,
                ))
                continue
            model.product_sku = item.product_sku
            model.product_name = item.product_name
            model.quantity = item.quantity
            model.unit_price = item.unit_price
            model.total_price = item.total_price
            model.position = position
            model.save()

        if new_models:
            OrderItemModel.objects.bulk_create(new_models)

    @staticmethod
    def _publish_events(order: Order) -> None:
        DomainEvents.publish_all(order.clear_domain_events())

    @staticmethod
    def _to_domain(order_model: OrderModel) -> Order:
        """
        将数据库模型转换为订单聚合根。

        Args:
            order_model: 订单数据库模型，订单项已预加载

        Returns:
            订单聚合根
        """
        items = [
            OrderItem(
                product_id=item_model.product_id,
                product_sku=item_model.product_sku,
                product_name=item_model.product_name,
                quantity=item_model.quantity,
                unit_price=item_model.unit_price,
                id=item_model.id,
            )
            for item_model in order_model.items.all()
        ]
        return Order(
            customer_id=order_model.customer_id,
            items=items,
            status=order_model.status,
            created_at=order_model.created_at,
            updated_at=order_model.updated_at,
            id=order_model.id,
            version=order_model.version,
        )
