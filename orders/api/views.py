"""
订单API视图。
提供RESTful API接口，处理HTTP请求并调用订单应用服务。
"""
import logging

from rest_framework import status

from core.domain.exceptions import ConcurrencyException
from core.infrastructure.api_view import ApiBaseView
from core.infrastructure.response import StatusCode
from orders.application import (
    OrderApplicationService,
    # 命令
    CreateOrderCommand,
    AddOrderItemCommand,
    RemoveOrderItemCommand,
    UpdateItemQuantityCommand,
    ConfirmOrderCommand,
    CancelOrderCommand,
    TransitionOrderStatusCommand,
    DeleteOrderCommand,
    # 查询
    GetOrderQuery,
    ListOrdersQuery,
    GetCustomerOrdersQuery,
    GetOrdersByStatusQuery,
)
from orders.domain.errors import OrderError
from orders.api.exception_handlers import order_error_response, concurrency_error_response
from orders.api.serializers import (
    OrderCreateSerializer,
    OrderItemSerializer,
    ItemQuantitySerializer,
    OrderStatusSerializer,
)

logger = logging.getLogger(__name__)

_factory = None


def get_order_service() -> OrderApplicationService:
    """获取订单应用服务实例，基础设施工厂在进程内只创建一次"""
    global _factory
    if _factory is None:
        from orders.infrastructure.factory import OrderInfrastructureFactory
        _factory = OrderInfrastructureFactory()
    return _factory.create_order_service()


class OrderBaseView(ApiBaseView):
    """订单视图基类"""

    def error_response(self, exc, action):
        """
        将用例执行中的异常转换为统一格式的响应

        Args:
            exc: 异常对象
            action: 操作名称，用于日志和消息
        """
        if isinstance(exc, OrderError):
            return order_error_response(exc)
        if isinstance(exc, ConcurrencyException):
            return concurrency_error_response(exc)
        logger.error(f"{action}失败: {exc}", exc_info=True)
        return self.failed_response(
            message=f"{action}失败",
            code=StatusCode.SERVER_ERROR,
            http_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    def invalid_request(self, serializer):
        return self.failed_response(
            message="请求数据无效",
            code=StatusCode.VALIDATION_ERROR,
            data=serializer.errors,
            http_code=status.HTTP_400_BAD_REQUEST
        )

    def paginated_orders(self, request, result, message):
        summary = request.query_params.get('summary', '').lower() in ('1', 'true', 'yes')
        return self.paginated_response(result, items=result.to_items(summary=summary), message=message)


class OrderListCreateView(OrderBaseView):
    """订单列表和创建接口"""

    def get(self, request):
        """获取订单列表"""
        query = ListOrdersQuery(
            page=self.query_int(request, 'page', 0),
            page_size=self.query_int(request, 'page_size', None)
        )
        try:
            result = get_order_service().list_orders(query)
        except Exception as e:
            return self.error_response(e, "获取订单列表")
        return self.paginated_orders(request, result, "获取订单列表成功")

    def post(self, request):
        """创建订单"""
        serializer = OrderCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return self.invalid_request(serializer)

        command = CreateOrderCommand(
            customer_id=serializer.validated_data['customer_id'],
            items=serializer.to_item_data()
        )
        try:
            order = get_order_service().create_order(command)
        except Exception as e:
            return self.error_response(e, "创建订单")
        return self.created_response(data=order.to_dict(), message="订单创建成功")


class OrderDetailView(OrderBaseView):
    """订单详情和删除接口"""

    def get(self, request, order_id):
        """获取订单详情"""
        try:
            order = get_order_service().get_order(GetOrderQuery(order_id=order_id))
        except Exception as e:
            return self.error_response(e, "获取订单详情")
        return self.success_response(data=order.to_dict(), message="获取订单详情成功")

    def delete(self, request, order_id):
        """删除订单"""
        try:
            get_order_service().delete_order(DeleteOrderCommand(order_id=order_id))
        except Exception as e:
            return self.error_response(e, "删除订单")
        return self.success_response(message="订单删除成功", code=StatusCode.DELETED)


class OrderItemListView(OrderBaseView):
    """订单项添加接口"""

    def post(self, request, order_id):
        """向订单添加订单项，相同商品合并数量"""
        serializer = OrderItemSerializer(data=request.data)
        if not serializer.is_valid():
            return self.invalid_request(serializer)

        command = AddOrderItemCommand(order_id=order_id, item=serializer.to_item_data())
        try:
            order = get_order_service().add_item_to_order(command)
        except Exception as e:
            return self.error_response(e, "添加订单项")
        return self.success_response(data=order.to_dict(), message="订单项添加成功", code=StatusCode.UPDATED)


class OrderItemDetailView(OrderBaseView):
    """订单项数量更新和移除接口"""

    def put(self, request, order_id, product_id):
        """更新订单项数量"""
        serializer = ItemQuantitySerializer(data=request.data)
        if not serializer.is_valid():
            return self.invalid_request(serializer)

        command = UpdateItemQuantityCommand(
            order_id=order_id,
            product_id=product_id,
            quantity=serializer.validated_data['quantity']
        )
        try:
            order = get_order_service().update_item_quantity(command)
        except Exception as e:
            return self.error_response(e, "更新订单项数量")
        return self.success_response(data=order.to_dict(), message="订单项数量更新成功", code=StatusCode.UPDATED)

    def delete(self, request, order_id, product_id):
        """移除订单项"""
        command = RemoveOrderItemCommand(order_id=order_id, product_id=product_id)
        try:
            order = get_order_service().remove_item_from_order(command)
        except Exception as e:
            return self.error_response(e, "移除订单项")
        return self.success_response(data=order.to_dict(), message="订单项移除成功", code=StatusCode.UPDATED)


class OrderConfirmView(OrderBaseView):
    """确认订单接口"""

    def post(self, request, order_id):
        try:
            order = get_order_service().confirm_order(ConfirmOrderCommand(order_id=order_id))
        except Exception as e:
            return self.error_response(e, "确认订单")
        return self.success_response(data=order.to_dict(), message="订单确认成功")


class OrderCancelView(OrderBaseView):
    """取消订单接口"""

    def post(self, request, order_id):
        try:
            order = get_order_service().cancel_order(CancelOrderCommand(order_id=order_id))
        except Exception as e:
            return self.error_response(e, "取消订单")
        return self.success_response(data=order.to_dict(), message="订单取消成功")


class OrderStatusView(OrderBaseView):
    """订单状态流转接口"""

    def put(self, request, order_id):
        """将订单流转到目标状态"""
        serializer = OrderStatusSerializer(data=request.data)
        if not serializer.is_valid():
            return self.invalid_request(serializer)

        command = TransitionOrderStatusCommand(
            order_id=order_id,
            status=serializer.validated_data['status']
        )
        try:
            order = get_order_service().transition_order_status(command)
        except Exception as e:
            return self.error_response(e, "更新订单状态")
        return self.success_response(data=order.to_dict(), message="订单状态更新成功")


class OrderStatusListView(OrderBaseView):
    """按状态查询订单接口"""

    def get(self, request, status):
        query = GetOrdersByStatusQuery(
            status=status,
            page=self.query_int(request, 'page', 0),
            page_size=self.query_int(request, 'page_size', None)
        )
        try:
            result = get_order_service().get_orders_by_status(query)
        except Exception as e:
            return self.error_response(e, "按状态获取订单")
        return self.paginated_orders(request, result, "获取订单列表成功")


class CustomerOrderListView(OrderBaseView):
    """客户订单列表接口"""

    def get(self, request, customer_id):
        query = GetCustomerOrdersQuery(
            customer_id=customer_id,
            page=self.query_int(request, 'page', 0),
            page_size=self.query_int(request, 'page_size', None)
        )
        try:
            result = get_order_service().get_customer_orders(query)
        except Exception as e:
            return self.error_response(e, "获取客户订单")
        return self.paginated_orders(request, result, "获取客户订单成功")
