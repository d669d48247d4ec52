"""
订单API异常处理器。
将订单领域错误转换为统一格式的HTTP响应。
"""
import logging

from rest_framework import status
from rest_framework.response import Response

from core.domain.exceptions import ConcurrencyException
from core.infrastructure.response import ApiResponseBuilder, StatusCode
from orders.domain.errors import OrderError, OrderErrorCategory

logger = logging.getLogger(__name__)

# 错误类别 -> (HTTP状态码, 业务状态码)
ERROR_CATEGORY_MAPPING = {
    OrderErrorCategory.NOT_FOUND: (status.HTTP_404_NOT_FOUND, StatusCode.ORDER_NOT_FOUND),
    OrderErrorCategory.CONFLICT: (status.HTTP_409_CONFLICT, StatusCode.DUPLICATE_ENTITY),
    OrderErrorCategory.VALIDATION: (status.HTTP_400_BAD_REQUEST, StatusCode.VALIDATION_ERROR),
    OrderErrorCategory.STATE: (status.HTTP_400_BAD_REQUEST, StatusCode.ORDER_STATUS_ERROR),
    OrderErrorCategory.LOOKUP: (status.HTTP_400_BAD_REQUEST, StatusCode.ORDER_ITEM_NOT_FOUND),
    OrderErrorCategory.INVALID_ENUM: (status.HTTP_400_BAD_REQUEST, StatusCode.PARAM_ERROR),
    OrderErrorCategory.PERSISTENCE: (status.HTTP_500_INTERNAL_SERVER_ERROR, StatusCode.DATABASE_ERROR),
}


def order_error_response(exc: OrderError) -> Response:
    """
    将订单错误转换为统一格式的响应。

    Args:
        exc: 订单错误

    Returns:
        Response: data为 {"error": 错误码, "field": 出错字段}
    """
    http_code, code = ERROR_CATEGORY_MAPPING.get(
        exc.category,
        (status.HTTP_500_INTERNAL_SERVER_ERROR, StatusCode.SERVER_ERROR)
    )
    if http_code >= 500:
        logger.error(f"订单存储错误: {exc}")
    return ApiResponseBuilder.fail(
        message=exc.message,
        code=code,
        data={"error": exc.code.value, "field": exc.field},
        http_code=http_code
    )


def concurrency_error_response(exc: ConcurrencyException) -> Response:
    """乐观锁冲突，HTTP 409"""
    return ApiResponseBuilder.fail(
        message=exc.message,
        code=StatusCode.OPTIMISTIC_LOCK_ERROR,
        data={"id": exc.entity_id, "version": exc.expected_version},
        http_code=status.HTTP_409_CONFLICT
    )
