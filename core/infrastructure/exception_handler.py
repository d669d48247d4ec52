"""
统一异常处理器。
DRF的EXCEPTION_HANDLER，把视图中未处理的异常转换为统一响应格式。
业务模块通过 register_domain_exception_handler 为自己的领域异常注册转换函数。
"""
import logging
from typing import Callable, Dict, Optional, Tuple, Type

from django.core.exceptions import PermissionDenied, ValidationError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import (
    APIException,
    AuthenticationFailed,
    NotAuthenticated,
    NotFound,
    ParseError,
    PermissionDenied as DRFPermissionDenied,
    ValidationError as DRFValidationError,
)
from rest_framework.response import Response

from core.domain.exceptions import ConcurrencyException, DomainException
from core.infrastructure.response import ApiResponseBuilder, StatusCode

logger = logging.getLogger(__name__)

DomainExceptionHandler = Callable[[DomainException], Response]

_domain_exception_handlers: Dict[Type[DomainException], DomainExceptionHandler] = {}

# 异常类型 -> (业务状态码, HTTP状态码, 消息)，消息为None时取状态码默认消息
_SIMPLE_RESPONSES: Dict[type, Tuple[int, int, Optional[str]]] = {
    Http404: (StatusCode.NOT_FOUND, status.HTTP_404_NOT_FOUND, "请求的资源不存在"),
    NotFound: (StatusCode.NOT_FOUND, status.HTTP_404_NOT_FOUND, "请求的资源不存在"),
    PermissionDenied: (StatusCode.FORBIDDEN, status.HTTP_403_FORBIDDEN, None),
    DRFPermissionDenied: (StatusCode.FORBIDDEN, status.HTTP_403_FORBIDDEN, None),
    NotAuthenticated: (StatusCode.UNAUTHORIZED, status.HTTP_401_UNAUTHORIZED, None),
    AuthenticationFailed: (StatusCode.UNAUTHORIZED, status.HTTP_401_UNAUTHORIZED, "身份验证失败"),
}


def register_domain_exception_handler(exc_type: Type[DomainException], handler: DomainExceptionHandler) -> None:
    """
    注册领域异常的响应转换函数，对exc_type的子类同样生效。

    Args:
        exc_type: 领域异常类型
        handler: 接收异常、返回统一格式响应的函数
    """
    _domain_exception_handlers[exc_type] = handler


def _lookup(table, exc):
    for klass in type(exc).__mro__:
        if klass in table:
            return table[klass]
    return None


def _domain_exception_response(exc: DomainException) -> Response:
    handler = _lookup(_domain_exception_handlers, exc)
    if handler is not None:
        return handler(exc)
    if isinstance(exc, ConcurrencyException):
        return ApiResponseBuilder.fail(
            message=exc.message,
            code=StatusCode.OPTIMISTIC_LOCK_ERROR,
            http_code=status.HTTP_409_CONFLICT
        )
    return ApiResponseBuilder.fail(message=exc.message, code=StatusCode.BAD_REQUEST)


def unified_exception_handler(exc, context):
    """
    将异常转换为统一格式的响应。

    Args:
        exc: 异常对象
        context: DRF提供的上下文，包含request和view

    Returns:
        Response: 统一格式的API响应
    """
    request = context.get('request')
    if request is not None:
        logger.warning(f"请求异常: {request.method} {request.path} {type(exc).__name__}: {exc}")

    if isinstance(exc, DomainException):
        return _domain_exception_response(exc)

    simple = _lookup(_SIMPLE_RESPONSES, exc)
    if simple is not None:
        code, http_code, message = simple
        return ApiResponseBuilder.fail(message=message, code=code, http_code=http_code)

    if isinstance(exc, ParseError):
        return ApiResponseBuilder.fail(message=str(exc.detail), code=StatusCode.PARAM_ERROR)

    if isinstance(exc, (DRFValidationError, ValidationError)):
        detail = exc.detail if isinstance(exc, DRFValidationError) else exc.messages
        return ApiResponseBuilder.fail(code=StatusCode.VALIDATION_ERROR, data=detail)

    if isinstance(exc, APIException):
        return ApiResponseBuilder.fail(
            message=str(exc.detail),
            code=StatusCode.BAD_REQUEST,
            http_code=exc.status_code
        )

    logger.error(f"未处理的异常: {type(exc).__name__}: {exc}", exc_info=exc)
    return ApiResponseBuilder.fail(
        code=StatusCode.SERVER_ERROR,
        http_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )
