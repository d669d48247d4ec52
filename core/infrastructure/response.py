"""
统一响应格式。

所有接口返回同一结构的JSON：

    {
        "code": 10000,            # 业务状态码
        "success": true,
        "message": "操作成功",
        "timestamp": 1700000000000,
        "traceId": "…",
        "data": {...},            # 可选
        "metadata": {...}         # 可选
    }
"""
import time
import uuid
import typing as t
from dataclasses import dataclass, field

from rest_framework import status as http_status
from rest_framework.response import Response


class StatusCode:
    """业务状态码，前三位与HTTP状态码对应"""

    SUCCESS = 10000
    CREATED = 10001
    UPDATED = 10002
    DELETED = 10003

    BAD_REQUEST = 40000
    VALIDATION_ERROR = 40001
    PARAM_ERROR = 40002

    UNAUTHORIZED = 40100
    FORBIDDEN = 40300

    NOT_FOUND = 40400
    ORDER_NOT_FOUND = 40404
    ORDER_ITEM_NOT_FOUND = 40405

    OPTIMISTIC_LOCK_ERROR = 40901
    DUPLICATE_ENTITY = 40902

    ORDER_STATUS_ERROR = 41103     # 订单当前状态不允许该操作

    SERVER_ERROR = 50000
    DATABASE_ERROR = 50002


STATUS_MESSAGE_MAPPING = {
    StatusCode.SUCCESS: "操作成功",
    StatusCode.CREATED: "创建成功",
    StatusCode.UPDATED: "更新成功",
    StatusCode.DELETED: "删除成功",
    StatusCode.BAD_REQUEST: "请求参数错误",
    StatusCode.VALIDATION_ERROR: "数据验证失败",
    StatusCode.PARAM_ERROR: "参数错误",
    StatusCode.UNAUTHORIZED: "请先登录",
    StatusCode.FORBIDDEN: "权限不足",
    StatusCode.NOT_FOUND: "资源不存在",
    StatusCode.ORDER_NOT_FOUND: "订单不存在",
    StatusCode.ORDER_ITEM_NOT_FOUND: "订单项不存在",
    StatusCode.OPTIMISTIC_LOCK_ERROR: "数据已被其他用户修改",
    StatusCode.DUPLICATE_ENTITY: "实体已存在",
    StatusCode.ORDER_STATUS_ERROR: "订单状态不允许该操作",
    StatusCode.SERVER_ERROR: "服务器内部错误",
    StatusCode.DATABASE_ERROR: "数据库错误",
}


def get_status_message(code: int) -> str:
    return STATUS_MESSAGE_MAPPING.get(code, "未知状态")


@dataclass
class ApiResponse:
    """响应体，data和metadata为空时不输出"""
    code: int = StatusCode.SUCCESS
    success: bool = True
    message: str = ""
    data: t.Any = None
    metadata: t.Dict[str, t.Any] = field(default_factory=dict)
    timestamp: int = field(default_factory=lambda: int(time.time() * 1000))
    trace_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        if not self.message:
            self.message = get_status_message(self.code)

    def to_dict(self) -> dict:
        body = {
            "code": self.code,
            "success": self.success,
            "message": self.message,
            "timestamp": self.timestamp,
            "traceId": self.trace_id,
        }
        if self.data is not None:
            body["data"] = self.data
        if self.metadata:
            body["metadata"] = self.metadata
        return body

    def render(self, http_code: int) -> Response:
        return Response(self.to_dict(), status=http_code)


class ApiResponseBuilder:
    """
    构建统一格式的DRF响应。
    message为空时使用状态码对应的默认消息。
    """

    @staticmethod
    def success(
        data: t.Any = None,
        message: t.Optional[str] = None,
        code: int = StatusCode.SUCCESS,
        metadata: t.Optional[t.Dict[str, t.Any]] = None,
        http_code: int = http_status.HTTP_200_OK
    ) -> Response:
        return ApiResponse(
            code=code,
            success=True,
            message=message or "",
            data=data,
            metadata=metadata or {}
        ).render(http_code)

    @staticmethod
    def created(
        data: t.Any = None,
        message: t.Optional[str] = None,
        code: int = StatusCode.CREATED,
        metadata: t.Optional[t.Dict[str, t.Any]] = None
    ) -> Response:
        """HTTP 201"""
        return ApiResponseBuilder.success(
            data=data,
            message=message,
            code=code,
            metadata=metadata,
            http_code=http_status.HTTP_201_CREATED
        )

    @staticmethod
    def fail(
        message: t.Optional[str] = None,
        code: int = StatusCode.SERVER_ERROR,
        data: t.Any = None,
        http_code: int = http_status.HTTP_400_BAD_REQUEST,
        metadata: t.Optional[t.Dict[str, t.Any]] = None
    ) -> Response:
        """
        失败响应。

        Args:
            message: 错误消息
            code: 业务状态码
            data: 错误详情，例如字段校验错误
            http_code: HTTP状态码
            metadata: 元数据
        """
        return ApiResponse(
            code=code,
            success=False,
            message=message or "",
            data=data,
            metadata=metadata or {}
        ).render(http_code)

    @staticmethod
    def paginated(
        items: list,
        total: int,
        page: int,
        page_size: int,
        total_pages: int,
        has_more: bool,
        message: str = "查询成功",
        code: int = StatusCode.SUCCESS,
        metadata: t.Optional[t.Dict[str, t.Any]] = None
    ) -> Response:
        """
        分页响应，页码从0开始。data结构为：

            {"items": [...], "pagination": {"total", "page", "pageSize", "totalPages", "hasMore"}}
        """
        data = {
            "items": items,
            "pagination": {
                "total": total,
                "page": page,
                "pageSize": page_size,
                "totalPages": total_pages,
                "hasMore": has_more,
            },
        }
        return ApiResponseBuilder.success(data=data, message=message, code=code, metadata=metadata)
