"""
API视图基类。
"""
from rest_framework import status
from rest_framework.views import APIView

from core.infrastructure.response import ApiResponseBuilder, StatusCode


class ApiBaseView(APIView):
    """
    所有接口视图的基类。
    子类只通过这里的方法构造响应，保证响应格式统一。
    """

    def success_response(self, data=None, message=None, code=StatusCode.SUCCESS, metadata=None):
        return ApiResponseBuilder.success(data=data, message=message, code=code, metadata=metadata)

    def created_response(self, data=None, message=None, code=StatusCode.CREATED, metadata=None):
        return ApiResponseBuilder.created(data=data, message=message, code=code, metadata=metadata)

    def failed_response(self, message=None, code=StatusCode.BAD_REQUEST,
                        data=None, http_code=status.HTTP_400_BAD_REQUEST, metadata=None):
        return ApiResponseBuilder.fail(
            message=message, code=code, data=data, http_code=http_code, metadata=metadata
        )

    def paginated_response(self, result, items=None, message="查询成功", metadata=None):
        """
        分页响应

        Args:
            result: 分页结果，提供total、page、page_size、total_pages、has_more
            items: 已转换为字典的当前页数据
            message: 响应消息
            metadata: 元数据
        """
        return ApiResponseBuilder.paginated(
            items=items if items is not None else [],
            total=result.total,
            page=result.page,
            page_size=result.page_size,
            total_pages=result.total_pages,
            has_more=result.has_more,
            message=message,
            metadata=metadata
        )

    @staticmethod
    def query_int(request, name, default):
        """读取整数查询参数，缺失或无法解析时返回default"""
        raw = request.query_params.get(name)
        if raw is None:
            return default
        try:
            return int(raw)
        except ValueError:
            return default
