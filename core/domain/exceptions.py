"""
领域异常。
各业务模块的错误类型都继承DomainException，接口层据此统一转换为响应。
"""
from typing import Any, Optional


class DomainException(Exception):
    """领域异常基类，message为面向调用方的描述"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConcurrencyException(DomainException):
    """
    乐观锁冲突：聚合加载之后已被其他事务修改。

    Args:
        entity_name: 聚合名称
        entity_id: 聚合标识
        expected_version: 写入时携带的版本号
    """

    def __init__(self, entity_name: str, entity_id: Any, expected_version: Optional[int] = None):
        self.entity_name = entity_name
        self.entity_id = entity_id
        self.expected_version = expected_version
        message = f"{entity_name}(ID={entity_id})已被另一个事务修改"
        if expected_version is not None:
            message = f"{message}，写入版本号: {expected_version}"
        super().__init__(message)
