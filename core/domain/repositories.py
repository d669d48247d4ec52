"""
仓储端口。
标识由仓储在create时分配，因此create与update是两个独立的操作。
"""
from abc import ABC, abstractmethod
from typing import Any, Generic, List, Optional, TypeVar

T = TypeVar('T')


class Repository(Generic[T], ABC):
    """按标识存取聚合"""

    @abstractmethod
    def create(self, entity: T) -> T:
        """持久化新聚合，返回分配了标识的聚合"""

    @abstractmethod
    def get_by_id(self, id: Any) -> Optional[T]:
        """获取聚合，不存在时返回None"""

    @abstractmethod
    def update(self, entity: T) -> T:
        """写回已持久化的聚合"""

    @abstractmethod
    def delete(self, id: Any) -> None:
        """删除聚合"""


class PagedRepository(Repository[T], ABC):
    """
    支持分页的仓储。

    list按limit/offset截取，count返回同一范围内的总数，
    两者配合生成分页结果。
    """

    @abstractmethod
    def list(self, limit: int = 10, offset: int = 0) -> List[T]:
        """返回一页聚合"""

    @abstractmethod
    def count(self) -> int:
        """聚合总数"""
