"""
实体基类。
"""
from typing import Any


class Entity:
    """
    具有标识的领域对象，相等性只取决于类型和标识。
    标识由仓储在持久化时分配，在此之前为None。
    """

    def __init__(self, id: Any = None):
        self.id = id

    @property
    def is_persisted(self) -> bool:
        """是否已分配标识"""
        return self.id is not None

    def __eq__(self, other: Any) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        # 未持久化的实体没有可比较的标识
        if self.id is None or other.id is None:
            return self is other
        return self.id == other.id

    def __hash__(self) -> int:
        if self.id is None:
            return object.__hash__(self)
        return hash((type(self).__name__, self.id))
