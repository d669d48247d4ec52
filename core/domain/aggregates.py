"""
聚合根基类。
"""
from typing import Any, List

from core.domain.base import Entity
from core.domain.events import DomainEvent


class AggregateRoot(Entity):
    """
    聚合的唯一入口，外部只能通过聚合根修改聚合内的对象。

    - version: 乐观锁版本号，仓储写入成功后递增
    - domain_events: 状态变化时记录的事件，由仓储在写入后发布
    """

    def __init__(self, id: Any = None, version: int = 0):
        super().__init__(id)
        self._version = version
        self._pending_events: List[DomainEvent] = []

    @property
    def version(self) -> int:
        return self._version

    def increment_version(self) -> None:
        self._version += 1

    @property
    def domain_events(self) -> List[DomainEvent]:
        """待发布事件的副本"""
        return list(self._pending_events)

    def add_domain_event(self, event: DomainEvent) -> None:
        self._pending_events.append(event)

    def clear_domain_events(self) -> List[DomainEvent]:
        """
        取出并清空待发布事件。

        Returns:
            按记录顺序排列的事件
        """
        events, self._pending_events = self._pending_events, []
        return events

    def check_invariants(self) -> bool:
        """校验聚合内的业务规则，子类按需重写"""
        return True
