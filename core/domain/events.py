"""
领域事件及进程内的事件分发。
"""
import uuid
from collections import defaultdict
from datetime import datetime, timezone
from typing import Callable, DefaultDict, Iterable, List, Type


class DomainEvent:
    """领域事件基类，创建时记录事件ID和发生时间（UTC）"""

    def __init__(self):
        self.id = uuid.uuid4()
        self.occurred_on = datetime.now(timezone.utc)

    @property
    def event_name(self) -> str:
        return type(self).__name__


EventHandler = Callable[[DomainEvent], None]


class DomainEvents:
    """
    同步的进程内事件总线。

    处理器按事件类型注册；发布时沿事件类的MRO查找，
    注册在父类上的处理器也会收到子类事件。
    处理器抛出的异常会传播给发布方。
    """

    _handlers: DefaultDict[Type[DomainEvent], List[EventHandler]] = defaultdict(list)

    @classmethod
    def register(cls, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        """注册处理器，重复注册同一处理器只保留一次"""
        if handler not in cls._handlers[event_type]:
            cls._handlers[event_type].append(handler)

    @classmethod
    def unregister(cls, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        handlers = cls._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)

    @classmethod
    def publish(cls, event: DomainEvent) -> None:
        for event_type in type(event).__mro__:
            for handler in list(cls._handlers.get(event_type, ())):
                handler(event)

    @classmethod
    def publish_all(cls, events: Iterable[DomainEvent]) -> None:
        for event in events:
            cls.publish(event)
