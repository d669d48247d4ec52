"""
领域层公共构件：实体、值对象、聚合根、领域事件和仓储端口。
"""
from core.domain.base import Entity
from core.domain.value_objects import ValueObject
from core.domain.aggregates import AggregateRoot
from core.domain.events import DomainEvent, DomainEvents
from core.domain.exceptions import DomainException, ConcurrencyException
from core.domain.repositories import Repository, PagedRepository

__all__ = [
    'Entity',
    'ValueObject',
    'AggregateRoot',
    'DomainEvent',
    'DomainEvents',
    'DomainException',
    'ConcurrencyException',
    'Repository',
    'PagedRepository',
]
