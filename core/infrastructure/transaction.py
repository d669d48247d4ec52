"""
事务管理。
应用服务通过TransactionManager划定一个用例的事务边界，不直接依赖Django。
"""
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, Optional

from django.db import transaction as django_transaction
from loguru import logger


class TransactionManager(ABC):
    """
    事务边界。

    用法::

        with transaction_manager.start():
            ...

    作用域正常结束时提交；抛出异常时回滚，异常继续向上传播。
    """

    @abstractmethod
    def start(self):
        pass


class DjangoTransactionManager(TransactionManager):
    """基于 transaction.atomic，嵌套调用时内层使用保存点"""

    def __init__(self, using: Optional[str] = None):
        self.using = using

    @contextmanager
    def start(self) -> Iterator[None]:
        try:
            with django_transaction.atomic(using=self.using):
                yield
        except Exception as e:
            logger.debug(f"事务已回滚: {type(e).__name__}: {e}")
            raise


class NoOpTransactionManager(TransactionManager):
    """
    不开启真实事务，只统计调用次数。
    用于不接数据库的服务层测试。
    """

    def __init__(self):
        self.started = 0
        self.rolled_back = 0

    @contextmanager
    def start(self) -> Iterator[None]:
        self.started += 1
        try:
            yield
        except Exception:
            self.rolled_back += 1
            raise
