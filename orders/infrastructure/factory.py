"""
订单基础设施层工厂。
负责创建和管理基础设施层对象，包括仓储、缓存、事务管理器和应用服务实例。
"""
from typing import Optional

from loguru import logger

from core.infrastructure.cache import (
    CacheService,
    MemoryCacheService,
    NoCacheService,
    RedisCacheService,
)
from core.infrastructure.transaction import DjangoTransactionManager, TransactionManager
from orders.application.order_service import OrderApplicationService
from orders.domain import config
from orders.domain.repositories import OrderRepository
from orders.infrastructure.repositories.django_order_repository import DjangoOrderRepository


class OrderInfrastructureFactory:
    """
    订单基础设施层工厂类。
    同一工厂实例中的对象只创建一次。
    """

    def __init__(
        self,
        cache_service: Optional[CacheService] = None,
        transaction_manager: Optional[TransactionManager] = None,
        cache_backend: Optional[str] = None
    ):
        """
        初始化订单基础设施层工厂。

        Args:
            cache_service: 缓存服务，为None时按cache_backend创建
            transaction_manager: 事务管理器，为None时使用Django事务
            cache_backend: 缓存后端（redis / memory / none），默认取订单模块配置
        """
        self.cache_backend = (cache_backend or config.CACHE_BACKEND).lower()
        self._cache_service = cache_service
        self._transaction_manager = transaction_manager
        self._order_repository = None

    def create_order_repository(self) -> OrderRepository:
        """
        创建订单仓储。

        Returns:
            订单仓储实例
        """
        if not self._order_repository:
            self._order_repository = DjangoOrderRepository()

        return self._order_repository

    def create_cache_service(self) -> CacheService:
        """
        按配置的缓存后端创建缓存服务。

        Returns:
            缓存服务实例
        """
        if self._cache_service is not None:
            return self._cache_service

        if self.cache_backend == 'redis':
            from django_redis import get_redis_connection
            self._cache_service = RedisCacheService(
                redis_client=get_redis_connection("default"),
                default_ttl=config.CACHE_TIMEOUT,
            )
        elif self.cache_backend == 'memory':
            self._cache_service = MemoryCacheService(default_ttl=config.CACHE_TIMEOUT)
        elif self.cache_backend == 'none':
            self._cache_service = NoCacheService()
        else:
            logger.warning(f"未知的缓存后端: {self.cache_backend}，已禁用缓存")
            self._cache_service = NoCacheService()

        return self._cache_service

    def create_transaction_manager(self) -> TransactionManager:
        """
        创建事务管理器。

        Returns:
            事务管理器实例
        """
        if self._transaction_manager is None:
            self._transaction_manager = DjangoTransactionManager()

        return self._transaction_manager

    def create_order_service(self) -> OrderApplicationService:
        """
        创建订单应用服务。

        Returns:
            订单应用服务实例
        """
        return OrderApplicationService(
            order_repository=self.create_order_repository(),
            transaction_manager=self.create_transaction_manager(),
            cache_service=self.create_cache_service(),
            cache_timeout=config.CACHE_TIMEOUT,
        )
