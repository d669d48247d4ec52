"""
缓存服务。
订单详情读取时先查缓存，写操作提交后写入带版本号的最新值。
缓存出错只记录日志，读取时视为未命中，不影响业务流程。
"""
from abc import ABC, abstractmethod
import pickle
import threading
import time
from typing import Any, Optional

from cachetools import TTLCache
from loguru import logger
import redis


class CacheService(ABC):
    """缓存服务接口"""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """返回缓存值，未命中返回None"""

    @abstractmethod
    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """
        写入缓存。

        Args:
            key: 缓存键
            value: 可pickle的值
            ttl: 过期时间（秒），None表示使用默认值

        Returns:
            是否写入成功
        """

    @abstractmethod
    def add(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """仅在键不存在时写入，返回是否写入"""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """删除缓存键，返回键是否存在"""


class RedisCacheService(CacheService):
    """
    Redis缓存，值用pickle序列化。
    订单数据会被其他进程修改，因此不在进程内另做缓存。
    """

    def __init__(
        self,
        redis_client: redis.Redis,
        key_prefix: str = "orderhub:",
        default_ttl: int = 300
    ):
        self.redis_client = redis_client
        self.key_prefix = key_prefix
        self.default_ttl = default_ttl

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    def get(self, key: str) -> Optional[Any]:
        try:
            raw = self.redis_client.get(self._key(key))
        except redis.RedisError as e:
            logger.error(f"Redis读取失败: {key}, {e}")
            return None
        if raw is None:
            return None

        try:
            value = pickle.loads(raw)
        except (pickle.PickleError, EOFError, AttributeError) as e:
            logger.error(f"缓存反序列化失败: {key}, {e}")
            return None
        return value

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        ttl = self.default_ttl if ttl is None else ttl
        if ttl <= 0:
            return False
        try:
            ok = self.redis_client.setex(self._key(key), ttl, pickle.dumps(value))
        except (redis.RedisError, pickle.PickleError) as e:
            logger.error(f"Redis写入失败: {key}, {e}")
            return False
        logger.debug(f"缓存已写入: {key}, TTL={ttl}秒")
        return bool(ok)

    def add(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        ttl = self.default_ttl if ttl is None else ttl
        if ttl <= 0:
            return False
        try:
            ok = self.redis_client.set(self._key(key), pickle.dumps(value), ex=ttl, nx=True)
        except (redis.RedisError, pickle.PickleError) as e:
            logger.error(f"Redis写入失败: {key}, {e}")
            return False
        return bool(ok)

    def delete(self, key: str) -> bool:
        try:
            return self.redis_client.delete(self._key(key)) > 0
        except redis.RedisError as e:
            logger.error(f"Redis删除失败: {key}, {e}")
            return False


class MemoryCacheService(CacheService):
    """
    进程内缓存，用于开发环境和测试。
    TTLCache只有全局TTL，单个键的过期时间随值一起保存。
    """

    def __init__(self, maxsize: int = 1000, default_ttl: int = 300):
        self.cache = TTLCache(maxsize=maxsize, ttl=max(default_ttl, 1))
        self.default_ttl = default_ttl
        self._lock = threading.RLock()

    def get(self, key: str) -> Optional[Any]:
        entry = self.cache.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if expires_at <= time.monotonic():
            self.cache.pop(key, None)
            return None
        return value

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        ttl = self.default_ttl if ttl is None else min(ttl, self.default_ttl)
        if ttl <= 0:
            return False
        with self._lock:
            self.cache[key] = (time.monotonic() + ttl, value)
        return True

    def add(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        with self._lock:
            if self.get(key) is not None:
                return False
            return self.set(key, value, ttl)

    def delete(self, key: str) -> bool:
        return self.cache.pop(key, None) is not None


class NoCacheService(CacheService):
    """禁用缓存"""

    def get(self, key: str) -> Optional[Any]:
        return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        return False

    def add(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        return False

    def delete(self, key: str) -> bool:
        return False
