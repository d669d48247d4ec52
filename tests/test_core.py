"""
公共构件测试：事件总线、缓存、统一响应和异常处理。
"""
import time
from types import SimpleNamespace

import pytest
from rest_framework.exceptions import NotFound, ParseError, ValidationError

from core.domain.events import DomainEvent, DomainEvents
from core.domain.exceptions import ConcurrencyException, DomainException
import core.infrastructure.cache as cache_module
from core.infrastructure.cache import MemoryCacheService, NoCacheService, RedisCacheService
from core.infrastructure.exception_handler import unified_exception_handler
from core.infrastructure.response import ApiResponseBuilder, StatusCode
from orders.domain.errors import OrderError, OrderErrorCode


class _Pinged(DomainEvent):
    pass


class TestDomainEvents:

    def test_handlers_receive_subclass_events(self):
        received = []
        DomainEvents.register(DomainEvent, received.append)
        try:
            event = _Pinged()
            DomainEvents.publish(event)
        finally:
            DomainEvents.unregister(DomainEvent, received.append)

        assert received == [event]
        assert event.event_name == "_Pinged"

    def test_duplicate_registration_is_ignored(self):
        received = []
        DomainEvents.register(_Pinged, received.append)
        DomainEvents.register(_Pinged, received.append)
        try:
            DomainEvents.publish_all([_Pinged(), _Pinged()])
        finally:
            DomainEvents.unregister(_Pinged, received.append)

        assert len(received) == 2

    def test_unregister_unknown_handler(self):
        DomainEvents.unregister(_Pinged, print)


class TestMemoryCache:

    def test_set_get_delete(self):
        cache = MemoryCacheService(default_ttl=60)

        assert cache.set("order:1", {"id": 1})
        assert cache.get("order:1") == {"id": 1}
        assert cache.delete("order:1") is True
        assert cache.get("order:1") is None
        assert cache.delete("order:1") is False

    def test_zero_ttl_is_not_stored(self):
        cache = MemoryCacheService(default_ttl=60)
        assert cache.set("order:1", "x", ttl=0) is False
        assert cache.get("order:1") is None

    def test_expired_entry(self, monkeypatch):
        cache = MemoryCacheService(default_ttl=60)
        cache.set("order:1", "x", ttl=5)

        now = time.monotonic()
        monkeypatch.setattr(cache_module, "time", SimpleNamespace(monotonic=lambda: now + 10))

        assert cache.get("order:1") is None

    def test_add_only_fills_missing_key(self):
        cache = MemoryCacheService(default_ttl=60)

        assert cache.add("order:1", (0, "old")) is True
        cache.set("order:1", (1, "new"))
        assert cache.add("order:1", (0, "old")) is False
        assert cache.get("order:1") == (1, "new")

    def test_no_cache(self):
        cache = NoCacheService()
        cache.set("order:1", "x")
        assert cache.get("order:1") is None
        assert cache.add("order:1", "x") is False


class _FakeRedis:
    """只实现缓存服务用到的命令"""

    def __init__(self):
        self.store = {}

    def get(self, key):
        return self.store.get(key)

    def setex(self, key, ttl, value):
        self.store[key] = value
        return True

    def set(self, key, value, ex=None, nx=False):
        if nx and key in self.store:
            return None
        self.store[key] = value
        return True

    def delete(self, key):
        return 1 if self.store.pop(key, None) is not None else 0


class TestRedisCache:

    def test_reads_go_to_redis(self):
        client = _FakeRedis()
        cache = RedisCacheService(client, default_ttl=60)
        cache.set("order:1", (0, "old"))

        # 其他进程写入的新值立即可见
        other = RedisCacheService(client, default_ttl=60)
        other.set("order:1", (1, "new"))

        assert cache.get("order:1") == (1, "new")

    def test_add_only_fills_missing_key(self):
        client = _FakeRedis()
        cache = RedisCacheService(client, default_ttl=60)

        assert cache.add("order:1", (0, "old")) is True
        assert cache.add("order:1", (0, "older")) is False
        assert cache.get("order:1") == (0, "old")
        assert "orderhub:order:1" in client.store


class TestApiResponseBuilder:

    def test_default_message(self):
        body = ApiResponseBuilder.success(code=StatusCode.UPDATED).data

        assert body["message"] == "更新成功"
        assert body["success"] is True
        assert "data" not in body
        assert "metadata" not in body

    def test_fail(self):
        response = ApiResponseBuilder.fail(code=StatusCode.PARAM_ERROR, data={"page": "bad"})

        assert response.status_code == 400
        assert response.data["success"] is False
        assert response.data["data"] == {"page": "bad"}

    def test_paginated(self):
        response = ApiResponseBuilder.paginated(
            items=[{"id": 1}], total=11, page=0, page_size=10, total_pages=2, has_more=True
        )

        assert response.data["data"]["pagination"] == {
            "total": 11,
            "page": 0,
            "pageSize": 10,
            "totalPages": 2,
            "hasMore": True,
        }


class TestUnifiedExceptionHandler:

    def test_order_error_uses_registered_handler(self):
        response = unified_exception_handler(OrderError(OrderErrorCode.ORDER_NOT_FOUND), {})

        assert response.status_code == 404
        assert response.data["code"] == StatusCode.ORDER_NOT_FOUND
        assert response.data["data"] == {"error": "ORDER_NOT_FOUND", "field": None}

    def test_concurrency_conflict(self):
        response = unified_exception_handler(ConcurrencyException("Order", 3, 2), {})

        assert response.status_code == 409
        assert response.data["code"] == StatusCode.OPTIMISTIC_LOCK_ERROR

    def test_other_domain_exception(self):
        response = unified_exception_handler(DomainException("bad state"), {})

        assert response.status_code == 400
        assert response.data["message"] == "bad state"

    @pytest.mark.parametrize(
        "exc, http_code, code",
        [
            (ParseError("bad json"), 400, StatusCode.PARAM_ERROR),
            (ValidationError({"quantity": ["required"]}), 400, StatusCode.VALIDATION_ERROR),
            (NotFound(), 404, StatusCode.NOT_FOUND),
            (RuntimeError("boom"), 500, StatusCode.SERVER_ERROR),
        ],
    )
    def test_framework_exceptions(self, exc, http_code, code):
        response = unified_exception_handler(exc, {})

        assert response.status_code == http_code
        assert response.data["code"] == code
