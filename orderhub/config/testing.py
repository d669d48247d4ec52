"""
测试环境配置：内存SQLite，不使用Redis和订单缓存。
"""
from .base import *  # noqa: F401,F403

DEBUG = False
ALLOWED_HOSTS = ['testserver', 'localhost', '127.0.0.1']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.dummy.DummyCache',
    }
}

LOGGING = build_logging(console_level='ERROR', orders_level='ERROR')

REST_FRAMEWORK['TEST_REQUEST_DEFAULT_FORMAT'] = 'json'

ORDER_SETTINGS = {
    'CACHE_BACKEND': 'none',
    'CACHE_TIMEOUT': 0,
    'DEFAULT_PAGE_SIZE': 10,
    'MAX_PAGE_SIZE': 100,
}
