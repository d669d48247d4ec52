"""
各环境共享的Django配置。
环境相关的值来自 env 模块，各环境配置文件只覆盖差异部分。
"""
from .env import *  # noqa: F401,F403

ROOT_URLCONF = 'orderhub.urls'
WSGI_APPLICATION = 'orderhub.wsgi.application'

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'rest_framework',
    'orders.apps.OrdersConfig',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
]

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
            ],
        },
    },
]

USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

DATABASES = {
    'default': {
        'ENGINE': DB_ENGINE,
        'NAME': DB_NAME,
        'USER': DB_USER,
        'PASSWORD': DB_PASSWORD,
        'HOST': DB_HOST,
        'PORT': DB_PORT,
    }
}

if DB_ENGINE == 'django.db.backends.mysql':
    DATABASES['default']['OPTIONS'] = {'charset': 'utf8mb4', 'use_unicode': True}

CACHES = {
    'default': {
        'BACKEND': 'django_redis.cache.RedisCache',
        'LOCATION': REDIS_URL,
        'OPTIONS': {
            'CLIENT_CLASS': 'django_redis.client.DefaultClient',
            'CONNECTION_POOL_KWARGS': {'max_connections': REDIS_MAX_CONNECTIONS},
            'PASSWORD': REDIS_PASSWORD,
        },
        'KEY_PREFIX': REDIS_KEY_PREFIX,
    }
}

# 接口不做认证
REST_FRAMEWORK = {
    'EXCEPTION_HANDLER': 'core.infrastructure.exception_handler.unified_exception_handler',
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.AllowAny',
    ],
    'UNAUTHENTICATED_USER': None,
    'DEFAULT_PARSER_CLASSES': [
        'rest_framework.parsers.JSONParser',
    ],
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
    'COERCE_DECIMAL_TO_STRING': True,
}

# 订单模块配置，由 orders.domain.config 读取
ORDER_SETTINGS = {
    'CACHE_BACKEND': ORDER_CACHE_BACKEND,
    'CACHE_TIMEOUT': ORDER_CACHE_TIMEOUT,
    'DEFAULT_PAGE_SIZE': ORDER_DEFAULT_PAGE_SIZE,
    'MAX_PAGE_SIZE': ORDER_MAX_PAGE_SIZE,
}


def build_logging(console_level='INFO', orders_level='INFO', log_file=None):
    """
    生成LOGGING配置。

    Args:
        console_level: 控制台输出级别
        orders_level: orders包日志级别
        log_file: 日志文件路径，为None时只输出到控制台
    """
    handlers = {
        'console': {
            'level': console_level,
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    }
    if log_file:
        handlers['file'] = {
            'level': 'INFO',
            'class': 'logging.handlers.RotatingFileHandler',
            'filename': str(log_file),
            'maxBytes': 10 * 1024 * 1024,
            'backupCount': 10,
            'formatter': 'verbose',
        }

    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'verbose': {
                'format': '{levelname} {asctime} {name} {process:d} {message}',
                'style': '{',
            },
        },
        'handlers': handlers,
        'loggers': {
            'django': {'handlers': list(handlers), 'level': 'INFO', 'propagate': True},
            'orders': {'handlers': list(handlers), 'level': orders_level, 'propagate': False},
            'core': {'handlers': list(handlers), 'level': orders_level, 'propagate': False},
        },
    }


LOGGING = build_logging()

