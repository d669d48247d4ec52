"""
环境变量。
启动时加载 orderhub/config/.env（不覆盖已存在的环境变量），并导出各环境配置用到的值。
"""
import os
import warnings
from pathlib import Path
from typing import Any, Callable, Optional

from dotenv import load_dotenv
from loguru import logger

BASE_DIR = Path(__file__).resolve().parent.parent.parent

_ENV_FILE = Path(__file__).resolve().parent / '.env'

if _ENV_FILE.exists():
    load_dotenv(dotenv_path=_ENV_FILE, encoding='utf-8')
    logger.debug(f"已加载环境变量文件: {_ENV_FILE}")

_TRUE_VALUES = ('true', 'yes', 'y', '1', 'on')


def _split_list(value: str) -> list:
    return [item.strip() for item in value.split(',') if item.strip()]


def get_env(name: str, default: Any = None, cast_type: Optional[Callable] = None) -> Any:
    """
    读取环境变量。

    Args:
        name: 环境变量名称
        default: 变量不存在时的默认值，不做类型转换
        cast_type: 类型转换，支持int、float、bool、list（逗号分隔）等

    Returns:
        转换后的值；转换失败时发出警告并返回default
    """
    raw = os.environ.get(name)
    if raw is None:
        return default
    if cast_type is None:
        return raw
    if cast_type is bool:
        return raw.strip().lower() in _TRUE_VALUES
    if cast_type is list:
        return _split_list(raw)
    try:
        return cast_type(raw)
    except (TypeError, ValueError):
        warnings.warn(f"环境变量{name}={raw!r}无法转换为{getattr(cast_type, '__name__', cast_type)}，使用默认值")
        return default


DEBUG = get_env('DEBUG', default=True, cast_type=bool)
SECRET_KEY = get_env('SECRET_KEY', default='django-insecure-orderhub-development-key-change-me')
ALLOWED_HOSTS = get_env('ALLOWED_HOSTS', default=['localhost', '127.0.0.1'], cast_type=list)

LANGUAGE_CODE = get_env('LANGUAGE_CODE', default='zh-hans')
TIME_ZONE = get_env('TIME_ZONE', default='Asia/Shanghai')

# 数据库
DB_ENGINE = get_env('DB_ENGINE', default='django.db.backends.mysql')
DB_NAME = get_env('DB_NAME', default='orderhub')
DB_USER = get_env('DB_USER', default='root')
DB_PASSWORD = get_env('DB_PASSWORD', default='')
DB_HOST = get_env('DB_HOST', default='127.0.0.1')
DB_PORT = get_env('DB_PORT', default='3306')

# Redis
REDIS_URL = get_env('REDIS_URL', default='redis://localhost:6379/1')
REDIS_PASSWORD = get_env('REDIS_PASSWORD', default='')
REDIS_MAX_CONNECTIONS = get_env('REDIS_MAX_CONNECTIONS', default=100, cast_type=int)
REDIS_KEY_PREFIX = get_env('REDIS_KEY_PREFIX', default='orderhub')

# 日志目录，未设置时只输出到控制台
LOG_DIR = get_env('LOG_DIR')

# 订单模块
ORDER_CACHE_BACKEND = get_env('ORDER_CACHE_BACKEND', default='redis')
ORDER_CACHE_TIMEOUT = get_env('ORDER_CACHE_TIMEOUT', default=300, cast_type=int)
ORDER_DEFAULT_PAGE_SIZE = get_env('ORDER_DEFAULT_PAGE_SIZE', default=10, cast_type=int)
ORDER_MAX_PAGE_SIZE = get_env('ORDER_MAX_PAGE_SIZE', default=100, cast_type=int)
