"""
开发环境配置。
"""
import os

from .base import *  # noqa: F401,F403

if DB_ENGINE == 'django.db.backends.mysql':
    import pymysql
    pymysql.install_as_MySQLdb()

DEBUG = True

SECURE_SSL_REDIRECT = False
SESSION_COOKIE_SECURE = False
CSRF_COOKIE_SECURE = False
SECURE_HSTS_SECONDS = 0

if LOG_DIR:
    os.makedirs(LOG_DIR, exist_ok=True)

LOGGING = build_logging(
    console_level='DEBUG',
    orders_level='DEBUG',
    log_file=os.path.join(LOG_DIR, 'orderhub.log') if LOG_DIR else None,
)

# 保留可浏览的API页面
REST_FRAMEWORK['DEFAULT_RENDERER_CLASSES'] = [
    'rest_framework.renderers.JSONRenderer',
    'rest_framework.renderers.BrowsableAPIRenderer',
]
