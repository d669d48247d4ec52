"""
生产环境配置。
"""
import os

from .base import *  # noqa: F401,F403

if DB_ENGINE == 'django.db.backends.mysql':
    import pymysql
    pymysql.install_as_MySQLdb()

DEBUG = False

DATABASES['default']['CONN_MAX_AGE'] = 60

CACHES['default']['OPTIONS'].update({
    'SOCKET_TIMEOUT': 5,
    'SOCKET_CONNECT_TIMEOUT': 5,
    'COMPRESSOR': 'django_redis.compressors.zlib.ZlibCompressor',
})
CACHES['default']['TIMEOUT'] = 300

if LOG_DIR:
    os.makedirs(LOG_DIR, exist_ok=True)

LOGGING = build_logging(
    console_level='WARNING',
    orders_level='INFO',
    log_file=os.path.join(LOG_DIR, 'orderhub.log') if LOG_DIR else None,
)

SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_HSTS_SECONDS = 31536000
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_SSL_REDIRECT = True
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True

REST_FRAMEWORK['DEFAULT_THROTTLE_CLASSES'] = [
    'rest_framework.throttling.AnonRateThrottle',
]
REST_FRAMEWORK['DEFAULT_THROTTLE_RATES'] = {
    'anon': '1000/hour',
}
