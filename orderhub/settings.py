"""
orderhub的Django配置入口。
按环境变量DJANGO_ENV（development / testing / production）选择配置模块，默认development。
"""
import os

from loguru import logger

DJANGO_ENV = os.environ.get('DJANGO_ENV', 'development').lower()

if DJANGO_ENV == 'production':
    from .config.production import *  # noqa: F401,F403
elif DJANGO_ENV == 'testing':
    from .config.testing import *  # noqa: F401,F403
else:
    from .config.development import *  # noqa: F401,F403

logger.debug(f"DJANGO_ENV={DJANGO_ENV}, 数据库引擎: {DATABASES['default']['ENGINE']}")
