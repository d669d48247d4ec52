"""
订单模块配置文件。
从Django设置中获取订单模块的配置。
"""
from django.conf import settings

# 获取订单模块配置，如果不存在则使用默认值
ORDER_SETTINGS = getattr(settings, 'ORDER_SETTINGS', {})

# 缓存后端：redis / memory / none
CACHE_BACKEND = ORDER_SETTINGS.get('CACHE_BACKEND', 'none')

# 订单详情缓存超时（秒）
CACHE_TIMEOUT = ORDER_SETTINGS.get('CACHE_TIMEOUT', 300)

# 分页配置，页码从0开始
DEFAULT_PAGE_SIZE = ORDER_SETTINGS.get('DEFAULT_PAGE_SIZE', 10)
MAX_PAGE_SIZE = ORDER_SETTINGS.get('MAX_PAGE_SIZE', 100)
