# 引用基础设施层的模型
from orders.infrastructure.models.order_models import (
    Order,
    OrderItem,
)
