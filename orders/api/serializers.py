"""
订单API序列化器。
负责请求数据的反序列化和验证，响应数据由DTO的to_dict生成。
"""
from decimal import Decimal

from django.core.validators import MinValueValidator
from rest_framework import serializers

from orders.application.commands import OrderItemData
from orders.domain.entities import OrderStatus


class OrderItemSerializer(serializers.Serializer):
    """订单项请求序列化器"""
    product_id = serializers.IntegerField(min_value=1)
    product_sku = serializers.CharField(max_length=100)
    product_name = serializers.CharField(max_length=255)
    quantity = serializers.IntegerField(min_value=1)
    unit_price = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))]
    )

    def to_item_data(self) -> OrderItemData:
        return OrderItemData(**self.validated_data)


class OrderCreateSerializer(serializers.Serializer):
    """创建订单请求序列化器"""
    customer_id = serializers.IntegerField(min_value=1)
    items = OrderItemSerializer(many=True, required=False)

    def to_item_data(self):
        return [OrderItemData(**item) for item in self.validated_data.get('items', [])]


class ItemQuantitySerializer(serializers.Serializer):
    """更新订单项数量请求序列化器"""
    quantity = serializers.IntegerField(min_value=1)


class OrderStatusSerializer(serializers.Serializer):
    """订单状态流转请求序列化器"""
    status = serializers.ChoiceField(choices=OrderStatus.values())
