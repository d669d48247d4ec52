"""
订单基础设施层数据库模型。
定义与订单领域相关的Django ORM模型。
"""
from django.db import models


class OrderQuerySet(models.QuerySet):
    """订单查询集"""

    def alive(self):
        """排除已软删除的订单"""
        return self.filter(deleted_at__isnull=True)

    def with_items(self):
        """预加载订单项，按插入顺序"""
        return self.prefetch_related(
            models.Prefetch('items', queryset=OrderItem.objects.order_by('position', 'id'))
        )


class Order(models.Model):
    """订单数据库模型"""

    # 订单状态选项，值与领域模型OrderStatus一致
    class StatusChoices(models.TextChoices):
        PENDING = 'pending', '待确认'
        CONFIRMED = 'confirmed', '已确认'
        PROCESSING = 'processing', '处理中'
        SHIPPED = 'shipped', '已发货'
        DELIVERED = 'delivered', '已送达'
        CANCELLED = 'cancelled', '已取消'
        REFUNDED = 'refunded', '已退款'

    customer_id = models.PositiveBigIntegerField(verbose_name="客户ID")
    total_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=0,
        verbose_name="订单总金额"
    )
    status = models.CharField(
        max_length=20,
        choices=StatusChoices.choices,
        default=StatusChoices.PENDING,
        verbose_name="订单状态"
    )
    # 时间由领域模型维护，不使用auto_now
    created_at = models.DateTimeField(verbose_name="创建时间")
    updated_at = models.DateTimeField(verbose_name="更新时间")
    deleted_at = models.DateTimeField(null=True, blank=True, verbose_name="删除时间")

    # 版本号，用于乐观锁
    version = models.PositiveIntegerField(default=0, verbose_name="版本号")

    objects = OrderQuerySet.as_manager()

    class Meta:
        db_table = 'orders'
        verbose_name = "订单"
        verbose_name_plural = "订单"
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['customer_id'], name='idx_order_customer'),
            models.Index(fields=['status'], name='idx_order_status'),
            models.Index(fields=['created_at'], name='idx_order_created'),
            models.Index(fields=['deleted_at'], name='idx_order_deleted'),
        ]
        constraints = [
            models.CheckConstraint(condition=models.Q(total_amount__gte=0), name='order_total_amount_gte_0'),
        ]

    def __str__(self):
        return f"Order#{self.pk} ({self.status})"


class OrderItem(models.Model):
    """订单项数据库模型"""
    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name='items',
        verbose_name="订单"
    )
    product_id = models.PositiveBigIntegerField(verbose_name="商品ID")
    product_sku = models.CharField(max_length=100, verbose_name="商品SKU")
    product_name = models.CharField(max_length=255, verbose_name="商品名称")
    quantity = models.PositiveIntegerField(verbose_name="数量")
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, verbose_name="单价")
    total_price = models.DecimalField(max_digits=14, decimal_places=2, verbose_name="小计")
    # 订单内的插入顺序
    position = models.PositiveIntegerField(default=0, verbose_name="排序")

    class Meta:
        db_table = 'order_items'
        verbose_name = "订单项"
        verbose_name_plural = "订单项"
        constraints = [
            models.UniqueConstraint(fields=['order', 'product_id'], name='uniq_order_item_product'),
            models.CheckConstraint(condition=models.Q(quantity__gt=0), name='order_item_quantity_gt_0'),
            models.CheckConstraint(condition=models.Q(unit_price__gt=0), name='order_item_unit_price_gt_0'),
        ]

    def __str__(self):
        return f"{self.product_sku} x {self.quantity}"
