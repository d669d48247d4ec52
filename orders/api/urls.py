"""
订单API URL配置。
定义RESTful API的路由映射。
"""
from django.urls import path
from orders.api import views

urlpatterns = [
    # 订单API
    path('orders/', views.OrderListCreateView.as_view(), name='order-list-create'),
    path('orders/status/<str:status>/', views.OrderStatusListView.as_view(), name='order-list-by-status'),
    path('orders/<int:order_id>/', views.OrderDetailView.as_view(), name='order-detail'),
    path('orders/<int:order_id>/confirm/', views.OrderConfirmView.as_view(), name='order-confirm'),
    path('orders/<int:order_id>/cancel/', views.OrderCancelView.as_view(), name='order-cancel'),
    path('orders/<int:order_id>/status/', views.OrderStatusView.as_view(), name='order-status'),

    # 订单项API
    path('orders/<int:order_id>/items/', views.OrderItemListView.as_view(), name='order-item-add'),
    path(
        'orders/<int:order_id>/items/<int:product_id>/',
        views.OrderItemDetailView.as_view(),
        name='order-item-detail'
    ),

    # 客户订单API
    path('customers/<int:customer_id>/orders/', views.CustomerOrderListView.as_view(), name='customer-orders'),
]
