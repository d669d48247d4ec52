"""
URL configuration for orderhub project.
"""
from django.urls import path, include

urlpatterns = [
    # 订单模块API
    path('', include('orders.urls')),
]
