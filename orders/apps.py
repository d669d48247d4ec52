from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'orders'
    verbose_name = "订单"

    def ready(self):
        from core.infrastructure.exception_handler import register_domain_exception_handler
        from orders.api.exception_handlers import order_error_response
        from orders.application.event_handlers import register_order_event_handlers
        from orders.domain.errors import OrderError

        register_order_event_handlers()
        register_domain_exception_handler(OrderError, order_error_response)
