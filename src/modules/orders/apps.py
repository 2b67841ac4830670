from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.orders"
    label = "orders"

    def ready(self) -> None:
        from modules.orders.events import (
            OrderAddressChanged,
            OrderCancelled,
            OrderDelivered,
            OrderOutForDelivery,
            OrderPlaced,
        )
        from modules.orders.handlers import (
            order_address_changed_handler,
            order_cancelled_handler,
            order_delivered_handler,
            order_out_for_delivery_handler,
            order_placed_handler,
        )
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(OrderPlaced, order_placed_handler)
        event_bus.subscribe(OrderOutForDelivery, order_out_for_delivery_handler)
        event_bus.subscribe(OrderDelivered, order_delivered_handler)
        event_bus.subscribe(OrderCancelled, order_cancelled_handler)
        event_bus.subscribe(OrderAddressChanged, order_address_changed_handler)
