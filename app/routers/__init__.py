# app/routers/__init__.py

from .sessions.customer_session_router import router as customer_session_router
from .sessions.reservation_router import router as reservation_router

from .promos.promo_booking_router import router as promo_booking_router

from .orders.add_on_order_router import router as add_on_order_router
from .orders.consignment_router import router as consignment_router

from .support.view_state_router import router as view_state_router


__all__ = [
"customer_session_router",
"reservation_router",

"promo_booking_router",

"add_on_order_router",
"consignment_router",

"view_state_router",
]
