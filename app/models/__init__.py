# Sessions
from app.models.sessions.customer_session_models import CustomerSession

# Promos
from app.models.promos.promo_booking_models import PromoBooking

# Orders
from app.models.orders.add_on_models import AddOnOrder, AddOnOrderItem
from app.models.orders.consignment_models import ConsignmentItem, ConsignmentSale

# Support
from app.models.support.view_state_models import CustomerViewState
