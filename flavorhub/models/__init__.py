# Import all models here so SQLAlchemy registers them with Base.metadata
from flavorhub.models.menu_item import MenuItem
from flavorhub.models.order import Order, OrderItem, OrderStatus
from flavorhub.models.payment import Payment, PaymentStatus, PaymentType
from flavorhub.models.reservation import Reservation, ReservationStatus
from flavorhub.models.restaurant import Restaurant
from flavorhub.models.user import User, UserRole

__all__ = [
    "MenuItem",
    "Order",
    "OrderItem",
    "OrderStatus",
    "Payment",
    "PaymentStatus",
    "PaymentType",
    "Reservation",
    "ReservationStatus",
    "Restaurant",
    "User",
    "UserRole",
]
