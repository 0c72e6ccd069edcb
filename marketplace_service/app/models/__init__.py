from .admin import Admin, AdminRole
from .base import MarketplaceBase, MarketplaceBaseModel
from .booking import Booking, BookingItem, BookingStatus
from .category import Category
from .item import Item, ItemPrice
from .vendor import PaymentMode, Vendor

__all__ = [
    "Admin",
    "AdminRole",
    "Booking",
    "BookingItem",
    "BookingStatus",
    "Category",
    "Item",
    "ItemPrice",
    "MarketplaceBase",
    "MarketplaceBaseModel",
    "PaymentMode",
    "Vendor",
]
