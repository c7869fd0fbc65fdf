from .enums import Realm, SubscriptionStatus
from .user import User
from .admin import Admin
from .auth_session import AuthSession
from .category import Category
from .regular_holiday import RegularHoliday
from .restaurant import Restaurant
from .favorite import Favorite
from .reservation import Reservation
from .review import Review
from .subscription import Subscription
from .company import Company
from .term import Term

__all__ = [
    "Realm",
    "SubscriptionStatus",
    "User",
    "Admin",
    "AuthSession",
    "Category",
    "RegularHoliday",
    "Restaurant",
    "Favorite",
    "Reservation",
    "Review",
    "Subscription",
    "Company",
    "Term",
]
