from estateledger_backend.extensions import db

# Core Models
from .user import User, ROLE_ADMIN, ROLE_TENANT, ROLE_SECURITY
from .room import Room
from .rent_bill import RentBill
from .utility_bill import UtilityBill
from .payment import Payment
from .notification import Notification

# Staff / building operations
from .staff_payment import StaffPayment
from .expense import Expense
from .water_tanker import WaterTanker
from .maintenance import MaintenanceRequest
from .password_reset import PasswordResetRequest

__all__ = [
    "db",
    "User",
    "ROLE_ADMIN",
    "ROLE_TENANT",
    "ROLE_SECURITY",
    "Room",
    "RentBill",
    "UtilityBill",
    "Payment",
    "Notification",
    "StaffPayment",
    "Expense",
    "WaterTanker",
    "MaintenanceRequest",
    "PasswordResetRequest",
]
