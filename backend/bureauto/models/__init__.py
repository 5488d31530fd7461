from bureauto.models.user import User
from bureauto.models.manufacturer import Manufacturer
from bureauto.models.status_type import StatusType
from bureauto.models.advertisement import Advertisement
from bureauto.models.chat import Chat

__all__ = [
    "User",
    "Manufacturer",
    "StatusType",
    "Advertisement",
    "Chat",
]
