"""
Database models initialization.
"""

from .acl import AclRole, AdminUser
from .base import Base
from .payment import PaymentMethod
from .product_stream import ProductStream, ProductStreamFilter

__all__ = [
    "Base",
    "AclRole",
    "AdminUser",
    "PaymentMethod",
    "ProductStream",
    "ProductStreamFilter",
]
