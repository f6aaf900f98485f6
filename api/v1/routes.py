from fastapi import APIRouter

from api.v1.endpoints import (
    acl_roles,
    admin_login,
    admin_users,
    payment_methods,
    privileges,
    product_streams,
)
from core.config import settings

api_router = APIRouter(prefix=settings.API_V1_STR)


# Admin Authentication Endpoints
api_router.include_router(
    admin_login.router, prefix="/admin-login", tags=["Admin Users Authentication"]
)
api_router.include_router(
    admin_users.router, prefix="/admin-users", tags=["Admin Users Management"]
)

# ACL Endpoints
api_router.include_router(privileges.router, prefix="/privileges", tags=["Privileges"])
api_router.include_router(acl_roles.router, prefix="/acl-roles", tags=["ACL Roles"])

# Module Endpoints
api_router.include_router(
    payment_methods.router, prefix="/payment-methods", tags=["Payment Methods"]
)
api_router.include_router(
    product_streams.router, prefix="/product-streams", tags=["Product Streams"]
)
