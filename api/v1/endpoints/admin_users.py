from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import JSONResponse

from api.dependencies import require_privileges
from core.api_response import api_response
from db.sessions.database import get_db
from schemas.acl_role import AdminUserCreate, AdminUserDetails
from services.access_control import AccessControl
from services.acl_roles import create_admin_user
from utils.exception_handlers import exception_handler

router = APIRouter()


@router.post(
    "",
    response_model=AdminUserDetails,
    status_code=status.HTTP_201_CREATED,
)
@exception_handler
async def register_admin_user(
    payload: AdminUserCreate,
    db: AsyncSession = Depends(get_db),
    acl: AccessControl = Depends(require_privileges("user:create")),
) -> JSONResponse:
    """Create an admin user, optionally bound to an ACL role."""
    result = await create_admin_user(db=db, payload=payload, actor_id=acl.user_id)

    if isinstance(result, JSONResponse):
        return result

    return api_response(
        status_code=status.HTTP_201_CREATED,
        message="Admin user created successfully.",
        data=result.model_dump(),
    )
