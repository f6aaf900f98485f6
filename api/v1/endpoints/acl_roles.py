from typing import Optional

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import JSONResponse

from api.dependencies import (
    get_privilege_resolver,
    get_verification_context,
    require_privileges,
)
from core.api_response import api_response
from core.exceptions import RoleNotModifiedError
from db.models.acl import AclRole
from db.sessions.database import get_db
from schemas.acl_role import AclRoleDetails, CreateAclRole, UpdateAclRolePrivileges
from services.access_control import AccessControl
from services.acl_roles import (
    AclRoleRepository,
    create_acl_role,
    get_acl_role,
    list_acl_roles,
    role_details,
)
from services.privileges import PrivilegeResolver
from services.role_editor import RoleDetailEditor, VerificationContext
from utils.exception_handlers import exception_handler

router = APIRouter()


@router.post(
    "",
    response_model=AclRoleDetails,
    status_code=status.HTTP_201_CREATED,
)
@exception_handler
async def create_role(
    payload: CreateAclRole,
    db: AsyncSession = Depends(get_db),
    resolver: PrivilegeResolver = Depends(get_privilege_resolver),
    acl: AccessControl = Depends(require_privileges("acl_role:create")),
) -> JSONResponse:
    result = await create_acl_role(
        db=db, payload=payload, resolver=resolver, actor_id=acl.user_id
    )

    if isinstance(result, JSONResponse):
        return result

    return api_response(
        status_code=status.HTTP_201_CREATED,
        message="Role created successfully.",
        data=result.model_dump(),
    )


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_privileges("acl_role:read"))],
)
@exception_handler
async def get_roles(
    db: AsyncSession = Depends(get_db),
    resolver: PrivilegeResolver = Depends(get_privilege_resolver),
) -> JSONResponse:
    roles = await list_acl_roles(db=db, resolver=resolver)
    return api_response(
        status_code=status.HTTP_200_OK,
        message="Roles retrieved successfully.",
        data=[role.model_dump() for role in roles],
    )


@router.get(
    "/{role_id}",
    response_model=AclRoleDetails,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_privileges("acl_role:read"))],
)
@exception_handler
async def get_role(
    role_id: str = Path(..., description="ACL role ID to retrieve"),
    db: AsyncSession = Depends(get_db),
    resolver: PrivilegeResolver = Depends(get_privilege_resolver),
) -> JSONResponse:
    result = await get_acl_role(db=db, role_id=role_id, resolver=resolver)

    if isinstance(result, JSONResponse):
        return result

    return api_response(
        status_code=status.HTTP_200_OK,
        message="Role retrieved successfully.",
        data=result.model_dump(),
    )


@router.patch(
    "/{role_id}",
    response_model=AclRoleDetails,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_privileges("acl_role:update"))],
)
@exception_handler
async def update_role_privileges(
    payload: UpdateAclRolePrivileges,
    role_id: str = Path(..., description="ACL role ID to update"),
    db: AsyncSession = Depends(get_db),
    resolver: PrivilegeResolver = Depends(get_privilege_resolver),
    verification: Optional[VerificationContext] = Depends(get_verification_context),
) -> JSONResponse:
    """
    Replace the role selection of an ACL role.

    The selection must differ from the stored one and the caller must send an
    'X-Verification-Token' obtained from /admin-login/verify.
    """
    editor = RoleDetailEditor(resolver=resolver, repository=AclRoleRepository(db))
    await editor.load(role_id)
    editor.set_selection(payload.selected_roles)

    if not editor.can_save:
        raise RoleNotModifiedError("The role selection was not changed.")

    await editor.save_role(verification)

    role = await db.get(AclRole, role_id)
    await db.refresh(role)
    return api_response(
        status_code=status.HTTP_200_OK,
        message="Role saved successfully.",
        data=role_details(role, resolver).model_dump(),
    )
