from fastapi import APIRouter, Depends, status
from starlette.responses import JSONResponse

from api.dependencies import get_access_control, get_privilege_resolver
from core.api_response import api_response
from schemas.privileges import (
    EffectivePrivilegesResponse,
    PrivilegeMappingResponse,
    RequiredPrivilegesResponse,
)
from services.access_control import AccessControl
from services.privileges import PrivilegeResolver

router = APIRouter()


@router.get("/mappings", response_model=PrivilegeMappingResponse)
async def get_privilege_mappings(
    resolver: PrivilegeResolver = Depends(get_privilege_resolver),
    acl: AccessControl = Depends(get_access_control),
) -> JSONResponse:
    """All registered mapping entries, in registration order."""
    entries = resolver.registry.get_privileges_mappings()
    return api_response(
        status_code=status.HTTP_200_OK,
        message="Privilege mappings retrieved successfully.",
        data=PrivilegeMappingResponse(entries=entries).model_dump(),
    )


@router.get("/required", response_model=RequiredPrivilegesResponse)
async def get_required_privileges(
    resolver: PrivilegeResolver = Depends(get_privilege_resolver),
    acl: AccessControl = Depends(get_access_control),
) -> JSONResponse:
    return api_response(
        status_code=status.HTTP_200_OK,
        message="Required privileges retrieved successfully.",
        data=RequiredPrivilegesResponse(
            required_privileges=resolver.required_privileges
        ).model_dump(),
    )


@router.get("/me", response_model=EffectivePrivilegesResponse)
async def get_my_privileges(
    resolver: PrivilegeResolver = Depends(get_privilege_resolver),
    acl: AccessControl = Depends(get_access_control),
) -> JSONResponse:
    privileges = sorted(acl.privileges)
    return api_response(
        status_code=status.HTTP_200_OK,
        message="Effective privileges retrieved successfully.",
        data=EffectivePrivilegesResponse(
            user_id=acl.user_id,
            admin=acl.admin,
            selected_roles=resolver.filter_selected_roles(privileges),
            privileges=privileges,
        ).model_dump(),
    )
