from typing import Any, Callable, Dict, Optional

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.config import settings
from core.exceptions import AccessDeniedError
from db.models.acl import AdminUser
from db.sessions.database import get_db
from services.access_control import AccessControl, effective_privileges
from services.privileges import PrivilegeMappingRegistry, PrivilegeResolver
from services.role_editor import VerificationContext
from utils.auth import VERIFY_SCOPE, get_current_user, verify_jwt_token


def get_privilege_registry(request: Request) -> PrivilegeMappingRegistry:
    registry = getattr(request.app.state, "privilege_registry", None)
    if registry is None:
        raise RuntimeError("Privilege mappings are not initialized.")
    return registry


def get_privilege_resolver(
    registry: PrivilegeMappingRegistry = Depends(get_privilege_registry),
) -> PrivilegeResolver:
    return PrivilegeResolver(registry, settings.REQUIRED_PRIVILEGES)


async def get_current_admin(
    payload: Dict[str, Any] = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> AdminUser:
    result = await db.execute(
        select(AdminUser)
        .options(selectinload(AdminUser.acl_role))
        .where(AdminUser.user_id == payload.get("uid"))
    )
    user = result.scalar_one_or_none()
    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive.",
        )
    return user


def get_access_control(
    user: AdminUser = Depends(get_current_admin),
    resolver: PrivilegeResolver = Depends(get_privilege_resolver),
) -> AccessControl:
    stored = user.acl_role.privileges if user.acl_role else []
    return AccessControl(
        user_id=user.user_id,
        privileges=effective_privileges(stored, resolver),
        admin=user.admin,
    )


def require_privileges(*privileges: str) -> Callable[..., AccessControl]:
    """Dependency factory answering 403 'Access denied' when a privilege is missing."""

    def dependency(acl: AccessControl = Depends(get_access_control)) -> AccessControl:
        try:
            acl.ensure(*privileges)
        except AccessDeniedError as exc:
            raise HTTPException(
                status_code=exc.status_code,
                detail={"message": exc.message, "missing_privileges": list(exc.missing)},
            ) from exc
        return acl

    return dependency


def get_verification_context(
    x_verification_token: Optional[str] = Header(None),
    user: AdminUser = Depends(get_current_admin),
) -> Optional[VerificationContext]:
    """Verification context from the 'X-Verification-Token' header, if any."""
    if not x_verification_token:
        return None
    try:
        payload = verify_jwt_token(x_verification_token, scope=VERIFY_SCOPE)
    except ValueError as ve:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Identity verification failed: {ve}",
        ) from ve
    if payload.get("uid") != user.user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Verification token belongs to another user.",
        )
    return VerificationContext(user_id=user.user_id, access=x_verification_token)
