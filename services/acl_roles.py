from typing import Any, Dict, List, Optional

from fastapi import status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import JSONResponse

from core.api_response import api_response
from core.exceptions import RoleNotFoundError, UnknownRoleError
from core.logging_config import get_audit_logger, get_logger
from db.models.acl import AclRole, AdminUser
from schemas.acl_role import AclRoleDetails, AdminUserCreate, AdminUserDetails, CreateAclRole
from services.privileges import PrivilegeResolver
from services.role_editor import VerificationContext
from utils.auth import hash_password
from utils.id_generators import generate_digits_lowercase

logger = get_logger(__name__)
audit_logger = get_audit_logger()


class AclRoleRepository:
    """Backing store for the role editor on top of an async session."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def get(self, role_id: str) -> Optional[Dict[str, Any]]:
        role = await self._db.get(AclRole, role_id)
        if role is None:
            return None
        return {
            "role_id": role.role_id,
            "role_name": role.role_name,
            "privileges": list(role.privileges or []),
        }

    async def save(
        self, role_id: str, role: Dict[str, Any], context: VerificationContext
    ) -> None:
        acl_role = await self._db.get(AclRole, role_id)
        if acl_role is None:
            raise RoleNotFoundError(f"ACL role '{role_id}' not found.")

        acl_role.privileges = list(role["privileges"])
        try:
            await self._db.commit()
        except SQLAlchemyError:
            await self._db.rollback()
            raise
        audit_logger.info(
            "ACL role privileges saved",
            extra={
                "event": "role_saved",
                "actor_id": context.user_id,
                "role_id": role_id,
                "verified_by": context.user_id,
                "privilege_count": len(acl_role.privileges),
            },
        )


def role_details(role: AclRole, resolver: PrivilegeResolver) -> AclRoleDetails:
    privileges = list(role.privileges or [])
    return AclRoleDetails(
        role_id=role.role_id,
        role_name=role.role_name,
        description=role.description,
        privileges=privileges,
        selected_roles=resolver.filter_selected_roles(privileges),
        created_at=role.created_at,
        updated_at=role.updated_at,
    )


async def create_acl_role(
    db: AsyncSession,
    payload: CreateAclRole,
    resolver: PrivilegeResolver,
    actor_id: Optional[str] = None,
) -> JSONResponse | AclRoleDetails:
    existing = await db.execute(
        select(AclRole).where(AclRole.role_name == payload.role_name)
    )
    if existing.scalar_one_or_none():
        return api_response(
            status_code=status.HTTP_409_CONFLICT,
            message=f"Role '{payload.role_name}' already exists.",
            log_error=True,
        )

    for role_path in payload.selected_roles:
        if not resolver.registry.is_role_path(role_path):
            raise UnknownRoleError(f"Unknown role '{role_path}'.")

    role = AclRole(
        role_id=generate_digits_lowercase(),
        role_name=payload.role_name,
        description=payload.description,
        privileges=resolver.expand_selected_roles(payload.selected_roles),
    )
    db.add(role)
    await db.commit()
    await db.refresh(role)
    logger.info(f"Created ACL role {role.role_id} '{role.role_name}'")
    audit_logger.info(
        "ACL role created",
        extra={
            "event": "role_created",
            "actor_id": actor_id,
            "role_id": role.role_id,
            "privilege_count": len(role.privileges),
        },
    )
    return role_details(role, resolver)


async def list_acl_roles(
    db: AsyncSession, resolver: PrivilegeResolver
) -> List[AclRoleDetails]:
    result = await db.execute(select(AclRole).order_by(AclRole.role_name))
    return [role_details(role, resolver) for role in result.scalars().all()]


async def get_acl_role(
    db: AsyncSession, role_id: str, resolver: PrivilegeResolver
) -> JSONResponse | AclRoleDetails:
    role = await db.get(AclRole, role_id)
    if role is None:
        return api_response(
            status_code=status.HTTP_404_NOT_FOUND,
            message="Role not found.",
            log_error=True,
        )
    return role_details(role, resolver)


async def create_admin_user(
    db: AsyncSession, payload: AdminUserCreate, actor_id: Optional[str] = None
) -> JSONResponse | AdminUserDetails:
    duplicate = await db.execute(
        select(AdminUser).where(
            (AdminUser.username == payload.username)
            | (AdminUser.email == payload.email.lower())
        )
    )
    if duplicate.scalars().first():
        return api_response(
            status_code=status.HTTP_409_CONFLICT,
            message="User with the given username or email already exists.",
            log_error=True,
        )

    if payload.acl_role_id is not None and await db.get(AclRole, payload.acl_role_id) is None:
        return api_response(
            status_code=status.HTTP_404_NOT_FOUND,
            message="Role not found.",
            log_error=True,
        )

    user = AdminUser(
        user_id=generate_digits_lowercase(),
        username=payload.username,
        email=payload.email.lower(),
        password=hash_password(payload.password),
        admin=payload.admin,
        acl_role_id=payload.acl_role_id,
        is_active=True,
    )
    db.add(user)
    await db.commit()
    audit_logger.info(
        "Admin user created",
        extra={
            "event": "user_created",
            "actor_id": actor_id,
            "user_id": user.user_id,
            "role_id": user.acl_role_id,
        },
    )
    return AdminUserDetails(
        user_id=user.user_id,
        username=user.username,
        email=user.email,
        admin=user.admin,
        acl_role_id=user.acl_role_id,
        is_active=user.is_active,
    )
