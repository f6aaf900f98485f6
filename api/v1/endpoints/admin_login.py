from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_current_admin
from core.config import settings
from core.logging_config import get_logger
from db.models.acl import AdminUser
from db.sessions.database import get_db
from schemas.acl_role import (
    AdminLoginRequest,
    AdminLoginResponse,
    VerifyPasswordRequest,
    VerifyPasswordResponse,
)
from utils.auth import VERIFY_SCOPE, create_jwt_token, verify_password

logger = get_logger(__name__)
router = APIRouter()


@router.post("/login", response_model=AdminLoginResponse)
async def login_user(
    login_data: AdminLoginRequest,
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(AdminUser).where(AdminUser.username == login_data.username.strip())
    )
    user = result.scalar_one_or_none()

    if not user:
        raise HTTPException(status_code=404, detail="Account not found")

    if not verify_password(login_data.password, user.password):
        raise HTTPException(status_code=401, detail="Incorrect password")

    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account is in inactive state")

    user.last_login = datetime.now(timezone.utc)
    await db.commit()

    access_token = create_jwt_token(data={"uid": user.user_id, "rid": user.acl_role_id})
    logger.info(f"Admin user {user.user_id} logged in")

    return AdminLoginResponse(access_token=access_token, message="Login successful")


@router.post("/verify", response_model=VerifyPasswordResponse)
async def verify_user(
    payload: VerifyPasswordRequest,
    user: AdminUser = Depends(get_current_admin),
):
    """Re-check the caller's password before a sensitive change such as saving a role."""
    if not verify_password(payload.password, user.password):
        logger.warning(f"Identity verification failed for user {user.user_id}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect password"
        )

    token = create_jwt_token(
        data={"uid": user.user_id},
        expires_in=settings.JWT_VERIFY_TOKEN_EXPIRE_SECONDS,
        scope=VERIFY_SCOPE,
    )
    return VerifyPasswordResponse(
        verification_token=token,
        expires_in=settings.JWT_VERIFY_TOKEN_EXPIRE_SECONDS,
    )
