from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from fastapi import Cookie, Header, HTTPException, status
from passlib.context import CryptContext

from core.config import settings
from core.logging_config import get_logger

logger = get_logger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_SCOPE = "access"
VERIFY_SCOPE = "verify"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


# JWT Creation Function
def create_jwt_token(
    data: Dict[str, Any],
    expires_in: int = settings.JWT_ACCESS_TOKEN_EXPIRE_SECONDS,
    scope: str = ACCESS_SCOPE,
    secret_key: Optional[str] = None,
) -> str:
    """
    Create a signed JWT token.

    Args:
        data (dict): Payload data.
        expires_in (int): Expiry time in seconds.
        scope (str): 'scope' claim, either access or verify.
        secret_key (str, optional): Signing key, defaults to the configured one.

    Returns:
        str: Encoded JWT token.

    Raises:
        RuntimeError: For any encoding issues.
    """
    if not data:
        raise ValueError("JWT payload cannot be empty.")

    now = datetime.now(timezone.utc)
    payload = {
        **data,
        "scope": scope,
        "exp": now + timedelta(seconds=expires_in),
        "iat": now,
        "nbf": now,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
    }

    try:
        return jwt.encode(
            payload,
            secret_key or settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )
    except Exception as e:
        logger.exception("JWT encoding failed.")
        raise RuntimeError(f"JWT encoding failed: {e}") from e


# JWT Verification Function
def verify_jwt_token(
    token: str,
    scope: str = ACCESS_SCOPE,
    secret_key: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Verify and decode a JWT token issued by ``create_jwt_token``.

    Raises:
        ValueError: If the token is missing, expired, invalid or has the wrong scope.
    """
    if not token:
        raise ValueError("JWT token is required.")

    try:
        payload = jwt.decode(
            token,
            secret_key or settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )

    except jwt.ExpiredSignatureError as exc:
        logger.warning("JWT token has expired.")
        raise ValueError("JWT token has expired.") from exc

    except jwt.InvalidAudienceError as exc:
        logger.warning("Invalid audience in JWT token.")
        raise ValueError("Invalid audience in JWT token.") from exc

    except jwt.InvalidIssuerError as exc:
        logger.warning("Invalid issuer in JWT token.")
        raise ValueError("Invalid issuer in JWT token.") from exc

    except jwt.InvalidTokenError as exc:
        logger.warning(f"Invalid JWT token: {exc}")
        raise ValueError(f"Invalid JWT token: {exc}") from exc

    if payload.get("scope") != scope:
        raise ValueError(f"JWT token is not a '{scope}' token.")
    return payload


def get_current_user(
    access_token: Optional[str] = Cookie(None),
    authorization: Optional[str] = Header(None),
) -> Dict[str, Any]:
    """
    Retrieve and verify the access token from cookie or Authorization header.

    Priority:
        1. Cookie: 'access_token'
        2. Header: 'Authorization: Bearer <token>'

    Returns:
        dict: Decoded JWT payload (uid, rid)

    Raises:
        HTTPException 401: If token is missing or invalid.
    """
    token = access_token

    if not token and authorization:
        if authorization.startswith("Bearer "):
            token = authorization[7:]
        else:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid Authorization header format.",
            )

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication token not provided.",
        )

    try:
        return verify_jwt_token(token=token, scope=ACCESS_SCOPE)
    except ValueError as ve:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail=str(ve)
        ) from ve
