"""Authentication dependencies for protected routes.

Tokens are issued by the auth service; this API only verifies them. The
``sub`` claim carries the user id and ``svc`` marks service accounts
(Airflow, operators).
"""

import logging
from dataclasses import dataclass

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from navfolio.config import settings

logger = logging.getLogger(__name__)

security = HTTPBearer()


@dataclass(frozen=True)
class Principal:
    """The authenticated caller."""

    user_id: str
    is_service_account: bool = False


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        logger.debug("Token expired")
        return None
    except jwt.InvalidTokenError as e:
        logger.debug("Invalid token: %s", e)
        return None


def get_current_principal(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Principal:
    """
    Get the authenticated caller from the bearer token.

    Usage:
        @router.get("/protected")
        def protected_route(principal: Principal = Depends(get_current_principal)):
            return {"user_id": principal.user_id}
    """
    payload = decode_access_token(credentials.credentials)

    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has no subject",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return Principal(user_id=str(user_id), is_service_account=bool(payload.get("svc", False)))


def get_current_user_id(principal: Principal = Depends(get_current_principal)) -> str:
    """Id of the authenticated user; holdings are scoped to it."""
    return principal.user_id


def require_service_account(principal: Principal = Depends(get_current_principal)) -> Principal:
    """Verify the caller is a service account."""
    if not principal.is_service_account:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="This endpoint requires service account access",
        )
    return principal
