from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable

from fastapi import Depends, HTTPException, status, Request
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError

from config import JWT_ALGORITHM, JWT_SECRET_KEY

ADMIN = "ADMIN"
MANAGER = "MANAGER"
ACCOUNTANT = "ACCOUNTANT"
STOREKEEPER = "STOREKEEPER"

# Role sets guarding the mutating endpoints
ACCOUNTING_ROLES = (ADMIN, ACCOUNTANT)
SALES_ROLES = (ADMIN, MANAGER, ACCOUNTANT)
PURCHASING_ROLES = (ADMIN, MANAGER)
STOCK_ROLES = (ADMIN, MANAGER, STOREKEEPER)
CATALOG_ROLES = (ADMIN, MANAGER)


def create_access_token(data: dict, expires_delta: timedelta = timedelta(hours=8)) -> str:
    to_encode = data.copy()
    to_encode["exp"] = datetime.now(timezone.utc) + expires_delta
    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def get_current_user(request: Request) -> Dict[str, Any]:
    """
    FastAPI dependency to validate the bearer JWT from the Authorization header.

    Usage:
        @router.get("/secure-data")
        def secure_endpoint(user: dict = Depends(get_current_user)):
            ...
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header is missing",
        )

    # The token is expected to be in the format "Bearer <token>"
    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
        )

    try:
        return jwt.decode(parts[1], JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired"
        )
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Token validation failed: {e}"
        )


def get_user_identifier(user: Dict[str, Any]) -> str:
    """The string stored as user_id/created_by on every record."""
    return user.get("sub") or user.get("username") or "unknown"


def require_role(roles: Iterable[str]):
    """Dependency factory: the caller's token must carry one of the given roles."""
    allowed = set(roles)

    def checker(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        user_roles = user.get("roles") or [user.get("role")]
        if not allowed.intersection(r for r in user_roles if r):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action",
            )
        return user

    return checker
