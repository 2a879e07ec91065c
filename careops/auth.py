import logging
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .database import get_db
from .models import User
from .security_utils import verify_jwt_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def resolve_user_from_token(token: str, db: Session) -> User:
    """Decode a bearer token and load the active user it belongs to"""
    payload = verify_jwt_token(token)
    if not payload or not payload.get("userId"):
        raise HTTPException(status_code=401, detail="Invalid token")

    user = db.query(User).filter(User.id == payload["userId"]).first()
    if not user:
        raise HTTPException(status_code=401, detail="User not found")

    if user.status != "ACTIVE":
        logger.warning(f"Inactive user {user.id} attempted to authenticate")
        raise HTTPException(status_code=401, detail="User account is not active")

    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Authenticate the request and return the current user"""
    if not credentials:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return resolve_user_from_token(credentials.credentials, db)


async def require_owner(current_user: User = Depends(get_current_user)) -> User:
    """Only workspace owners may pass"""
    if current_user.role != "OWNER":
        raise HTTPException(status_code=403, detail="Access denied. Owner role required.")
    return current_user


def require_permission(permission: str):
    """
    Build a dependency that checks a staff permission flag.
    Owners have every permission.
    """

    async def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role == "OWNER":
            return current_user

        if not (current_user.permissions or {}).get(permission):
            raise HTTPException(
                status_code=403, detail=f"Access denied. Permission required: {permission}"
            )
        return current_user

    return checker
