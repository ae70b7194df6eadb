"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- FastAPI dependencies for protected routes

The token is read from "Authorization: Bearer <token>" first, then from
the "token" cookie set at login.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from internhub.core.config import get_settings
from internhub.core.errors import Forbidden, Unauthorized
from internhub.services.mongo_service import UserRepository, get_user_repository

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractor (optional so the cookie can be tried next)
bearer_scheme = HTTPBearer(auto_error=False)

TOKEN_COOKIE = "token"


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    settings = get_settings()
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def public_user(doc: dict) -> dict:
    return {
        "user_id": str(doc["_id"]),
        "name": doc.get("name"),
        "email": doc.get("email"),
        "role": doc.get("role"),
    }


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    users: UserRepository = Depends(get_user_repository),
) -> dict:
    """
    FastAPI dependency - Get current authenticated user.

    Usage:
        @router.get("/protected")
        async def route(user: dict = Depends(get_current_user)):
            return user
    """
    token = credentials.credentials if credentials else request.cookies.get(TOKEN_COOKIE)
    if not token:
        raise Unauthorized("Not authorized to access this route")

    payload = decode_token(token)
    if not payload or not payload.get("sub"):
        raise Unauthorized("Not authorized to access this route")

    user = users.get_by_id(payload["sub"])
    if not user:
        raise Unauthorized("Not authorized to access this route")

    return public_user(user)


def authorize(*roles: str):
    """
    Dependency factory - Require one of the given roles.

    Usage:
        @router.post("", dependencies=[Depends(authorize("publisher", "admin"))])
    """
    async def require_role(user: dict = Depends(get_current_user)) -> dict:
        if user["role"] not in roles:
            raise Forbidden(f"User role '{user['role']}' is not authorized to access this route")
        return user

    return require_role
