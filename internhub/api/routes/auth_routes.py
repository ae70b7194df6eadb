"""
Authentication Routes

POST /auth/register - Register new user, returns JWT token
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
GET /auth/logout - Clear the token cookie
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from internhub.api.responses import success
from internhub.core.auth import (
    TOKEN_COOKIE, create_access_token, get_current_user, hash_password, verify_password
)
from internhub.core.config import get_settings
from internhub.core.errors import ErrorResponse, Unauthorized
from internhub.schemas.schemas import LoginRequest, RegisterRequest
from internhub.services.mongo_service import UserRepository, get_user_repository

router = APIRouter(prefix="/auth", tags=["Authentication"])


def token_response(user: dict, status_code: int = 200) -> JSONResponse:
    """Issue a token for the user, in the body and as an httponly cookie."""
    settings = get_settings()
    token = create_access_token(data={"sub": str(user["_id"]), "role": user["role"]})
    response = JSONResponse({"success": True, "token": token}, status_code=status_code)
    response.set_cookie(
        TOKEN_COOKIE,
        token,
        max_age=settings.jwt_cookie_expire_days * 24 * 60 * 60,
        httponly=True,
        secure=not settings.is_development,
        samesite="lax",
    )
    return response


@router.post("/register", status_code=201)
async def register(request: RegisterRequest, users: UserRepository = Depends(get_user_repository)):
    """
    Register a new user account.

    Publishers can create companies and post internships.
    """
    if users.get_by_email(request.email):
        raise ErrorResponse("Email already registered", 400)

    user = users.create(
        name=request.name,
        email=request.email,
        password_hash=hash_password(request.password),
        role=request.role.value,
    )
    return token_response(user, status_code=201)


@router.post("/login")
async def login(request: LoginRequest, users: UserRepository = Depends(get_user_repository)):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    user = users.get_by_email(request.email)
    if not user or not verify_password(request.password, user["password"]):
        raise Unauthorized("Invalid email or password")
    return token_response(user)


@router.get("/me")
async def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's info."""
    return success(user)


@router.get("/logout")
async def logout():
    response = JSONResponse(success({}))
    response.delete_cookie(TOKEN_COOKIE)
    return response
