"""
Account endpoints
=================

POST /api/register -- create an account, returns a token
POST /api/login    -- exchange credentials for a token
GET  /api/profile  -- the authenticated user's profile
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_current_user, get_db
from src.api.middleware import limiter
from src.api.schemas import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from src.config import settings
from src.infrastructure.models import UserModel
from src.infrastructure.security import create_access_token
from src.services import accounts

router = APIRouter(tags=["auth"])


@router.post(
    "/register",
    status_code=201,
    response_model=TokenResponse,
    response_model_exclude_none=True,
    summary="Register a new user",
)
@limiter.limit(settings.rate_limit)
async def register(
    request: Request,
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db),
):
    user = await accounts.register_user(
        db,
        fullname=body.fullname,
        email=body.email,
        password=body.password,
        phone=body.phone,
    )
    return TokenResponse(token=create_access_token(user.id), redirect="/login")


@router.post(
    "/login",
    response_model=TokenResponse,
    response_model_exclude_none=True,
    summary="Log in",
)
@limiter.limit(settings.rate_limit)
async def login(
    request: Request,
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    user = await accounts.authenticate(db, body.email, body.password)
    return TokenResponse(token=create_access_token(user.id))


@router.get("/profile", response_model=UserResponse, summary="Current user profile")
@limiter.limit(settings.rate_limit)
async def profile(request: Request, user: UserModel = Depends(get_current_user)):
    return user
