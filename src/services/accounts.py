"""Registration and credential checks against the identity store."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.exceptions import ValidationError
from src.domain.validation import validate_contact
from src.infrastructure.models import UserModel
from src.infrastructure.repositories import UserRepository
from src.infrastructure.security import (
    MAX_PASSWORD_BYTES,
    hash_password,
    password_too_long,
    verify_password,
)

logger = logging.getLogger(__name__)


async def register_user(
    session: AsyncSession,
    *,
    fullname: str,
    email: str,
    password: str,
    phone: str,
) -> UserModel:
    validate_contact(fullname, phone, email)
    if not password:
        raise ValidationError(
            "Password is required",
            errors=[{"field": "password", "message": "Password is required"}],
        )
    if password_too_long(password):
        raise ValidationError(
            "Password is too long",
            errors=[
                {
                    "field": "password",
                    "message": f"must be at most {MAX_PASSWORD_BYTES} bytes",
                }
            ],
        )

    repo = UserRepository(session)
    if await repo.get_by_email(email):
        raise ValidationError("User already exists")

    user = await repo.create(
        UserModel(
            fullname=fullname.strip(),
            email=email,
            password_hash=hash_password(password),
            phone=phone,
        )
    )
    await session.commit()
    logger.info("Registered user %s", user.id)
    return user


async def authenticate(session: AsyncSession, email: str, password: str) -> UserModel:
    """Return the user for valid credentials; the same error for any mismatch."""
    user = await UserRepository(session).get_by_email(email)
    if user is None or not verify_password(password, user.password_hash):
        raise ValidationError("Invalid credentials")
    return user


async def find_user_by_id(session: AsyncSession, user_id: int) -> Optional[UserModel]:
    return await UserRepository(session).get_by_id(user_id)
