"""FastAPI dependency injection helpers."""

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.exceptions import AuthenticationError, NotFoundError
from src.infrastructure.database import async_session_factory
from src.infrastructure.models import UserModel
from src.infrastructure.security import decode_access_token
from src.services.accounts import find_user_by_id
from src.services.notifications import NotificationDispatcher

bearer_scheme = HTTPBearer(auto_error=False)


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async DB session; commit on success, rollback on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_dispatcher(request: Request) -> NotificationDispatcher:
    return request.app.state.dispatcher


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> int:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("No token provided")
    return decode_access_token(credentials.credentials)


async def get_current_user(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> UserModel:
    user = await find_user_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user
