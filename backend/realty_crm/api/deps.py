"""
Shared API dependencies: authentication, role checks, services
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from realty_crm.core.config import settings
from realty_crm.core.exceptions import AuthenticationError, AuthorizationError
from realty_crm.core.permissions import Action, Resource, check_permission
from realty_crm.core.security import decode_access_token
from realty_crm.database import get_db
from realty_crm.models.user import User
from realty_crm.services.events import NotificationDispatcher

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/auth/admin/login",
    auto_error=False,
)


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Resolve the bearer token to an active user

    Raises:
        AuthenticationError: Missing or invalid token, or unknown user
        AuthorizationError: The account is deactivated
    """
    if not token:
        raise AuthenticationError("Not authenticated")

    payload = decode_access_token(token)
    try:
        user_id = UUID(str(payload.get("sub")))
    except ValueError:
        raise AuthenticationError("Invalid token")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise AuthenticationError("User not found")
    if not user.is_active:
        raise AuthorizationError("Inactive user")
    return user


def require_permission(resource: Resource, action: Action):
    """Dependency factory: the caller's role must be allowed the action"""

    async def dependency(current_user: User = Depends(get_current_user)) -> User:
        check_permission(current_user, resource, action)
        return current_user

    return dependency


def get_dispatcher(request: Request) -> NotificationDispatcher:
    """Dispatcher bound to the application's database"""
    return NotificationDispatcher(request.app.state.database.session_factory)
