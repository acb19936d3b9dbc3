"""
Authentication Utility - JWT identity and admin checks.

The identity provider issues the JWT; this module only verifies it and
turns its claims into a CurrentUser.

Provides:
- JWT token creation/verification
- FastAPI dependencies for authenticated and admin-only routes
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from fastapi import BackgroundTasks, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel

from prep_portal.api.deps import get_user_service, get_webhook_service
from prep_portal.core.config import get_settings
from prep_portal.core.errors import AuthorizationError
from prep_portal.services.user_service import UserService
from prep_portal.services.webhook_service import WebhookService

# Bearer token extractor; missing tokens are reported as 401 below
bearer_scheme = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    id: str
    email: str
    username: str
    is_admin: bool = False

    def as_submitter(self) -> dict:
        return {"name": self.username, "email": self.email}


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


async def get_current_user(
    background_tasks: BackgroundTasks,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    users: UserService = Depends(get_user_service),
    webhooks: WebhookService = Depends(get_webhook_service),
) -> CurrentUser:
    """
    FastAPI dependency - Get current authenticated user.

    First sight of a user creates their record and schedules the welcome
    webhook.
    """
    if credentials is None:
        raise AuthorizationError("You must log in!", status_code=401)

    payload = decode_token(credentials.credentials)
    if not payload or not payload.get("sub"):
        raise AuthorizationError("Invalid or expired token", status_code=401)

    email = payload.get("email") or ""
    username = payload.get("username") or email.split("@")[0]
    user, created = users.ensure(str(payload["sub"]), email, username)
    if created:
        background_tasks.add_task(webhooks.send_welcome, email, username)

    return CurrentUser(id=user["userId"], email=email, username=username, is_admin=users.is_admin(user))


async def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Dependency - Admin only."""
    if not user.is_admin:
        raise AuthorizationError("Access denied. Admin only.", status_code=403)
    return user
