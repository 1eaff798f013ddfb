"""JWT bearer guard for protected routes.

Tokens are issued by the identity service; this module only verifies them.
"""

import os
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from api.dependencies import get_user_repo
from api.models import UserResponse
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

# JWT Configuration
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
if not JWT_SECRET_KEY:
    raise ValueError(
        "JWT_SECRET_KEY environment variable is required. "
        "Generate a secure key with: openssl rand -hex 32"
    )
JWT_ALGORITHM = "HS256"
JWT_EXPIRATION_DAYS = 7

security = HTTPBearer(auto_error=False)


def create_access_token(user_id: str, expires_in: timedelta = timedelta(days=JWT_EXPIRATION_DAYS)) -> str:
    """Create a signed access token for user_id (used by tooling and tests)."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "exp": now + expires_in,
        "iat": now,
    }
    return jwt.encode(payload, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def verify_token(token: str) -> Optional[str]:
    """Verify JWT token and extract user_id."""
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.debug(f"JWT verification failed: {e}")
        return None
    return payload.get("sub")


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_token_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """Return the user id carried by the bearer token. Raises 401 if missing or invalid."""
    if not credentials:
        raise _unauthorized("Not authenticated")

    user_id = verify_token(credentials.credentials)
    if not user_id:
        raise _unauthorized("Invalid authentication credentials")
    return user_id


def get_current_user_required(
    user_id: str = Depends(get_token_user_id),
    user_repo: UserRepository = Depends(get_user_repo),
) -> UserResponse:
    """Get current authenticated user (required).

    The token is checked before the repository is resolved, so a request
    without valid credentials is a 401 even while the store is down.
    StoreUnavailableError propagates to the route.
    """
    user = user_repo.get_by_id(user_id)
    if not user:
        raise _unauthorized("User not found")

    return UserResponse.from_domain(user)
