# fleet/dependencies.py
"""FastAPI dependencies shared by routers."""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from fleet.database import get_db
from fleet.exceptions import UnauthorizedError
from fleet.models.user import User
from fleet.services.auth_service import get_user_from_token

security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer token to a User or fail with 401."""
    if not credentials:
        raise UnauthorizedError("Not authenticated")
    user = get_user_from_token(db, credentials.credentials)
    if not user:
        raise UnauthorizedError("Could not validate credentials")
    return user
