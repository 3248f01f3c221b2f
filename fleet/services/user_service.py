# fleet/services/user_service.py
"""Operator accounts: create, look up, change password."""

from typing import Optional

from sqlalchemy.orm import Session

from fleet.config import settings
from fleet.exceptions import ConflictError, UnauthorizedError, ValidationError
from fleet.models.user import User
from fleet.services.auth_service import hash_password, verify_password
from fleet.services.transaction import unit_of_work
from fleet.utils.logger import get_logger

logger = get_logger(__name__)


def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.get(User, user_id)


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()


def _check_password_length(password: str, field: str):
    if len(password) < settings.MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters",
            details=[{"field": field, "message": "too short"}],
        )


def create_user(db: Session, username: str, password: str) -> User:
    username = (username or "").strip()
    if not username:
        raise ValidationError("Username required", details=[{"field": "username", "message": "field required"}])
    _check_password_length(password, "password")

    with unit_of_work(db, "create user"):
        if get_user_by_username(db, username):
            raise ConflictError(f"Username {username} already taken")
        user = User(username=username, password_hash=hash_password(password))
        db.add(user)

    logger.info(f"User {username} created")
    return user


def change_password(db: Session, user: User, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, user.password_hash):
        raise UnauthorizedError("Current password is incorrect")
    _check_password_length(new_password, "newPassword")

    with unit_of_work(db, "change password"):
        user.password_hash = hash_password(new_password)

    logger.info(f"Password changed for {user.username}")
