# fleet/routers/auth.py
"""Operator accounts: register, login (bearer token), current user, change password."""

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional

from fleet.database import get_db
from fleet.dependencies import get_current_user, security
from fleet.exceptions import UnauthorizedError
from fleet.models.user import User
from fleet.schemas.user import LoginRequest, PasswordChange, TokenOut, UserCreate, UserOut
from fleet.services import auth_service, user_service
from fleet.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(body: UserCreate, db: Session = Depends(get_db),
             credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)):
    """
    Create an operator account.
    The very first account can be created anonymously; after that an
    authenticated operator is required.
    """
    if db.query(User.id).first() is not None:
        get_current_user(credentials, db)
    return user_service.create_user(db, body.username, body.password)


@router.post("/login", response_model=TokenOut)
def login(body: LoginRequest, db: Session = Depends(get_db)):
    user = auth_service.authenticate_user(db, body.username, body.password)
    if not user:
        logger.warning(f"Failed login for {body.username}")
        raise UnauthorizedError("Invalid username or password")
    return TokenOut(access_token=auth_service.create_access_token(user.id), user=UserOut.model_validate(user))


@router.get("/user", response_model=UserOut)
def current_user(user: User = Depends(get_current_user)):
    return user


@router.post("/change-password")
def change_password(body: PasswordChange, db: Session = Depends(get_db),
                    user: User = Depends(get_current_user)):
    user_service.change_password(db, user, body.current_password, body.new_password)
    return {"message": "Password updated successfully"}
