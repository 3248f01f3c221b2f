# fleet/schemas/user.py
"""Operator account, login and token models. Password hashes never leave the server."""

from pydantic import Field

from fleet.schemas.common import CamelModel


class UserCreate(CamelModel):
    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1)


class LoginRequest(CamelModel):
    username: str
    password: str


class PasswordChange(CamelModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=1)


class UserOut(CamelModel):
    id: str
    username: str

    class Config:
        from_attributes = True


class TokenOut(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut
