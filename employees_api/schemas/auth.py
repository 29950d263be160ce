"""
Employees API — Authentication Schemas
=======================================

What:  Login request/response models, roles, the in-memory account record
       and the authenticated principal.
Who:   Used by AccountingService and the /login route.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Account(BaseModel):
    """A user account. `password` holds an argon2 hash, never plain text."""

    username: str
    role: str
    password: str


class LoginData(BaseModel):
    """POST /login body."""

    email: str = Field(min_length=1, description="Account username (email address)")
    password: str = Field(min_length=1, description="Plain-text password")


class LoginUser(BaseModel):
    email: str
    role: str


class LoginResponse(BaseModel):
    """
    What:  Returned by POST /login on success.
    Wire:  {"accessToken": "eyJ...", "user": {"email": "...", "role": "ADMIN"}}
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    access_token: str
    user: LoginUser


class Role(str, Enum):
    ADMIN = "ADMIN"
    USER = "USER"


class Principal(BaseModel):
    """The caller identified by a verified bearer token."""

    username: str
    role: str
