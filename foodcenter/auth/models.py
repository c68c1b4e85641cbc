from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class Role(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class LoginRequest(BaseModel):
    email_id: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserCreate(BaseModel):
    full_name: str = Field(..., min_length=1)
    email_id: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    phone_number: str | None = None
    password: str = Field(..., min_length=6)
    role: Role = Role.USER


class UserOut(BaseModel):
    id: str
    role: Role
    full_name: str
    email_id: str
    phone_number: str | None = None
