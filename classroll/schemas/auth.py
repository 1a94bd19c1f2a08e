"""Auth request/response schemas."""

from typing import Literal

from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class AccountInfo(BaseModel):
    id: str
    email: str
    name: str
    role: str
    type: Literal["user", "teacher"]


class TokenResponse(BaseModel):
    token: str
    user: AccountInfo


class MessageResponse(BaseModel):
    message: str


class PrincipalResponse(BaseModel):
    id: str
    email: str
    role: str
    type: str
