"""Pydantic schemas for registration, login and token responses."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from blog_api.schemas.user import UserResponse


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=1)
    full_name: Optional[str] = Field(None, max_length=100)
    avatar_url: Optional[str] = Field(None, max_length=255)


class LoginRequest(BaseModel):
    identifier: str = Field(..., min_length=1, description="Username or email")
    password: str = Field(..., min_length=1)

    model_config = ConfigDict(json_schema_extra={
        "example": {"identifier": "jdoe", "password": "StrongPass!234"}
    })


class TokenResponse(BaseModel):
    token: str
    user: UserResponse


class ProfileResponse(BaseModel):
    user: UserResponse
