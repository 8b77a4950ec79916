"""Pydantic schemas for `User` domain objects."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from blog_api.models.user import UserStatus


class UserSummary(BaseModel):
    id: int
    username: str
    full_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class UserCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=1)
    full_name: Optional[str] = Field(None, max_length=100)
    avatar_url: Optional[str] = Field(None, max_length=255)
    status: Optional[UserStatus] = None
    roles: Optional[List[str]] = None

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "username": "jdoe",
            "email": "jdoe@example.com",
            "password": "StrongPass!234",
            "full_name": "Jane Doe",
            "roles": ["editor"],
        }
    })


class UserUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=1, max_length=50)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=1)
    full_name: Optional[str] = Field(None, max_length=100)
    avatar_url: Optional[str] = Field(None, max_length=255)
    status: Optional[UserStatus] = None
    roles: Optional[List[str]] = None


class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    status: UserStatus
    roles: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "id": 1,
            "username": "jdoe",
            "email": "jdoe@example.com",
            "full_name": "Jane Doe",
            "avatar_url": None,
            "status": "active",
            "roles": ["editor"],
            "created_at": "2025-01-01T10:00:00Z",
            "updated_at": "2025-01-02T10:00:00Z",
        }
    })

    @classmethod
    def from_user(cls, user) -> "UserResponse":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            full_name=user.full_name,
            avatar_url=user.avatar_url,
            status=user.status,
            roles=user.role_names,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class UserDetailResponse(UserResponse):
    post_count: int = 0


class RoleAssign(BaseModel):
    role: str = Field(..., min_length=1, max_length=50, description="Role name (case-insensitive)")
