"""
User Pydantic schemas for request/response validation
"""
from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID
from pydantic import BaseModel, EmailStr, ConfigDict, Field, field_validator

from realty_crm.models.user import UserRole, AuthProvider
from realty_crm.schemas.base import UpdateSchema


class _EmailInput(BaseModel):
    """Emails are matched case-insensitively, store them lower-cased"""

    @field_validator("email", mode="before", check_fields=False)
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class UserRegister(_EmailInput):
    """Self-service registration for end users"""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)
    phone: Optional[str] = None
    address: Optional[str] = None


class UserLogin(_EmailInput):
    """Schema for end-user login"""
    email: EmailStr
    password: str = Field(..., min_length=1)


class AdminLogin(_EmailInput):
    """Schema for staff login"""
    email: EmailStr
    password: str = Field(..., min_length=1)
    role: Literal["super_admin", "admin", "agent"]


class StaffCreate(_EmailInput):
    """Super admin creates an admin or agent account"""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)
    phone: Optional[str] = None
    address: Optional[str] = None
    role: Literal["admin", "agent"]


class UserUpdate(_EmailInput, UpdateSchema):
    """Super admin edits any account"""
    not_nullable = frozenset({"name", "email", "role", "is_active"})

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6, max_length=72)
    phone: Optional[str] = None
    address: Optional[str] = None
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None


class ProfileUpdate(UpdateSchema):
    """Schema for updating one's own profile"""
    not_nullable = frozenset({"name"})

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    phone: Optional[str] = None
    address: Optional[str] = None


class PasswordChange(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=72)


class UserStatusUpdate(BaseModel):
    is_active: bool


class UserResponse(BaseModel):
    """User schema for API responses"""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    role: UserRole
    phone: Optional[str] = None
    address: Optional[str] = None
    photo_url: Optional[str] = None
    auth_provider: AuthProvider
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime


class UserListResponse(BaseModel):
    total: int
    items: List[UserResponse]


class TokenResponse(BaseModel):
    """JWT token response"""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
