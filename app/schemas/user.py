"""
User schemas for API request/response validation.
Field aliases match the stored document (camelCase) field names.
"""
from datetime import date
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.utils.validators import validate_birth_date, validate_password_strength


class UserRegister(BaseModel):
    """Schema for registering a new user."""

    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)
    first_name: str = Field(..., min_length=2, max_length=100, alias="firstName")
    last_name: str = Field(..., min_length=2, max_length=100, alias="lastName")
    birth_date: date = Field(..., alias="birthDate")

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return validate_password_strength(v)

    @field_validator("birth_date")
    @classmethod
    def check_birth_date(cls, v: date) -> date:
        return validate_birth_date(v)


class UserLogin(BaseModel):
    """Schema for logging in with email and password."""

    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    """Access token issued on login."""

    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(..., alias="accessToken")
    token_type: str = Field(default="bearer", alias="tokenType")
    user_id: str = Field(..., alias="userId")
    is_admin: bool = Field(default=False, alias="isAdmin")


class UserResponse(BaseModel):
    """Public user profile."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: EmailStr
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    birth_date: Optional[date] = Field(None, alias="birthDate")
    is_admin: bool = Field(default=False, alias="isAdmin")
    favorite_flats: List[str] = Field(default_factory=list, alias="favoriteFlats")


class UserListResponse(BaseModel):
    """Admin listing of users."""

    items: List[UserResponse]
    count: int
