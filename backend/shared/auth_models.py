"""
Authentication request/response models.
"""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from shared.security import check_password_length


class RegisterRequest(BaseModel):
    """User registration request"""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str | None) -> str | None:
        return check_password_length(value)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserProfile(BaseModel):
    """User information response"""

    id: str
    name: str
    email: str
    role: str
    permissions: list[str] = []
    avatar: str | None = None
    last_login_at: datetime | None = None
    created_at: datetime | None = None


class AuthResponse(BaseModel):
    """Login/registration response"""

    user: UserProfile
    access_token: str
    token_type: str = "bearer"


class AuthenticatedUser(BaseModel):
    """Identity resolved from a bearer token."""

    user_id: str
    name: str
    email: str | None = None
    role: str = "user"
