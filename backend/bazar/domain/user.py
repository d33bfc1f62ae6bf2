"""
User Domain Models

Public user profile plus the request/response contracts of the
authentication endpoints. The password hash never leaves the
repository layer.
"""
from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator

BCRYPT_MAX_BYTES = 72


def normalize_email(email: str) -> str:
    """Canonical form used for storage and lookups"""
    return email.strip().lower()


class User(BaseModel):
    """Public view of a registered user"""

    id: int = Field(..., description="User ID")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Normalized email")
    created_at: Optional[datetime] = Field(None, description="Registration timestamp")

    model_config = ConfigDict(from_attributes=True)


class UserCredentials(User):
    """User plus the stored bcrypt hash, for the auth service only"""

    password_hash: str


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(
        ...,
        min_length=6,
        max_length=BCRYPT_MAX_BYTES,
        validation_alias=AliasChoices("password", "secret"),
    )

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value

    @field_validator("password")
    @classmethod
    def fits_bcrypt(cls, value: str) -> str:
        # bcrypt ignores everything past 72 bytes
        if len(value.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValueError(f"password must be at most {BCRYPT_MAX_BYTES} bytes")
        return value


class LoginRequest(BaseModel):
    # Plain str: a malformed email must fail like any other bad login
    email: str
    password: str = Field(..., validation_alias=AliasChoices("password", "secret"))


class AuthResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: User
