"""JWT token payload and auth request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from models.tenant import TenantResponse
from models.user import UserResponse


class TokenPayload(BaseModel):
    """JWT token payload structure."""

    sub: str  # user_id (standard JWT claim)
    tenant_id: str | None  # None until the account belongs to a tenant
    role: str  # Role in the tenant
    exp: datetime  # Expiration time (standard JWT claim)


class RegisterRequest(BaseModel):
    """Self-registration form."""

    email: EmailStr
    password: str = Field(min_length=6)
    name: str = Field(min_length=1, max_length=255)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.lower()


class LoginRequest(BaseModel):
    """Email and password sign in."""

    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.lower()


class TokenResponse(BaseModel):
    """Access token plus the signed-in account."""

    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class ProfileResponse(BaseModel):
    """The signed-in account and its organization, if any."""

    user: UserResponse
    tenant: TenantResponse | None = None
