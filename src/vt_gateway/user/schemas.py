"""Pydantic request/response schemas for vt_gateway.

All responses are wrapped in ApiResponse at the router layer.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from src.vt_gateway.auth.password import MAX_PASSWORD_BYTES
from src.vt_gateway.auth.session import Session


def _check_password_bytes(v: str) -> str:
    if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=MAX_PASSWORD_BYTES)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        return _check_password_bytes(v)


class SessionInfo(BaseModel):
    user_id: str
    email: str
    name: str
    role: str
    status: str
    home: str

    @classmethod
    def from_session(cls, session: Session) -> "SessionInfo":
        return cls(
            user_id=session.user_id,
            email=session.email,
            name=session.name,
            role=session.role.value,
            status=session.status.value,
            home=session.home,
        )


class LoginResponse(BaseModel):
    user: SessionInfo
    expires_in: int
    redirect_to: str


class LoginPageState(BaseModel):
    callback_url: str | None = None
    error: str | None = None
    message: str | None = None


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetTokenStatus(BaseModel):
    valid: bool
    email: str


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=8, max_length=MAX_PASSWORD_BYTES)
    confirm_password: str = Field(..., min_length=1)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        """Multibyte characters count by their UTF-8 length."""
        return _check_password_bytes(v)

    @model_validator(mode="after")
    def passwords_match(self) -> "ResetPasswordRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self
