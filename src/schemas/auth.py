"""Pydantic schemas for signup/signin endpoints."""
from typing import Literal

from pydantic import BaseModel, EmailStr, Field, field_validator

from schemas.user import UserResponse

MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_LENGTH = 128


class SigninRequest(BaseModel):
    """Credentials submitted to signin."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=MAX_PASSWORD_LENGTH)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Emails are compared case-insensitively, so store them lowercased."""
        return v.strip().lower()


class SignupRequest(SigninRequest):
    """Credentials for a new account. The password length policy applies only here."""

    password: str = Field(
        ...,
        min_length=MIN_PASSWORD_LENGTH,
        max_length=MAX_PASSWORD_LENGTH,
    )


class TokenResponse(BaseModel):
    """
    Response containing a freshly issued access token.

    Send it back as `Authorization: Bearer <access_token>`.
    """

    access_token: str
    token_type: Literal["bearer"] = "bearer"
    expires_in: int = Field(description="Token lifetime in seconds")


class SignupResponse(UserResponse):
    """The created user plus an access token, so clients need not sign in again."""

    access_token: str
    token_type: Literal["bearer"] = "bearer"
