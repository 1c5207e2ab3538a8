"""
Account Forms - Registration, login, password reset and email verification.
===========================================================================

Each form is a pydantic model; validate user input with
``parse_form(Model, data)`` to get a ``FormValidationError`` keyed by field.
``login_with_redirect`` drives the login flow, including the detour to
email verification for unverified accounts.
"""

import re
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from researchconnect.api.auth import AuthSession
from researchconnect.api.client import ResearchConnectClient
from researchconnect.api.errors import EmailNotVerifiedError, ResearchConnectError
from researchconnect.shared.logging import get_logger
from researchconnect.shared.schemas import TokenClaims, UserType

logger = get_logger(__name__)

CODE_LENGTH = 6
VERIFY_EMAIL_PAGE = "verify_email"


# ─────────────────────────────────────────────────────────────────────────────
# Forms
# ─────────────────────────────────────────────────────────────────────────────


class RegisterForm(BaseModel):
    """Sign-up form."""

    name: str = Field(..., description="Full name")
    email: EmailStr
    password: str
    confirm_password: str
    type: UserType = Field(..., description="stu or fac")

    model_config = {"use_enum_values": True}

    @field_validator("name")
    @classmethod
    def name_length(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters.")
        return v

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters.")
        return v

    @model_validator(mode="after")
    def passwords_match(self) -> "RegisterForm":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match.")
        return self


class LoginForm(BaseModel):
    """Log-in form."""

    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters long.")
        return v


class ForgotPasswordForm(BaseModel):
    email: EmailStr


class ResetPasswordForm(BaseModel):
    """New password chosen from a reset link."""

    token: str
    password: str
    confirm_password: str

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters long.")
        return v

    @model_validator(mode="after")
    def passwords_match(self) -> "ResetPasswordForm":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match.")
        return self


class VerificationCode(BaseModel):
    """The 6-digit code emailed after sign-up."""

    code: str

    @field_validator("code")
    @classmethod
    def six_digits(cls, v: str) -> str:
        v = v.strip()
        if not re.fullmatch(r"\d{6}", v):
            raise ValueError("Please enter the complete 6-digit code.")
        return v

    @staticmethod
    def from_paste(text: str) -> str:
        """
        Keep only the digits of pasted text, at most six of them.

        Example:
            >>> VerificationCode.from_paste("Your code: 123-456 (valid 10 min)")
            '123456'
        """
        return re.sub(r"\D", "", text or "")[:CODE_LENGTH]


# ─────────────────────────────────────────────────────────────────────────────
# Login Flow
# ─────────────────────────────────────────────────────────────────────────────


@dataclass
class LoginResult:
    """Where the UI goes after a login attempt."""

    page: str
    user: Optional[TokenClaims] = None
    email: str = ""
    message: str = ""


def login_redirect(error: ResearchConnectError) -> Optional[str]:
    """Page a failed login should route to, or None to stay on the form."""
    if isinstance(error, EmailNotVerifiedError):
        return VERIFY_EMAIL_PAGE
    return None


def login_with_redirect(client: ResearchConnectClient, form: LoginForm) -> LoginResult:
    """
    Log in and decide the landing page.

    An unverified account gets a fresh verification email and is routed to
    the verification page. Any other error propagates.
    """
    try:
        user = client.login(form.email, form.password)
    except EmailNotVerifiedError:
        message = "A new verification link has been sent to your email."
        try:
            client.resend_verification(form.email)
        except ResearchConnectError as resend_error:
            logger.warning(f"Could not resend verification to {form.email}: {resend_error}")
            message = "Please verify your email before logging in."
        return LoginResult(page=VERIFY_EMAIL_PAGE, email=form.email, message=message)

    return LoginResult(page=AuthSession.dashboard_for(user.type), user=user, email=user.email)
