"""
Accounts Module - Sign-up, login, verification and student profiles.
====================================================================

- forms: registration, login, password reset and verification code forms
- profile: profile completion and skill editing helpers
"""

from researchconnect.accounts.forms import (
    ForgotPasswordForm,
    LoginForm,
    LoginResult,
    RegisterForm,
    ResetPasswordForm,
    VerificationCode,
    login_redirect,
    login_with_redirect,
)
from researchconnect.accounts.profile import (
    missing_fields,
    profile_completion,
    research_interests,
    toggle_skill,
)

__all__ = [
    # Forms
    "ForgotPasswordForm",
    "LoginForm",
    "LoginResult",
    "RegisterForm",
    "ResetPasswordForm",
    "VerificationCode",
    "login_redirect",
    "login_with_redirect",
    # Profile
    "missing_fields",
    "profile_completion",
    "research_interests",
    "toggle_skill",
]
