"""
Tests for the Accounts Module.
==============================

Tests for:
- Registration, login, reset and verification forms
- Login flow with the email verification detour
- Profile completion and skill editing
"""

from unittest.mock import Mock

import pytest


# ─────────────────────────────────────────────────────────────────────────────
# Form Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestRegisterForm:
    """Tests for the sign-up form."""

    def _data(self, **overrides):
        data = {
            "name": " Ada Lovelace ",
            "email": "ada@uni.edu",
            "password": "analytical1",
            "confirm_password": "analytical1",
            "type": "stu",
        }
        data.update(overrides)
        return data

    def test_valid(self):
        """Test that a complete sign-up form validates."""
        from researchconnect.accounts.forms import RegisterForm
        from researchconnect.api.errors import parse_form

        form = parse_form(RegisterForm, self._data())

        assert form.name == "Ada Lovelace"
        assert form.type == "stu"

    @pytest.mark.parametrize(
        "overrides,field,message",
        [
            ({"name": "A"}, "name", "Name must be at least 2 characters."),
            ({"password": "short", "confirm_password": "short"}, "password",
             "Password must be at least 8 characters."),
            ({"type": "admin"}, "type", None),
            ({"email": "not-an-email"}, "email", None),
        ],
    )
    def test_field_errors(self, overrides, field, message):
        """Test the message reported for each invalid sign-up field."""
        from researchconnect.accounts.forms import RegisterForm
        from researchconnect.api.errors import FormValidationError, parse_form

        with pytest.raises(FormValidationError) as exc_info:
            parse_form(RegisterForm, self._data(**overrides))

        assert field in exc_info.value.errors
        if message:
            assert exc_info.value.errors[field] == message

    def test_passwords_must_match(self):
        """Test that mismatched passwords are rejected."""
        from researchconnect.accounts.forms import RegisterForm
        from researchconnect.api.errors import FormValidationError, parse_form

        with pytest.raises(FormValidationError) as exc_info:
            parse_form(RegisterForm, self._data(confirm_password="different1"))

        assert "Passwords do not match." in exc_info.value.errors.values()


class TestOtherForms:
    """Tests for login, reset and verification forms."""

    def test_login_password_length(self):
        """Test that login requires an eight character password."""
        from researchconnect.accounts.forms import LoginForm
        from researchconnect.api.errors import FormValidationError, parse_form

        with pytest.raises(FormValidationError) as exc_info:
            parse_form(LoginForm, {"email": "ada@uni.edu", "password": "1234567"})

        assert exc_info.value.errors["password"] == "Password must be at least 8 characters long."

    def test_reset_password_allows_six_characters(self):
        """Test that a reset password may have six characters."""
        from researchconnect.accounts.forms import ResetPasswordForm
        from researchconnect.api.errors import FormValidationError, parse_form

        form = parse_form(
            ResetPasswordForm, {"token": "t", "password": "abcdef", "confirm_password": "abcdef"}
        )
        assert form.password == "abcdef"

        with pytest.raises(FormValidationError):
            parse_form(ResetPasswordForm, {"token": "t", "password": "abcde", "confirm_password": "abcde"})

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("123456", "123456"),
            ("Your code: 123-456 (valid 10 min)", "123456"),
            ("12345678", "123456"),
            ("abc", ""),
            ("", ""),
        ],
    )
    def test_code_from_paste(self, text, expected):
        """Test extracting a verification code from pasted text."""
        from researchconnect.accounts.forms import VerificationCode

        assert VerificationCode.from_paste(text) == expected

    def test_code_requires_six_digits(self):
        """Test that an incomplete verification code is rejected."""
        from researchconnect.accounts.forms import VerificationCode
        from researchconnect.api.errors import FormValidationError, parse_form

        assert parse_form(VerificationCode, {"code": " 654321 "}).code == "654321"
        with pytest.raises(FormValidationError) as exc_info:
            parse_form(VerificationCode, {"code": "12345"})
        assert exc_info.value.errors["code"] == "Please enter the complete 6-digit code."


# ─────────────────────────────────────────────────────────────────────────────
# Login Flow Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestLoginFlow:
    """Tests for login redirects."""

    def _form(self):
        from researchconnect.accounts.forms import LoginForm

        return LoginForm(email="ada@uni.edu", password="password123")

    @pytest.mark.parametrize("role,page", [("stu", "student_dashboard"), ("fac", "professor_dashboard")])
    def test_dashboard_by_role(self, role, page):
        """Test that login lands each role on its dashboard."""
        from researchconnect.accounts.forms import login_with_redirect
        from researchconnect.shared.schemas import TokenClaims

        client = Mock()
        client.login.return_value = TokenClaims(email="ada@uni.edu", type=role)

        result = login_with_redirect(client, self._form())

        assert result.page == page
        assert result.user.type == role
        client.resend_verification.assert_not_called()

    def test_unverified_email_resends(self):
        """Test that logging in unverified resends the verification code."""
        from researchconnect.accounts.forms import login_with_redirect
        from researchconnect.api.errors import EmailNotVerifiedError

        client = Mock()
        client.login.side_effect = EmailNotVerifiedError(403, "Email not verified", {"email_verified": False})

        result = login_with_redirect(client, self._form())

        assert result.page == "verify_email"
        assert result.user is None
        assert result.email == "ada@uni.edu"
        assert "new verification link" in result.message
        client.resend_verification.assert_called_once_with("ada@uni.edu")

    def test_unverified_email_resend_failure(self):
        """Test the message shown when resending verification fails."""
        from researchconnect.accounts.forms import login_with_redirect
        from researchconnect.api.errors import ApiConnectionError, EmailNotVerifiedError

        client = Mock()
        client.login.side_effect = EmailNotVerifiedError(403, "Email not verified")
        client.resend_verification.side_effect = ApiConnectionError("down")

        result = login_with_redirect(client, self._form())

        assert result.page == "verify_email"
        assert result.message == "Please verify your email before logging in."

    def test_bad_credentials_propagate(self):
        """Test that bad credentials raise AuthenticationError."""
        from researchconnect.accounts.forms import login_with_redirect
        from researchconnect.api.errors import AuthenticationError

        client = Mock()
        client.login.side_effect = AuthenticationError(401, "Invalid credentials")

        with pytest.raises(AuthenticationError):
            login_with_redirect(client, self._form())

    def test_login_redirect(self):
        """Test the page a login result redirects to."""
        from researchconnect.accounts.forms import login_redirect
        from researchconnect.api.errors import AuthenticationError, EmailNotVerifiedError

        assert login_redirect(EmailNotVerifiedError(403, "x")) == "verify_email"
        assert login_redirect(AuthenticationError(401, "x")) is None


# ─────────────────────────────────────────────────────────────────────────────
# Profile Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestProfile:
    """Tests for profile helpers."""

    def test_completion(self):
        """Test profile completion percentages."""
        from researchconnect.accounts.profile import profile_completion
        from researchconnect.shared.schemas import StudentProfile

        assert profile_completion(None) == 0
        assert profile_completion(StudentProfile()) == 0
        assert profile_completion(StudentProfile(institution="MIT", skills=["Python"])) == 35

        full = StudentProfile(
            institution="MIT",
            degree="BSc",
            skills=["Python"],
            researchInterest="Optics",
            resumeLink="http://cv",
            workEx="Intern",
        )
        assert profile_completion(full) == 100

    def test_missing_fields(self):
        """Test which profile fields are reported as missing."""
        from researchconnect.accounts.profile import missing_fields
        from researchconnect.shared.schemas import StudentProfile

        missing = missing_fields(StudentProfile(institution="MIT", skills=["Python"]))

        assert missing == ["degree", "researchInterest", "resumeLink", "workEx"]
        assert len(missing_fields(None)) == 6

    def test_toggle_skill(self):
        """Test adding and removing a skill."""
        from researchconnect.accounts.profile import toggle_skill
        from researchconnect.shared.schemas import StudentProfile

        profile = StudentProfile(skills=["Python"])

        added = toggle_skill(profile, " Rust ")
        assert added.skills == ["Python", "Rust"]
        assert profile.skills == ["Python"]
        assert toggle_skill(added, "Python").skills == ["Rust"]
        assert toggle_skill(profile, "  ") is profile

    def test_research_interests(self):
        """Test splitting the research interest field."""
        from researchconnect.accounts.profile import research_interests
        from researchconnect.shared.schemas import StudentProfile

        profile = StudentProfile(researchInterest="Optics, Quantum computing,, ")

        assert research_interests(profile) == ["Optics", "Quantum computing"]
        assert research_interests(None) == []
