"""
Auth Module - Bearer token persistence and session state.
=========================================================

The API issues a signed JWT at login. The client never verifies the
signature (the server does); it only reads the claims to know who is
logged in, which role they have and when the token expires.

- TokenStore: file-backed token persistence between runs
- AuthSession: current user, role gating and landing pages
"""

import time
from pathlib import Path
from typing import Optional

from jose import JWTError, jwt
from pydantic import ValidationError

from researchconnect.api.errors import PermissionDeniedError, SessionExpiredError
from researchconnect.shared.config import get_settings
from researchconnect.shared.logging import get_logger
from researchconnect.shared.schemas import TokenClaims, UserType
from researchconnect.shared.utils import load_json, save_json

logger = get_logger(__name__)

DASHBOARDS = {
    UserType.STUDENT.value: "student_dashboard",
    UserType.FACULTY.value: "professor_dashboard",
}


# ─────────────────────────────────────────────────────────────────────────────
# Token Helpers
# ─────────────────────────────────────────────────────────────────────────────


def decode_claims(token: str) -> TokenClaims:
    """
    Decode a JWT's claims without verifying its signature.

    Raises:
        SessionExpiredError: If the token is malformed
    """
    try:
        claims = jwt.get_unverified_claims(token)
        return TokenClaims.model_validate(claims)
    except (JWTError, ValidationError, AttributeError) as e:
        raise SessionExpiredError(f"Malformed session token: {e}") from e


def is_token_expired(
    token: Optional[str],
    buffer_seconds: int = 30,
    now: Optional[float] = None,
) -> bool:
    """
    Check whether a token is missing, malformed or about to expire.

    Args:
        token: Bearer token (may be None)
        buffer_seconds: Treat tokens expiring within this window as expired
        now: Current unix time (defaults to ``time.time()``)

    Returns:
        True when the token should not be used as is
    """
    if not token:
        return True
    try:
        claims = decode_claims(token)
    except SessionExpiredError:
        return True
    if claims.exp is None:
        return False

    current = time.time() if now is None else now
    return claims.exp < current + buffer_seconds


# ─────────────────────────────────────────────────────────────────────────────
# Token Store
# ─────────────────────────────────────────────────────────────────────────────


class TokenStore:
    """
    Persists the bearer token in a small JSON file.

    Example:
        >>> store = TokenStore(Path("data/session.json"))
        >>> store.set("eyJ...")
        >>> store.get()
        'eyJ...'
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else get_settings().token_file
        self._token: Optional[str] = None
        self._loaded = False

    def get(self) -> Optional[str]:
        """Return the stored token, or None."""
        if not self._loaded:
            self._token = self._read()
            self._loaded = True
        return self._token

    def set(self, token: str) -> None:
        """Store a new token."""
        self._token = token
        self._loaded = True
        save_json(self.path, {"token": token})
        logger.debug(f"Session token saved to {self.path}")

    def clear(self) -> None:
        """Forget the token."""
        self._token = None
        self._loaded = True
        if self.path.exists():
            self.path.unlink()
            logger.debug(f"Session token removed from {self.path}")

    def _read(self) -> Optional[str]:
        if not self.path.exists():
            return None
        try:
            data = load_json(self.path)
        except ValueError as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return None
        token = data.get("token") if isinstance(data, dict) else None
        return token or None


class MemoryTokenStore(TokenStore):
    """Token store that keeps the token in memory only (one per UI session)."""

    def __init__(self, token: Optional[str] = None):
        self.path = Path()
        self._token = token
        self._loaded = True

    def set(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


# ─────────────────────────────────────────────────────────────────────────────
# Session
# ─────────────────────────────────────────────────────────────────────────────


class AuthSession:
    """Who is logged in, derived from the stored token."""

    def __init__(self, store: TokenStore, buffer_seconds: int = 0):
        self.store = store
        self.buffer_seconds = buffer_seconds

    def current_user(self, now: Optional[float] = None) -> Optional[TokenClaims]:
        """
        Return the claims of the logged-in user.

        An expired or malformed token is cleared and None is returned.
        """
        token = self.store.get()
        if not token:
            return None
        if is_token_expired(token, self.buffer_seconds, now=now):
            logger.info("Stored session token expired, clearing it")
            self.store.clear()
            return None
        return decode_claims(token)

    def require_role(self, role: str, now: Optional[float] = None) -> TokenClaims:
        """
        Return the current user if they have ``role``.

        Raises:
            SessionExpiredError: No valid session
            PermissionDeniedError: Logged in with another role
        """
        user = self.current_user(now=now)
        if user is None:
            raise SessionExpiredError("Please log in to continue")
        if user.type != role:
            raise PermissionDeniedError(403, f"This page requires role '{role}'")
        return user

    @staticmethod
    def dashboard_for(role: str) -> str:
        """Landing page for a role; unknown roles land on the login page."""
        return DASHBOARDS.get(role, "login")
