"""
API Module - Client for the ResearchConnect REST API.
=====================================================

- client: ResearchConnectClient (requests + tenacity)
- auth: token decoding, token persistence and session role checks
- errors: typed exception hierarchy for API and form failures
"""

from researchconnect.api.auth import AuthSession, MemoryTokenStore, TokenStore, decode_claims
from researchconnect.api.client import ResearchConnectClient, get_client
from researchconnect.api.errors import (
    ApiConnectionError,
    ApiError,
    AuthenticationError,
    ConflictError,
    EmailNotVerifiedError,
    FormValidationError,
    InvalidResponseError,
    NotFoundError,
    PermissionDeniedError,
    ResearchConnectError,
    SessionExpiredError,
    parse_form,
)

__all__ = [
    # Client
    "ResearchConnectClient",
    "get_client",
    # Auth
    "AuthSession",
    "MemoryTokenStore",
    "TokenStore",
    "decode_claims",
    # Errors
    "ApiConnectionError",
    "ApiError",
    "AuthenticationError",
    "ConflictError",
    "EmailNotVerifiedError",
    "FormValidationError",
    "InvalidResponseError",
    "NotFoundError",
    "PermissionDeniedError",
    "ResearchConnectError",
    "SessionExpiredError",
    "parse_form",
]
