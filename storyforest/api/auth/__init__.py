"""Authentication module for API access control."""

from .tokens import AuthUser, user_from_claims, verify_token

__all__ = ["AuthUser", "user_from_claims", "verify_token"]
