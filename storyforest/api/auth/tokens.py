"""Firebase ID token verification."""

import logging
from dataclasses import dataclass
from typing import Optional

from firebase_admin import auth

logger = logging.getLogger(__name__)


@dataclass
class AuthUser:
    """The caller identified by a verified ID token."""

    uid: str
    email: Optional[str] = None


def verify_token(token: str) -> dict | None:
    """Verify a Firebase ID token and return its claims.

    Args:
        token: The ID token string from the Authorization header

    Returns:
        Decoded claims dict if valid, None if invalid/expired/revoked
    """
    try:
        return auth.verify_id_token(token)
    except (auth.InvalidIdTokenError, auth.ExpiredIdTokenError, auth.RevokedIdTokenError) as e:
        logger.info(f"Rejected ID token: {type(e).__name__}")
        return None
    except ValueError:
        return None


def user_from_claims(claims: dict) -> AuthUser:
    return AuthUser(uid=claims.get("uid") or claims["sub"], email=claims.get("email"))
