"""
Employees API — Password Hashing and Access Tokens
===================================================

What:  argon2 password hashing and HS256 JWT issuing/verification.
Who:   AccountingService (hash, verify, issue) and the `authenticate`
       dependency (decode).

Token Claims:
    sub   — account username (email)
    role  — ADMIN | USER
    iat   — issued at
    exp   — expiry, JWT_EXPIRE_MINUTES after issue (default one hour)
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from argon2 import PasswordHasher
from argon2 import exceptions as argon_exc

from employees_api.config import settings
from employees_api.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

_ph = PasswordHasher()


def hash_password(password: str) -> str:
    return _ph.hash(password)


def verify_password(password: str, stored_hash: str) -> bool:
    try:
        return _ph.verify(stored_hash, password)
    except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
        return False


def create_access_token(
    username: str,
    role: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Signs a token for `username` carrying its `role`."""
    now = datetime.now(timezone.utc)
    expires = now + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    payload = {"sub": username, "role": role, "iat": now, "exp": expires}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verifies signature and expiry and returns the claims.

    Raises:
        AuthenticationError: for expired, forged or malformed tokens, and for
            tokens missing the `sub` or `role` claim.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError(context={"reason": "expired"})
    except jwt.InvalidTokenError as e:
        logger.debug("Rejected access token: %s", e)
        raise AuthenticationError(context={"reason": str(e)})

    if not payload.get("role"):
        raise AuthenticationError(context={"reason": "missing role claim"})
    return payload
