"""
Password hashing, session tokens and one-time codes
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt

from app.config import settings
from app.modules.users.schemas import User

logger = logging.getLogger(__name__)


class InvalidTokenError(Exception):
    pass


class PasswordHasher:
    def __init__(self, rounds: Optional[int] = None):
        self.rounds = rounds or settings.password_hash_rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, hashed: Optional[str]) -> bool:
        """A missing or malformed hash never matches."""
        if not hashed:
            return False
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password hash is not a valid bcrypt hash")
            return False


class TokenIssuer:
    """Signs and verifies session JWTs. The subject is the user id."""

    def __init__(
        self,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        expire_days: Optional[int] = None
    ):
        self.secret = secret or settings.jwt_secret
        self.algorithm = algorithm or settings.jwt_algorithm
        self.expire_days = expire_days or settings.token_expire_days

    def issue(self, user: User, now: Optional[datetime] = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "firstname": user.firstname,
            "lastname": user.lastname,
            "avatarUrl": user.avatar_url,
            "email": user.email,
            "sub": user.id,
            "iat": issued_at,
            "exp": issued_at + timedelta(days=self.expire_days),
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp"]}
            )
        except jwt.PyJWTError as e:
            raise InvalidTokenError(str(e)) from e


def generate_numeric_code(length: Optional[int] = None) -> str:
    length = length or settings.recovery_code_length
    return "".join(secrets.choice("0123456789") for _ in range(length))
