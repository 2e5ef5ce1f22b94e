"""
Core dependencies for route protection
"""

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.core.security import InvalidTokenError, PasswordHasher, TokenIssuer
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_password_hasher() -> PasswordHasher:
    return PasswordHasher()


def get_token_issuer() -> TokenIssuer:
    return TokenIssuer()


def authenticate(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    tokens: TokenIssuer = Depends(get_token_issuer)
) -> Dict[str, Any]:
    """Verify the bearer token and return its claims"""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token"
        )
    try:
        return tokens.verify(credentials.credentials)
    except InvalidTokenError as e:
        logger.info(f"Rejected token: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token"
        )


def get_current_user_id(claims: Dict[str, Any] = Depends(authenticate)) -> str:
    """Caller's user id, taken from the token subject"""
    return claims["sub"]
