"""
Authentication Module

This module resolves the requesting user's identity for API endpoints.
Tokens are issued by an external identity provider; this service only reads
the subject claim.

Features:
- Bearer token extraction
- JWT validation (JWKS when configured)
- Subject resolution

Security:
- Signature verification against provider JWKS
- Unverified decoding only when no JWKS URL is configured
- Uniform 401 on any failure

Dependencies:
- FastAPI for security helpers
- PyJWT for tokens
- logging for tracking

Author: Timekeeper Development Team
"""

from typing import Optional
from fastapi import Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import jwt
import logging

from .. import config
from ..errors import UnauthorizedError
from .jwks import validate_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def decode_token(token: str) -> dict:
    """
    Decode a bearer token into its claims.

    Args:
        token: Raw JWT

    Returns:
        dict: Token claims

    Raises:
        jwt.InvalidTokenError: For malformed or unverifiable tokens
    """
    if config.AUTH_JWKS_URL:
        return validate_token(token)
    logger.warning("AUTH_JWKS_URL not set - decoding token without signature verification")
    return jwt.decode(token, options={"verify_signature": False})


def get_user_id_from_token(token: str) -> str:
    """
    Resolve the user subject carried by a token.

    Raises:
        UnauthorizedError: If the token is invalid or has no subject
    """
    try:
        claims = decode_token(token)
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected token: {str(e)}")
        raise UnauthorizedError("Could not validate credentials")

    user_id = claims.get("sub")
    if not user_id:
        raise UnauthorizedError("No user ID found in token")
    return user_id


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
) -> str:
    """
    Get user ID from the Authorization header.

    Args:
        credentials: HTTP auth credentials

    Returns:
        str: User subject

    Raises:
        UnauthorizedError: When no identity can be resolved
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("User must be authenticated")
    return get_user_id_from_token(credentials.credentials)
