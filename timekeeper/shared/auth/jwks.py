"""
JWKS Token Validation Module

This module validates JWTs issued by the external identity provider.
It implements JWK lookup, caching, and token verification.

Features:
- JWK caching and auto-refresh
- Token validation
- Signature verification
- Claims validation
- Error handling
"""

import jwt
import requests
import json
import time
from typing import Dict, Optional
import logging

from .. import config

# Configure logging
logger = logging.getLogger(__name__)

# Cache for JWKs
jwks_cache = {
    'keys': None,
    'last_updated': 0,
    'cache_duration': config.JWKS_CACHE_SECONDS
}


def get_jwks() -> Dict:
    """
    Fetch and cache JWKs from the identity provider.

    Returns:
        Dict: JWK set

    Notes:
        - Caches JWKs for JWKS_CACHE_SECONDS
        - Auto-refreshes when expired
        - Falls back to expired cache when the provider is unreachable
    """
    current_time = time.time()

    # Return cached keys if still valid
    if (jwks_cache['keys'] is not None and
            current_time - jwks_cache['last_updated'] < jwks_cache['cache_duration']):
        return jwks_cache['keys']

    try:
        logger.info("Fetching fresh JWKs from identity provider")
        response = requests.get(config.AUTH_JWKS_URL, timeout=10)
        response.raise_for_status()
        jwks = response.json()

        jwks_cache['keys'] = jwks
        jwks_cache['last_updated'] = current_time

        return jwks
    except requests.RequestException as e:
        logger.error(f"Error fetching JWKs: {str(e)}")
        if jwks_cache['keys'] is not None:
            logger.warning("Using expired JWKs from cache")
            return jwks_cache['keys']
        raise


def get_public_key(kid: str) -> Optional[Dict]:
    """
    Get public key for token verification.

    Args:
        kid: Key ID from token header

    Returns:
        Dict: Public key if found
    """
    jwks = get_jwks()
    for key in jwks.get('keys', []):
        if key.get('kid') == kid:
            return key
    return None


def validate_token(token: str) -> Dict:
    """
    Validate and decode a provider-issued JWT.

    Args:
        token: JWT token to validate

    Returns:
        Dict: Decoded token claims

    Raises:
        jwt.InvalidTokenError: For invalid tokens

    Notes:
        - Verifies RS256 signature
        - Checks expiration
        - Verifies issuer and audience when configured
    """
    try:
        headers = jwt.get_unverified_header(token)
        if 'kid' not in headers:
            raise jwt.InvalidTokenError("Token missing kid in headers")

        public_key = get_public_key(headers['kid'])
        if not public_key:
            raise jwt.InvalidTokenError("Unable to find public key for token")

        public_key_pem = jwt.algorithms.RSAAlgorithm.from_jwk(json.dumps(public_key))

        return jwt.decode(
            token,
            key=public_key_pem,
            algorithms=['RS256'],
            options={
                'verify_signature': True,
                'verify_exp': True,
                'verify_aud': config.AUTH_AUDIENCE is not None,
                'verify_iss': config.AUTH_ISSUER is not None,
            },
            audience=config.AUTH_AUDIENCE,
            issuer=config.AUTH_ISSUER,
        )

    except jwt.ExpiredSignatureError:
        logger.warning("Token has expired")
        raise jwt.InvalidTokenError("Token has expired")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid token: {str(e)}")
        raise
    except requests.RequestException as e:
        logger.error(f"Error validating token: {str(e)}")
        raise jwt.InvalidTokenError(f"Token validation failed: {str(e)}")
