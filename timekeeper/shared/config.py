"""
Configuration Module

This module manages application configuration settings and environment
variables for the database, identity provider and HTTP server.

Features:
- Environment loading
- Database settings
- Identity provider settings
- Server config
- Timer tuning

Dependencies:
- os for env
- dotenv for loading

Author: Timekeeper Development Team
"""

import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# MongoDB Configuration
MONGODB_URL = os.getenv("MONGODB_URL", "mongodb://localhost:27017")
DB_NAME = os.getenv("DB_NAME", "Timekeeper")
MONGO_TLS = _flag("MONGO_TLS")
MONGO_SERVER_SELECTION_TIMEOUT_MS = int(os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "10000"))
MONGO_MAX_POOL_SIZE = int(os.getenv("MONGO_MAX_POOL_SIZE", "100"))

# Identity Provider Configuration
# Leave AUTH_JWKS_URL unset to accept unverified tokens (local development only)
AUTH_JWKS_URL = os.getenv("AUTH_JWKS_URL")
AUTH_ISSUER = os.getenv("AUTH_ISSUER")
AUTH_AUDIENCE = os.getenv("AUTH_AUDIENCE")
JWKS_CACHE_SECONDS = int(os.getenv("JWKS_CACHE_SECONDS", "3600"))

# Server Configuration
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
PORT = int(os.getenv("PORT", "8000"))

# Timer Configuration
TIMER_START_ATTEMPTS = int(os.getenv("TIMER_START_ATTEMPTS", "5"))
