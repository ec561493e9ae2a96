"""
jwt provider configuration. Values come from the environment; no secrets in this file.
"""
import os

# Provider name; resource types are registered as <PROVIDER_NAME>_<kind>
PROVIDER_NAME = "jwt"
PROVIDER_VERSION = "1.0.0"

# Resource state store (SQLite is fine for a single host)
DATABASE_URL = os.environ.get("JWT_PROVIDER_DATABASE_URL", "sqlite:///./jwt_provider_state.db")

# Log level passed to uvicorn when run as a script
LOG_LEVEL = os.environ.get("JWT_PROVIDER_LOG_LEVEL", "info").lower()

HOST = os.environ.get("JWT_PROVIDER_HOST", "127.0.0.1")
PORT = int(os.environ.get("JWT_PROVIDER_PORT", "9100"))

# Default signing algorithm for jwt_hashed_token
DEFAULT_HASHING_ALGORITHM = "HS512"

# Upper bound on GET /audit page size
AUDIT_MAX_LIMIT = 500
