"""Shared test configuration."""

import os

# api.security refuses to import without a signing key
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.pop("MONGO_URL", None)
