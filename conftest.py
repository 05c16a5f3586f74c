"""Global pytest configuration."""

import os

# Set DATABASE_URL and JWT_SECRET for tests before any imports
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")
