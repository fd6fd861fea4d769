"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach real providers or a real database
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("ENCRYPTION_KEY", "bXktZGV2LWVuY3J5cHRpb24ta2V5LTMyLWJ5dGVzISE=")
os.environ.setdefault("PUSH_SERVER_KEY", "")
os.environ.setdefault("PAYMENT_KEY_ID", "")
os.environ.setdefault("SMTP_HOST", "")
