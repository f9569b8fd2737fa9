"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach a real database through get_settings()
os.environ.setdefault("HOT_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("COLD_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "text")
