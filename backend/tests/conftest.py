"""Root conftest: shared test configuration."""

import os

# Tests never touch a real database unless a fixture builds one explicitly
os.environ.setdefault("TEMPTABS_STORE_BACKEND", "memory")
os.environ.setdefault(
    "TEMPTABS_DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("TEMPTABS_CLEANUP_ON_START", "false")
