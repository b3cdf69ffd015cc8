"""Root conftest — shared test configuration."""

import os

TEST_ADMIN_TOKEN = "test-admin-token"
TEST_ADMIN_ID = "00000000-0000-0000-0000-0000000000a1"

# Set before metal_api.config is imported: get_settings() is cached per process
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault(
    "API_TOKENS", f'{{"{TEST_ADMIN_TOKEN}": "{TEST_ADMIN_ID}"}}',
)
os.environ.setdefault("LOG_FORMAT", "text")
