"""Shared fixtures and test configuration."""

import os

# Pin settings BEFORE any journal_analytics imports so the Settings()
# singleton is not influenced by the developer's shell or .env file.
os.environ.setdefault("LOG_LEVEL", "INFO")
os.environ.setdefault("MAX_WORKERS", "1")
