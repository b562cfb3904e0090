"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields.  Two
store locations are kept apart: ``database_url`` for normal operation
and ``test_database_url`` for the integration test suite.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Blog API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    # Mount point of the posts router.  Empty means ``/posts`` is served
    # at the root of the application.
    api_prefix: str = os.getenv("API_PREFIX", "")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Path of the SQLite file backing the post store.  Relative paths
    # are resolved against the project root by ``core.db``; the special
    # value ``:memory:`` keeps everything in memory.
    database_url: str = os.getenv("DATABASE_URL", "blog.db")
    test_database_url: str = os.getenv("TEST_DATABASE_URL", "blog_test.db")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
