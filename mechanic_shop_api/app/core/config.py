"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields, so the
service starts with a local SQLite file and no further setup.
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Mechanic Shop API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE") or None

    # Path to the SQLite database file.  Relative paths are resolved
    # against the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "mechanic_shop.db")

    # Seconds a connection waits for another session's write lock before
    # the statement fails with "database is locked".
    db_timeout: float = float(os.getenv("DB_TIMEOUT", "5.0"))

    # Latest model year accepted for a car.
    max_car_year: int = int(os.getenv("MAX_CAR_YEAR", "2021"))

    # When enabled, VINs must be six non-digits followed by ten digits.
    # Otherwise any 16 letters/digits are accepted.
    strict_vin: bool = os.getenv("STRICT_VIN", "false").lower() in {"1", "true", "yes"}


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
