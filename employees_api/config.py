"""
Employees API — Application Configuration
==========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time; validated before the app starts.

Groups:
    - Backend selection (EMPLOYEES_IMPL)
    - Storage locations for the file, SQL and document backends
    - Authentication (JWT secret, seeded accounts)
    - Employee validation bounds (salary, age, departments)
    - Server and logging
"""

from datetime import date
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

# Placeholder secret shipped for local development only.
DEV_JWT_SECRET = "dev-secret-change-me"


def years_ago(years: int, today: date | None = None) -> date:
    """Return the date `years` years before `today` (Feb 29 falls back to Feb 28)."""
    today = today or date.today()
    try:
        return today.replace(year=today.year - years)
    except ValueError:
        return today.replace(year=today.year - years, day=28)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for development.
    Production deployments MUST override JWT_SECRET and the seeded
    account passwords.
    """

    # ── Backend Selection ─────────────────────────────────────────────────
    # What: Registry key of the storage backend resolved at startup
    # Valid: map, sqlite, mongo, mongoInMemory, mock
    employees_impl: str = Field(default="map")

    # ── File Storage (map backend) ────────────────────────────────────────
    data_dir: str = Field(default="data")
    data_file_name: str = Field(default="employees.json")
    file_encoding: str = Field(default="utf-8")

    # ── SQL (sqlite backend) ──────────────────────────────────────────────
    # Format: sqlite+aiosqlite:///relative/path.sqlite
    sqlite_url: str = Field(default="sqlite+aiosqlite:///employees.sqlite")
    sql_echo: bool = Field(default=False)

    # ── MongoDB (mongo / mongoInMemory backends) ──────────────────────────
    mongo_uri: str = Field(default="mongodb://localhost:27017")
    mongo_db_name: str = Field(default="employees_db")
    mongo_collection_name: str = Field(default="employees")
    mongo_connect_attempts: int = Field(default=3, ge=1, le=10)

    # ── Authentication ────────────────────────────────────────────────────
    jwt_secret: str = Field(default=DEV_JWT_SECRET)
    jwt_algorithm: str = Field(default="HS256")
    jwt_expire_minutes: int = Field(default=60, ge=1, le=24 * 60)

    admin_username: str = Field(default="admin@tel-ran.com")
    admin_password: str = Field(default="Admin12345")
    user_username: str = Field(default="user@tel-ran.com")
    user_password: str = Field(default="User12345")

    # ── Employee Validation Bounds ────────────────────────────────────────
    min_salary: int = Field(default=5000, gt=0)
    max_salary: int = Field(default=50000, gt=0)
    min_age: int = Field(default=20, gt=0)
    max_age: int = Field(default=72, gt=0)
    # Format: Comma-separated department names (parsed by property below)
    departments: str = Field(default="QA,Development,Audit,Accounting,Management")

    @property
    def departments_list(self) -> List[str]:
        """Splits comma-separated departments into a list, dropping blanks."""
        return [dep.strip() for dep in self.departments.split(",") if dep.strip()]

    @property
    def min_birth_date(self) -> date:
        """Earliest allowed birth date (employee at most `max_age` years old)."""
        return years_ago(self.max_age)

    @property
    def max_birth_date(self) -> date:
        """Latest allowed birth date (employee at least `min_age` years old)."""
        return years_ago(self.min_age)

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1024, le=65535)
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",")]

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    # Minimum response status written by the access logger (0 = every request)
    access_log_threshold: int = Field(default=0, ge=0, le=599)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that critical settings are configured consistently.
        When:  Called during app startup (lifespan).
        How:   Collects every problem and raises one ValueError listing them.
        """
        errors = []
        if not self.jwt_secret or self.jwt_secret == DEV_JWT_SECRET:
            errors.append("JWT_SECRET is not set; tokens are signed with the development placeholder.")
        if self.min_salary > self.max_salary:
            errors.append(f"MIN_SALARY ({self.min_salary}) is greater than MAX_SALARY ({self.max_salary}).")
        if self.min_age > self.max_age:
            errors.append(f"MIN_AGE ({self.min_age}) is greater than MAX_AGE ({self.max_age}).")
        if not self.departments_list:
            errors.append("DEPARTMENTS must list at least one department.")
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance — imported throughout the application
settings = Settings()
