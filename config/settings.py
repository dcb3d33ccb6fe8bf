"""
Settings Management

Pydantic-based settings schema with environment variable support.
Reads the process environment (optionally seeded from a .env file) and
provides type-safe access to every tunable of the server.

@.architecture
Incoming: app.py, main.py, api/dependencies.py, Environment variables, .env --- {str from os.getenv, get_settings calls}
Processing: get_settings(), reload_settings(), Settings.__init__(), field_validator() --- {3 jobs: environment_loading, schema_validation, caching}
Outgoing: app.py, main.py, api/v1/endpoints/*.py, api/middleware/*.py --- {Settings Pydantic model with typed config sections}
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, field_validator


# =============================================================================
# Settings Schemas
# =============================================================================

class SecuritySettings(BaseModel):
    """Network, CORS, rate limiting and request size configuration."""
    bind_host: str = "0.0.0.0"
    bind_port: int = Field(default=5000, ge=1, le=65535)

    # CORS: exactly one browser origin is trusted
    frontend_url: str = "http://localhost:3000"
    cors_allow_credentials: bool = True
    cors_allow_methods: List[str] = Field(
        default_factory=lambda: ["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"]
    )
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["*"])

    # Rate limiting
    rate_limit_enabled: bool = True
    rate_limit_max_requests: int = Field(default=100, ge=1)
    rate_limit_window_seconds: float = Field(default=15 * 60, gt=0)
    rate_limit_path_prefix: str = "/api"

    # Body parsing
    max_body_size_bytes: int = Field(default=10 * 1024 * 1024, ge=1)

    @property
    def allowed_origins(self) -> List[str]:
        return [self.frontend_url]


class StorageSettings(BaseModel):
    """Static file settings."""
    uploads_dir: Path = Field(default_factory=lambda: Path("uploads"))
    uploads_mount_path: str = "/uploads"


class MonitoringSettings(BaseModel):
    """
    Logging configuration.

    Unset values fall back to the logging preset of the environment.
    """
    log_level: Optional[str] = None
    log_format: Optional[str] = None  # json|text

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v

    def preset_overrides(self) -> Dict[str, str]:
        overrides = {}
        if self.log_level:
            overrides["level"] = self.log_level
        if self.log_format:
            overrides["format_type"] = self.log_format
        return overrides


class Settings(BaseModel):
    """
    Main application settings.

    Loads configuration from:
    1. Environment variables (NODE_ENV, PORT, FRONTEND_URL, ...)
    2. A .env file in the working directory, if present
    3. Defaults defined in schemas

    Priority: Environment variables > .env > Defaults
    """

    app_name: str = "SakuraDevClass API"
    app_version: str = "1.0.0"
    environment: str = "development"  # free-form; development and test are special

    security: SecuritySettings = Field(default_factory=SecuritySettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def logging_preset(self) -> str:
        return {"development": "development", "test": "testing"}.get(
            self.environment, "production"
        )

    @property
    def base_url(self) -> str:
        """Local URL used in the startup banner and by scripts/health_check.py."""
        return f"http://localhost:{self.security.bind_port}"

    @field_validator('environment')
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Any non-blank name is accepted; only development and test change behaviour."""
        v = v.strip()
        if not v:
            raise ValueError("Environment must not be empty")
        return v


# =============================================================================
# Settings Loader
# =============================================================================

def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@lru_cache()
def get_settings() -> Settings:
    """
    Load and return application settings (cached).

    Existing environment variables always win over values from .env.

    Returns:
        Settings: Complete application settings
    """
    load_dotenv(find_dotenv(usecwd=True), override=False)

    security = {
        "frontend_url": os.getenv("FRONTEND_URL", "http://localhost:3000"),
        "bind_host": os.getenv("HOST", "0.0.0.0"),
        "bind_port": int(os.getenv("PORT", "5000")),
        "rate_limit_enabled": _env_flag("RATE_LIMIT_ENABLED", True),
    }

    storage = {}
    if uploads_dir := os.getenv("UPLOADS_DIR"):
        storage["uploads_dir"] = Path(uploads_dir)

    monitoring = {}
    if log_level := os.getenv("LOG_LEVEL"):
        monitoring["log_level"] = log_level.upper()
    if log_format := os.getenv("LOG_FORMAT"):
        monitoring["log_format"] = log_format.lower()

    return Settings(
        environment=os.getenv("NODE_ENV", "").strip() or "development",
        security=security,
        storage=storage,
        monitoring=monitoring,
    )


def reload_settings() -> Settings:
    """
    Reload settings (clears cache).

    Returns:
        Settings: Reloaded application settings
    """
    get_settings.cache_clear()
    return get_settings()


# =============================================================================
# Environment-specific Helpers
# =============================================================================

def is_development() -> bool:
    """Check if running in development environment."""
    return get_settings().environment == "development"


def is_production() -> bool:
    """Check if running in production environment."""
    return get_settings().environment == "production"


def is_test() -> bool:
    """Check if running in test environment."""
    return get_settings().environment == "test"
