"""
Centralized Configuration for the Face Gate service

All configuration is loaded from environment variables with sensible defaults.
Uses Pydantic Settings for validation and type coercion.

Usage:
    from face_gate.core.config import settings

    print(settings.verification.target_identity)
    print(settings.database.table_name)
"""

from typing import Optional, List
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# =============================================================================
# SETTINGS CLASSES
# =============================================================================

# Every section reads the same .env file; sections built through
# default_factory do not inherit it from Settings.
_ENV_FILE = dict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(
        env_prefix="API_",
        **_ENV_FILE,
    )

    host: str = Field(default="0.0.0.0", description="API server host")
    port: int = Field(default=8000, description="API server port")
    title: str = Field(default="Face Gate API", description="API title")
    description: str = Field(
        default="Verifies a submitted face descriptor against the enrolled references of one identity.",
        description="API description for OpenAPI docs"
    )
    version: str = Field(default="1.0.0", description="API version")
    debug: bool = Field(default=False, description="Enable debug mode")


class CORSSettings(BaseSettings):
    """CORS configuration."""

    model_config = SettingsConfigDict(**_ENV_FILE)

    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed origins"
    )
    allow_credentials: bool = Field(
        default=True,
        description="Allow credentials in CORS requests"
    )
    allow_methods: List[str] = Field(
        default=["GET", "POST"],
        description="Allowed HTTP methods"
    )
    allow_headers: List[str] = Field(
        default=["*"],
        description="Allowed HTTP headers"
    )

    @property
    def origins(self) -> List[str]:
        """Parse CORS origins into a list."""
        if not self.cors_origins or self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


class DatabaseSettings(BaseSettings):
    """Identity storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        **_ENV_FILE,
        populate_by_name=True,
    )

    # Connection settings
    use_database: bool = Field(
        default=False,
        alias="USE_DATABASE",
        description="Read identities from PostgreSQL"
    )
    database_url: Optional[str] = Field(
        default=None,
        alias="DATABASE_URL",
        description="Full database connection URL"
    )
    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    name: str = Field(default="face_gate", description="Database name")
    user: str = Field(default="postgres", description="Database user")
    password: str = Field(default="", description="Database password")

    # Table/column configuration
    table_name: str = Field(
        default="identities",
        description="Identities table name"
    )
    id_column: str = Field(default="id", description="Row ID column name")
    name_column: str = Field(default="name", description="Identity name column name")
    embedding_column: str = Field(
        default="embedding",
        description="Stored descriptor column name"
    )
    prejoined_function: str = Field(
        default="get_identities_with_embeddings",
        description="Set-returning SQL function used as the preferred retrieval path"
    )

    # Connection pool
    pool_min_conn: int = Field(default=1, ge=1, description="Min pool connections")
    pool_max_conn: int = Field(default=10, ge=1, description="Max pool connections")

    # In-memory store seed (used when use_database is false)
    references_file: Optional[str] = Field(
        default=None,
        alias="REFERENCES_FILE",
        description="JSON file of identity rows for the in-memory store"
    )

    @field_validator("references_file", "database_url", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        """Treat empty strings from the environment as unset."""
        if v in ("", None):
            return None
        return v

    @model_validator(mode="after")
    def check_pool_bounds(self) -> "DatabaseSettings":
        if self.pool_max_conn < self.pool_min_conn:
            raise ValueError("pool_max_conn must be >= pool_min_conn")
        return self


class VerificationSettings(BaseSettings):
    """Verification policy configuration."""

    model_config = SettingsConfigDict(
        env_prefix="VERIFY_",
        **_ENV_FILE,
    )

    target_identity: str = Field(
        default="Vishmish",
        min_length=1,
        description="The only identity whose references take part in verification"
    )
    min_reference_count: int = Field(
        default=2,
        ge=1,
        description="Reference count at or above which the multi-reference rule applies"
    )
    match_threshold: float = Field(
        default=0.88,
        ge=-1.0,
        le=1.0,
        description="Per-reference similarity that counts toward matchCount"
    )
    best_sim_min_multi: float = Field(
        default=0.92,
        ge=-1.0,
        le=1.0,
        description="Minimum best similarity under the multi-reference rule"
    )
    best_sim_min_single: float = Field(
        default=0.95,
        ge=-1.0,
        le=1.0,
        description="Minimum best similarity when fewer references are enrolled"
    )


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(**_ENV_FILE)

    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional log file path"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_level(cls, v):
        return str(v or "INFO").upper()


class Settings(BaseSettings):
    """
    Main settings class that combines all configuration sections.

    Usage:
        from face_gate.core.config import settings

        print(settings.api.port)
        print(settings.verification.match_threshold)
    """

    model_config = SettingsConfigDict(
        **_ENV_FILE,
    )

    api: APISettings = Field(default_factory=APISettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    verification: VerificationSettings = Field(default_factory=VerificationSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @property
    def use_database(self) -> bool:
        return self.database.use_database

    @property
    def target_identity(self) -> str:
        return self.verification.target_identity


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


# Default settings instance
settings = get_settings()


# =============================================================================
# ENVIRONMENT VARIABLE REFERENCE
# =============================================================================
"""
Environment Variables Reference:

API Settings:
    API_HOST            - API server host (default: 0.0.0.0)
    API_PORT            - API server port (default: 8000)
    API_DEBUG           - Enable debug mode (default: false)

CORS Settings:
    CORS_ORIGINS        - Comma-separated allowed origins (default: *)

Database Settings:
    USE_DATABASE        - Read identities from PostgreSQL (default: false)
    DATABASE_URL        - Full connection URL (overrides individual settings)
    DB_HOST             - Database host (default: localhost)
    DB_PORT             - Database port (default: 5432)
    DB_NAME             - Database name (default: face_gate)
    DB_USER             - Database user (default: postgres)
    DB_PASSWORD         - Database password (default: "")
    DB_TABLE_NAME       - Identities table (default: identities)
    DB_ID_COLUMN        - Row ID column (default: id)
    DB_NAME_COLUMN      - Identity name column (default: name)
    DB_EMBEDDING_COLUMN - Descriptor column (default: embedding)
    DB_PREJOINED_FUNCTION - Preferred retrieval function (default: get_identities_with_embeddings)
    REFERENCES_FILE     - JSON rows for the in-memory store when USE_DATABASE is false

Verification Settings:
    VERIFY_TARGET_IDENTITY      - Identity allowed to pass (default: Vishmish)
    VERIFY_MIN_REFERENCE_COUNT  - Multi-reference rule cutoff (default: 2)
    VERIFY_MATCH_THRESHOLD      - Per-reference match similarity (default: 0.88)
    VERIFY_BEST_SIM_MIN_MULTI   - Best similarity, multi rule (default: 0.92)
    VERIFY_BEST_SIM_MIN_SINGLE  - Best similarity, single rule (default: 0.95)

Logging Settings:
    LOG_LEVEL           - Log level (default: INFO)
    LOG_FILE            - Optional log file path
"""


__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "APISettings",
    "CORSSettings",
    "DatabaseSettings",
    "VerificationSettings",
    "LoggingSettings",
]
