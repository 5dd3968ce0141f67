"""Application configuration using pydantic-settings."""
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# HMAC algorithms accepted for session tokens (symmetric secret only)
SUPPORTED_JWT_ALGORITHMS = frozenset({"HS256", "HS384", "HS512"})
MIN_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )

    # Database
    database_url: str
    db_pool_pre_ping: bool = True

    # Session tokens - symmetric secret, loaded once per process
    jwt_secret_key: str = Field(validation_alias="JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=15,
        ge=1,
        validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Argon2id cost parameters (defaults match argon2-cffi's RFC 9106 low-memory profile)
    password_hash_time_cost: int = Field(
        default=3, ge=1, validation_alias="PASSWORD_HASH_TIME_COST",
    )
    password_hash_memory_cost: int = Field(
        default=65536, ge=8, validation_alias="PASSWORD_HASH_MEMORY_COST",
    )
    password_hash_parallelism: int = Field(
        default=4, ge=1, validation_alias="PASSWORD_HASH_PARALLELISM",
    )

    # CORS - comma-separated list of allowed origins (stored as string, parsed via property)
    cors_origins_str: str = Field(
        default="http://localhost:5173",
        validation_alias="CORS_ORIGINS",
    )

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_secret_length(cls, v: str) -> str:
        """Reject short secrets - HMAC signing is only as strong as the key."""
        if len(v) < MIN_SECRET_LENGTH:
            raise ValueError(
                f"JWT_SECRET must be at least {MIN_SECRET_LENGTH} characters long.",
            )
        return v

    @field_validator("jwt_algorithm")
    @classmethod
    def validate_algorithm(cls, v: str) -> str:
        """Only symmetric HMAC algorithms can be used with a shared secret."""
        algorithm = v.upper()
        if algorithm not in SUPPORTED_JWT_ALGORITHMS:
            raise ValueError(
                f"Unsupported JWT_ALGORITHM '{v}'. "
                f"Use one of: {', '.join(sorted(SUPPORTED_JWT_ALGORITHMS))}.",
            )
        return algorithm

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Uppercase the log level so 'debug' and 'DEBUG' are equivalent."""
        return v.upper()

    @property
    def cors_origins(self) -> list[str]:
        """Parse comma-separated CORS origins string into a list."""
        if not self.cors_origins_str:
            return []
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
